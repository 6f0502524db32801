import logging
import logging.config
from typing import Optional

from urlstat.config import get_settings

# Served by uvicorn; they keep their own INFO level whatever DEBUG says
SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")
# HTTP client internals; httpx alone logs every traced request at INFO
CLIENT_LOGGERS = ("httpx", "httpcore", "hpack")


def setup_logging(debug: Optional[bool] = None):
    """
    Send urlstat, uvicorn and HTTP client logs to one console handler

    Args:
        debug: Log urlstat at DEBUG, defaults to the DEBUG setting
    """
    if debug is None:
        debug = get_settings().DEBUG
    log_level = "DEBUG" if debug else "INFO"

    def console(level: str) -> dict:
        return {"handlers": ["console"], "level": level, "propagate": False}

    loggers = {"root": {"handlers": ["console"], "level": log_level}}
    loggers.update({name: console("INFO") for name in SERVER_LOGGERS})
    loggers.update({name: console("WARNING") for name in CLIENT_LOGGERS})
    loggers["urlstat"] = console(log_level)

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "standard": {
                    "format": "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "standard",
                    "stream": "ext://sys.stdout",
                },
            },
            "loggers": loggers,
        }
    )
