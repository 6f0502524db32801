"""
Unit tests for logging setup
"""

import logging

from urlstat.logging_config import setup_logging


def test_debug_lowers_urlstat_level():
    setup_logging(debug=True)
    assert logging.getLogger("urlstat").level == logging.DEBUG


def test_client_loggers_quiet():
    setup_logging(debug=True)
    assert logging.getLogger("httpx").level == logging.WARNING
    assert logging.getLogger("httpcore").level == logging.WARNING
    assert logging.getLogger("uvicorn.access").level == logging.INFO


def test_default_level_from_settings():
    setup_logging()
    assert logging.getLogger("urlstat").level in (logging.DEBUG, logging.INFO)
