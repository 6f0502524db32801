"""
urlstat Application Entry Point

FastAPI application main entry, including router registration and application configuration.
"""

import logging
import traceback
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from urlstat import __version__
from urlstat.api import trace_router
from urlstat.common.errors import AppError
from urlstat.config import get_settings
from urlstat.logging_config import setup_logging

logger = logging.getLogger(__name__)

# Initialize logging configuration
setup_logging()

settings = get_settings()

app = FastAPI(
    title=settings.APP_NAME,
    description="HTTP(S) request tracer reporting DNS, TCP, TLS, server and transfer latency",
    version=__version__,
)

# Configure CORS
# Parse ALLOWED_ORIGINS from comma-separated string to list
allowed_origins_str = settings.ALLOWED_ORIGINS.strip()
if allowed_origins_str:
    allowed_origins = [origin.strip() for origin in allowed_origins_str.split(",") if origin.strip()]
elif settings.DEBUG:
    allowed_origins = ["http://localhost:3000", "http://127.0.0.1:3000"]
else:
    allowed_origins = []

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)


# Global Exception Handler
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    """
    Render an AppError as its JSON body

    /trace reports trace failures itself; this covers errors raised elsewhere.
    Details are only returned in DEBUG.
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(include_details=get_settings().DEBUG),
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    """Unexpected failures become a 500 in the same shape as AppError."""
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)

    error = AppError(
        "Internal server error",
        details={
            "exception": repr(exc),
            "traceback": traceback.format_exception(type(exc), exc, exc.__traceback__),
        },
    )
    return JSONResponse(
        status_code=error.status_code,
        content=error.to_dict(include_details=get_settings().DEBUG),
    )


# Health Check Endpoint
@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health Check

    Used for service liveness probe.
    """
    return {"status": "healthy"}


@app.get("/", tags=["Health"])
async def root():
    """Basic service information"""
    return {
        "name": settings.APP_NAME,
        "version": __version__,
        "description": "urlstat - HTTP(S) request latency tracer",
    }


app.include_router(trace_router)

static_dir = Path(settings.STATIC_DIR)
if static_dir.is_dir():
    app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")
    logger.info("Serving static assets from %s", static_dir)


def run() -> None:
    """Run the service with uvicorn on HOST:PORT."""
    import uvicorn

    uvicorn.run(
        "urlstat.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    run()
