"""
Configuration Management Module

Configures application parameters via environment variables or .env file.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application Configuration Class

    All configuration items can be overridden by environment variables, with names matching fields (uppercase).
    """

    # Application Config
    APP_NAME: str = "urlstat"
    DEBUG: bool = False

    # Server Config
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # CORS Config
    # Comma-separated list of allowed origins for CORS
    # Example: "http://localhost:3000,https://example.com"
    ALLOWED_ORIGINS: str = ""

    # Static assets served under /static when the directory exists
    STATIC_DIR: str = "static"

    # Tracer Config
    # Redirects followed before the trace fails
    TRACE_MAX_REDIRECTS: int = 2
    TRACE_FOLLOW_REDIRECTS: bool = True
    # Idle connection pool bounds
    TRACE_MAX_IDLE_CONNECTIONS: int = 100
    # Idle connection expiry (seconds)
    TRACE_IDLE_CONNECTION_TIMEOUT: float = 90.0
    # Connect + TLS handshake timeout (seconds)
    TRACE_TLS_HANDSHAKE_TIMEOUT: float = 10.0
    # Honour HTTP_PROXY / HTTPS_PROXY / NO_PROXY
    TRACE_TRUST_ENV: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get application configuration (Singleton)

    Returns:
        Settings: Application configuration instance
    """
    return Settings()
