"""
Error Definitions

Defines custom exception classes used in the application for unified error handling.

Every condition that aborts a trace is a ``TraceError``. Redirect responses
without a Location header are not errors: the trace simply ends there.
"""

from typing import Any, Optional


class AppError(Exception):
    """
    Application Base Exception

    Base class for all custom exceptions, containing error message, type, and code.
    """

    def __init__(
        self,
        message: str,
        error_type: str = "app_error",
        code: str = "internal_error",
        details: Optional[dict[str, Any]] = None,
        status_code: int = 500,
    ):
        """
        Initialize exception

        Args:
            message: Error message
            error_type: Error type
            code: Error code
            details: Extra error details
            status_code: HTTP status code
        """
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.code = code
        self.details = details or {}
        self.status_code = status_code

    def to_dict(self, include_details: bool = True) -> dict[str, Any]:
        """
        Convert to dictionary format (for API response)

        Args:
            include_details: Whether to include extra error details

        Returns:
            dict: Error information dictionary
        """
        result = {
            "error": {
                "message": self.message,
                "type": self.error_type,
                "code": self.code,
            }
        }
        if include_details and self.details:
            result["error"]["details"] = self.details
        return result


class TraceError(AppError):
    """
    Trace Error

    Base class of every fatal trace condition. Raising one aborts the whole
    redirect chain; the partially filled report is not a completed trace.
    """

    def __init__(
        self,
        message: str = "Trace failed",
        code: str = "trace_error",
        details: Optional[dict[str, Any]] = None,
        status_code: int = 502,
    ):
        super().__init__(
            message=message,
            error_type="trace_error",
            code=code,
            details=details,
            status_code=status_code,
        )


class InvalidURLError(TraceError):
    """Raised when the target URL cannot be parsed."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message=message, code="invalid_url", details=details, status_code=422)


class InvalidHeaderError(TraceError):
    """Raised when a raw header line has no ``:`` separator."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message=message, code="invalid_header", details=details, status_code=422)


class ClientCertificateError(TraceError):
    """Raised when the client certificate file is unreadable or invalid."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message=message, code="invalid_client_cert", details=details, status_code=422)


class RequestBuildError(TraceError):
    """Raised when the wire request cannot be constructed (e.g. malformed method)."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message=message, code="invalid_request", details=details, status_code=422)


class UnsupportedSchemeError(TraceError):
    """Raised when the target scheme is neither http nor https."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message=message, code="unsupported_scheme", details=details, status_code=422)


class TransportError(TraceError):
    """Raised when the HTTP/2 capable transport cannot be prepared."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message=message, code="transport_error", details=details, status_code=500)


class ConnectionFailedError(TraceError):
    """
    Connection Failed Error

    Raised when the target host cannot be resolved or connected to. The
    message always names the address that was attempted.
    """

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message=message, code="connect_failed", details=details)


class ResponseReadError(TraceError):
    """Raised when sending the request or reading the response fails."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message=message, code="response_read_failed", details=details)


class RedirectError(TraceError):
    """Raised when the Location of a redirect response cannot be resolved."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message=message, code="invalid_redirect", details=details)


class TooManyRedirectsError(TraceError):
    """Raised when a chain follows more redirects than its budget allows."""

    def __init__(self, max_redirects: int):
        super().__init__(
            message=f"Maximum number of redirects ({max_redirects}) followed",
            code="too_many_redirects",
            details={"max_redirects": max_redirects},
        )
        self.max_redirects = max_redirects
