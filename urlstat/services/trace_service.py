"""
Trace Service Module

Builds trace requests from user input and runs them with configured defaults.
"""

import logging
from typing import Optional

from urlstat.config import Settings, get_settings
from urlstat.tracer import Response, Tracer, new_request

logger = logging.getLogger(__name__)


class TraceService:
    """
    Trace Service

    One call traces one URL, with its redirects, on the calling thread.
    Client certificates are not exposed here: a path on the server's disk is
    not something a remote caller should choose.
    """

    def __init__(self, settings: Optional[Settings] = None, tracer: Optional[Tracer] = None):
        self.settings = settings or get_settings()
        self.tracer = tracer or Tracer(self.settings)

    def trace(
        self,
        url: str,
        method: str = "GET",
        headers: Optional[list[str]] = None,
        body: str = "",
        insecure_tls: bool = False,
        follow_redirects: Optional[bool] = None,
        max_redirects: Optional[int] = None,
        only_headers: bool = False,
    ) -> Response:
        """
        Trace a URL

        Args:
            url: Target URL, scheme optional
            method: HTTP method
            headers: Raw "Key: Value" header lines
            body: Request body
            insecure_tls: Skip server certificate validation
            follow_redirects: Follow redirects, defaults to TRACE_FOLLOW_REDIRECTS
            max_redirects: Redirect budget, defaults to TRACE_MAX_REDIRECTS
            only_headers: Leave the body summary out of the report

        Returns:
            Response: Complete trace report

        Raises:
            TraceError: If the trace fails
        """
        request = new_request(
            url,
            method=method,
            headers=headers,
            body=body,
            insecure_tls=insecure_tls,
            follow_redirects=(
                self.settings.TRACE_FOLLOW_REDIRECTS if follow_redirects is None else follow_redirects
            ),
            max_redirects=(
                self.settings.TRACE_MAX_REDIRECTS if max_redirects is None else max_redirects
            ),
            only_headers=only_headers,
        )

        logger.info("Tracing %s %s", request.method, request.target)
        response = self.tracer.run(request, Response())
        logger.info(
            "Trace of %s finished after %d redirects",
            url,
            response.redirects_followed,
        )
        return response
