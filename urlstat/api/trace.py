"""
Trace API

Runs a trace for a URL and returns the rendered report.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Query

from urlstat.api.deps import TraceServiceDep
from urlstat.common.errors import TraceError
from urlstat.domain.trace import TraceResult

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Trace"])


@router.get("/trace", response_model=TraceResult, response_model_exclude_none=True)
def trace_url(
    service: TraceServiceDep,
    url: str = Query(..., description="Target URL"),
    method: str = Query("GET", description="HTTP method"),
    header: list[str] = Query([], description="Request header as 'Key: Value', repeatable"),
    data: str = Query("", description="Request body"),
    insecure: bool = Query(False, description="Skip TLS certificate validation"),
    follow_redirects: Optional[bool] = Query(None, description="Follow redirects"),
    max_redirects: Optional[int] = Query(None, ge=0, le=20, description="Redirect budget"),
    only_headers: bool = Query(False, description="Omit the body summary"),
):
    """
    Trace a URL

    Declared sync so the blocking trace runs in the worker threadpool. A
    failed trace is still a 200 response, with ``status`` set to ``err``.
    """
    try:
        response = service.trace(
            url,
            method=method,
            headers=header,
            body=data,
            insecure_tls=insecure,
            follow_redirects=follow_redirects,
            max_redirects=max_redirects,
            only_headers=only_headers,
        )
    except TraceError as e:
        logger.info("Trace of %s aborted: %s", url, e.message)
        return TraceResult(status="err", message=e.message, code=e.code)

    return TraceResult(status="ok", trace=str(response))
