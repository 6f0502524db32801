"""
Trace Request

Logical request description and its conversion into an ``httpx.Request``.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

import httpx

from urlstat import __version__
from urlstat.common.errors import RequestBuildError
from urlstat.common.headers import header_key_value, is_token
from urlstat.common.url import parse_url

logger = logging.getLogger(__name__)

DEFAULT_METHOD = "GET"
DEFAULT_MAX_REDIRECTS = 2
USER_AGENT = f"urlstat/{__version__}"


@dataclass
class Request:
    """
    Trace Request Data Class

    Describes what to trace. Only the redirect loop changes it, by replacing
    ``target`` with the next hop's location.
    """

    # Target URL
    target: httpx.URL
    # HTTP method
    method: str = DEFAULT_METHOD
    # Raw "Key: Value" header lines, keys need not be unique
    headers: list[str] = field(default_factory=list)
    # Request body, empty means a zero-length body
    body: str = ""
    # PEM file with client certificate and key
    client_cert_path: Optional[str] = None
    follow_redirects: bool = True
    # Leave the body summary out of the report
    only_headers: bool = False
    # Skip server certificate validation
    insecure_tls: bool = False
    max_redirects: int = DEFAULT_MAX_REDIRECTS


def new_request(
    raw_url: str,
    method: str = DEFAULT_METHOD,
    headers: Optional[list[str]] = None,
    body: str = "",
    client_cert_path: Optional[str] = None,
    follow_redirects: bool = True,
    only_headers: bool = False,
    insecure_tls: bool = False,
    max_redirects: int = DEFAULT_MAX_REDIRECTS,
) -> Request:
    """
    Build a trace request from a raw URL string

    Raises:
        InvalidURLError: If the URL cannot be parsed
        ValueError: If max_redirects is negative
    """
    if max_redirects < 0:
        raise ValueError("max_redirects must be non-negative")
    return Request(
        target=parse_url(raw_url),
        method=method,
        headers=list(headers or []),
        body=body,
        client_cert_path=client_cert_path,
        follow_redirects=follow_redirects,
        only_headers=only_headers,
        insecure_tls=insecure_tls,
        max_redirects=max_redirects,
    )


def cook(request: Request) -> httpx.Request:
    """
    Turn a trace request into a wire request

    A ``Host`` header (any case) overrides the Host sent to the server instead
    of being added as an ordinary header; the last one wins. Other headers are
    added in order and repeated keys keep all of their values.

    Args:
        request: Trace request

    Returns:
        httpx.Request: Request ready to be sent

    Raises:
        InvalidHeaderError: If a header line has no ``:``
        RequestBuildError: If the method or URL is rejected
    """
    if not is_token(request.method):
        raise RequestBuildError(
            f"Unable to create request: invalid method {request.method!r}",
            details={"method": request.method},
        )

    host_override: Optional[str] = None
    headers: list[tuple[str, str]] = []
    for line in request.headers:
        key, value = header_key_value(line)
        if key.lower() == "host":
            host_override = value
            continue
        headers.append((key, value))

    if host_override is not None:
        headers.insert(0, ("Host", host_override))
    if not any(key.lower() == "user-agent" for key, _ in headers):
        headers.append(("User-Agent", USER_AGENT))

    try:
        wire = httpx.Request(
            request.method,
            request.target,
            headers=headers,
            content=request.body.encode("utf-8"),
        )
    except (httpx.InvalidURL, UnicodeEncodeError, ValueError) as e:
        raise RequestBuildError(
            f"Unable to create request: {e}",
            details={"url": str(request.target)},
        ) from e

    logger.debug("Cooked request: %s %s headers=%s", wire.method, wire.url, headers)
    return wire
