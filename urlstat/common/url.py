"""
URL Helpers

Parses user supplied target URLs into ``httpx.URL`` objects.
"""

import httpx

from urlstat.common.errors import InvalidURLError


def parse_url(raw: str) -> httpx.URL:
    """
    Parse a raw target URL

    A missing scheme is filled in: ``http`` when the authority ends in ``:80``,
    ``https`` otherwise. Schemes other than http/https are accepted here and
    rejected when the transport for the hop is built.

    Args:
        raw: URL as typed by the user, e.g. ``example.com/path``

    Returns:
        httpx.URL: Parsed URL

    Raises:
        InvalidURLError: If the URL is empty, malformed, or has no host
    """
    value = (raw or "").strip()
    if not value:
        raise InvalidURLError("URL cannot be empty")

    if "://" not in value and not value.startswith("//"):
        value = "//" + value
    if value.startswith("//"):
        authority = value[2:].split("/", 1)[0].split("?", 1)[0].split("#", 1)[0]
        scheme = "http" if authority.endswith(":80") else "https"
        value = f"{scheme}:{value}"

    try:
        url = httpx.URL(value)
    except httpx.InvalidURL as e:
        raise InvalidURLError(
            f"Unable to parse URL {raw!r}: {e}",
            details={"url": raw},
        ) from e

    if not url.host:
        raise InvalidURLError(
            f"URL {raw!r} has no host",
            details={"url": raw},
        )
    return url


def host_without_port(host: str) -> str:
    """
    Strip a ``:port`` suffix from a Host header value

    ``example.com:8443`` -> ``example.com``, ``[::1]:443`` -> ``::1``.
    Values without a port are returned verbatim.
    """
    if host.startswith("["):
        end = host.find("]")
        if end != -1 and host[end + 1:].startswith(":"):
            return host[1:end]
        return host
    if host.count(":") == 1:
        return host.split(":", 1)[0]
    return host
