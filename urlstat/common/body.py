"""
Response body summarization.
"""

import httpx

from urlstat.common.redirects import is_redirect


def summarize_body(method: str, response: httpx.Response, only_headers: bool = False) -> str:
    """
    Describe a fully read response body in one line

    Args:
        method: Request method of the hop
        response: Response whose body has already been read
        only_headers: Suppress the summary entirely

    Returns:
        str: ``Body: <N> bytes (<content-type>)``, or an empty string for HEAD
        requests, redirects, empty bodies, and when only_headers is set
    """
    if only_headers or method.upper() == "HEAD" or is_redirect(response.status_code):
        return ""

    size = len(response.content)
    if size == 0:
        return ""

    content_type = response.headers.get("content-type", "").strip()
    if content_type:
        return f"Body: {size} bytes ({content_type})"
    return f"Body: {size} bytes"
