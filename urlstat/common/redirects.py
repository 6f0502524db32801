"""
Redirect status classification.
"""

# 300 Multiple Choices and 304 Not Modified carry no redirect to follow
REDIRECT_STATUS_CODES = frozenset({301, 302, 303, 307, 308})


def is_redirect(status_code: int) -> bool:
    return status_code in REDIRECT_STATUS_CODES
