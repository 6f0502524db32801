"""
Domain Model Module Initialization
"""

from urlstat.domain.trace import TraceResult

__all__ = [
    "TraceResult",
]
