"""
API Router Module Initialization
"""

from urlstat.api.deps import get_trace_service
from urlstat.api.trace import router as trace_router

__all__ = [
    "get_trace_service",
    "trace_router",
]
