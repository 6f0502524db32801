"""
Service Layer Module Initialization
"""

from urlstat.services.trace_service import TraceService

__all__ = [
    "TraceService",
]
