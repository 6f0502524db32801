"""
API Dependency Injection Module

Provides dependencies for FastAPI routes.
"""

from typing import Annotated

from fastapi import Depends

from urlstat.config import get_settings
from urlstat.services import TraceService


def get_trace_service() -> TraceService:
    """Get trace service"""
    return TraceService(get_settings())


TraceServiceDep = Annotated[TraceService, Depends(get_trace_service)]
