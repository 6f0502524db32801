"""
Tracer Module Initialization
"""

from urlstat.tracer.request import Request, cook, new_request
from urlstat.tracer.response import Response
from urlstat.tracer.timing import PhaseDurations, TimingCollector
from urlstat.tracer.tracer import Tracer, trace
from urlstat.tracer.transport import TransportConfig, build_transport

__all__ = [
    "Request",
    "Response",
    "PhaseDurations",
    "TimingCollector",
    "Tracer",
    "TransportConfig",
    "build_transport",
    "cook",
    "new_request",
    "trace",
]
