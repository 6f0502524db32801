"""
urlstat - HTTP(S) request latency tracer
"""

__version__ = "0.1.0"
