"""
Trace Service Unit Tests
"""

from urlstat.config import Settings
from urlstat.services import TraceService


class _RecordingTracer:
    def __init__(self):
        self.requests = []

    def run(self, request, response):
        self.requests.append(request)
        response.report("HTTP/1.1 200 OK")
        return response


class TestTraceService:
    """Trace Service Tests"""

    def setup_method(self):
        self.tracer = _RecordingTracer()

    def test_defaults_from_settings(self):
        settings = Settings(TRACE_MAX_REDIRECTS=5, TRACE_FOLLOW_REDIRECTS=False)
        service = TraceService(settings, tracer=self.tracer)

        response = service.trace("example.com")

        request = self.tracer.requests[0]
        assert request.max_redirects == 5
        assert request.follow_redirects is False
        assert request.target.scheme == "https"
        assert request.target.host == "example.com"
        assert str(response) == "HTTP/1.1 200 OK"

    def test_explicit_options_win(self):
        settings = Settings(TRACE_MAX_REDIRECTS=5, TRACE_FOLLOW_REDIRECTS=False)
        service = TraceService(settings, tracer=self.tracer)

        service.trace(
            "http://example.com/",
            method="PUT",
            headers=["X-A: 1"],
            body="x",
            insecure_tls=True,
            follow_redirects=True,
            max_redirects=0,
            only_headers=True,
        )

        request = self.tracer.requests[0]
        assert request.method == "PUT"
        assert request.headers == ["X-A: 1"]
        assert request.body == "x"
        assert request.insecure_tls is True
        assert request.follow_redirects is True
        assert request.max_redirects == 0
        assert request.only_headers is True
        assert request.client_cert_path is None

    def test_fresh_report_per_trace(self):
        service = TraceService(Settings(), tracer=self.tracer)
        first = service.trace("example.com")
        second = service.trace("example.com")
        assert first is not second
        assert first.log == ["HTTP/1.1 200 OK"]
