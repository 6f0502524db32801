"""
Tracer

Drives a request through its redirect chain, one hop at a time, and writes
the report of every hop into a shared ``Response``.

Each hop:
1. cooks the wire request, builds the transport, picks the proxy; when
   connecting directly, resolves and pins the address to dial; attaches the
   timing collector
2. sends it with redirect following disabled
3. drains and closes the body
4. reports connection, status line, sorted headers, body summary, phase
   durations and total
5. returns the next location when the response is a redirect to follow
"""

import logging
from typing import Callable, Optional

import httpx

from urlstat.common.body import summarize_body
from urlstat.common.errors import RedirectError, ResponseReadError, TooManyRedirectsError
from urlstat.common.headers import sorted_header_lines
from urlstat.common.redirects import is_redirect
from urlstat.config import Settings, get_settings
from urlstat.tracer.request import Request, cook
from urlstat.tracer.response import Response
from urlstat.tracer.timing import TimingCollector
from urlstat.tracer.transport import build_transport

logger = logging.getLogger(__name__)

DEFAULT_PORTS = {"http": 80, "https": 443}


class Tracer:
    """
    Request Tracer

    Hops run strictly one after another on the calling thread. The redirect
    budget is enforced through the counter of the shared ``Response``, so a
    chain never runs more than ``max_redirects + 1`` hops.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        collector_factory: Callable[[], TimingCollector] = TimingCollector,
    ):
        self.settings = settings or get_settings()
        self._collector_factory = collector_factory

    def run(self, request: Request, response: Response) -> Response:
        """
        Trace request and every redirect it leads to

        Args:
            request: Request to trace; its target is replaced on each redirect
            response: Report shared by the whole chain

        Returns:
            Response: The same report, complete

        Raises:
            TraceError: On any fatal condition; the chain stops immediately
        """
        while True:
            location = self._visit(request, response)
            if location is None:
                return response

            response.redirects_followed += 1
            if response.redirects_followed > request.max_redirects:
                logger.warning(
                    "Redirect budget exhausted after %d redirects (limit %d)",
                    response.redirects_followed - 1,
                    request.max_redirects,
                )
                raise TooManyRedirectsError(request.max_redirects)

            logger.debug("Following redirect %d to %s", response.redirects_followed, location)
            request.target = location
            response.report("")

    def _visit(self, request: Request, response: Response) -> Optional[httpx.URL]:
        """Run one hop. Returns the location to follow next, if any."""
        wire = cook(request)
        config = build_transport(
            request.target.scheme,
            wire.headers.get("host", request.target.netloc.decode("ascii")),
            insecure_tls=request.insecure_tls,
            client_cert_path=request.client_cert_path,
            settings=self.settings,
        )
        collector = self._collector_factory()

        # Routing is decided on the host name, before it is pinned
        config.proxy = config.proxy_for(wire.url)
        if config.proxy is None:
            port = wire.url.port or DEFAULT_PORTS[wire.url.scheme]
            address = collector.resolve(wire.url.host, port)
            # Dial the resolved address; Host header and SNI keep the name
            wire.url = pinned_url(wire.url, address)
        else:
            logger.debug("Routing %s through proxy %s", request.target, config.proxy)

        wire.extensions.update(config.request_extensions())
        wire.extensions["trace"] = collector

        logger.debug("Tracing %s %s", wire.method, request.target)

        with config.build_client() as client:
            try:
                resp = client.send(wire, stream=True)
            except httpx.HTTPError as e:
                failure = collector.connect_failure()
                if failure is not None:
                    logger.warning("%s", failure.message)
                    raise failure from e
                logger.warning("Request to %s failed: %s", request.target, e)
                raise ResponseReadError(
                    f"Failed to read response: {e}",
                    details={"url": str(request.target)},
                ) from e

            try:
                resp.read()
            except httpx.HTTPError as e:
                raise ResponseReadError(
                    f"Failed to read response: {e}",
                    details={"url": str(request.target)},
                ) from e
            finally:
                resp.close()
            collector.mark_body_read()

        body_summary = summarize_body(wire.method, resp, request.only_headers)

        self._report(response, collector, resp, body_summary)

        if not (request.follow_redirects and is_redirect(resp.status_code)):
            return None

        location = resp.headers.get("location")
        if not location:
            # 30x without a Location: nothing to follow
            logger.debug("Redirect %d from %s has no Location", resp.status_code, request.target)
            return None

        try:
            return request.target.join(location)
        except httpx.InvalidURL as e:
            raise RedirectError(
                f"Unable to follow redirect: {e}",
                details={"location": location},
            ) from e

    @staticmethod
    def _report(
        response: Response,
        collector: TimingCollector,
        resp: httpx.Response,
        body_summary: str,
    ) -> None:
        if collector.connected_to:
            response.report("Connected to %s", collector.connected_to)
            response.report("")

        status = f"{resp.status_code} {resp.reason_phrase}".rstrip()
        response.report("%s %s", protocol_version(resp.http_version), status)

        for line in sorted_header_lines(resp.headers.multi_items()):
            response.report(line)

        if body_summary:
            response.report(body_summary)

        durations = collector.durations()
        response.report("")
        for line in durations.lines():
            response.report(line)
        response.report("")
        response.report(durations.total_line())


def pinned_url(url: httpx.URL, address: str) -> httpx.URL:
    """url with its host replaced by a resolved address, IPv6 in brackets."""
    return url.copy_with(host=f"[{address}]" if ":" in address else address)


def protocol_version(http_version: str) -> str:
    """
    Normalise an httpx protocol string to ``HTTP/<major>.<minor>``

    ``HTTP/1.1`` stays as is, ``HTTP/2`` becomes ``HTTP/2.0``.
    """
    number = http_version.partition("/")[2] or "1.1"
    major, _, minor = number.partition(".")
    return f"HTTP/{major}.{minor or '0'}"


def trace(request: Request, settings: Optional[Settings] = None) -> Response:
    """Trace request into a fresh report."""
    return Tracer(settings).run(request, Response())
