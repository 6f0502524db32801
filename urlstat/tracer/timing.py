"""
Timing Collector Module

Captures connection lifecycle instants of a single request and turns them
into phase durations.

httpx does not report name resolution, so the collector performs the DNS
lookup itself (``resolve``) and the request dials the resolved address. The
remaining instants come from the httpcore ``trace`` request extension:

    dns_start --- dns_done --- connect_done --- got_connection --- first_byte --- body_read
        DNS lookup   TCP connection  TLS handshake  Server processing  Content transfer

Uses time.perf_counter() so durations are immune to wall clock adjustments.
"""

import ipaddress
import logging
import socket
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

from urlstat.common.errors import ConnectionFailedError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PhaseDurations:
    """Phase durations of one hop, each floored to whole milliseconds"""

    dns_lookup: int
    tcp_connection: int
    tls_handshake: int
    server_processing: int
    content_transfer: int
    total: int

    def lines(self) -> list[str]:
        """Report lines for the five phases."""
        return [
            f"DNS lookup: {self.dns_lookup}ms",
            f"TCP connection: {self.tcp_connection}ms",
            f"TLS handshake: {self.tls_handshake}ms",
            f"Server processing: {self.server_processing}ms",
            f"Content transfer: {self.content_transfer}ms",
        ]

    def total_line(self) -> str:
        return f"Total: {self.total}ms"


def format_address(host: str, port: Any) -> str:
    """``host:port``, with IPv6 hosts in brackets."""
    if ":" in host and not host.startswith("["):
        return f"[{host}]:{port}"
    return f"{host}:{port}"


def is_ip_address(host: str) -> bool:
    try:
        ipaddress.ip_address(host)
    except ValueError:
        return False
    return True


class TimingCollector:
    """
    Lifecycle Timing Collector

    Attach an instance as the ``trace`` extension of one request. Apart from
    ``resolve``, every hook only records; none alters the request.

    Example:
        collector = TimingCollector()
        ip = collector.resolve("example.com", 443)
        request.extensions["trace"] = collector
        # ... send request, read body ...
        collector.mark_body_read()
        print(collector.durations().lines())
    """

    def __init__(self, clock: Callable[[], float] = time.perf_counter):
        self._clock = clock
        self.dns_start: Optional[float] = None
        self.dns_done: Optional[float] = None
        self.connect_done: Optional[float] = None
        self.got_connection: Optional[float] = None
        self.first_byte: Optional[float] = None
        self.body_read: Optional[float] = None

        # Address of the last connect attempt
        self.connect_address: Optional[str] = None
        # Peer address of the established connection
        self.connected_to: Optional[str] = None
        # Error of a failed connect attempt
        self.connect_error: Optional[BaseException] = None

    def resolve(self, host: str, port: int) -> str:
        """
        Resolve host to the address the request will dial

        Literal IP addresses are returned as is and leave ``dns_start`` unset.

        Raises:
            ConnectionFailedError: If the lookup fails
        """
        if is_ip_address(host):
            return host

        self.dns_start = self._clock()
        try:
            infos = socket.getaddrinfo(host, port, type=socket.SOCK_STREAM)
        except (OSError, UnicodeError) as e:
            raise ConnectionFailedError(
                f"Unable to resolve host {format_address(host, port)}: {e}",
                details={"address": format_address(host, port)},
            ) from e
        self.dns_done = self._clock()

        address = infos[0][4][0]
        logger.debug("Resolved %s to %s", host, address)
        return address

    def __call__(self, event_name: str, info: dict[str, Any]) -> None:
        """httpcore trace hook"""
        now = self._clock()

        if event_name == "connection.connect_tcp.started":
            # Connecting without a lookup: DNS ends where the connect begins
            if self.dns_done is None:
                self.dns_done = now
            self.connect_address = format_address(str(info.get("host")), info.get("port"))
        elif event_name == "connection.connect_tcp.complete":
            self.connect_done = now
            self.connected_to = _peer_address(info.get("return_value")) or self.connect_address
        elif event_name == "connection.connect_tcp.failed":
            self.connect_error = info.get("exception")
        elif event_name.endswith(".send_request_headers.started"):
            if self.got_connection is None:
                self.got_connection = now
        elif event_name.endswith(".receive_response_headers.complete"):
            if self.first_byte is None:
                self.first_byte = now

    def mark_body_read(self) -> None:
        """Mark the instant the response body was fully consumed."""
        self.body_read = self._clock()

    def connect_failure(self) -> Optional[ConnectionFailedError]:
        """The fatal error for a failed connect attempt, if one happened."""
        if self.connect_error is None:
            return None
        address = self.connect_address or "unknown"
        return ConnectionFailedError(
            f"Unable to connect to host {address}: {self.connect_error}",
            details={"address": address},
        )

    def _filled_marks(self) -> list[float]:
        marks = [
            self.dns_start,
            self.dns_done,
            self.connect_done,
            self.got_connection,
            self.first_byte,
            self.body_read,
        ]
        first = next((m for m in marks if m is not None), None)
        if first is None:
            raise RuntimeError("no timing marks recorded")

        # Unobserved marks take the value of the mark before them; leading ones the first observed
        filled: list[float] = []
        previous = first
        for mark in marks:
            if mark is not None:
                previous = mark
            filled.append(previous)
        return filled

    def durations(self) -> PhaseDurations:
        """Phase durations after backfilling unobserved marks."""
        dns_start, dns_done, connect_done, got_connection, first_byte, body_read = self._filled_marks()
        return PhaseDurations(
            dns_lookup=_ms(dns_start, dns_done),
            tcp_connection=_ms(dns_done, connect_done),
            tls_handshake=_ms(connect_done, got_connection),
            server_processing=_ms(got_connection, first_byte),
            content_transfer=_ms(first_byte, body_read),
            total=_ms(dns_start, body_read),
        )


def _ms(start: float, end: float) -> int:
    return int((end - start) * 1000)


def _peer_address(stream: Any) -> Optional[str]:
    get_extra_info = getattr(stream, "get_extra_info", None)
    if not callable(get_extra_info):
        return None
    peer = get_extra_info("server_addr")
    if not peer:
        return None
    return format_address(str(peer[0]), peer[1])
