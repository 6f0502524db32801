"""
Test Configuration Module
"""

import socket
import ssl
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Optional

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID

from urlstat.config import Settings

PROXY_ENV = ("HTTP_PROXY", "HTTPS_PROXY", "ALL_PROXY", "NO_PROXY")
TLS_SERVER_NAME = "secure.test"


@dataclass
class Route:
    """Canned response of the local test server"""

    status: int = 200
    headers: list[tuple[str, str]] = field(default_factory=list)
    body: bytes = b""


@dataclass
class ReceivedRequest:
    method: str
    path: str
    headers: dict[str, list[str]]
    body: bytes


class _Handler(BaseHTTPRequestHandler):
    protocol_version = "HTTP/1.1"

    def _serve(self):
        length = int(self.headers.get("Content-Length") or 0)
        body = self.rfile.read(length) if length else b""

        received: dict[str, list[str]] = {}
        for key in self.headers.keys():
            received.setdefault(key.lower(), self.headers.get_all(key))
        self.server.received.append(ReceivedRequest(self.command, self.path, received, body))

        route = self.server.routes.get(self.path, Route(status=404, body=b"not found"))
        self.send_response(route.status)
        for key, value in route.headers:
            self.send_header(key, value)
        self.send_header("Content-Length", str(len(route.body)))
        self.end_headers()
        if self.command != "HEAD":
            self.wfile.write(route.body)

    do_GET = _serve
    do_POST = _serve
    do_PUT = _serve
    do_HEAD = _serve

    def log_message(self, format, *args):
        pass


class LocalServer:
    """
    Threaded HTTP/1.1 server on 127.0.0.1 serving canned routes

    With a TLS context it speaks https and records the SNI server name of
    every handshake.
    """

    def __init__(self, tls_context: Optional[ssl.SSLContext] = None):
        self._server = ThreadingHTTPServer(("127.0.0.1", 0), _Handler)
        self._server.routes = {}
        self._server.received = []
        self.server_names: list[Optional[str]] = []
        self.scheme = "http"
        if tls_context is not None:
            tls_context.sni_callback = self._record_server_name
            self._server.socket = tls_context.wrap_socket(self._server.socket, server_side=True)
            self.scheme = "https"
        self._thread = threading.Thread(target=self._server.serve_forever, daemon=True)

    @property
    def port(self) -> int:
        return self._server.server_address[1]

    @property
    def received(self) -> list[ReceivedRequest]:
        return self._server.received

    def route(self, path: str, status: int = 200, headers=None, body: bytes = b"") -> None:
        self._server.routes[path] = Route(status=status, headers=list(headers or []), body=body)

    def url(self, path: str = "/") -> str:
        return f"{self.scheme}://127.0.0.1:{self.port}{path}"

    def _record_server_name(self, sock, server_name, context):
        self.server_names.append(server_name)

    def start(self) -> None:
        self._thread.start()

    def stop(self) -> None:
        self._server.shutdown()
        self._server.server_close()


@pytest.fixture
def local_server():
    """Start a local HTTP server for the duration of a test"""
    server = LocalServer()
    server.start()
    yield server
    server.stop()


@pytest.fixture
def settings():
    """Settings isolated from environment proxies"""
    return Settings(TRACE_TRUST_ENV=False)


@pytest.fixture
def closed_port():
    """A local port with nothing listening on it"""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return port


@pytest.fixture(scope="session")
def self_signed_pem(tmp_path_factory):
    """PEM file holding a self-signed certificate and its key"""
    key = ec.generate_private_key(ec.SECP256R1())
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, TLS_SERVER_NAME)])
    now = datetime.now(timezone.utc)
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - timedelta(days=1))
        .not_valid_after(now + timedelta(days=1))
        .add_extension(x509.SubjectAlternativeName([x509.DNSName(TLS_SERVER_NAME)]), critical=False)
        .sign(key, hashes.SHA256())
    )

    path = tmp_path_factory.mktemp("tls") / "server.pem"
    path.write_bytes(
        cert.public_bytes(serialization.Encoding.PEM)
        + key.private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        )
    )
    return path


@pytest.fixture
def tls_server(self_signed_pem):
    """Start a local https server with a self-signed certificate"""
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
    context.load_cert_chain(str(self_signed_pem))
    context.set_alpn_protocols(["http/1.1"])
    server = LocalServer(tls_context=context)
    server.start()
    yield server
    server.stop()


@pytest.fixture
def proxy_env(monkeypatch):
    """Environment with every proxy variable cleared"""
    for name in PROXY_ENV:
        monkeypatch.delenv(name, raising=False)
        monkeypatch.delenv(name.lower(), raising=False)
    return monkeypatch
