"""
Transport Builder

Builds the per-request connection configuration and the ``httpx.Client``
that uses it.
"""

import logging
import ssl
import urllib.request
from dataclasses import dataclass, field
from typing import Any, Optional

import certifi
import httpx

from urlstat.common.client_cert import read_client_cert
from urlstat.common.errors import TransportError, UnsupportedSchemeError
from urlstat.common.url import host_without_port
from urlstat.config import Settings, get_settings

logger = logging.getLogger(__name__)

SUPPORTED_SCHEMES = ("http", "https")
ALPN_PROTOCOLS = ["h2", "http/1.1"]


@dataclass
class TransportConfig:
    """
    Per-request Connection Configuration

    The proxy is picked from the environment (HTTP_PROXY, HTTPS_PROXY,
    ALL_PROXY, NO_PROXY) by ``proxy_for`` when trust_env is set, and handed to
    the client explicitly; the client itself never reads the environment.
    Redirects are never followed by the client.
    """

    scheme: str
    limits: httpx.Limits
    timeout: httpx.Timeout
    trust_env: bool = True
    # TLS server name (SNI), https only
    server_name: Optional[str] = None
    ssl_context: Optional[ssl.SSLContext] = field(default=None, repr=False)
    http2: bool = False
    # Proxy URL for this hop, None for a direct connection
    proxy: Optional[str] = None

    def build_client(self) -> httpx.Client:
        """
        Create the client for one hop

        Raises:
            TransportError: If HTTP/2 support cannot be prepared
        """
        try:
            return httpx.Client(
                verify=self.ssl_context if self.ssl_context is not None else True,
                http2=self.http2,
                limits=self.limits,
                timeout=self.timeout,
                proxy=self.proxy,
                trust_env=False,
                follow_redirects=False,
            )
        except ImportError as e:
            raise TransportError(f"Failed to prepare transport for HTTP/2: {e}") from e

    def proxy_for(self, url: httpx.URL) -> Optional[str]:
        """
        Environment proxy for url, None when it connects directly

        NO_PROXY is matched against the host name of url, so call this before
        the host is replaced by a resolved address.
        """
        if not self.trust_env:
            return None
        proxies = urllib.request.getproxies()
        proxy = proxies.get(url.scheme) or proxies.get("all")
        if not proxy:
            return None
        if urllib.request.proxy_bypass(url.host):
            return None
        if "://" not in proxy:
            proxy = f"http://{proxy}"
        return proxy

    def request_extensions(self) -> dict[str, Any]:
        """httpx request extensions carrying the TLS server name."""
        if self.server_name is None:
            return {}
        return {"sni_hostname": self.server_name}


def build_ssl_context(insecure_tls: bool, client_cert_path: Optional[str]) -> ssl.SSLContext:
    """
    Build the TLS context for an https hop

    Raises:
        ClientCertificateError: If the client certificate cannot be loaded
        TransportError: If ALPN is unavailable
    """
    if not ssl.HAS_ALPN:
        raise TransportError("Failed to prepare transport for HTTP/2: TLS library lacks ALPN support")

    context = ssl.create_default_context(cafile=certifi.where())
    if insecure_tls:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE

    cert = read_client_cert(client_cert_path)
    if cert is not None:
        cert.load_into(context)

    context.set_alpn_protocols(ALPN_PROTOCOLS)
    return context


def build_transport(
    scheme: str,
    host: str,
    insecure_tls: bool = False,
    client_cert_path: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> TransportConfig:
    """
    Build the connection configuration for one hop

    Args:
        scheme: Target URL scheme
        host: Host header of the wire request, possibly with a port
        insecure_tls: Skip server certificate validation
        client_cert_path: PEM file with client certificate and key
        settings: Application settings, defaults to the global configuration

    Returns:
        TransportConfig: Configuration for the hop

    Raises:
        UnsupportedSchemeError: If scheme is neither http nor https
        ClientCertificateError: If the client certificate cannot be loaded
        TransportError: If HTTP/2 negotiation cannot be prepared
    """
    settings = settings or get_settings()

    if scheme not in SUPPORTED_SCHEMES:
        raise UnsupportedSchemeError(
            f"Unsupported protocol scheme {scheme!r}",
            details={"scheme": scheme},
        )

    config = TransportConfig(
        scheme=scheme,
        limits=httpx.Limits(
            max_keepalive_connections=settings.TRACE_MAX_IDLE_CONNECTIONS,
            keepalive_expiry=settings.TRACE_IDLE_CONNECTION_TIMEOUT,
        ),
        timeout=httpx.Timeout(None, connect=settings.TRACE_TLS_HANDSHAKE_TIMEOUT),
        trust_env=settings.TRACE_TRUST_ENV,
    )

    if scheme == "https":
        config.server_name = host_without_port(host)
        config.ssl_context = build_ssl_context(insecure_tls, client_cert_path)
        config.http2 = True

    logger.debug(
        "Transport for %s: server_name=%s insecure=%s http2=%s",
        scheme,
        config.server_name,
        insecure_tls,
        config.http2,
    )
    return config
