"""
Client Certificate Loading

Client certificates are PEM files holding the certificate chain and the
private key together.
"""

import logging
import ssl
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from urlstat.common.errors import ClientCertificateError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClientCertificate:
    """A validated client certificate file"""

    path: str

    def load_into(self, context: ssl.SSLContext) -> None:
        """Attach the certificate and key to a TLS context."""
        context.load_cert_chain(certfile=self.path)


def read_client_cert(path: Optional[str]) -> Optional[ClientCertificate]:
    """
    Load a client certificate from a PEM file

    Args:
        path: PEM file path; empty or None means no certificate

    Returns:
        Optional[ClientCertificate]: The certificate, or None when no path was given

    Raises:
        ClientCertificateError: If the file is unreadable or not a certificate/key pair
    """
    if not path:
        return None

    if not Path(path).is_file():
        raise ClientCertificateError(
            f"Unable to read client certificate {path}: no such file",
            details={"path": path},
        )

    cert = ClientCertificate(path=path)
    # Loading into a scratch context validates the PEM before any connection is made
    try:
        cert.load_into(ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT))
    except (OSError, ssl.SSLError) as e:
        logger.warning("Client certificate %s rejected: %s", path, e)
        raise ClientCertificateError(
            f"Unable to load client certificate {path}: {e}",
            details={"path": path},
        ) from e
    return cert
