"""Certificate Inspector - Reads certificate expiry for TLS sites.

Two strategies, chosen by where the certificate lives:
- File: certificates in the Plesk-managed store are read from disk with
  `openssl x509 -enddate`
- Handshake: everything else is read from the live server, connecting
  with the domain as SNI and without verifying the chain
"""

from __future__ import annotations

import asyncio
import re
import socket
import ssl
from datetime import datetime, timezone
from typing import Callable

import structlog
from cryptography import x509

from vhost_monitor.config import MonitorConfig
from vhost_monitor.connector.local import LocalConnector
from vhost_monitor.errors import CertificateInspectionError
from vhost_monitor.model.site import CertificateExpiry, Site

logger = structlog.get_logger(__name__)

SECONDS_PER_DAY = 86400

NOT_AFTER_RE = re.compile(r"notAfter=(.+)")


def parse_openssl_date(value: str) -> datetime | None:
    """Parse an OpenSSL date such as "May 10 12:34:56 2026 GMT" as UTC."""
    try:
        parsed = datetime.strptime(value.strip(), "%b %d %H:%M:%S %Y %Z")
    except ValueError:
        return None
    return parsed.replace(tzinfo=timezone.utc)


def days_until(expiry: datetime, now: datetime) -> int:
    """Whole days from now to expiry, floored; negative once expired."""
    return int((expiry - now).total_seconds() // SECONDS_PER_DAY)


class CertificateInspector:
    """Determine certificate expiry for a site."""

    def __init__(
        self,
        local: LocalConnector,
        config: MonitorConfig | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.local = local
        self.config = config or MonitorConfig()
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    async def inspect(self, site: Site) -> CertificateExpiry | None:
        """Return the certificate expiry, or None when it cannot be read.

        Never raises for inspection problems; they are logged with the
        domain and reported as an absent expiry.
        """
        if not site.is_tls:
            return None

        try:
            if self.uses_file_strategy(site.cert_path):
                expiry = await asyncio.to_thread(self.read_file_expiry, site.cert_path)
            else:
                expiry = await self.read_handshake_expiry(site.domain, site.port)
        except CertificateInspectionError as e:
            logger.warning(
                "cert_inspection_failed",
                domain=site.domain,
                port=site.port,
                error=str(e),
            )
            return None

        return CertificateExpiry(expiry=expiry, days_remaining=days_until(expiry, self.clock()))

    def uses_file_strategy(self, cert_path: str | None) -> bool:
        return bool(cert_path) and cert_path.startswith(self.config.plesk_cert_store)

    def read_file_expiry(self, cert_path: str) -> datetime:
        """Read "not after" from a certificate file through openssl."""
        res = self.local.run(
            ["openssl", "x509", "-noout", "-enddate", "-in", cert_path],
            use_sudo=True,
            timeout=self.config.privileged_read_timeout,
        )
        if not res.success:
            raise CertificateInspectionError(
                f"openssl failed for {cert_path}: {res.stderr.strip() or res.exit_code}"
            )

        match = NOT_AFTER_RE.search(res.stdout)
        if not match:
            raise CertificateInspectionError(f"no notAfter in openssl output for {cert_path}")

        expiry = parse_openssl_date(match.group(1))
        if expiry is None:
            raise CertificateInspectionError(f"unparseable notAfter {match.group(1)!r}")
        return expiry

    async def read_handshake_expiry(self, domain: str, port: int) -> datetime:
        """Read "not after" from the leaf certificate the server presents."""
        der = await self.fetch_peer_certificate(domain, port)
        try:
            cert = x509.load_der_x509_certificate(der)
        except ValueError as e:
            raise CertificateInspectionError(f"invalid peer certificate from {domain}:{port}: {e}") from e
        return cert.not_valid_after_utc

    async def fetch_peer_certificate(self, domain: str, port: int) -> bytes:
        """TLS handshake over IPv4 with SNI; return the peer cert in DER."""
        # Reading the certificate, not trusting it
        ctx = ssl.create_default_context()
        ctx.check_hostname = False
        ctx.verify_mode = ssl.CERT_NONE

        writer = None
        try:
            _, writer = await asyncio.wait_for(
                asyncio.open_connection(
                    host=domain,
                    port=port,
                    ssl=ctx,
                    server_hostname=domain,
                    family=socket.AF_INET,
                ),
                timeout=self.config.handshake_timeout,
            )
            ssl_object = writer.get_extra_info("ssl_object")
            der = ssl_object.getpeercert(binary_form=True) if ssl_object else None
        except asyncio.TimeoutError as e:
            raise CertificateInspectionError(
                f"handshake with {domain}:{port} timed out after {self.config.handshake_timeout}s"
            ) from e
        except (OSError, ssl.SSLError, ValueError) as e:
            # ValueError covers hostnames the idna codec rejects
            raise CertificateInspectionError(f"handshake with {domain}:{port} failed: {e}") from e
        finally:
            if writer is not None:
                writer.close()
                try:
                    await writer.wait_closed()
                except (OSError, ssl.SSLError):
                    pass

        if not der:
            raise CertificateInspectionError(f"{domain}:{port} presented no certificate")
        return der
