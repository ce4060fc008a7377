"""Site model dataclasses - Discovered virtual hosts and their check results."""

from dataclasses import dataclass, field, fields
from datetime import datetime
from enum import Enum
from typing import Any


def build_url(domain: str, port: int, is_tls: bool) -> str:
    """Site URL; the port is omitted when it is the scheme's default."""
    scheme = "https" if is_tls else "http"
    if port == (443 if is_tls else 80):
        return f"{scheme}://{domain}"
    return f"{scheme}://{domain}:{port}"


class SiteOrigin(Enum):
    """Which config layout a site definition was discovered in."""

    STANDARD = "standard"  # sites-enabled / sites-available
    PLESK = "plesk"  # Plesk vhosts root or plesk.conf.d


@dataclass
class RawSiteEntry:
    """One virtual host as parsed from a single config file.

    Created per discovered file, consumed by deduplication and then
    discarded.
    """

    domain: str
    config_path: str
    is_enabled: bool
    port: int = 80
    is_tls: bool = False
    cert_path: str | None = None
    origin: SiteOrigin = SiteOrigin.STANDARD


@dataclass
class CertificateExpiry:
    """Certificate "not after" date and whole days left until it."""

    expiry: datetime
    days_remaining: int


@dataclass
class ReachabilityResult:
    """Outcome of a single GET against a site."""

    is_reachable: bool = False
    status_code: int | None = None
    response_time_ms: int | None = None


@dataclass
class Site:
    """A unique site, enriched in place by the certificate and HTTP checks."""

    domain: str
    config_path: str
    is_enabled: bool
    port: int = 80
    is_tls: bool = False
    cert_path: str | None = None
    origin: SiteOrigin = SiteOrigin.STANDARD

    is_reachable: bool = False
    http_status_code: int | None = None
    response_time_ms: int | None = None
    cert_expiry: datetime | None = None
    cert_days_remaining: int | None = None

    # Free-form notes collected while checking (not part of the wire format)
    errors: list[str] = field(default_factory=list)

    @classmethod
    def from_entry(cls, entry: RawSiteEntry) -> "Site":
        """Start a Site from a deduplicated raw entry with all checks unset."""
        names = {f.name for f in fields(RawSiteEntry)}
        return cls(**{name: getattr(entry, name) for name in names})

    def apply_certificate(self, cert: CertificateExpiry | None) -> None:
        if cert is None:
            return
        self.cert_expiry = cert.expiry
        self.cert_days_remaining = cert.days_remaining

    def apply_reachability(self, result: ReachabilityResult) -> None:
        self.is_reachable = result.is_reachable
        self.http_status_code = result.status_code
        self.response_time_ms = result.response_time_ms

    @property
    def url(self) -> str:
        return build_url(self.domain, self.port, self.is_tls)

    def expires_within(self, days: int) -> bool:
        """True when a known certificate expiry is less than `days` away."""
        return self.cert_days_remaining is not None and self.cert_days_remaining < days

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the JSON shape the submission API accepts."""
        return {
            "domain": self.domain,
            "configPath": self.config_path,
            "isEnabled": self.is_enabled,
            "port": self.port,
            "isSsl": self.is_tls,
            "sslCertPath": self.cert_path,
            "sslCertExpiry": self.cert_expiry.isoformat() if self.cert_expiry else None,
            "sslDaysRemaining": self.cert_days_remaining,
            "isReachable": self.is_reachable,
            "httpStatusCode": self.http_status_code,
            "responseTimeMs": self.response_time_ms,
        }
