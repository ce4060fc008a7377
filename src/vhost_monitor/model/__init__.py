"""Model package - Core data structures for vhost-monitor."""

from vhost_monitor.model.site import (
    CertificateExpiry,
    RawSiteEntry,
    ReachabilityResult,
    Site,
    SiteOrigin,
)

__all__ = [
    "CertificateExpiry",
    "RawSiteEntry",
    "ReachabilityResult",
    "Site",
    "SiteOrigin",
]
