"""Exception taxonomy for vhost-monitor.

Per-file and per-site errors are raised close to where they happen and
recovered by the caller one level up (discovery skips the file, the
scheduler leaves the site fields unset). Nothing below the CLI lets them
escape a collection cycle.
"""


class VhostMonitorError(Exception):
    """Base class for all vhost-monitor errors."""


class ConfigError(VhostMonitorError):
    """Invalid value in the config file or environment."""


class DiscoveryError(VhostMonitorError):
    """A discovery layout root is absent or cannot be listed."""


class ParseError(VhostMonitorError):
    """A config file is unreadable or does not define a virtual host."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class CertificateInspectionError(VhostMonitorError):
    """Certificate expiry could not be determined."""


class ReachabilityError(VhostMonitorError):
    """A site did not answer an HTTP(S) request."""
