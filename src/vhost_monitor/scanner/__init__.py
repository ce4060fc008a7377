"""Scanner package - Data collection on the monitored host.

Scanners read files, run commands and talk to the network.
They do NOT decide which entries survive - that's the engine's job.
"""

from vhost_monitor.scanner.certificate import CertificateInspector
from vhost_monitor.scanner.discovery import SiteDiscoveryScanner
from vhost_monitor.scanner.reachability import ReachabilityProbe

__all__ = [
    "CertificateInspector",
    "ReachabilityProbe",
    "SiteDiscoveryScanner",
]
