"""vhost-monitor: nginx site discovery with TLS and reachability checks."""

__version__ = "0.3.0"
