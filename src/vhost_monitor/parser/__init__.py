"""Parser package - Converts raw config text into structured models.

Parsers do NOT read files or run commands - they structure text handed
over by the discovery scanner.
"""

from vhost_monitor.parser.vhost_conf import VhostConfigParser

__all__ = ["VhostConfigParser"]
