"""Actions package - Output of collected site reports.

Actions are read-only: they render what the pipeline collected and
never touch the monitored host.
"""

from vhost_monitor.actions.reporters import JsonReporter, RichReporter

__all__ = ["JsonReporter", "RichReporter"]
