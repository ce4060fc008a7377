"""Site report renderers."""

from vhost_monitor.actions.reporters.base import BaseReporter
from vhost_monitor.actions.reporters.json_reporter import JsonReporter
from vhost_monitor.actions.reporters.rich_reporter import RichReporter

__all__ = ["BaseReporter", "JsonReporter", "RichReporter"]
