"""Connector package - Process and file access on the monitored host."""

from vhost_monitor.connector.local import CommandResult, LocalConnector

__all__ = ["CommandResult", "LocalConnector"]
