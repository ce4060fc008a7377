"""Base Reporter Interface."""

from abc import ABC, abstractmethod

from rich.console import Console

from vhost_monitor.model.site import RawSiteEntry, Site

DEFAULT_WARN_DAYS = 14


class BaseReporter(ABC):
    """Abstract base class for all site reporters."""

    def __init__(self, console: Console, warn_days: int = DEFAULT_WARN_DAYS) -> None:
        self.console = console
        self.warn_days = warn_days

    def exit_code(self, sites: list[Site]) -> int:
        """1 when any site is unreachable or its certificate expires soon."""
        for site in sites:
            if not site.is_reachable or site.expires_within(self.warn_days):
                return 1
        return 0

    @abstractmethod
    def report_sites(self, sites: list[Site]) -> int:
        """Report checked sites; returns the process exit code."""
        pass

    @abstractmethod
    def report_discovery(self, entries: list[RawSiteEntry]) -> None:
        """Report discovered (unchecked) site entries."""
        pass
