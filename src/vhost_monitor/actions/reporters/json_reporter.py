"""JSON Reporter Implementation."""

import json
from dataclasses import asdict

from vhost_monitor.actions.reporters.base import BaseReporter
from vhost_monitor.model.site import RawSiteEntry, Site


class JsonReporter(BaseReporter):
    """Generates machine-readable JSON output."""

    def report_sites(self, sites: list[Site]) -> int:
        """Print the sites in the submission API shape."""
        data = [s.to_dict() for s in sorted(sites, key=lambda s: s.domain)]
        self.console.print_json(json.dumps(data))
        return self.exit_code(sites)

    def report_discovery(self, entries: list[RawSiteEntry]) -> None:
        data = []
        for entry in sorted(entries, key=lambda e: e.domain):
            item = asdict(entry)
            item["origin"] = entry.origin.value
            data.append(item)
        self.console.print_json(json.dumps(data))
