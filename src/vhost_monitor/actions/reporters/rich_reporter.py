"""Rich Reporter Implementation."""

from rich.panel import Panel
from rich.table import Table

from vhost_monitor.actions.reporters.base import BaseReporter
from vhost_monitor.model.site import RawSiteEntry, Site


class RichReporter(BaseReporter):
    """Generates terminal tables using Rich."""

    def report_sites(self, sites: list[Site]) -> int:
        """Report checked sites as a table with a summary line."""
        unreachable = sum(1 for s in sites if not s.is_reachable)
        expiring = sum(1 for s in sites if s.expires_within(self.warn_days))
        unknown_cert = sum(1 for s in sites if s.is_tls and s.cert_days_remaining is None)

        self.console.print()
        self.console.print(Panel.fit(f"Sites: {len(sites)}", style="bold cyan"))
        self.console.print(
            f"   Summary: {unreachable} unreachable, {expiring} expiring within "
            f"{self.warn_days}d, {unknown_cert} certificate unknown"
        )

        if not sites:
            self.console.print("   [dim]No nginx sites found.[/]")
            return 0

        table = Table(show_header=True, header_style="bold white")
        table.add_column("Domain", no_wrap=True)
        table.add_column("URL", no_wrap=True)
        table.add_column("Enabled", justify="center")
        table.add_column("HTTP", justify="right")
        table.add_column("Time", justify="right")
        table.add_column("Cert", justify="right")
        table.add_column("Config")
        table.add_column("Notes")

        for site in sorted(sites, key=lambda s: s.domain):
            table.add_row(
                site.domain,
                site.url,
                "[green]yes[/]" if site.is_enabled else "[dim]no[/]",
                self._status_cell(site),
                f"{site.response_time_ms} ms" if site.response_time_ms is not None else "[dim]—[/]",
                self._cert_cell(site),
                f"[dim]{site.config_path}[/]",
                "; ".join(site.errors),
            )

        self.console.print(table)
        return self.exit_code(sites)

    def report_discovery(self, entries: list[RawSiteEntry]) -> None:
        """Report discovered vhost entries without checking them."""
        table = Table(show_header=True, header_style="bold white")
        table.add_column("Domain")
        table.add_column("Port", justify="right")
        table.add_column("TLS", justify="center")
        table.add_column("Enabled", justify="center")
        table.add_column("Origin")
        table.add_column("Certificate")
        table.add_column("Config")

        for entry in sorted(entries, key=lambda e: e.domain):
            table.add_row(
                entry.domain,
                str(entry.port),
                "[green]✓[/]" if entry.is_tls else "[dim]✗[/]",
                "[green]yes[/]" if entry.is_enabled else "[dim]no[/]",
                entry.origin.value,
                entry.cert_path or "[dim]—[/]",
                f"[dim]{entry.config_path}[/]",
            )

        self.console.print(table)
        self.console.print(f"   {len(entries)} unique site(s)")

    def _status_cell(self, site: Site) -> str:
        if not site.is_reachable:
            return "[red]down[/]"
        code = site.http_status_code or 0
        color = "green" if code < 400 else "yellow" if code < 500 else "red"
        return f"[{color}]{code}[/]"

    def _cert_cell(self, site: Site) -> str:
        if not site.is_tls:
            return "[dim]n/a[/]"
        days = site.cert_days_remaining
        if days is None:
            return "[yellow]?[/]"
        if days < 0:
            return f"[red]expired {-days}d[/]"
        color = "yellow" if days < self.warn_days else "green"
        return f"[{color}]{days}d[/]"
