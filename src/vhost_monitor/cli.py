"""
Click-based CLI for vhost-monitor.

IMPORTANT: This module only ORCHESTRATES. It never reasons or makes decisions.
- Loads configuration
- Invokes the pipeline
- Passes flags
- Formats output
"""

import asyncio
import logging
from pathlib import Path

import click
from rich.console import Console

from vhost_monitor import __version__
from vhost_monitor.actions.reporters import JsonReporter, RichReporter
from vhost_monitor.actions.reporters.base import DEFAULT_WARN_DAYS, BaseReporter
from vhost_monitor.config import ConfigManager, MonitorConfig
from vhost_monitor.connector.local import LocalConnector
from vhost_monitor.errors import VhostMonitorError
from vhost_monitor.logs import configure_logging
from vhost_monitor.model.site import Site
from vhost_monitor.pipeline import collect_sites, discover_unique_sites
from vhost_monitor.scanner.certificate import CertificateInspector
from vhost_monitor.scanner.reachability import ReachabilityProbe

console = Console()
err_console = Console(stderr=True)


@click.group()
@click.version_option(version=__version__, prog_name="vhost-monitor")
@click.option("--config", "-c", type=click.Path(), help="Path to config directory")
@click.option("--verbose", "-v", is_flag=True, help="Log debug events")
@click.option("--log-json", is_flag=True, help="Emit logs as JSON lines")
@click.pass_context
def main(ctx: click.Context, config: str | None, verbose: bool, log_json: bool) -> None:
    """vhost-monitor: nginx site discovery, TLS expiry and reachability.

    Finds every nginx virtual host on this machine (standard and Plesk
    layouts), then checks certificate expiry and HTTP reachability.
    """
    configure_logging(logging.DEBUG if verbose else logging.INFO, json_output=log_json)
    ctx.ensure_object(dict)
    ctx.obj["config_mgr"] = ConfigManager(Path(config) if config else None)


def _load_config(ctx: click.Context) -> MonitorConfig:
    try:
        return ctx.obj["config_mgr"].load()
    except VhostMonitorError as e:
        err_console.print(f"[red]Configuration error:[/] {e}")
        raise SystemExit(2)


def _reporter(as_json: bool, warn_days: int = DEFAULT_WARN_DAYS) -> BaseReporter:
    if as_json:
        return JsonReporter(console, warn_days=warn_days)
    return RichReporter(console, warn_days=warn_days)


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
@click.pass_context
def discover(ctx: click.Context, as_json: bool) -> None:
    """List discovered sites without contacting them."""
    cfg = _load_config(ctx)
    unique = discover_unique_sites(cfg, LocalConnector(use_sudo=cfg.use_sudo))
    _reporter(as_json).report_discovery(list(unique.values()))


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
@click.option("--batch-size", type=click.IntRange(min=1), help="Sites checked concurrently")
@click.option("--batch-delay", type=click.FloatRange(min=0), help="Seconds between batches")
@click.option("--warn-days", type=int, default=DEFAULT_WARN_DAYS, show_default=True,
              help="Fail when a certificate expires within this many days")
@click.pass_context
def check(
    ctx: click.Context,
    as_json: bool,
    batch_size: int | None,
    batch_delay: float | None,
    warn_days: int,
) -> None:
    """Discover sites and check certificates and reachability.

    Exits 1 when a site is unreachable or a certificate is about to expire.
    """
    cfg = _load_config(ctx)
    if batch_size is not None:
        cfg.batch_size = batch_size
    if batch_delay is not None:
        cfg.batch_delay = batch_delay

    if as_json:
        sites = collect_sites(cfg)
    else:
        with console.status("[bold blue]Checking sites...[/]"):
            sites = collect_sites(cfg)

    ctx.exit(_reporter(as_json, warn_days).report_sites(sites))


@main.command()
@click.argument("domain")
@click.option("--port", "-p", type=click.IntRange(1, 65535), help="Port (default 443 with TLS, else 80)")
@click.option("--tls/--no-tls", default=True, show_default=True, help="Use HTTPS")
@click.option("--cert-path", help="Certificate file (selects file inspection for the Plesk store)")
@click.option("--json", "as_json", is_flag=True, help="Output JSON")
@click.pass_context
def probe(
    ctx: click.Context,
    domain: str,
    port: int | None,
    tls: bool,
    cert_path: str | None,
    as_json: bool,
) -> None:
    """Check a single DOMAIN without discovery."""
    cfg = _load_config(ctx)
    site = Site(
        domain=domain,
        config_path="(command line)",
        is_enabled=True,
        port=port or (443 if tls else 80),
        is_tls=tls,
        cert_path=cert_path,
    )

    async def _run() -> Site:
        inspector = CertificateInspector(LocalConnector(use_sudo=cfg.use_sudo), cfg)
        site.apply_certificate(await inspector.inspect(site))
        site.apply_reachability(await ReachabilityProbe(cfg).probe(site.domain, site.port, site.is_tls))
        return site

    checked = asyncio.run(_run())
    ctx.exit(_reporter(as_json).report_sites([checked]))


@main.command("init-config")
@click.option("--force", is_flag=True, help="Overwrite an existing config file")
@click.pass_context
def init_config(ctx: click.Context, force: bool) -> None:
    """Write a config file with the default settings."""
    config_mgr: ConfigManager = ctx.obj["config_mgr"]
    if config_mgr.config_file.exists() and not force:
        err_console.print(f"[yellow]{config_mgr.config_file} exists; use --force to overwrite[/]")
        raise SystemExit(1)
    config_mgr.save(MonitorConfig())
    console.print(f"[green]Wrote {config_mgr.config_file}[/]")


if __name__ == "__main__":
    main()
