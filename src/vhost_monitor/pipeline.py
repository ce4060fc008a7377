"""Shared collection pipeline.

Discovery -> parse -> dedup -> batched checks. Used by the CLI and by
anything that wants one cycle's site report.

Public API:
    discover_unique_sites(config, local) -> dict[str, RawSiteEntry]
    collect_sites(config, local) -> list[Site]
    run_collection(config, local) -> list[Site]   (async)
"""

from __future__ import annotations

import asyncio

import structlog

from vhost_monitor.config import MonitorConfig
from vhost_monitor.connector.local import LocalConnector
from vhost_monitor.engine.deduplication import deduplicate_sites
from vhost_monitor.engine.scheduler import BatchScheduler
from vhost_monitor.model.site import RawSiteEntry, Site
from vhost_monitor.scanner.certificate import CertificateInspector
from vhost_monitor.scanner.discovery import SiteDiscoveryScanner
from vhost_monitor.scanner.reachability import ReachabilityProbe

logger = structlog.get_logger(__name__)


def _connector(config: MonitorConfig, local: LocalConnector | None) -> LocalConnector:
    return local or LocalConnector(use_sudo=config.use_sudo)


def discover_unique_sites(
    config: MonitorConfig,
    local: LocalConnector | None = None,
) -> dict[str, RawSiteEntry]:
    """Discover vhost files and collapse them to one entry per domain.

    A failure of discovery as a whole is logged and yields no sites for
    this cycle.
    """
    scanner = SiteDiscoveryScanner(_connector(config, local), config)
    try:
        entries = scanner.discover()
    except Exception as e:
        logger.error("discovery_failed", error=repr(e))
        return {}

    unique = deduplicate_sites(entries)
    logger.info("sites_discovered", config_files=len(entries), unique_sites=len(unique))
    return unique


async def run_collection(
    config: MonitorConfig,
    local: LocalConnector | None = None,
    *,
    inspector: CertificateInspector | None = None,
    probe: ReachabilityProbe | None = None,
) -> list[Site]:
    """Run one full collection cycle inside a running event loop."""
    local = _connector(config, local)
    unique = discover_unique_sites(config, local)
    if not unique:
        return []

    scheduler = BatchScheduler(
        inspector=inspector or CertificateInspector(local, config),
        probe=probe or ReachabilityProbe(config),
        batch_size=config.batch_size,
        batch_delay=config.batch_delay,
    )
    sites = await scheduler.run(unique.values())
    logger.info(
        "sites_checked",
        total=len(sites),
        unreachable=sum(1 for s in sites if not s.is_reachable),
    )
    return sites


def collect_sites(
    config: MonitorConfig,
    local: LocalConnector | None = None,
) -> list[Site]:
    """Run one full collection cycle and return the site report."""
    return asyncio.run(run_collection(config, local))
