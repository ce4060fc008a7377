"""Batch Scheduler - Runs site checks in small concurrent batches.

Sites are checked `batch_size` at a time. A batch fans out one task per
site (certificate inspection and reachability probe) and the next batch
starts only after every task finished and `batch_delay` elapsed.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Sequence
from typing import Awaitable, Callable

import structlog

from vhost_monitor.model.site import RawSiteEntry, Site
from vhost_monitor.scanner.certificate import CertificateInspector
from vhost_monitor.scanner.reachability import ReachabilityProbe

logger = structlog.get_logger(__name__)

DEFAULT_BATCH_SIZE = 3
DEFAULT_BATCH_DELAY = 2.0


def make_batches(items: Sequence[RawSiteEntry], size: int) -> list[list[RawSiteEntry]]:
    """Split items into consecutive chunks of at most `size`."""
    return [list(items[i : i + size]) for i in range(0, len(items), size)]


class BatchScheduler:
    """Checks every unique site and returns the enriched Site list."""

    def __init__(
        self,
        inspector: CertificateInspector,
        probe: ReachabilityProbe,
        batch_size: int = DEFAULT_BATCH_SIZE,
        batch_delay: float = DEFAULT_BATCH_DELAY,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.inspector = inspector
        self.probe = probe
        self.batch_size = max(1, batch_size)
        self.batch_delay = batch_delay
        self._sleep = sleep

    async def run(self, entries: Iterable[RawSiteEntry]) -> list[Site]:
        """Check all entries, one batch at a time.

        Returns:
            One Site per entry. Order within a batch is not meaningful.
        """
        batches = make_batches(list(entries), self.batch_size)
        sites: list[Site] = []

        for index, batch in enumerate(batches):
            results = await asyncio.gather(
                *(self.check_site(entry) for entry in batch),
                return_exceptions=True,
            )
            for entry, result in zip(batch, results):
                if isinstance(result, BaseException):
                    if not isinstance(result, Exception):
                        raise result
                    # A check blew up outside its own error handling
                    logger.error("site_check_crashed", domain=entry.domain, error=repr(result))
                    site = Site.from_entry(entry)
                    site.errors.append(f"check failed: {result!r}")
                    sites.append(site)
                else:
                    sites.append(result)

            logger.debug("batch_complete", batch=index + 1, of=len(batches), sites=len(batch))
            if index < len(batches) - 1 and self.batch_delay > 0:
                await self._sleep(self.batch_delay)

        return sites

    async def check_site(self, entry: RawSiteEntry) -> Site:
        """Inspect the certificate, then probe the site."""
        site = Site.from_entry(entry)

        try:
            cert = await self.inspector.inspect(site)
        except Exception as e:
            # The probe still runs when inspection blows up
            logger.warning("cert_inspection_crashed", domain=site.domain, port=site.port, error=repr(e))
            cert = None
        site.apply_certificate(cert)
        if site.is_tls and cert is None:
            site.errors.append("certificate expiry unavailable")

        reachability = await self.probe.probe(site.domain, site.port, site.is_tls)
        site.apply_reachability(reachability)
        if not reachability.is_reachable:
            site.errors.append("unreachable")

        return site
