"""Deduplication Engine for discovered sites."""

from collections.abc import Iterable

from vhost_monitor.model.site import RawSiteEntry


def deduplicate_sites(entries: Iterable[RawSiteEntry]) -> dict[str, RawSiteEntry]:
    """Collapse entries to one per domain.

    The first entry seen for a domain is kept unless a later one serves
    TLS and the kept one does not; the TLS definition always wins
    regardless of discovery order. `is_enabled` plays no part, so an
    available-only TLS vhost replaces an enabled plain one.

    Applying it to its own output returns the same mapping.
    """
    unique: dict[str, RawSiteEntry] = {}
    for entry in entries:
        existing = unique.get(entry.domain)
        if existing is None or (entry.is_tls and not existing.is_tls):
            unique[entry.domain] = entry
    return unique
