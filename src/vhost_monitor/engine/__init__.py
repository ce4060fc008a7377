"""Engine package - Deduplication and batch scheduling."""

from vhost_monitor.engine.deduplication import deduplicate_sites
from vhost_monitor.engine.scheduler import BatchScheduler

__all__ = ["BatchScheduler", "deduplicate_sites"]
