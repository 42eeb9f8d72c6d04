"""
Scheduler module using APScheduler.
Refreshes the in-memory headline snapshot at a configurable interval.
Embedded in the FastAPI app; can also be driven once from the CLI.
"""

from __future__ import annotations

import asyncio
import logging
from collections import Counter
from datetime import datetime, timezone
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from newsmap_geo.config import get_settings
from newsmap_geo.models import ResolvedItem
from newsmap_geo.pipeline import collect_headlines
from newsmap_geo.resolver import LocationResolver

logger = logging.getLogger(__name__)


class HeadlineStore:
    """
    Latest combined headline batch.
    Each refresh swaps in a new tuple, so readers never see a partial batch.
    """

    def __init__(self, resolver: LocationResolver):
        self.resolver = resolver
        self._items: tuple[ResolvedItem, ...] = ()
        self._last_refresh: Optional[datetime] = None
        self._lock = asyncio.Lock()

    @property
    def items(self) -> tuple[ResolvedItem, ...]:
        return self._items

    @property
    def last_refresh(self) -> Optional[datetime]:
        return self._last_refresh

    def source_counts(self) -> dict[str, int]:
        return dict(Counter(item.source_name or "unknown" for item in self._items))

    def replace(self, items: list[ResolvedItem]) -> None:
        self._items = tuple(items)
        self._last_refresh = datetime.now(timezone.utc)

    async def refresh(self, **clients) -> int:
        async with self._lock:
            items = await collect_headlines(self.resolver, **clients)
            self.replace(items)
        logger.info("Headline snapshot refreshed: %d items", len(items))
        return len(items)


_scheduler: AsyncIOScheduler | None = None


async def refresh_job(store: HeadlineStore):
    """Refresh wrapper for the startup task and the interval job; failures are logged, never raised."""
    try:
        await store.refresh()
    except Exception as e:
        logger.error("Headline refresh failed: %s", e, exc_info=True)


def create_scheduler(store: HeadlineStore) -> AsyncIOScheduler:
    """Create and configure the APScheduler instance."""
    global _scheduler
    settings = get_settings().scheduler

    _scheduler = AsyncIOScheduler()
    _scheduler.add_job(
        refresh_job,
        trigger=IntervalTrigger(minutes=settings.refresh_interval_minutes),
        args=[store],
        id="newsmap_geo_refresh",
        name="Headline refresh",
        replace_existing=True,
        max_instances=1,  # prevent overlapping runs
    )

    logger.info("Scheduler configured: headlines refresh every %d minutes",
                settings.refresh_interval_minutes)
    return _scheduler


def start_scheduler(store: HeadlineStore) -> None:
    """Start the scheduler (non-blocking)."""
    settings = get_settings().scheduler
    if not settings.enabled:
        logger.info("Scheduler disabled via config")
        return

    scheduler = create_scheduler(store)
    scheduler.start()
    logger.info("Scheduler started")


def stop_scheduler() -> None:
    """Stop the scheduler gracefully."""
    global _scheduler
    if _scheduler is not None:
        _scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")
        _scheduler = None
