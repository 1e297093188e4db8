import asyncio
import logging
from typing import Awaitable, Callable, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from csms.dashboard.view_model import REFRESH_INTERVAL_SECONDS, DashboardViewModel

logger = logging.getLogger(__name__)

REFRESH_JOB_ID = "dashboard-refresh"
COUNTDOWN_JOB_ID = "dashboard-countdown"


class RefreshTask:
    """Drives a DashboardViewModel: one fetch on start, then a refetch every
    15 minutes and a countdown tick every second until ``stop()``.

    ``on_refresh`` (optional coroutine) runs after every fetch.
    """

    def __init__(
        self,
        view_model: DashboardViewModel,
        *,
        interval_seconds: int = REFRESH_INTERVAL_SECONDS,
        on_refresh: Optional[Callable[[DashboardViewModel], Awaitable[None]]] = None,
    ):
        self.view_model = view_model
        self.interval_seconds = interval_seconds
        self.on_refresh = on_refresh
        self._scheduler: Optional[AsyncIOScheduler] = None

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    async def _refresh(self):
        logger.info("⏳ Refreshing dashboard data...")
        await self.view_model.refresh()
        if self.on_refresh is not None:
            await self.on_refresh(self.view_model)

    async def _tick(self):
        self.view_model.tick()

    async def start(self):
        if self.running:
            return
        await self._refresh()

        scheduler = AsyncIOScheduler(event_loop=asyncio.get_running_loop())
        scheduler.add_job(
            self._refresh, "interval", seconds=self.interval_seconds,
            id=REFRESH_JOB_ID, max_instances=2, coalesce=True,
        )
        scheduler.add_job(
            self._tick, "interval", seconds=1,
            id=COUNTDOWN_JOB_ID, coalesce=True,
        )
        scheduler.start()
        self._scheduler = scheduler
        logger.info("Dashboard refresh scheduled every %ss", self.interval_seconds)

    def stop(self):
        """Cancel both jobs. Safe to call more than once."""
        if self._scheduler is None:
            return
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
        self._scheduler = None
        logger.info("Dashboard refresh stopped")

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, *exc):
        self.stop()
