"""
A running dashboard: configuration, backend client, poller and store wired
together.
"""

import asyncio
import logging
from typing import Callable, Optional

from ..models.config import AppConfig
from ..models.views import DashboardViews
from ..polling import Poller, PollToken, StopsClient
from ..polling.poller import FetchCallable
from .assembler import ViewAssembler
from .store import DashboardStore, Listener

logger = logging.getLogger(__name__)


class DashboardSession:
    """
    Owns the store for its whole lifetime and feeds it from the poller.

    Poll results and failures reach the store only through the poller
    callbacks; filter changes only through the methods below.

    Args:
        config: Application configuration
        client: Backend client; created from config.backend if omitted
        fetch: Replacement fetch coroutine function, used instead of a client
    """

    def __init__(self, config: AppConfig, client: Optional[StopsClient] = None,
                 fetch: Optional[FetchCallable] = None):
        self.config = config
        dashboard = config.dashboard

        if fetch is None:
            self.client: Optional[StopsClient] = client or StopsClient(config.backend)
            fetch = self.client.fetch_stops
        else:
            self.client = client

        self.assembler = ViewAssembler(dashboard)
        self.store = DashboardStore(self.assembler, dashboard.labels)
        self.poller = Poller(
            fetch,
            interval_seconds=dashboard.poll_interval_seconds,
            unknown_reason=dashboard.labels.unknown_reason,
            name=f"poller[{dashboard.monitored_machine}]",
        )

    @property
    def views(self) -> DashboardViews:
        return self.store.views

    @property
    def is_running(self) -> bool:
        return self.poller.is_running

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        return self.store.subscribe(listener)

    def start(self) -> PollToken:
        """Start polling; must be called from within a running event loop."""
        logger.info(
            f"Monitoring stops of '{self.config.dashboard.monitored_machine}' "
            f"from {self.config.backend.data_url}"
        )
        return self.poller.start(self.store.apply_result, self.store.apply_error)

    def stop(self) -> None:
        self.poller.stop()

    async def refresh_now(self) -> bool:
        """
        Fetch right away, e.g. after a stop has been registered elsewhere.

        Returns:
            True if the outcome reached the store, False if it was superseded
            or the session was stopped while the fetch was in flight
        """
        task = self.poller.refresh_now()
        try:
            return await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
            logger.debug("Refresh cancelled because the session stopped")
            return False

    def select_reason(self, reason: str) -> DashboardViews:
        return self.store.select_reason(reason)

    def handle_distribution_click(self, index: Optional[int]) -> DashboardViews:
        return self.store.handle_distribution_click(index)

    def clear_filter(self) -> DashboardViews:
        return self.store.clear_filter()

    async def aclose(self) -> None:
        await self.poller.aclose()
        if self.client is not None:
            await self.client.aclose()

    async def __aenter__(self):
        self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
