"""Base class for dashboard widgets that refresh themselves by polling."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

from dashboard_poller.application.ports import Notifier, VisibilitySignal
from dashboard_poller.infrastructure.notifier import LoggingNotifier
from dashboard_poller.metrics.collector import MetricsCollector
from dashboard_poller.scheduler.scheduler import (
    DEFAULT_BASE_INTERVAL_MS,
    DEFAULT_MAX_BACKOFF_MULTIPLIER,
    PollingScheduler,
)

logger = logging.getLogger(__name__)


class PollingWidget(ABC):
    """Widget owning exactly one polling scheduler.

    Subclasses implement ``fetch`` and usually ``render``. Fetch errors are
    surfaced through the notifier and then re-raised so the scheduler can
    back off.
    """

    error_title = "Failed to load dashboard data"

    def __init__(
        self,
        name: str,
        *,
        notifier: Optional[Notifier] = None,
        visibility: Optional[VisibilitySignal] = None,
        base_interval_ms: int = DEFAULT_BASE_INTERVAL_MS,
        max_backoff_multiplier: int = DEFAULT_MAX_BACKOFF_MULTIPLIER,
        metrics: Optional[MetricsCollector] = None,
    ) -> None:
        self.name = name
        self.notifier = notifier or LoggingNotifier(source=name)
        self.visibility = visibility
        self.base_interval_ms = base_interval_ms
        self.max_backoff_multiplier = max_backoff_multiplier
        self.metrics = metrics
        self.data: Any = None
        self._scheduler: Optional[PollingScheduler] = None

    @property
    def scheduler(self) -> Optional[PollingScheduler]:
        return self._scheduler

    @property
    def is_connected(self) -> bool:
        return self._scheduler is not None

    def connect(self) -> None:
        """Create the scheduler, load once and start periodic refresh."""

        if self._scheduler is not None:
            return

        self._scheduler = PollingScheduler(
            self.load,
            self.base_interval_ms,
            self.max_backoff_multiplier,
            name=self.name,
            visibility=self.visibility,
            metrics=self.metrics,
        )
        if self.visibility is not None:
            self._scheduler.setup_visibility_handling()
        self._scheduler.start(poll_immediately=True)
        logger.debug("Widget connected", extra={"widget": self.name})

    def disconnect(self) -> None:
        """Tear the scheduler down. Safe to call more than once."""

        if self._scheduler is None:
            return
        self._scheduler.cleanup()
        self._scheduler = None
        logger.debug("Widget disconnected", extra={"widget": self.name})

    def refresh(self) -> Optional[asyncio.Task]:
        """Reload now, e.g. from a refresh button."""

        if self._scheduler is None:
            return None
        return self._scheduler.poll_now()

    async def load(self) -> None:
        """Fetch and render once. Errors are notified, then re-raised."""

        try:
            data = await self.fetch()
            self.data = data
            self.render(data)
        except Exception as exc:
            self.notifier.notify_error(
                self.error_title, str(exc) or exc.__class__.__name__
            )
            raise

    @abstractmethod
    async def fetch(self) -> Any:
        """Fetch a fresh snapshot from the backend."""

    def render(self, data: Any) -> None:
        """Hook for presenting fetched data."""
