"""Polling scheduler with failure backoff and visibility-aware suspension."""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from typing import Optional

from dashboard_poller.application.errors import SchedulerConfigError
from dashboard_poller.application.ports import PollCallback, VisibilitySignal
from dashboard_poller.metrics.collector import MetricsCollector
from dashboard_poller.scheduler.backoff import BackoffPolicy
from dashboard_poller.scheduler.visibility import SuspensionBridge

logger = logging.getLogger(__name__)

DEFAULT_BASE_INTERVAL_MS = 60_000
DEFAULT_MAX_BACKOFF_MULTIPLIER = 8


class PollingScheduler:
    """Periodically invokes a fetch callback on an asyncio event loop.

    At most one timer is pending at any time. The next timer is armed only
    after the previous callback settled, using whatever interval the backoff
    policy has settled on. Callback failures never propagate out of the
    scheduler; they only drive the backoff.

    Every stop, pause and cleanup bumps an internal generation counter. A
    poll that settles under an older generation is discarded: it neither
    changes backoff nor re-arms the timer.
    """

    def __init__(
        self,
        callback: PollCallback,
        base_interval_ms: int = DEFAULT_BASE_INTERVAL_MS,
        max_backoff_multiplier: int = DEFAULT_MAX_BACKOFF_MULTIPLIER,
        *,
        name: str = "poller",
        visibility: Optional[VisibilitySignal] = None,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        metrics: Optional[MetricsCollector] = None,
    ) -> None:
        if not callable(callback):
            raise SchedulerConfigError("callback must be callable")

        self._callback = callback
        self._backoff = BackoffPolicy(base_interval_ms, max_backoff_multiplier)
        self._name = name
        self._loop = loop
        self._metrics = metrics
        self._bridge = SuspensionBridge(self, visibility, name=name)

        self._timer: Optional[asyncio.TimerHandle] = None
        self._running = False
        self._paused = False
        self._closed = False
        self._generation = 0
        # Strong references so in-flight polls are not garbage collected.
        self._in_flight: set[asyncio.Task] = set()

    # ------------------------------------------------------------------
    # Observed state
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def is_paused(self) -> bool:
        return self._paused

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def timer_armed(self) -> bool:
        return self._timer is not None

    @property
    def backoff_multiplier(self) -> int:
        return self._backoff.multiplier

    @property
    def current_interval_ms(self) -> int:
        return self._backoff.current_interval_ms

    @property
    def base_interval_ms(self) -> int:
        return self._backoff.base_interval_ms

    @property
    def in_flight(self) -> int:
        return len(self._in_flight)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self, poll_immediately: bool = False) -> None:
        """Start periodic polling.

        Args:
            poll_immediately: Poll right away instead of waiting one
                interval. The timer is then armed once that poll settles.
        """

        if self._running or self._closed:
            return

        self._running = True
        self._paused = False

        if not self._bridge.surface_visible():
            self._paused = True
            logger.info(
                "Polling scheduler started while hidden, staying paused",
                extra={"scheduler": self._name},
            )
            return

        logger.info(
            "Polling scheduler started",
            extra={
                "scheduler": self._name,
                "interval_ms": self.current_interval_ms,
            },
        )
        if poll_immediately:
            self.poll_now()
        else:
            self._arm()

    def stop(self) -> None:
        """Stop polling. Backoff state is kept."""

        if not self._running:
            return

        self._cancel_timer()
        self._running = False
        self._paused = False
        self._generation += 1
        logger.info("Polling scheduler stopped", extra={"scheduler": self._name})

    def pause(self) -> None:
        """Suspend polling without leaving the running state."""

        if not self._running or self._paused:
            return

        self._cancel_timer()
        self._paused = True
        self._generation += 1
        logger.debug("Polling scheduler paused", extra={"scheduler": self._name})

    def resume(self) -> None:
        """Refresh immediately, then continue at the current interval."""

        if not self._running or not self._paused or self._closed:
            return

        self._paused = False
        logger.debug("Polling scheduler resumed", extra={"scheduler": self._name})
        self.poll_now()

    def setup_visibility_handling(
        self, signal: Optional[VisibilitySignal] = None
    ) -> None:
        """Pause while the surface is hidden, resume when it is visible again."""

        if self._closed:
            return
        self._bridge.attach(signal)

    def cleanup(self) -> None:
        """Stop polling and release the visibility subscription."""

        self.stop()
        self._bridge.detach()
        if not self._closed:
            self._closed = True
            logger.debug(
                "Polling scheduler cleaned up", extra={"scheduler": self._name}
            )

    # ------------------------------------------------------------------
    # Polling
    # ------------------------------------------------------------------

    def poll_now(self) -> Optional[asyncio.Task]:
        """Invoke the callback outside the regular cadence.

        Returns the task driving the poll, or None once cleaned up.
        """

        if self._closed:
            return None

        self._cancel_timer()
        task = self._get_loop().create_task(self._run_poll(self._generation))
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)
        return task

    async def _run_poll(self, generation: int) -> None:
        started = time.perf_counter()
        success = await self._invoke_callback()
        duration = time.perf_counter() - started

        if generation != self._generation or self._closed:
            logger.debug(
                "Discarding poll result after stop",
                extra={"scheduler": self._name},
            )
            if self._metrics:
                self._metrics.record_poll_discarded(self._name)
            return

        if self._metrics:
            self._metrics.record_poll(self._name, success, duration)

        if success:
            changed = self._backoff.record_success()
        else:
            changed = self._backoff.record_failure()

        if changed:
            log = logger.info if success else logger.warning
            log(
                "Polling interval changed to %dms (multiplier %d)",
                self.current_interval_ms,
                self.backoff_multiplier,
                extra={"scheduler": self._name},
            )
            if self._metrics:
                self._metrics.record_backoff_change(
                    self._name, self.backoff_multiplier, self.current_interval_ms
                )

        if self._running and not self._paused:
            self._arm()

    async def _invoke_callback(self) -> bool:
        try:
            result = self._callback()
            if inspect.isawaitable(result):
                result = await result
        except Exception:
            logger.warning(
                "Poll callback failed",
                exc_info=True,
                extra={"scheduler": self._name},
            )
            return False
        return result is not False

    # ------------------------------------------------------------------
    # Timer
    # ------------------------------------------------------------------

    def _arm(self) -> None:
        self._cancel_timer()
        delay = self._backoff.current_interval_ms / 1000
        self._timer = self._get_loop().call_later(delay, self._on_timer)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_timer(self) -> None:
        self._timer = None
        if not self._running or self._paused:
            return
        self.poll_now()

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop
