"""Fake objects for testing the scheduler and widgets."""

import asyncio
from typing import Any, Callable

from dashboard_poller.application.ports import Notifier


async def settle(rounds: int = 20) -> None:
    """Let pending tasks run until they block or finish."""

    for _ in range(rounds):
        await asyncio.sleep(0)


class FakeTimerHandle:
    """Timer registered on FakeClockLoop."""

    def __init__(
        self, when: float, callback: Callable[..., Any], args: tuple
    ) -> None:
        self.when = when
        self.callback = callback
        self.args = args
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        """Mark the timer as cancelled."""
        self.cancelled = True


class FakeClockLoop:
    """Event loop stand-in with a virtual clock.

    Tasks run on the real running loop. Timers created through
    ``call_later`` only fire when ``advance`` moves the clock past them.
    """

    def __init__(self) -> None:
        """Initialize fake loop at time zero."""
        self.now = 0.0
        self.timers: list[FakeTimerHandle] = []

    def time(self) -> float:
        """Return virtual time in seconds."""
        return self.now

    def create_task(self, coro):  # type: ignore[no-untyped-def]
        """Schedule a coroutine on the real running loop."""
        return asyncio.get_running_loop().create_task(coro)

    def call_later(
        self, delay: float, callback: Callable[..., Any], *args: Any
    ) -> FakeTimerHandle:
        """Register a timer in virtual time."""
        handle = FakeTimerHandle(self.now + delay, callback, args)
        self.timers.append(handle)
        return handle

    @property
    def pending(self) -> list[FakeTimerHandle]:
        """Timers that are neither cancelled nor fired."""
        return [t for t in self.timers if not t.cancelled and not t.fired]

    def next_delay(self) -> float | None:
        """Seconds until the earliest pending timer, if any."""
        pending = self.pending
        if not pending:
            return None
        return min(t.when for t in pending) - self.now

    async def advance(self, seconds: float) -> None:
        """Move the clock forward, firing due timers in order."""

        target = self.now + seconds
        while True:
            await settle()
            due = sorted(
                (t for t in self.pending if t.when <= target),
                key=lambda t: t.when,
            )
            if not due:
                break
            timer = due[0]
            self.now = timer.when
            timer.fired = True
            timer.callback(*timer.args)
        self.now = target
        await settle()


class RecordingNotifier(Notifier):
    """Notifier capturing errors instead of showing them."""

    def __init__(self) -> None:
        """Initialize with no captured notifications."""
        self.errors: list[tuple[str, str]] = []

    def notify_error(self, title: str, message: str) -> None:
        """Capture an error notification."""
        self.errors.append((title, message))
