"""Bridge between a visibility signal and a scheduler's pause/resume."""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from dashboard_poller.application.errors import VisibilityNotConfiguredError
from dashboard_poller.application.ports import VisibilitySignal

logger = logging.getLogger(__name__)


class Suspendable(Protocol):
    """Anything that can be paused and resumed."""

    def pause(self) -> None: ...

    def resume(self) -> None: ...


class SuspensionBridge:
    """Maps "surface hidden/visible" transitions onto pause/resume.

    Owns at most one subscription. The subscription handle is the only
    thing removed from the signal on detach, so other subscribers of the
    same signal are left alone.
    """

    def __init__(
        self,
        target: Suspendable,
        signal: Optional[VisibilitySignal] = None,
        name: str = "poller",
    ) -> None:
        self._target = target
        self._default_signal = signal
        self._name = name
        self._signal: Optional[VisibilitySignal] = None
        self._handle: object | None = None

    @property
    def is_subscribed(self) -> bool:
        return self._handle is not None

    def surface_visible(self) -> bool:
        """Return current visibility; True unless subscribed to a signal."""

        if not self.is_subscribed or self._signal is None:
            return True
        return self._signal.is_visible()

    def attach(self, signal: Optional[VisibilitySignal] = None) -> None:
        """Subscribe to visibility changes. Repeat calls are no-ops.

        Pauses the target straight away if the surface is already hidden.
        """

        if self.is_subscribed:
            return

        signal = signal or self._default_signal
        if signal is None:
            raise VisibilityNotConfiguredError(
                f"No visibility signal configured for scheduler {self._name!r}"
            )

        self._signal = signal
        self._handle = signal.subscribe(self._on_visibility_change)
        logger.debug(
            "Visibility handling enabled", extra={"scheduler": self._name}
        )
        if not signal.is_visible():
            self._target.pause()

    def detach(self) -> None:
        """Drop the subscription if there is one."""

        if self._handle is None or self._signal is None:
            return

        self._signal.unsubscribe(self._handle)
        self._handle = None
        logger.debug(
            "Visibility handling disabled", extra={"scheduler": self._name}
        )

    def _on_visibility_change(self, visible: bool) -> None:
        logger.debug(
            "Surface %s",
            "visible" if visible else "hidden",
            extra={"scheduler": self._name},
        )
        if visible:
            self._target.resume()
        else:
            self._target.pause()
