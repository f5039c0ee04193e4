"""Back-off policy for polling failures.

Kept apart from the scheduler so the state machine stays small and can be
tested without an event loop.
"""

from __future__ import annotations

from dashboard_poller.application.errors import SchedulerConfigError


def _is_power_of_two(value: int) -> bool:
    return value > 0 and value & (value - 1) == 0


class BackoffPolicy:
    """Doubles the polling interval on failure, restores it on success."""

    def __init__(self, base_interval_ms: int, max_multiplier: int) -> None:
        if isinstance(base_interval_ms, bool) or not isinstance(
            base_interval_ms, int
        ):
            raise SchedulerConfigError("base_interval_ms must be an integer")
        if base_interval_ms <= 0:
            raise SchedulerConfigError("base_interval_ms must be positive")
        if isinstance(max_multiplier, bool) or not isinstance(max_multiplier, int):
            raise SchedulerConfigError("max_backoff_multiplier must be an integer")
        if not _is_power_of_two(max_multiplier):
            raise SchedulerConfigError(
                f"max_backoff_multiplier must be a power of two, got {max_multiplier}"
            )

        self._base_interval_ms = base_interval_ms
        self._max_multiplier = max_multiplier
        self._multiplier = 1

    # ------------------------------------------------------------------
    # Recording helpers
    # ------------------------------------------------------------------

    def record_success(self) -> bool:
        """Reset to the base interval. Return True if the interval changed."""

        if self._multiplier == 1:
            return False
        self._multiplier = 1
        return True

    def record_failure(self) -> bool:
        """Double the multiplier up to the cap. Return True if it changed."""

        if self._multiplier >= self._max_multiplier:
            return False
        self._multiplier = min(self._multiplier * 2, self._max_multiplier)
        return True

    # ------------------------------------------------------------------
    # Query helpers
    # ------------------------------------------------------------------

    @property
    def base_interval_ms(self) -> int:
        return self._base_interval_ms

    @property
    def max_multiplier(self) -> int:
        return self._max_multiplier

    @property
    def multiplier(self) -> int:
        return self._multiplier

    @property
    def current_interval_ms(self) -> int:
        return self._base_interval_ms * self._multiplier
