"""Metrics collector for polling activity."""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from prometheus_client import Counter, Histogram

logger = logging.getLogger(__name__)

# Prometheus metrics - module level for shared registry
_POLLS = Counter(
    "dashboard_poller_polls_total",
    "Total number of completed polls",
    ["scheduler", "outcome"],
)
_POLLS_DISCARDED = Counter(
    "dashboard_poller_polls_discarded_total",
    "Polls whose result arrived after the scheduler was stopped",
    ["scheduler"],
)
_BACKOFF_CHANGES = Counter(
    "dashboard_poller_backoff_changes_total",
    "Total number of polling interval changes caused by backoff",
    ["scheduler", "direction"],
)
_POLL_DURATION = Histogram(
    "dashboard_poller_poll_duration_seconds",
    "Time spent in the poll callback",
    ["scheduler"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
)


@dataclass(slots=True)
class MetricsCollector:
    """Collector for polling metrics.

    Tracks poll outcomes and backoff transitions via Prometheus counters
    and structured logging.
    """

    def record_poll(
        self, scheduler: str, success: bool, duration_seconds: float
    ) -> None:
        """Record a settled poll."""
        outcome = "success" if success else "failure"
        _POLLS.labels(scheduler=scheduler, outcome=outcome).inc()
        _POLL_DURATION.labels(scheduler=scheduler).observe(duration_seconds)
        logger.debug(
            "Metric: Poll completed",
            extra={
                "metric_type": "poll",
                "scheduler": scheduler,
                "outcome": outcome,
                "duration_seconds": duration_seconds,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        )

    def record_poll_discarded(self, scheduler: str) -> None:
        """Record a poll result dropped after stop/pause/cleanup."""
        _POLLS_DISCARDED.labels(scheduler=scheduler).inc()
        logger.debug(
            "Metric: Poll discarded",
            extra={
                "metric_type": "poll_discarded",
                "scheduler": scheduler,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        )

    def record_backoff_change(
        self, scheduler: str, multiplier: int, interval_ms: int
    ) -> None:
        """Record a change of the effective polling interval."""
        direction = "reset" if multiplier == 1 else "increase"
        _BACKOFF_CHANGES.labels(scheduler=scheduler, direction=direction).inc()
        logger.info(
            "Metric: Backoff changed",
            extra={
                "metric_type": "backoff_change",
                "scheduler": scheduler,
                "direction": direction,
                "multiplier": multiplier,
                "interval_ms": interval_ms,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        )
