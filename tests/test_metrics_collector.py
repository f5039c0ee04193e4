"""Tests for metrics collector."""

from unittest.mock import patch

import pytest
from prometheus_client import REGISTRY

from dashboard_poller.metrics.collector import MetricsCollector


@pytest.fixture
def metrics_collector():
    """Create a metrics collector instance."""
    return MetricsCollector()


@pytest.fixture
def mock_logger():
    """Mock logger for testing."""
    with patch("dashboard_poller.metrics.collector.logger") as mock:
        yield mock


def _sample(name: str, **labels: str) -> float:
    return REGISTRY.get_sample_value(name, labels) or 0.0


class TestMetricsCollector:
    """Test metrics collector methods."""

    def test_record_poll_success(self, metrics_collector, mock_logger):
        before = _sample(
            "dashboard_poller_polls_total", scheduler="t-success", outcome="success"
        )

        metrics_collector.record_poll("t-success", True, 0.2)

        after = _sample(
            "dashboard_poller_polls_total", scheduler="t-success", outcome="success"
        )
        assert after == before + 1
        call_args = mock_logger.debug.call_args
        assert call_args[0][0] == "Metric: Poll completed"
        assert call_args[1]["extra"]["outcome"] == "success"
        assert call_args[1]["extra"]["scheduler"] == "t-success"

    def test_record_poll_failure_observes_duration(
        self, metrics_collector, mock_logger
    ):
        metrics_collector.record_poll("t-failure", False, 1.5)

        assert (
            _sample(
                "dashboard_poller_polls_total",
                scheduler="t-failure",
                outcome="failure",
            )
            >= 1
        )
        assert (
            _sample("dashboard_poller_poll_duration_seconds_count", scheduler="t-failure")
            >= 1
        )

    def test_record_poll_discarded(self, metrics_collector, mock_logger):
        metrics_collector.record_poll_discarded("t-discard")

        assert (
            _sample("dashboard_poller_polls_discarded_total", scheduler="t-discard")
            >= 1
        )
        assert mock_logger.debug.call_args[1]["extra"]["metric_type"] == (
            "poll_discarded"
        )

    def test_record_backoff_change_directions(self, metrics_collector, mock_logger):
        metrics_collector.record_backoff_change("t-backoff", 4, 240000)
        metrics_collector.record_backoff_change("t-backoff", 1, 60000)

        assert (
            _sample(
                "dashboard_poller_backoff_changes_total",
                scheduler="t-backoff",
                direction="increase",
            )
            >= 1
        )
        assert (
            _sample(
                "dashboard_poller_backoff_changes_total",
                scheduler="t-backoff",
                direction="reset",
            )
            >= 1
        )
        assert mock_logger.info.call_count == 2
        last = mock_logger.info.call_args
        assert last[0][0] == "Metric: Backoff changed"
        assert last[1]["extra"]["interval_ms"] == 60000
