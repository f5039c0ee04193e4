"""Shared dependency container for hosts embedding the poller."""

from typing import Any, Optional, Type, TypeVar

from dashboard_poller.application.ports import (
    Notifier,
    PollCallback,
    VisibilitySignal,
)
from dashboard_poller.config import AppConfig
from dashboard_poller.infrastructure.notifier import LoggingNotifier
from dashboard_poller.metrics.collector import MetricsCollector
from dashboard_poller.scheduler.scheduler import PollingScheduler
from dashboard_poller.widgets.base import PollingWidget

WidgetT = TypeVar("WidgetT", bound=PollingWidget)


class Container:
    """Builds schedulers and widgets with settings taken from AppConfig."""

    def __init__(
        self, config: AppConfig, notifier: Optional[Notifier] = None
    ) -> None:
        self._config = config
        self._metrics = MetricsCollector() if config.metrics.metrics_enabled else None
        self._notifier = notifier

    @property
    def config(self) -> AppConfig:
        return self._config

    @property
    def metrics(self) -> Optional[MetricsCollector]:
        return self._metrics

    def _visibility_for(
        self, visibility: Optional[VisibilitySignal]
    ) -> Optional[VisibilitySignal]:
        if not self._config.polling.visibility_handling:
            return None
        return visibility

    def build_scheduler(
        self,
        callback: PollCallback,
        name: str,
        visibility: Optional[VisibilitySignal] = None,
    ) -> PollingScheduler:
        """Build a scheduler; subscribes to visibility when enabled."""

        visibility = self._visibility_for(visibility)
        scheduler = PollingScheduler(
            callback,
            self._config.polling.base_interval_ms,
            self._config.polling.max_backoff_multiplier,
            name=name,
            visibility=visibility,
            metrics=self._metrics,
        )
        if visibility is not None:
            scheduler.setup_visibility_handling()
        return scheduler

    def build_widget(
        self,
        widget_cls: Type[WidgetT],
        name: str,
        visibility: Optional[VisibilitySignal] = None,
        **kwargs: Any,
    ) -> WidgetT:
        """Instantiate a widget with polling settings from config."""

        return widget_cls(
            name,
            notifier=self._notifier or LoggingNotifier(source=name),
            visibility=self._visibility_for(visibility),
            base_interval_ms=self._config.polling.base_interval_ms,
            max_backoff_multiplier=self._config.polling.max_backoff_multiplier,
            metrics=self._metrics,
            **kwargs,
        )
