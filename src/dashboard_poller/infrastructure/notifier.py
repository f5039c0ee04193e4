"""Notifier that writes user-facing errors to the log."""

import logging
from dataclasses import dataclass

from dashboard_poller.application.ports import Notifier

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class LoggingNotifier(Notifier):
    """Fallback notifier for hosts without a UI toast channel."""

    source: str = "dashboard"

    def notify_error(self, title: str, message: str) -> None:
        logger.error(
            "%s: %s",
            title,
            message,
            extra={"source": self.source, "notification": "error"},
        )
