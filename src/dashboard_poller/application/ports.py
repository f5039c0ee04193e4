"""Ports for collaborators supplied by the host environment."""

from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Union

# Zero-argument fetch operation. Raising (or resolving to ``False``) is a
# failure; anything else counts as success.
PollCallback = Callable[[], Union[Awaitable[Any], Any]]

VisibilityListener = Callable[[bool], None]


class VisibilitySignal(ABC):
    """Port for the "surface is currently observable" signal.

    The signal may have any number of independent subscribers; each one
    only ever removes the handle it received from ``subscribe``.
    """

    @abstractmethod
    def is_visible(self) -> bool:
        """Return True when the consuming surface is visible to a user."""

    @abstractmethod
    def subscribe(self, listener: VisibilityListener) -> object:
        """Register a listener and return an opaque subscription handle."""

    @abstractmethod
    def unsubscribe(self, handle: object) -> None:
        """Remove a subscription. Unknown handles are ignored."""


class Notifier(ABC):
    """Port for user-visible notifications (toasts, banners)."""

    @abstractmethod
    def notify_error(self, title: str, message: str) -> None:
        """Surface an error to the user."""
