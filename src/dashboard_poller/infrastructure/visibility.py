"""In-memory visibility signal."""

import itertools
from dataclasses import dataclass, field
from typing import Dict, Iterator

from dashboard_poller.application.ports import VisibilityListener, VisibilitySignal


@dataclass
class InMemoryVisibilitySignal(VisibilitySignal):
    """Visibility signal driven by explicit ``set_visible`` calls.

    Used by hosts that learn about visibility from somewhere else (a parent
    widget, a websocket from the browser) and by tests.
    """

    visible: bool = True
    _listeners: Dict[int, VisibilityListener] = field(
        default_factory=dict, repr=False
    )
    _ids: Iterator[int] = field(default_factory=itertools.count, repr=False)

    def is_visible(self) -> bool:
        """Return the last reported visibility."""

        return self.visible

    def subscribe(self, listener: VisibilityListener) -> object:
        """Register a listener and return its handle."""

        handle = next(self._ids)
        self._listeners[handle] = listener
        return handle

    def unsubscribe(self, handle: object) -> None:
        """Remove a listener by handle."""

        self._listeners.pop(handle, None)  # type: ignore[arg-type]

    @property
    def subscriber_count(self) -> int:
        return len(self._listeners)

    def set_visible(self, visible: bool) -> None:
        """Update visibility and notify listeners on an actual change."""

        if visible == self.visible:
            return
        self.visible = visible
        # Listeners may unsubscribe while being notified.
        for listener in list(self._listeners.values()):
            listener(visible)
