"""Global pytest configuration and fixtures."""

import logging

import pytest

from dashboard_poller.infrastructure.visibility import InMemoryVisibilitySignal
from tests.helpers import FakeClockLoop, RecordingNotifier


@pytest.fixture
def fake_loop() -> FakeClockLoop:
    """Loop with a virtual clock for timer-driven tests."""
    return FakeClockLoop()


@pytest.fixture
def visibility() -> InMemoryVisibilitySignal:
    """Visibility signal that starts visible."""
    return InMemoryVisibilitySignal()


@pytest.fixture
def notifier() -> RecordingNotifier:
    """Notifier capturing user-facing errors."""
    return RecordingNotifier()


@pytest.fixture(autouse=True)
def _reset_root_logger():
    """Restore root logging after tests that reconfigure it."""

    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
