"""Test helpers module for shared test utilities."""

from .fakes import (
    FakeClockLoop,
    FakeTimerHandle,
    RecordingNotifier,
    settle,
)

__all__ = [
    "FakeClockLoop",
    "FakeTimerHandle",
    "RecordingNotifier",
    "settle",
]
