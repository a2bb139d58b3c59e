"""Scheduling capability used for ticks, debounces and expiries.

The engine is single-threaded: every callback runs on the scheduler's own
loop. ``call_soon_threadsafe`` is the only entry point other threads may use.
"""

from __future__ import annotations

from typing import Callable, Protocol


class TaskHandle(Protocol):
    def cancel(self) -> None:
        """Stop the task; cancelling twice is harmless."""


class Scheduler(Protocol):
    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> TaskHandle:
        """Run ``callback`` once after ``delay_seconds``."""

    def call_every(self, interval_seconds: float, callback: Callable[[], None]) -> TaskHandle:
        """Run ``callback`` every ``interval_seconds`` until cancelled."""

    def call_soon_threadsafe(self, callback: Callable[[], None]) -> None:
        """Queue ``callback`` onto the scheduler loop from any thread."""
