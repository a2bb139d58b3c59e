"""Scheduler backed by the Qt event loop."""

from __future__ import annotations

from typing import Callable

from PySide6.QtCore import QObject, Qt, QTimer, Signal, Slot


class QtTaskHandle:
    """Cancellable wrapper around a QTimer owned by :class:`QtScheduler`."""

    def __init__(self, timer: QTimer, single_shot: bool) -> None:
        self._timer: QTimer | None = timer
        if single_shot:
            timer.timeout.connect(self._finish)

    def cancel(self) -> None:
        if self._timer is None:
            return
        self._timer.stop()
        self._timer.deleteLater()
        self._timer = None

    def _finish(self) -> None:
        self.cancel()


class QtScheduler(QObject):
    """Runs engine callbacks on the GUI thread.

    Worker threads hand results back through a queued signal, so every engine
    callback executes on the thread that owns this object.
    """

    _dispatch = Signal(object)

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._dispatch.connect(self._run_callback, Qt.QueuedConnection)

    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> QtTaskHandle:
        return self._start_timer(delay_seconds, callback, single_shot=True)

    def call_every(self, interval_seconds: float, callback: Callable[[], None]) -> QtTaskHandle:
        return self._start_timer(interval_seconds, callback, single_shot=False)

    def call_soon_threadsafe(self, callback: Callable[[], None]) -> None:
        self._dispatch.emit(callback)

    def _start_timer(
        self, seconds: float, callback: Callable[[], None], *, single_shot: bool
    ) -> QtTaskHandle:
        timer = QTimer(self)
        timer.setSingleShot(single_shot)
        timer.timeout.connect(callback)
        handle = QtTaskHandle(timer, single_shot)
        timer.start(max(0, int(seconds * 1000)))
        return handle

    @Slot(object)
    def _run_callback(self, callback: Callable[[], None]) -> None:
        callback()
