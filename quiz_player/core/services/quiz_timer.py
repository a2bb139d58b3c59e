"""Resumable elapsed-time counter with periodic checkpoints."""

from __future__ import annotations

import logging
from typing import Callable

from quiz_player.constants.quiz_constants import (
    TIMER_CHECKPOINT_EVERY_TICKS,
    TIMER_KEY_TEMPLATE,
    TIMER_TICK_SECONDS,
)
from quiz_player.core.services.persisted_store import PersistedStore
from quiz_player.core.services.scheduler import Scheduler, TaskHandle

logger = logging.getLogger(__name__)


class QuizTimer:
    """Counts whole seconds of play and checkpoints them per quiz.

    The counter and the checkpoint writer are two separate periodic tasks;
    the writer only exists while the counter runs.
    """

    def __init__(
        self,
        slug: str,
        store: PersistedStore,
        scheduler: Scheduler,
        on_tick: Callable[[int], None] | None = None,
    ) -> None:
        self._key = TIMER_KEY_TEMPLATE.format(slug=slug)
        self._store = store
        self._scheduler = scheduler
        self._on_tick = on_tick
        self._tick_task: TaskHandle | None = None
        self._checkpoint_task: TaskHandle | None = None
        self._elapsed = self._read_checkpoint()
        self._started = self._elapsed > 0

    @property
    def elapsed_seconds(self) -> int:
        return self._elapsed

    @property
    def is_running(self) -> bool:
        return self._tick_task is not None

    @property
    def has_started(self) -> bool:
        """True once the counter has run in this session or a checkpoint was resumed."""
        return self._started

    def start(self) -> None:
        if self.is_running:
            return
        self._started = True
        self._tick_task = self._scheduler.call_every(TIMER_TICK_SECONDS, self._tick)
        self._checkpoint_task = self._scheduler.call_every(
            TIMER_TICK_SECONDS * TIMER_CHECKPOINT_EVERY_TICKS, self.save_checkpoint
        )

    def stop(self) -> None:
        if not self.is_running:
            return
        self._cancel_tasks()
        self.save_checkpoint()

    def close(self) -> None:
        """Stop counting and force a final checkpoint."""
        self._cancel_tasks()
        self.save_checkpoint()

    def reset(self) -> None:
        self._cancel_tasks()
        self._elapsed = 0
        self._started = False
        self._store.remove(self._key)

    def save_checkpoint(self) -> None:
        self._store.set(self._key, str(self._elapsed))

    def _tick(self) -> None:
        self._elapsed += 1
        if self._on_tick is not None:
            self._on_tick(self._elapsed)

    def _cancel_tasks(self) -> None:
        for task in (self._tick_task, self._checkpoint_task):
            if task is not None:
                task.cancel()
        self._tick_task = None
        self._checkpoint_task = None

    def _read_checkpoint(self) -> int:
        raw = self._store.get(self._key)
        if raw is None:
            return 0
        try:
            value = int(raw)
        except ValueError:
            logger.warning("Ignoring unreadable timer checkpoint %r for %s", raw, self._key)
            return 0
        if value < 0:
            return 0
        logger.info("Resuming timer at %ss from checkpoint", value)
        return value
