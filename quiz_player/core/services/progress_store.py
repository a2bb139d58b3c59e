"""Debounced persistence of in-progress session state."""

from __future__ import annotations

import logging
from typing import Callable

from pydantic import ValidationError

from quiz_player.constants.quiz_constants import (
    PROGRESS_KEY_TEMPLATE,
    PROGRESS_SAVE_DEBOUNCE_SECONDS,
)
from quiz_player.core.schemas import SessionProgress
from quiz_player.core.services.persisted_store import PersistedStore
from quiz_player.core.services.scheduler import Scheduler, TaskHandle

logger = logging.getLogger(__name__)


class ProgressStore:
    """Saves the latest session snapshot at most once per debounce window.

    ``schedule_save`` takes a builder rather than a snapshot so the write
    reflects the state at flush time.
    """

    def __init__(
        self,
        slug: str,
        store: PersistedStore,
        scheduler: Scheduler,
        debounce_seconds: float = PROGRESS_SAVE_DEBOUNCE_SECONDS,
    ) -> None:
        self._key = PROGRESS_KEY_TEMPLATE.format(slug=slug)
        self._store = store
        self._scheduler = scheduler
        self._debounce_seconds = debounce_seconds
        self._pending: Callable[[], SessionProgress] | None = None
        self._task: TaskHandle | None = None

    @property
    def has_pending_save(self) -> bool:
        return self._pending is not None

    def load(self) -> SessionProgress | None:
        raw = self._store.get(self._key)
        if raw is None:
            return None
        try:
            return SessionProgress.model_validate_json(raw)
        except ValidationError:
            logger.warning("Discarding unreadable progress snapshot %s", self._key)
            return None

    def schedule_save(self, build: Callable[[], SessionProgress]) -> None:
        self._pending = build
        if self._task is not None:
            self._task.cancel()
        self._task = self._scheduler.call_later(self._debounce_seconds, self.flush)

    def flush(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None
        build, self._pending = self._pending, None
        if build is None:
            return
        self._store.set(self._key, build().model_dump_json(by_alias=True))

    def clear(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None
        self._pending = None
        self._store.remove(self._key)
