"""Local best-score cache, independent of server submission."""

from __future__ import annotations

import logging

from pydantic import ValidationError

from quiz_player.constants.quiz_constants import COMPLETION_KEY_TEMPLATE
from quiz_player.core.models import CachedCompletion
from quiz_player.core.schemas import CachedCompletionPayload
from quiz_player.core.services.persisted_store import PersistedStore

logger = logging.getLogger(__name__)


class CompletionCache:
    def __init__(self, slug: str, store: PersistedStore) -> None:
        self._key = COMPLETION_KEY_TEMPLATE.format(slug=slug)
        self._store = store

    def load(self) -> CachedCompletion | None:
        raw = self._store.get(self._key)
        if raw is None:
            return None
        try:
            return CachedCompletionPayload.model_validate_json(raw).to_cached()
        except ValidationError:
            logger.warning("Discarding unreadable completion cache %s", self._key)
            return None

    def record(self, candidate: CachedCompletion) -> bool:
        """Store ``candidate`` if it beats the cached score. Returns True when written."""
        existing = self.load()
        if existing is not None and candidate.score <= existing.score:
            return False
        payload = CachedCompletionPayload.from_cached(candidate)
        self._store.set(self._key, payload.model_dump_json(by_alias=True))
        return True

    def clear(self) -> None:
        self._store.remove(self._key)
