"""Admission rules for restricted (demo) play and viewer tiers."""

from __future__ import annotations

import logging
from typing import Iterable

from quiz_player.core.models import SessionMode, SessionOptions, ViewerTier

logger = logging.getLogger(__name__)


class SessionAccessDenied(Exception):
    """Raised when a viewer may not start a session for this quiz."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class AccessGate:
    """Single place for every admission check the session makes."""

    def __init__(self, options: SessionOptions) -> None:
        self._mode = options.mode
        self._tier = options.viewer_tier
        self._is_newest = options.is_newest
        self._answer_limit = options.answer_limit
        self._has_credentials = options.credentials is not None
        self._upsell_raised = False
        self._locked = False

    @property
    def is_restricted(self) -> bool:
        return self._mode is SessionMode.RESTRICTED

    @property
    def is_locked(self) -> bool:
        return self._locked

    @property
    def upsell_raised(self) -> bool:
        return self._upsell_raised

    @property
    def answer_limit(self) -> int:
        return self._answer_limit

    def check_session_start(self) -> None:
        if self._mode is not SessionMode.FULL:
            return
        if self._tier is not ViewerTier.PREMIUM and not self._is_newest:
            logger.info("Denied %s viewer access to an archived quiz", self._tier.value)
            raise SessionAccessDenied(
                "Only the latest quiz is free to play. Upgrade to premium to play archived quizzes."
            )

    def register_answer_count(self, answered_count: int) -> bool:
        """Returns True exactly once, when the restricted ceiling is reached."""
        if not self.is_restricted or self._upsell_raised:
            return False
        if answered_count < self._answer_limit:
            return False
        self._upsell_raised = True
        self._locked = True
        logger.info("Restricted answer limit of %s reached", self._answer_limit)
        return True

    def restore(self, answered_count: int) -> None:
        """Re-apply the lock for a resumed session without prompting again."""
        if self.is_restricted and answered_count >= self._answer_limit:
            self._upsell_raised = True
            self._locked = True

    def allows_jump(self, target_question_id: str, viewed_ids: Iterable[str]) -> bool:
        if not self._locked:
            return True
        return target_question_id in set(viewed_ids)

    def can_submit_completion(self) -> bool:
        return (
            self._mode is SessionMode.FULL
            and self._tier is not ViewerTier.VISITOR
            and self._has_credentials
        )
