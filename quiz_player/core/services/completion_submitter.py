r"""At-most-once completion submission for a finished session.

State machine::

    pending --all answered--> submitting --ok--> submitted (final)
                                         \--error--> failed

``failed`` behaves like ``pending``: the next answer-state change that still
finds every question answered submits again. A successful submission writes
a marker holding the session id so a resumed session never resubmits.
"""

from __future__ import annotations

import logging
from typing import Callable, Protocol

from quiz_player.constants.quiz_constants import SUBMITTED_KEY_TEMPLATE
from quiz_player.core.models import (
    AnswerState,
    CachedCompletion,
    CompletionRecord,
    Quiz,
    RoundScore,
    SubmissionOutcome,
    SubmissionState,
)
from quiz_player.core.services.answer_tracker import TrackerSnapshot
from quiz_player.core.services.clock import Clock
from quiz_player.core.services.completion_cache import CompletionCache
from quiz_player.core.services.persisted_store import PersistedStore

logger = logging.getLogger(__name__)


class CompletionClient(Protocol):
    def submit(
        self, record: CompletionRecord, on_done: Callable[[SubmissionOutcome], None]
    ) -> None:
        """Send ``record`` and eventually call ``on_done`` exactly once."""


def build_completion_record(
    quiz: Quiz, snapshot: TrackerSnapshot, elapsed_seconds: int
) -> CompletionRecord:
    round_scores: list[RoundScore] = []
    categories: list[str] = []
    for round_number in quiz.round_numbers():
        category = quiz.get_round(round_number).category
        questions = quiz.questions_in_round(round_number)
        round_scores.append(
            RoundScore(
                round_number=round_number,
                category=category,
                score=sum(
                    1 for q in questions if snapshot.state_of(q.id) is AnswerState.CORRECT
                ),
                total_questions=len(questions),
            )
        )
        if category not in categories:
            categories.append(category)
    return CompletionRecord(
        quiz_slug=quiz.slug,
        score=snapshot.score,
        total_questions=quiz.question_count,
        completion_time_seconds=elapsed_seconds,
        round_scores=tuple(round_scores),
        categories=tuple(categories),
    )


class CompletionSubmitter:
    def __init__(
        self,
        quiz: Quiz,
        client: CompletionClient | None,
        cache: CompletionCache,
        store: PersistedStore,
        clock: Clock,
        session_id: str,
        on_outcome: Callable[[SubmissionOutcome], None] | None = None,
    ) -> None:
        self._quiz = quiz
        self._client = client
        self._cache = cache
        self._store = store
        self._clock = clock
        self._session_id = session_id
        self._on_outcome = on_outcome
        self._marker_key = SUBMITTED_KEY_TEMPLATE.format(slug=quiz.slug)
        self._state = SubmissionState.PENDING
        self._attempts = 0
        self._last_record: CompletionRecord | None = None
        if self._store.get(self._marker_key) == session_id:
            self._state = SubmissionState.SUBMITTED

    @property
    def state(self) -> SubmissionState:
        return self._state

    @property
    def attempts(self) -> int:
        return self._attempts

    @property
    def last_record(self) -> CompletionRecord | None:
        return self._last_record

    @property
    def enabled(self) -> bool:
        return self._client is not None

    def on_answer_state_changed(self, snapshot: TrackerSnapshot, elapsed_seconds: int) -> bool:
        """React to a tracker mutation. Returns True when a submission was started."""
        if not snapshot.all_answered:
            return False
        record = build_completion_record(self._quiz, snapshot, elapsed_seconds)
        self._cache.record(
            CachedCompletion(
                score=record.score,
                total_questions=record.total_questions,
                completed_at=self._clock.now(),
                time_spent_seconds=elapsed_seconds,
            )
        )
        if self._state not in (SubmissionState.PENDING, SubmissionState.FAILED):
            return False
        return self._submit(record)

    def retry(self, snapshot: TrackerSnapshot, elapsed_seconds: int) -> bool:
        """Explicit retry after a failure."""
        if self._state is not SubmissionState.FAILED or not snapshot.all_answered:
            return False
        return self._submit(build_completion_record(self._quiz, snapshot, elapsed_seconds))

    def reset(self, session_id: str) -> None:
        self._store.remove(self._marker_key)
        self._session_id = session_id
        self._state = SubmissionState.PENDING
        self._attempts = 0
        self._last_record = None

    def _submit(self, record: CompletionRecord) -> bool:
        if self._client is None:
            return False
        self._state = SubmissionState.SUBMITTING
        self._attempts += 1
        self._last_record = record
        logger.info(
            "Submitting completion for %s: %s/%s in %ss (attempt %s)",
            record.quiz_slug,
            record.score,
            record.total_questions,
            record.completion_time_seconds,
            self._attempts,
        )
        self._client.submit(record, self._handle_outcome)
        return True

    def _handle_outcome(self, outcome: SubmissionOutcome) -> None:
        if outcome.success:
            self._state = SubmissionState.SUBMITTED
            self._store.set(self._marker_key, self._session_id)
            logger.info("Completion recorded for %s", self._quiz.slug)
        else:
            self._state = SubmissionState.FAILED
            logger.warning("Completion submission failed: %s", outcome.error)
        if self._on_outcome is not None:
            self._on_outcome(outcome)
