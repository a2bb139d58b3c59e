"""Play session orchestration shared by the Qt player and headless callers."""

from __future__ import annotations

import logging
from uuid import uuid4

from quiz_player.core.models import (
    AchievementInstance,
    AchievementNotice,
    AnswerState,
    CachedCompletion,
    Quiz,
    QuizQuestion,
    QuizRound,
    Screen,
    SessionCursor,
    SessionOptions,
    SubmissionOutcome,
    SubmissionState,
)
from quiz_player.core.schemas import SessionProgress
from quiz_player.core.services.access_gate import AccessGate
from quiz_player.core.services.achievement_evaluator import (
    EvaluationContext,
    evaluate_achievements,
)
from quiz_player.core.services.achievement_feed import AchievementFeed
from quiz_player.core.services.answer_tracker import AnswerTracker
from quiz_player.core.services.clock import Clock, SystemClock
from quiz_player.core.services.completion_cache import CompletionCache
from quiz_player.core.services.completion_submitter import CompletionClient, CompletionSubmitter
from quiz_player.core.services.navigator import Navigator
from quiz_player.core.services.persisted_store import InMemoryStore, PersistedStore, SafeStore
from quiz_player.core.services.progress_store import ProgressStore
from quiz_player.core.services.quiz_timer import QuizTimer
from quiz_player.core.services.scheduler import Scheduler

logger = logging.getLogger(__name__)


class EmptyQuizError(ValueError):
    """Raised when a session is created for a quiz without questions."""


class SessionListener:
    """Presentation-facing events. Subclasses override what they render."""

    def cursor_changed(self, cursor: SessionCursor) -> None:
        pass

    def answer_state_changed(self, question_id: str, state: AnswerState, answer_visible: bool) -> None:
        pass

    def score_pulse(self, question_id: str, score: int) -> None:
        pass

    def achievement_unlocked(self, notice: AchievementNotice) -> None:
        pass

    def achievement_expired(self, achievement: AchievementInstance) -> None:
        pass

    def upsell_prompt(self) -> None:
        pass

    def session_complete(self, score: int, total: int) -> None:
        pass

    def session_incomplete(self, unanswered_numbers: list[int]) -> None:
        pass

    def demo_complete(self, score: int, max_questions: int) -> None:
        pass

    def timer_ticked(self, elapsed_seconds: int) -> None:
        pass

    def submission_succeeded(self, unlocked_slugs: list[str]) -> None:
        pass

    def submission_failed(self, reason: str) -> None:
        pass


class QuizSession:
    """Facade composing navigation, answers, achievements, timing and submission.

    Every answer mutation funnels through ``_on_answer_state_changed`` which,
    in the same call, evaluates achievements, then the completion submitter,
    then the restricted-mode gate, and finally schedules a progress save.
    """

    def __init__(
        self,
        quiz: Quiz,
        scheduler: Scheduler,
        *,
        options: SessionOptions | None = None,
        store: PersistedStore | None = None,
        clock: Clock | None = None,
        client: CompletionClient | None = None,
        listener: SessionListener | None = None,
    ) -> None:
        if not quiz.questions:
            raise EmptyQuizError("Quiz must contain at least one question.")

        self._quiz = quiz
        self._options = options or SessionOptions()
        self._gate = AccessGate(self._options)
        self._gate.check_session_start()

        self._scheduler = scheduler
        self._store = SafeStore(store if store is not None else InMemoryStore())
        self._clock = clock or SystemClock()
        self._listener = listener or SessionListener()

        self._tracker = AnswerTracker(question.id for question in quiz.questions)
        self._navigator = Navigator(quiz, can_jump=self._can_jump)
        self._timer = QuizTimer(quiz.slug, self._store, scheduler, on_tick=self._handle_tick)
        self._progress = ProgressStore(quiz.slug, self._store, scheduler)
        self._cache = CompletionCache(quiz.slug, self._store)
        self._feed = AchievementFeed(scheduler, self._clock, on_expired=self._handle_expired)
        self._achievements: list[AchievementInstance] = []
        self._unlocked_keys: set[str] = set()
        self._completion_announced = False
        self._closed = False

        self._session_id = self._restore_progress() or uuid4().hex
        self._client = client if self._gate.can_submit_completion() else None
        self._submitter = CompletionSubmitter(
            quiz,
            self._client,
            self._cache,
            self._store,
            self._clock,
            self._session_id,
            on_outcome=self._handle_submission_outcome,
        )
        if self._tracker.snapshot().all_answered:
            self._completion_announced = True

    # --- State ---

    @property
    def quiz(self) -> Quiz:
        return self._quiz

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def options(self) -> SessionOptions:
        return self._options

    @property
    def cursor(self) -> SessionCursor:
        return self._navigator.cursor

    @property
    def current_question(self) -> QuizQuestion:
        return self._navigator.current_question

    @property
    def current_round(self) -> QuizRound:
        return self._quiz.get_round(self.cursor.round_number)

    @property
    def total_questions(self) -> int:
        return self._quiz.question_count

    @property
    def score(self) -> int:
        return self._tracker.score()

    @property
    def answered_count(self) -> int:
        return self._tracker.answered_count()

    @property
    def elapsed_seconds(self) -> int:
        return self._timer.elapsed_seconds

    @property
    def is_timer_running(self) -> bool:
        return self._timer.is_running

    @property
    def is_timer_paused(self) -> bool:
        return self._timer.has_started and not self._timer.is_running

    @property
    def submission_state(self) -> SubmissionState:
        return self._submitter.state

    @property
    def submission_attempts(self) -> int:
        return self._submitter.attempts

    @property
    def achievements(self) -> list[AchievementInstance]:
        return list(self._achievements)

    @property
    def unlocked_keys(self) -> frozenset[str]:
        return frozenset(self._unlocked_keys)

    @property
    def notices(self) -> list[AchievementNotice]:
        return self._feed.notices

    @property
    def is_locked(self) -> bool:
        return self._gate.is_locked

    @property
    def cached_completion(self) -> CachedCompletion | None:
        return self._cache.load()

    def answer_state(self, question_id: str) -> AnswerState:
        return self._tracker.state(question_id)

    def is_answer_visible(self, question_id: str) -> bool:
        return self._tracker.is_answer_visible(question_id)

    def is_viewed(self, question_id: str) -> bool:
        return question_id in self._tracker.viewed()

    def all_answered(self) -> bool:
        return self._tracker.snapshot().all_answered

    # --- Navigation ---

    def go_to_next(self) -> bool:
        """Advance; at the end this finishes the quiz instead of moving.

        On a round intro this starts the round rather than skipping its first question.
        """
        if self.cursor.screen is Screen.ROUND_INTRO:
            return self.start_round()
        max_questions = self._options.max_questions
        next_index = self.cursor.question_index + 1
        if self._gate.is_restricted and max_questions and next_index >= max_questions:
            self._listener.demo_complete(self.score, max_questions)
            return False

        if not self._navigator.go_to_next():
            if self._gate.is_restricted:
                self._listener.demo_complete(self.score, self.total_questions)
            else:
                self.finish()
            return False
        self._after_navigation()
        return True

    def go_to_previous(self) -> bool:
        if not self._navigator.go_to_previous():
            return False
        self._after_navigation()
        return True

    def jump_to(self, question_number: int) -> bool:
        if not self._navigator.jump_to(question_number):
            logger.debug("Ignored jump to question %s", question_number)
            return False
        self._after_navigation()
        return True

    def start_round(self) -> bool:
        if not self._navigator.start_round():
            return False
        self._timer.start()
        self._after_navigation()
        return True

    # --- Timer ---

    def pause_timer(self) -> bool:
        """Stop the clock and checkpoint it; False when it was not running."""
        if not self._timer.is_running:
            return False
        self._timer.stop()
        logger.info("Timer for %s paused at %ss", self._quiz.slug, self._timer.elapsed_seconds)
        return True

    def resume_timer(self) -> bool:
        """Restart a paused clock. Before the first round starts there is nothing to resume."""
        if self._closed or self._timer.is_running or not self._timer.has_started:
            return False
        self._timer.start()
        return True

    def toggle_timer(self) -> bool:
        """Pause or resume; returns whether the clock runs afterwards."""
        if self._timer.is_running:
            self.pause_timer()
        else:
            self.resume_timer()
        return self._timer.is_running

    # --- Answers ---

    def reveal_answer(self, question_id: str | None = None) -> None:
        question_id = self._resolve(question_id)
        if question_id is None:
            return
        self._tracker.reveal(question_id)
        self._on_answer_state_changed(question_id)

    def hide_answer(self, question_id: str | None = None) -> None:
        question_id = self._resolve(question_id)
        if question_id is None:
            return
        self._tracker.hide(question_id)
        self._on_answer_state_changed(question_id)

    def mark_correct(self, question_id: str | None = None) -> bool:
        """Mark correct; returns True the first time this question is ever correct."""
        question_id = self._resolve(question_id)
        if question_id is None:
            return False
        first_time = self._tracker.mark_correct(question_id)
        if first_time:
            self._listener.score_pulse(question_id, self._tracker.score())
        self._on_answer_state_changed(question_id)
        return first_time

    def mark_incorrect(self, question_id: str | None = None) -> None:
        """The "unmark correct" action."""
        question_id = self._resolve(question_id)
        if question_id is None:
            return
        self._tracker.mark_incorrect(question_id)
        self._on_answer_state_changed(question_id)

    def finish(self) -> bool:
        """Close out the quiz; returns False and lists gaps when questions remain."""
        snapshot = self._tracker.snapshot()
        if snapshot.all_answered:
            self._announce_completion()
            return True
        unanswered = [
            index + 1
            for index, question_id in enumerate(snapshot.order)
            if not snapshot.state_of(question_id).is_answered
        ]
        self._listener.session_incomplete(unanswered)
        return False

    # --- Achievements & submission ---

    def dismiss_achievement(self, achievement_id: str) -> bool:
        return self._feed.dismiss(achievement_id)

    def retry_submission(self) -> bool:
        return self._submitter.retry(self._tracker.snapshot(), self._timer.elapsed_seconds)

    # --- Lifecycle ---

    def close(self) -> None:
        """Stop timers and flush state. An in-flight submission is left alone."""
        if self._closed:
            return
        self._closed = True
        self._timer.close()
        self._progress.flush()
        self._feed.close()

    def reset(self) -> None:
        """Start over with a fresh session on the same quiz."""
        self._timer.reset()
        self._progress.clear()
        self._feed.close()
        self._tracker = AnswerTracker(question.id for question in self._quiz.questions)
        self._navigator = Navigator(self._quiz, can_jump=self._can_jump)
        self._gate = AccessGate(self._options)
        self._achievements = []
        self._unlocked_keys = set()
        self._completion_announced = False
        self._session_id = uuid4().hex
        self._submitter.reset(self._session_id)
        self._closed = False
        logger.info("Session for %s reset as %s", self._quiz.slug, self._session_id)
        self._listener.cursor_changed(self.cursor)

    # --- Internals ---

    def _on_answer_state_changed(self, question_id: str) -> None:
        self._listener.answer_state_changed(
            question_id,
            self._tracker.state(question_id),
            self._tracker.is_answer_visible(question_id),
        )
        snapshot = self._tracker.snapshot()
        elapsed = self._timer.elapsed_seconds

        context = EvaluationContext(
            quiz=self._quiz,
            snapshot=snapshot,
            cursor=self.cursor,
            elapsed_seconds=elapsed,
            session_id=self._session_id,
            timer_started=self._timer.has_started,
        )
        for achievement in evaluate_achievements(
            context, self._unlocked_keys, now=self._clock.now()
        ):
            self._unlock(achievement)

        self._submitter.on_answer_state_changed(snapshot, elapsed)

        if self._gate.register_answer_count(snapshot.answered_count):
            self._listener.upsell_prompt()

        if snapshot.all_answered:
            self._announce_completion()

        self._progress.schedule_save(self._build_progress)

    def _announce_completion(self) -> None:
        if self._completion_announced:
            return
        self._completion_announced = True
        logger.info("Quiz %s complete: %s/%s", self._quiz.slug, self.score, self.total_questions)
        self._listener.session_complete(self.score, self.total_questions)

    def _unlock(self, achievement: AchievementInstance) -> None:
        self._unlocked_keys.add(achievement.definition_key)
        self._achievements.append(achievement)
        if self._closed:
            return
        self._listener.achievement_unlocked(self._feed.push(achievement))

    def _after_navigation(self) -> None:
        cursor = self.cursor
        if cursor.screen is Screen.QUESTION:
            self._tracker.mark_viewed(self.current_question.id)
        self._listener.cursor_changed(cursor)
        self._progress.schedule_save(self._build_progress)

    def _can_jump(self, index: int) -> bool:
        target = self._quiz.questions[index].id
        return self._gate.allows_jump(target, self._tracker.viewed())

    def _resolve(self, question_id: str | None) -> str | None:
        """The explicit id, else the question on screen; None on a round intro."""
        if question_id is None:
            if self.cursor.screen is Screen.ROUND_INTRO:
                logger.debug("Ignored answer action on the round %s intro", self.cursor.round_number)
                return None
            return self.current_question.id
        self._tracker.state(question_id)
        return question_id

    def _handle_tick(self, elapsed_seconds: int) -> None:
        self._listener.timer_ticked(elapsed_seconds)

    def _handle_expired(self, achievement: AchievementInstance) -> None:
        self._listener.achievement_expired(achievement)

    def _handle_submission_outcome(self, outcome: SubmissionOutcome) -> None:
        if not outcome.success:
            self._listener.submission_failed(outcome.error or "Completion could not be saved.")
            return
        now = self._clock.now()
        for slug in outcome.unlocked_slugs:
            if slug in self._unlocked_keys:
                continue
            self._unlock(
                AchievementInstance(
                    id=f"{self._session_id}:{slug}",
                    definition_key=slug,
                    unlocked_at=now,
                    title=slug.replace("-", " ").replace("_", " ").title(),
                )
            )
        self._listener.submission_succeeded(list(outcome.unlocked_slugs))
        self._progress.schedule_save(self._build_progress)
        if self._closed:
            self._progress.flush()

    def _build_progress(self) -> SessionProgress:
        snapshot = self._tracker.snapshot()
        return SessionProgress(
            session_id=self._session_id,
            current_index=self.cursor.question_index,
            answer_states={
                qid: state for qid, state in snapshot.states.items() if state is not AnswerState.IDLE
            },
            visible_answers=sorted(snapshot.visible),
            viewed_questions=sorted(snapshot.viewed),
            ever_correct=sorted(snapshot.ever_correct),
            unlocked_achievements=sorted(self._unlocked_keys),
            last_updated_at=self._clock.now(),
        )

    def _restore_progress(self) -> str | None:
        progress = self._progress.load()
        if progress is None:
            return None
        try:
            self._tracker.restore(
                progress.answer_states,
                visible=progress.visible_answers,
                viewed=progress.viewed_questions,
                ever_correct=progress.ever_correct,
            )
            self._navigator.restore(progress.current_index)
        except (KeyError, IndexError):
            logger.warning("Saved progress for %s does not match this quiz; starting fresh", self._quiz.slug)
            self._tracker = AnswerTracker(question.id for question in self._quiz.questions)
            self._navigator = Navigator(self._quiz, can_jump=self._can_jump)
            self._progress.clear()
            return None

        self._unlocked_keys.update(progress.unlocked_achievements)
        self._gate.restore(self._tracker.answered_count())
        logger.info(
            "Restored progress for %s at question %s (%s answered)",
            self._quiz.slug,
            progress.current_index + 1,
            self._tracker.answered_count(),
        )
        return progress.session_id
