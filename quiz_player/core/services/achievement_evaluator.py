"""Rule-based achievement detection.

``evaluate_achievements`` is a pure function: it inspects a tracker snapshot
plus timing information and returns only the unlocks whose dedup key is not
already in the unlocked set. Calling it twice with the same inputs yields
nothing new the second time once the caller has recorded the first result.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Collection, Iterable, Protocol, Sequence

from quiz_player.constants.quiz_constants import (
    SPEED_RUN_MAX_SECONDS,
    STREAK_LENGTH,
    TIME_TRAVELLER_MIN_WEEKS,
)
from quiz_player.core.models import AchievementInstance, AnswerState, Quiz, SessionCursor
from quiz_player.core.services.answer_tracker import TrackerSnapshot


@dataclass(frozen=True, slots=True)
class EvaluationContext:
    quiz: Quiz
    snapshot: TrackerSnapshot
    cursor: SessionCursor
    elapsed_seconds: int
    session_id: str
    timer_started: bool = False


@dataclass(frozen=True, slots=True)
class Unlock:
    key: str
    title: str
    description: str


class AchievementRule(Protocol):
    def evaluate(self, context: EvaluationContext, now: datetime) -> Iterable[Unlock]:
        ...


class PerfectRoundRule:
    """Every question in a round marked correct."""

    def evaluate(self, context: EvaluationContext, now: datetime) -> Iterable[Unlock]:
        for round_number in context.quiz.round_numbers():
            questions = context.quiz.questions_in_round(round_number)
            if all(context.snapshot.state_of(q.id) is AnswerState.CORRECT for q in questions):
                title = context.quiz.get_round(round_number).title
                yield Unlock(
                    key=f"perfect_round_{round_number}",
                    title=f"Perfect {title}",
                    description=f"Every question in round {round_number} answered correctly.",
                )


class PerfectQuizRule:
    """Every question correct on a full-length quiz."""

    def evaluate(self, context: EvaluationContext, now: datetime) -> Iterable[Unlock]:
        quiz = context.quiz
        if quiz.question_count != quiz.expected_question_count:
            return
        if context.snapshot.score == quiz.question_count:
            yield Unlock("perfect_quiz", "Flawless", "Every question in the quiz answered correctly.")


@dataclass(frozen=True, slots=True)
class StreakRule:
    """``length`` consecutive correct answers in quiz order."""

    length: int = STREAK_LENGTH

    def evaluate(self, context: EvaluationContext, now: datetime) -> Iterable[Unlock]:
        run = 0
        for question_id in context.snapshot.order:
            if context.snapshot.state_of(question_id) is AnswerState.CORRECT:
                run += 1
                if run >= self.length:
                    yield Unlock(
                        key=f"streak_{self.length}",
                        title="On a Roll",
                        description=f"{self.length} correct answers in a row.",
                    )
                    return
            else:
                run = 0


@dataclass(frozen=True, slots=True)
class SpeedRunRule:
    """Answered every question within ``max_seconds`` of timed play."""

    max_seconds: int = SPEED_RUN_MAX_SECONDS

    def evaluate(self, context: EvaluationContext, now: datetime) -> Iterable[Unlock]:
        if not context.timer_started or not context.snapshot.all_answered:
            return
        if context.elapsed_seconds <= self.max_seconds:
            yield Unlock(
                key="blitzkrieg",
                title="Blitzkrieg",
                description=f"Finished the quiz in under {self.max_seconds // 60} minutes.",
            )


@dataclass(frozen=True, slots=True)
class TimeTravellerRule:
    """Finished a quiz from at least ``min_weeks`` weeks ago."""

    min_weeks: int = TIME_TRAVELLER_MIN_WEEKS

    def evaluate(self, context: EvaluationContext, now: datetime) -> Iterable[Unlock]:
        week = context.quiz.week
        if week is None or not context.snapshot.all_answered:
            return
        if now.date() - week >= timedelta(weeks=self.min_weeks):
            yield Unlock(
                key="time_traveller",
                title="Time Traveller",
                description=f"Completed a quiz from {self.min_weeks}+ weeks ago.",
            )


DEFAULT_RULES: tuple[AchievementRule, ...] = (
    PerfectRoundRule(),
    PerfectQuizRule(),
    StreakRule(),
    SpeedRunRule(),
    TimeTravellerRule(),
)


def evaluate_achievements(
    context: EvaluationContext,
    unlocked_keys: Collection[str],
    *,
    now: datetime,
    rules: Sequence[AchievementRule] = DEFAULT_RULES,
) -> list[AchievementInstance]:
    """Return newly unlocked achievements, never repeating a known key."""
    seen = set(unlocked_keys)
    unlocked: list[AchievementInstance] = []
    for rule in rules:
        for unlock in rule.evaluate(context, now):
            if unlock.key in seen:
                continue
            seen.add(unlock.key)
            unlocked.append(
                AchievementInstance(
                    id=f"{context.session_id}:{unlock.key}",
                    definition_key=unlock.key,
                    unlocked_at=now,
                    title=unlock.title,
                    description=unlock.description,
                )
            )
    return unlocked
