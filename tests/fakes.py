"""Deterministic collaborators shared by the test modules."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
import itertools
from typing import Callable

from quiz_player.core.models import CompletionRecord, Quiz, QuizQuestion, QuizRound, SubmissionOutcome
from quiz_player.core.services.persisted_store import StoreUnavailableError


@dataclass
class FakeClock:
    t: datetime = field(default_factory=lambda: datetime(2024, 6, 3, 12, 0, tzinfo=timezone.utc))

    def now(self) -> datetime:
        return self.t

    def advance(self, seconds: float) -> None:
        self.t += timedelta(seconds=seconds)


@dataclass
class _ManualTask:
    due: float
    seq: int
    callback: Callable[[], None]
    interval: float | None
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Virtual-time scheduler; nothing runs until ``advance`` is called."""

    def __init__(self, clock: FakeClock | None = None) -> None:
        self.now = 0.0
        self.clock = clock
        self._tasks: list[_ManualTask] = []
        self._seq = itertools.count()

    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> _ManualTask:
        return self._add(delay_seconds, callback, None)

    def call_every(self, interval_seconds: float, callback: Callable[[], None]) -> _ManualTask:
        return self._add(interval_seconds, callback, interval_seconds)

    def call_soon_threadsafe(self, callback: Callable[[], None]) -> None:
        callback()

    def pending(self) -> int:
        return sum(1 for task in self._tasks if not task.cancelled)

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while True:
            ready = [t for t in self._tasks if not t.cancelled and t.due <= target + 1e-9]
            if not ready:
                break
            task = min(ready, key=lambda t: (t.due, t.seq))
            self._move_to(task.due)
            if task.interval is not None:
                task.due += task.interval
            else:
                task.cancelled = True
            task.callback()
        self._move_to(target)
        self._tasks = [task for task in self._tasks if not task.cancelled]

    def _move_to(self, when: float) -> None:
        if self.clock is not None:
            self.clock.advance(when - self.now)
        self.now = when

    def _add(
        self, delay: float, callback: Callable[[], None], interval: float | None
    ) -> _ManualTask:
        task = _ManualTask(self.now + delay, next(self._seq), callback, interval)
        self._tasks.append(task)
        return task


class ScriptedCompletionClient:
    """Completion client answering from a script of outcomes.

    With ``hold=True`` responses are only delivered by ``respond()``, which
    lets tests observe the in-flight ``submitting`` state.
    """

    def __init__(self, outcomes: list[SubmissionOutcome] | None = None, hold: bool = False) -> None:
        self.outcomes = list(outcomes or [])
        self.hold = hold
        self.records: list[CompletionRecord] = []
        self._waiting: list[Callable[[SubmissionOutcome], None]] = []

    def submit(self, record: CompletionRecord, on_done: Callable[[SubmissionOutcome], None]) -> None:
        self.records.append(record)
        if self.hold:
            self._waiting.append(on_done)
            return
        on_done(self._next_outcome())

    def respond(self) -> None:
        on_done = self._waiting.pop(0)
        on_done(self._next_outcome())

    def _next_outcome(self) -> SubmissionOutcome:
        if self.outcomes:
            return self.outcomes.pop(0)
        return SubmissionOutcome(success=True)


class BrokenStore:
    """Store whose every operation fails like a full or denied disk."""

    def get(self, key: str) -> str | None:
        raise StoreUnavailableError("denied")

    def set(self, key: str, value: str) -> None:
        raise StoreUnavailableError("quota exceeded")

    def remove(self, key: str) -> None:
        raise StoreUnavailableError("denied")


def make_quiz(
    round_sizes: list[int],
    *,
    slug: str = "test-quiz",
    expected: int | None = None,
    week=None,
    titles: list[str] | None = None,
) -> Quiz:
    """Quiz with ``round_sizes[i]`` questions in round ``i + 1``; ids are q1, q2, ..."""
    questions: list[QuizQuestion] = []
    rounds: list[QuizRound] = []
    counter = 1
    for offset, size in enumerate(round_sizes):
        number = offset + 1
        title = titles[offset] if titles else f"Category {number}"
        rounds.append(QuizRound(number=number, title=title, blurb=f"Blurb {number}"))
        for _ in range(size):
            questions.append(
                QuizQuestion(
                    id=f"q{counter}",
                    prompt=f"Question {counter}?",
                    answer=f"Answer {counter}",
                    round_number=number,
                )
            )
            counter += 1
    return Quiz(
        slug=slug,
        title="Test Quiz",
        questions=tuple(questions),
        rounds=tuple(rounds),
        week=week,
        expected_question_count=expected if expected is not None else len(questions),
    )
