"""Per-question answer state for a single play session."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping

from quiz_player.core.models import AnswerState


@dataclass(frozen=True, slots=True)
class TrackerSnapshot:
    """Read-only copy of the tracker, safe to hand to evaluators."""

    order: tuple[str, ...]
    states: Mapping[str, AnswerState]
    visible: frozenset[str]
    viewed: frozenset[str]
    ever_correct: frozenset[str]

    def state_of(self, question_id: str) -> AnswerState:
        return self.states[question_id]

    @property
    def score(self) -> int:
        return sum(1 for state in self.states.values() if state is AnswerState.CORRECT)

    @property
    def answered_count(self) -> int:
        return sum(1 for state in self.states.values() if state.is_answered)

    @property
    def all_answered(self) -> bool:
        return all(self.states[question_id].is_answered for question_id in self.order)

    def correct_ids(self) -> set[str]:
        return {qid for qid, state in self.states.items() if state is AnswerState.CORRECT}


class AnswerTracker:
    """Tracks reveal/correct/incorrect state and which questions were seen.

    A question only reaches ``correct`` or ``incorrect`` by way of
    ``revealed``; marking an idle question reveals it first. Answer visibility
    is tracked separately from the judgement so a judged answer can be shown
    again without changing its state.
    """

    def __init__(self, question_ids: Iterable[str]) -> None:
        self._order: tuple[str, ...] = tuple(question_ids)
        self._states: dict[str, AnswerState] = {qid: AnswerState.IDLE for qid in self._order}
        self._visible: set[str] = set()
        self._viewed: set[str] = set()
        self._ever_correct: set[str] = set()

    def state(self, question_id: str) -> AnswerState:
        self._require(question_id)
        return self._states[question_id]

    def is_answer_visible(self, question_id: str) -> bool:
        self._require(question_id)
        return question_id in self._visible

    def reveal(self, question_id: str) -> bool:
        """Show the answer. Returns True when anything changed."""
        self._touch(question_id)
        changed = question_id not in self._visible
        self._visible.add(question_id)
        if self._states[question_id] is AnswerState.IDLE:
            self._states[question_id] = AnswerState.REVEALED
            changed = True
        return changed

    def hide(self, question_id: str) -> bool:
        """Hide a shown answer, which counts as judging it incorrect."""
        self._touch(question_id)
        state = self._states[question_id]
        if state is AnswerState.IDLE:
            return False
        changed = question_id in self._visible or state is not AnswerState.INCORRECT
        self._visible.discard(question_id)
        self._states[question_id] = AnswerState.INCORRECT
        return changed

    def mark_correct(self, question_id: str) -> bool:
        """Judge the answer correct. Returns True only the first time ever."""
        self._pass_through_revealed(question_id)
        self._states[question_id] = AnswerState.CORRECT
        if question_id in self._ever_correct:
            return False
        self._ever_correct.add(question_id)
        return True

    def mark_incorrect(self, question_id: str) -> None:
        self._pass_through_revealed(question_id)
        self._states[question_id] = AnswerState.INCORRECT

    def mark_viewed(self, question_id: str) -> None:
        self._touch(question_id)

    def is_answered(self, question_id: str) -> bool:
        return self.state(question_id).is_answered

    def score(self) -> int:
        return sum(1 for state in self._states.values() if state is AnswerState.CORRECT)

    def answered_count(self) -> int:
        return sum(1 for state in self._states.values() if state.is_answered)

    def viewed(self) -> frozenset[str]:
        return frozenset(self._viewed)

    def snapshot(self) -> TrackerSnapshot:
        return TrackerSnapshot(
            order=self._order,
            states=dict(self._states),
            visible=frozenset(self._visible),
            viewed=frozenset(self._viewed),
            ever_correct=frozenset(self._ever_correct),
        )

    def restore(
        self,
        states: Mapping[str, AnswerState],
        visible: Iterable[str] = (),
        viewed: Iterable[str] = (),
        ever_correct: Iterable[str] = (),
    ) -> None:
        """Load previously saved state. Unknown ids raise ``KeyError``."""
        for question_id, state in states.items():
            self._require(question_id)
            self._states[question_id] = AnswerState(state)
        for question_id in visible:
            self._require(question_id)
            self._visible.add(question_id)
        for question_id in viewed:
            self._require(question_id)
            self._viewed.add(question_id)
        for question_id in ever_correct:
            self._require(question_id)
            self._ever_correct.add(question_id)
        # Anything restored as correct has already been correct once.
        self._ever_correct.update(self.snapshot().correct_ids())

    def _pass_through_revealed(self, question_id: str) -> None:
        self._touch(question_id)
        if self._states[question_id] is AnswerState.IDLE:
            self._states[question_id] = AnswerState.REVEALED
            self._visible.add(question_id)

    def _touch(self, question_id: str) -> None:
        self._require(question_id)
        self._viewed.add(question_id)

    def _require(self, question_id: str) -> None:
        if question_id not in self._states:
            raise KeyError(question_id)
