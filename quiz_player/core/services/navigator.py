"""Round and question sequencing for the two-screen play flow."""

from __future__ import annotations

from typing import Callable

from quiz_player.core.models import Quiz, QuizQuestion, Screen, SessionCursor


class Navigator:
    """Moves a :class:`SessionCursor` through the quiz.

    Going forward into a new round lands on that round's intro screen;
    going backward always lands directly on the question.
    """

    def __init__(self, quiz: Quiz, can_jump: Callable[[int], bool] | None = None) -> None:
        if not quiz.questions:
            raise ValueError("Quiz must contain at least one question.")
        self._rounds: list[int] = [question.round_number for question in quiz.questions]
        self._round_starts: list[int] = [
            index
            for index, round_number in enumerate(self._rounds)
            if index == 0 or round_number != self._rounds[index - 1]
        ]
        self._questions = quiz.questions
        self._can_jump = can_jump
        self._cursor = self._intro_at(0)

    @property
    def cursor(self) -> SessionCursor:
        return self._cursor

    @property
    def total(self) -> int:
        return len(self._rounds)

    @property
    def round_boundaries(self) -> list[int]:
        """Zero-based indexes of the first question of each round."""
        return list(self._round_starts)

    @property
    def current_question(self) -> QuizQuestion:
        return self._questions[self._cursor.question_index]

    def is_at_last_question(self) -> bool:
        return self._cursor.question_index >= self.total - 1

    def is_round_start(self, index: int) -> bool:
        return index in self._round_starts

    def go_to_next(self) -> bool:
        """Advance one question. Returns False at the last question."""
        if self.is_at_last_question():
            return False
        current = self._cursor.question_index
        next_index = current + 1
        if self._rounds[next_index] != self._rounds[current]:
            self._cursor = self._intro_at(next_index)
        else:
            self._cursor = self._question_at(next_index)
        return True

    def go_to_previous(self) -> bool:
        index = self._cursor.question_index
        if index <= 0:
            return False
        self._cursor = self._question_at(index - 1)
        return True

    def jump_to(self, question_number: int) -> bool:
        """Go straight to a 1-based question; out-of-range or gated jumps are ignored."""
        if not 1 <= question_number <= self.total:
            return False
        index = question_number - 1
        if self._can_jump is not None and not self._can_jump(index):
            return False
        self._cursor = self._question_at(index)
        return True

    def start_round(self) -> bool:
        if self._cursor.screen is not Screen.ROUND_INTRO:
            return False
        self._cursor = self._question_at(self._cursor.question_index)
        return True

    def restore(self, index: int) -> None:
        """Resume at ``index``, showing its round intro first."""
        if not 0 <= index < self.total:
            raise IndexError(index)
        self._cursor = self._intro_at(index)

    def _intro_at(self, index: int) -> SessionCursor:
        return SessionCursor(Screen.ROUND_INTRO, self._rounds[index], index)

    def _question_at(self, index: int) -> SessionCursor:
        return SessionCursor(Screen.QUESTION, self._rounds[index], index)
