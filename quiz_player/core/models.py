"""Domain models for the quiz play session engine."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

from quiz_player.constants.quiz_constants import (
    DEFAULT_ACCENT_COLOR,
    RESTRICTED_ANSWER_LIMIT,
    STANDARD_QUIZ_QUESTION_COUNT,
)


class Screen(str, Enum):
    """Which of the two play screens the cursor is on."""

    ROUND_INTRO = "round-intro"
    QUESTION = "question"


class RoundType(str, Enum):
    STANDARD = "standard"
    FINALE = "finale"


class AnswerState(str, Enum):
    """Per-question judgement state."""

    IDLE = "idle"
    REVEALED = "revealed"
    CORRECT = "correct"
    INCORRECT = "incorrect"

    @property
    def is_answered(self) -> bool:
        return self in (AnswerState.CORRECT, AnswerState.INCORRECT)


class SessionMode(str, Enum):
    FULL = "full"
    RESTRICTED = "restricted"


class ViewerTier(str, Enum):
    VISITOR = "visitor"
    FREE = "free"
    PREMIUM = "premium"


class SubmissionState(str, Enum):
    """Lifecycle of the completion submission guard."""

    PENDING = "pending"
    SUBMITTING = "submitting"
    SUBMITTED = "submitted"
    FAILED = "failed"


class DisplayStyle(str, Enum):
    """How a contributor's name is shown under a question."""

    FULL = "full"
    FIRST_NAME = "first_name"
    ANONYMOUS = "anonymous"


@dataclass(frozen=True, slots=True)
class QuizQuestion:
    """A single prompt/answer pair owned by a round."""

    id: str
    prompt: str
    answer: str
    round_number: int
    submitted_by: str | None = None
    display_style: DisplayStyle = DisplayStyle.FULL
    explanation: str | None = None

    def attribution(self) -> str | None:
        """Return the "Submitted by ..." line, or None when it should be hidden."""
        if not self.submitted_by or self.display_style is DisplayStyle.ANONYMOUS:
            return None

        parts = [part.strip() for part in self.submitted_by.split(",")]
        if len(parts) == 1:
            return f"Submitted by {parts[0]}"
        school = ", ".join(parts[1:])
        if self.display_style is DisplayStyle.FIRST_NAME:
            return f"Submitted by {parts[0]} from {school}"
        first_name = parts[0].split(" ")[-1]
        return f"Submitted by {first_name} from {school}"


@dataclass(frozen=True, slots=True)
class QuizRound:
    """Round metadata shown on the intro screen."""

    number: int
    title: str
    blurb: str = ""
    round_type: RoundType = RoundType.STANDARD

    @property
    def category(self) -> str:
        return self.title.lower()


@dataclass(frozen=True, slots=True)
class Quiz:
    """Immutable quiz definition loaded once per session."""

    slug: str
    title: str
    questions: tuple[QuizQuestion, ...]
    rounds: tuple[QuizRound, ...] = ()
    accent_color: str = DEFAULT_ACCENT_COLOR
    week: date | None = None
    expected_question_count: int = STANDARD_QUIZ_QUESTION_COUNT

    @property
    def question_count(self) -> int:
        return len(self.questions)

    def round_numbers(self) -> list[int]:
        """Distinct round numbers present in the questions, ascending."""
        return sorted({question.round_number for question in self.questions})

    def get_round(self, number: int) -> QuizRound:
        for quiz_round in self.rounds:
            if quiz_round.number == number:
                return quiz_round
        return QuizRound(number=number, title=f"Round {number}")

    def questions_in_round(self, number: int) -> list[QuizQuestion]:
        return [question for question in self.questions if question.round_number == number]

    def index_of(self, question_id: str) -> int:
        for index, question in enumerate(self.questions):
            if question.id == question_id:
                return index
        raise KeyError(question_id)


@dataclass(frozen=True, slots=True)
class SessionCursor:
    """Position of the player within the quiz.

    ``question_index`` is zero-based; ``question_number`` is what players see.
    """

    screen: Screen
    round_number: int
    question_index: int

    @property
    def question_number(self) -> int:
        return self.question_index + 1


@dataclass(frozen=True, slots=True)
class AchievementInstance:
    """An unlocked achievement; at most one per definition key per session."""

    id: str
    definition_key: str
    unlocked_at: datetime
    title: str
    description: str = ""


@dataclass(frozen=True, slots=True)
class AchievementNotice:
    """A queued unlock waiting to be shown until ``expires_at``."""

    achievement: AchievementInstance
    expires_at: datetime


@dataclass(frozen=True, slots=True)
class RoundScore:
    round_number: int
    category: str
    score: int
    total_questions: int


@dataclass(frozen=True, slots=True)
class CompletionRecord:
    """Summary submitted once per finished session."""

    quiz_slug: str
    score: int
    total_questions: int
    completion_time_seconds: int
    round_scores: tuple[RoundScore, ...]
    categories: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class CachedCompletion:
    """Best local result for a quiz."""

    score: int
    total_questions: int
    completed_at: datetime
    time_spent_seconds: int = 0


@dataclass(frozen=True, slots=True)
class Credentials:
    """Signed-in viewer identity used to authorise completion submissions."""

    user_id: str
    token: str


@dataclass(frozen=True, slots=True)
class SubmissionOutcome:
    """Result of one completion round-trip."""

    success: bool
    unlocked_slugs: tuple[str, ...] = ()
    error: str | None = None
    status_code: int | None = None


@dataclass(slots=True)
class SessionOptions:
    """Construction-time flags for a play session."""

    mode: SessionMode = SessionMode.FULL
    viewer_tier: ViewerTier = ViewerTier.FREE
    is_newest: bool = True
    max_questions: int | None = None  # Demo cap, restricted mode only
    answer_limit: int = RESTRICTED_ANSWER_LIMIT
    credentials: Credentials | None = None
