"""Pydantic wire schemas shared by the HTTP client, the server and persistence.

All payloads use camelCase on the wire; Python code addresses fields by their
snake_case names.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from quiz_player.core.models import AnswerState, CachedCompletion, CompletionRecord, RoundScore


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Completion ---


class RoundScorePayload(CamelModel):
    round_number: int = Field(ge=1)
    category: str
    score: int = Field(ge=0)
    total_questions: int = Field(ge=0)


class CompletionRequest(CamelModel):
    """Body of ``POST /api/quiz/completion``."""

    quiz_slug: str = Field(min_length=1)
    score: int = Field(ge=0)
    total_questions: int = Field(gt=0)
    completion_time_seconds: int = Field(ge=0)
    round_scores: list[RoundScorePayload] = Field(default_factory=list)
    categories: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _score_within_total(self) -> "CompletionRequest":
        if self.score > self.total_questions:
            raise ValueError("score cannot exceed totalQuestions")
        return self

    @classmethod
    def from_record(cls, record: CompletionRecord) -> "CompletionRequest":
        return cls(
            quiz_slug=record.quiz_slug,
            score=record.score,
            total_questions=record.total_questions,
            completion_time_seconds=record.completion_time_seconds,
            round_scores=[
                RoundScorePayload(
                    round_number=item.round_number,
                    category=item.category,
                    score=item.score,
                    total_questions=item.total_questions,
                )
                for item in record.round_scores
            ],
            categories=list(record.categories),
        )

    def to_record(self) -> CompletionRecord:
        return CompletionRecord(
            quiz_slug=self.quiz_slug,
            score=self.score,
            total_questions=self.total_questions,
            completion_time_seconds=self.completion_time_seconds,
            round_scores=tuple(
                RoundScore(
                    round_number=item.round_number,
                    category=item.category,
                    score=item.score,
                    total_questions=item.total_questions,
                )
                for item in self.round_scores
            ),
            categories=tuple(self.categories),
        )


class StoredCompletion(CompletionRequest):
    """Server-side view of a user's best completion for one quiz."""

    user_id: str
    completed_at: datetime


class CompletionResponse(CamelModel):
    success: bool = True
    completion: StoredCompletion | None = None
    newly_unlocked_achievements: list[str] = Field(default_factory=list)


# --- Play data ---


class PlayQuestion(CamelModel):
    id: str
    question: str
    answer: str
    round_number: int = Field(ge=1)
    explanation: str | None = None
    is_people_question: bool = False
    submitted_by: str | None = None
    submission_display_style: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: object) -> object:
        # Database-backed quizzes use integer ids.
        if isinstance(value, int):
            return str(value)
        return value


class PlayRound(CamelModel):
    number: int = Field(ge=1)
    title: str
    blurb: str = ""


class PlayQuizData(CamelModel):
    questions: list[PlayQuestion]
    rounds: list[PlayRound] = Field(default_factory=list)


class PlayMetadata(CamelModel):
    slug: str = Field(min_length=1)
    title: str
    blurb: str | None = None
    week_iso: str | None = Field(default=None, alias="weekISO")
    color_hex: str | None = None
    status: str | None = None
    is_custom: bool = False


class PlayData(CamelModel):
    """Document served by ``GET /api/quizzes/{slug}/play-data``."""

    quiz_data: PlayQuizData
    metadata: PlayMetadata


# --- Local persistence ---


class CachedCompletionPayload(CamelModel):
    score: int
    total_questions: int
    completed_at: datetime
    time_spent: int = 0

    @classmethod
    def from_cached(cls, cached: CachedCompletion) -> "CachedCompletionPayload":
        return cls(
            score=cached.score,
            total_questions=cached.total_questions,
            completed_at=cached.completed_at,
            time_spent=cached.time_spent_seconds,
        )

    def to_cached(self) -> CachedCompletion:
        return CachedCompletion(
            score=self.score,
            total_questions=self.total_questions,
            completed_at=self.completed_at,
            time_spent_seconds=self.time_spent,
        )


class SessionProgress(CamelModel):
    """Resumable snapshot of a session on this device."""

    session_id: str
    current_index: int = Field(ge=0)
    answer_states: dict[str, AnswerState] = Field(default_factory=dict)
    visible_answers: list[str] = Field(default_factory=list)
    viewed_questions: list[str] = Field(default_factory=list)
    ever_correct: list[str] = Field(default_factory=list)
    unlocked_achievements: list[str] = Field(default_factory=list)
    last_updated_at: datetime
