"""Loading quizzes from text files, play-data JSON, or the quiz API.

Text file format (blocks separated by blank lines or '---'):

    TITLE: Weekly Quiz          header block, any order, all optional but TITLE
    SLUG: weekly-quiz           defaults to the file name
    COLOR: #FFD166
    WEEK: 2024-05-06            ISO date of the quiz week
    EXPECTED: 25                full-quiz question count for the perfect-quiz award

    ROUND 1: Geography          starts a round; following questions belong to it
    BLURB: Maps and capitals    optional
    TYPE: standard|finale       optional

    Q: Question text (markdown). Extra lines continue the question.
    A: Answer text. Extra lines continue the answer.
    BY: Ada Lovelace, Oslo Katedralskole   optional contributor
    STYLE: full|first_name|anonymous       optional, defaults to full
    EXPLAIN: Optional note shown with the answer.

Questions before any ROUND line belong to round 1. Question ids are assigned
sequentially in file order.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
import json
import logging
from pathlib import Path
import re
from typing import Any, Mapping

from pydantic import ValidationError
import requests

from quiz_player.constants.network_constants import (
    PLAY_DATA_ENDPOINT_TEMPLATE,
    REQUEST_TIMEOUT_SECONDS,
)
from quiz_player.constants.quiz_constants import DEFAULT_ACCENT_COLOR, STANDARD_QUIZ_QUESTION_COUNT
from quiz_player.core.models import DisplayStyle, Quiz, QuizQuestion, QuizRound, RoundType
from quiz_player.core.schemas import PlayData

logger = logging.getLogger(__name__)


class QuizImportError(Exception):
    """Raised when a quiz definition cannot be parsed."""


@dataclass(slots=True)
class ImportedQuiz:
    """Container for an imported quiz and where it came from."""

    source: str
    quiz: Quiz


_HEADER_KEYS = ("TITLE", "SLUG", "COLOR", "WEEK", "EXPECTED")
_ROUND_PATTERN = re.compile(r"^ROUND\s+(\d+)\s*:\s*(.*)$", re.IGNORECASE)
_SLUG_PATTERN = re.compile(r"[^a-z0-9]+")


def load_quiz_from_file(file_path: Path) -> ImportedQuiz:
    """Load a ``.txt`` quiz or a ``.json`` play-data document."""
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise QuizImportError(f"Cannot read quiz file {file_path}: {exc}") from exc

    if file_path.suffix.lower() == ".json":
        try:
            payload = json.loads(text)
        except ValueError as exc:
            raise QuizImportError(f"{file_path.name} is not valid JSON.") from exc
        quiz = load_quiz_from_play_data(payload)
    else:
        quiz = _parse_quiz_text(text, default_slug=_slugify(file_path.stem))
    return ImportedQuiz(source=str(file_path), quiz=quiz)


def load_quiz_from_play_data(payload: Mapping[str, Any] | PlayData) -> Quiz:
    if isinstance(payload, PlayData):
        play_data = payload
    else:
        try:
            play_data = PlayData.model_validate(payload)
        except ValidationError as exc:
            raise QuizImportError(f"Invalid play data: {exc.error_count()} problem(s)") from exc

    metadata = play_data.metadata
    people_rounds = {
        question.round_number
        for question in play_data.quiz_data.questions
        if question.is_people_question
    }
    rounds = tuple(
        QuizRound(
            number=item.number,
            title=item.title,
            blurb=item.blurb,
            round_type=RoundType.FINALE if item.number in people_rounds else RoundType.STANDARD,
        )
        for item in sorted(play_data.quiz_data.rounds, key=lambda item: item.number)
    )
    questions = tuple(
        QuizQuestion(
            id=item.id,
            prompt=item.question,
            answer=item.answer,
            round_number=item.round_number,
            submitted_by=item.submitted_by,
            display_style=_parse_display_style(item.submission_display_style),
            explanation=item.explanation,
        )
        for item in play_data.quiz_data.questions
    )
    return _build_quiz(
        slug=metadata.slug,
        title=metadata.title,
        questions=questions,
        rounds=rounds,
        accent_color=metadata.color_hex or DEFAULT_ACCENT_COLOR,
        week=_parse_week(metadata.week_iso) if metadata.week_iso else None,
        expected_question_count=STANDARD_QUIZ_QUESTION_COUNT,
    )


def fetch_quiz_play_data(
    base_url: str,
    slug: str,
    session: requests.Session | None = None,
    timeout: float = REQUEST_TIMEOUT_SECONDS,
) -> Quiz:
    """Download play data for ``slug`` from the quiz API."""
    url = base_url.rstrip("/") + PLAY_DATA_ENDPOINT_TEMPLATE.format(slug=slug)
    http = session or requests.Session()
    try:
        response = http.get(url, timeout=timeout)
    except requests.RequestException as exc:
        raise QuizImportError(f"Could not reach {url}: {exc}") from exc
    if response.status_code != 200:
        raise QuizImportError(f"Quiz '{slug}' unavailable (status {response.status_code}).")
    try:
        payload = response.json()
    except ValueError as exc:
        raise QuizImportError(f"Quiz '{slug}' returned malformed play data.") from exc
    logger.info("Fetched play data for %s", slug)
    return load_quiz_from_play_data(payload)


def _parse_quiz_text(text: str, default_slug: str) -> Quiz:
    headers: dict[str, str] = {}
    rounds: dict[int, QuizRound] = {}
    questions: list[QuizQuestion] = []
    current_round = 1

    for block in _split_blocks(text):
        first_line = block.splitlines()[0].strip()
        round_match = _ROUND_PATTERN.match(first_line)
        if round_match:
            quiz_round = _parse_round_block(block, round_match)
            if quiz_round.number in rounds:
                raise QuizImportError(f"Round {quiz_round.number} is defined twice.")
            rounds[quiz_round.number] = quiz_round
            current_round = quiz_round.number
        elif first_line.upper().startswith("Q:"):
            question_id = str(len(questions) + 1)
            questions.append(_parse_question_block(block, question_id, current_round))
        elif _header_key(first_line) is not None:
            headers.update(_parse_header_block(block))
        else:
            raise QuizImportError(f"Encountered text outside of a known section: '{first_line}'.")

    if not questions:
        raise QuizImportError("Quiz file did not contain any questions.")
    if "TITLE" not in headers:
        raise QuizImportError("Quiz file must define TITLE.")

    expected = STANDARD_QUIZ_QUESTION_COUNT
    if "EXPECTED" in headers:
        expected = _parse_positive_int(headers["EXPECTED"], "EXPECTED")

    return _build_quiz(
        slug=_slugify(headers.get("SLUG", "")) or default_slug,
        title=headers["TITLE"],
        questions=tuple(questions),
        rounds=tuple(rounds[number] for number in sorted(rounds)),
        accent_color=headers.get("COLOR") or DEFAULT_ACCENT_COLOR,
        week=_parse_week(headers["WEEK"]) if headers.get("WEEK") else None,
        expected_question_count=expected,
    )


def _build_quiz(*, questions: tuple[QuizQuestion, ...], **fields: Any) -> Quiz:
    ids = [question.id for question in questions]
    if len(set(ids)) != len(ids):
        raise QuizImportError("Question ids must be unique.")
    # Stable: file order is preserved within each round.
    ordered = tuple(sorted(questions, key=lambda question: question.round_number))
    return Quiz(questions=ordered, **fields)


def _split_blocks(text: str) -> list[str]:
    blocks: list[str] = []
    current_block: list[str] = []
    for raw_line in text.splitlines():
        stripped = raw_line.strip()
        if stripped == "---" or not stripped:
            if current_block:
                blocks.append("\n".join(current_block).strip())
                current_block = []
            continue
        current_block.append(raw_line)
    if current_block:
        blocks.append("\n".join(current_block).strip())
    return [block for block in blocks if block]


def _header_key(line: str) -> str | None:
    key = line.split(":", 1)[0].strip().upper()
    return key if key in _HEADER_KEYS and ":" in line else None


def _parse_header_block(block: str) -> dict[str, str]:
    headers: dict[str, str] = {}
    for raw_line in block.splitlines():
        line = raw_line.strip()
        key = _header_key(line)
        if key is None:
            raise QuizImportError(f"Unknown header line: '{line}'.")
        headers[key] = line.split(":", 1)[1].strip()
    return headers


def _parse_round_block(block: str, match: re.Match[str]) -> QuizRound:
    number = int(match.group(1))
    if number < 1:
        raise QuizImportError("Round numbers start at 1.")
    title = match.group(2).strip()
    if not title:
        raise QuizImportError(f"Round {number} needs a title.")
    blurb = ""
    round_type = RoundType.STANDARD

    for raw_line in block.splitlines()[1:]:
        line = raw_line.strip()
        upper = line.upper()
        if upper.startswith("BLURB:"):
            blurb = line.split(":", 1)[1].strip()
        elif upper.startswith("TYPE:"):
            value = line.split(":", 1)[1].strip().lower()
            try:
                round_type = RoundType(value)
            except ValueError as exc:
                raise QuizImportError(f"Round TYPE must be standard or finale, got '{value}'.") from exc
        elif blurb:
            blurb = f"{blurb}\n{line}"
        else:
            raise QuizImportError(f"Unexpected line in round {number}: '{line}'.")
    return QuizRound(number=number, title=title, blurb=blurb, round_type=round_type)


def _parse_question_block(block: str, question_id: str, round_number: int) -> QuizQuestion:
    sections: dict[str, list[str]] = {}
    current_section: str | None = None

    for raw_line in block.splitlines():
        line = raw_line.strip()
        marker, _, rest = line.partition(":")
        marker = marker.strip().upper()
        if ":" in line and marker in ("Q", "A", "BY", "STYLE", "EXPLAIN"):
            sections[marker] = [rest.strip()]
            current_section = marker
            continue
        if current_section in ("Q", "A", "EXPLAIN"):
            sections[current_section].append(line)
        else:
            raise QuizImportError(f"Encountered text outside of a known section: '{line}'.")

    prompt = "\n".join(sections.get("Q", [])).strip()
    answer = "\n".join(sections.get("A", [])).strip()
    if not prompt:
        raise QuizImportError("Question text missing (Q: ...)")
    if not answer:
        raise QuizImportError(f"Question '{prompt[:40]}' has no answer (A: ...)")

    explanation = "\n".join(sections.get("EXPLAIN", [])).strip() or None
    submitted_by = " ".join(sections.get("BY", [])).strip() or None
    style_values = sections.get("STYLE")
    display_style = _parse_display_style(style_values[0] if style_values else None)

    return QuizQuestion(
        id=question_id,
        prompt=prompt,
        answer=answer,
        round_number=round_number,
        submitted_by=submitted_by,
        display_style=display_style,
        explanation=explanation,
    )


def _parse_display_style(value: str | None) -> DisplayStyle:
    if not value:
        return DisplayStyle.FULL
    try:
        return DisplayStyle(value.strip().lower())
    except ValueError as exc:
        raise QuizImportError(f"Unknown submission display style '{value}'.") from exc


def _parse_week(value: str) -> date:
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError as exc:
        raise QuizImportError(f"WEEK must be an ISO date, got '{value}'.") from exc


def _parse_positive_int(value: str, label: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise QuizImportError(f"{label} must be an integer.") from exc
    if parsed <= 0:
        raise QuizImportError(f"{label} must be a positive integer.")
    return parsed


def _slugify(value: str) -> str:
    return _SLUG_PATTERN.sub("-", value.lower()).strip("-")
