"""Convert loaded quizzes back into the play-data document format."""

from __future__ import annotations

from pathlib import Path

from quiz_player.core.models import DisplayStyle, Quiz, RoundType
from quiz_player.core.schemas import (
    PlayData,
    PlayMetadata,
    PlayQuestion,
    PlayQuizData,
    PlayRound,
)


def quiz_to_play_data(quiz: Quiz) -> PlayData:
    """Build the document served at ``/api/quizzes/{slug}/play-data``."""
    finale_rounds = {
        number
        for number in quiz.round_numbers()
        if quiz.get_round(number).round_type is RoundType.FINALE
    }
    questions = [
        PlayQuestion(
            id=question.id,
            question=question.prompt,
            answer=question.answer,
            round_number=question.round_number,
            explanation=question.explanation,
            is_people_question=question.round_number in finale_rounds,
            submitted_by=question.submitted_by,
            submission_display_style=None
            if question.display_style is DisplayStyle.FULL
            else question.display_style.value,
        )
        for question in quiz.questions
    ]
    rounds = [
        PlayRound(number=number, title=quiz.get_round(number).title, blurb=quiz.get_round(number).blurb)
        for number in quiz.round_numbers()
    ]
    metadata = PlayMetadata(
        slug=quiz.slug,
        title=quiz.title,
        week_iso=quiz.week.isoformat() if quiz.week else None,
        color_hex=quiz.accent_color,
        status="published",
    )
    return PlayData(quiz_data=PlayQuizData(questions=questions, rounds=rounds), metadata=metadata)


def save_play_data(file_path: Path, quiz: Quiz) -> None:
    """Write ``quiz`` as play-data JSON, loadable again with ``load_quiz_from_file``."""
    file_path = file_path.resolve()
    file_path.parent.mkdir(parents=True, exist_ok=True)
    document = quiz_to_play_data(quiz).model_dump_json(by_alias=True, indent=2)
    file_path.write_text(document + "\n", encoding="utf-8")
