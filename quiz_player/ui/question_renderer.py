"""HTML for the round intro and question screens."""

from __future__ import annotations

from quiz_player.constants.ui_constants import (
    QUESTION_HEADING_TEMPLATE,
    ROUND_HEADING_TEMPLATE,
)
from quiz_player.core.markdown_renderer import renderer
from quiz_player.core.models import QuizQuestion, QuizRound, RoundType


def render_round_intro(quiz_round: QuizRound, question_count: int) -> str:
    """Render the intro card shown before a round's first question.

    Args:
        quiz_round: Round being introduced
        question_count: Number of questions in the round

    Returns:
        HTML fragment, wrapped by the window before display
    """
    heading = ROUND_HEADING_TEMPLATE.format(number=quiz_round.number)
    if quiz_round.round_type is RoundType.FINALE:
        heading = f"{heading} · Finale"
    plural = "question" if question_count == 1 else "questions"
    parts = [
        f"<h3>{renderer.plain(heading)}</h3>",
        f"<h1>{renderer.render_inline(quiz_round.title)}</h1>",
    ]
    if quiz_round.blurb:
        parts.append(renderer.render_fragment(quiz_round.blurb))
    parts.append(f"<p><em>{question_count} {plural}</em></p>")
    return "\n".join(parts)


def render_question(
    question: QuizQuestion,
    number: int,
    total: int,
    answer_visible: bool,
) -> str:
    """Render a question card, with the answer when it is revealed."""
    parts = [
        f"<h3>{renderer.plain(QUESTION_HEADING_TEMPLATE.format(number=number, total=total))}</h3>",
        renderer.render_fragment(question.prompt),
    ]
    attribution = question.attribution()
    if attribution:
        parts.append(f"<p><small>{renderer.plain(attribution)}</small></p>")
    if answer_visible:
        parts.append("<hr/>")
        parts.append(f"<h2>{renderer.render_inline(question.answer)}</h2>")
        if question.explanation:
            parts.append(renderer.render_fragment(question.explanation))
    return "\n".join(parts)
