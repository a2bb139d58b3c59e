from __future__ import annotations

from quiz_player.core.models import AnswerState, DisplayStyle, QuizQuestion, QuizRound

from tests.fakes import make_quiz


def _question(submitted_by: str | None, style: DisplayStyle = DisplayStyle.FULL) -> QuizQuestion:
    return QuizQuestion(
        id="1", prompt="?", answer="!", round_number=1, submitted_by=submitted_by, display_style=style
    )


def test_attribution_full_style_uses_last_word_of_name() -> None:
    question = _question("Ada Lovelace, Oslo Katedralskole")
    assert question.attribution() == "Submitted by Lovelace from Oslo Katedralskole"


def test_attribution_first_name_style_keeps_name_part() -> None:
    question = _question("Grace Hopper, Arlington, Virginia", DisplayStyle.FIRST_NAME)
    assert question.attribution() == "Submitted by Grace Hopper from Arlington, Virginia"


def test_attribution_hidden_when_anonymous_or_missing() -> None:
    assert _question("Someone, Somewhere", DisplayStyle.ANONYMOUS).attribution() is None
    assert _question(None).attribution() is None


def test_attribution_without_school() -> None:
    assert _question("Ada").attribution() == "Submitted by Ada"


def test_round_category_is_lower_cased_title() -> None:
    assert QuizRound(number=1, title="General Knowledge").category == "general knowledge"


def test_quiz_synthesizes_missing_round_definition() -> None:
    quiz = make_quiz([1, 1])
    missing = quiz.get_round(7)
    assert missing.title == "Round 7"
    assert quiz.get_round(2).title == "Category 2"


def test_quiz_round_helpers() -> None:
    quiz = make_quiz([2, 3])
    assert quiz.round_numbers() == [1, 2]
    assert [q.id for q in quiz.questions_in_round(2)] == ["q3", "q4", "q5"]
    assert quiz.index_of("q4") == 3


def test_answer_state_is_answered() -> None:
    assert AnswerState.CORRECT.is_answered
    assert AnswerState.INCORRECT.is_answered
    assert not AnswerState.REVEALED.is_answered
    assert not AnswerState.IDLE.is_answered
