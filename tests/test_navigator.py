from __future__ import annotations

from quiz_player.core.models import Screen
from quiz_player.core.services.navigator import Navigator

from tests.fakes import make_quiz


def _cursor_round_matches(navigator: Navigator) -> bool:
    return navigator.current_question.round_number == navigator.cursor.round_number


def test_starts_on_round_one_intro() -> None:
    navigator = Navigator(make_quiz([2, 2]))
    assert navigator.cursor.screen is Screen.ROUND_INTRO
    assert navigator.cursor.round_number == 1
    assert navigator.cursor.question_index == 0


def test_start_round_moves_to_question_without_advancing() -> None:
    navigator = Navigator(make_quiz([2, 2]))
    assert navigator.start_round() is True
    assert navigator.cursor.screen is Screen.QUESTION
    assert navigator.cursor.question_index == 0
    assert navigator.start_round() is False


def test_next_within_round_stays_on_question_screen() -> None:
    navigator = Navigator(make_quiz([2, 2]))
    navigator.start_round()
    navigator.go_to_next()
    assert navigator.cursor.screen is Screen.QUESTION
    assert navigator.cursor.question_index == 1


def test_next_across_boundary_shows_intro() -> None:
    navigator = Navigator(make_quiz([2, 2]))
    navigator.start_round()
    navigator.go_to_next()
    navigator.go_to_next()
    assert navigator.cursor.screen is Screen.ROUND_INTRO
    assert navigator.cursor.round_number == 2
    assert navigator.cursor.question_index == 2
    assert _cursor_round_matches(navigator)


def test_single_question_round_gets_intro() -> None:
    navigator = Navigator(make_quiz([1, 1, 1]))
    navigator.start_round()
    navigator.go_to_next()
    assert navigator.cursor.screen is Screen.ROUND_INTRO
    assert navigator.cursor.round_number == 2


def test_previous_skips_intro() -> None:
    navigator = Navigator(make_quiz([2, 2]))
    navigator.start_round()
    navigator.go_to_next()
    navigator.go_to_next()
    navigator.start_round()
    navigator.go_to_previous()
    assert navigator.cursor.screen is Screen.QUESTION
    assert navigator.cursor.round_number == 1
    assert navigator.cursor.question_index == 1


def test_previous_at_first_question_is_noop() -> None:
    navigator = Navigator(make_quiz([2]))
    assert navigator.go_to_previous() is False
    assert navigator.cursor.question_index == 0


def test_next_at_last_question_reports_end() -> None:
    navigator = Navigator(make_quiz([1]))
    navigator.start_round()
    assert navigator.is_at_last_question()
    assert navigator.go_to_next() is False
    assert navigator.cursor.question_index == 0


def test_jump_is_one_based_and_lands_on_question() -> None:
    navigator = Navigator(make_quiz([2, 2]))
    assert navigator.jump_to(3) is True
    assert navigator.cursor.screen is Screen.QUESTION
    assert navigator.cursor.question_index == 2
    assert navigator.cursor.round_number == 2


def test_out_of_range_jump_is_rejected() -> None:
    navigator = Navigator(make_quiz([2, 2]))
    before = navigator.cursor
    assert navigator.jump_to(0) is False
    assert navigator.jump_to(5) is False
    assert navigator.cursor == before


def test_jump_guard_can_reject() -> None:
    navigator = Navigator(make_quiz([2, 2]), can_jump=lambda index: index < 2)
    assert navigator.jump_to(2) is True
    assert navigator.jump_to(4) is False
    assert navigator.cursor.question_index == 1


def test_cursor_round_always_matches_question() -> None:
    navigator = Navigator(make_quiz([1, 3, 2]))
    for step in ["next", "start", "next", "next", "prev", "jump6", "prev", "next", "jump1"]:
        if step == "next":
            navigator.go_to_next()
        elif step == "prev":
            navigator.go_to_previous()
        elif step == "start":
            navigator.start_round()
        else:
            navigator.jump_to(int(step[4:]))
        assert _cursor_round_matches(navigator)


def test_round_boundaries_and_restore() -> None:
    navigator = Navigator(make_quiz([2, 3, 1]))
    assert navigator.round_boundaries == [0, 2, 5]
    navigator.restore(3)
    assert navigator.cursor.screen is Screen.ROUND_INTRO
    assert navigator.cursor.round_number == 2
    assert navigator.cursor.question_index == 3
