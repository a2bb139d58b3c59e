from __future__ import annotations

import pytest

from quiz_player.core.models import AnswerState
from quiz_player.core.services.answer_tracker import AnswerTracker


def _tracker() -> AnswerTracker:
    return AnswerTracker(["q1", "q2", "q3"])


def test_reveal_moves_idle_to_revealed_once() -> None:
    tracker = _tracker()
    assert tracker.reveal("q1") is True
    assert tracker.state("q1") is AnswerState.REVEALED
    assert tracker.reveal("q1") is False


def test_hide_revealed_answer_marks_incorrect() -> None:
    tracker = _tracker()
    tracker.reveal("q1")
    tracker.hide("q1")
    assert tracker.state("q1") is AnswerState.INCORRECT
    assert not tracker.is_answer_visible("q1")


def test_hide_overwrites_correct() -> None:
    tracker = _tracker()
    tracker.reveal("q1")
    tracker.mark_correct("q1")
    tracker.hide("q1")
    assert tracker.state("q1") is AnswerState.INCORRECT


def test_hide_on_idle_question_does_nothing() -> None:
    tracker = _tracker()
    assert tracker.hide("q2") is False
    assert tracker.state("q2") is AnswerState.IDLE


def test_rereveal_shows_answer_but_keeps_incorrect() -> None:
    tracker = _tracker()
    tracker.reveal("q1")
    tracker.hide("q1")
    tracker.reveal("q1")
    assert tracker.is_answer_visible("q1")
    assert tracker.state("q1") is AnswerState.INCORRECT


def test_mark_correct_first_time_flag_only_once() -> None:
    tracker = _tracker()
    tracker.reveal("q1")
    assert tracker.mark_correct("q1") is True
    assert tracker.mark_correct("q1") is False
    assert tracker.state("q1") is AnswerState.CORRECT
    assert tracker.score() == 1


def test_first_time_flag_survives_unmark_and_remark() -> None:
    tracker = _tracker()
    tracker.reveal("q1")
    assert tracker.mark_correct("q1") is True
    tracker.mark_incorrect("q1")
    assert tracker.mark_correct("q1") is False


def test_marking_idle_question_passes_through_revealed() -> None:
    tracker = _tracker()
    tracker.mark_correct("q3")
    assert tracker.state("q3") is AnswerState.CORRECT
    assert tracker.is_answer_visible("q3")


def test_correct_and_incorrect_are_exclusive() -> None:
    tracker = _tracker()
    tracker.reveal("q1")
    tracker.mark_correct("q1")
    tracker.mark_incorrect("q1")
    snapshot = tracker.snapshot()
    assert snapshot.state_of("q1") is AnswerState.INCORRECT
    assert snapshot.correct_ids() == set()
    assert tracker.score() == 0


def test_mutations_add_to_viewed_set() -> None:
    tracker = _tracker()
    tracker.reveal("q1")
    tracker.mark_incorrect("q2")
    tracker.hide("q3")
    assert tracker.viewed() == {"q1", "q2", "q3"}


def test_answered_helpers() -> None:
    tracker = _tracker()
    tracker.reveal("q1")
    tracker.mark_correct("q2")
    tracker.mark_incorrect("q3")
    assert not tracker.is_answered("q1")
    assert tracker.is_answered("q2")
    assert tracker.answered_count() == 2
    assert not tracker.snapshot().all_answered
    tracker.mark_incorrect("q1")
    assert tracker.snapshot().all_answered


def test_unknown_question_raises_key_error() -> None:
    tracker = _tracker()
    with pytest.raises(KeyError):
        tracker.reveal("nope")


def test_restore_round_trips_snapshot_state() -> None:
    tracker = _tracker()
    tracker.restore(
        {"q1": AnswerState.CORRECT, "q2": AnswerState.INCORRECT},
        visible=["q1"],
        viewed=["q1", "q2"],
    )
    assert tracker.score() == 1
    assert tracker.is_answer_visible("q1")
    # Restored correct answers do not pulse again.
    assert tracker.mark_correct("q1") is False
