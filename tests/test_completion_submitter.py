from __future__ import annotations

from quiz_player.core.models import CachedCompletion, SubmissionOutcome, SubmissionState
from quiz_player.core.services.answer_tracker import AnswerTracker
from quiz_player.core.services.completion_cache import CompletionCache
from quiz_player.core.services.completion_submitter import (
    CompletionSubmitter,
    build_completion_record,
)
from quiz_player.core.services.persisted_store import InMemoryStore

from tests.fakes import FakeClock, ScriptedCompletionClient, make_quiz


def _answered_tracker(quiz, correct: set[str]) -> AnswerTracker:
    tracker = AnswerTracker(q.id for q in quiz.questions)
    for question in quiz.questions:
        if question.id in correct:
            tracker.mark_correct(question.id)
        else:
            tracker.mark_incorrect(question.id)
    return tracker


def _submitter(quiz, client, store=None, session_id="s1", outcomes=None):
    store = store if store is not None else InMemoryStore()
    received: list[SubmissionOutcome] = []
    submitter = CompletionSubmitter(
        quiz,
        client,
        CompletionCache(quiz.slug, store),
        store,
        FakeClock(),
        session_id,
        on_outcome=received.append,
    )
    return submitter, store, received


def test_build_record_groups_rounds_and_unique_categories() -> None:
    quiz = make_quiz([2, 1, 1], titles=["Science", "History", "Science"])
    tracker = _answered_tracker(quiz, {"q1", "q3"})
    record = build_completion_record(quiz, tracker.snapshot(), 95)
    assert record.score == 2
    assert record.total_questions == 4
    assert record.completion_time_seconds == 95
    assert [(r.round_number, r.score, r.total_questions) for r in record.round_scores] == [
        (1, 1, 2),
        (2, 1, 1),
        (3, 0, 1),
    ]
    assert record.categories == ("science", "history")


def test_does_nothing_until_every_question_answered() -> None:
    quiz = make_quiz([2])
    client = ScriptedCompletionClient()
    submitter, _, _ = _submitter(quiz, client)
    tracker = AnswerTracker(q.id for q in quiz.questions)
    tracker.mark_correct("q1")
    assert submitter.on_answer_state_changed(tracker.snapshot(), 10) is False
    assert client.records == []
    assert submitter.state is SubmissionState.PENDING


def test_submits_once_and_writes_marker() -> None:
    quiz = make_quiz([2])
    client = ScriptedCompletionClient()
    submitter, store, received = _submitter(quiz, client)
    snapshot = _answered_tracker(quiz, {"q1", "q2"}).snapshot()
    assert submitter.on_answer_state_changed(snapshot, 10) is True
    assert submitter.on_answer_state_changed(snapshot, 11) is False
    assert len(client.records) == 1
    assert submitter.state is SubmissionState.SUBMITTED
    assert store.get("quiz-submitted-test-quiz") == "s1"
    assert [o.success for o in received] == [True]


def test_in_flight_submission_is_not_duplicated() -> None:
    quiz = make_quiz([1])
    client = ScriptedCompletionClient(hold=True)
    submitter, _, _ = _submitter(quiz, client)
    snapshot = _answered_tracker(quiz, {"q1"}).snapshot()
    submitter.on_answer_state_changed(snapshot, 5)
    assert submitter.state is SubmissionState.SUBMITTING
    submitter.on_answer_state_changed(snapshot, 6)
    assert len(client.records) == 1
    client.respond()
    assert submitter.state is SubmissionState.SUBMITTED


def test_failure_allows_a_later_attempt() -> None:
    quiz = make_quiz([1])
    client = ScriptedCompletionClient([SubmissionOutcome(success=False, error="offline")])
    submitter, store, received = _submitter(quiz, client)
    snapshot = _answered_tracker(quiz, {"q1"}).snapshot()
    submitter.on_answer_state_changed(snapshot, 5)
    assert submitter.state is SubmissionState.FAILED
    assert store.get("quiz-submitted-test-quiz") is None
    assert submitter.retry(snapshot, 6) is True
    assert submitter.state is SubmissionState.SUBMITTED
    assert submitter.attempts == 2
    assert [o.success for o in received] == [False, True]


def test_retry_only_after_failure() -> None:
    quiz = make_quiz([1])
    submitter, _, _ = _submitter(quiz, ScriptedCompletionClient())
    snapshot = _answered_tracker(quiz, {"q1"}).snapshot()
    assert submitter.retry(snapshot, 1) is False


def test_marker_for_same_session_prevents_resubmission() -> None:
    quiz = make_quiz([1])
    store = InMemoryStore({"quiz-submitted-test-quiz": "s1"})
    client = ScriptedCompletionClient()
    submitter, _, _ = _submitter(quiz, client, store=store)
    assert submitter.state is SubmissionState.SUBMITTED
    submitter.on_answer_state_changed(_answered_tracker(quiz, {"q1"}).snapshot(), 3)
    assert client.records == []


def test_marker_for_other_session_is_ignored() -> None:
    quiz = make_quiz([1])
    store = InMemoryStore({"quiz-submitted-test-quiz": "old-session"})
    submitter, _, _ = _submitter(quiz, ScriptedCompletionClient(), store=store)
    assert submitter.state is SubmissionState.PENDING


def test_without_client_only_the_cache_is_updated() -> None:
    quiz = make_quiz([2])
    submitter, store, _ = _submitter(quiz, None)
    submitter.on_answer_state_changed(_answered_tracker(quiz, {"q1"}).snapshot(), 40)
    assert submitter.state is SubmissionState.PENDING
    cached = CompletionCache(quiz.slug, store).load()
    assert cached is not None
    assert (cached.score, cached.total_questions, cached.time_spent_seconds) == (1, 2, 40)


def test_reset_clears_marker_and_state() -> None:
    quiz = make_quiz([1])
    submitter, store, _ = _submitter(quiz, ScriptedCompletionClient())
    submitter.on_answer_state_changed(_answered_tracker(quiz, {"q1"}).snapshot(), 3)
    submitter.reset("s2")
    assert submitter.state is SubmissionState.PENDING
    assert submitter.attempts == 0
    assert store.get("quiz-submitted-test-quiz") is None


def test_cache_keeps_best_score_only() -> None:
    cache = CompletionCache("weekly", InMemoryStore())
    now = FakeClock().now()
    assert cache.record(CachedCompletion(score=3, total_questions=5, completed_at=now)) is True
    assert cache.record(CachedCompletion(score=3, total_questions=5, completed_at=now)) is False
    assert cache.record(CachedCompletion(score=2, total_questions=5, completed_at=now)) is False
    assert cache.record(CachedCompletion(score=4, total_questions=5, completed_at=now)) is True
    assert cache.load().score == 4


def test_cache_ignores_unreadable_entry() -> None:
    store = InMemoryStore({"quiz-completion-weekly": "{broken"})
    assert CompletionCache("weekly", store).load() is None
