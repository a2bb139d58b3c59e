from __future__ import annotations

from quiz_player.core.models import AnswerState
from quiz_player.core.schemas import SessionProgress
from quiz_player.core.services.persisted_store import InMemoryStore
from quiz_player.core.services.progress_store import ProgressStore

from tests.fakes import FakeClock, ManualScheduler

_KEY = "quiz-progress-weekly"


def _progress(index: int) -> SessionProgress:
    return SessionProgress(
        session_id="s1",
        current_index=index,
        answer_states={"q1": AnswerState.CORRECT},
        visible_answers=["q1"],
        viewed_questions=["q1"],
        last_updated_at=FakeClock().now(),
    )


def test_saves_are_debounced() -> None:
    scheduler = ManualScheduler()
    store = InMemoryStore()
    progress = ProgressStore("weekly", store, scheduler)
    builds: list[int] = []

    def build(index: int):
        def _build() -> SessionProgress:
            builds.append(index)
            return _progress(index)

        return _build

    progress.schedule_save(build(0))
    scheduler.advance(0.5)
    progress.schedule_save(build(1))
    scheduler.advance(0.9)
    assert store.get(_KEY) is None
    scheduler.advance(0.1)
    assert builds == [1]
    assert progress.load().current_index == 1


def test_written_document_uses_camel_case() -> None:
    store = InMemoryStore()
    progress = ProgressStore("weekly", store, ManualScheduler())
    progress.schedule_save(lambda: _progress(2))
    progress.flush()
    raw = store.get(_KEY)
    assert '"currentIndex":2' in raw
    assert '"answerStates":{"q1":"correct"}' in raw


def test_flush_without_pending_save_is_a_no_op() -> None:
    store = InMemoryStore()
    ProgressStore("weekly", store, ManualScheduler()).flush()
    assert store.get(_KEY) is None


def test_clear_drops_pending_save_and_stored_snapshot() -> None:
    scheduler = ManualScheduler()
    store = InMemoryStore({_KEY: _progress(0).model_dump_json(by_alias=True)})
    progress = ProgressStore("weekly", store, scheduler)
    progress.schedule_save(lambda: _progress(3))
    progress.clear()
    scheduler.advance(5)
    assert store.get(_KEY) is None
    assert not progress.has_pending_save


def test_unreadable_snapshot_is_discarded() -> None:
    store = InMemoryStore({_KEY: '{"sessionId": "s1"}'})
    assert ProgressStore("weekly", store, ManualScheduler()).load() is None
