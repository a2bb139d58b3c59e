from __future__ import annotations

from datetime import timedelta

from quiz_player.core.models import AchievementInstance
from quiz_player.core.services.achievement_feed import AchievementFeed

from tests.fakes import FakeClock, ManualScheduler


def _achievement(key: str, clock: FakeClock) -> AchievementInstance:
    return AchievementInstance(id=f"s1:{key}", definition_key=key, unlocked_at=clock.now(), title=key)


def test_notice_expires_after_display_time() -> None:
    clock = FakeClock()
    scheduler = ManualScheduler(clock)
    expired: list[AchievementInstance] = []
    feed = AchievementFeed(scheduler, clock, on_expired=expired.append)
    notice = feed.push(_achievement("streak_5", clock))
    assert notice.expires_at == clock.now() + timedelta(seconds=6.5)
    scheduler.advance(6)
    assert len(feed.notices) == 1
    scheduler.advance(0.5)
    assert feed.notices == []
    assert [a.definition_key for a in expired] == ["streak_5"]


def test_dismiss_removes_notice_and_cancels_expiry() -> None:
    clock = FakeClock()
    scheduler = ManualScheduler(clock)
    expired: list[AchievementInstance] = []
    feed = AchievementFeed(scheduler, clock, on_expired=expired.append)
    feed.push(_achievement("perfect_quiz", clock))
    assert feed.dismiss("s1:perfect_quiz") is True
    assert feed.dismiss("s1:perfect_quiz") is False
    scheduler.advance(10)
    assert expired == []
    assert scheduler.pending() == 0


def test_close_cancels_everything() -> None:
    clock = FakeClock()
    scheduler = ManualScheduler(clock)
    feed = AchievementFeed(scheduler, clock)
    feed.push(_achievement("a", clock))
    feed.push(_achievement("b", clock))
    feed.close()
    assert feed.notices == []
    assert scheduler.pending() == 0
