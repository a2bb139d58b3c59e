"""Queue of achievement notices that expire unless dismissed first."""

from __future__ import annotations

from datetime import timedelta
import logging
from typing import Callable

from quiz_player.constants.quiz_constants import ACHIEVEMENT_DISPLAY_SECONDS
from quiz_player.core.models import AchievementInstance, AchievementNotice
from quiz_player.core.services.clock import Clock
from quiz_player.core.services.scheduler import Scheduler, TaskHandle

logger = logging.getLogger(__name__)


class AchievementFeed:
    def __init__(
        self,
        scheduler: Scheduler,
        clock: Clock,
        on_expired: Callable[[AchievementInstance], None] | None = None,
        lifetime_seconds: float = ACHIEVEMENT_DISPLAY_SECONDS,
    ) -> None:
        self._scheduler = scheduler
        self._clock = clock
        self._on_expired = on_expired
        self._lifetime_seconds = lifetime_seconds
        self._notices: dict[str, AchievementNotice] = {}
        self._expiry_tasks: dict[str, TaskHandle] = {}

    @property
    def notices(self) -> list[AchievementNotice]:
        return list(self._notices.values())

    def push(self, achievement: AchievementInstance) -> AchievementNotice:
        notice = AchievementNotice(
            achievement=achievement,
            expires_at=self._clock.now() + timedelta(seconds=self._lifetime_seconds),
        )
        self._drop(achievement.id)
        self._notices[achievement.id] = notice
        self._expiry_tasks[achievement.id] = self._scheduler.call_later(
            self._lifetime_seconds, lambda: self._expire(achievement.id)
        )
        logger.info("Achievement unlocked: %s", achievement.definition_key)
        return notice

    def dismiss(self, achievement_id: str) -> bool:
        return self._drop(achievement_id) is not None

    def close(self) -> None:
        for task in self._expiry_tasks.values():
            task.cancel()
        self._expiry_tasks.clear()
        self._notices.clear()

    def _expire(self, achievement_id: str) -> None:
        self._expiry_tasks.pop(achievement_id, None)
        notice = self._notices.pop(achievement_id, None)
        if notice is not None and self._on_expired is not None:
            self._on_expired(notice.achievement)

    def _drop(self, achievement_id: str) -> AchievementNotice | None:
        task = self._expiry_tasks.pop(achievement_id, None)
        if task is not None:
            task.cancel()
        return self._notices.pop(achievement_id, None)
