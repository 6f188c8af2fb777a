"""
AchievementService - Achievements for the Logged-in User

Wraps the achievement evaluator with session handling and notification
dispatch.
"""

import logging
from typing import Optional

from active_break.config import DEFAULT_TIMEZONE, NEAR_COMPLETION_THRESHOLD
from active_break.db import queries
from active_break.db.connection import Database
from active_break.exceptions import ActiveBreakError
from active_break.gamification.achievement_system import (
    calculate_achievement_stats,
    evaluate_achievements,
    get_user_achievements,
)
from active_break.models.achievement import Achievement, UserAchievementProgress
from active_break.services.notification_service import NotificationService
from active_break.services.user_service import UserService

logger = logging.getLogger(__name__)


class AchievementService:
    """
    Service for achievements.

    Responsibilities:
    - Evaluating the catalog after user activity
    - Notifying about new unlocks
    - Progress listing and statistics
    """

    def __init__(
        self,
        db: Database,
        user_service: UserService,
        notifier: NotificationService,
        near_completion_threshold: float = NEAR_COMPLETION_THRESHOLD,
        tz_name: str = DEFAULT_TIMEZONE
    ):
        self.db = db
        self.user_service = user_service
        self.notifier = notifier
        self.near_completion_threshold = near_completion_threshold
        self.tz_name = tz_name

    def _current_user_id(self) -> Optional[int]:
        user = self.user_service.current_user
        return user.user_id if user else None

    async def check_achievements(self) -> list[Achievement]:
        """
        Evaluate achievements for the logged-in user.

        Returns:
            Newly unlocked achievements; empty when nobody is logged in or
            the catalog could not be loaded
        """
        user_id = self._current_user_id()
        if user_id is None:
            logger.debug("Skipping achievement check, no user logged in")
            return []

        try:
            report = await evaluate_achievements(self.db, user_id, tz_name=self.tz_name)
        except ActiveBreakError as e:
            logger.error(f"Achievement check failed for user {user_id}: {e.message}")
            return []

        for achievement in report.newly_unlocked:
            try:
                await self.notifier.show_achievement_unlocked(achievement)
            except Exception as e:
                logger.error(
                    f"Failed to notify user {user_id} about achievement "
                    f"{achievement.achievement_id}: {e}",
                    exc_info=True
                )

        return report.newly_unlocked

    async def get_achievements(self) -> list[UserAchievementProgress]:
        user_id = self._current_user_id()
        if user_id is None:
            return []
        return await get_user_achievements(self.db, user_id)

    async def get_stats(self) -> dict[str, int]:
        """{'total', 'achieved', 'unachieved', 'near_completion'} for the logged-in user"""
        progress = await self.get_achievements()
        return calculate_achievement_stats(progress, self.near_completion_threshold)

    async def get_catalog(self) -> list[Achievement]:
        return await queries.get_all_achievements(self.db)

    async def reset_progress(self) -> int:
        """Soft-delete the logged-in user's progress; returns rows reset"""
        user = self.user_service.require_user()
        return await queries.reset_user_achievements(self.db, user.user_id)
