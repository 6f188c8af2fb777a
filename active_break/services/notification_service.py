"""Notification delivery"""
import logging

from active_break.gamification.achievement_system import format_achievement_unlock_message
from active_break.models.achievement import Achievement

logger = logging.getLogger(__name__)


class NotificationService:
    """
    Delivers user-facing notifications.

    The default implementation writes them to the log. Frontends subclass
    it and override the show_* methods.
    """

    async def show_achievement_unlocked(self, achievement: Achievement) -> None:
        message = format_achievement_unlock_message(achievement)
        logger.info(f"Achievement notification:\n{message}")

    async def show_exercise_reminder(self, user_id: int, activity_name: str) -> None:
        logger.info(f"Reminder for user {user_id}: time for some {activity_name}!")
