"""
TipsService - Daily Health Tips and Favorites

Each user gets a small batch of tips per calendar day, generated on first
request and stored so the same tips come back for the rest of the day.
"""

import logging
import random
from datetime import datetime, timezone
from typing import Callable, Optional
from zoneinfo import ZoneInfo

from active_break.config import DEFAULT_TIMEZONE, TIPS_PER_DAY
from active_break.db import queries
from active_break.db.connection import Database
from active_break.exceptions import RecordNotFoundError
from active_break.models.tip import UserTip

logger = logging.getLogger(__name__)

# (user_id, count) -> tip texts
TipGenerator = Callable[[int, int], list[str]]

DEFAULT_TIPS: tuple[str, ...] = (
    "Stay hydrated by drinking at least 8 glasses of water throughout the day.",
    "Take a 5-minute break every hour to stretch and move around.",
    "Practice deep breathing exercises to reduce stress and improve focus.",
    "Get 7-9 hours of quality sleep each night for optimal recovery.",
    "Include protein in every meal to support muscle health and satiety.",
    "Take the stairs instead of the elevator when possible.",
    "Spend at least 10 minutes in natural sunlight daily for vitamin D.",
    "Practice good posture while sitting and standing.",
    "Eat a variety of colorful fruits and vegetables for essential nutrients.",
    "Limit screen time before bedtime to improve sleep quality.",
    "Do some form of physical activity for at least 30 minutes daily.",
    "Practice mindfulness or meditation for mental well-being.",
    "Keep healthy snacks like nuts and fruits readily available.",
    "Maintain social connections for emotional health.",
    "Listen to your body and rest when you feel tired.",
)


class RandomTipGenerator:
    """Picks distinct tips from a fixed pool"""

    def __init__(self, pool: tuple[str, ...] = DEFAULT_TIPS, rng: Optional[random.Random] = None):
        self.pool = pool
        self.rng = rng or random.Random()

    def __call__(self, user_id: int, count: int) -> list[str]:
        return self.rng.sample(self.pool, min(count, len(self.pool)))


class TipsService:
    """
    Service for daily tips.

    Responsibilities:
    - Generating and storing today's tips on first request
    - Favorite toggling and the favorites list
    """

    def __init__(
        self,
        db: Database,
        tz_name: str = DEFAULT_TIMEZONE,
        generator: Optional[TipGenerator] = None,
        tips_per_day: int = TIPS_PER_DAY
    ):
        self.db = db
        self.tz = ZoneInfo(tz_name)
        self.generator = generator or RandomTipGenerator()
        self.tips_per_day = tips_per_day

    async def load_today_tips(self, user_id: int, now: Optional[datetime] = None) -> list[UserTip]:
        """
        Today's tips for a user, generating them if the day has none yet

        Returns:
            Tips in generation order with their favorite flags
        """
        today = (now or datetime.now(timezone.utc)).astimezone(self.tz).date()

        tips = await queries.get_tips_for_date(self.db, user_id, today)
        if tips:
            return tips

        contents = self.generator(user_id, self.tips_per_day)
        inserted = await queries.insert_daily_tips(self.db, user_id, today, contents)
        if inserted:
            logger.info(f"Generated {inserted} tips for user {user_id} on {today}")

        return await queries.get_tips_for_date(self.db, user_id, today)

    async def get_favorites(self, user_id: int) -> list[UserTip]:
        return await queries.get_favorite_tips(self.db, user_id)

    async def toggle_favorite(self, user_id: int, tip_id: int) -> bool:
        """
        Flip the favorite flag of one of the user's tips

        Returns:
            The new favorite state

        Raises:
            RecordNotFoundError: The tip does not exist or belongs to someone else
        """
        tip = await queries.get_user_tip(self.db, user_id, tip_id)
        if tip is None:
            raise RecordNotFoundError(
                f"Tip {tip_id} not found for user {user_id}",
                record_type="UserTip",
                record_id=tip_id,
                user_id=user_id,
            )

        if tip.is_favorite:
            await queries.remove_tip_favorite(self.db, user_id, tip_id)
        else:
            await queries.add_tip_favorite(self.db, user_id, tip_id)

        logger.info(f"User {user_id} {'unfavorited' if tip.is_favorite else 'favorited'} tip {tip_id}")
        return not tip.is_favorite
