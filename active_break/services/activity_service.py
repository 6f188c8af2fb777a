"""
ActivityService - Check-ins, Activity Logging and Reminder Settings

Extracts the daily check-in flow and activity logging from the UI layer.
"""

import logging
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from active_break.config import DEFAULT_TIMEZONE
from active_break.db import queries
from active_break.db.connection import Database
from active_break.exceptions import RecordNotFoundError, ValidationError
from active_break.gamification.streak_system import update_checkin_streak
from active_break.models.activity import ActivityRecord, PhysicalActivity
from active_break.models.checkin import CheckIn, CheckinStreak
from active_break.models.reminder import ReminderSetting
from active_break.monitoring import record_activity_logged, record_check_in

logger = logging.getLogger(__name__)


def calculate_calories(duration_minutes: int, calories_per_minute: int) -> int:
    """Calories for a session, rounded to the nearest whole calorie"""
    return round(duration_minutes * calories_per_minute / 60)


def week_bounds(now: datetime) -> tuple[datetime, datetime]:
    """Monday 00:00 to Sunday 23:59:59.999999 of the week containing now"""
    monday = now.date() - timedelta(days=now.weekday())
    start = datetime.combine(monday, time.min, tzinfo=now.tzinfo)
    end = datetime.combine(monday + timedelta(days=6), time.max, tzinfo=now.tzinfo)
    return start, end


class ActivityService:
    """
    Service for daily activity.

    Responsibilities:
    - Daily check-in with streak update
    - Logging exercise sessions with calorie calculation
    - Activity history queries
    - Reminder settings per activity type
    """

    def __init__(self, db: Database, tz_name: str = DEFAULT_TIMEZONE):
        """
        Initialize ActivityService.

        Args:
            db: Database handle
            tz_name: Timezone that defines calendar days
        """
        self.db = db
        self.tz = ZoneInfo(tz_name)

    def _local_now(self, now: Optional[datetime]) -> datetime:
        return (now or datetime.now(timezone.utc)).astimezone(self.tz)

    async def get_activities(self) -> list[PhysicalActivity]:
        return await queries.get_all_physical_activities(self.db)

    async def check_in_today(self, user_id: int, now: Optional[datetime] = None) -> bool:
        """
        Record today's check-in and advance the streak.

        Returns:
            False if the user already checked in today, True otherwise
        """
        local_now = self._local_now(now)
        today = local_now.date()

        if await queries.get_check_in_for_date(self.db, user_id, today):
            logger.info(f"User {user_id} already checked in on {today}")
            return False

        streak = await queries.insert_check_in_with_streak(
            self.db,
            CheckIn(user_id=user_id, checkin_date=today, checkin_time=local_now),
            lambda existing: update_checkin_streak(user_id, existing, today),
        )

        record_check_in()
        logger.info(
            f"User {user_id} checked in on {today}: "
            f"streak {streak.current_streak} (longest {streak.longest_streak})"
        )
        return True

    async def has_checked_in(self, user_id: int, day: Optional[date] = None) -> bool:
        day = day or self._local_now(None).date()
        return await queries.get_check_in_for_date(self.db, user_id, day) is not None

    async def get_checkin_streak(self, user_id: int) -> Optional[CheckinStreak]:
        return await queries.get_checkin_streak(self.db, user_id)

    async def log_activity(
        self,
        user_id: int,
        activity_type_id: int,
        begin_time: datetime,
        end_time: datetime
    ) -> ActivityRecord:
        """
        Log one exercise session.

        Duration is counted in whole minutes; calories follow the
        activity's calories_per_minute.

        Raises:
            ValidationError: end_time before begin_time
            RecordNotFoundError: Unknown activity type
        """
        if end_time < begin_time:
            raise ValidationError(
                "Activity cannot end before it begins",
                field="end_time",
                value=end_time.isoformat(),
            )

        activity = await queries.get_physical_activity_by_id(self.db, activity_type_id)
        if activity is None:
            raise RecordNotFoundError(
                f"Activity type {activity_type_id} does not exist",
                record_type="PhysicalActivity",
                record_id=activity_type_id,
            )

        duration_minutes = int((end_time - begin_time).total_seconds() // 60)
        record = ActivityRecord(
            user_id=user_id,
            activity_type_id=activity_type_id,
            duration_minutes=duration_minutes,
            calories_burned=calculate_calories(duration_minutes, activity.calories_per_minute),
            begin_time=begin_time,
            end_time=end_time,
        )
        record.record_id = await queries.insert_activity_record(self.db, record)

        record_activity_logged(activity_type_id)
        logger.info(
            f"User {user_id} logged {activity.name}: "
            f"{record.duration_minutes} min, {record.calories_burned} kcal"
        )
        return record

    async def get_recent_records(self, user_id: int, limit: int = 10) -> list[ActivityRecord]:
        return await queries.get_recent_activity_records(self.db, user_id, limit)

    async def get_weekly_records(self, user_id: int, now: Optional[datetime] = None) -> list[ActivityRecord]:
        """Records from Monday to Sunday of the current week"""
        start, end = week_bounds(self._local_now(now))
        return await queries.get_activity_records_by_date_range(self.db, user_id, start, end)

    async def save_reminder_setting(self, setting: ReminderSetting) -> ReminderSetting:
        """Insert or replace the setting for (user, activity type)"""
        setting.reminder_id = await queries.upsert_reminder_setting(self.db, setting)
        logger.info(
            f"Saved reminder for user {setting.user_id}, activity {setting.activity_type_id}: "
            f"every {setting.interval_minutes} min, "
            f"{setting.start_time.strftime('%H:%M')}-{setting.end_time.strftime('%H:%M')}, "
            f"enabled={setting.enabled}"
        )
        return setting

    async def get_reminder_setting(self, user_id: int, activity_type_id: int) -> Optional[ReminderSetting]:
        return await queries.get_reminder_setting(self.db, user_id, activity_type_id)
