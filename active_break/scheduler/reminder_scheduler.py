"""Exercise reminder scheduler"""
import asyncio
import logging
from datetime import date, datetime, time, timedelta, timezone
from typing import Awaitable, Callable, Optional
from zoneinfo import ZoneInfo

from active_break.config import DEFAULT_TIMEZONE, REMINDER_CHECK_INTERVAL_MINUTES
from active_break.db import queries
from active_break.db.connection import Database
from active_break.exceptions import SchedulingError
from active_break.models.reminder import ReminderSetting
from active_break.monitoring import capture_exception, record_reminder_check

logger = logging.getLogger(__name__)

EPOCH_DATE = date(1970, 1, 1)

UserIdsProvider = Callable[[], Awaitable[list[int]]]


def is_in_window(setting: ReminderSetting, current: time) -> bool:
    """Time of day falls in [start, end); a window with start after end wraps past midnight"""
    if setting.wraps_midnight:
        return current >= setting.start_time or current < setting.end_time
    return setting.start_time <= current < setting.end_time


def matches_cadence(setting: ReminderSetting, day: date) -> bool:
    """Every Nth day counted from the epoch"""
    return (day - EPOCH_DATE).days % setting.repeat_every_days == 0


def interval_elapsed(
    setting: ReminderSetting,
    now: datetime,
    last_fired_at: Optional[datetime]
) -> bool:
    if last_fired_at is None:
        return True
    return now - last_fired_at >= timedelta(minutes=setting.interval_minutes)


def should_fire(
    setting: ReminderSetting,
    local_now: datetime,
    last_fired_at: Optional[datetime],
    recently_exercised: bool
) -> bool:
    """
    Whether a reminder is due

    Args:
        setting: Reminder setting
        local_now: Current time in the user's timezone
        last_fired_at: Last time this reminder fired, if ever
        recently_exercised: User logged this activity within the interval
    """
    if not setting.enabled or setting.deleted:
        return False
    if not is_in_window(setting, local_now.time().replace(tzinfo=None)):
        return False
    if not matches_cadence(setting, local_now.date()):
        return False
    if not interval_elapsed(setting, local_now, last_fired_at):
        return False
    return not recently_exercised


def next_fire_time(
    setting: ReminderSetting,
    now: datetime,
    last_fired_at: Optional[datetime],
    tz_name: str = DEFAULT_TIMEZONE
) -> Optional[datetime]:
    """
    Earliest instant at or after now when the reminder may fire

    Considers window, cadence and interval. Returns None for a disabled
    setting.
    """
    if not setting.enabled or setting.deleted:
        return None

    tz = ZoneInfo(tz_name)
    candidate = now.astimezone(tz)
    if last_fired_at is not None:
        earliest = last_fired_at.astimezone(tz) + timedelta(minutes=setting.interval_minutes)
        candidate = max(candidate, earliest)

    # A cadence day always exists within repeat_every_days of the candidate
    for offset in range(setting.repeat_every_days + 1):
        day = candidate.date() + timedelta(days=offset)
        if not matches_cadence(setting, day):
            continue

        for seg_start, seg_end in _window_segments(setting, day, tz):
            if candidate < seg_end:
                return max(candidate, seg_start)

    return None


def _window_segments(setting: ReminderSetting, day: date, tz: ZoneInfo) -> list[tuple[datetime, datetime]]:
    """Parts of the reminder window lying on the given calendar day, in order"""
    day_start = datetime.combine(day, time.min, tzinfo=tz)
    day_end = day_start + timedelta(days=1)
    start = datetime.combine(day, setting.start_time, tzinfo=tz)
    end = datetime.combine(day, setting.end_time, tzinfo=tz)

    if setting.wraps_midnight:
        return [(day_start, end), (start, day_end)]
    return [(start, end)]


class ReminderScheduler:
    """
    Decides which exercise reminders are due and fires them

    Every fire is written to reminder_logs before the notifier is called,
    so a repeated check at the same instant sends nothing.
    """

    def __init__(self, db: Database, notifier, tz_name: str = DEFAULT_TIMEZONE):
        self.db = db
        self.notifier = notifier
        self.tz = ZoneInfo(tz_name)

    async def run_reminder_check_now(self, user_id: int, now: Optional[datetime] = None) -> bool:
        """
        Check all enabled reminders of a user and fire the due ones

        Returns:
            True if every setting was checked, False if anything failed
        """
        now = now or datetime.now(timezone.utc)

        try:
            settings = await queries.get_active_reminder_settings(self.db, user_id)
        except Exception as e:
            error = SchedulingError(
                f"Failed to load reminder settings: {e}",
                user_id=user_id,
                operation="run_reminder_check",
                cause=e,
            )
            capture_exception(error, operation="run_reminder_check", user_id=user_id)
            record_reminder_check(success=False)
            return False

        sent = 0
        success = True
        for setting in settings:
            try:
                if await self._check_setting(setting, now):
                    sent += 1
            except Exception as e:
                success = False
                logger.error(
                    f"Reminder check failed for user {user_id}, "
                    f"activity {setting.activity_type_id}: {e}",
                    exc_info=True
                )
                capture_exception(
                    e,
                    operation="run_reminder_check",
                    user_id=user_id,
                    activity_type_id=setting.activity_type_id,
                )

        record_reminder_check(success=success, reminders_sent=sent)
        logger.debug(f"Reminder check for user {user_id}: {len(settings)} settings, {sent} sent")
        return success

    async def _check_setting(self, setting: ReminderSetting, now: datetime) -> bool:
        """Fire one setting if due; returns whether it fired"""
        local_now = now.astimezone(self.tz)

        if not is_in_window(setting, local_now.time().replace(tzinfo=None)):
            return False
        if not matches_cadence(setting, local_now.date()):
            return False

        last_fired_at = await queries.get_last_reminder_time(
            self.db, setting.user_id, setting.activity_type_id
        )
        if not interval_elapsed(setting, now, last_fired_at):
            return False

        recently_exercised = await queries.has_activity_between(
            self.db,
            setting.user_id,
            setting.activity_type_id,
            now - timedelta(minutes=setting.interval_minutes),
            now,
        )
        if not should_fire(setting, local_now, last_fired_at, recently_exercised):
            if recently_exercised:
                logger.debug(
                    f"User {setting.user_id} already did activity {setting.activity_type_id} "
                    f"in the last {setting.interval_minutes} minutes, skipping reminder"
                )
            return False

        activity = await queries.get_physical_activity_by_id(self.db, setting.activity_type_id)
        activity_name = activity.name if activity else f"activity {setting.activity_type_id}"

        await queries.insert_reminder_log(self.db, setting.user_id, setting.activity_type_id, now)
        await self.notifier.show_exercise_reminder(setting.user_id, activity_name)

        logger.info(f"Sent {activity_name} reminder to user {setting.user_id}")
        return True

    async def get_next_fire_time(
        self,
        user_id: int,
        activity_type_id: int,
        now: Optional[datetime] = None
    ) -> Optional[datetime]:
        """When the reminder for this activity type fires next, if configured"""
        now = now or datetime.now(timezone.utc)
        setting = await queries.get_reminder_setting(self.db, user_id, activity_type_id)
        if setting is None:
            return None
        last_fired_at = await queries.get_last_reminder_time(self.db, user_id, activity_type_id)
        return next_fire_time(setting, now, last_fired_at, self.tz.key)

    async def run_periodic(
        self,
        user_ids_provider: UserIdsProvider,
        stop_event: asyncio.Event,
        interval_seconds: float = REMINDER_CHECK_INTERVAL_MINUTES * 60
    ) -> None:
        """
        Check reminders for all users until stop_event is set

        Args:
            user_ids_provider: Coroutine function returning the users to check
            stop_event: Set to end the loop
            interval_seconds: Pause between two checks
        """
        logger.info(f"Reminder loop started, checking every {interval_seconds:.0f}s")

        while not stop_event.is_set():
            try:
                user_ids = await user_ids_provider()
                for user_id in user_ids:
                    await self.run_reminder_check_now(user_id)
            except Exception as e:
                logger.error(f"Reminder loop iteration failed: {e}", exc_info=True)
                capture_exception(e, operation="run_periodic")

            try:
                await asyncio.wait_for(stop_event.wait(), timeout=interval_seconds)
            except asyncio.TimeoutError:
                pass

        logger.info("Reminder loop stopped")
