"""
Achievement Metric Accessors

One named accessor per MetricType. Each reads only append-only event
tables (check-ins, activity records) or the streak record, and returns 0
for a user without rows.
"""

from typing import Awaitable, Callable, Optional
import logging

from active_break.config import DEFAULT_TIMEZONE
from active_break.db import queries
from active_break.db.connection import Database
from active_break.gamification.streak_system import calculate_exercise_streak
from active_break.models.achievement import MetricType
from active_break.monitoring.prometheus_metrics import track_metric_query

logger = logging.getLogger(__name__)

# (db, user_id, tz_name) -> value; tz_name sets calendar-day boundaries
MetricAccessor = Callable[[Database, int, str], Awaitable[int]]


async def checkin_count(db: Database, user_id: int, tz_name: str = DEFAULT_TIMEZONE) -> int:
    """Number of non-deleted check-ins"""
    return await queries.count_check_ins(db, user_id)


async def checkin_streak(db: Database, user_id: int, tz_name: str = DEFAULT_TIMEZONE) -> int:
    """Current streak from the user's streak record"""
    return await queries.get_current_checkin_streak(db, user_id)


async def exercise_count(db: Database, user_id: int, tz_name: str = DEFAULT_TIMEZONE) -> int:
    """Number of non-deleted activity records"""
    return await queries.count_activity_records(db, user_id)


async def exercise_streak(db: Database, user_id: int, tz_name: str = DEFAULT_TIMEZONE) -> int:
    """Consecutive exercise days ending at the most recent activity day in tz_name"""
    dates = await queries.get_activity_dates(db, user_id, tz_name)
    return calculate_exercise_streak(dates)


async def calories_burned(db: Database, user_id: int, tz_name: str = DEFAULT_TIMEZONE) -> int:
    """Total calories burned across activity records"""
    return await queries.sum_calories_burned(db, user_id)


async def exercise_duration(db: Database, user_id: int, tz_name: str = DEFAULT_TIMEZONE) -> int:
    """Total exercise minutes across activity records"""
    return await queries.sum_exercise_duration(db, user_id)


METRIC_ACCESSORS: dict[MetricType, MetricAccessor] = {
    MetricType.CHECKIN_COUNT: checkin_count,
    MetricType.CHECKIN_STREAK: checkin_streak,
    MetricType.EXERCISE_COUNT: exercise_count,
    MetricType.EXERCISE_STREAK: exercise_streak,
    MetricType.CALORIES_BURNED: calories_burned,
    MetricType.EXERCISE_DURATION: exercise_duration,
}


async def get_metric_value(
    db: Database,
    user_id: int,
    metric_type: Optional[MetricType],
    tz_name: str = DEFAULT_TIMEZONE
) -> int:
    """
    Current value of a metric for a user

    Args:
        db: Database handle
        user_id: User ID
        metric_type: Metric to compute; None (legacy catalog type) yields 0
        tz_name: Timezone for day-based metrics

    Returns:
        Metric value, 0 when the user has no data
    """
    if metric_type is None:
        return 0

    accessor = METRIC_ACCESSORS[metric_type]
    with track_metric_query(metric_type.value):
        value = await accessor(db, user_id, tz_name)

    logger.debug(f"Metric {metric_type.value} for user {user_id}: {value}")
    return value
