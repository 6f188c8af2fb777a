"""Read-only aggregate queries backing achievement metrics

Every query filters out soft-deleted rows and returns 0 (or an empty list)
for a user with no rows.
"""
import logging
from datetime import date
from active_break.db.connection import Database

logger = logging.getLogger(__name__)


async def _scalar(db: Database, query: str, params: tuple) -> int:
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(query, params)
            row = await cur.fetchone()
            if not row or row['value'] is None:
                return 0
            return int(row['value'])


async def count_check_ins(db: Database, user_id: int) -> int:
    return await _scalar(
        db,
        "SELECT COUNT(*) AS value FROM check_ins WHERE user_id = %s AND deleted = FALSE",
        (user_id,)
    )


async def get_current_checkin_streak(db: Database, user_id: int) -> int:
    return await _scalar(
        db,
        "SELECT current_streak AS value FROM checkin_streaks WHERE user_id = %s AND deleted = FALSE",
        (user_id,)
    )


async def count_activity_records(db: Database, user_id: int) -> int:
    return await _scalar(
        db,
        "SELECT COUNT(*) AS value FROM activity_records WHERE user_id = %s AND deleted = FALSE",
        (user_id,)
    )


async def sum_calories_burned(db: Database, user_id: int) -> int:
    return await _scalar(
        db,
        "SELECT COALESCE(SUM(calories_burned), 0) AS value FROM activity_records WHERE user_id = %s AND deleted = FALSE",
        (user_id,)
    )


async def sum_exercise_duration(db: Database, user_id: int) -> int:
    return await _scalar(
        db,
        "SELECT COALESCE(SUM(duration_minutes), 0) AS value FROM activity_records WHERE user_id = %s AND deleted = FALSE",
        (user_id,)
    )


async def get_activity_dates(db: Database, user_id: int, timezone: str) -> list[date]:
    """
    Distinct calendar days with at least one activity record, most recent first

    Args:
        db: Database handle
        user_id: User ID
        timezone: IANA timezone that defines the calendar day boundary
    """
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                SELECT (begin_time AT TIME ZONE %s)::date AS exercise_date
                FROM activity_records
                WHERE user_id = %s AND deleted = FALSE
                GROUP BY exercise_date
                ORDER BY exercise_date DESC
                """,
                (timezone, user_id)
            )
            rows = await cur.fetchall()
            return [row['exercise_date'] for row in rows]
