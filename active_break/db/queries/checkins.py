"""Check-in and check-in streak queries"""
import logging
from typing import Callable, Optional
from datetime import date
from active_break.db.connection import Database
from active_break.models.checkin import CheckIn, CheckinStreak

logger = logging.getLogger(__name__)

_STREAK_COLUMNS = """
    user_id, current_streak, longest_streak, total_checkin,
    last_checkin_date, updated_at, deleted
"""


async def insert_check_in_with_streak(
    db: Database,
    check_in: CheckIn,
    advance_streak: Callable[[Optional[CheckinStreak]], CheckinStreak]
) -> CheckinStreak:
    """
    Insert a check-in and advance the user's streak in one transaction

    The streak row is locked while advance_streak computes the new counters.
    Nothing is committed unless both writes succeed; the pool rolls back the
    connection when the block raises.

    Returns:
        The streak as stored
    """
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                INSERT INTO check_ins (user_id, checkin_date, checkin_time)
                VALUES (%s, %s, %s)
                RETURNING checkin_id
                """,
                (check_in.user_id, check_in.checkin_date, check_in.checkin_time)
            )
            row = await cur.fetchone()
            check_in.checkin_id = row['checkin_id']

            await cur.execute(
                f"""
                SELECT {_STREAK_COLUMNS}
                FROM checkin_streaks
                WHERE user_id = %s AND deleted = FALSE
                FOR UPDATE
                """,
                (check_in.user_id,)
            )
            row = await cur.fetchone()
            streak = advance_streak(CheckinStreak(**row) if row else None)

            await cur.execute(
                """
                INSERT INTO checkin_streaks (user_id, current_streak, longest_streak, total_checkin, last_checkin_date)
                VALUES (%s, %s, %s, %s, %s)
                ON CONFLICT (user_id) DO UPDATE
                SET current_streak = EXCLUDED.current_streak,
                    longest_streak = EXCLUDED.longest_streak,
                    total_checkin = EXCLUDED.total_checkin,
                    last_checkin_date = EXCLUDED.last_checkin_date,
                    deleted = FALSE,
                    updated_at = CURRENT_TIMESTAMP
                """,
                (
                    streak.user_id,
                    streak.current_streak,
                    streak.longest_streak,
                    streak.total_checkin,
                    streak.last_checkin_date,
                )
            )
        await conn.commit()
        return streak


async def get_check_in_for_date(db: Database, user_id: int, checkin_date: date) -> Optional[CheckIn]:
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                SELECT checkin_id, user_id, checkin_date, checkin_time, created_at, deleted
                FROM check_ins
                WHERE user_id = %s AND checkin_date = %s AND deleted = FALSE
                """,
                (user_id, checkin_date)
            )
            row = await cur.fetchone()
            return CheckIn(**row) if row else None


async def get_checkin_streak(db: Database, user_id: int) -> Optional[CheckinStreak]:
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                f"""
                SELECT {_STREAK_COLUMNS}
                FROM checkin_streaks
                WHERE user_id = %s AND deleted = FALSE
                """,
                (user_id,)
            )
            row = await cur.fetchone()
            return CheckinStreak(**row) if row else None
