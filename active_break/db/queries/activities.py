"""Physical activity catalog and activity record queries"""
import logging
from typing import Optional
from datetime import datetime
from active_break.db.connection import Database
from active_break.models.activity import PhysicalActivity, ActivityRecord

logger = logging.getLogger(__name__)

_RECORD_COLUMNS = """
    record_id, user_id, activity_type_id, duration_minutes, calories_burned,
    begin_time, end_time, deleted
"""


async def get_all_physical_activities(db: Database) -> list[PhysicalActivity]:
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                SELECT activity_type_id, name, description, calories_per_minute,
                       default_duration, icon_url, deleted
                FROM physical_activities
                WHERE deleted = FALSE
                ORDER BY activity_type_id
                """
            )
            rows = await cur.fetchall()
            return [PhysicalActivity(**row) for row in rows]


async def get_physical_activity_by_id(db: Database, activity_type_id: int) -> Optional[PhysicalActivity]:
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                SELECT activity_type_id, name, description, calories_per_minute,
                       default_duration, icon_url, deleted
                FROM physical_activities
                WHERE activity_type_id = %s AND deleted = FALSE
                """,
                (activity_type_id,)
            )
            row = await cur.fetchone()
            return PhysicalActivity(**row) if row else None


async def insert_activity_record(db: Database, record: ActivityRecord) -> int:
    """Insert an activity record and return its id"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                INSERT INTO activity_records
                    (user_id, activity_type_id, duration_minutes, calories_burned, begin_time, end_time)
                VALUES (%s, %s, %s, %s, %s, %s)
                RETURNING record_id
                """,
                (
                    record.user_id,
                    record.activity_type_id,
                    record.duration_minutes,
                    record.calories_burned,
                    record.begin_time,
                    record.end_time,
                )
            )
            row = await cur.fetchone()
            await conn.commit()
            return row['record_id']


async def get_recent_activity_records(db: Database, user_id: int, limit: int = 10) -> list[ActivityRecord]:
    """Most recent records first"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM activity_records
                WHERE user_id = %s AND deleted = FALSE
                ORDER BY begin_time DESC
                LIMIT %s
                """,
                (user_id, limit)
            )
            rows = await cur.fetchall()
            return [ActivityRecord(**row) for row in rows]


async def get_activity_records_by_date_range(
    db: Database,
    user_id: int,
    start: datetime,
    end: datetime
) -> list[ActivityRecord]:
    """Records whose begin_time falls in [start, end], most recent first"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM activity_records
                WHERE user_id = %s AND begin_time >= %s AND begin_time <= %s AND deleted = FALSE
                ORDER BY begin_time DESC
                """,
                (user_id, start, end)
            )
            rows = await cur.fetchall()
            return [ActivityRecord(**row) for row in rows]


async def has_activity_between(
    db: Database,
    user_id: int,
    activity_type_id: int,
    start: datetime,
    end: datetime
) -> bool:
    """Whether the user logged this activity type with a begin_time in [start, end]"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                SELECT 1
                FROM activity_records
                WHERE user_id = %s AND activity_type_id = %s
                  AND begin_time >= %s AND begin_time <= %s
                  AND deleted = FALSE
                LIMIT 1
                """,
                (user_id, activity_type_id, start, end)
            )
            return await cur.fetchone() is not None
