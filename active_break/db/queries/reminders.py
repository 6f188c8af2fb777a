"""Reminder settings and reminder log queries"""
import logging
from typing import Optional
from datetime import datetime
from active_break.db.connection import Database
from active_break.models.reminder import ReminderSetting

logger = logging.getLogger(__name__)

_SETTING_COLUMNS = """
    reminder_id, user_id, activity_type_id, enabled, interval_minutes, repeat_every_days,
    start_time, end_time, created_at, updated_at, deleted
"""


async def get_active_reminder_settings(db: Database, user_id: int) -> list[ReminderSetting]:
    """Enabled, non-deleted settings of one user"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                f"""
                SELECT {_SETTING_COLUMNS}
                FROM reminder_settings
                WHERE user_id = %s AND enabled = TRUE AND deleted = FALSE
                ORDER BY activity_type_id
                """,
                (user_id,)
            )
            rows = await cur.fetchall()
            return [ReminderSetting(**row) for row in rows]


async def get_reminder_setting(
    db: Database,
    user_id: int,
    activity_type_id: int
) -> Optional[ReminderSetting]:
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                f"""
                SELECT {_SETTING_COLUMNS}
                FROM reminder_settings
                WHERE user_id = %s AND activity_type_id = %s AND deleted = FALSE
                """,
                (user_id, activity_type_id)
            )
            row = await cur.fetchone()
            return ReminderSetting(**row) if row else None


async def upsert_reminder_setting(db: Database, setting: ReminderSetting) -> int:
    """Insert or update the setting keyed by (user, activity type); returns reminder_id"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                INSERT INTO reminder_settings
                    (user_id, activity_type_id, enabled, interval_minutes, repeat_every_days, start_time, end_time)
                VALUES (%s, %s, %s, %s, %s, %s, %s)
                ON CONFLICT (user_id, activity_type_id) DO UPDATE
                SET enabled = EXCLUDED.enabled,
                    interval_minutes = EXCLUDED.interval_minutes,
                    repeat_every_days = EXCLUDED.repeat_every_days,
                    start_time = EXCLUDED.start_time,
                    end_time = EXCLUDED.end_time,
                    deleted = FALSE,
                    updated_at = CURRENT_TIMESTAMP
                RETURNING reminder_id
                """,
                (
                    setting.user_id,
                    setting.activity_type_id,
                    setting.enabled,
                    setting.interval_minutes,
                    setting.repeat_every_days,
                    setting.start_time,
                    setting.end_time,
                )
            )
            row = await cur.fetchone()
            await conn.commit()
            return row['reminder_id']


async def get_users_with_active_reminders(db: Database) -> list[int]:
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                SELECT DISTINCT rs.user_id
                FROM reminder_settings rs
                JOIN users u ON u.user_id = rs.user_id
                WHERE rs.enabled = TRUE AND rs.deleted = FALSE AND u.deleted = FALSE
                ORDER BY rs.user_id
                """
            )
            rows = await cur.fetchall()
            return [row['user_id'] for row in rows]


async def get_last_reminder_time(
    db: Database,
    user_id: int,
    activity_type_id: int
) -> Optional[datetime]:
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                SELECT MAX(triggered_at) AS last_triggered
                FROM reminder_logs
                WHERE user_id = %s AND activity_type_id = %s
                """,
                (user_id, activity_type_id)
            )
            row = await cur.fetchone()
            return row['last_triggered'] if row else None


async def insert_reminder_log(
    db: Database,
    user_id: int,
    activity_type_id: int,
    triggered_at: datetime
) -> None:
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                INSERT INTO reminder_logs (user_id, activity_type_id, triggered_at)
                VALUES (%s, %s, %s)
                """,
                (user_id, activity_type_id, triggered_at)
            )
            await conn.commit()
