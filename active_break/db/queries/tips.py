"""Daily tip and tip favorite queries"""
import logging
from typing import Optional
from datetime import date
from active_break.db.connection import Database
from active_break.models.tip import UserTip

logger = logging.getLogger(__name__)

# First key of the two-key advisory lock taken while filling a day's tips
_TIPS_LOCK_CLASS = 7001

_TIP_SELECT = """
    SELECT t.tip_id, t.user_id, t.tip_date, t.content, t.deleted,
           (f.tip_id IS NOT NULL) AS is_favorite
    FROM user_tips t
    LEFT JOIN tip_favorites f ON f.tip_id = t.tip_id AND f.user_id = t.user_id
"""


async def insert_daily_tips(db: Database, user_id: int, tip_date: date, contents: list[str]) -> int:
    """
    Store a day's tips unless that day already has some

    A per-user advisory lock serializes concurrent generators, so a day
    never gets two batches.

    Returns:
        Number of tips inserted (0 when the day was already filled)
    """
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute("SELECT pg_advisory_xact_lock(%s, %s)", (_TIPS_LOCK_CLASS, user_id))
            await cur.execute(
                """
                SELECT 1 FROM user_tips
                WHERE user_id = %s AND tip_date = %s AND deleted = FALSE
                LIMIT 1
                """,
                (user_id, tip_date)
            )
            if await cur.fetchone():
                await conn.commit()
                return 0

            for content in contents:
                await cur.execute(
                    """
                    INSERT INTO user_tips (user_id, tip_date, content)
                    VALUES (%s, %s, %s)
                    """,
                    (user_id, tip_date, content)
                )
        await conn.commit()
    return len(contents)


async def get_tips_for_date(db: Database, user_id: int, tip_date: date) -> list[UserTip]:
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                _TIP_SELECT + """
                WHERE t.user_id = %s AND t.tip_date = %s AND t.deleted = FALSE
                ORDER BY t.tip_id
                """,
                (user_id, tip_date)
            )
            rows = await cur.fetchall()
            return [UserTip(**row) for row in rows]


async def get_user_tip(db: Database, user_id: int, tip_id: int) -> Optional[UserTip]:
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                _TIP_SELECT + """
                WHERE t.user_id = %s AND t.tip_id = %s AND t.deleted = FALSE
                """,
                (user_id, tip_id)
            )
            row = await cur.fetchone()
            return UserTip(**row) if row else None


async def get_favorite_tips(db: Database, user_id: int) -> list[UserTip]:
    """Favorited tips, most recently favorited first"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                SELECT t.tip_id, t.user_id, t.tip_date, t.content, t.deleted,
                       TRUE AS is_favorite
                FROM tip_favorites f
                JOIN user_tips t ON t.tip_id = f.tip_id
                WHERE f.user_id = %s AND t.deleted = FALSE
                ORDER BY f.created_at DESC, t.tip_id DESC
                """,
                (user_id,)
            )
            rows = await cur.fetchall()
            return [UserTip(**row) for row in rows]


async def add_tip_favorite(db: Database, user_id: int, tip_id: int) -> None:
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                INSERT INTO tip_favorites (user_id, tip_id)
                VALUES (%s, %s)
                ON CONFLICT (user_id, tip_id) DO NOTHING
                """,
                (user_id, tip_id)
            )
        await conn.commit()


async def remove_tip_favorite(db: Database, user_id: int, tip_id: int) -> bool:
    """Returns True if a favorite was removed"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                "DELETE FROM tip_favorites WHERE user_id = %s AND tip_id = %s",
                (user_id, tip_id)
            )
            removed = cur.rowcount > 0
        await conn.commit()
    return removed
