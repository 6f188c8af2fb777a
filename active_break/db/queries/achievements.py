"""Achievement catalog and per-user progress queries"""
import logging
from typing import Optional
from datetime import datetime
from active_break.db.connection import Database
from active_break.models.achievement import Achievement, UserAchievementProgress

logger = logging.getLogger(__name__)

_PROGRESS_COLUMNS = """
    ua.user_achievement_id, ua.user_id, ua.achievement_id, ua.current_progress,
    ua.is_achieved, ua.achieved_at, ua.created_at, ua.updated_at, ua.deleted
"""


async def get_all_achievements(db: Database) -> list[Achievement]:
    """Catalog in insertion order"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                SELECT achievement_id, name, description, icon, metric_type,
                       target_value, created_at, deleted
                FROM achievements
                WHERE deleted = FALSE
                ORDER BY achievement_id
                """
            )
            rows = await cur.fetchall()
            return [Achievement(**row) for row in rows]


async def get_user_achievement(
    db: Database,
    user_id: int,
    achievement_id: int
) -> Optional[UserAchievementProgress]:
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                f"""
                SELECT {_PROGRESS_COLUMNS}
                FROM user_achievements ua
                WHERE ua.user_id = %s AND ua.achievement_id = %s AND ua.deleted = FALSE
                """,
                (user_id, achievement_id)
            )
            row = await cur.fetchone()
            return UserAchievementProgress(**row) if row else None


async def get_user_achievements(db: Database, user_id: int) -> list[UserAchievementProgress]:
    """Progress rows joined with their catalog entries"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                f"""
                SELECT {_PROGRESS_COLUMNS},
                       a.name, a.description, a.icon, a.metric_type, a.target_value,
                       a.created_at AS achievement_created_at
                FROM user_achievements ua
                JOIN achievements a ON a.achievement_id = ua.achievement_id
                WHERE ua.user_id = %s AND ua.deleted = FALSE AND a.deleted = FALSE
                ORDER BY a.achievement_id
                """,
                (user_id,)
            )
            rows = await cur.fetchall()

    progress = []
    for row in rows:
        achievement = Achievement(
            achievement_id=row['achievement_id'],
            name=row['name'],
            description=row['description'],
            icon=row['icon'],
            metric_type=row['metric_type'],
            target_value=row['target_value'],
            created_at=row['achievement_created_at'],
        )
        progress.append(UserAchievementProgress(
            user_achievement_id=row['user_achievement_id'],
            user_id=row['user_id'],
            achievement_id=row['achievement_id'],
            current_progress=row['current_progress'],
            is_achieved=row['is_achieved'],
            achieved_at=row['achieved_at'],
            created_at=row['created_at'],
            updated_at=row['updated_at'],
            deleted=row['deleted'],
            achievement=achievement,
        ))
    return progress


async def upsert_user_achievement(
    db: Database,
    user_id: int,
    achievement_id: int,
    current_progress: int,
    is_achieved: bool,
    achieved_at: Optional[datetime]
) -> None:
    """
    Insert or update progress for (user, achievement)

    An achieved row stays achieved and keeps its first achieved_at. A
    soft-deleted row is revived with the new values.
    """
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                INSERT INTO user_achievements
                    (user_id, achievement_id, current_progress, is_achieved, achieved_at)
                VALUES (%s, %s, %s, %s, %s)
                ON CONFLICT (user_id, achievement_id) DO UPDATE
                SET current_progress = EXCLUDED.current_progress,
                    is_achieved = CASE
                        WHEN user_achievements.deleted THEN EXCLUDED.is_achieved
                        ELSE user_achievements.is_achieved OR EXCLUDED.is_achieved
                    END,
                    achieved_at = CASE
                        WHEN user_achievements.deleted THEN EXCLUDED.achieved_at
                        ELSE COALESCE(user_achievements.achieved_at, EXCLUDED.achieved_at)
                    END,
                    deleted = FALSE,
                    updated_at = CURRENT_TIMESTAMP
                """,
                (user_id, achievement_id, current_progress, is_achieved, achieved_at)
            )
            await conn.commit()


async def reset_user_achievements(db: Database, user_id: int) -> int:
    """
    Soft-delete all progress rows of a user

    Returns:
        Number of rows reset
    """
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                UPDATE user_achievements
                SET deleted = TRUE, updated_at = CURRENT_TIMESTAMP
                WHERE user_id = %s AND deleted = FALSE
                """,
                (user_id,)
            )
            count = cur.rowcount
            await conn.commit()
            logger.info(f"Reset {count} achievement progress rows for user {user_id}")
            return count
