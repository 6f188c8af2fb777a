"""User account queries"""
import logging
from typing import Optional
from datetime import datetime
from active_break.db.connection import Database
from active_break.models.user import User

logger = logging.getLogger(__name__)

_USER_COLUMNS = """
    user_id, username, password_hash, email, phone, gender, avatar_url, birthday,
    last_login_time, created_at, updated_at, deleted
"""


async def create_user(db: Database, user: User) -> int:
    """
    Insert a new user

    Returns:
        New user_id
    """
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                INSERT INTO users (username, password_hash, email, phone, gender, avatar_url, birthday)
                VALUES (%s, %s, %s, %s, %s, %s, %s)
                RETURNING user_id
                """,
                (
                    user.username,
                    user.password_hash,
                    user.email,
                    user.phone,
                    user.gender,
                    user.avatar_url,
                    user.birthday,
                )
            )
            row = await cur.fetchone()
            await conn.commit()
            logger.info(f"Created user {row['user_id']} ({user.username})")
            return row['user_id']


async def _get_user_where(db: Database, clause: str, value) -> Optional[User]:
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                f"SELECT {_USER_COLUMNS} FROM users WHERE {clause} AND deleted = FALSE",
                (value,)
            )
            row = await cur.fetchone()
            return User(**row) if row else None


async def get_user_by_email(db: Database, email: str) -> Optional[User]:
    return await _get_user_where(db, "email = %s", email.strip().lower())


async def get_user_by_username(db: Database, username: str) -> Optional[User]:
    return await _get_user_where(db, "username = %s", username.strip())


async def get_user_by_id(db: Database, user_id: int) -> Optional[User]:
    return await _get_user_where(db, "user_id = %s", user_id)


async def update_user(db: Database, user: User) -> None:
    """Persist profile fields and password hash of an existing user"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                UPDATE users
                SET username = %s,
                    password_hash = %s,
                    phone = %s,
                    gender = %s,
                    avatar_url = %s,
                    birthday = %s,
                    updated_at = CURRENT_TIMESTAMP
                WHERE user_id = %s
                """,
                (
                    user.username,
                    user.password_hash,
                    user.phone,
                    user.gender,
                    user.avatar_url,
                    user.birthday,
                    user.user_id,
                )
            )
            await conn.commit()


async def update_last_login(db: Database, user_id: int, login_time: datetime) -> None:
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                UPDATE users
                SET last_login_time = %s, updated_at = CURRENT_TIMESTAMP
                WHERE user_id = %s
                """,
                (login_time, user_id)
            )
            await conn.commit()
