"""
UserService - Accounts and Session

Handles registration, login, logout, profile updates and password changes.
Keeps the logged-in user for the lifetime of the service instance.
"""

import hashlib
import hmac
import logging
import secrets
from datetime import date, datetime, timezone
from typing import Optional

from active_break.db import queries
from active_break.db.connection import Database
from active_break.exceptions import (
    AuthenticationError,
    NotLoggedInError,
    RecordNotFoundError,
    ValidationError,
)
from active_break.models.user import User
from active_break.monitoring import set_user_context

logger = logging.getLogger(__name__)

PBKDF2_ITERATIONS = 200_000
MIN_PASSWORD_LENGTH = 6


def hash_password(password: str, salt: Optional[str] = None) -> str:
    """
    Salted PBKDF2-SHA256 hash

    Returns:
        "salt$hexdigest"
    """
    salt = salt or secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac(
        "sha256", password.encode("utf-8"), salt.encode("utf-8"), PBKDF2_ITERATIONS
    )
    return f"{salt}${digest.hex()}"


def verify_password(password: str, stored_hash: str) -> bool:
    salt, sep, _ = stored_hash.partition("$")
    if not sep:
        return False
    return hmac.compare_digest(hash_password(password, salt), stored_hash)


class UserService:
    """
    Service for user accounts.

    Responsibilities:
    - Registration with unique username and email
    - Login by email or username
    - Session state (current user)
    - Profile and password updates
    """

    def __init__(self, db: Database):
        """
        Initialize UserService.

        Args:
            db: Database handle
        """
        self.db = db
        self._current_user: Optional[User] = None

    @property
    def current_user(self) -> Optional[User]:
        return self._current_user

    @property
    def is_logged_in(self) -> bool:
        return self._current_user is not None

    def require_user(self) -> User:
        """Logged-in user, or NotLoggedInError"""
        if self._current_user is None:
            raise NotLoggedInError()
        return self._current_user

    async def register(
        self,
        username: str,
        password: str,
        email: str,
        phone: Optional[str] = None,
        gender: Optional[str] = None
    ) -> User:
        """
        Create an account and log it in.

        Raises:
            ValidationError: Duplicate email or username, or password too short
        """
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
                field="password",
            )

        try:
            user = User(
                username=username,
                password_hash=hash_password(password),
                email=email,
                phone=phone,
                gender=gender,
            )
        except ValueError as e:
            raise ValidationError(str(e), field="user") from e

        if await queries.get_user_by_email(self.db, user.email):
            raise ValidationError("Email is already registered", field="email", value=user.email)
        if await queries.get_user_by_username(self.db, user.username):
            raise ValidationError("Username is already taken", field="username", value=user.username)

        user.user_id = await queries.create_user(self.db, user)
        self._set_session(user)

        logger.info(f"Registered user {user.user_id} ({user.username})")
        return user

    async def login(self, email_or_username: str, password: str) -> User:
        """
        Log in by email or username.

        Raises:
            AuthenticationError: Unknown user or wrong password
        """
        identifier = email_or_username.strip()
        user = await queries.get_user_by_email(self.db, identifier.lower())
        if user is None:
            user = await queries.get_user_by_username(self.db, identifier)

        if user is None or not verify_password(password, user.password_hash):
            raise AuthenticationError(
                f"Login failed for '{identifier}'",
                operation="login",
            )

        login_time = datetime.now(timezone.utc)
        await queries.update_last_login(self.db, user.user_id, login_time)
        user.last_login_time = login_time
        self._set_session(user)

        logger.info(f"User {user.user_id} logged in")
        return user

    def logout(self) -> None:
        if self._current_user is not None:
            logger.info(f"User {self._current_user.user_id} logged out")
        self._current_user = None

    async def update_profile(
        self,
        username: Optional[str] = None,
        phone: Optional[str] = None,
        gender: Optional[str] = None,
        avatar_url: Optional[str] = None,
        birthday: Optional[date] = None
    ) -> User:
        """Update profile fields of the logged-in user; None leaves a field unchanged"""
        user = self.require_user()

        changes = {
            'username': username,
            'phone': phone,
            'gender': gender,
            'avatar_url': avatar_url,
            'birthday': birthday,
        }
        changes = {key: value for key, value in changes.items() if value is not None}

        if 'username' in changes and changes['username'] != user.username:
            existing = await queries.get_user_by_username(self.db, changes['username'])
            if existing and existing.user_id != user.user_id:
                raise ValidationError("Username is already taken", field="username", value=changes['username'])

        try:
            updated = User(**{**user.model_dump(), **changes})
        except ValueError as e:
            raise ValidationError(str(e), field="profile") from e

        await queries.update_user(self.db, updated)
        self._current_user = updated
        logger.info(f"Updated profile of user {updated.user_id}: {sorted(changes)}")
        return updated

    async def change_password(self, current_password: str, new_password: str) -> None:
        """
        Raises:
            AuthenticationError: Current password is wrong
            ValidationError: New password too short
        """
        user = self.require_user()

        if not verify_password(current_password, user.password_hash):
            raise AuthenticationError(
                "Current password is incorrect",
                user_id=user.user_id,
                operation="change_password",
            )
        if len(new_password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
                field="password",
            )

        user.password_hash = hash_password(new_password)
        await queries.update_user(self.db, user)
        logger.info(f"Password changed for user {user.user_id}")

    async def reload_current_user(self) -> User:
        """Refresh the session user from the store"""
        user = self.require_user()
        fresh = await queries.get_user_by_id(self.db, user.user_id)
        if fresh is None:
            self._current_user = None
            raise RecordNotFoundError(
                f"User {user.user_id} no longer exists",
                record_type="User",
                record_id=user.user_id,
            )
        self._current_user = fresh
        return fresh

    def _set_session(self, user: User) -> None:
        self._current_user = user
        set_user_context(user.user_id)
