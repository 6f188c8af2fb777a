"""Unit tests for UserService"""

import pytest
from unittest.mock import AsyncMock, patch

from active_break.exceptions import (
    AuthenticationError,
    NotLoggedInError,
    RecordNotFoundError,
    ValidationError,
)
from active_break.models.user import User
from active_break.services.user_service import UserService, hash_password, verify_password


@pytest.fixture
def user_service(mock_db):
    """Create UserService instance with mocks"""
    return UserService(mock_db)


def _stored_user(password="secret123"):
    return User(
        user_id=42,
        username="runner",
        password_hash=hash_password(password),
        email="runner@example.com",
    )


def test_hash_password_is_salted():
    first = hash_password("secret123")
    second = hash_password("secret123")

    assert first != second
    assert verify_password("secret123", first)
    assert verify_password("secret123", second)


def test_verify_password_rejects_wrong_password():
    assert verify_password("wrong", hash_password("secret123")) is False


def test_verify_password_rejects_malformed_hash():
    assert verify_password("secret123", "no-separator") is False


@pytest.mark.asyncio
@patch('active_break.services.user_service.queries')
async def test_register_success(mock_queries, user_service):
    mock_queries.get_user_by_email = AsyncMock(return_value=None)
    mock_queries.get_user_by_username = AsyncMock(return_value=None)
    mock_queries.create_user = AsyncMock(return_value=42)

    user = await user_service.register("runner", "secret123", "Runner@Example.com")

    assert user.user_id == 42
    assert user.email == "runner@example.com"
    assert user.password_hash != "secret123"
    assert verify_password("secret123", user.password_hash)
    assert user_service.is_logged_in is True
    assert user_service.current_user.user_id == 42


@pytest.mark.asyncio
@patch('active_break.services.user_service.queries')
async def test_register_duplicate_email(mock_queries, user_service):
    mock_queries.get_user_by_email = AsyncMock(return_value=_stored_user())
    mock_queries.create_user = AsyncMock()

    with pytest.raises(ValidationError) as exc_info:
        await user_service.register("someone", "secret123", "runner@example.com")

    assert exc_info.value.field == "email"
    mock_queries.create_user.assert_not_called()
    assert user_service.is_logged_in is False


@pytest.mark.asyncio
@patch('active_break.services.user_service.queries')
async def test_register_duplicate_username(mock_queries, user_service):
    mock_queries.get_user_by_email = AsyncMock(return_value=None)
    mock_queries.get_user_by_username = AsyncMock(return_value=_stored_user())
    mock_queries.create_user = AsyncMock()

    with pytest.raises(ValidationError) as exc_info:
        await user_service.register("runner", "secret123", "other@example.com")

    assert exc_info.value.field == "username"


@pytest.mark.asyncio
async def test_register_short_password(user_service):
    with pytest.raises(ValidationError):
        await user_service.register("runner", "123", "runner@example.com")


@pytest.mark.asyncio
@patch('active_break.services.user_service.queries')
async def test_login_by_email(mock_queries, user_service):
    mock_queries.get_user_by_email = AsyncMock(return_value=_stored_user())
    mock_queries.update_last_login = AsyncMock()

    user = await user_service.login("RUNNER@example.com", "secret123")

    assert user.user_id == 42
    assert user.last_login_time is not None
    mock_queries.get_user_by_email.assert_awaited_once_with(user_service.db, "runner@example.com")
    mock_queries.update_last_login.assert_awaited_once()
    assert user_service.is_logged_in is True


@pytest.mark.asyncio
@patch('active_break.services.user_service.queries')
async def test_login_by_username(mock_queries, user_service):
    mock_queries.get_user_by_email = AsyncMock(return_value=None)
    mock_queries.get_user_by_username = AsyncMock(return_value=_stored_user())
    mock_queries.update_last_login = AsyncMock()

    user = await user_service.login("runner", "secret123")

    assert user.username == "runner"


@pytest.mark.asyncio
@patch('active_break.services.user_service.queries')
async def test_login_wrong_password(mock_queries, user_service):
    mock_queries.get_user_by_email = AsyncMock(return_value=_stored_user())
    mock_queries.update_last_login = AsyncMock()

    with pytest.raises(AuthenticationError):
        await user_service.login("runner@example.com", "wrong-password")

    mock_queries.update_last_login.assert_not_called()
    assert user_service.is_logged_in is False


@pytest.mark.asyncio
@patch('active_break.services.user_service.queries')
async def test_login_unknown_user(mock_queries, user_service):
    mock_queries.get_user_by_email = AsyncMock(return_value=None)
    mock_queries.get_user_by_username = AsyncMock(return_value=None)

    with pytest.raises(AuthenticationError):
        await user_service.login("ghost", "secret123")


@pytest.mark.asyncio
@patch('active_break.services.user_service.queries')
async def test_logout(mock_queries, user_service):
    mock_queries.get_user_by_email = AsyncMock(return_value=_stored_user())
    mock_queries.update_last_login = AsyncMock()
    await user_service.login("runner@example.com", "secret123")

    user_service.logout()

    assert user_service.is_logged_in is False
    assert user_service.current_user is None


@pytest.mark.asyncio
async def test_update_profile_requires_login(user_service):
    with pytest.raises(NotLoggedInError):
        await user_service.update_profile(phone="123")


@pytest.mark.asyncio
@patch('active_break.services.user_service.queries')
async def test_update_profile(mock_queries, user_service):
    mock_queries.get_user_by_email = AsyncMock(return_value=_stored_user())
    mock_queries.update_last_login = AsyncMock()
    mock_queries.update_user = AsyncMock()
    await user_service.login("runner@example.com", "secret123")

    updated = await user_service.update_profile(phone="555-0100", gender="female")

    assert updated.phone == "555-0100"
    assert updated.gender == "female"
    assert updated.username == "runner"
    mock_queries.update_user.assert_awaited_once()


@pytest.mark.asyncio
@patch('active_break.services.user_service.queries')
async def test_change_password(mock_queries, user_service):
    mock_queries.get_user_by_email = AsyncMock(return_value=_stored_user())
    mock_queries.update_last_login = AsyncMock()
    mock_queries.update_user = AsyncMock()
    await user_service.login("runner@example.com", "secret123")

    await user_service.change_password("secret123", "newsecret456")

    saved = mock_queries.update_user.call_args[0][1]
    assert verify_password("newsecret456", saved.password_hash)


@pytest.mark.asyncio
@patch('active_break.services.user_service.queries')
async def test_change_password_wrong_current(mock_queries, user_service):
    mock_queries.get_user_by_email = AsyncMock(return_value=_stored_user())
    mock_queries.update_last_login = AsyncMock()
    mock_queries.update_user = AsyncMock()
    await user_service.login("runner@example.com", "secret123")

    with pytest.raises(AuthenticationError):
        await user_service.change_password("wrong", "newsecret456")

    mock_queries.update_user.assert_not_called()


@pytest.mark.asyncio
@patch('active_break.services.user_service.queries')
async def test_reload_current_user_gone(mock_queries, user_service):
    mock_queries.get_user_by_email = AsyncMock(return_value=_stored_user())
    mock_queries.update_last_login = AsyncMock()
    mock_queries.get_user_by_id = AsyncMock(return_value=None)
    await user_service.login("runner@example.com", "secret123")

    with pytest.raises(RecordNotFoundError):
        await user_service.reload_current_user()

    assert user_service.is_logged_in is False
