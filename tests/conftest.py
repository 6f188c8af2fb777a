"""Global test fixtures and utilities for active-break tests"""
import pytest
from unittest.mock import AsyncMock, MagicMock
from datetime import datetime, time, timezone

from active_break.models.achievement import Achievement, MetricType
from active_break.models.reminder import ReminderSetting
from active_break.models.user import User


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture
def mock_db_cursor():
    """Mock database cursor with empty query results"""
    cursor = AsyncMock()
    cursor.fetchone = AsyncMock(return_value=None)
    cursor.fetchall = AsyncMock(return_value=[])
    cursor.execute = AsyncMock()
    cursor.executemany = AsyncMock()
    cursor.rowcount = 0
    return cursor


@pytest.fixture
def mock_db_connection(mock_db_cursor):
    """Mock connection whose cursor() is an async context manager"""
    conn = MagicMock()
    conn.cursor.return_value.__aenter__.return_value = mock_db_cursor
    conn.commit = AsyncMock()
    conn.rollback = AsyncMock()
    return conn


@pytest.fixture
def mock_db(mock_db_connection):
    """Mock Database handle; db.connection() yields mock_db_connection"""
    db = MagicMock()
    db.connection.return_value.__aenter__.return_value = mock_db_connection
    return db


# ============================================================================
# Domain Fixtures
# ============================================================================

@pytest.fixture
def test_user_id():
    """Standard test user ID"""
    return 42


@pytest.fixture
def test_user(test_user_id):
    return User(
        user_id=test_user_id,
        username="runner",
        password_hash="salt$hash",
        email="runner@example.com",
    )


@pytest.fixture
def make_achievement():
    """Factory for catalog entries"""
    def _make(achievement_id=1, metric_type=MetricType.CHECKIN_COUNT, target_value=5, name=None):
        return Achievement(
            achievement_id=achievement_id,
            name=name or f"Achievement {achievement_id}",
            description="Test achievement",
            icon="🏅",
            metric_type=metric_type,
            target_value=target_value,
        )
    return _make


@pytest.fixture
def make_reminder_setting(test_user_id):
    """Factory for reminder settings"""
    def _make(
        start=time(9, 0),
        end=time(17, 0),
        interval_minutes=60,
        repeat_every_days=1,
        activity_type_id=1,
        enabled=True,
    ):
        return ReminderSetting(
            reminder_id=1,
            user_id=test_user_id,
            activity_type_id=activity_type_id,
            enabled=enabled,
            interval_minutes=interval_minutes,
            repeat_every_days=repeat_every_days,
            start_time=start,
            end_time=end,
        )
    return _make


@pytest.fixture
def fixed_now():
    """Monday 2024-01-15 10:30 UTC"""
    return datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
