"""Unit tests for AchievementService"""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from active_break.config import DEFAULT_TIMEZONE
from active_break.exceptions import QueryError
from active_break.gamification.achievement_system import AchievementOutcome, EvaluationReport
from active_break.services.achievement_service import AchievementService

MODULE = 'active_break.services.achievement_service'


@pytest.fixture
def notifier():
    notifier = MagicMock()
    notifier.show_achievement_unlocked = AsyncMock()
    return notifier


@pytest.fixture
def logged_in_user_service(test_user):
    service = MagicMock()
    service.current_user = test_user
    return service


@pytest.fixture
def logged_out_user_service():
    service = MagicMock()
    service.current_user = None
    return service


@pytest.mark.asyncio
async def test_not_logged_in_is_noop(mock_db, logged_out_user_service, notifier):
    service = AchievementService(mock_db, logged_out_user_service, notifier)

    with patch(f'{MODULE}.evaluate_achievements', AsyncMock()) as mock_evaluate:
        result = await service.check_achievements()

    assert result == []
    mock_evaluate.assert_not_called()
    notifier.show_achievement_unlocked.assert_not_called()


@pytest.mark.asyncio
async def test_one_notification_per_unlock(mock_db, logged_in_user_service, notifier, make_achievement, test_user_id):
    first = make_achievement(1)
    second = make_achievement(2)
    locked = make_achievement(3)
    report = EvaluationReport(
        user_id=test_user_id,
        outcomes=[
            AchievementOutcome(achievement=first, progress=5, achieved=True, newly_unlocked=True),
            AchievementOutcome(achievement=second, progress=9, achieved=True, newly_unlocked=True),
            AchievementOutcome(achievement=locked, progress=1),
        ],
    )
    service = AchievementService(mock_db, logged_in_user_service, notifier)

    with patch(f'{MODULE}.evaluate_achievements', AsyncMock(return_value=report)) as mock_evaluate:
        result = await service.check_achievements()

    assert result == [first, second]
    mock_evaluate.assert_awaited_once_with(mock_db, test_user_id, tz_name=DEFAULT_TIMEZONE)
    assert notifier.show_achievement_unlocked.await_count == 2
    notifier.show_achievement_unlocked.assert_any_await(first)
    notifier.show_achievement_unlocked.assert_any_await(second)


@pytest.mark.asyncio
async def test_catalog_failure_degrades_to_empty(mock_db, logged_in_user_service, notifier):
    service = AchievementService(mock_db, logged_in_user_service, notifier)

    with patch(f'{MODULE}.evaluate_achievements', AsyncMock(side_effect=QueryError("catalog unavailable"))):
        result = await service.check_achievements()

    assert result == []
    notifier.show_achievement_unlocked.assert_not_called()


@pytest.mark.asyncio
async def test_notifier_failure_does_not_lose_unlocks(mock_db, logged_in_user_service, notifier, make_achievement, test_user_id):
    achievement = make_achievement(1)
    report = EvaluationReport(
        user_id=test_user_id,
        outcomes=[AchievementOutcome(achievement=achievement, achieved=True, newly_unlocked=True)],
    )
    notifier.show_achievement_unlocked = AsyncMock(side_effect=RuntimeError("display gone"))
    service = AchievementService(mock_db, logged_in_user_service, notifier)

    with patch(f'{MODULE}.evaluate_achievements', AsyncMock(return_value=report)):
        result = await service.check_achievements()

    assert result == [achievement]


@pytest.mark.asyncio
async def test_get_stats_uses_configured_threshold(mock_db, logged_in_user_service, notifier):
    service = AchievementService(mock_db, logged_in_user_service, notifier, near_completion_threshold=0.5)

    with patch(f'{MODULE}.get_user_achievements', AsyncMock(return_value=[])), \
            patch(f'{MODULE}.calculate_achievement_stats', return_value={'total': 0}) as mock_stats:
        await service.get_stats()

    mock_stats.assert_called_once_with([], 0.5)


@pytest.mark.asyncio
async def test_get_achievements_logged_out(mock_db, logged_out_user_service, notifier):
    service = AchievementService(mock_db, logged_out_user_service, notifier)

    assert await service.get_achievements() == []


@pytest.mark.asyncio
async def test_reset_progress_for_logged_in_user(mock_db, logged_in_user_service, notifier, test_user):
    logged_in_user_service.require_user.return_value = test_user
    service = AchievementService(mock_db, logged_in_user_service, notifier)

    with patch(f'{MODULE}.queries.reset_user_achievements', AsyncMock(return_value=3)) as mock_reset:
        count = await service.reset_progress()

    assert count == 3
    mock_reset.assert_awaited_once_with(mock_db, test_user.user_id)


@pytest.mark.asyncio
async def test_check_achievements_uses_service_timezone(mock_db, logged_in_user_service, notifier, test_user_id):
    service = AchievementService(mock_db, logged_in_user_service, notifier, tz_name="Asia/Tokyo")

    with patch(f'{MODULE}.evaluate_achievements', AsyncMock(return_value=EvaluationReport(user_id=test_user_id))) as mock_evaluate:
        await service.check_achievements()

    mock_evaluate.assert_awaited_once_with(mock_db, test_user_id, tz_name="Asia/Tokyo")
