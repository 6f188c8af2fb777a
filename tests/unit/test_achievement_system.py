"""Unit tests for Achievement System (active_break/gamification/achievement_system.py)"""
import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, patch

from active_break.exceptions import QueryError
from active_break.gamification.achievement_system import (
    calculate_achievement_stats,
    evaluate_achievements,
    format_achievement_unlock_message,
    sort_achievement_progress,
)
from active_break.models.achievement import Achievement, MetricType, UserAchievementProgress

MODULE = 'active_break.gamification.achievement_system'
NOW = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)


class FakeProgressStore:
    """In-memory stand-in for the user_achievements table"""

    def __init__(self):
        self.rows: dict[tuple[int, int], UserAchievementProgress] = {}

    async def get_user_achievement(self, db, user_id, achievement_id):
        return self.rows.get((user_id, achievement_id))

    async def upsert_user_achievement(self, db, user_id, achievement_id, current_progress, is_achieved, achieved_at):
        existing = self.rows.get((user_id, achievement_id))
        self.rows[(user_id, achievement_id)] = UserAchievementProgress(
            user_id=user_id,
            achievement_id=achievement_id,
            current_progress=current_progress,
            is_achieved=is_achieved or (existing.is_achieved if existing else False),
            achieved_at=(existing.achieved_at if existing and existing.achieved_at else achieved_at),
        )


@pytest.fixture
def store():
    return FakeProgressStore()


def _patch_store(store, catalog, metric_values):
    """Patch queries and metric lookup; metric_values maps MetricType -> value or exception"""
    async def fake_metric(db, user_id, metric_type, tz_name="UTC"):
        if metric_type is None:
            return 0
        value = metric_values[metric_type]
        if isinstance(value, Exception):
            raise value
        return value

    return (
        patch(f'{MODULE}.queries.get_all_achievements', AsyncMock(return_value=catalog)),
        patch(f'{MODULE}.queries.get_user_achievement', side_effect=store.get_user_achievement),
        patch(f'{MODULE}.queries.upsert_user_achievement', side_effect=store.upsert_user_achievement),
        patch(f'{MODULE}.get_metric_value', side_effect=fake_metric),
    )


async def _evaluate(store, catalog, metric_values, user_id=1, now=NOW):
    p1, p2, p3, p4 = _patch_store(store, catalog, metric_values)
    with p1, p2, p3, p4:
        return await evaluate_achievements(None, user_id, now=now)


# ============================================================================
# Evaluation Tests
# ============================================================================

@pytest.mark.asyncio
async def test_value_equal_to_target_unlocks(store, make_achievement):
    achievement = make_achievement(target_value=5)

    report = await _evaluate(store, [achievement], {MetricType.CHECKIN_COUNT: 5})

    assert report.newly_unlocked == [achievement]
    assert store.rows[(1, 1)].is_achieved is True
    assert store.rows[(1, 1)].achieved_at == NOW


@pytest.mark.asyncio
async def test_streak_metrics_evaluated_in_given_timezone(store, make_achievement):
    catalog = [make_achievement(metric_type=MetricType.EXERCISE_STREAK, target_value=3)]
    seen = []

    async def fake_metric(db, user_id, metric_type, tz_name):
        seen.append(tz_name)
        return 3

    with patch(f'{MODULE}.queries.get_user_achievement', side_effect=store.get_user_achievement), \
            patch(f'{MODULE}.queries.upsert_user_achievement', side_effect=store.upsert_user_achievement), \
            patch(f'{MODULE}.queries.get_all_achievements', AsyncMock(return_value=catalog)), \
            patch(f'{MODULE}.get_metric_value', side_effect=fake_metric):
        report = await evaluate_achievements(None, 1, now=NOW, tz_name="Asia/Tokyo")

    assert seen == ["Asia/Tokyo"]
    assert report.newly_unlocked == catalog


@pytest.mark.asyncio
async def test_value_below_target_records_progress(store, make_achievement):
    report = await _evaluate(store, [make_achievement(target_value=5)], {MetricType.CHECKIN_COUNT: 4})

    assert report.newly_unlocked == []
    assert store.rows[(1, 1)].current_progress == 4
    assert store.rows[(1, 1)].is_achieved is False
    assert store.rows[(1, 1)].achieved_at is None


@pytest.mark.asyncio
async def test_second_run_without_changes_unlocks_nothing(store, make_achievement):
    catalog = [make_achievement(target_value=3)]
    values = {MetricType.CHECKIN_COUNT: 3}

    first = await _evaluate(store, catalog, values)
    second = await _evaluate(store, catalog, values, now=NOW + timedelta(hours=1))

    assert len(first.newly_unlocked) == 1
    assert second.newly_unlocked == []
    assert store.rows[(1, 1)].achieved_at == NOW


@pytest.mark.asyncio
async def test_achieved_is_monotonic(store, make_achievement):
    """A drop in the metric never re-locks an achievement"""
    catalog = [make_achievement(metric_type=MetricType.CHECKIN_STREAK, target_value=7)]

    await _evaluate(store, catalog, {MetricType.CHECKIN_STREAK: 7})
    report = await _evaluate(store, catalog, {MetricType.CHECKIN_STREAK: 1})

    outcome = report.outcomes[0]
    assert outcome.achieved is True
    assert outcome.newly_unlocked is False
    assert outcome.progress == 1
    assert store.rows[(1, 1)].is_achieved is True


@pytest.mark.asyncio
async def test_unknown_metric_type_never_unlocks(store):
    legacy = Achievement(
        achievement_id=50,
        name="Legacy",
        description="d",
        metric_type="steps_walked",
        target_value=1,
    )

    report = await _evaluate(store, [legacy], {})

    assert report.newly_unlocked == []
    assert report.outcomes[0].progress == 0
    assert report.failures == []


@pytest.mark.asyncio
async def test_failure_is_isolated(store, make_achievement):
    """One failing metric does not stop the remaining achievements"""
    broken = make_achievement(1, MetricType.EXERCISE_STREAK, 3)
    fine = make_achievement(2, MetricType.CHECKIN_COUNT, 1)

    report = await _evaluate(
        store,
        [broken, fine],
        {
            MetricType.EXERCISE_STREAK: RuntimeError("connection lost"),
            MetricType.CHECKIN_COUNT: 1,
        },
    )

    assert [o.achievement.achievement_id for o in report.failures] == [1]
    assert isinstance(report.failures[0].error, RuntimeError)
    assert report.newly_unlocked == [fine]
    assert (1, 1) not in store.rows


@pytest.mark.asyncio
async def test_outcomes_follow_catalog_order(store, make_achievement):
    catalog = [make_achievement(i, MetricType.EXERCISE_COUNT, i) for i in (1, 2, 3)]

    report = await _evaluate(store, catalog, {MetricType.EXERCISE_COUNT: 2})

    assert [o.achievement.achievement_id for o in report.outcomes] == [1, 2, 3]
    assert [a.achievement_id for a in report.newly_unlocked] == [1, 2]


@pytest.mark.asyncio
async def test_catalog_failure_raises_query_error():
    with patch(f'{MODULE}.queries.get_all_achievements', AsyncMock(side_effect=RuntimeError("boom"))):
        with pytest.raises(QueryError):
            await evaluate_achievements(None, 1)


# ============================================================================
# Statistics Tests
# ============================================================================

def _row(achievement_id, current, target, achieved=False, achieved_at=None):
    return UserAchievementProgress(
        user_id=1,
        achievement_id=achievement_id,
        current_progress=current,
        is_achieved=achieved,
        achieved_at=achieved_at,
        achievement=Achievement(
            achievement_id=achievement_id,
            name=f"A{achievement_id}",
            description="d",
            metric_type=MetricType.EXERCISE_COUNT,
            target_value=target,
        ),
    )


def test_stats_counts():
    rows = [
        _row(1, 10, 10, achieved=True, achieved_at=NOW),
        _row(2, 8, 10),
        _row(3, 2, 10),
    ]

    stats = calculate_achievement_stats(rows, 0.8)

    assert stats == {'total': 3, 'achieved': 1, 'unachieved': 2, 'near_completion': 1}


def test_stats_threshold_is_configurable():
    rows = [_row(1, 5, 10), _row(2, 7, 10)]

    assert calculate_achievement_stats(rows, 0.5)['near_completion'] == 2
    assert calculate_achievement_stats(rows, 0.8)['near_completion'] == 0


def test_stats_empty():
    assert calculate_achievement_stats([], 0.8) == {
        'total': 0, 'achieved': 0, 'unachieved': 0, 'near_completion': 0
    }


def test_sort_achieved_first_then_by_progress():
    rows = [
        _row(1, 1, 10),
        _row(2, 5, 5, achieved=True, achieved_at=NOW - timedelta(days=2)),
        _row(3, 9, 10),
        _row(4, 3, 3, achieved=True, achieved_at=NOW),
    ]

    ordered = [row.achievement_id for row in sort_achievement_progress(rows)]

    assert ordered == [4, 2, 3, 1]


def test_unlock_message_contains_name_and_description(make_achievement):
    message = format_achievement_unlock_message(make_achievement(name="Week Warrior"))

    assert "ACHIEVEMENT UNLOCKED" in message
    assert "Week Warrior" in message
    assert "Test achievement" in message
