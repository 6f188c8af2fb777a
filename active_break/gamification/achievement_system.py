"""
Achievement System

Evaluates the achievement catalog against a user's activity:
- One metric value per achievement (see gamification.metrics)
- Progress rows created lazily and updated on every pass
- Unlocks are permanent: an achieved row never goes back to locked

Features:
- Per-achievement outcomes, so one broken achievement does not hide the rest
- Summary statistics with a configurable near-completion threshold
- Unlock message formatting for notifications
"""

from typing import Optional
from dataclasses import dataclass, field
from datetime import datetime, timezone
import logging

from active_break.config import DEFAULT_TIMEZONE, NEAR_COMPLETION_THRESHOLD
from active_break.db import queries
from active_break.db.connection import Database
from active_break.exceptions import ActiveBreakError, QueryError
from active_break.gamification.metrics import get_metric_value
from active_break.models.achievement import Achievement, UserAchievementProgress
from active_break.monitoring import capture_exception, record_evaluation

logger = logging.getLogger(__name__)


@dataclass
class AchievementOutcome:
    """Result of evaluating one achievement for one user"""
    achievement: Achievement
    progress: int = 0
    achieved: bool = False
    newly_unlocked: bool = False
    error: Optional[Exception] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass
class EvaluationReport:
    """All outcomes of one evaluation pass"""
    user_id: int
    outcomes: list[AchievementOutcome] = field(default_factory=list)

    @property
    def newly_unlocked(self) -> list[Achievement]:
        return [o.achievement for o in self.outcomes if o.newly_unlocked]

    @property
    def failures(self) -> list[AchievementOutcome]:
        return [o for o in self.outcomes if o.failed]


async def evaluate_achievement(
    db: Database,
    user_id: int,
    achievement: Achievement,
    now: Optional[datetime] = None,
    tz_name: str = DEFAULT_TIMEZONE
) -> AchievementOutcome:
    """
    Evaluate and persist progress for a single achievement

    Raises whatever the store raises; evaluate_achievements() isolates it.
    """
    now = now or datetime.now(timezone.utc)

    existing = await queries.get_user_achievement(db, user_id, achievement.achievement_id)
    was_achieved = existing.is_achieved if existing else False

    value = await get_metric_value(db, user_id, achievement.metric_type, tz_name)
    achieved = was_achieved or value >= achievement.target_value
    newly_unlocked = achieved and not was_achieved

    if newly_unlocked:
        achieved_at = now
    else:
        achieved_at = existing.achieved_at if existing else None

    await queries.upsert_user_achievement(
        db,
        user_id,
        achievement.achievement_id,
        current_progress=value,
        is_achieved=achieved,
        achieved_at=achieved_at,
    )

    if newly_unlocked:
        logger.info(
            f"User {user_id} unlocked achievement {achievement.achievement_id} "
            f"({achievement.name}): {value}/{achievement.target_value}"
        )

    return AchievementOutcome(
        achievement=achievement,
        progress=value,
        achieved=achieved,
        newly_unlocked=newly_unlocked,
    )


async def evaluate_achievements(
    db: Database,
    user_id: int,
    now: Optional[datetime] = None,
    tz_name: str = DEFAULT_TIMEZONE
) -> EvaluationReport:
    """
    Evaluate the whole catalog for a user

    Achievements are processed in catalog order. A failure on one achievement
    is logged and stored in its outcome; the others are still evaluated.

    Args:
        db: Database handle
        user_id: User to evaluate
        now: Unlock timestamp for this pass (defaults to current UTC time)
        tz_name: Timezone that defines calendar days for streak metrics

    Returns:
        EvaluationReport with one outcome per catalog entry

    Raises:
        QueryError: If the catalog itself cannot be loaded
    """
    try:
        catalog = await queries.get_all_achievements(db)
    except ActiveBreakError:
        raise
    except Exception as e:
        raise QueryError(
            message=f"Failed to load achievement catalog: {e}",
            user_id=user_id,
            operation="get_all_achievements",
            cause=e,
        )

    report = EvaluationReport(user_id=user_id)

    for achievement in catalog:
        try:
            outcome = await evaluate_achievement(db, user_id, achievement, now, tz_name)
        except Exception as e:
            logger.error(
                f"Error evaluating achievement {achievement.achievement_id} for user {user_id}: {e}",
                exc_info=True
            )
            capture_exception(
                e,
                operation="evaluate_achievement",
                user_id=user_id,
                achievement_id=achievement.achievement_id,
            )
            outcome = AchievementOutcome(achievement=achievement, error=e)
        report.outcomes.append(outcome)

    record_evaluation(
        unlocked_metric_types=[_metric_label(a) for a in report.newly_unlocked],
        failures=[(_metric_label(o.achievement), type(o.error).__name__) for o in report.failures],
    )

    if report.failures:
        logger.warning(
            f"Achievement evaluation for user {user_id} finished with "
            f"{len(report.failures)} failure(s) out of {len(catalog)}"
        )

    return report


def _metric_label(achievement: Achievement) -> str:
    return achievement.metric_type.value if achievement.metric_type else "unknown"


def calculate_achievement_stats(
    progress_rows: list[UserAchievementProgress],
    near_completion_threshold: float = NEAR_COMPLETION_THRESHOLD
) -> dict[str, int]:
    """
    Summarize a user's achievement progress

    Args:
        progress_rows: Progress rows with their catalog entries attached
        near_completion_threshold: Fraction of the target that counts as close

    Returns:
        {'total': int, 'achieved': int, 'unachieved': int, 'near_completion': int}
    """
    achieved = sum(1 for row in progress_rows if row.is_achieved)
    near = sum(1 for row in progress_rows if row.is_near_completion(near_completion_threshold))

    return {
        'total': len(progress_rows),
        'achieved': achieved,
        'unachieved': len(progress_rows) - achieved,
        'near_completion': near,
    }


def sort_achievement_progress(progress_rows: list[UserAchievementProgress]) -> list[UserAchievementProgress]:
    """Achieved first (latest unlock first), then locked by progress descending"""
    epoch = datetime.min.replace(tzinfo=timezone.utc)

    def _unlock_time(row: UserAchievementProgress) -> datetime:
        if row.achieved_at is None:
            return epoch
        if row.achieved_at.tzinfo is None:
            return row.achieved_at.replace(tzinfo=timezone.utc)
        return row.achieved_at

    achieved = sorted(
        (row for row in progress_rows if row.is_achieved),
        key=_unlock_time,
        reverse=True
    )
    locked = sorted(
        (row for row in progress_rows if not row.is_achieved),
        key=lambda row: row.progress_percentage,
        reverse=True
    )
    return achieved + locked


async def get_user_achievements(db: Database, user_id: int) -> list[UserAchievementProgress]:
    """
    Progress rows for display

    Returns:
        Rows joined with their catalog entries, sorted for display
    """
    rows = await queries.get_user_achievements(db, user_id)
    return sort_achievement_progress(rows)


def format_achievement_unlock_message(achievement: Achievement) -> str:
    """
    Format achievement unlock message for celebration

    Args:
        achievement: The unlocked catalog entry

    Returns:
        Formatted celebration message
    """
    icon = achievement.icon or '🏆'

    return f"""🎉 ACHIEVEMENT UNLOCKED! 🎉

{icon} {achievement.name}

{achievement.description}

Keep moving! 💪"""
