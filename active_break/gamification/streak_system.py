"""
Streak Calculations

Two kinds of streaks:
- check-in streak: stored per user, advanced on every daily check-in
- exercise streak: derived from activity record dates on demand

Both are plain calendar arithmetic with no database access, so the
services and metric accessors share them.
"""

from typing import Iterable, Optional
from datetime import date, timedelta
import logging

from active_break.models.checkin import CheckinStreak

logger = logging.getLogger(__name__)


def calculate_exercise_streak(activity_dates: Iterable[date]) -> int:
    """
    Count consecutive exercise days, starting from the most recent one

    Walks the distinct dates newest first and stops at the first gap.
    The run is anchored at the latest activity date, not at today.

    Example:
        2024-01-03, 2024-01-02, 2024-01-01, 2023-12-30 -> 3

    Args:
        activity_dates: Calendar days with at least one activity record

    Returns:
        Length of the run (0 for no dates)
    """
    streak = 0
    last_date: Optional[date] = None

    for current in sorted(set(activity_dates), reverse=True):
        if last_date is None:
            streak = 1
        elif last_date - current == timedelta(days=1):
            streak += 1
        else:
            break
        last_date = current

    return streak


def update_checkin_streak(
    user_id: int,
    existing: Optional[CheckinStreak],
    checkin_date: date
) -> CheckinStreak:
    """
    Advance the check-in streak for a check-in on checkin_date

    Logic:
    - No previous streak: start at 1
    - Same day as the last check-in: unchanged
    - Day after the last check-in: increment
    - Any other gap: reset to 1
    - longest_streak never decreases

    Returns:
        New streak counters (not persisted)
    """
    if existing is None:
        return CheckinStreak(
            user_id=user_id,
            current_streak=1,
            longest_streak=1,
            total_checkin=1,
            last_checkin_date=checkin_date,
        )

    if existing.last_checkin_date == checkin_date:
        logger.debug(f"User {user_id} already counted for {checkin_date}, streak unchanged")
        return existing

    if existing.last_checkin_date == checkin_date - timedelta(days=1):
        current = existing.current_streak + 1
    else:
        current = 1
        if existing.current_streak > 1:
            logger.info(
                f"User {user_id} check-in streak broken. "
                f"Was {existing.current_streak}, last check-in {existing.last_checkin_date}"
            )

    return CheckinStreak(
        user_id=user_id,
        current_streak=current,
        longest_streak=max(current, existing.longest_streak),
        total_checkin=existing.total_checkin + 1,
        last_checkin_date=checkin_date,
    )
