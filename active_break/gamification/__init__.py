"""
Gamification for active-break

- Metric accessors behind achievement progress
- Check-in and exercise streaks
- Achievement evaluation and statistics
"""

from active_break.gamification.metrics import get_metric_value, METRIC_ACCESSORS
from active_break.gamification.streak_system import calculate_exercise_streak, update_checkin_streak
from active_break.gamification.achievement_system import (
    AchievementOutcome,
    EvaluationReport,
    evaluate_achievements,
    calculate_achievement_stats,
    get_user_achievements,
    format_achievement_unlock_message,
)

__all__ = [
    "get_metric_value",
    "METRIC_ACCESSORS",
    "calculate_exercise_streak",
    "update_checkin_streak",
    "AchievementOutcome",
    "EvaluationReport",
    "evaluate_achievements",
    "calculate_achievement_stats",
    "get_user_achievements",
    "format_achievement_unlock_message",
]
