"""
Database queries - re-exported so callers can write
'from active_break.db import queries' and use queries.<function>.

Module organization:
- users.py: User accounts
- checkins.py: Check-ins and check-in streaks
- activities.py: Activity catalog and activity records
- metrics.py: Read-only aggregates behind achievement metrics
- achievements.py: Achievement catalog and per-user progress
- reminders.py: Reminder settings and reminder logs
- tips.py: Daily health tips and tip favorites
"""

from active_break.db.queries.users import (
    create_user,
    get_user_by_email,
    get_user_by_username,
    get_user_by_id,
    update_user,
    update_last_login,
)

from active_break.db.queries.checkins import (
    insert_check_in_with_streak,
    get_check_in_for_date,
    get_checkin_streak,
)

from active_break.db.queries.activities import (
    get_all_physical_activities,
    get_physical_activity_by_id,
    insert_activity_record,
    get_recent_activity_records,
    get_activity_records_by_date_range,
    has_activity_between,
)

from active_break.db.queries.metrics import (
    count_check_ins,
    get_current_checkin_streak,
    count_activity_records,
    sum_calories_burned,
    sum_exercise_duration,
    get_activity_dates,
)

from active_break.db.queries.achievements import (
    get_all_achievements,
    get_user_achievement,
    get_user_achievements,
    upsert_user_achievement,
    reset_user_achievements,
)

from active_break.db.queries.reminders import (
    get_active_reminder_settings,
    get_reminder_setting,
    upsert_reminder_setting,
    get_users_with_active_reminders,
    get_last_reminder_time,
    insert_reminder_log,
)

from active_break.db.queries.tips import (
    insert_daily_tips,
    get_tips_for_date,
    get_user_tip,
    get_favorite_tips,
    add_tip_favorite,
    remove_tip_favorite,
)

__all__ = [
    # Users
    "create_user",
    "get_user_by_email",
    "get_user_by_username",
    "get_user_by_id",
    "update_user",
    "update_last_login",
    # Check-ins
    "insert_check_in_with_streak",
    "get_check_in_for_date",
    "get_checkin_streak",
    # Activities
    "get_all_physical_activities",
    "get_physical_activity_by_id",
    "insert_activity_record",
    "get_recent_activity_records",
    "get_activity_records_by_date_range",
    "has_activity_between",
    # Metrics
    "count_check_ins",
    "get_current_checkin_streak",
    "count_activity_records",
    "sum_calories_burned",
    "sum_exercise_duration",
    "get_activity_dates",
    # Achievements
    "get_all_achievements",
    "get_user_achievement",
    "get_user_achievements",
    "upsert_user_achievement",
    "reset_user_achievements",
    # Reminders
    "get_active_reminder_settings",
    "get_reminder_setting",
    "upsert_reminder_setting",
    "get_users_with_active_reminders",
    "get_last_reminder_time",
    "insert_reminder_log",
    # Tips
    "insert_daily_tips",
    "get_tips_for_date",
    "get_user_tip",
    "get_favorite_tips",
    "add_tip_favorite",
    "remove_tip_favorite",
]
