"""Pydantic models for active-break records"""
from active_break.models.user import User
from active_break.models.checkin import CheckIn, CheckinStreak
from active_break.models.activity import PhysicalActivity, ActivityRecord
from active_break.models.achievement import MetricType, Achievement, UserAchievementProgress
from active_break.models.reminder import ReminderSetting, ReminderLog
from active_break.models.tip import UserTip

__all__ = [
    "User",
    "CheckIn",
    "CheckinStreak",
    "PhysicalActivity",
    "ActivityRecord",
    "MetricType",
    "Achievement",
    "UserAchievementProgress",
    "ReminderSetting",
    "ReminderLog",
    "UserTip",
]
