"""
Service Layer Package

Business logic between a frontend and the data access layer.

- UserService: Accounts, login session, profile
- ActivityService: Check-ins, activity logging, reminder settings
- TipsService: Daily health tips and favorites
- AchievementService: Achievement evaluation for the logged-in user
- NotificationService: Achievement and reminder notifications
"""

from active_break.services.container import ServiceContainer
from active_break.services.user_service import UserService
from active_break.services.activity_service import ActivityService
from active_break.services.achievement_service import AchievementService
from active_break.services.tips_service import TipsService
from active_break.services.notification_service import NotificationService

__all__ = [
    "ServiceContainer",
    "UserService",
    "ActivityService",
    "AchievementService",
    "TipsService",
    "NotificationService",
]
