"""
Service Container - Dependency Injection Container

Wires the services around one explicit Database handle.
Uses lazy loading to only instantiate services when first accessed.
"""

from dataclasses import dataclass, field
from typing import Optional
import logging

from active_break.config import DEFAULT_TIMEZONE
from active_break.db.connection import Database
from active_break.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """
    Dependency injection container for services.

    Services are lazy-loaded on first access via properties.
    Infrastructure dependencies (db, notifier, tz_name) are injected.
    """

    # Infrastructure dependencies (injected)
    db: Database
    notifier: NotificationService = field(default_factory=NotificationService)
    # Calendar-day timezone shared by check-ins, streak metrics and reminders
    tz_name: str = DEFAULT_TIMEZONE

    # Services (lazy-loaded via properties)
    _user_service: Optional[object] = field(default=None, init=False, repr=False)
    _activity_service: Optional[object] = field(default=None, init=False, repr=False)
    _achievement_service: Optional[object] = field(default=None, init=False, repr=False)
    _tips_service: Optional[object] = field(default=None, init=False, repr=False)
    _reminder_scheduler: Optional[object] = field(default=None, init=False, repr=False)

    @property
    def user_service(self):
        """Get UserService instance (lazy-loaded)"""
        if self._user_service is None:
            from active_break.services.user_service import UserService
            self._user_service = UserService(self.db)
            logger.debug("UserService instantiated")
        return self._user_service

    @property
    def activity_service(self):
        """Get ActivityService instance (lazy-loaded)"""
        if self._activity_service is None:
            from active_break.services.activity_service import ActivityService
            self._activity_service = ActivityService(self.db, self.tz_name)
            logger.debug("ActivityService instantiated")
        return self._activity_service

    @property
    def achievement_service(self):
        """Get AchievementService instance (lazy-loaded)"""
        if self._achievement_service is None:
            from active_break.services.achievement_service import AchievementService
            self._achievement_service = AchievementService(
                self.db,
                self.user_service,
                self.notifier,
                tz_name=self.tz_name
            )
            logger.debug("AchievementService instantiated")
        return self._achievement_service

    @property
    def tips_service(self):
        """Get TipsService instance (lazy-loaded)"""
        if self._tips_service is None:
            from active_break.services.tips_service import TipsService
            self._tips_service = TipsService(self.db, self.tz_name)
            logger.debug("TipsService instantiated")
        return self._tips_service

    @property
    def reminder_scheduler(self):
        """Get ReminderScheduler instance (lazy-loaded)"""
        if self._reminder_scheduler is None:
            from active_break.scheduler.reminder_scheduler import ReminderScheduler
            self._reminder_scheduler = ReminderScheduler(self.db, self.notifier, self.tz_name)
            logger.debug("ReminderScheduler instantiated")
        return self._reminder_scheduler
