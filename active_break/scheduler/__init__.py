"""Reminder scheduling"""
from active_break.scheduler.reminder_scheduler import ReminderScheduler, next_fire_time

__all__ = ["ReminderScheduler", "next_fire_time"]
