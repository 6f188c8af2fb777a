"""Reminder models"""
from typing import Optional
from datetime import time as dt_time, datetime
from pydantic import BaseModel, Field, model_validator


class ReminderSetting(BaseModel):
    """Exercise reminder configuration for one activity type"""
    reminder_id: Optional[int] = None
    user_id: int
    activity_type_id: int
    enabled: bool = True
    interval_minutes: int = Field(gt=0, le=1440, description="Minimum minutes between two reminders")
    repeat_every_days: int = Field(default=1, gt=0, description="Fire on every Nth day")
    start_time: dt_time
    end_time: dt_time
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    deleted: bool = False

    @model_validator(mode='after')
    def validate_window(self) -> 'ReminderSetting':
        """An empty window would never fire"""
        if self.start_time == self.end_time:
            raise ValueError(
                f"Reminder window is empty: start and end are both {self.start_time.strftime('%H:%M')}"
            )
        return self

    @property
    def wraps_midnight(self) -> bool:
        return self.start_time > self.end_time


class ReminderLog(BaseModel):
    """A fired reminder"""
    log_id: Optional[int] = None
    user_id: int
    activity_type_id: int
    triggered_at: datetime
