"""Physical activity catalog and activity record models"""
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field, model_validator


class PhysicalActivity(BaseModel):
    """Activity type from the catalog (running, stretching, ...)"""
    activity_type_id: Optional[int] = None
    name: str
    description: str
    calories_per_minute: int = Field(ge=0)
    default_duration: int = Field(gt=0)  # minutes
    icon_url: Optional[str] = None
    deleted: bool = False


class ActivityRecord(BaseModel):
    """One logged exercise session"""
    record_id: Optional[int] = None
    user_id: int
    activity_type_id: int
    duration_minutes: int = Field(ge=0)
    calories_burned: int = Field(ge=0)
    begin_time: datetime
    end_time: datetime
    deleted: bool = False

    @model_validator(mode='after')
    def validate_time_order(self) -> 'ActivityRecord':
        """End time cannot precede begin time"""
        if self.end_time < self.begin_time:
            raise ValueError("end_time must not be earlier than begin_time")
        return self
