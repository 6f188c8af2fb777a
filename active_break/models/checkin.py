"""Check-in and check-in streak models"""
from typing import Optional
from datetime import date, datetime
from pydantic import BaseModel, Field


class CheckIn(BaseModel):
    """A single daily check-in"""
    checkin_id: Optional[int] = None
    user_id: int
    checkin_date: date
    checkin_time: datetime
    created_at: Optional[datetime] = None
    deleted: bool = False


class CheckinStreak(BaseModel):
    """Per-user check-in streak counters"""
    user_id: int
    current_streak: int = Field(default=0, ge=0)
    longest_streak: int = Field(default=0, ge=0)
    total_checkin: int = Field(default=0, ge=0)
    last_checkin_date: date
    updated_at: Optional[datetime] = None
    deleted: bool = False
