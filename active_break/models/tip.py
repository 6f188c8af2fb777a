"""Daily health tip model"""
from typing import Optional
from datetime import date
from pydantic import BaseModel, field_validator


class UserTip(BaseModel):
    """One health tip generated for a user on a given day"""
    tip_id: Optional[int] = None
    user_id: int
    tip_date: date
    content: str
    is_favorite: bool = False
    deleted: bool = False

    @field_validator('content')
    @classmethod
    def content_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError('Tip content cannot be empty')
        return v
