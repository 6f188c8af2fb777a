"""User-related Pydantic models"""
from typing import Optional
from datetime import date, datetime
from pydantic import BaseModel, Field, field_validator


class User(BaseModel):
    """Registered user account"""
    user_id: Optional[int] = None
    username: str = Field(min_length=1, max_length=50)
    password_hash: str
    email: str = Field(min_length=3, max_length=100)
    phone: Optional[str] = None
    gender: Optional[str] = None
    avatar_url: Optional[str] = None
    birthday: Optional[date] = None
    last_login_time: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    deleted: bool = False

    @field_validator('email')
    @classmethod
    def validate_email(cls, v: str) -> str:
        """Minimal shape check, normalized to lower case"""
        trimmed = v.strip().lower()
        if "@" not in trimmed or trimmed.startswith("@") or trimmed.endswith("@"):
            raise ValueError(f"Invalid email address: '{v}'")
        return trimmed

    @field_validator('username')
    @classmethod
    def validate_username(cls, v: str) -> str:
        trimmed = v.strip()
        if not trimmed:
            raise ValueError("Username cannot be empty or only whitespace")
        return trimmed
