"""Achievement models for gamification"""
import logging
from enum import Enum
from typing import Optional, Any
from datetime import datetime
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)


class MetricType(str, Enum):
    """Metric an achievement measures progress with"""
    CHECKIN_COUNT = "checkin_count"
    CHECKIN_STREAK = "checkin_streak"
    EXERCISE_COUNT = "exercise_count"
    EXERCISE_STREAK = "exercise_streak"
    CALORIES_BURNED = "calories_burned"
    EXERCISE_DURATION = "exercise_duration"


class Achievement(BaseModel):
    """Achievement catalog entry"""
    achievement_id: int
    name: str
    description: str
    icon: str = ""
    # None for legacy rows whose stored type is no longer supported
    metric_type: Optional[MetricType] = None
    target_value: int = Field(gt=0)
    created_at: Optional[datetime] = None
    deleted: bool = False

    @field_validator('metric_type', mode='before')
    @classmethod
    def parse_metric_type(cls, v: Any) -> Optional[MetricType]:
        """Unknown metric type strings load as None instead of failing the catalog"""
        if v is None or isinstance(v, MetricType):
            return v
        try:
            return MetricType(v)
        except ValueError:
            logger.warning(f"Unknown achievement metric type '{v}', progress will stay at 0")
            return None


class UserAchievementProgress(BaseModel):
    """User's progress toward one achievement"""
    user_achievement_id: Optional[int] = None
    user_id: int
    achievement_id: int
    current_progress: int = 0
    is_achieved: bool = False
    achieved_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    deleted: bool = False
    achievement: Optional[Achievement] = None

    @property
    def progress_percentage(self) -> float:
        """Progress as a fraction of the target, clamped to [0, 1]"""
        if self.achievement is None or self.achievement.target_value <= 0:
            return 0.0
        return max(0.0, min(1.0, self.current_progress / self.achievement.target_value))

    def is_near_completion(self, threshold: float) -> bool:
        return not self.is_achieved and self.progress_percentage >= threshold
