"""Achievement models for gamification"""
from enum import Enum
from pydantic import BaseModel
from typing import Optional, Any
from datetime import datetime


class AchievementType(str, Enum):
    """Every achievement a user can earn"""
    FIRST_REVIEW = "first_review"
    FIVE_REVIEWS = "five_reviews"
    TEN_PLACES = "ten_places"
    PHOTO_REVIEWER = "photo_reviewer"
    STYLE_EXPLORER = "style_explorer"
    LOCAL_EXPERT = "local_expert"
    CONSISTENT_REVIEWER = "consistent_reviewer"


class AchievementCriterion(str, Enum):
    """Which review statistic an achievement is measured against"""
    REVIEW_COUNT = "review_count"
    DISTINCT_PLACES = "distinct_places"
    PHOTO_REVIEWS = "photo_reviews"
    DISTINCT_STYLES = "distinct_styles"
    LOCAL_REVIEWS = "local_reviews"
    DAY_STREAK = "day_streak"


class Achievement(BaseModel):
    """Achievement definition"""
    type: AchievementType
    name: str
    description: str
    icon: str
    criterion: AchievementCriterion
    target: int
    criterion_description: str


class UserAchievement(BaseModel):
    """User's earned achievement"""
    user_id: str
    achievement_type: AchievementType
    earned_at: datetime
    metadata: Optional[dict[str, Any]] = None


class AchievementProgress(BaseModel):
    """Progress toward one achievement for display"""
    achievement_type: AchievementType
    name: str
    description: str
    icon: str
    is_earned: bool
    current_progress: int
    target: int
    earned_at: Optional[datetime] = None


class ReviewStats(BaseModel):
    """Aggregates over a user's rating history"""
    review_count: int = 0
    distinct_places: int = 0
    photo_reviews: int = 0
    distinct_styles: int = 0
    local_reviews: int = 0
    day_streak: int = 0
    has_location: bool = False
