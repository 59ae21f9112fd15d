"""Dual-axis rating models"""
from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime

MIN_SCORE = 1
MAX_SCORE = 5


class RatingInput(BaseModel):
    """
    A user's rating submission for a pizzeria

    Both scores must be whole numbers in 1..5. Validation runs before any
    database call, so an invalid submission never produces a partial write.
    """
    pizzeria_id: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
    overall_rating: int
    crust_rating: int
    review: Optional[str] = Field(default=None, max_length=4000)
    photos: list[str] = Field(default_factory=list)

    @field_validator('overall_rating')
    @classmethod
    def validate_overall(cls, v: int) -> int:
        if v < MIN_SCORE or v > MAX_SCORE:
            raise ValueError(f"Overall rating must be between {MIN_SCORE} and {MAX_SCORE}")
        return v

    @field_validator('crust_rating')
    @classmethod
    def validate_crust(cls, v: int) -> int:
        if v < MIN_SCORE or v > MAX_SCORE:
            raise ValueError(f"Crust rating must be between {MIN_SCORE} and {MAX_SCORE}")
        return v

    @field_validator('review')
    @classmethod
    def strip_review(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None

    @field_validator('photos')
    @classmethod
    def drop_blank_photos(cls, v: list[str]) -> list[str]:
        return [url.strip() for url in v if url and url.strip()]


class PizzeriaRating(BaseModel):
    """Stored rating, one per (pizzeria, user)"""
    id: str
    pizzeria_id: str
    user_id: str
    overall_rating: int
    crust_rating: int
    review: Optional[str] = None
    photos: list[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: dict) -> "PizzeriaRating":
        data = dict(row)
        for key in ("id", "pizzeria_id", "user_id"):
            data[key] = str(data[key])
        data["photos"] = data.get("photos") or []
        return cls.model_validate(data)


class RatingStats(BaseModel):
    """Aggregate rating figures for one pizzeria"""
    rating_count: int = 0
    average_overall_rating: float = 0.0
    average_crust_rating: float = 0.0
    five_star_count: int = 0
    four_star_count: int = 0
    three_star_count: int = 0
    two_star_count: int = 0
    one_star_count: int = 0
