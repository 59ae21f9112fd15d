"""Pizzeria and dough style models"""
from enum import Enum
from pydantic import BaseModel, Field
from typing import Optional, Any
from datetime import datetime


class DoughStyle(str, Enum):
    """Dough styles a pizzeria can be tagged with"""
    NEAPOLITAN = "neapolitan"
    NY_STYLE = "ny_style"
    CHICAGO_DEEP_DISH = "chicago_deep_dish"
    SICILIAN = "sicilian"
    FOCACCIA = "focaccia"
    SOURDOUGH = "sourdough"
    DETROIT_STYLE = "detroit_style"
    PAN_PIZZA = "pan_pizza"
    THIN_CRUST = "thin_crust"
    WHOLE_WHEAT = "whole_wheat"
    GLUTEN_FREE = "gluten_free"


class TagStatus(str, Enum):
    """Moderation status of a dough style tag"""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Pizzeria(BaseModel):
    """A pizza place, either cached in the database or fresh from the place-search API"""
    id: str
    name: str
    address: str
    latitude: float
    longitude: float
    phone: Optional[str] = None
    website: Optional[str] = None
    verified: bool = False
    description: Optional[str] = None
    hours: Optional[dict[str, Any]] = None
    price_range: Optional[int] = None
    business_type: Optional[str] = None
    cuisine_styles: list[str] = Field(default_factory=list)
    photos: list[str] = Field(default_factory=list)
    api_source: Optional[str] = None
    external_id: Optional[str] = None
    created_at: Optional[datetime] = None
    distance_miles: Optional[float] = None
    # Listing summary, filled in by discovery for cached places
    dough_styles: list[str] = Field(default_factory=list)
    rating_count: int = 0
    average_overall_rating: Optional[float] = None
    average_crust_rating: Optional[float] = None

    @classmethod
    def from_row(cls, row: dict) -> "Pizzeria":
        """Build from a database row, tolerating NULL array columns"""
        data = dict(row)
        data["id"] = str(data["id"])
        data["cuisine_styles"] = data.get("cuisine_styles") or []
        data["photos"] = data.get("photos") or []
        data["latitude"] = float(data["latitude"])
        data["longitude"] = float(data["longitude"])
        return cls.model_validate(data)


class PizzeriaDoughStyle(BaseModel):
    """Dough style tag attached to a pizzeria"""
    id: str
    pizzeria_id: str
    dough_style: DoughStyle
    user_submitted: bool = False
    votes_up: int = 0
    votes_down: int = 0
    status: TagStatus = TagStatus.PENDING
    moderator_notes: Optional[str] = None
    created_at: Optional[datetime] = None
