"""User-related Pydantic models"""
from typing import Optional
from pydantic import BaseModel


class UserLocation(BaseModel):
    """A user's stored current location"""
    user_id: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def is_known(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class ProfileStats(BaseModel):
    """Activity counts for a user's profile"""
    user_id: str
    recipe_count: int = 0
    saved_recipe_count: int = 0
    rating_count: int = 0
    saved_pizzeria_count: int = 0
    achievement_count: int = 0
