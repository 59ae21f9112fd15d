"""Pydantic models for API request/response validation"""
from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field
from datetime import datetime

from src.models.achievement import Achievement, AchievementProgress
from src.models.pizzeria import Pizzeria, PizzeriaDoughStyle
from src.models.rating import PizzeriaRating, RatingStats
from src.models.recipe import Recipe, RecipeRating
from src.models.user import ProfileStats


class DiscoveryResponse(BaseModel):
    """Nearby pizzerias, nearest first"""
    pizzerias: List[Pizzeria]
    from_cache: int = Field(..., description="Results served from the database")
    from_api: int = Field(..., description="New results from the place-search API")


class PizzeriaDetailResponse(BaseModel):
    """Pizzeria with approved dough styles and rating statistics"""
    pizzeria: Pizzeria
    dough_styles: List[PizzeriaDoughStyle]
    rating_stats: RatingStats


class ReviewItem(BaseModel):
    """A rating with its author's public profile"""
    rating: PizzeriaRating
    username: Optional[str] = None
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None


class ReviewListResponse(BaseModel):
    pizzeria_id: str
    reviews: List[ReviewItem]


class RatingRequest(BaseModel):
    """Request to rate a pizzeria; scores are validated by the rating service"""
    user_id: str = Field(..., description="User identifier")
    overall_rating: int = Field(..., description="Overall score, 1 to 5")
    crust_rating: int = Field(..., description="Crust score, 1 to 5")
    review: Optional[str] = Field(default=None, description="Optional review text")
    photos: List[str] = Field(default_factory=list, description="Uploaded photo URLs")


class RatingResponse(BaseModel):
    rating: PizzeriaRating
    new_achievements: List[Achievement] = Field(default_factory=list)


class UserRatingResponse(BaseModel):
    """The user's own rating of a pizzeria, null when not rated yet"""
    pizzeria_id: str
    user_id: str
    rating: Optional[PizzeriaRating] = None


class DoughStyleRequest(BaseModel):
    """Request to suggest a dough style for a pizzeria"""
    user_id: str = Field(..., description="User identifier")
    dough_style: str = Field(..., description="One of the known dough styles")


class DoughStyleResponse(BaseModel):
    tag: Optional[PizzeriaDoughStyle] = None
    created: bool


class VoteRequest(BaseModel):
    up: bool = Field(..., description="True for an upvote, false for a downvote")


class SavedListResponse(BaseModel):
    user_id: str
    pizzerias: List[Pizzeria]


class SavedStatusResponse(BaseModel):
    user_id: str
    pizzeria_id: str
    is_saved: bool


class LocationRequest(BaseModel):
    """Request to store the user's current location"""
    latitude: float = Field(..., description="Latitude in degrees")
    longitude: float = Field(..., description="Longitude in degrees")


class LocationResponse(BaseModel):
    user_id: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class AchievementListResponse(BaseModel):
    user_id: str
    achievements: List[AchievementProgress]
    total_earned: int


class AchievementCheckResponse(BaseModel):
    user_id: str
    new_achievements: List[Achievement]


class ProfileResponse(BaseModel):
    user_id: str
    stats: ProfileStats


class RecipeRequest(BaseModel):
    """Request to publish a recipe; fields are validated by the recipe service"""
    user_id: str = Field(..., description="Author of the recipe")
    title: str
    description: Optional[str] = None
    category: str = Field(..., description="Dough style of the recipe")
    difficulty: int = Field(..., description="1 (easy) to 5 (hard)")
    total_time_minutes: int
    servings: int
    hydration_percentage: Optional[float] = None
    is_public: bool = True
    photos: List[str] = Field(default_factory=list)
    ingredients: List[Dict[str, Any]] = Field(default_factory=list, description="name, amount, unit, percentage")
    process_steps: List[Dict[str, Any]] = Field(
        default_factory=list,
        description="title, description, duration_minutes, temperature; numbered in order"
    )


class RecipeResponse(BaseModel):
    recipe: Recipe


class RecipeListResponse(BaseModel):
    recipes: List[Recipe]


class SavedRecipeStatusResponse(BaseModel):
    user_id: str
    recipe_id: str
    is_saved: bool


class RecipeRatingRequest(BaseModel):
    """Request to rate a recipe on the overall and crust scales"""
    user_id: str = Field(..., description="User identifier")
    overall_rating: int = Field(..., description="Overall score, 1 to 5")
    crust_rating: int = Field(..., description="Crust score, 1 to 5")
    review: Optional[str] = None
    photos: List[str] = Field(default_factory=list)


class RecipeRatingResponse(BaseModel):
    rating: RecipeRating


class HealthCheckResponse(BaseModel):
    """Health check response"""
    status: str = Field(..., description="Service status")
    database: str = Field(..., description="Database connection status")
    timestamp: datetime = Field(..., description="Check timestamp")


class ErrorResponse(BaseModel):
    """Error response model"""
    error: str = Field(..., description="Error message")
    detail: Optional[str] = Field(None, description="Detailed error information")
    request_id: Optional[str] = Field(None, description="Identifier to quote when reporting the error")
    timestamp: datetime = Field(default_factory=datetime.now)
