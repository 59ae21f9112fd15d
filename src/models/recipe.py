"""Dough recipe models"""
from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime

from src.models.pizzeria import DoughStyle
from src.models.rating import MIN_SCORE, MAX_SCORE

MAX_DIFFICULTY = 5
MAX_HYDRATION_PERCENTAGE = 200


class IngredientInput(BaseModel):
    name: str = Field(..., min_length=1)
    amount: float
    unit: str = Field(..., min_length=1)
    percentage: Optional[float] = None

    @field_validator('amount')
    @classmethod
    def validate_amount(cls, v: float) -> float:
        if not v > 0:
            raise ValueError("Ingredient amount must be positive")
        return v


class ProcessStepInput(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    duration_minutes: Optional[int] = Field(default=None, ge=0)
    temperature: Optional[int] = None


class RecipeInput(BaseModel):
    """
    A new dough recipe

    Ingredients and steps keep the order they were submitted in; steps are
    numbered from 1.
    """
    user_id: str = Field(..., min_length=1)
    title: str
    description: Optional[str] = None
    category: DoughStyle
    difficulty: int
    total_time_minutes: int
    servings: int
    hydration_percentage: Optional[float] = None
    is_public: bool = True
    photos: list[str] = Field(default_factory=list)
    ingredients: list[IngredientInput] = Field(default_factory=list)
    process_steps: list[ProcessStepInput] = Field(default_factory=list)

    @field_validator('title')
    @classmethod
    def validate_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Recipe title is required")
        return v

    @field_validator('difficulty')
    @classmethod
    def validate_difficulty(cls, v: int) -> int:
        if v < 1 or v > MAX_DIFFICULTY:
            raise ValueError(f"Difficulty must be between 1 and {MAX_DIFFICULTY}")
        return v

    @field_validator('total_time_minutes')
    @classmethod
    def validate_total_time(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("Total time must be positive")
        return v

    @field_validator('servings')
    @classmethod
    def validate_servings(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Servings must be at least 1")
        return v

    @field_validator('hydration_percentage')
    @classmethod
    def validate_hydration(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and not 0 <= v <= MAX_HYDRATION_PERCENTAGE:
            raise ValueError(f"Hydration must be between 0 and {MAX_HYDRATION_PERCENTAGE} percent")
        return v

    @field_validator('photos')
    @classmethod
    def drop_blank_photos(cls, v: list[str]) -> list[str]:
        return [url.strip() for url in v if url and url.strip()]


class Ingredient(BaseModel):
    id: str
    recipe_id: str
    name: str
    amount: float
    unit: str
    percentage: Optional[float] = None
    order_index: int

    @classmethod
    def from_row(cls, row: dict) -> "Ingredient":
        data = dict(row)
        data["id"] = str(data["id"])
        data["recipe_id"] = str(data["recipe_id"])
        return cls.model_validate(data)


class ProcessStep(BaseModel):
    id: str
    recipe_id: str
    step_number: int
    title: str
    description: Optional[str] = None
    duration_minutes: Optional[int] = None
    temperature: Optional[int] = None
    order_index: int

    @classmethod
    def from_row(cls, row: dict) -> "ProcessStep":
        data = dict(row)
        data["id"] = str(data["id"])
        data["recipe_id"] = str(data["recipe_id"])
        return cls.model_validate(data)


class Recipe(BaseModel):
    """Stored recipe with its rating summary; ingredients and steps only on detail reads"""
    id: str
    user_id: str
    title: str
    description: Optional[str] = None
    category: DoughStyle
    difficulty: int
    total_time_minutes: int
    servings: int
    hydration_percentage: Optional[float] = None
    is_featured: bool = False
    is_public: bool = True
    photos: list[str] = Field(default_factory=list)
    ingredients: list[Ingredient] = Field(default_factory=list)
    process_steps: list[ProcessStep] = Field(default_factory=list)
    rating_count: int = 0
    average_overall_rating: Optional[float] = None
    average_crust_rating: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: dict) -> "Recipe":
        """Build from a database row, tolerating NULL arrays and a missing rating summary"""
        data = dict(row)
        data["id"] = str(data["id"])
        data["user_id"] = str(data["user_id"])
        data["photos"] = data.get("photos") or []
        data["rating_count"] = data.get("rating_count") or 0
        if data.get("hydration_percentage") is not None:
            data["hydration_percentage"] = float(data["hydration_percentage"])
        return cls.model_validate(data)


class RecipeRatingInput(BaseModel):
    """A user's dual rating of a recipe, scored like pizzeria ratings"""
    recipe_id: str = Field(..., min_length=1)
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
        return v.strip() or None


class RecipeRating(BaseModel):
    """Stored recipe rating, one per (recipe, user)"""
    id: str
    recipe_id: str
    user_id: str
    overall_rating: int
    crust_rating: int
    review: Optional[str] = None
    photos: list[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: dict) -> "RecipeRating":
        data = dict(row)
        for key in ("id", "recipe_id", "user_id"):
            data[key] = str(data[key])
        data["photos"] = data.get("photos") or []
        return cls.model_validate(data)
