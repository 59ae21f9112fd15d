"""Compiled-in achievement definitions"""
from typing import Optional

from src.config import LOCAL_EXPERT_RADIUS_MILES
from src.models.achievement import Achievement, AchievementCriterion, AchievementType

ACHIEVEMENTS: dict[AchievementType, Achievement] = {
    AchievementType.FIRST_REVIEW: Achievement(
        type=AchievementType.FIRST_REVIEW,
        name="Pizza Pioneer",
        description="Submit your first pizza review",
        icon="flag-outline",
        criterion=AchievementCriterion.REVIEW_COUNT,
        target=1,
        criterion_description="Submit 1 review",
    ),
    AchievementType.FIVE_REVIEWS: Achievement(
        type=AchievementType.FIVE_REVIEWS,
        name="Pizza Enthusiast",
        description="Submit 5 pizza reviews",
        icon="heart-outline",
        criterion=AchievementCriterion.REVIEW_COUNT,
        target=5,
        criterion_description="Submit 5 reviews",
    ),
    AchievementType.TEN_PLACES: Achievement(
        type=AchievementType.TEN_PLACES,
        name="Pizza Explorer",
        description="Visit 10 different pizzerias",
        icon="map-outline",
        criterion=AchievementCriterion.DISTINCT_PLACES,
        target=10,
        criterion_description="Review 10 different pizzerias",
    ),
    AchievementType.PHOTO_REVIEWER: Achievement(
        type=AchievementType.PHOTO_REVIEWER,
        name="Pizza Photographer",
        description="Submit 5 reviews with photos",
        icon="camera-outline",
        criterion=AchievementCriterion.PHOTO_REVIEWS,
        target=5,
        criterion_description="Submit 5 reviews with photos",
    ),
    AchievementType.STYLE_EXPLORER: Achievement(
        type=AchievementType.STYLE_EXPLORER,
        name="Style Sampler",
        description="Try 3 different pizza styles",
        icon="pizza-outline",
        criterion=AchievementCriterion.DISTINCT_STYLES,
        target=3,
        criterion_description="Review 3 different pizza styles",
    ),
    AchievementType.LOCAL_EXPERT: Achievement(
        type=AchievementType.LOCAL_EXPERT,
        name="Neighborhood Guru",
        description="Review 5 places in your area",
        icon="location-outline",
        criterion=AchievementCriterion.LOCAL_REVIEWS,
        target=5,
        criterion_description=f"Review 5 places within {LOCAL_EXPERT_RADIUS_MILES:g} miles",
    ),
    AchievementType.CONSISTENT_REVIEWER: Achievement(
        type=AchievementType.CONSISTENT_REVIEWER,
        name="Pizza Critic",
        description="Submit reviews for 7 consecutive days",
        icon="time-outline",
        criterion=AchievementCriterion.DAY_STREAK,
        target=7,
        criterion_description="7 consecutive days of reviews",
    ),
}


def get_all_achievements() -> list[Achievement]:
    return list(ACHIEVEMENTS.values())


def get_achievement(achievement_type: str) -> Optional[Achievement]:
    try:
        return ACHIEVEMENTS[AchievementType(achievement_type)]
    except ValueError:
        return None
