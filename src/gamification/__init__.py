"""
Gamification for pizza reviews

Achievements are derived from a user's rating history and awarded once.
"""

from src.gamification.achievement_catalog import ACHIEVEMENTS, get_all_achievements, get_achievement
from src.gamification.achievement_system import (
    check_and_award_achievements,
    get_user_achievements,
    compute_review_stats,
    calculate_day_streak,
)

__all__ = [
    "ACHIEVEMENTS",
    "get_all_achievements",
    "get_achievement",
    "check_and_award_achievements",
    "get_user_achievements",
    "compute_review_stats",
    "calculate_day_streak",
]
