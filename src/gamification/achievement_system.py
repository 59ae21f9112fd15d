"""
Achievement System

Awards achievements from a user's rating history:
- Volume (total reviews, distinct pizzerias, reviews with photos)
- Exploration (distinct dough styles tried)
- Locality (reviews near the user's current location)
- Consistency (consecutive days with a review)

Earned achievements are permanent: once a type is recorded for a user it is
never evaluated again.
"""

from typing import Any, Dict, Iterable, List, Optional
from datetime import date, datetime
import logging

from src.config import LOCAL_EXPERT_RADIUS_MILES
from src.db import queries
from src.gamification.achievement_catalog import get_all_achievements
from src.models.achievement import (
    Achievement,
    AchievementCriterion,
    AchievementProgress,
    ReviewStats,
    UserAchievement,
)
from src.monitoring import track_achievement_awarded
from src.utils.geo import calculate_distance

logger = logging.getLogger(__name__)


def _review_day(created_at: Any) -> date:
    if isinstance(created_at, datetime):
        return created_at.date()
    if isinstance(created_at, date):
        return created_at
    return datetime.fromisoformat(str(created_at)).date()


def calculate_day_streak(review_days: Iterable[date]) -> int:
    """
    Longest run of consecutive calendar days with at least one review

    Days are walked from the most recent backwards; two days continue a run
    only when they are exactly one day apart.

    Example:
        reviews on the 1st, 2nd, 3rd and 6th -> 3
    """
    days = sorted(set(review_days), reverse=True)
    if not days:
        return 0

    longest = 1
    current = 1
    for newer, older in zip(days, days[1:]):
        if (newer - older).days == 1:
            current += 1
            longest = max(longest, current)
        else:
            current = 1

    return longest


def compute_review_stats(
    history: List[Dict[str, Any]],
    home: Optional[tuple[float, float]] = None,
    local_radius_miles: float = LOCAL_EXPERT_RADIUS_MILES
) -> ReviewStats:
    """
    Aggregate a user's rating history

    Args:
        history: Rows from get_user_rating_history (pizzeria_id, photos,
            created_at, latitude, longitude, dough_styles)
        home: The user's stored current location, if known
        local_radius_miles: Radius that counts as "local"

    Returns:
        ReviewStats
    """
    place_ids = set()
    styles = set()
    photo_reviews = 0
    local_reviews = 0

    for row in history:
        place_ids.add(str(row['pizzeria_id']))

        if row.get('photos'):
            photo_reviews += 1

        styles.update(row.get('dough_styles') or [])

        if home is not None and row.get('latitude') is not None and row.get('longitude') is not None:
            distance = calculate_distance(home[0], home[1], float(row['latitude']), float(row['longitude']))
            if distance <= local_radius_miles:
                local_reviews += 1

    return ReviewStats(
        review_count=len(history),
        distinct_places=len(place_ids),
        photo_reviews=photo_reviews,
        distinct_styles=len(styles),
        local_reviews=local_reviews,
        day_streak=calculate_day_streak(_review_day(row['created_at']) for row in history),
        has_location=home is not None,
    )


def achievement_progress(achievement: Achievement, stats: ReviewStats) -> int:
    """Current value of the statistic an achievement is measured against"""
    criterion = achievement.criterion

    if criterion == AchievementCriterion.REVIEW_COUNT:
        return stats.review_count
    elif criterion == AchievementCriterion.DISTINCT_PLACES:
        return stats.distinct_places
    elif criterion == AchievementCriterion.PHOTO_REVIEWS:
        return stats.photo_reviews
    elif criterion == AchievementCriterion.DISTINCT_STYLES:
        return stats.distinct_styles
    elif criterion == AchievementCriterion.LOCAL_REVIEWS:
        return stats.local_reviews
    elif criterion == AchievementCriterion.DAY_STREAK:
        return stats.day_streak

    return 0


def is_achievement_satisfied(achievement: Achievement, stats: ReviewStats) -> bool:
    if achievement.criterion == AchievementCriterion.LOCAL_REVIEWS:
        # Needs a stored location to mean anything
        return stats.has_location and stats.local_reviews >= achievement.target

    return achievement_progress(achievement, stats) >= achievement.target


async def _load_user_state(db, user_id: str) -> tuple[ReviewStats, Dict[str, UserAchievement]]:
    """Rating history stats and earned achievements keyed by type"""
    history = await queries.get_user_rating_history(db, user_id)
    earned_rows = await queries.get_user_achievements(db, user_id)
    location = await queries.get_user_location(db, user_id)

    home = None
    if location and location.get('current_latitude') is not None and location.get('current_longitude') is not None:
        home = (float(location['current_latitude']), float(location['current_longitude']))

    stats = compute_review_stats(history, home)

    earned: Dict[str, UserAchievement] = {}
    for row in earned_rows:
        try:
            record = UserAchievement(
                user_id=str(user_id),
                achievement_type=row['achievement_type'],
                earned_at=row['earned_at'],
                metadata=row.get('metadata'),
            )
        except ValueError:
            # Retired achievement types stay in the table but are not shown
            logger.warning(f"Ignoring unknown achievement {row['achievement_type']} for user {user_id}")
            continue
        earned[record.achievement_type.value] = record

    return stats, earned


async def check_and_award_achievements(db, user_id: str) -> Dict[str, Any]:
    """
    Award every achievement the user now qualifies for

    Args:
        db: Database connection instance
        user_id: User UUID

    Returns:
        {
            'success': bool,
            'new_achievements': list[Achievement],
            'error': str  # only when success is False
        }
    """
    try:
        stats, earned = await _load_user_state(db, user_id)
    except Exception as e:
        logger.error(f"Error loading achievement stats for user {user_id}: {e}", exc_info=True)
        return {'success': False, 'new_achievements': [], 'error': str(e)}

    newly_earned: List[Achievement] = []

    for achievement in get_all_achievements():
        if achievement.type.value in earned:
            continue

        if not is_achievement_satisfied(achievement, stats):
            continue

        progress = achievement_progress(achievement, stats)
        try:
            inserted = await queries.insert_user_achievement(
                db,
                user_id,
                achievement.type.value,
                {'progress_when_earned': progress}
            )
        except Exception as e:
            logger.error(
                f"Failed to record achievement {achievement.type.value} for user {user_id}: {e}",
                exc_info=True
            )
            continue

        if not inserted:
            # Recorded by a concurrent evaluation
            continue

        newly_earned.append(achievement)
        track_achievement_awarded(achievement.type.value)
        logger.info(f"User {user_id} earned achievement: {achievement.type.value} ({achievement.name})")

    return {'success': True, 'new_achievements': newly_earned}


async def get_user_achievements(db, user_id: str) -> Dict[str, Any]:
    """
    Every achievement with the user's progress toward it

    Returns:
        {
            'success': bool,
            'achievements': list[AchievementProgress],
            'total_earned': int,
            'error': str  # only when success is False
        }
    """
    try:
        stats, earned = await _load_user_state(db, user_id)
    except Exception as e:
        logger.error(f"Error getting user achievements for {user_id}: {e}", exc_info=True)
        return {'success': False, 'achievements': [], 'total_earned': 0, 'error': str(e)}

    progress = []
    for achievement in get_all_achievements():
        earned_record = earned.get(achievement.type.value)
        progress.append(AchievementProgress(
            achievement_type=achievement.type,
            name=achievement.name,
            description=achievement.description,
            icon=achievement.icon,
            is_earned=earned_record is not None,
            current_progress=achievement_progress(achievement, stats),
            target=achievement.target,
            earned_at=earned_record.earned_at if earned_record else None,
        ))

    return {
        'success': True,
        'achievements': progress,
        'total_earned': sum(1 for p in progress if p.is_earned),
    }
