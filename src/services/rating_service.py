"""
RatingService - Dual Rating Business Logic

Handles rating submission (overall + crust), rating statistics, review
listings and rating deletion. Submitting a rating triggers achievement
evaluation for the reviewer.
"""

import logging
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from src.db import queries
from src.exceptions import ValidationError
from src.models.rating import PizzeriaRating, RatingInput, RatingStats

logger = logging.getLogger(__name__)


def _parse_rating(rating: Union[RatingInput, Dict[str, Any]]) -> RatingInput:
    """
    Raises:
        ValidationError: listing every rejected field
    """
    if isinstance(rating, RatingInput):
        return rating

    try:
        return RatingInput.model_validate(rating)
    except PydanticValidationError as e:
        details = e.errors()
        message = "; ".join(d.get('msg', 'Invalid value').removeprefix('Value error, ') for d in details)
        fields = ", ".join(".".join(str(part) for part in d.get('loc', ())) for d in details)
        raise ValidationError(
            message,
            field=fields or None,
            user_id=rating.get('user_id') if isinstance(rating, dict) else None,
            operation="submit_rating"
        ) from e


class RatingService:
    """
    Service for pizzeria ratings.

    Responsibilities:
    - Validating and upserting ratings (one per user per pizzeria)
    - Rating statistics and recent reviews
    - Owner-only deletion
    """

    def __init__(self, db_connection, gamification_service=None):
        """
        Initialize RatingService.

        Args:
            db_connection: Database connection instance
            gamification_service: Optional GamificationService for achievement checks
        """
        self.db = db_connection
        self.gamification = gamification_service

    async def submit_rating(self, rating: Union[RatingInput, Dict[str, Any]]) -> Dict[str, Any]:
        """
        Create or update a user's rating for a pizzeria.

        Args:
            rating: RatingInput or raw dict with pizzeria_id, user_id,
                overall_rating, crust_rating, review, photos

        Returns:
            {
                'success': bool,
                'rating': PizzeriaRating,
                'new_achievements': list[Achievement],
                'error': str  # only when success is False
            }
        """
        try:
            rating_input = _parse_rating(rating)
        except ValidationError as e:
            return {'success': False, 'error': e.user_message, 'validation_error': True}

        try:
            row = await queries.upsert_rating(self.db, rating_input)
        except Exception as e:
            logger.error(
                f"Error creating/updating rating for pizzeria {rating_input.pizzeria_id}: {e}",
                exc_info=True
            )
            return {'success': False, 'error': str(e)}

        result = {
            'success': True,
            'rating': PizzeriaRating.from_row(row),
            'new_achievements': [],
        }

        if self.gamification is not None:
            try:
                achievements = await self.gamification.process_review_activity(rating_input.user_id)
                result['new_achievements'] = achievements.get('new_achievements', [])
            except Exception as e:
                logger.error(f"Achievement check failed after rating: {e}", exc_info=True)

        return result

    async def get_user_rating(self, pizzeria_id: str, user_id: str) -> Dict[str, Any]:
        """
        Returns:
            {'success': bool, 'rating': PizzeriaRating | None}
        """
        try:
            row = await queries.get_user_rating(self.db, pizzeria_id, user_id)
        except Exception as e:
            logger.error(f"Error getting user pizzeria rating: {e}", exc_info=True)
            return {'success': False, 'error': str(e)}

        return {'success': True, 'rating': PizzeriaRating.from_row(row) if row else None}

    async def delete_rating(self, rating_id: str, user_id: str) -> Dict[str, Any]:
        """Delete a rating; only its author may do so"""
        try:
            owner = await queries.get_rating_owner(self.db, rating_id)
            if owner is None:
                return {'success': False, 'error': 'Rating not found', 'not_found': True}
            if owner != str(user_id):
                return {'success': False, 'error': 'Not authorized to delete this rating', 'forbidden': True}

            await queries.delete_rating(self.db, rating_id)
        except Exception as e:
            logger.error(f"Error deleting pizzeria rating {rating_id}: {e}", exc_info=True)
            return {'success': False, 'error': str(e)}

        logger.info(f"User {user_id} deleted rating {rating_id}")
        return {'success': True}

    async def get_rating_stats(self, pizzeria_id: str) -> Dict[str, Any]:
        """
        Returns:
            {'success': bool, 'stats': RatingStats}
        """
        try:
            row = await queries.get_rating_stats(self.db, pizzeria_id)
        except Exception as e:
            logger.error(f"Error getting pizzeria rating stats: {e}", exc_info=True)
            return {'success': False, 'error': str(e)}

        return {'success': True, 'stats': self._stats_from_row(row)}

    async def get_recent_reviews(self, pizzeria_id: str, limit: int = 5) -> Dict[str, Any]:
        """
        Returns:
            {'success': bool, 'reviews': list[dict]}  # newest first
        """
        try:
            rows = await queries.get_recent_reviews(self.db, pizzeria_id, limit)
        except Exception as e:
            logger.error(f"Error fetching pizzeria reviews: {e}", exc_info=True)
            return {'success': False, 'error': str(e)}

        reviews = []
        for row in rows:
            reviews.append({
                'rating': PizzeriaRating.from_row(row),
                'username': row.get('username'),
                'full_name': row.get('full_name'),
                'avatar_url': row.get('avatar_url'),
            })
        return {'success': True, 'reviews': reviews}

    @staticmethod
    def _stats_from_row(row: Optional[Dict[str, Any]]) -> RatingStats:
        if not row or not row.get('rating_count'):
            return RatingStats()

        return RatingStats(
            rating_count=row['rating_count'],
            average_overall_rating=row['average_overall_rating'] or 0.0,
            average_crust_rating=row['average_crust_rating'] or 0.0,
            five_star_count=row['five_star_count'],
            four_star_count=row['four_star_count'],
            three_star_count=row['three_star_count'],
            two_star_count=row['two_star_count'],
            one_star_count=row['one_star_count'],
        )
