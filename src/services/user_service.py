"""
UserService - User Location and Profile

Stores and reads the user's current location. Discovery callers use it as
the default search center and the local expert achievement measures
distance from it. Also reports the activity counts shown on a profile.
"""

import logging
from typing import Any, Dict

from src.db import queries
from src.exceptions import ValidationError
from src.models.user import ProfileStats, UserLocation
from src.utils.geo import require_valid_coordinate

logger = logging.getLogger(__name__)


class UserService:
    """Service for user profile data owned by this backend"""

    def __init__(self, db_connection):
        """
        Initialize UserService.

        Args:
            db_connection: Database connection instance
        """
        self.db = db_connection

    async def get_location(self, user_id: str) -> Dict[str, Any]:
        """
        Returns:
            {'success': bool, 'location': UserLocation}
        """
        try:
            row = await queries.get_user_location(self.db, user_id)
        except Exception as e:
            logger.error(f"Error getting location for user {user_id}: {e}", exc_info=True)
            return {'success': False, 'error': str(e)}

        if row is None:
            return {'success': False, 'error': 'User not found', 'not_found': True}

        return {
            'success': True,
            'location': UserLocation(
                user_id=user_id,
                latitude=row['current_latitude'],
                longitude=row['current_longitude'],
            ),
        }

    async def update_location(self, user_id: str, latitude: float, longitude: float) -> Dict[str, Any]:
        try:
            require_valid_coordinate(latitude, longitude)
        except ValidationError as e:
            return {'success': False, 'error': e.user_message, 'validation_error': True}

        try:
            updated = await queries.update_user_location(self.db, user_id, latitude, longitude)
        except Exception as e:
            logger.error(f"Error updating location for user {user_id}: {e}", exc_info=True)
            return {'success': False, 'error': str(e)}

        if not updated:
            return {'success': False, 'error': 'User not found', 'not_found': True}

        logger.debug(f"Updated location for user {user_id}")
        return {
            'success': True,
            'location': UserLocation(user_id=user_id, latitude=latitude, longitude=longitude),
        }

    async def get_profile_stats(self, user_id: str) -> Dict[str, Any]:
        """
        Recipe, saved-recipe, rating, saved-pizzeria and achievement counts

        Returns:
            {'success': bool, 'stats': ProfileStats}
        """
        try:
            row = await queries.get_profile_counts(self.db, user_id)
        except Exception as e:
            logger.error(f"Error getting profile stats for user {user_id}: {e}", exc_info=True)
            return {'success': False, 'error': str(e)}

        if row is None:
            return {'success': False, 'error': 'User not found', 'not_found': True}

        return {'success': True, 'stats': ProfileStats(user_id=user_id, **row)}
