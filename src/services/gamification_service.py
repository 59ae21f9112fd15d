"""
GamificationService - Achievement Business Logic

Thin service wrapper over src/gamification so handlers get achievements
through the same injected database handle as every other service.
"""

import logging
from typing import Any, Dict

from src.gamification import check_and_award_achievements, get_user_achievements

logger = logging.getLogger(__name__)


class GamificationService:
    """
    Service for achievements.

    Responsibilities:
    - Evaluating and awarding achievements after review activity
    - Reporting achievement progress
    """

    def __init__(self, db_connection):
        """
        Initialize GamificationService.

        Args:
            db_connection: Database connection instance
        """
        self.db = db_connection
        logger.debug("GamificationService initialized")

    async def process_review_activity(self, user_id: str) -> Dict[str, Any]:
        """
        Evaluate achievements after a user submitted or changed a review.

        Returns:
            {'success': bool, 'new_achievements': list[Achievement], 'error'?: str}
        """
        result = await check_and_award_achievements(self.db, user_id)

        if result['success'] and result['new_achievements']:
            logger.info(
                f"User {user_id} unlocked {len(result['new_achievements'])} achievement(s): "
                f"{', '.join(a.type.value for a in result['new_achievements'])}"
            )

        return result

    async def get_achievements(self, user_id: str) -> Dict[str, Any]:
        """All achievements with progress for a user"""
        return await get_user_achievements(self.db, user_id)
