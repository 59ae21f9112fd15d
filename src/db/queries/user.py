"""User database queries"""
import logging
from typing import Optional

from src.db.connection import Database

logger = logging.getLogger(__name__)


async def get_user_location(db: Database, user_id: str) -> Optional[dict]:
    """
    Get a user's stored current location

    Returns:
        {'current_latitude': float | None, 'current_longitude': float | None},
        or None if the user doesn't exist
    """
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                SELECT current_latitude, current_longitude
                FROM users
                WHERE id = %s
                """,
                (user_id,)
            )
            return await cur.fetchone()


async def update_user_location(db: Database, user_id: str, latitude: float, longitude: float) -> bool:
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                UPDATE users
                SET current_latitude = %s,
                    current_longitude = %s,
                    updated_at = now()
                WHERE id = %s
                """,
                (latitude, longitude, user_id)
            )
            updated = cur.rowcount > 0
        await conn.commit()
        return updated


async def get_profile_counts(db: Database, user_id: str) -> Optional[dict]:
    """
    Activity counts shown on a user's profile

    Returns:
        {'recipe_count', 'saved_recipe_count', 'rating_count',
         'saved_pizzeria_count', 'achievement_count'}, or None if the user
        doesn't exist
    """
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                SELECT
                    (SELECT COUNT(*) FROM recipes r WHERE r.user_id = u.id) AS recipe_count,
                    (SELECT COUNT(*) FROM saved_recipes sr WHERE sr.user_id = u.id) AS saved_recipe_count,
                    (SELECT COUNT(*) FROM pizzeria_ratings pr WHERE pr.user_id = u.id) AS rating_count,
                    (SELECT COUNT(*) FROM saved_pizzerias sp WHERE sp.user_id = u.id) AS saved_pizzeria_count,
                    (SELECT COUNT(*) FROM user_achievements ua WHERE ua.user_id = u.id) AS achievement_count
                FROM users u
                WHERE u.id = %s
                """,
                (user_id,)
            )
            return await cur.fetchone()
