"""Pizzeria rating database queries"""
import logging
from typing import Optional

from src.db.connection import Database
from src.models.rating import RatingInput

logger = logging.getLogger(__name__)

RATING_COLUMNS = """
    id, pizzeria_id, user_id, overall_rating, crust_rating, review, photos,
    created_at, updated_at
"""


async def upsert_rating(db: Database, rating: RatingInput) -> dict:
    """
    Create or replace a user's rating for a pizzeria

    Keyed on (pizzeria_id, user_id): a second submission overwrites the
    first, last write wins.
    """
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                f"""
                INSERT INTO pizzeria_ratings (
                    pizzeria_id, user_id, overall_rating, crust_rating, review, photos
                )
                VALUES (%s, %s, %s, %s, %s, %s)
                ON CONFLICT (pizzeria_id, user_id) DO UPDATE SET
                    overall_rating = EXCLUDED.overall_rating,
                    crust_rating = EXCLUDED.crust_rating,
                    review = EXCLUDED.review,
                    photos = EXCLUDED.photos,
                    updated_at = now()
                RETURNING {RATING_COLUMNS}
                """,
                (
                    rating.pizzeria_id,
                    rating.user_id,
                    rating.overall_rating,
                    rating.crust_rating,
                    rating.review,
                    rating.photos,
                )
            )
            row = await cur.fetchone()
        await conn.commit()
        return row


async def get_user_rating(db: Database, pizzeria_id: str, user_id: str) -> Optional[dict]:
    """Get one user's rating for one pizzeria"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                f"""
                SELECT {RATING_COLUMNS}
                FROM pizzeria_ratings
                WHERE pizzeria_id = %s AND user_id = %s
                """,
                (pizzeria_id, user_id)
            )
            return await cur.fetchone()


async def get_rating_owner(db: Database, rating_id: str) -> Optional[str]:
    """Get the user id that owns a rating, or None if it doesn't exist"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                "SELECT user_id FROM pizzeria_ratings WHERE id = %s",
                (rating_id,)
            )
            row = await cur.fetchone()
            return str(row['user_id']) if row else None


async def delete_rating(db: Database, rating_id: str) -> bool:
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                "DELETE FROM pizzeria_ratings WHERE id = %s",
                (rating_id,)
            )
            deleted = cur.rowcount > 0
        await conn.commit()
        return deleted


async def get_rating_stats(db: Database, pizzeria_id: str) -> dict:
    """
    Aggregate ratings for a pizzeria

    Returns:
        {
            'rating_count': int,
            'average_overall_rating': float | None,
            'average_crust_rating': float | None,
            'five_star_count' .. 'one_star_count': int  (overall score)
        }
    """
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                SELECT
                    COUNT(*) AS rating_count,
                    AVG(overall_rating)::float AS average_overall_rating,
                    AVG(crust_rating)::float AS average_crust_rating,
                    COUNT(*) FILTER (WHERE overall_rating = 5) AS five_star_count,
                    COUNT(*) FILTER (WHERE overall_rating = 4) AS four_star_count,
                    COUNT(*) FILTER (WHERE overall_rating = 3) AS three_star_count,
                    COUNT(*) FILTER (WHERE overall_rating = 2) AS two_star_count,
                    COUNT(*) FILTER (WHERE overall_rating = 1) AS one_star_count
                FROM pizzeria_ratings
                WHERE pizzeria_id = %s
                """,
                (pizzeria_id,)
            )
            return await cur.fetchone()


async def get_recent_reviews(db: Database, pizzeria_id: str, limit: int = 5) -> list[dict]:
    """Get the newest ratings for a pizzeria with reviewer details"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                SELECT r.id, r.pizzeria_id, r.user_id, r.overall_rating, r.crust_rating,
                       r.review, r.photos, r.created_at, r.updated_at,
                       u.username, u.full_name, u.avatar_url
                FROM pizzeria_ratings r
                LEFT JOIN users u ON u.id = r.user_id
                WHERE r.pizzeria_id = %s
                ORDER BY r.created_at DESC
                LIMIT %s
                """,
                (pizzeria_id, limit)
            )
            return await cur.fetchall()


async def get_user_rating_history(db: Database, user_id: str) -> list[dict]:
    """
    Get every rating a user has made, with the place attributes achievements need

    Returns:
        One row per rated pizzeria, newest first:
        {
            'pizzeria_id', 'photos', 'created_at',
            'latitude', 'longitude',
            'dough_styles': list[str]  (approved tags only)
        }
    """
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                SELECT r.pizzeria_id, r.photos, r.created_at,
                       p.latitude, p.longitude,
                       ARRAY(
                           SELECT ds.dough_style
                           FROM pizzeria_dough_styles ds
                           WHERE ds.pizzeria_id = r.pizzeria_id
                             AND ds.status = 'approved'
                       ) AS dough_styles
                FROM pizzeria_ratings r
                JOIN pizzerias p ON p.id = r.pizzeria_id
                WHERE r.user_id = %s
                ORDER BY r.created_at DESC
                """,
                (user_id,)
            )
            return await cur.fetchall()
