"""Pizzeria and dough style database queries"""
import logging
from typing import Optional
from psycopg.types.json import Jsonb

from src.db.connection import Database
from src.models.pizzeria import Pizzeria

logger = logging.getLogger(__name__)

PIZZERIA_COLUMNS = """
    id, name, address, latitude, longitude, phone, website, verified,
    description, hours, price_range, business_type, cuisine_styles, photos,
    api_source, external_id, created_at
"""


async def get_pizzerias_in_bounds(
    db: Database,
    latitude: float,
    longitude: float,
    min_lat: float,
    max_lat: float,
    lon_ranges: list[tuple[float, float]],
    limit: int = 500
) -> list[dict]:
    """
    Get cached pizzerias inside a lat/lon box, nearest to (latitude, longitude) first

    The box is only a prefilter; callers apply the exact radius check. Rows
    are ordered by an equirectangular distance before the limit so a crowded
    box never pushes out places near the centre.

    Args:
        lon_ranges: One range, or two when the box crosses the antimeridian
    """
    lon_filter = " OR ".join("longitude BETWEEN %s AND %s" for _ in lon_ranges)
    lon_params = [bound for lon_range in lon_ranges for bound in lon_range]

    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                f"""
                SELECT {PIZZERIA_COLUMNS}
                FROM pizzerias
                WHERE latitude BETWEEN %s AND %s
                  AND ({lon_filter})
                ORDER BY power(latitude - %s, 2)
                       + power((mod((longitude - %s + 540)::numeric, 360) - 180)::float8
                               * cos(radians(%s)), 2)
                LIMIT %s
                """,
                (min_lat, max_lat, *lon_params, latitude, longitude, latitude, limit)
            )
            return await cur.fetchall()


async def insert_pizzerias(db: Database, pizzerias: list[Pizzeria]) -> int:
    """
    Cache pizzerias found through the place-search API

    Rows already cached from the same source are left untouched.

    Returns:
        Number of pizzerias submitted for insert
    """
    if not pizzerias:
        return 0

    rows = [
        (
            p.name, p.address, p.latitude, p.longitude, p.phone, p.website,
            p.description, Jsonb(p.hours) if p.hours is not None else None,
            p.price_range, p.business_type, p.cuisine_styles, p.photos,
            p.api_source, p.external_id,
        )
        for p in pizzerias
    ]

    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.executemany(
                """
                INSERT INTO pizzerias (
                    name, address, latitude, longitude, phone, website, verified,
                    description, hours, price_range, business_type, cuisine_styles,
                    photos, api_source, external_id
                )
                VALUES (%s, %s, %s, %s, %s, %s, false, %s, %s, %s, %s, %s, %s, %s, %s)
                ON CONFLICT (api_source, external_id) DO NOTHING
                """,
                rows
            )
        await conn.commit()

    logger.info(f"Cached {len(rows)} new pizza places")
    return len(rows)


async def get_pizzeria(db: Database, pizzeria_id: str) -> Optional[dict]:
    """Get a single pizzeria by id"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                f"""
                SELECT {PIZZERIA_COLUMNS}
                FROM pizzerias
                WHERE id = %s
                """,
                (pizzeria_id,)
            )
            return await cur.fetchone()


async def get_pizzeria_summaries(db: Database, pizzeria_ids: list[str]) -> list[dict]:
    """
    Approved dough styles and rating averages for a batch of pizzerias

    Pizzerias without ratings or approved styles are still returned, with a
    zero count and an empty style list.
    """
    if not pizzeria_ids:
        return []

    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                SELECT
                    p.id AS pizzeria_id,
                    COALESCE(r.rating_count, 0) AS rating_count,
                    r.average_overall_rating,
                    r.average_crust_rating,
                    COALESCE(s.dough_styles, '{}') AS dough_styles
                FROM pizzerias p
                LEFT JOIN (
                    SELECT pizzeria_id,
                           COUNT(*) AS rating_count,
                           AVG(overall_rating)::float AS average_overall_rating,
                           AVG(crust_rating)::float AS average_crust_rating
                    FROM pizzeria_ratings
                    WHERE pizzeria_id = ANY(%s::uuid[])
                    GROUP BY pizzeria_id
                ) r ON r.pizzeria_id = p.id
                LEFT JOIN (
                    SELECT pizzeria_id,
                           array_agg(dough_style ORDER BY votes_up - votes_down DESC) AS dough_styles
                    FROM pizzeria_dough_styles
                    WHERE pizzeria_id = ANY(%s::uuid[]) AND status = 'approved'
                    GROUP BY pizzeria_id
                ) s ON s.pizzeria_id = p.id
                WHERE p.id = ANY(%s::uuid[])
                """,
                (pizzeria_ids, pizzeria_ids, pizzeria_ids)
            )
            return await cur.fetchall()


async def get_dough_styles(
    db: Database,
    pizzeria_id: str,
    approved_only: bool = True
) -> list[dict]:
    """Get dough style tags for a pizzeria, most up-voted first"""
    status_filter = "AND status = 'approved'" if approved_only else ""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                f"""
                SELECT id, pizzeria_id, dough_style, user_submitted, votes_up,
                       votes_down, status, moderator_notes, created_at
                FROM pizzeria_dough_styles
                WHERE pizzeria_id = %s {status_filter}
                ORDER BY votes_up - votes_down DESC, created_at
                """,
                (pizzeria_id,)
            )
            return await cur.fetchall()


async def add_dough_style(
    db: Database,
    pizzeria_id: str,
    dough_style: str,
    user_submitted: bool = True
) -> Optional[dict]:
    """
    Tag a pizzeria with a dough style (pending moderation)

    Returns:
        The new tag, or None if the pizzeria already carries that style
    """
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                INSERT INTO pizzeria_dough_styles (pizzeria_id, dough_style, user_submitted, status)
                VALUES (%s, %s, %s, 'pending')
                ON CONFLICT (pizzeria_id, dough_style) DO NOTHING
                RETURNING id, pizzeria_id, dough_style, user_submitted, votes_up,
                          votes_down, status, moderator_notes, created_at
                """,
                (pizzeria_id, dough_style, user_submitted)
            )
            row = await cur.fetchone()
        await conn.commit()
        return row


async def vote_dough_style(db: Database, tag_id: str, up: bool) -> Optional[dict]:
    """Increment the up or down vote counter of a dough style tag"""
    column = "votes_up" if up else "votes_down"
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                f"""
                UPDATE pizzeria_dough_styles
                SET {column} = {column} + 1
                WHERE id = %s
                RETURNING id, pizzeria_id, dough_style, user_submitted, votes_up,
                          votes_down, status, moderator_notes, created_at
                """,
                (tag_id,)
            )
            row = await cur.fetchone()
        await conn.commit()
        return row
