"""Achievement database queries"""
import logging
from typing import Optional
from psycopg.types.json import Jsonb

from src.db.connection import Database

logger = logging.getLogger(__name__)


async def get_user_achievements(db: Database, user_id: str) -> list[dict]:
    """
    Get a user's earned achievements

    Returns:
        [{'achievement_type': str, 'earned_at': datetime, 'metadata': dict | None}]
    """
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                SELECT achievement_type, earned_at, metadata
                FROM user_achievements
                WHERE user_id = %s
                ORDER BY earned_at
                """,
                (user_id,)
            )
            return await cur.fetchall()


async def insert_user_achievement(
    db: Database,
    user_id: str,
    achievement_type: str,
    metadata: Optional[dict] = None
) -> bool:
    """
    Record an earned achievement

    An achievement is earned once; a second insert for the same type is ignored.

    Returns:
        True if this call created the record
    """
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                INSERT INTO user_achievements (user_id, achievement_type, metadata)
                VALUES (%s, %s, %s)
                ON CONFLICT (user_id, achievement_type) DO NOTHING
                RETURNING id
                """,
                (user_id, achievement_type, Jsonb(metadata) if metadata is not None else None)
            )
            row = await cur.fetchone()
        await conn.commit()
        return row is not None
