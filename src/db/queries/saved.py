"""Saved pizzeria database queries"""
import logging

from src.db.connection import Database
from src.db.queries.pizzerias import PIZZERIA_COLUMNS

logger = logging.getLogger(__name__)


async def save_pizzeria(db: Database, user_id: str, pizzeria_id: str) -> bool:
    """
    Add a pizzeria to a user's saved list (idempotent)

    Returns:
        True if newly saved, False if it was already saved
    """
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                INSERT INTO saved_pizzerias (user_id, pizzeria_id)
                VALUES (%s, %s)
                ON CONFLICT (user_id, pizzeria_id) DO NOTHING
                RETURNING id
                """,
                (user_id, pizzeria_id)
            )
            row = await cur.fetchone()
        await conn.commit()
        return row is not None


async def unsave_pizzeria(db: Database, user_id: str, pizzeria_id: str) -> bool:
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                DELETE FROM saved_pizzerias
                WHERE user_id = %s AND pizzeria_id = %s
                """,
                (user_id, pizzeria_id)
            )
            removed = cur.rowcount > 0
        await conn.commit()
        return removed


async def is_pizzeria_saved(db: Database, user_id: str, pizzeria_id: str) -> bool:
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                SELECT 1 FROM saved_pizzerias
                WHERE user_id = %s AND pizzeria_id = %s
                """,
                (user_id, pizzeria_id)
            )
            return await cur.fetchone() is not None


async def get_saved_pizzerias(db: Database, user_id: str) -> list[dict]:
    """Get a user's saved pizzerias, most recently saved first"""
    columns = ", ".join(f"p.{c.strip()}" for c in PIZZERIA_COLUMNS.split(","))
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                f"""
                SELECT {columns}
                FROM saved_pizzerias s
                JOIN pizzerias p ON p.id = s.pizzeria_id
                WHERE s.user_id = %s
                ORDER BY s.created_at DESC
                """,
                (user_id,)
            )
            return await cur.fetchall()
