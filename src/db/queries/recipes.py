"""Dough recipe database queries"""
import logging
from typing import Optional

from src.db.connection import Database
from src.models.recipe import RecipeInput, RecipeRatingInput

logger = logging.getLogger(__name__)

RECIPE_COLUMNS = """
    id, user_id, title, description, category, difficulty, total_time_minutes,
    servings, hydration_percentage, is_featured, is_public, photos,
    created_at, updated_at
"""

# Recipes joined with their rating summary; callers append WHERE/ORDER BY
RECIPE_SELECT = """
    SELECT r.id, r.user_id, r.title, r.description, r.category, r.difficulty,
           r.total_time_minutes, r.servings, r.hydration_percentage,
           r.is_featured, r.is_public, r.photos, r.created_at, r.updated_at,
           COALESCE(s.rating_count, 0) AS rating_count,
           s.average_overall_rating, s.average_crust_rating
    FROM recipes r
    LEFT JOIN (
        SELECT recipe_id,
               COUNT(*) AS rating_count,
               AVG(overall_rating)::float AS average_overall_rating,
               AVG(crust_rating)::float AS average_crust_rating
        FROM recipe_ratings
        GROUP BY recipe_id
    ) s ON s.recipe_id = r.id
"""

INGREDIENT_COLUMNS = "id, recipe_id, name, amount, unit, percentage, order_index"
STEP_COLUMNS = "id, recipe_id, step_number, title, description, duration_minutes, temperature, order_index"
RECIPE_RATING_COLUMNS = """
    id, recipe_id, user_id, overall_rating, crust_rating, review, photos,
    created_at, updated_at
"""


async def create_recipe(db: Database, recipe: RecipeInput) -> dict:
    """
    Insert a recipe with its ingredients and steps in one transaction

    Returns:
        The recipe row plus 'ingredients' and 'process_steps' row lists
    """
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                f"""
                INSERT INTO recipes (
                    user_id, title, description, category, difficulty,
                    total_time_minutes, servings, hydration_percentage, is_public, photos
                )
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                RETURNING {RECIPE_COLUMNS}
                """,
                (
                    recipe.user_id,
                    recipe.title,
                    recipe.description,
                    recipe.category.value,
                    recipe.difficulty,
                    recipe.total_time_minutes,
                    recipe.servings,
                    recipe.hydration_percentage,
                    recipe.is_public,
                    recipe.photos,
                )
            )
            created = dict(await cur.fetchone())
            recipe_id = created['id']

            ingredients = []
            for index, ingredient in enumerate(recipe.ingredients):
                await cur.execute(
                    f"""
                    INSERT INTO ingredients (recipe_id, name, amount, unit, percentage, order_index)
                    VALUES (%s, %s, %s, %s, %s, %s)
                    RETURNING {INGREDIENT_COLUMNS}
                    """,
                    (recipe_id, ingredient.name, ingredient.amount, ingredient.unit,
                     ingredient.percentage, index)
                )
                ingredients.append(await cur.fetchone())

            steps = []
            for index, step in enumerate(recipe.process_steps):
                await cur.execute(
                    f"""
                    INSERT INTO process_steps (
                        recipe_id, step_number, title, description,
                        duration_minutes, temperature, order_index
                    )
                    VALUES (%s, %s, %s, %s, %s, %s, %s)
                    RETURNING {STEP_COLUMNS}
                    """,
                    (recipe_id, index + 1, step.title, step.description,
                     step.duration_minutes, step.temperature, index)
                )
                steps.append(await cur.fetchone())
        await conn.commit()

    logger.info(f"Created recipe {recipe_id} with {len(ingredients)} ingredients, {len(steps)} steps")
    created['ingredients'] = ingredients
    created['process_steps'] = steps
    return created


async def get_recipe(db: Database, recipe_id: str) -> Optional[dict]:
    """Get a recipe with its rating summary"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(f"{RECIPE_SELECT} WHERE r.id = %s", (recipe_id,))
            return await cur.fetchone()


async def get_recipe_ingredients(db: Database, recipe_id: str) -> list[dict]:
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                f"""
                SELECT {INGREDIENT_COLUMNS}
                FROM ingredients
                WHERE recipe_id = %s
                ORDER BY order_index
                """,
                (recipe_id,)
            )
            return await cur.fetchall()


async def get_recipe_steps(db: Database, recipe_id: str) -> list[dict]:
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                f"""
                SELECT {STEP_COLUMNS}
                FROM process_steps
                WHERE recipe_id = %s
                ORDER BY order_index
                """,
                (recipe_id,)
            )
            return await cur.fetchall()


async def get_user_recipes(db: Database, user_id: str) -> list[dict]:
    """Get every recipe a user wrote, public or not, newest first"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                f"{RECIPE_SELECT} WHERE r.user_id = %s ORDER BY r.created_at DESC",
                (user_id,)
            )
            return await cur.fetchall()


async def get_public_recipes(
    db: Database,
    category: Optional[str] = None,
    featured_only: bool = False,
    limit: int = 20
) -> list[dict]:
    """Get public recipes, newest first, optionally filtered by dough style"""
    conditions = ["r.is_public"]
    params: list = []
    if category is not None:
        conditions.append("r.category = %s")
        params.append(category)
    if featured_only:
        conditions.append("r.is_featured")
    params.append(limit)

    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                f"""
                {RECIPE_SELECT}
                WHERE {" AND ".join(conditions)}
                ORDER BY r.created_at DESC
                LIMIT %s
                """,
                params
            )
            return await cur.fetchall()


async def get_recipe_owner(db: Database, recipe_id: str) -> Optional[str]:
    """Get the user id that wrote a recipe, or None if it doesn't exist"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute("SELECT user_id FROM recipes WHERE id = %s", (recipe_id,))
            row = await cur.fetchone()
            return str(row['user_id']) if row else None


async def delete_recipe(db: Database, recipe_id: str) -> bool:
    """Delete a recipe; ingredients, steps, ratings and saves cascade"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute("DELETE FROM recipes WHERE id = %s", (recipe_id,))
            deleted = cur.rowcount > 0
        await conn.commit()
        return deleted


async def save_recipe(db: Database, user_id: str, recipe_id: str) -> bool:
    """
    Add a recipe to a user's saved list (idempotent)

    Returns:
        True if newly saved, False if it was already saved
    """
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                INSERT INTO saved_recipes (user_id, recipe_id)
                VALUES (%s, %s)
                ON CONFLICT (user_id, recipe_id) DO NOTHING
                RETURNING recipe_id
                """,
                (user_id, recipe_id)
            )
            row = await cur.fetchone()
        await conn.commit()
        return row is not None


async def unsave_recipe(db: Database, user_id: str, recipe_id: str) -> bool:
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                "DELETE FROM saved_recipes WHERE user_id = %s AND recipe_id = %s",
                (user_id, recipe_id)
            )
            removed = cur.rowcount > 0
        await conn.commit()
        return removed


async def get_saved_recipes(db: Database, user_id: str) -> list[dict]:
    """Get a user's saved recipes, most recently saved first"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                f"""
                {RECIPE_SELECT}
                JOIN saved_recipes sr ON sr.recipe_id = r.id
                WHERE sr.user_id = %s
                ORDER BY sr.created_at DESC
                """,
                (user_id,)
            )
            return await cur.fetchall()


async def upsert_recipe_rating(db: Database, rating: RecipeRatingInput) -> dict:
    """Create or replace a user's rating for a recipe, last write wins"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                f"""
                INSERT INTO recipe_ratings (
                    recipe_id, user_id, overall_rating, crust_rating, review, photos
                )
                VALUES (%s, %s, %s, %s, %s, %s)
                ON CONFLICT (recipe_id, user_id) DO UPDATE SET
                    overall_rating = EXCLUDED.overall_rating,
                    crust_rating = EXCLUDED.crust_rating,
                    review = EXCLUDED.review,
                    photos = EXCLUDED.photos,
                    updated_at = now()
                RETURNING {RECIPE_RATING_COLUMNS}
                """,
                (
                    rating.recipe_id,
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
