"""
RecipeService - Dough Recipes

Users publish dough recipes (ingredients plus numbered steps), browse public
ones by dough style, save them and rate them on the same overall and crust
scales used for pizzerias. Private recipes are visible to their author only.
"""

import logging
from typing import Any, Dict, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError as PydanticValidationError

from src.db import queries
from src.exceptions import ValidationError
from src.models.pizzeria import DoughStyle
from src.models.recipe import (
    Ingredient,
    ProcessStep,
    Recipe,
    RecipeInput,
    RecipeRating,
    RecipeRatingInput,
)

logger = logging.getLogger(__name__)

InputModel = TypeVar("InputModel", bound=BaseModel)

RECIPE_NOT_FOUND = {'success': False, 'error': 'Recipe not found', 'not_found': True}


def _parse_input(model: Type[InputModel], data: Union[InputModel, Dict[str, Any]], operation: str) -> InputModel:
    """
    Raises:
        ValidationError: listing every rejected field
    """
    if isinstance(data, model):
        return data

    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        details = e.errors()
        message = "; ".join(d.get('msg', 'Invalid value').removeprefix('Value error, ') for d in details)
        fields = ", ".join(".".join(str(part) for part in d.get('loc', ())) for d in details)
        raise ValidationError(
            message,
            field=fields or None,
            user_id=data.get('user_id') if isinstance(data, dict) else None,
            operation=operation
        ) from e


class RecipeService:
    """
    Service for dough recipes.

    Responsibilities:
    - Validating and storing recipes with ingredients and steps
    - Author and public listings, detail reads with visibility checks
    - Author-only deletion
    - Saved recipes and dual recipe ratings
    """

    def __init__(self, db_connection):
        self.db = db_connection

    async def create_recipe(self, recipe: Union[RecipeInput, Dict[str, Any]]) -> Dict[str, Any]:
        """
        Publish a recipe.

        Returns:
            {'success': bool, 'recipe': Recipe, 'error': str}
        """
        try:
            recipe_input = _parse_input(RecipeInput, recipe, "create_recipe")
        except ValidationError as e:
            return {'success': False, 'error': e.user_message, 'validation_error': True}

        try:
            row = await queries.create_recipe(self.db, recipe_input)
        except Exception as e:
            logger.error(f"Error creating recipe for {recipe_input.user_id}: {e}", exc_info=True)
            return {'success': False, 'error': str(e)}

        return {'success': True, 'recipe': self._recipe_with_details(row, row['ingredients'], row['process_steps'])}

    async def get_recipe(self, recipe_id: str, viewer_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Recipe with ingredients and steps.

        A private recipe reads as not found for anyone but its author.
        """
        try:
            row = await queries.get_recipe(self.db, recipe_id)
            if row is None:
                return dict(RECIPE_NOT_FOUND)
            if not row['is_public'] and str(row['user_id']) != str(viewer_id):
                return dict(RECIPE_NOT_FOUND)

            ingredients = await queries.get_recipe_ingredients(self.db, recipe_id)
            steps = await queries.get_recipe_steps(self.db, recipe_id)
        except Exception as e:
            logger.error(f"Error getting recipe {recipe_id}: {e}", exc_info=True)
            return {'success': False, 'error': str(e)}

        return {'success': True, 'recipe': self._recipe_with_details(row, ingredients, steps)}

    async def list_user_recipes(self, user_id: str) -> Dict[str, Any]:
        """The user's own recipes, newest first"""
        try:
            rows = await queries.get_user_recipes(self.db, user_id)
        except Exception as e:
            logger.error(f"Error listing recipes of {user_id}: {e}", exc_info=True)
            return {'success': False, 'recipes': [], 'error': str(e)}

        return {'success': True, 'recipes': [Recipe.from_row(row) for row in rows]}

    async def list_public_recipes(
        self,
        category: Optional[str] = None,
        featured_only: bool = False,
        limit: int = 20
    ) -> Dict[str, Any]:
        """
        Public recipes, newest first.

        Args:
            category: Optional dough style filter
            featured_only: Only recipes marked as featured
            limit: Maximum number of recipes
        """
        if category is not None:
            try:
                category = DoughStyle(category).value
            except ValueError:
                return {'success': False, 'recipes': [], 'error': f"Unknown dough style: {category}", 'validation_error': True}

        try:
            rows = await queries.get_public_recipes(self.db, category, featured_only, limit)
        except Exception as e:
            logger.error(f"Error listing public recipes: {e}", exc_info=True)
            return {'success': False, 'recipes': [], 'error': str(e)}

        return {'success': True, 'recipes': [Recipe.from_row(row) for row in rows]}

    async def delete_recipe(self, recipe_id: str, user_id: str) -> Dict[str, Any]:
        """Delete a recipe; only its author may do so"""
        try:
            owner = await queries.get_recipe_owner(self.db, recipe_id)
            if owner is None:
                return dict(RECIPE_NOT_FOUND)
            if owner != str(user_id):
                return {'success': False, 'error': 'Not authorized to delete this recipe', 'forbidden': True}

            await queries.delete_recipe(self.db, recipe_id)
        except Exception as e:
            logger.error(f"Error deleting recipe {recipe_id}: {e}", exc_info=True)
            return {'success': False, 'error': str(e)}

        logger.info(f"User {user_id} deleted recipe {recipe_id}")
        return {'success': True}

    async def save_recipe(self, user_id: str, recipe_id: str) -> Dict[str, Any]:
        """Save a recipe (already-saved is a success)"""
        try:
            created = await queries.save_recipe(self.db, user_id, recipe_id)
        except Exception as e:
            logger.error(f"Error saving recipe {recipe_id} for {user_id}: {e}", exc_info=True)
            return {'success': False, 'error': str(e)}

        return {'success': True, 'created': created}

    async def unsave_recipe(self, user_id: str, recipe_id: str) -> Dict[str, Any]:
        try:
            removed = await queries.unsave_recipe(self.db, user_id, recipe_id)
        except Exception as e:
            logger.error(f"Error unsaving recipe {recipe_id} for {user_id}: {e}", exc_info=True)
            return {'success': False, 'error': str(e)}

        return {'success': True, 'removed': removed}

    async def list_saved_recipes(self, user_id: str) -> Dict[str, Any]:
        try:
            rows = await queries.get_saved_recipes(self.db, user_id)
        except Exception as e:
            logger.error(f"Error getting saved recipes for {user_id}: {e}", exc_info=True)
            return {'success': False, 'recipes': [], 'error': str(e)}

        return {'success': True, 'recipes': [Recipe.from_row(row) for row in rows]}

    async def rate_recipe(self, rating: Union[RecipeRatingInput, Dict[str, Any]]) -> Dict[str, Any]:
        """
        Create or update the user's rating of a recipe.

        Returns:
            {'success': bool, 'rating': RecipeRating, 'error': str}
        """
        try:
            rating_input = _parse_input(RecipeRatingInput, rating, "rate_recipe")
        except ValidationError as e:
            return {'success': False, 'error': e.user_message, 'validation_error': True}

        try:
            if await queries.get_recipe_owner(self.db, rating_input.recipe_id) is None:
                return dict(RECIPE_NOT_FOUND)
            row = await queries.upsert_recipe_rating(self.db, rating_input)
        except Exception as e:
            logger.error(f"Error rating recipe {rating_input.recipe_id}: {e}", exc_info=True)
            return {'success': False, 'error': str(e)}

        return {'success': True, 'rating': RecipeRating.from_row(row)}

    @staticmethod
    def _recipe_with_details(row: dict, ingredients: list, steps: list) -> Recipe:
        recipe = Recipe.from_row({k: v for k, v in row.items() if k not in ('ingredients', 'process_steps')})
        return recipe.model_copy(update={
            'ingredients': [Ingredient.from_row(r) for r in ingredients],
            'process_steps': [ProcessStep.from_row(r) for r in steps],
        })
