"""
PizzeriaService - Pizzeria Details and Dough Style Tags

Assembles the pizzeria detail view (place, approved dough styles, rating
statistics) and handles user dough-style suggestions and votes.
"""

import logging
from typing import Any, Dict

from src.db import queries
from src.exceptions import ValidationError
from src.models.pizzeria import DoughStyle, Pizzeria, PizzeriaDoughStyle

logger = logging.getLogger(__name__)


def _tag_from_row(row: Dict[str, Any]) -> PizzeriaDoughStyle:
    data = dict(row)
    data['id'] = str(data['id'])
    data['pizzeria_id'] = str(data['pizzeria_id'])
    return PizzeriaDoughStyle.model_validate(data)


def _parse_dough_style(value: str) -> DoughStyle:
    try:
        return DoughStyle(value)
    except ValueError as e:
        raise ValidationError(f"Unknown dough style: {value}", field="dough_style", value=value) from e


class PizzeriaService:
    """
    Service for pizzeria details.

    Responsibilities:
    - Pizzeria detail lookup with approved dough styles and rating stats
    - User-submitted dough style tags (pending moderation)
    - Dough style voting
    """

    def __init__(self, db_connection, rating_service):
        """
        Initialize PizzeriaService.

        Args:
            db_connection: Database connection instance
            rating_service: RatingService used for rating statistics
        """
        self.db = db_connection
        self.ratings = rating_service

    async def get_pizzeria_details(self, pizzeria_id: str) -> Dict[str, Any]:
        """
        Returns:
            {
                'success': bool,
                'pizzeria': Pizzeria,
                'dough_styles': list[PizzeriaDoughStyle],  # approved only
                'rating_stats': RatingStats,
                'error': str  # only when success is False
            }
        """
        try:
            row = await queries.get_pizzeria(self.db, pizzeria_id)
            if row is None:
                return {'success': False, 'error': 'Pizzeria not found', 'not_found': True}

            style_rows = await queries.get_dough_styles(self.db, pizzeria_id, approved_only=True)
        except Exception as e:
            logger.error(f"Error fetching pizzeria details for {pizzeria_id}: {e}", exc_info=True)
            return {'success': False, 'error': str(e)}

        stats_result = await self.ratings.get_rating_stats(pizzeria_id)
        if not stats_result['success']:
            return {'success': False, 'error': stats_result['error']}

        return {
            'success': True,
            'pizzeria': Pizzeria.from_row(row),
            'dough_styles': [_tag_from_row(r) for r in style_rows],
            'rating_stats': stats_result['stats'],
        }

    async def suggest_dough_style(self, pizzeria_id: str, dough_style: str, user_id: str) -> Dict[str, Any]:
        """
        Suggest a dough style for a pizzeria; it stays pending until a moderator approves it.

        Returns:
            {'success': bool, 'tag': PizzeriaDoughStyle | None, 'created': bool}
        """
        try:
            style = _parse_dough_style(dough_style)
        except ValidationError as e:
            return {'success': False, 'error': e.user_message, 'validation_error': True}

        try:
            row = await queries.add_dough_style(self.db, pizzeria_id, style.value, user_submitted=True)
        except Exception as e:
            logger.error(f"Error suggesting dough style for {pizzeria_id}: {e}", exc_info=True)
            return {'success': False, 'error': str(e)}

        if row is None:
            return {'success': True, 'tag': None, 'created': False}

        logger.info(f"User {user_id} suggested {style.value} for pizzeria {pizzeria_id}")
        return {'success': True, 'tag': _tag_from_row(row), 'created': True}

    async def vote_dough_style(self, tag_id: str, up: bool) -> Dict[str, Any]:
        try:
            row = await queries.vote_dough_style(self.db, tag_id, up)
        except Exception as e:
            logger.error(f"Error voting on dough style {tag_id}: {e}", exc_info=True)
            return {'success': False, 'error': str(e)}

        if row is None:
            return {'success': False, 'error': 'Dough style not found', 'not_found': True}

        return {'success': True, 'tag': _tag_from_row(row)}
