"""
SavedPizzeriaService - Saved Places

A saved pizzeria is a plain (user, pizzeria) membership: insert or delete.
"""

import logging
from typing import Any, Dict

from src.db import queries
from src.models.pizzeria import Pizzeria

logger = logging.getLogger(__name__)


class SavedPizzeriaService:
    """Service for a user's saved pizzerias"""

    def __init__(self, db_connection):
        self.db = db_connection

    async def save(self, user_id: str, pizzeria_id: str) -> Dict[str, Any]:
        """
        Save a pizzeria (already-saved is a success).

        Returns:
            {'success': bool, 'created': bool}
        """
        try:
            created = await queries.save_pizzeria(self.db, user_id, pizzeria_id)
        except Exception as e:
            logger.error(f"Error saving pizzeria {pizzeria_id} for {user_id}: {e}", exc_info=True)
            return {'success': False, 'error': str(e)}

        return {'success': True, 'created': created}

    async def unsave(self, user_id: str, pizzeria_id: str) -> Dict[str, Any]:
        try:
            removed = await queries.unsave_pizzeria(self.db, user_id, pizzeria_id)
        except Exception as e:
            logger.error(f"Error unsaving pizzeria {pizzeria_id} for {user_id}: {e}", exc_info=True)
            return {'success': False, 'error': str(e)}

        return {'success': True, 'removed': removed}

    async def is_saved(self, user_id: str, pizzeria_id: str) -> Dict[str, Any]:
        try:
            saved = await queries.is_pizzeria_saved(self.db, user_id, pizzeria_id)
        except Exception as e:
            logger.error(f"Error checking saved status: {e}", exc_info=True)
            return {'success': False, 'is_saved': False, 'error': str(e)}

        return {'success': True, 'is_saved': saved}

    async def list_saved(self, user_id: str) -> Dict[str, Any]:
        """
        Returns:
            {'success': bool, 'pizzerias': list[Pizzeria]}  # most recently saved first
        """
        try:
            rows = await queries.get_saved_pizzerias(self.db, user_id)
        except Exception as e:
            logger.error(f"Error getting saved pizzerias for {user_id}: {e}", exc_info=True)
            return {'success': False, 'pizzerias': [], 'error': str(e)}

        return {'success': True, 'pizzerias': [Pizzeria.from_row(row) for row in rows]}
