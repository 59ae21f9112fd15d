"""
Service Container - Dependency Injection Container

Simple DI container for managing service instances and their dependencies.
Uses lazy loading to only instantiate services when first accessed.
"""

from dataclasses import dataclass, field
from typing import Optional
import logging

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """
    Simple dependency injection container for services.

    Services are lazy-loaded on first access via properties.
    Infrastructure dependencies (db, place_search) are injected.
    """

    # Infrastructure dependencies (injected)
    db: object  # Database instance
    place_search: object  # OverpassClient or any client with async search()

    # Services (lazy-loaded via properties)
    _user_service: Optional[object] = field(default=None, init=False, repr=False)
    _discovery_service: Optional[object] = field(default=None, init=False, repr=False)
    _rating_service: Optional[object] = field(default=None, init=False, repr=False)
    _pizzeria_service: Optional[object] = field(default=None, init=False, repr=False)
    _saved_service: Optional[object] = field(default=None, init=False, repr=False)
    _gamification_service: Optional[object] = field(default=None, init=False, repr=False)
    _recipe_service: Optional[object] = field(default=None, init=False, repr=False)

    @property
    def user_service(self):
        """Get UserService instance (lazy-loaded)"""
        if self._user_service is None:
            from src.services.user_service import UserService
            self._user_service = UserService(self.db)
            logger.debug("UserService instantiated")
        return self._user_service

    @property
    def discovery_service(self):
        """Get DiscoveryService instance (lazy-loaded)"""
        if self._discovery_service is None:
            from src.services.discovery_service import DiscoveryService
            self._discovery_service = DiscoveryService(self.db, self.place_search)
            logger.debug("DiscoveryService instantiated")
        return self._discovery_service

    @property
    def gamification_service(self):
        """Get GamificationService instance (lazy-loaded)"""
        if self._gamification_service is None:
            from src.services.gamification_service import GamificationService
            self._gamification_service = GamificationService(self.db)
            logger.debug("GamificationService instantiated")
        return self._gamification_service

    @property
    def rating_service(self):
        """Get RatingService instance (lazy-loaded)"""
        if self._rating_service is None:
            from src.services.rating_service import RatingService
            self._rating_service = RatingService(self.db, self.gamification_service)
            logger.debug("RatingService instantiated")
        return self._rating_service

    @property
    def pizzeria_service(self):
        """Get PizzeriaService instance (lazy-loaded)"""
        if self._pizzeria_service is None:
            from src.services.pizzeria_service import PizzeriaService
            self._pizzeria_service = PizzeriaService(self.db, self.rating_service)
            logger.debug("PizzeriaService instantiated")
        return self._pizzeria_service

    @property
    def saved_service(self):
        """Get SavedPizzeriaService instance (lazy-loaded)"""
        if self._saved_service is None:
            from src.services.saved_service import SavedPizzeriaService
            self._saved_service = SavedPizzeriaService(self.db)
            logger.debug("SavedPizzeriaService instantiated")
        return self._saved_service

    @property
    def recipe_service(self):
        """Get RecipeService instance (lazy-loaded)"""
        if self._recipe_service is None:
            from src.services.recipe_service import RecipeService
            self._recipe_service = RecipeService(self.db)
            logger.debug("RecipeService instantiated")
        return self._recipe_service


# Global container instance (initialized by the API lifespan)
_container: Optional[ServiceContainer] = None


def get_container() -> ServiceContainer:
    """
    Get the global service container.

    Returns:
        ServiceContainer: The global container instance

    Raises:
        RuntimeError: If container not initialized (call init_container first)
    """
    if _container is None:
        raise RuntimeError(
            "Service container not initialized. "
            "Call init_container() during startup before using services."
        )
    return _container


def init_container(db: object, place_search: object) -> ServiceContainer:
    """
    Initialize the global service container.

    Should be called once at startup after the database pool is open.

    Args:
        db: Database instance
        place_search: Place-search API client

    Returns:
        ServiceContainer: The initialized container
    """
    global _container

    _container = ServiceContainer(db=db, place_search=place_search)

    logger.info("Service container initialized")
    return _container


def reset_container() -> None:
    """Drop the global container (used on shutdown)"""
    global _container
    _container = None
