"""
Service Layer Package

Business logic services sitting between the REST API and the data access
layer (database queries).

Core Services:
- DiscoveryService: Nearby pizzeria search with cache + place-search API
- PizzeriaService: Pizzeria details, dough style suggestions and votes
- RatingService: Dual ratings, rating stats, reviews
- SavedPizzeriaService: Saved places
- UserService: User location, profile stats
- RecipeService: Dough recipes, saved recipes, recipe ratings
- GamificationService: Achievements

External Integration:
- OverpassClient: OpenStreetMap Overpass place search
"""

from src.services.container import ServiceContainer, get_container, init_container, reset_container
from src.services.place_search import OverpassClient

__all__ = [
    "ServiceContainer",
    "get_container",
    "init_container",
    "reset_container",
    "OverpassClient",
]
