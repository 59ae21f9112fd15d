"""
DiscoveryService - Nearby Pizzeria Discovery

Merges pizzerias cached in the database with fresh results from the
place-search API. The database is checked first; the API is only consulted
when the cache holds too few places around the requested point, and newly
found places are written back so later searches are served from the cache.
"""

import logging
from typing import Any, Dict, List

from src.config import DISCOVERY_DEFAULT_RADIUS_KM, DISCOVERY_MIN_CACHED_RESULTS
from src.db import queries
from src.exceptions import ValidationError
from src.models.pizzeria import Pizzeria
from src.monitoring import track_cache_write, track_discovery
from src.utils.geo import (
    bounding_box,
    calculate_distance,
    is_same_place,
    km_to_miles,
    longitude_ranges,
    require_valid_coordinate,
)

logger = logging.getLogger(__name__)


class DiscoveryService:
    """
    Service for finding pizzerias near a point.

    Responsibilities:
    - Radius search over the cached pizzerias
    - Supplementing thin results with the place-search API
    - De-duplicating results so no two share a location
    - Best-effort caching of newly found places
    - Attaching approved dough styles and rating averages to cached places
    """

    def __init__(
        self,
        db_connection,
        place_search,
        min_cached_results: int = DISCOVERY_MIN_CACHED_RESULTS
    ):
        """
        Initialize DiscoveryService.

        Args:
            db_connection: Database connection instance
            place_search: Client with an async search(lat, lon, radius_km) method
            min_cached_results: Below this many cached hits the API is queried
        """
        self.db = db_connection
        self.place_search = place_search
        self.min_cached_results = min_cached_results

    async def discover(
        self,
        latitude: float,
        longitude: float,
        radius_km: float = DISCOVERY_DEFAULT_RADIUS_KM
    ) -> Dict[str, Any]:
        """
        Find pizzerias within radius_km of a point.

        Args:
            latitude: Search center latitude in degrees
            longitude: Search center longitude in degrees
            radius_km: Search radius in kilometres

        Returns:
            {
                'success': bool,
                'pizzerias': list[Pizzeria],  # sorted by distance_miles
                'from_cache': int,
                'from_api': int,
                'error': str  # only when success is False
            }
        """
        try:
            require_valid_coordinate(latitude, longitude)
            if not radius_km > 0:
                raise ValidationError("Radius must be positive", field="radius_km", value=radius_km)
        except ValidationError as e:
            return self._failure(e.user_message)

        radius_miles = km_to_miles(radius_km)

        cached = await self._load_cached(latitude, longitude, radius_miles)
        # Cached rows can overlap too (manual entries next to imported ones)
        cached = self._deduplicate(self._preferred_first(cached), [])

        new_places: List[Pizzeria] = []
        if len(cached) < self.min_cached_results:
            found = await self._search_api(latitude, longitude, radius_km)
            new_places = self._deduplicate(found, cached)

            if new_places:
                await self._cache_new_places(new_places)

        summaries = await self._load_summaries([p.id for p in cached])

        merged = []
        for p in cached + new_places:
            update = {'distance_miles': calculate_distance(latitude, longitude, p.latitude, p.longitude)}
            update.update(summaries.get(p.id, {}))
            merged.append(p.model_copy(update=update))
        merged.sort(key=lambda p: p.distance_miles)

        track_discovery("success", from_cache=len(cached), from_api=len(new_places))
        logger.info(
            f"Discovery at ({latitude}, {longitude}) r={radius_km}km: "
            f"{len(cached)} cached, {len(new_places)} new from API"
        )

        return {
            'success': True,
            'pizzerias': merged,
            'from_cache': len(cached),
            'from_api': len(new_places),
        }

    async def _load_cached(self, latitude: float, longitude: float, radius_miles: float) -> List[Pizzeria]:
        """Cached places within the radius; a failed query counts as none"""
        min_lat, max_lat, min_lon, max_lon = bounding_box(latitude, longitude, radius_miles)
        try:
            rows = await queries.get_pizzerias_in_bounds(
                self.db, latitude, longitude,
                min_lat, max_lat, longitude_ranges(min_lon, max_lon)
            )
        except Exception as e:
            logger.error(f"Database query error during discovery: {e}", exc_info=True)
            return []

        cached = []
        for row in rows:
            pizzeria = Pizzeria.from_row(row)
            distance = calculate_distance(latitude, longitude, pizzeria.latitude, pizzeria.longitude)
            if distance <= radius_miles:
                cached.append(pizzeria)
        return cached

    async def _search_api(self, latitude: float, longitude: float, radius_km: float) -> List[Pizzeria]:
        """Place-search API results; a failed call counts as none"""
        try:
            return await self.place_search.search(latitude, longitude, radius_km)
        except Exception as e:
            logger.error(f"Place search failed, using cached results only: {e}")
            return []

    @staticmethod
    def _preferred_first(places: List[Pizzeria]) -> List[Pizzeria]:
        """Verified places first, then the oldest rows"""
        def key(p: Pizzeria):
            return (not p.verified, p.created_at.timestamp() if p.created_at else float('inf'))
        return sorted(places, key=key)

    @staticmethod
    def _deduplicate(found: List[Pizzeria], known: List[Pizzeria]) -> List[Pizzeria]:
        """
        Drop places that sit on top of a known place or an earlier kept one
        """
        kept: List[Pizzeria] = []
        for candidate in found:
            duplicate = any(
                is_same_place(existing.latitude, existing.longitude, candidate.latitude, candidate.longitude)
                for existing in known + kept
            )
            if not duplicate:
                kept.append(candidate)
        return kept

    async def _load_summaries(self, pizzeria_ids: List[str]) -> Dict[str, Dict[str, Any]]:
        """Listing summary per cached pizzeria id; a failed query leaves results bare"""
        if not pizzeria_ids:
            return {}

        try:
            rows = await queries.get_pizzeria_summaries(self.db, pizzeria_ids)
        except Exception as e:
            logger.warning(f"Could not load listing summaries during discovery: {e}")
            return {}

        return {
            str(row['pizzeria_id']): {
                'dough_styles': list(row.get('dough_styles') or []),
                'rating_count': row.get('rating_count') or 0,
                'average_overall_rating': row.get('average_overall_rating'),
                'average_crust_rating': row.get('average_crust_rating'),
            }
            for row in rows
        }

    async def _cache_new_places(self, places: List[Pizzeria]) -> None:
        try:
            await queries.insert_pizzerias(self.db, places)
            track_cache_write(True)
        except Exception as e:
            track_cache_write(False)
            logger.error(f"Error caching pizzerias: {e}", exc_info=True)

    @staticmethod
    def _failure(error: str) -> Dict[str, Any]:
        track_discovery("rejected")
        return {
            'success': False,
            'pizzerias': [],
            'from_cache': 0,
            'from_api': 0,
            'error': error,
            'validation_error': True,
        }
