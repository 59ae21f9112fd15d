"""
OpenStreetMap place search

Finds pizza places around a point through the Overpass API and converts the
returned nodes/ways into Pizzeria models. Results carry a temporary id until
they are cached in the database.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Optional

import httpx

from src.config import OVERPASS_API_URL, OVERPASS_TIMEOUT_SECONDS
from src.exceptions import PlaceSearchAPIError, wrap_external_exception
from src.models.pizzeria import Pizzeria
from src.monitoring import track_place_search
from src.utils.geo import calculate_distance

logger = logging.getLogger(__name__)

API_SOURCE = "openstreetmap"

ADDRESS_TAGS = (
    "addr:housenumber",
    "addr:street",
    "addr:city",
    "addr:state",
    "addr:postcode",
)


def build_query(latitude: float, longitude: float, radius_km: float) -> str:
    """
    Overpass QL for restaurants/fast food serving pizza, or named like one

    Ways are returned with a computed center so they have coordinates.
    """
    radius_m = int(round(radius_km * 1000))
    around = f"(around:{radius_m},{latitude},{longitude})"
    return f"""
[out:json][timeout:25];
(
  node["amenity"="restaurant"]["cuisine"~"pizza"]{around};
  way["amenity"="restaurant"]["cuisine"~"pizza"]{around};
  node["amenity"="fast_food"]["cuisine"~"pizza"]{around};
  way["amenity"="fast_food"]["cuisine"~"pizza"]{around};
  node["name"~"[Pp]izza"]["amenity"~"restaurant|fast_food"]{around};
  way["name"~"[Pp]izza"]["amenity"~"restaurant|fast_food"]{around};
);
out center meta;
"""


def element_to_pizzeria(
    element: dict[str, Any],
    origin_lat: float,
    origin_lon: float
) -> Optional[Pizzeria]:
    """
    Convert one Overpass element into a Pizzeria

    Returns None for elements without a name or usable coordinates.
    """
    tags = element.get("tags") or {}
    name = tags.get("name")
    if not name:
        return None

    element_type = element.get("type", "node")
    if element_type == "way":
        center = element.get("center") or {}
        lat, lon = center.get("lat"), center.get("lon")
    else:
        lat, lon = element.get("lat"), element.get("lon")

    if lat is None or lon is None:
        return None

    address_parts = [tags[key] for key in ADDRESS_TAGS if tags.get(key)]
    address = " ".join(address_parts) if address_parts else f"{lat:.6f}, {lon:.6f}"

    business_type = "chain" if tags.get("brand") or tags.get("brand:wikidata") else "independent"

    cuisine = tags.get("cuisine")
    if cuisine:
        cuisine_styles = [c.strip().lower() for c in cuisine.split(";") if c.strip()]
    else:
        cuisine_styles = ["pizza"]

    opening_hours = tags.get("opening_hours")
    external_id = f"{element_type}_{element.get('id')}"

    return Pizzeria(
        id=f"osm_{external_id}",
        name=name,
        address=address,
        latitude=float(lat),
        longitude=float(lon),
        phone=tags.get("phone"),
        website=tags.get("website"),
        verified=False,
        hours={"raw": opening_hours} if opening_hours else None,
        business_type=business_type,
        cuisine_styles=cuisine_styles,
        api_source=API_SOURCE,
        external_id=external_id,
        created_at=datetime.now(timezone.utc),
        distance_miles=calculate_distance(origin_lat, origin_lon, float(lat), float(lon)),
    )


class OverpassClient:
    """
    Client for the Overpass place-search endpoint.

    No retries: a failed call surfaces as PlaceSearchAPIError and the caller
    decides how to degrade.
    """

    def __init__(
        self,
        base_url: str = OVERPASS_API_URL,
        timeout: float = OVERPASS_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.base_url = base_url
        self.timeout = timeout
        self._transport = transport

    async def search(self, latitude: float, longitude: float, radius_km: float) -> list[Pizzeria]:
        """
        Search for pizza places within radius_km of a point

        Raises:
            PlaceSearchAPIError: on network failure, non-2xx status or an
                unparseable body
        """
        query = build_query(latitude, longitude, radius_km)

        with track_place_search():
            try:
                async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                    response = await client.post(self.base_url, data={"data": query})
                    response.raise_for_status()
                    payload = response.json()
            except httpx.HTTPError as e:
                raise wrap_external_exception(e, operation="place_search") from e
            except ValueError as e:
                raise PlaceSearchAPIError(
                    message="OpenStreetMap API returned invalid JSON",
                    operation="place_search",
                    cause=e
                ) from e

        elements = payload.get("elements") or []
        pizzerias = []
        for element in elements:
            pizzeria = element_to_pizzeria(element, latitude, longitude)
            if pizzeria is not None:
                pizzerias.append(pizzeria)

        logger.info(
            f"OpenStreetMap returned {len(elements)} elements, "
            f"{len(pizzerias)} usable pizzerias near ({latitude}, {longitude})"
        )
        return pizzerias
