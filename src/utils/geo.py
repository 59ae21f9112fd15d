"""
Geographic helpers for discovery and achievements

All distances are in miles. Callers validate coordinates upstream; invalid
numeric input (NaN) propagates through as NaN.
"""
import math

from src.exceptions import ValidationError

EARTH_RADIUS_MILES = 3959.0
MILES_PER_DEGREE_LATITUDE = 69.0
KM_PER_MILE = 1.609344

# Two places closer than this (~300 ft) are treated as the same location
SAME_PLACE_THRESHOLD_MILES = 0.05

FEET_PER_MILE = 5280


def calculate_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Great-circle distance between two points using the haversine formula.

    Args:
        lat1, lon1: First point in degrees
        lat2, lon2: Second point in degrees

    Returns:
        Distance in miles
    """
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_MILES * c


def km_to_miles(km: float) -> float:
    return km / KM_PER_MILE


def bounding_box(latitude: float, longitude: float, radius_miles: float) -> tuple[float, float, float, float]:
    """
    Approximate lat/lon box enclosing a circle of radius_miles.

    Used as a cheap index-friendly prefilter; results must still be checked
    with calculate_distance.

    Returns:
        (min_lat, max_lat, min_lon, max_lon)
    """
    lat_delta = radius_miles / MILES_PER_DEGREE_LATITUDE

    cos_lat = math.cos(math.radians(latitude))
    if cos_lat < 1e-6:
        # At the poles every longitude is within range
        lon_delta = 180.0
    else:
        lon_delta = min(radius_miles / (MILES_PER_DEGREE_LATITUDE * cos_lat), 180.0)

    return (
        latitude - lat_delta,
        latitude + lat_delta,
        longitude - lon_delta,
        longitude + lon_delta,
    )


def longitude_ranges(min_lon: float, max_lon: float) -> list[tuple[float, float]]:
    """
    Split a longitude span into ranges inside [-180, 180]

    A box that crosses the antimeridian becomes two ranges, one on each side.

    Example:
        longitude_ranges(-185.0, -175.0) -> [(175.0, 180.0), (-180.0, -175.0)]
    """
    if max_lon - min_lon >= 360:
        return [(-180.0, 180.0)]
    if min_lon < -180:
        return [(min_lon + 360, 180.0), (-180.0, max_lon)]
    if max_lon > 180:
        return [(min_lon, 180.0), (-180.0, max_lon - 360)]
    return [(min_lon, max_lon)]


def is_same_place(lat1: float, lon1: float, lat2: float, lon2: float) -> bool:
    """True when two coordinates are close enough to be one location"""
    return calculate_distance(lat1, lon1, lat2, lon2) < SAME_PLACE_THRESHOLD_MILES


def format_distance(miles: float) -> str:
    """Format a distance for display: feet under a mile, otherwise miles"""
    if miles < 1:
        return f"{miles * FEET_PER_MILE:.0f} ft"
    return f"{miles:.1f} mi"


def is_valid_coordinate(latitude: float, longitude: float) -> bool:
    """Range check that also rejects NaN"""
    return -90 <= latitude <= 90 and -180 <= longitude <= 180


def require_valid_coordinate(latitude: float, longitude: float) -> None:
    """
    Raises:
        ValidationError: when the pair is out of range or NaN
    """
    if not is_valid_coordinate(latitude, longitude):
        raise ValidationError(
            "Invalid coordinates",
            field="coordinates",
            value={"latitude": latitude, "longitude": longitude}
        )
