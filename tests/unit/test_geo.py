"""Unit tests for geographic helpers (src/utils/geo.py)"""
import math
import pytest

from src.exceptions import ValidationError
from src.utils.geo import (
    bounding_box,
    calculate_distance,
    format_distance,
    is_same_place,
    is_valid_coordinate,
    km_to_miles,
    longitude_ranges,
    require_valid_coordinate,
)


# ============================================================================
# Distance
# ============================================================================

def test_distance_to_self_is_zero():
    assert calculate_distance(40.7128, -74.0060, 40.7128, -74.0060) == 0


def test_distance_is_symmetric():
    a = calculate_distance(40.7128, -74.0060, 34.0522, -118.2437)
    b = calculate_distance(34.0522, -118.2437, 40.7128, -74.0060)
    assert a == pytest.approx(b)


def test_new_york_to_los_angeles():
    """Roughly 2445 miles great-circle"""
    distance = calculate_distance(40.7128, -74.0060, 34.0522, -118.2437)
    assert distance == pytest.approx(2445, rel=0.01)


def test_one_degree_latitude_is_about_69_miles():
    assert calculate_distance(40.0, -74.0, 41.0, -74.0) == pytest.approx(69.1, rel=0.01)


def test_km_to_miles():
    assert km_to_miles(1.609344) == pytest.approx(1.0)
    assert km_to_miles(15) == pytest.approx(9.3206, rel=1e-4)


# ============================================================================
# Bounding box
# ============================================================================

def test_bounding_box_contains_circle():
    lat, lon, radius = 40.0, -74.0, 10.0
    min_lat, max_lat, min_lon, max_lon = bounding_box(lat, lon, radius)

    assert min_lat < lat < max_lat
    assert min_lon < lon < max_lon

    # Points due north/east at exactly the radius fall inside the box
    north = lat + radius / 69.0
    assert north <= max_lat
    east_edge_distance = calculate_distance(lat, lon, lat, max_lon)
    assert east_edge_distance >= radius * 0.99


def test_bounding_box_near_pole_spans_all_longitudes():
    _, _, min_lon, max_lon = bounding_box(90.0, 0.0, 5.0)
    assert max_lon - min_lon == pytest.approx(360.0)


def test_longitude_ranges_inside_world_unchanged():
    assert longitude_ranges(-74.2, -73.8) == [(-74.2, -73.8)]


def test_longitude_ranges_split_west_of_antimeridian():
    ranges = longitude_ranges(-185.0, -175.0)
    assert ranges == [(175.0, 180.0), (-180.0, -175.0)]


def test_longitude_ranges_split_east_of_antimeridian():
    ranges = longitude_ranges(178.0, 182.5)
    assert ranges[0] == (178.0, 180.0)
    assert ranges[1][0] == -180.0
    assert ranges[1][1] == pytest.approx(-177.5)


def test_box_near_antimeridian_covers_place_across_it():
    """Fiji sits at 179.9E; a search from 179.9W must still reach it"""
    _, _, min_lon, max_lon = bounding_box(-17.0, -179.9, 20.0)
    ranges = longitude_ranges(min_lon, max_lon)

    assert any(lo <= 179.9 <= hi for lo, hi in ranges)
    assert all(-180.0 <= lo <= hi <= 180.0 for lo, hi in ranges)


def test_longitude_ranges_full_span_at_pole():
    _, _, min_lon, max_lon = bounding_box(90.0, 0.0, 5.0)
    assert longitude_ranges(min_lon, max_lon) == [(-180.0, 180.0)]


# ============================================================================
# Same place / formatting / validation
# ============================================================================

def test_is_same_place_threshold():
    assert is_same_place(40.0, -74.0, 40.0001, -74.0)  # ~36 ft
    assert not is_same_place(40.0, -74.0, 40.01, -74.0)  # ~0.7 mi


def test_format_distance():
    assert format_distance(0.5) == "2640 ft"
    assert format_distance(2.34) == "2.3 mi"


@pytest.mark.parametrize("lat, lon, expected", [
    (0, 0, True),
    (90, 180, True),
    (-90, -180, True),
    (90.0001, 0, False),
    (0, -180.5, False),
    (math.nan, 0, False),
])
def test_is_valid_coordinate(lat, lon, expected):
    assert is_valid_coordinate(lat, lon) is expected


def test_require_valid_coordinate():
    require_valid_coordinate(40.7, -74.0)

    with pytest.raises(ValidationError) as exc_info:
        require_valid_coordinate(95.0, 0.0)

    assert exc_info.value.user_message == "Invalid coordinates"
    assert exc_info.value.field == "coordinates"
