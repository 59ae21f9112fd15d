"""Global test fixtures and utilities for pizza finder tests"""
import pytest
from unittest.mock import AsyncMock, MagicMock
from datetime import datetime, timezone
from uuid import uuid4


# ============================================================================
# Database Fixtures
# ============================================================================

def build_mock_db(cursor=None):
    """
    Mock Database whose connection() yields a connection with the given cursor

    Usage:
        db, conn, cursor = build_mock_db()
        cursor.fetchone.return_value = {...}
    """
    cursor = cursor or AsyncMock()

    conn = MagicMock()
    conn.cursor.return_value.__aenter__.return_value = cursor
    conn.cursor.return_value.__aexit__.return_value = False
    conn.commit = AsyncMock()

    db = MagicMock()
    db.connection.return_value.__aenter__.return_value = conn
    db.connection.return_value.__aexit__.return_value = False
    return db, conn, cursor


@pytest.fixture
def db_factory():
    """Factory fixture for build_mock_db"""
    return build_mock_db


@pytest.fixture
def mock_db_cursor():
    """Mock database cursor with empty default results"""
    cursor = AsyncMock()
    cursor.fetchone = AsyncMock(return_value=None)
    cursor.fetchall = AsyncMock(return_value=[])
    cursor.execute = AsyncMock()
    cursor.rowcount = 0
    return cursor


@pytest.fixture
def mock_db(mock_db_cursor):
    """(db, conn, cursor) triple sharing one mock cursor"""
    return build_mock_db(mock_db_cursor)


# ============================================================================
# Domain Fixtures
# ============================================================================

@pytest.fixture
def test_user_id():
    return str(uuid4())


@pytest.fixture
def pizzeria_row():
    """Row as returned by the pizzerias table"""
    return {
        "id": uuid4(),
        "name": "Lucali",
        "address": "575 Henry St Brooklyn NY",
        "latitude": 40.6800,
        "longitude": -73.9990,
        "phone": None,
        "website": None,
        "verified": False,
        "description": None,
        "hours": None,
        "price_range": 2,
        "business_type": "independent",
        "cuisine_styles": ["pizza"],
        "photos": None,
        "api_source": "openstreetmap",
        "external_id": "node_1",
        "created_at": datetime(2024, 5, 1, tzinfo=timezone.utc),
    }


@pytest.fixture
def rating_row():
    """Row as returned by pizzeria_ratings"""
    return {
        "id": uuid4(),
        "pizzeria_id": uuid4(),
        "user_id": uuid4(),
        "overall_rating": 5,
        "crust_rating": 4,
        "review": "Great char on the crust",
        "photos": [],
        "created_at": datetime(2024, 5, 1, tzinfo=timezone.utc),
        "updated_at": datetime(2024, 5, 1, tzinfo=timezone.utc),
    }


@pytest.fixture
def recipe_row():
    """Row as returned by the recipe select (with rating summary)"""
    return {
        "id": uuid4(),
        "user_id": uuid4(),
        "title": "72-hour cold ferment",
        "description": None,
        "category": "neapolitan",
        "difficulty": 3,
        "total_time_minutes": 4380,
        "servings": 4,
        "hydration_percentage": None,
        "is_featured": False,
        "is_public": True,
        "photos": None,
        "created_at": datetime(2024, 5, 1, tzinfo=timezone.utc),
        "updated_at": datetime(2024, 5, 1, tzinfo=timezone.utc),
        "rating_count": 0,
        "average_overall_rating": None,
        "average_crust_rating": None,
    }
