"""Unit tests for database queries (src/db/queries/)"""
import pytest
from unittest.mock import AsyncMock

from psycopg.types.json import Jsonb

from src.db import queries
from src.models.pizzeria import Pizzeria
from src.models.rating import RatingInput
from src.models.recipe import RecipeInput, RecipeRatingInput


# ============================================================================
# Pizzerias
# ============================================================================

@pytest.mark.asyncio
async def test_get_pizzerias_in_bounds_passes_box(mock_db):
    db, conn, cursor = mock_db
    cursor.fetchall.return_value = [{"id": "p-1"}]

    rows = await queries.get_pizzerias_in_bounds(db, 40.0, -74.0, 39.9, 40.1, [(-74.1, -73.9)])

    sql, params = cursor.execute.call_args.args
    assert "latitude BETWEEN %s AND %s" in sql
    assert params == (39.9, 40.1, -74.1, -73.9, 40.0, -74.0, 40.0, 500)
    assert rows == [{"id": "p-1"}]


@pytest.mark.asyncio
async def test_get_pizzerias_in_bounds_orders_by_distance_before_limit(mock_db):
    db, conn, cursor = mock_db

    await queries.get_pizzerias_in_bounds(db, 40.0, -74.0, 39.9, 40.1, [(-74.1, -73.9)], limit=50)

    sql, params = cursor.execute.call_args.args
    assert "ORDER BY" in sql
    assert sql.index("ORDER BY") < sql.index("LIMIT")
    assert params[-1] == 50


@pytest.mark.asyncio
async def test_get_pizzerias_in_bounds_two_longitude_ranges(mock_db):
    """A box crossing the antimeridian is queried on both sides"""
    db, conn, cursor = mock_db

    await queries.get_pizzerias_in_bounds(
        db, -17.0, -179.9, -17.3, -16.7, [(179.8, 180.0), (-180.0, -179.6)]
    )

    sql, params = cursor.execute.call_args.args
    assert sql.count("longitude BETWEEN %s AND %s") == 2
    assert " OR " in sql
    assert params[:6] == (-17.3, -16.7, 179.8, 180.0, -180.0, -179.6)


@pytest.mark.asyncio
async def test_insert_pizzerias_ignores_existing_external_ids(mock_db):
    db, conn, cursor = mock_db
    cursor.executemany = AsyncMock()
    place = Pizzeria(
        id="osm_node_1", name="Di Fara", address="1424 Avenue J",
        latitude=40.625, longitude=-73.961, hours={"raw": "Th-Su 12:00-20:00"},
        api_source="openstreetmap", external_id="node_1",
    )

    count = await queries.insert_pizzerias(db, [place])

    sql, rows = cursor.executemany.call_args.args
    assert "ON CONFLICT (api_source, external_id) DO NOTHING" in sql
    assert rows[0][0] == "Di Fara"
    assert isinstance(rows[0][7], Jsonb)
    assert count == 1
    conn.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_insert_pizzerias_empty_list_skips_db(mock_db):
    db, conn, cursor = mock_db

    assert await queries.insert_pizzerias(db, []) == 0
    db.connection.assert_not_called()


@pytest.mark.asyncio
async def test_get_dough_styles_filters_approved(mock_db):
    db, conn, cursor = mock_db

    await queries.get_dough_styles(db, "p-1")
    assert "status = 'approved'" in cursor.execute.call_args.args[0]

    await queries.get_dough_styles(db, "p-1", approved_only=False)
    assert "status = 'approved'" not in cursor.execute.call_args.args[0]


@pytest.mark.asyncio
async def test_add_dough_style_duplicate_returns_none(mock_db):
    db, conn, cursor = mock_db
    cursor.fetchone.return_value = None

    result = await queries.add_dough_style(db, "p-1", "sicilian")

    assert result is None
    assert "ON CONFLICT (pizzeria_id, dough_style) DO NOTHING" in cursor.execute.call_args.args[0]


@pytest.mark.asyncio
async def test_vote_dough_style_down(mock_db):
    db, conn, cursor = mock_db

    await queries.vote_dough_style(db, "tag-1", up=False)

    assert "votes_down = votes_down + 1" in cursor.execute.call_args.args[0]


# ============================================================================
# Ratings
# ============================================================================

@pytest.mark.asyncio
async def test_upsert_rating_uses_on_conflict_update(mock_db, rating_row):
    db, conn, cursor = mock_db
    cursor.fetchone.return_value = rating_row
    rating = RatingInput(pizzeria_id="p-1", user_id="u-1", overall_rating=5, crust_rating=3)

    row = await queries.upsert_rating(db, rating)

    sql, params = cursor.execute.call_args.args
    assert "ON CONFLICT (pizzeria_id, user_id) DO UPDATE" in sql
    assert "updated_at = now()" in sql
    assert params == ("p-1", "u-1", 5, 3, None, [])
    assert row is rating_row
    conn.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_get_rating_owner(mock_db):
    db, conn, cursor = mock_db
    cursor.fetchone.return_value = {"user_id": "u-1"}

    assert await queries.get_rating_owner(db, "r-1") == "u-1"

    cursor.fetchone.return_value = None
    assert await queries.get_rating_owner(db, "r-2") is None


@pytest.mark.asyncio
async def test_delete_rating_reports_rowcount(mock_db):
    db, conn, cursor = mock_db
    cursor.rowcount = 1

    assert await queries.delete_rating(db, "r-1") is True


@pytest.mark.asyncio
async def test_rating_history_joins_approved_styles(mock_db):
    db, conn, cursor = mock_db

    await queries.get_user_rating_history(db, "u-1")

    sql = cursor.execute.call_args.args[0]
    assert "JOIN pizzerias p" in sql
    assert "ds.status = 'approved'" in sql


# ============================================================================
# Saved pizzerias
# ============================================================================

@pytest.mark.asyncio
async def test_save_pizzeria_is_idempotent(mock_db):
    db, conn, cursor = mock_db
    cursor.fetchone.return_value = None

    created = await queries.save_pizzeria(db, "u-1", "p-1")

    assert created is False
    assert "ON CONFLICT (user_id, pizzeria_id) DO NOTHING" in cursor.execute.call_args.args[0]


@pytest.mark.asyncio
async def test_get_saved_pizzerias_newest_first(mock_db):
    db, conn, cursor = mock_db

    await queries.get_saved_pizzerias(db, "u-1")

    assert "ORDER BY s.created_at DESC" in cursor.execute.call_args.args[0]


# ============================================================================
# Achievements and users
# ============================================================================

@pytest.mark.asyncio
async def test_insert_user_achievement_wraps_metadata(mock_db):
    db, conn, cursor = mock_db
    cursor.fetchone.return_value = {"id": 1}

    created = await queries.insert_user_achievement(db, "u-1", "first_review", {"progress_when_earned": 1})

    sql, params = cursor.execute.call_args.args
    assert "ON CONFLICT (user_id, achievement_type) DO NOTHING" in sql
    assert isinstance(params[2], Jsonb)
    assert created is True


@pytest.mark.asyncio
async def test_update_user_location_unknown_user(mock_db):
    db, conn, cursor = mock_db
    cursor.rowcount = 0

    assert await queries.update_user_location(db, "ghost", 1.0, 2.0) is False
    assert cursor.execute.call_args.args[1] == (1.0, 2.0, "ghost")


@pytest.mark.asyncio
async def test_get_profile_counts_unknown_user(mock_db):
    db, conn, cursor = mock_db

    assert await queries.get_profile_counts(db, "ghost") is None
    assert "FROM users u" in cursor.execute.call_args.args[0]


# ============================================================================
# Listing summaries
# ============================================================================

@pytest.mark.asyncio
async def test_get_pizzeria_summaries_empty_list_skips_db(mock_db):
    db, conn, cursor = mock_db

    assert await queries.get_pizzeria_summaries(db, []) == []
    cursor.execute.assert_not_called()


@pytest.mark.asyncio
async def test_get_pizzeria_summaries_only_approved_styles(mock_db):
    db, conn, cursor = mock_db

    await queries.get_pizzeria_summaries(db, ["p-1", "p-2"])

    sql, params = cursor.execute.call_args.args
    assert "status = 'approved'" in sql
    assert params == (["p-1", "p-2"], ["p-1", "p-2"], ["p-1", "p-2"])


# ============================================================================
# Recipes
# ============================================================================

@pytest.mark.asyncio
async def test_create_recipe_writes_children_in_one_commit(mock_db, recipe_row):
    db, conn, cursor = mock_db
    cursor.fetchone.side_effect = [
        recipe_row,
        {"id": "i-1"}, {"id": "i-2"},
        {"id": "s-1"},
    ]
    recipe = RecipeInput(
        user_id="u-1", title="Tonda", category="neapolitan", difficulty=2,
        total_time_minutes=90, servings=2,
        ingredients=[
            {"name": "flour", "amount": 500, "unit": "g"},
            {"name": "water", "amount": 325, "unit": "g"},
        ],
        process_steps=[{"title": "Mix"}],
    )

    created = await queries.create_recipe(db, recipe)

    assert cursor.execute.await_count == 4
    step_params = cursor.execute.call_args_list[3].args[1]
    assert step_params[1] == 1
    water_params = cursor.execute.call_args_list[2].args[1]
    assert water_params[-1] == 1
    conn.commit.assert_awaited_once()
    assert created["ingredients"] == [{"id": "i-1"}, {"id": "i-2"}]
    assert created["process_steps"] == [{"id": "s-1"}]


@pytest.mark.asyncio
async def test_get_public_recipes_filters(mock_db):
    db, conn, cursor = mock_db

    await queries.get_public_recipes(db, category="sicilian", featured_only=True, limit=10)

    sql, params = cursor.execute.call_args.args
    assert "r.is_public AND r.category = %s AND r.is_featured" in sql
    assert params == ["sicilian", 10]


@pytest.mark.asyncio
async def test_upsert_recipe_rating_uses_on_conflict_update(mock_db):
    db, conn, cursor = mock_db
    rating = RecipeRatingInput(recipe_id="rc-1", user_id="u-1", overall_rating=4, crust_rating=3)

    await queries.upsert_recipe_rating(db, rating)

    sql, params = cursor.execute.call_args.args
    assert "ON CONFLICT (recipe_id, user_id) DO UPDATE" in sql
    assert params[:4] == ("rc-1", "u-1", 4, 3)
    conn.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_save_recipe_is_idempotent(mock_db):
    db, conn, cursor = mock_db
    cursor.fetchone.return_value = None

    assert await queries.save_recipe(db, "u-1", "rc-1") is False
