"""Unit tests for UserService (current location, profile stats)"""
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from src.services.user_service import UserService

QUERIES = 'src.services.user_service.queries'


@pytest.fixture
def user_service():
    return UserService(MagicMock())


@pytest.mark.asyncio
async def test_get_location(user_service):
    row = {'current_latitude': 40.7, 'current_longitude': -74.0}

    with patch(f'{QUERIES}.get_user_location', AsyncMock(return_value=row)):
        result = await user_service.get_location('user-1')

    assert result['location'].is_known is True
    assert result['location'].latitude == 40.7


@pytest.mark.asyncio
async def test_get_location_not_stored(user_service):
    row = {'current_latitude': None, 'current_longitude': None}

    with patch(f'{QUERIES}.get_user_location', AsyncMock(return_value=row)):
        result = await user_service.get_location('user-1')

    assert result['success'] is True
    assert result['location'].is_known is False


@pytest.mark.asyncio
async def test_get_location_unknown_user(user_service):
    with patch(f'{QUERIES}.get_user_location', AsyncMock(return_value=None)):
        result = await user_service.get_location('ghost')

    assert result['not_found'] is True


@pytest.mark.asyncio
async def test_update_location_rejects_invalid_coordinates(user_service):
    with patch(f'{QUERIES}.update_user_location', AsyncMock()) as mock_update:
        result = await user_service.update_location('user-1', 123.0, 0.0)

    assert result['validation_error'] is True
    mock_update.assert_not_called()


@pytest.mark.asyncio
async def test_update_location(user_service):
    with patch(f'{QUERIES}.update_user_location', AsyncMock(return_value=True)) as mock_update:
        result = await user_service.update_location('user-1', 40.7, -74.0)

    assert result['success'] is True
    mock_update.assert_awaited_once()
    assert mock_update.call_args.args[1:] == ('user-1', 40.7, -74.0)


@pytest.mark.asyncio
async def test_update_location_rejects_nan(user_service):
    with patch(f'{QUERIES}.update_user_location', AsyncMock()) as mock_update:
        result = await user_service.update_location('user-1', float('nan'), 0.0)

    assert result['error'] == 'Invalid coordinates'
    mock_update.assert_not_called()


@pytest.mark.asyncio
async def test_update_location_unknown_user(user_service):
    with patch(f'{QUERIES}.update_user_location', AsyncMock(return_value=False)):
        result = await user_service.update_location('ghost', 40.7, -74.0)

    assert result['not_found'] is True


# ============================================================================
# Profile stats
# ============================================================================

@pytest.mark.asyncio
async def test_profile_stats(user_service):
    row = {
        'recipe_count': 3,
        'saved_recipe_count': 7,
        'rating_count': 12,
        'saved_pizzeria_count': 4,
        'achievement_count': 2,
    }

    with patch(f'{QUERIES}.get_profile_counts', AsyncMock(return_value=row)):
        result = await user_service.get_profile_stats('user-1')

    assert result['success'] is True
    stats = result['stats']
    assert stats.user_id == 'user-1'
    assert stats.recipe_count == 3
    assert stats.saved_recipe_count == 7
    assert stats.rating_count == 12


@pytest.mark.asyncio
async def test_profile_stats_unknown_user(user_service):
    with patch(f'{QUERIES}.get_profile_counts', AsyncMock(return_value=None)):
        result = await user_service.get_profile_stats('ghost')

    assert result['success'] is False
    assert result['not_found'] is True


@pytest.mark.asyncio
async def test_profile_stats_database_error(user_service):
    with patch(f'{QUERIES}.get_profile_counts', AsyncMock(side_effect=RuntimeError("db down"))):
        result = await user_service.get_profile_stats('user-1')

    assert result['success'] is False
    assert 'db down' in result['error']
