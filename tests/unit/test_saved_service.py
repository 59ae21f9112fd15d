"""Unit tests for SavedPizzeriaService"""
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from src.services.saved_service import SavedPizzeriaService

QUERIES = 'src.services.saved_service.queries'


@pytest.fixture
def saved_service():
    return SavedPizzeriaService(MagicMock())


@pytest.mark.asyncio
async def test_save_twice_is_not_an_error(saved_service):
    with patch(f'{QUERIES}.save_pizzeria', AsyncMock(side_effect=[True, False])):
        first = await saved_service.save('user-1', 'p-1')
        second = await saved_service.save('user-1', 'p-1')

    assert first == {'success': True, 'created': True}
    assert second == {'success': True, 'created': False}


@pytest.mark.asyncio
async def test_unsave(saved_service):
    with patch(f'{QUERIES}.unsave_pizzeria', AsyncMock(return_value=True)):
        result = await saved_service.unsave('user-1', 'p-1')

    assert result == {'success': True, 'removed': True}


@pytest.mark.asyncio
async def test_is_saved_failure_reports_not_saved(saved_service):
    with patch(f'{QUERIES}.is_pizzeria_saved', AsyncMock(side_effect=RuntimeError("boom"))):
        result = await saved_service.is_saved('user-1', 'p-1')

    assert result['success'] is False
    assert result['is_saved'] is False


@pytest.mark.asyncio
async def test_list_saved_builds_pizzerias(saved_service, pizzeria_row):
    with patch(f'{QUERIES}.get_saved_pizzerias', AsyncMock(return_value=[pizzeria_row])):
        result = await saved_service.list_saved('user-1')

    assert result['success'] is True
    assert result['pizzerias'][0].id == str(pizzeria_row['id'])
