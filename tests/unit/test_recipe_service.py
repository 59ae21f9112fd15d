"""Unit tests for RecipeService"""
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from src.models.pizzeria import DoughStyle
from src.services.recipe_service import RecipeService

QUERIES = 'src.services.recipe_service.queries'


@pytest.fixture
def recipe_service():
    return RecipeService(MagicMock())


def recipe_payload(**overrides):
    payload = {
        'user_id': 'user-1',
        'title': '  Same-day Neapolitan  ',
        'category': 'neapolitan',
        'difficulty': 2,
        'total_time_minutes': 480,
        'servings': 4,
        'hydration_percentage': 65,
        'ingredients': [
            {'name': 'Tipo 00 flour', 'amount': 1000, 'unit': 'g', 'percentage': 100},
            {'name': 'Water', 'amount': 650, 'unit': 'g', 'percentage': 65},
        ],
        'process_steps': [{'title': 'Mix', 'duration_minutes': 10}, {'title': 'Bulk ferment'}],
    }
    payload.update(overrides)
    return payload


# ============================================================================
# create_recipe
# ============================================================================

@pytest.mark.asyncio
@pytest.mark.parametrize("field, value, message", [
    ('title', '   ', 'Recipe title is required'),
    ('difficulty', 6, 'Difficulty must be between 1 and 5'),
    ('total_time_minutes', 0, 'Total time must be positive'),
    ('servings', 0, 'Servings must be at least 1'),
    ('hydration_percentage', 250, 'Hydration must be between 0 and 200 percent'),
])
async def test_invalid_recipe_rejected_without_db_call(recipe_service, field, value, message):
    with patch(f'{QUERIES}.create_recipe', AsyncMock()) as mock_create:
        result = await recipe_service.create_recipe(recipe_payload(**{field: value}))

    assert result['success'] is False
    assert message in result['error']
    assert result['validation_error'] is True
    mock_create.assert_not_called()


@pytest.mark.asyncio
async def test_unknown_category_rejected(recipe_service):
    with patch(f'{QUERIES}.create_recipe', AsyncMock()) as mock_create:
        result = await recipe_service.create_recipe(recipe_payload(category='cauliflower'))

    assert result['validation_error'] is True
    mock_create.assert_not_called()


@pytest.mark.asyncio
async def test_create_recipe_returns_ingredients_and_steps(recipe_service, recipe_row):
    recipe_id = recipe_row['id']
    created = dict(
        recipe_row,
        ingredients=[
            {'id': 'i-1', 'recipe_id': recipe_id, 'name': 'Tipo 00 flour', 'amount': 1000,
             'unit': 'g', 'percentage': 100, 'order_index': 0},
        ],
        process_steps=[
            {'id': 's-1', 'recipe_id': recipe_id, 'step_number': 1, 'title': 'Mix',
             'description': None, 'duration_minutes': 10, 'temperature': None, 'order_index': 0},
        ],
    )

    with patch(f'{QUERIES}.create_recipe', AsyncMock(return_value=created)) as mock_create:
        result = await recipe_service.create_recipe(recipe_payload())

    assert result['success'] is True
    recipe = result['recipe']
    assert recipe.id == str(recipe_id)
    assert [i.name for i in recipe.ingredients] == ['Tipo 00 flour']
    assert recipe.process_steps[0].step_number == 1

    submitted = mock_create.call_args.args[1]
    assert submitted.title == 'Same-day Neapolitan'
    assert submitted.category == DoughStyle.NEAPOLITAN
    assert len(submitted.process_steps) == 2


@pytest.mark.asyncio
async def test_create_recipe_database_error(recipe_service):
    with patch(f'{QUERIES}.create_recipe', AsyncMock(side_effect=Exception("DB down"))):
        result = await recipe_service.create_recipe(recipe_payload())

    assert result['success'] is False
    assert 'validation_error' not in result


# ============================================================================
# get_recipe
# ============================================================================

@pytest.mark.asyncio
async def test_get_recipe_loads_details(recipe_service, recipe_row):
    with patch(f'{QUERIES}.get_recipe', AsyncMock(return_value=recipe_row)), \
         patch(f'{QUERIES}.get_recipe_ingredients', AsyncMock(return_value=[])) as mock_ingredients, \
         patch(f'{QUERIES}.get_recipe_steps', AsyncMock(return_value=[])):
        result = await recipe_service.get_recipe(str(recipe_row['id']))

    assert result['success'] is True
    assert result['recipe'].title == '72-hour cold ferment'
    assert result['recipe'].rating_count == 0
    mock_ingredients.assert_awaited_once()


@pytest.mark.asyncio
async def test_private_recipe_hidden_from_other_users(recipe_service, recipe_row):
    recipe_row['is_public'] = False

    with patch(f'{QUERIES}.get_recipe', AsyncMock(return_value=recipe_row)), \
         patch(f'{QUERIES}.get_recipe_ingredients', AsyncMock(return_value=[])), \
         patch(f'{QUERIES}.get_recipe_steps', AsyncMock(return_value=[])):
        stranger = await recipe_service.get_recipe(str(recipe_row['id']), viewer_id='someone-else')
        author = await recipe_service.get_recipe(str(recipe_row['id']), viewer_id=str(recipe_row['user_id']))

    assert stranger['not_found'] is True
    assert author['success'] is True


@pytest.mark.asyncio
async def test_get_missing_recipe(recipe_service):
    with patch(f'{QUERIES}.get_recipe', AsyncMock(return_value=None)):
        result = await recipe_service.get_recipe('missing')

    assert result['success'] is False
    assert result['not_found'] is True


# ============================================================================
# Listings
# ============================================================================

@pytest.mark.asyncio
async def test_list_public_recipes_by_category(recipe_service, recipe_row):
    with patch(f'{QUERIES}.get_public_recipes', AsyncMock(return_value=[recipe_row])) as mock_list:
        result = await recipe_service.list_public_recipes(category='neapolitan', featured_only=True)

    assert [r.category for r in result['recipes']] == [DoughStyle.NEAPOLITAN]
    mock_list.assert_awaited_once_with(recipe_service.db, 'neapolitan', True, 20)


@pytest.mark.asyncio
async def test_list_public_recipes_unknown_category(recipe_service):
    with patch(f'{QUERIES}.get_public_recipes', AsyncMock()) as mock_list:
        result = await recipe_service.list_public_recipes(category='cauliflower')

    assert result['validation_error'] is True
    assert result['error'] == 'Unknown dough style: cauliflower'
    mock_list.assert_not_called()


@pytest.mark.asyncio
async def test_list_user_recipes(recipe_service, recipe_row):
    with patch(f'{QUERIES}.get_user_recipes', AsyncMock(return_value=[recipe_row])):
        result = await recipe_service.list_user_recipes('user-1')

    assert result['success'] is True
    assert len(result['recipes']) == 1


# ============================================================================
# delete_recipe
# ============================================================================

@pytest.mark.asyncio
async def test_delete_recipe_of_other_user_is_forbidden(recipe_service):
    with patch(f'{QUERIES}.get_recipe_owner', AsyncMock(return_value='author')), \
         patch(f'{QUERIES}.delete_recipe', AsyncMock()) as mock_delete:
        result = await recipe_service.delete_recipe('rc-1', 'intruder')

    assert result['forbidden'] is True
    mock_delete.assert_not_called()


@pytest.mark.asyncio
async def test_delete_own_recipe(recipe_service):
    with patch(f'{QUERIES}.get_recipe_owner', AsyncMock(return_value='author')), \
         patch(f'{QUERIES}.delete_recipe', AsyncMock(return_value=True)) as mock_delete:
        result = await recipe_service.delete_recipe('rc-1', 'author')

    assert result['success'] is True
    mock_delete.assert_awaited_once_with(recipe_service.db, 'rc-1')


@pytest.mark.asyncio
async def test_delete_missing_recipe(recipe_service):
    with patch(f'{QUERIES}.get_recipe_owner', AsyncMock(return_value=None)):
        result = await recipe_service.delete_recipe('rc-1', 'author')

    assert result['not_found'] is True


# ============================================================================
# Saved recipes
# ============================================================================

@pytest.mark.asyncio
async def test_save_twice_is_not_an_error(recipe_service):
    with patch(f'{QUERIES}.save_recipe', AsyncMock(side_effect=[True, False])):
        first = await recipe_service.save_recipe('user-1', 'rc-1')
        second = await recipe_service.save_recipe('user-1', 'rc-1')

    assert first == {'success': True, 'created': True}
    assert second == {'success': True, 'created': False}


@pytest.mark.asyncio
async def test_list_saved_recipes_error(recipe_service):
    with patch(f'{QUERIES}.get_saved_recipes', AsyncMock(side_effect=Exception("DB down"))):
        result = await recipe_service.list_saved_recipes('user-1')

    assert result['success'] is False
    assert result['recipes'] == []


# ============================================================================
# rate_recipe
# ============================================================================

@pytest.mark.asyncio
async def test_rate_recipe_out_of_range(recipe_service):
    with patch(f'{QUERIES}.upsert_recipe_rating', AsyncMock()) as mock_upsert:
        result = await recipe_service.rate_recipe(
            {'recipe_id': 'rc-1', 'user_id': 'user-1', 'overall_rating': 4, 'crust_rating': 0}
        )

    assert result['validation_error'] is True
    assert 'Crust rating must be between 1 and 5' in result['error']
    mock_upsert.assert_not_called()


@pytest.mark.asyncio
async def test_rate_missing_recipe(recipe_service):
    with patch(f'{QUERIES}.get_recipe_owner', AsyncMock(return_value=None)), \
         patch(f'{QUERIES}.upsert_recipe_rating', AsyncMock()) as mock_upsert:
        result = await recipe_service.rate_recipe(
            {'recipe_id': 'rc-1', 'user_id': 'user-1', 'overall_rating': 4, 'crust_rating': 4}
        )

    assert result['not_found'] is True
    mock_upsert.assert_not_called()


@pytest.mark.asyncio
async def test_rate_recipe(recipe_service, rating_row):
    row = {k: v for k, v in rating_row.items() if k != 'pizzeria_id'}
    row['recipe_id'] = 'rc-1'

    with patch(f'{QUERIES}.get_recipe_owner', AsyncMock(return_value='author')), \
         patch(f'{QUERIES}.upsert_recipe_rating', AsyncMock(return_value=row)):
        result = await recipe_service.rate_recipe(
            {'recipe_id': 'rc-1', 'user_id': 'user-1', 'overall_rating': 5, 'crust_rating': 4, 'review': ' '}
        )

    assert result['success'] is True
    assert result['rating'].recipe_id == 'rc-1'
    assert result['rating'].overall_rating == 5
