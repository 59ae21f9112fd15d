"""API routes for pizza discovery, ratings and achievements"""
import logging
from datetime import datetime
from typing import Any, Dict, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status

from src.api.models import (
    DiscoveryResponse, PizzeriaDetailResponse,
    ReviewItem, ReviewListResponse,
    RatingRequest, RatingResponse, UserRatingResponse,
    DoughStyleRequest, DoughStyleResponse, VoteRequest,
    SavedListResponse, SavedStatusResponse,
    LocationRequest, LocationResponse,
    AchievementListResponse, AchievementCheckResponse, ProfileResponse,
    RecipeRequest, RecipeResponse, RecipeListResponse, SavedRecipeStatusResponse,
    RecipeRatingRequest, RecipeRatingResponse,
    HealthCheckResponse
)
from src.api.auth import verify_api_key
from src.api.middleware import limiter
from src.services.container import ServiceContainer, get_container

logger = logging.getLogger(__name__)

router = APIRouter()


def get_services() -> ServiceContainer:
    """Dependency returning the service container (overridden in tests)"""
    return get_container()


def _raise_for_failure(result: Dict[str, Any]) -> None:
    """Translate a failed service result into an HTTP error"""
    if result.get('success'):
        return

    error = result.get('error', 'Request failed')
    if result.get('not_found'):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=error)
    if result.get('forbidden'):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=error)
    if result.get('validation_error'):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error)

    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=error)


# ---------------------------------------------------------------------------
# Discovery and pizzeria details
# ---------------------------------------------------------------------------

@router.get("/api/v1/pizzerias/discover", response_model=DiscoveryResponse)
@limiter.limit("30/minute")
async def discover_pizzerias(
    request: Request,
    latitude: Optional[float] = Query(default=None),
    longitude: Optional[float] = Query(default=None),
    radius_km: Optional[float] = Query(default=None),
    user_id: Optional[str] = Query(default=None, description="Fall back to this user's stored location"),
    services: ServiceContainer = Depends(get_services),
    api_key: str = Depends(verify_api_key)
):
    """
    Find pizzerias around a point, nearest first (Rate limit: 30/minute)

    Without explicit coordinates the user's stored current location is used.
    """
    if latitude is None or longitude is None:
        if not user_id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="latitude and longitude are required when no user_id is given"
            )

        location_result = await services.user_service.get_location(user_id)
        _raise_for_failure(location_result)
        location = location_result['location']
        if not location.is_known:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No stored location for this user"
            )
        latitude, longitude = location.latitude, location.longitude

    kwargs = {} if radius_km is None else {'radius_km': radius_km}
    result = await services.discovery_service.discover(latitude, longitude, **kwargs)
    _raise_for_failure(result)

    return DiscoveryResponse(
        pizzerias=result['pizzerias'],
        from_cache=result['from_cache'],
        from_api=result['from_api']
    )


@router.get("/api/v1/pizzerias/{pizzeria_id}", response_model=PizzeriaDetailResponse)
@limiter.limit("60/minute")
async def get_pizzeria(
    request: Request,
    pizzeria_id: str,
    services: ServiceContainer = Depends(get_services),
    api_key: str = Depends(verify_api_key)
):
    """Pizzeria details with approved dough styles and rating stats"""
    result = await services.pizzeria_service.get_pizzeria_details(pizzeria_id)
    _raise_for_failure(result)

    return PizzeriaDetailResponse(
        pizzeria=result['pizzeria'],
        dough_styles=result['dough_styles'],
        rating_stats=result['rating_stats']
    )


@router.get("/api/v1/pizzerias/{pizzeria_id}/reviews", response_model=ReviewListResponse)
@limiter.limit("60/minute")
async def list_reviews(
    request: Request,
    pizzeria_id: str,
    limit: int = Query(default=5, ge=1, le=50),
    services: ServiceContainer = Depends(get_services),
    api_key: str = Depends(verify_api_key)
):
    """Most recent reviews for a pizzeria, newest first"""
    result = await services.rating_service.get_recent_reviews(pizzeria_id, limit)
    _raise_for_failure(result)

    return ReviewListResponse(
        pizzeria_id=pizzeria_id,
        reviews=[ReviewItem(**review) for review in result['reviews']]
    )


# ---------------------------------------------------------------------------
# Ratings
# ---------------------------------------------------------------------------

@router.post(
    "/api/v1/pizzerias/{pizzeria_id}/ratings",
    response_model=RatingResponse,
    status_code=status.HTTP_201_CREATED
)
@limiter.limit("20/minute")
async def submit_rating(
    request: Request,
    pizzeria_id: str,
    payload: RatingRequest,
    services: ServiceContainer = Depends(get_services),
    api_key: str = Depends(verify_api_key)
):
    """Create or replace the user's rating for a pizzeria (Rate limit: 20/minute)"""
    result = await services.rating_service.submit_rating({
        'pizzeria_id': pizzeria_id,
        **payload.model_dump()
    })
    _raise_for_failure(result)

    return RatingResponse(
        rating=result['rating'],
        new_achievements=result['new_achievements']
    )


@router.get("/api/v1/pizzerias/{pizzeria_id}/ratings/{user_id}", response_model=UserRatingResponse)
@limiter.limit("60/minute")
async def get_user_rating(
    request: Request,
    pizzeria_id: str,
    user_id: str,
    services: ServiceContainer = Depends(get_services),
    api_key: str = Depends(verify_api_key)
):
    """The user's existing rating, used to pre-fill the rating form"""
    result = await services.rating_service.get_user_rating(pizzeria_id, user_id)
    _raise_for_failure(result)
    return UserRatingResponse(pizzeria_id=pizzeria_id, user_id=user_id, rating=result['rating'])


@router.delete("/api/v1/ratings/{rating_id}", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit("20/minute")
async def delete_rating(
    request: Request,
    rating_id: str,
    user_id: str = Query(..., description="Author of the rating"),
    services: ServiceContainer = Depends(get_services),
    api_key: str = Depends(verify_api_key)
):
    """Delete a rating; only its author may do so"""
    result = await services.rating_service.delete_rating(rating_id, user_id)
    _raise_for_failure(result)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ---------------------------------------------------------------------------
# Dough styles
# ---------------------------------------------------------------------------

@router.post("/api/v1/pizzerias/{pizzeria_id}/dough-styles", response_model=DoughStyleResponse)
@limiter.limit("20/minute")
async def suggest_dough_style(
    request: Request,
    pizzeria_id: str,
    payload: DoughStyleRequest,
    response: Response,
    services: ServiceContainer = Depends(get_services),
    api_key: str = Depends(verify_api_key)
):
    """Suggest a dough style; it is pending until moderated"""
    result = await services.pizzeria_service.suggest_dough_style(
        pizzeria_id, payload.dough_style, payload.user_id
    )
    _raise_for_failure(result)

    if result['created']:
        response.status_code = status.HTTP_201_CREATED
    return DoughStyleResponse(tag=result['tag'], created=result['created'])


@router.post("/api/v1/dough-styles/{tag_id}/vote", response_model=DoughStyleResponse)
@limiter.limit("30/minute")
async def vote_dough_style(
    request: Request,
    tag_id: str,
    payload: VoteRequest,
    services: ServiceContainer = Depends(get_services),
    api_key: str = Depends(verify_api_key)
):
    result = await services.pizzeria_service.vote_dough_style(tag_id, payload.up)
    _raise_for_failure(result)
    return DoughStyleResponse(tag=result['tag'], created=False)


# ---------------------------------------------------------------------------
# Saved pizzerias
# ---------------------------------------------------------------------------

@router.get("/api/v1/users/{user_id}/saved", response_model=SavedListResponse)
@limiter.limit("60/minute")
async def list_saved(
    request: Request,
    user_id: str,
    services: ServiceContainer = Depends(get_services),
    api_key: str = Depends(verify_api_key)
):
    result = await services.saved_service.list_saved(user_id)
    _raise_for_failure(result)
    return SavedListResponse(user_id=user_id, pizzerias=result['pizzerias'])


@router.get("/api/v1/users/{user_id}/saved/{pizzeria_id}", response_model=SavedStatusResponse)
@limiter.limit("60/minute")
async def get_saved_status(
    request: Request,
    user_id: str,
    pizzeria_id: str,
    services: ServiceContainer = Depends(get_services),
    api_key: str = Depends(verify_api_key)
):
    result = await services.saved_service.is_saved(user_id, pizzeria_id)
    _raise_for_failure(result)
    return SavedStatusResponse(user_id=user_id, pizzeria_id=pizzeria_id, is_saved=result['is_saved'])


@router.post("/api/v1/users/{user_id}/saved/{pizzeria_id}", response_model=SavedStatusResponse)
@limiter.limit("30/minute")
async def save_pizzeria(
    request: Request,
    user_id: str,
    pizzeria_id: str,
    services: ServiceContainer = Depends(get_services),
    api_key: str = Depends(verify_api_key)
):
    """Save a pizzeria; saving twice is not an error"""
    result = await services.saved_service.save(user_id, pizzeria_id)
    _raise_for_failure(result)
    return SavedStatusResponse(user_id=user_id, pizzeria_id=pizzeria_id, is_saved=True)


@router.delete("/api/v1/users/{user_id}/saved/{pizzeria_id}", response_model=SavedStatusResponse)
@limiter.limit("30/minute")
async def unsave_pizzeria(
    request: Request,
    user_id: str,
    pizzeria_id: str,
    services: ServiceContainer = Depends(get_services),
    api_key: str = Depends(verify_api_key)
):
    result = await services.saved_service.unsave(user_id, pizzeria_id)
    _raise_for_failure(result)
    return SavedStatusResponse(user_id=user_id, pizzeria_id=pizzeria_id, is_saved=False)


# ---------------------------------------------------------------------------
# Users and achievements
# ---------------------------------------------------------------------------

@router.put("/api/v1/users/{user_id}/location", response_model=LocationResponse)
@limiter.limit("30/minute")
async def update_location(
    request: Request,
    user_id: str,
    payload: LocationRequest,
    services: ServiceContainer = Depends(get_services),
    api_key: str = Depends(verify_api_key)
):
    """Store the user's current location"""
    result = await services.user_service.update_location(user_id, payload.latitude, payload.longitude)
    _raise_for_failure(result)

    location = result['location']
    return LocationResponse(user_id=user_id, latitude=location.latitude, longitude=location.longitude)


@router.get("/api/v1/users/{user_id}/achievements", response_model=AchievementListResponse)
@limiter.limit("20/minute")
async def get_achievements(
    request: Request,
    user_id: str,
    services: ServiceContainer = Depends(get_services),
    api_key: str = Depends(verify_api_key)
):
    """All achievements with the user's progress (Rate limit: 20/minute)"""
    result = await services.gamification_service.get_achievements(user_id)
    _raise_for_failure(result)

    return AchievementListResponse(
        user_id=user_id,
        achievements=result['achievements'],
        total_earned=result['total_earned']
    )


@router.post("/api/v1/users/{user_id}/achievements/check", response_model=AchievementCheckResponse)
@limiter.limit("10/minute")
async def check_achievements(
    request: Request,
    user_id: str,
    services: ServiceContainer = Depends(get_services),
    api_key: str = Depends(verify_api_key)
):
    """Re-evaluate achievements and return the newly earned ones"""
    result = await services.gamification_service.process_review_activity(user_id)
    _raise_for_failure(result)
    return AchievementCheckResponse(user_id=user_id, new_achievements=result['new_achievements'])


@router.get("/api/v1/users/{user_id}/profile", response_model=ProfileResponse)
@limiter.limit("30/minute")
async def get_profile(
    request: Request,
    user_id: str,
    services: ServiceContainer = Depends(get_services),
    api_key: str = Depends(verify_api_key)
):
    """Recipe, rating, saved and achievement counts for the profile screen"""
    result = await services.user_service.get_profile_stats(user_id)
    _raise_for_failure(result)
    return ProfileResponse(user_id=user_id, stats=result['stats'])


# ---------------------------------------------------------------------------
# Recipes
# ---------------------------------------------------------------------------

@router.post("/api/v1/recipes", response_model=RecipeResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("10/minute")
async def create_recipe(
    request: Request,
    payload: RecipeRequest,
    services: ServiceContainer = Depends(get_services),
    api_key: str = Depends(verify_api_key)
):
    """Publish a dough recipe with its ingredients and steps (Rate limit: 10/minute)"""
    result = await services.recipe_service.create_recipe(payload.model_dump())
    _raise_for_failure(result)
    return RecipeResponse(recipe=result['recipe'])


@router.get("/api/v1/recipes", response_model=RecipeListResponse)
@limiter.limit("60/minute")
async def list_public_recipes(
    request: Request,
    category: Optional[str] = Query(default=None, description="Dough style filter"),
    featured: bool = Query(default=False),
    limit: int = Query(default=20, ge=1, le=100),
    services: ServiceContainer = Depends(get_services),
    api_key: str = Depends(verify_api_key)
):
    """Public recipes, newest first"""
    result = await services.recipe_service.list_public_recipes(category, featured, limit)
    _raise_for_failure(result)
    return RecipeListResponse(recipes=result['recipes'])


@router.get("/api/v1/recipes/{recipe_id}", response_model=RecipeResponse)
@limiter.limit("60/minute")
async def get_recipe(
    request: Request,
    recipe_id: str,
    viewer_id: Optional[str] = Query(default=None, description="Lets authors read their private recipes"),
    services: ServiceContainer = Depends(get_services),
    api_key: str = Depends(verify_api_key)
):
    result = await services.recipe_service.get_recipe(recipe_id, viewer_id)
    _raise_for_failure(result)
    return RecipeResponse(recipe=result['recipe'])


@router.delete("/api/v1/recipes/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit("20/minute")
async def delete_recipe(
    request: Request,
    recipe_id: str,
    user_id: str = Query(..., description="Author of the recipe"),
    services: ServiceContainer = Depends(get_services),
    api_key: str = Depends(verify_api_key)
):
    """Delete a recipe; only its author may do so"""
    result = await services.recipe_service.delete_recipe(recipe_id, user_id)
    _raise_for_failure(result)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/api/v1/recipes/{recipe_id}/ratings", response_model=RecipeRatingResponse)
@limiter.limit("20/minute")
async def rate_recipe(
    request: Request,
    recipe_id: str,
    payload: RecipeRatingRequest,
    services: ServiceContainer = Depends(get_services),
    api_key: str = Depends(verify_api_key)
):
    """Create or replace the user's rating of a recipe"""
    result = await services.recipe_service.rate_recipe({'recipe_id': recipe_id, **payload.model_dump()})
    _raise_for_failure(result)
    return RecipeRatingResponse(rating=result['rating'])


@router.get("/api/v1/users/{user_id}/recipes", response_model=RecipeListResponse)
@limiter.limit("60/minute")
async def list_user_recipes(
    request: Request,
    user_id: str,
    services: ServiceContainer = Depends(get_services),
    api_key: str = Depends(verify_api_key)
):
    result = await services.recipe_service.list_user_recipes(user_id)
    _raise_for_failure(result)
    return RecipeListResponse(recipes=result['recipes'])


@router.get("/api/v1/users/{user_id}/saved-recipes", response_model=RecipeListResponse)
@limiter.limit("60/minute")
async def list_saved_recipes(
    request: Request,
    user_id: str,
    services: ServiceContainer = Depends(get_services),
    api_key: str = Depends(verify_api_key)
):
    result = await services.recipe_service.list_saved_recipes(user_id)
    _raise_for_failure(result)
    return RecipeListResponse(recipes=result['recipes'])


@router.post("/api/v1/users/{user_id}/saved-recipes/{recipe_id}", response_model=SavedRecipeStatusResponse)
@limiter.limit("30/minute")
async def save_recipe(
    request: Request,
    user_id: str,
    recipe_id: str,
    services: ServiceContainer = Depends(get_services),
    api_key: str = Depends(verify_api_key)
):
    result = await services.recipe_service.save_recipe(user_id, recipe_id)
    _raise_for_failure(result)
    return SavedRecipeStatusResponse(user_id=user_id, recipe_id=recipe_id, is_saved=True)


@router.delete("/api/v1/users/{user_id}/saved-recipes/{recipe_id}", response_model=SavedRecipeStatusResponse)
@limiter.limit("30/minute")
async def unsave_recipe(
    request: Request,
    user_id: str,
    recipe_id: str,
    services: ServiceContainer = Depends(get_services),
    api_key: str = Depends(verify_api_key)
):
    result = await services.recipe_service.unsave_recipe(user_id, recipe_id)
    _raise_for_failure(result)
    return SavedRecipeStatusResponse(user_id=user_id, recipe_id=recipe_id, is_saved=False)


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------

@router.get("/api/v1/health", response_model=HealthCheckResponse)
@limiter.limit("60/minute")
async def health_check(request: Request, services: ServiceContainer = Depends(get_services)):
    """Health check endpoint (Rate limit: 60/minute for monitoring systems)"""
    db_status = "connected" if await services.db.ping() else "disconnected"
    if db_status != "connected":
        logger.warning("Health check: database unreachable")

    return HealthCheckResponse(
        status="healthy" if db_status == "connected" else "degraded",
        database=db_status,
        timestamp=datetime.now()
    )


@router.get("/metrics")
async def metrics():
    """
    Prometheus metrics endpoint.

    Exposes all application metrics in Prometheus text format.
    """
    from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )
