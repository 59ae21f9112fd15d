"""
Database queries

Every function takes the Database handle as its first argument so services
can be handed a real pool or a test double.

Module organization:
- pizzerias.py: Cached pizzerias, dough style tags
- ratings.py: Dual ratings, rating stats, review history
- saved.py: Saved pizzerias
- recipes.py: Dough recipes, their ingredients, steps, ratings and saves
- achievements.py: Earned achievements
- user.py: User location, profile counts
"""

from src.db.queries.pizzerias import (
    get_pizzerias_in_bounds,
    insert_pizzerias,
    get_pizzeria,
    get_pizzeria_summaries,
    get_dough_styles,
    add_dough_style,
    vote_dough_style,
)

from src.db.queries.ratings import (
    upsert_rating,
    get_user_rating,
    get_rating_owner,
    delete_rating,
    get_rating_stats,
    get_recent_reviews,
    get_user_rating_history,
)

from src.db.queries.saved import (
    save_pizzeria,
    unsave_pizzeria,
    is_pizzeria_saved,
    get_saved_pizzerias,
)

from src.db.queries.achievements import (
    get_user_achievements,
    insert_user_achievement,
)

from src.db.queries.user import (
    get_user_location,
    update_user_location,
    get_profile_counts,
)

from src.db.queries.recipes import (
    create_recipe,
    get_recipe,
    get_recipe_ingredients,
    get_recipe_steps,
    get_user_recipes,
    get_public_recipes,
    get_recipe_owner,
    delete_recipe,
    save_recipe,
    unsave_recipe,
    get_saved_recipes,
    upsert_recipe_rating,
)

__all__ = [
    # Pizzerias
    "get_pizzerias_in_bounds",
    "insert_pizzerias",
    "get_pizzeria",
    "get_pizzeria_summaries",
    "get_dough_styles",
    "add_dough_style",
    "vote_dough_style",
    # Ratings
    "upsert_rating",
    "get_user_rating",
    "get_rating_owner",
    "delete_rating",
    "get_rating_stats",
    "get_recent_reviews",
    "get_user_rating_history",
    # Saved
    "save_pizzeria",
    "unsave_pizzeria",
    "is_pizzeria_saved",
    "get_saved_pizzerias",
    # Achievements
    "get_user_achievements",
    "insert_user_achievement",
    # Users
    "get_user_location",
    "update_user_location",
    "get_profile_counts",
    # Recipes
    "create_recipe",
    "get_recipe",
    "get_recipe_ingredients",
    "get_recipe_steps",
    "get_user_recipes",
    "get_public_recipes",
    "get_recipe_owner",
    "delete_recipe",
    "save_recipe",
    "unsave_recipe",
    "get_saved_recipes",
    "upsert_recipe_rating",
]
