"""
Favorites Service

Bookmark a recipe by key. The key may point at a provider recipe that is
not stored locally; local keys must reference a recipe the user can see.
"""

import logging

from sqlalchemy.exc import IntegrityError

from models import db, Favorite, Recipe
from .errors import Conflict, NotFound, ValidationFailed
from .store import can_view, favorite_keys as _favorite_keys
from .unified import RecipeRef

logger = logging.getLogger(__name__)


def _checked_ref(recipe_key, user_id):
    ref = RecipeRef.parse(recipe_key)
    if ref.is_external:
        return ref
    recipe = db.session.get(Recipe, int(ref.id))
    # Recipes the user cannot see look the same as missing ones
    if recipe is None or not can_view(recipe, user_id):
        raise NotFound('Recipe not found', {'recipe_id': ref.key})
    return ref


def add_favorite(user_id, recipe_key):
    """Favorite a recipe. Adding an existing favorite is a no-op."""
    if not user_id:
        raise ValidationFailed('A user is required to favorite recipes')
    ref = _checked_ref(recipe_key, user_id)

    existing = Favorite.query.filter_by(user_id=user_id, recipe_key=ref.key).first()
    if existing:
        return existing

    favorite = Favorite(user_id=user_id, recipe_key=ref.key)
    db.session.add(favorite)
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        raise Conflict('Recipe is already a favorite', {'recipe_id': ref.key}) from e
    logger.debug("User %s favorited %s", user_id, ref.key)
    return favorite


def remove_favorite(user_id, recipe_key):
    """Remove a favorite. Returns True if one was removed."""
    ref = RecipeRef.parse(recipe_key)
    deleted = Favorite.query.filter_by(user_id=user_id, recipe_key=ref.key).delete()
    db.session.commit()
    return bool(deleted)


def toggle_favorite(user_id, recipe_key):
    """Flip the favorite state and return the new state (True = favorited)."""
    ref = RecipeRef.parse(recipe_key)
    if Favorite.query.filter_by(user_id=user_id, recipe_key=ref.key).first():
        remove_favorite(user_id, ref.key)
        return False
    add_favorite(user_id, ref.key)
    return True


def favorite_keys(user_id, recipe_keys=None):
    return _favorite_keys(user_id, recipe_keys)


def mark_favorites(user_id, recipes):
    """Set is_favorited on each unified recipe for the given user."""
    if not user_id:
        return recipes
    keys = favorite_keys(user_id, [recipe.key for recipe in recipes])
    for recipe in recipes:
        recipe.is_favorited = recipe.key in keys
    return recipes
