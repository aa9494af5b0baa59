"""
Collection Assembler

Builds a user's personal collection: the recipes they published plus the
recipes they favorited, local or external. External favorites cost one
provider call each, so only a capped number are fetched per request.
"""

import logging

from .errors import ValidationFailed
from .store import can_view, favorites_for_user, owned_published_recipes, recipes_by_ids
from .unified import PageRequest, RecipeRef, from_local, paging_block

logger = logging.getLogger(__name__)

DEFAULT_EXTERNAL_FETCH_CAP = 5


def _partition_favorites(favorites, owned_keys):
    """Split favorites into (local, external), skipping recipes the user owns."""
    local, external = [], []
    for favorite in favorites:
        if favorite.recipe_key in owned_keys:
            continue
        try:
            ref = RecipeRef.parse(favorite.recipe_key)
        except ValidationFailed:
            logger.warning("Skipping favorite with malformed key %r", favorite.recipe_key)
            continue
        if ref.is_external:
            external.append((favorite, ref))
        else:
            local.append((favorite, ref))
    return local, external


def assemble_collection(caller_id, page=None, gateway=None,
                        fetch_cap=DEFAULT_EXTERNAL_FETCH_CAP, max_page_size=50):
    """
    Assemble the caller's collection, newest first.

    Every returned item is marked favorited. External favorites that fail to
    load are logged and left out; they never fail the whole collection.

    Returns:
        dict with items, paging and stats
    """
    if not caller_id:
        raise ValidationFailed('A user is required to view a collection')
    page = (page or PageRequest(limit=20)).validate(max_page_size)

    # (sort timestamp, recipe) pairs
    entries = []

    owned = owned_published_recipes(caller_id)
    for recipe in owned:
        entries.append((recipe.updated_at or recipe.created_at, from_local(recipe, include_content=False)))
    owned_keys = {RecipeRef.local(recipe.id).key for recipe in owned}

    local_favorites, external_favorites = _partition_favorites(favorites_for_user(caller_id), owned_keys)

    loaded = recipes_by_ids(int(ref.id) for _, ref in local_favorites)
    for favorite, ref in local_favorites:
        recipe = loaded.get(int(ref.id))
        # Own drafts and archived recipes stay out even when favorited
        if recipe is None or recipe.user_id == caller_id or not can_view(recipe, caller_id):
            continue
        entries.append((favorite.created_at, from_local(recipe, include_content=False)))

    if external_favorites and gateway is not None:
        for favorite, ref in external_favorites[:fetch_cap]:
            outcome = gateway.try_fetch_by_id(ref.id)
            if not outcome.ok:
                logger.warning("Dropping favorite %s from collection: %s", outcome.key, outcome.error)
                continue
            entries.append((favorite.created_at, outcome.recipe))
        if len(external_favorites) > fetch_cap:
            logger.info("Fetched %d of %d external favorites for %s",
                        fetch_cap, len(external_favorites), caller_id)

    entries.sort(key=lambda entry: entry[0], reverse=True)
    recipes = [recipe for _, recipe in entries]
    for recipe in recipes:
        recipe.is_favorited = True

    total = len(recipes)
    return {
        'items': recipes[page.offset:page.offset + page.limit],
        'paging': paging_block(page, total),
        'stats': {
            'owned_count': len(owned),
            'favorited_count': total - len(owned),
            'total_count': total,
        },
    }
