"""
Local Store Queries

Read helpers over the local tables used by search, collection assembly,
meal planning and list generation. Writes stay in the owning services.
"""

from sqlalchemy import and_, false, func, or_

from constants import DIET_FLAG_COLUMNS
from models import db, Favorite, FamilyGroupMember, MealPlan, Recipe, RecipeIngredient

# Local column used for each sort key; None falls back to most recently updated
_LOCAL_SORT_COLUMNS = {
    'relevance': None,
    'rating': None,
    'cook_time': Recipe.ready_minutes,
    'health_score': Recipe.health_score,
    'price': None,
}


def caller_group_ids(user_id):
    """Ids of every family group the user belongs to."""
    if not user_id:
        return []
    rows = db.session.query(FamilyGroupMember.family_group_id).filter_by(user_id=user_id).all()
    return [row[0] for row in rows]


def is_group_member(group_id, user_id):
    if not user_id:
        return False
    return db.session.query(
        FamilyGroupMember.query.filter_by(family_group_id=group_id, user_id=user_id).exists()
    ).scalar()


def visibility_clause(caller_id):
    """Filter for recipes the caller may see in listings.

    Anonymous callers see public recipes only. A caller also sees their own
    recipes and family recipes of groups they belong to.
    """
    clauses = [Recipe.visibility == 'public']
    if caller_id:
        clauses.append(Recipe.user_id == caller_id)
        group_ids = caller_group_ids(caller_id)
        if group_ids:
            clauses.append(and_(Recipe.visibility == 'family',
                                Recipe.family_group_id.in_(group_ids)))
    return or_(*clauses)


def can_view(recipe, caller_id):
    """Whether a single local recipe is visible to the caller."""
    if caller_id and recipe.user_id == caller_id:
        return True
    if recipe.status != 'published':
        return False
    if recipe.visibility == 'public':
        return True
    if recipe.visibility == 'family' and recipe.family_group_id is not None:
        return is_group_member(recipe.family_group_id, caller_id)
    return False


def _apply_filters(query, filters):
    if filters is None:
        return query
    if filters.cuisine:
        query = query.filter(func.lower(Recipe.cuisine) == filters.cuisine.lower())
    if filters.diet:
        column = DIET_FLAG_COLUMNS.get(filters.diet.lower())
        if column is None:
            # No local flag for this diet, so nothing local can satisfy it
            query = query.filter(false())
        else:
            query = query.filter(getattr(Recipe, column).is_(True))
    if filters.max_ready_time:
        query = query.filter(Recipe.ready_minutes <= filters.max_ready_time)
    return query


def _apply_sort(query, filters):
    sort = filters.sort if filters else None
    direction = filters.sort_direction if filters else None
    if sort == 'random':
        return query.order_by(func.random())
    column = _LOCAL_SORT_COLUMNS.get(sort)
    if column is None:
        return query.order_by(Recipe.updated_at.desc(), Recipe.id.desc())
    ordered = column.asc() if direction == 'asc' else column.desc()
    return query.order_by(ordered, Recipe.id.desc())


def search_local(query_text, filters, page, caller_id=None):
    """Published local recipes visible to the caller. Returns (rows, total)."""
    query = Recipe.query.filter(Recipe.status == 'published', visibility_clause(caller_id))
    if query_text:
        pattern = f'%{query_text}%'
        query = query.filter(or_(Recipe.title.ilike(pattern), Recipe.description.ilike(pattern)))
    query = _apply_filters(query, filters)

    total = query.order_by(None).count()
    rows = _apply_sort(query, filters).offset(page.offset).limit(page.limit).all()
    return rows, total


def owned_published_recipes(user_id):
    return Recipe.query.filter_by(user_id=user_id, status='published') \
        .order_by(Recipe.updated_at.desc()).all()


def recipes_by_ids(recipe_ids):
    """Load local recipes by id, returned as a dict keyed by id."""
    ids = {int(rid) for rid in recipe_ids}
    if not ids:
        return {}
    return {recipe.id: recipe for recipe in Recipe.query.filter(Recipe.id.in_(ids)).all()}


def ingredients_for_recipes(recipe_ids):
    """Batch-load ingredient rows for many recipes: {recipe_id: [RecipeIngredient]}."""
    ids = list({int(rid) for rid in recipe_ids})
    grouped = {rid: [] for rid in ids}
    if not ids:
        return grouped
    rows = RecipeIngredient.query.filter(RecipeIngredient.recipe_id.in_(ids)) \
        .order_by(RecipeIngredient.recipe_id, RecipeIngredient.position, RecipeIngredient.id).all()
    for row in rows:
        grouped[row.recipe_id].append(row)
    return grouped


def favorites_for_user(user_id):
    """The user's favorites, newest first."""
    return Favorite.query.filter_by(user_id=user_id) \
        .order_by(Favorite.created_at.desc(), Favorite.id.desc()).all()


def favorite_keys(user_id, recipe_keys=None):
    """Set of recipe keys the user has favorited, optionally limited to recipe_keys."""
    if not user_id:
        return set()
    query = db.session.query(Favorite.recipe_key).filter(Favorite.user_id == user_id)
    if recipe_keys is not None:
        recipe_keys = list(recipe_keys)
        if not recipe_keys:
            return set()
        query = query.filter(Favorite.recipe_key.in_(recipe_keys))
    return {row[0] for row in query.all()}


def get_meal_plan(plan_id):
    return db.session.get(MealPlan, plan_id)
