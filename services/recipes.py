"""
Recipe Service

Create, update and delete locally authored recipes, and look up any recipe
(local or provider) by key. Provider recipes are read-only here.
"""

import logging

from constants import MAX_LENGTHS, SUMMARY_LENGTH, VALID_RECIPE_STATUSES, VALID_VISIBILITIES
from models import db, Recipe, RecipeIngredient
from utils.sanitizer import (
    sanitize_item_name, sanitize_recipe_title, sanitize_text, sanitize_url, truncate_text,
)
from .errors import AccessDenied, NotFound, UpstreamUnavailable, ValidationFailed
from .favorites import mark_favorites
from .parsing import parse_ingredient_line
from .shopping import categorize_ingredient
from .store import can_view, is_group_member
from .unified import InstructionStep, RecipeRef, from_local

logger = logging.getLogger(__name__)

_INT_FIELDS = {
    'prep_minutes': (0, 10000),
    'cook_minutes': (0, 10000),
    'ready_minutes': (0, 10000),
    'servings': (1, 100),
    'health_score': (0, 100),
}

_FLAG_FIELDS = {
    'vegetarian': 'is_vegetarian',
    'vegan': 'is_vegan',
    'gluten_free': 'is_gluten_free',
    'dairy_free': 'is_dairy_free',
}


def _bounded_int(name, value):
    if value is None or value == '':
        return None
    low, high = _INT_FIELDS[name]
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationFailed(f'{name} must be a whole number', {name: value})
    if number < low or number > high:
        raise ValidationFailed(f'{name} must be between {low} and {high}', {name: value})
    return number


def _build_ingredients(raw_ingredients):
    """Accept free-text lines ('2 cups flour') or dicts with name/amount/unit/notes."""
    ingredients = []
    for raw in raw_ingredients or []:
        if isinstance(raw, str):
            parsed = parse_ingredient_line(raw[:MAX_LENGTHS['ingredient_text']])
            if parsed is None:
                continue
        elif isinstance(raw, dict):
            parsed = {
                'name': raw.get('name'),
                'amount': str(raw.get('amount') or '').strip(),
                'unit': str(raw.get('unit') or '').strip(),
                'notes': raw.get('notes') or '',
                'category': raw.get('category'),
            }
        else:
            raise ValidationFailed('Ingredients must be text lines or objects')

        name = sanitize_item_name(parsed.get('name'), MAX_LENGTHS['ingredient_name'])
        if not name:
            raise ValidationFailed('Every ingredient needs a name', {'ingredient': raw})
        ingredients.append(RecipeIngredient(
            position=len(ingredients),
            name=name,
            amount=sanitize_text(parsed['amount'], 50),
            unit=sanitize_text(parsed['unit'], 30),
            notes=sanitize_text(parsed['notes'], 500),
            category=parsed.get('category') or categorize_ingredient(name),
        ))
    return ingredients


def _build_instructions(raw_steps):
    """Accept plain strings or step dicts; steps are renumbered in order."""
    steps = []
    for raw in raw_steps or []:
        step = InstructionStep.from_dict(raw) if isinstance(raw, dict) else InstructionStep(0, str(raw))
        text = sanitize_text(step.text, MAX_LENGTHS['instruction']).strip()
        if not text:
            continue
        step.number = len(steps) + 1
        step.text = text
        steps.append(step.to_dict())
    return steps


def _apply_fields(recipe, data, caller_id):
    if 'title' in data:
        title = sanitize_recipe_title(data.get('title'), MAX_LENGTHS['recipe_title'])
        if not title:
            raise ValidationFailed('Recipe title is required')
        recipe.title = title
    if 'description' in data:
        recipe.description = sanitize_text(data.get('description'), MAX_LENGTHS['description'])
        recipe.summary = truncate_text(recipe.description, SUMMARY_LENGTH)
    if 'source_url' in data:
        recipe.source_url = sanitize_url(data.get('source_url'))
    if 'image_url' in data:
        recipe.image_url = sanitize_url(data.get('image_url'))
    if 'cuisine' in data:
        recipe.cuisine = sanitize_text(data.get('cuisine'), 50) or None

    for name in _INT_FIELDS:
        if name in data:
            setattr(recipe, name, _bounded_int(name, data[name]))

    for name, column in _FLAG_FIELDS.items():
        if name in data:
            setattr(recipe, column, bool(data[name]))

    if 'tags' in data:
        tags = data.get('tags') or []
        if not isinstance(tags, list):
            raise ValidationFailed('tags must be a list')
        recipe.tags = [sanitize_text(tag, 50).strip().lower() for tag in tags if str(tag).strip()]

    if 'visibility' in data:
        if data['visibility'] not in VALID_VISIBILITIES:
            raise ValidationFailed(f"Invalid visibility: {data['visibility']}",
                                   {'visibility': data['visibility']})
        recipe.visibility = data['visibility']
    if 'status' in data:
        if data['status'] not in VALID_RECIPE_STATUSES:
            raise ValidationFailed(f"Invalid status: {data['status']}", {'status': data['status']})
        recipe.status = data['status']

    if 'family_group_id' in data:
        group_id = data.get('family_group_id')
        if group_id is not None and not is_group_member(group_id, caller_id):
            raise AccessDenied('You are not a member of this family group',
                               {'family_group_id': group_id})
        recipe.family_group_id = group_id

    if recipe.visibility == 'family' and recipe.family_group_id is None:
        raise ValidationFailed('Family recipes need a family_group_id')

    if 'ingredients' in data:
        recipe.ingredients = _build_ingredients(data.get('ingredients'))
    if 'instructions' in data:
        recipe.instructions = _build_instructions(data.get('instructions'))


def create_recipe(caller_id, data):
    """Create a local recipe owned by caller_id. Returns the Recipe row."""
    if not caller_id:
        raise AccessDenied('Sign in to create recipes')
    if not (data or {}).get('title'):
        raise ValidationFailed('Recipe title is required')

    recipe = Recipe(user_id=caller_id, visibility='private', status='draft', tags=[], instructions=[])
    _apply_fields(recipe, data, caller_id)
    db.session.add(recipe)
    db.session.commit()
    logger.info("User %s created recipe %s", caller_id, recipe.id)
    return recipe


def _owned_local(recipe_key, caller_id):
    ref = RecipeRef.parse(recipe_key)
    if ref.is_external:
        raise AccessDenied('External recipes cannot be modified', {'recipe_id': ref.key})
    recipe = db.session.get(Recipe, int(ref.id))
    if recipe is None or not can_view(recipe, caller_id):
        raise NotFound('Recipe not found', {'recipe_id': ref.key})
    if recipe.user_id != caller_id:
        raise AccessDenied('Only the owner can change this recipe', {'recipe_id': ref.key})
    return recipe


def update_recipe(recipe_key, caller_id, data):
    recipe = _owned_local(recipe_key, caller_id)
    try:
        _apply_fields(recipe, data or {}, caller_id)
    except (ValidationFailed, AccessDenied):
        db.session.rollback()
        raise
    db.session.commit()
    return recipe


def delete_recipe(recipe_key, caller_id):
    recipe = _owned_local(recipe_key, caller_id)
    db.session.delete(recipe)
    db.session.commit()
    logger.info("User %s deleted recipe %s", caller_id, recipe_key)


def get_recipe(recipe_key, caller_id=None, gateway=None, include_nutrition=False):
    """
    Look up one recipe in the unified shape.

    Local recipes the caller may not see are reported as not found, so
    private recipes do not leak their existence. External keys go through
    the gateway and raise its upstream errors.
    """
    ref = RecipeRef.parse(recipe_key)
    if ref.is_external:
        if gateway is None:
            raise UpstreamUnavailable('Recipe provider is not configured')
        recipe = gateway.fetch_by_id(ref.id, include_nutrition=include_nutrition)
    else:
        row = db.session.get(Recipe, int(ref.id))
        if row is None or not can_view(row, caller_id):
            raise NotFound('Recipe not found', {'recipe_id': ref.key})
        recipe = from_local(row)

    mark_favorites(caller_id, [recipe])
    return recipe
