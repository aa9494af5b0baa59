"""
Shopping List Service

Functions for generating and managing grocery lists. A list is derived from
the recipes in a weekly meal plan: ingredients are consolidated by name,
categorized, and stored alongside any extras added by hand.
"""

import logging

from constants import (
    CATEGORY_KEYWORDS,
    DEFAULT_ADDITIONAL_CATEGORY,
    DEFAULT_CATEGORY,
    GROCERY_CATEGORIES,
    GROCERY_LIST_TRANSITIONS,
    MAX_LENGTHS,
    MEAL_PLAN_DAYS,
    MEAL_TYPES,
)
from models import db, GroceryItem, GroceryList, utcnow
from utils.sanitizer import sanitize_item_name, sanitize_text
from .errors import AccessDenied, NotFound, ValidationFailed
from .store import get_meal_plan, ingredients_for_recipes, is_group_member
from .unified import RecipeRef

logger = logging.getLogger(__name__)


def categorize_ingredient(name):
    """
    Pick a grocery category from keywords in the ingredient name.

    Rules are checked in order and the first match wins; anything unmatched
    is 'pantry'.
    """
    lower_name = (name or '').lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in lower_name for keyword in keywords):
            return category
    return DEFAULT_CATEGORY


def normalize_ingredient_key(name):
    """Consolidation key: trimmed, lower-cased, inner whitespace collapsed."""
    return ' '.join((name or '').lower().split())


def format_quantity(amount, unit):
    """Display string for an item quantity ('2 cup', '3', '')."""
    amount = (amount or '').strip()
    unit = (unit or '').strip()
    if amount and unit:
        return f"{amount} {unit}"
    return amount or unit


def consolidate_ingredients(entries):
    """
    Merge ingredient entries that share a normalized name.

    Args:
        entries: iterable of (recipe_key, ingredient dict) pairs in the order
            they should be considered

    Returns:
        List of item dicts. The first occurrence of a name supplies the
        casing, amount, unit, notes and category; later occurrences only add
        their recipe key (or their own recipe_sources) to recipe_sources.
        Amounts are never summed, since they are opaque strings in arbitrary
        units.
    """
    consolidated = {}
    for recipe_key, ingredient in entries:
        name = (ingredient.get('name') or '').strip()
        key = normalize_ingredient_key(name)
        if not key:
            continue

        if key in consolidated:
            sources = consolidated[key]['recipe_sources']
            incoming = [recipe_key] if recipe_key else ingredient.get('recipe_sources') or []
            for source in incoming:
                if source not in sources:
                    sources.append(source)
            continue

        category = ingredient.get('category')
        if category not in GROCERY_CATEGORIES:
            category = categorize_ingredient(name)
        consolidated[key] = {
            'name': name,
            'amount': ingredient.get('amount') or '',
            'unit': ingredient.get('unit') or '',
            'category': category,
            'notes': ingredient.get('notes') or '',
            'recipe_sources': [recipe_key] if recipe_key else list(ingredient.get('recipe_sources') or []),
        }
    return list(consolidated.values())


def _plan_recipe_keys(meal_plan):
    """Distinct local recipe keys across the plan's slots, in grid order."""
    cells = [(day, meal_type) for day in MEAL_PLAN_DAYS for meal_type in MEAL_TYPES]
    grid_order = {cell: index for index, cell in enumerate(cells)}
    slots = sorted(meal_plan.slots, key=lambda s: grid_order.get((s.day, s.meal_type), len(grid_order)))

    keys = []
    for slot in slots:
        if not slot.recipe_key:
            continue
        try:
            ref = RecipeRef.parse(slot.recipe_key)
        except ValidationFailed:
            logger.warning("Meal plan %s has a malformed recipe key %r", meal_plan.id, slot.recipe_key)
            continue
        if ref.is_external:
            # Provider ingredients are not stored locally
            logger.debug("Skipping external recipe %s in meal plan %s", ref.key, meal_plan.id)
            continue
        if ref.key not in keys:
            keys.append(ref.key)
    return keys


def _ingredients_from_plan(meal_plan):
    recipe_keys = _plan_recipe_keys(meal_plan)
    by_recipe = ingredients_for_recipes(int(key) for key in recipe_keys)
    entries = []
    for key in recipe_keys:
        for row in by_recipe.get(int(key), []):
            entries.append((key, {
                'name': row.name,
                'amount': row.amount,
                'unit': row.unit,
                'category': row.category,
                'notes': row.notes,
            }))
    return consolidate_ingredients(entries)


def _clean_explicit_ingredients(ingredients):
    cleaned = []
    for raw in ingredients:
        if not isinstance(raw, dict):
            raise ValidationFailed('Ingredients must be objects with a name')
        name = sanitize_item_name(raw.get('name'), MAX_LENGTHS['item_name'])
        if not name:
            raise ValidationFailed('Item name is required', {'item': raw})
        cleaned.append((None, {
            'name': name,
            'amount': sanitize_text(raw.get('amount'), 50),
            'unit': sanitize_text(raw.get('unit'), 30),
            'category': raw.get('category'),
            'notes': sanitize_text(raw.get('notes'), MAX_LENGTHS['notes']),
            'recipe_sources': [str(key) for key in raw.get('recipe_sources') or []],
        }))
    return consolidate_ingredients(cleaned)


def _new_additional_item(raw, position):
    if isinstance(raw, str):
        raw = {'name': raw}
    if not isinstance(raw, dict):
        raise ValidationFailed('Additional items must be objects with a name')
    name = sanitize_item_name(raw.get('name'), MAX_LENGTHS['item_name'])
    if not name:
        raise ValidationFailed('Item name is required', {'item': raw})
    return GroceryItem(
        position=position,
        name=name,
        amount=sanitize_text(raw.get('amount'), 50),
        unit=sanitize_text(raw.get('unit'), 30),
        category=sanitize_text(raw.get('category'), 50) or DEFAULT_ADDITIONAL_CATEGORY,
        notes=sanitize_text(raw.get('notes'), MAX_LENGTHS['notes']),
        checked=bool(raw.get('checked', False)),
        recipe_sources=[],
        source='manual',
    )


def _require_member(group_id, caller_id):
    if not is_group_member(group_id, caller_id):
        raise AccessDenied('Access denied to family group', {'family_group_id': group_id})


def generate_grocery_list(group_id, caller_id, name, meal_plan_id=None,
                          ingredients=None, additional_items=None):
    """
    Create a grocery list for a family group.

    With a meal plan and no explicit ingredients, the items are derived from
    the plan's local recipes. Returns the new GroceryList (status 'active').
    """
    _require_member(group_id, caller_id)

    list_name = sanitize_text(name, MAX_LENGTHS['list_name']).strip()
    if not list_name:
        raise ValidationFailed('Grocery list name is required')

    meal_plan = None
    if meal_plan_id is not None:
        meal_plan = get_meal_plan(meal_plan_id)
        if meal_plan is None:
            raise NotFound('Meal plan not found', {'meal_plan_id': meal_plan_id})
        if meal_plan.family_group_id != group_id:
            raise ValidationFailed('Invalid meal plan for this family group',
                                   {'meal_plan_id': meal_plan_id, 'family_group_id': group_id})

    if ingredients:
        recipe_items = _clean_explicit_ingredients(ingredients)
    elif meal_plan is not None:
        recipe_items = _ingredients_from_plan(meal_plan)
    else:
        recipe_items = []

    grocery_list = GroceryList(
        family_group_id=group_id,
        meal_plan_id=meal_plan.id if meal_plan else None,
        name=list_name,
        created_by=caller_id,
        status='active',
    )
    for item in recipe_items:
        grocery_list.items.append(GroceryItem(
            position=len(grocery_list.items),
            name=item['name'],
            amount=item['amount'],
            unit=item['unit'],
            category=item['category'],
            notes=item['notes'],
            checked=False,
            recipe_sources=item['recipe_sources'],
            source='recipe',
        ))
    for raw in additional_items or []:
        grocery_list.items.append(_new_additional_item(raw, len(grocery_list.items)))

    db.session.add(grocery_list)
    db.session.commit()
    logger.info("Created grocery list %s for group %s with %d recipe items",
                grocery_list.id, group_id, len(recipe_items))
    return grocery_list


def get_grocery_list(list_id, caller_id):
    grocery_list = db.session.get(GroceryList, list_id)
    if grocery_list is None:
        raise NotFound('Grocery list not found', {'grocery_list_id': list_id})
    _require_member(grocery_list.family_group_id, caller_id)
    return grocery_list


def list_grocery_lists(group_id, caller_id, status=None):
    """Lists of a group, newest first, optionally filtered by status."""
    _require_member(group_id, caller_id)
    query = GroceryList.query.filter_by(family_group_id=group_id)
    if status:
        if status not in GROCERY_LIST_TRANSITIONS:
            raise ValidationFailed(f'Invalid status: {status}', {'status': status})
        query = query.filter_by(status=status)
    return query.order_by(GroceryList.created_at.desc(), GroceryList.id.desc()).all()


def _require_active(grocery_list):
    if grocery_list.status != 'active':
        raise ValidationFailed(
            f'Grocery list is {grocery_list.status}; items can only change while active',
            {'status': grocery_list.status},
        )


def toggle_item_checked(list_id, item_id, caller_id, checked=None):
    """Flip an item's checked flag, or set it when checked is given."""
    grocery_list = get_grocery_list(list_id, caller_id)
    _require_active(grocery_list)
    item = next((i for i in grocery_list.items if i.id == item_id), None)
    if item is None:
        raise NotFound('Grocery item not found', {'item_id': item_id})
    item.checked = (not item.checked) if checked is None else bool(checked)
    db.session.commit()
    return item


def add_additional_item(list_id, caller_id, item):
    grocery_list = get_grocery_list(list_id, caller_id)
    _require_active(grocery_list)
    new_item = _new_additional_item(item, len(grocery_list.items))
    grocery_list.items.append(new_item)
    db.session.commit()
    return new_item


def remove_additional_item(list_id, item_id, caller_id):
    """Remove a manual extra. Consolidated recipe items cannot be removed."""
    grocery_list = get_grocery_list(list_id, caller_id)
    _require_active(grocery_list)
    item = next((i for i in grocery_list.additional_items if i.id == item_id), None)
    if item is None:
        raise NotFound('Additional item not found', {'item_id': item_id})
    grocery_list.items.remove(item)
    db.session.commit()


def _transition(list_id, caller_id, target):
    grocery_list = get_grocery_list(list_id, caller_id)
    allowed = GROCERY_LIST_TRANSITIONS.get(grocery_list.status, set())
    if target not in allowed:
        raise ValidationFailed(
            f'Cannot move grocery list from {grocery_list.status} to {target}',
            {'status': grocery_list.status, 'target': target},
        )
    grocery_list.status = target
    if target == 'completed':
        grocery_list.completed_at = utcnow()
    db.session.commit()
    logger.info("Grocery list %s is now %s", list_id, target)
    return grocery_list


def complete_grocery_list(list_id, caller_id):
    return _transition(list_id, caller_id, 'completed')


def archive_grocery_list(list_id, caller_id):
    return _transition(list_id, caller_id, 'archived')


def serialize_item(item):
    return {
        'id': item.id,
        'name': item.name,
        'amount': item.amount or '',
        'unit': item.unit or '',
        'quantity': format_quantity(item.amount, item.unit),
        'category': item.category,
        'checked': bool(item.checked),
        'notes': item.notes or '',
        'recipe_sources': list(item.recipe_sources or []),
        'source': item.source,
    }


def serialize_grocery_list(grocery_list):
    """JSON-ready dict with items split by source and completion stats."""
    items = grocery_list.items
    checked = sum(1 for item in items if item.checked)
    total = len(items)
    return {
        'id': grocery_list.id,
        'family_group_id': grocery_list.family_group_id,
        'meal_plan_id': grocery_list.meal_plan_id,
        'name': grocery_list.name,
        'status': grocery_list.status,
        'created_by': grocery_list.created_by,
        'completed_at': grocery_list.completed_at.isoformat() if grocery_list.completed_at else None,
        'created_at': grocery_list.created_at.isoformat() if grocery_list.created_at else None,
        'updated_at': grocery_list.updated_at.isoformat() if grocery_list.updated_at else None,
        'ingredients': [serialize_item(item) for item in grocery_list.recipe_items],
        'additional_items': [serialize_item(item) for item in grocery_list.additional_items],
        'stats': {
            'total_items': total,
            'checked_items': checked,
            'completion_percentage': round(checked / total * 100) if total else 0,
        },
    }
