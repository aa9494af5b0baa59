"""
Meal Plan Service

Weekly meal plans for a family group: a 7 day by 4 meal grid where each
filled cell points at a recipe key. A group has at most one active plan per
week.
"""

import logging
from datetime import date, timedelta

from sqlalchemy.exc import IntegrityError

from constants import MAX_LENGTHS, MEAL_PLAN_DAYS, MEAL_TYPES
from models import db, MealPlan, MealPlanSlot, Recipe
from utils.sanitizer import sanitize_recipe_title, sanitize_text
from .errors import AccessDenied, Conflict, NotFound, ValidationFailed
from .store import get_meal_plan as _load_meal_plan, is_group_member
from .unified import RecipeRef

logger = logging.getLogger(__name__)


def _parse_week_start(value):
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise ValidationFailed('week_start_date must be an ISO date (YYYY-MM-DD)',
                               {'week_start_date': value})


def _validate_cell(day, meal_type):
    if day not in MEAL_PLAN_DAYS:
        raise ValidationFailed(f'Invalid day: {day}', {'day': day})
    if meal_type not in MEAL_TYPES:
        raise ValidationFailed(f'Invalid meal type: {meal_type}', {'meal_type': meal_type})


def _servings(value):
    if value is None or value == '':
        return None
    try:
        servings = int(value)
    except (TypeError, ValueError):
        raise ValidationFailed('servings must be a whole number', {'servings': value})
    if servings < 1 or servings > 100:
        raise ValidationFailed('servings must be between 1 and 100', {'servings': value})
    return servings


def _recipe_key(value):
    """Validate a slot's recipe key. Local keys must point at a stored recipe."""
    ref = RecipeRef.parse(value)
    if not ref.is_external and db.session.get(Recipe, int(ref.id)) is None:
        raise NotFound('Recipe not found', {'recipe_id': ref.key})
    return ref.key


def _fill_slot(plan, day, meal_type, data):
    """Create, update or clear (data is None / has no recipe) one grid cell."""
    _validate_cell(day, meal_type)
    slot = next((s for s in plan.slots if s.day == day and s.meal_type == meal_type), None)

    if not data or not (data.get('recipe_id') or data.get('recipe_name')):
        if slot is not None:
            plan.slots.remove(slot)
        return None

    if slot is None:
        slot = MealPlanSlot(day=day, meal_type=meal_type)
        plan.slots.append(slot)
    slot.recipe_key = _recipe_key(data['recipe_id']) if data.get('recipe_id') else None
    slot.recipe_name = sanitize_recipe_title(data.get('recipe_name') or '')
    slot.servings = _servings(data.get('servings'))
    slot.notes = sanitize_text(data.get('notes'), 500)
    return slot


def _commit_plan():
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        raise Conflict('An active meal plan already exists for this week') from e


def create_meal_plan(group_id, caller_id, name, week_start_date, notes='', meals=None):
    """
    Create a plan for the week starting at week_start_date.

    meals is an optional grid: {day: {meal_type: {recipe_id, recipe_name,
    servings, notes}}}. Raises Conflict if the group already has an active
    plan for that week.
    """
    if not is_group_member(group_id, caller_id):
        raise AccessDenied('Access denied to family group', {'family_group_id': group_id})

    week_start = _parse_week_start(week_start_date)
    plan = MealPlan(
        family_group_id=group_id,
        name=sanitize_text(name, MAX_LENGTHS['plan_name']).strip() or 'Weekly Meal Plan',
        created_by=caller_id,
        week_start_date=week_start,
        week_end_date=week_start + timedelta(days=6),
        notes=sanitize_text(notes, MAX_LENGTHS['notes']),
        is_active=True,
    )

    try:
        for day, day_meals in (meals or {}).items():
            if not isinstance(day_meals, dict):
                raise ValidationFailed(f'Meals for {day} must be an object', {'day': day})
            for meal_type, data in day_meals.items():
                _fill_slot(plan, day, meal_type, data)
    except (ValidationFailed, NotFound):
        db.session.rollback()
        raise

    db.session.add(plan)
    _commit_plan()
    logger.info("Created meal plan %s for group %s (week of %s)", plan.id, group_id, week_start)
    return plan


def get_meal_plan(plan_id, caller_id):
    plan = _load_meal_plan(plan_id)
    if plan is None:
        raise NotFound('Meal plan not found', {'meal_plan_id': plan_id})
    if not is_group_member(plan.family_group_id, caller_id):
        raise AccessDenied('Access denied to family group', {'family_group_id': plan.family_group_id})
    return plan


def set_slot(plan_id, caller_id, day, meal_type, data=None):
    """Fill or clear one cell of a plan. Returns the slot, or None when cleared."""
    plan = get_meal_plan(plan_id, caller_id)
    try:
        slot = _fill_slot(plan, day, meal_type, data)
    except (ValidationFailed, NotFound):
        db.session.rollback()
        raise
    db.session.commit()
    return slot


def deactivate_meal_plan(plan_id, caller_id):
    """Mark a plan inactive, freeing its week for a new active plan."""
    plan = get_meal_plan(plan_id, caller_id)
    plan.is_active = False
    db.session.commit()
    return plan


def serialize_meal_plan(plan):
    meals = {day: {meal_type: None for meal_type in MEAL_TYPES} for day in MEAL_PLAN_DAYS}
    for slot in plan.slots:
        if slot.day in meals and slot.meal_type in meals[slot.day]:
            meals[slot.day][slot.meal_type] = {
                'recipe_id': slot.recipe_key,
                'recipe_name': slot.recipe_name or '',
                'servings': slot.servings,
                'notes': slot.notes or '',
            }
    return {
        'id': plan.id,
        'family_group_id': plan.family_group_id,
        'name': plan.name,
        'created_by': plan.created_by,
        'week_start_date': plan.week_start_date.isoformat(),
        'week_end_date': plan.week_end_date.isoformat(),
        'notes': plan.notes or '',
        'is_active': plan.is_active,
        'meals': meals,
    }
