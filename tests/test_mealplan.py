from datetime import date

import pytest

from models import MealPlanSlot
from services.errors import AccessDenied, Conflict, NotFound, ValidationFailed
from services.mealplan import (
    create_meal_plan,
    deactivate_meal_plan,
    get_meal_plan,
    serialize_meal_plan,
    set_slot,
)


def test_create_plan_with_meals(app, family, make_recipe):
    soup = make_recipe('Soup')
    plan = create_meal_plan(family.id, 'alice', 'Week 1', '2026-03-02', meals={
        'monday': {'dinner': {'recipe_id': str(soup.id), 'servings': 4}},
        'friday': {'lunch': {'recipe_id': 'spoon_99', 'recipe_name': 'Takeout Tacos'}},
    })

    assert plan.week_start_date == date(2026, 3, 2)
    assert plan.week_end_date == date(2026, 3, 8)
    data = serialize_meal_plan(plan)
    assert data['meals']['monday']['dinner']['recipe_id'] == str(soup.id)
    assert data['meals']['friday']['lunch']['recipe_name'] == 'Takeout Tacos'
    assert data['meals']['tuesday']['breakfast'] is None
    assert len(data['meals']) == 7
    assert all(len(day) == 4 for day in data['meals'].values())


def test_duplicate_active_week_conflicts(app, family):
    create_meal_plan(family.id, 'alice', 'Week', '2026-03-02')
    with pytest.raises(Conflict):
        create_meal_plan(family.id, 'bob', 'Week again', '2026-03-02')


def test_inactive_plan_frees_the_week(app, family):
    plan = create_meal_plan(family.id, 'alice', 'Week', '2026-03-02')
    deactivate_meal_plan(plan.id, 'alice')
    replacement = create_meal_plan(family.id, 'alice', 'Week v2', '2026-03-02')
    assert replacement.is_active


def test_set_and_clear_slot(app, family, make_recipe):
    soup = make_recipe('Soup')
    plan = create_meal_plan(family.id, 'alice', 'Week', '2026-03-02')

    set_slot(plan.id, 'bob', 'sunday', 'snack', {'recipe_id': str(soup.id)})
    assert MealPlanSlot.query.count() == 1

    set_slot(plan.id, 'bob', 'sunday', 'snack', {'recipe_id': 'spoon_5'})
    assert MealPlanSlot.query.one().recipe_key == 'spoon_5'

    set_slot(plan.id, 'bob', 'sunday', 'snack', None)
    assert MealPlanSlot.query.count() == 0


def test_grid_is_validated(app, family):
    plan = create_meal_plan(family.id, 'alice', 'Week', '2026-03-02')
    with pytest.raises(ValidationFailed):
        set_slot(plan.id, 'alice', 'funday', 'dinner', {'recipe_id': 'spoon_1'})
    with pytest.raises(ValidationFailed):
        set_slot(plan.id, 'alice', 'monday', 'brunch', {'recipe_id': 'spoon_1'})
    with pytest.raises(NotFound):
        set_slot(plan.id, 'alice', 'monday', 'dinner', {'recipe_id': '12345'})
    with pytest.raises(ValidationFailed):
        create_meal_plan(family.id, 'alice', 'Week', 'next monday')


def test_members_only(app, family):
    with pytest.raises(AccessDenied):
        create_meal_plan(family.id, 'carol', 'Week', '2026-03-02')
    plan = create_meal_plan(family.id, 'alice', 'Week', '2026-03-02')
    with pytest.raises(AccessDenied):
        get_meal_plan(plan.id, 'carol')
    with pytest.raises(NotFound):
        get_meal_plan(plan.id + 100, 'alice')
