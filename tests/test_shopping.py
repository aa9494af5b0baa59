from datetime import date

import pytest

from models import db, FamilyGroup, GroceryList, MealPlan, MealPlanSlot
from services.errors import AccessDenied, NotFound, ValidationFailed
from services.shopping import (
    add_additional_item,
    archive_grocery_list,
    categorize_ingredient,
    complete_grocery_list,
    consolidate_ingredients,
    format_quantity,
    generate_grocery_list,
    list_grocery_lists,
    normalize_ingredient_key,
    remove_additional_item,
    serialize_grocery_list,
    toggle_item_checked,
)


@pytest.mark.parametrize('name, category', [
    ('whole milk', 'dairy'),
    ('chicken breast', 'meat'),
    ('frozen peas', 'frozen'),
    ('paper towels', 'pantry'),
    ('Red Onion', 'produce'),
    ('sourdough bread', 'bakery'),
    ('orange juice', 'beverages'),
    # First matching rule wins
    ('frozen chicken thighs', 'meat'),
    ('buttermilk', 'dairy'),
])
def test_categorize_ingredient(name, category):
    assert categorize_ingredient(name) == category


def test_normalize_ingredient_key():
    assert normalize_ingredient_key('  Onion ') == 'onion'
    assert normalize_ingredient_key('Olive   Oil') == 'olive oil'


def test_format_quantity():
    assert format_quantity('2', 'cup') == '2 cup'
    assert format_quantity('3', '') == '3'
    assert format_quantity('', '') == ''


def test_consolidation_merges_case_and_whitespace_variants():
    items = consolidate_ingredients([
        ('1', {'name': 'Onion', 'amount': '1', 'unit': ''}),
        ('2', {'name': 'onion ', 'amount': '200', 'unit': 'g'}),
    ])
    assert len(items) == 1
    onion = items[0]
    assert onion['name'] == 'Onion'
    # First-seen amount and unit win; nothing is summed
    assert (onion['amount'], onion['unit']) == ('1', '')
    assert onion['recipe_sources'] == ['1', '2']
    assert onion['category'] == 'produce'


def test_duplicate_explicit_ingredients_keep_all_sources(app, family):
    grocery_list = generate_grocery_list(family.id, 'alice', 'Merged', ingredients=[
        {'name': 'Onion', 'recipe_sources': ['1']},
        {'name': 'onion', 'recipe_sources': ['2', '1']},
    ])
    [onion] = grocery_list.recipe_items
    assert onion.name == 'Onion'
    assert onion.recipe_sources == ['1', '2']


def test_consolidation_keeps_known_category():
    items = consolidate_ingredients([('1', {'name': 'tofu', 'category': 'produce'})])
    assert items[0]['category'] == 'produce'


@pytest.fixture
def plan_with_recipes(family, make_recipe):
    r1 = make_recipe('Bread', ingredients=[('flour', '2', 'cup'), ('onion', '1', '')])
    r2 = make_recipe('Omelette', ingredients=[('onion', '1', ''), ('eggs', '3', '')])
    plan = MealPlan(family_group_id=family.id, name='Week', created_by='alice',
                    week_start_date=date(2026, 3, 2),
                    week_end_date=date(2026, 3, 8))
    plan.slots.append(MealPlanSlot(day='monday', meal_type='dinner', recipe_key=str(r1.id)))
    plan.slots.append(MealPlanSlot(day='tuesday', meal_type='dinner', recipe_key=str(r2.id)))
    plan.slots.append(MealPlanSlot(day='friday', meal_type='lunch', recipe_key='spoon_77'))
    plan.slots.append(MealPlanSlot(day='sunday', meal_type='snack', recipe_name='Leftovers'))
    db.session.add(plan)
    db.session.commit()
    return plan, r1, r2


def test_generate_from_meal_plan(app, family, plan_with_recipes):
    plan, r1, r2 = plan_with_recipes

    grocery_list = generate_grocery_list(family.id, 'alice', 'Groceries', meal_plan_id=plan.id)

    assert grocery_list.status == 'active'
    assert grocery_list.meal_plan_id == plan.id
    items = {item.name: item for item in grocery_list.recipe_items}
    assert set(items) == {'flour', 'onion', 'eggs'}
    assert items['flour'].recipe_sources == [str(r1.id)]
    assert items['onion'].recipe_sources == [str(r1.id), str(r2.id)]
    assert items['eggs'].recipe_sources == [str(r2.id)]
    assert not any(item.checked for item in grocery_list.items)
    assert grocery_list.additional_items == []
    assert items['flour'].amount == '2' and items['flour'].unit == 'cup'
    assert items['onion'].category == 'produce'


def test_explicit_ingredients_skip_the_plan(app, family, plan_with_recipes):
    plan, _, _ = plan_with_recipes
    grocery_list = generate_grocery_list(
        family.id, 'bob', 'Quick run', meal_plan_id=plan.id,
        ingredients=[{'name': 'Milk', 'amount': '1', 'unit': 'gal'}, {'name': 'milk'}],
        additional_items=[{'name': 'Paper towels'}],
    )
    assert [i.name for i in grocery_list.recipe_items] == ['Milk']
    assert grocery_list.recipe_items[0].category == 'dairy'
    assert [(i.name, i.category) for i in grocery_list.additional_items] == [('Paper towels', 'other')]


def test_generate_failures(app, family, plan_with_recipes):
    plan, _, _ = plan_with_recipes
    other_group = FamilyGroup(name='Neighbours')
    db.session.add(other_group)
    db.session.commit()
    other_plan = MealPlan(family_group_id=other_group.id, name='Theirs', created_by='dave',
                          week_start_date=plan.week_start_date, week_end_date=plan.week_end_date)
    db.session.add(other_plan)
    db.session.commit()

    with pytest.raises(AccessDenied):
        generate_grocery_list(family.id, 'carol', 'Nope', meal_plan_id=plan.id)
    with pytest.raises(NotFound):
        generate_grocery_list(family.id, 'alice', 'Nope', meal_plan_id=9999)
    with pytest.raises(ValidationFailed):
        generate_grocery_list(family.id, 'alice', 'Nope', meal_plan_id=other_plan.id)
    with pytest.raises(ValidationFailed):
        generate_grocery_list(family.id, 'alice', '   ', meal_plan_id=plan.id)
    assert GroceryList.query.count() == 0


def test_toggle_item_and_stats(app, family, plan_with_recipes):
    plan, _, _ = plan_with_recipes
    grocery_list = generate_grocery_list(family.id, 'alice', 'Groceries', meal_plan_id=plan.id)
    item = grocery_list.items[0]

    assert toggle_item_checked(grocery_list.id, item.id, 'bob').checked is True
    stats = serialize_grocery_list(grocery_list)['stats']
    assert stats == {'total_items': 3, 'checked_items': 1, 'completion_percentage': 33}

    assert toggle_item_checked(grocery_list.id, item.id, 'bob').checked is False
    assert toggle_item_checked(grocery_list.id, item.id, 'bob', checked=True).checked is True
    with pytest.raises(NotFound):
        toggle_item_checked(grocery_list.id, 424242, 'bob')
    with pytest.raises(AccessDenied):
        toggle_item_checked(grocery_list.id, item.id, 'carol')


def test_additional_items(app, family):
    grocery_list = generate_grocery_list(family.id, 'alice', 'Extras')
    extra = add_additional_item(grocery_list.id, 'alice', {'name': '  Dish   soap ', 'category': 'household'})
    assert extra.name == 'Dish soap'
    assert extra.source == 'manual'
    assert serialize_grocery_list(grocery_list)['additional_items'][0]['category'] == 'household'

    remove_additional_item(grocery_list.id, extra.id, 'alice')
    assert grocery_list.items == []
    with pytest.raises(ValidationFailed):
        add_additional_item(grocery_list.id, 'alice', {'name': ''})


def test_status_lifecycle(app, family):
    grocery_list = generate_grocery_list(family.id, 'alice', 'Weekly', additional_items=['Apples'])
    item_id = grocery_list.items[0].id

    completed = complete_grocery_list(grocery_list.id, 'alice')
    assert completed.status == 'completed'
    assert completed.completed_at is not None

    # Items are frozen once the list leaves 'active'
    with pytest.raises(ValidationFailed):
        toggle_item_checked(grocery_list.id, item_id, 'alice')
    with pytest.raises(ValidationFailed):
        add_additional_item(grocery_list.id, 'alice', {'name': 'Pears'})
    with pytest.raises(ValidationFailed):
        complete_grocery_list(grocery_list.id, 'alice')

    assert archive_grocery_list(grocery_list.id, 'alice').status == 'archived'
    with pytest.raises(ValidationFailed):
        complete_grocery_list(grocery_list.id, 'alice')


def test_active_list_cannot_be_archived_directly(app, family):
    grocery_list = generate_grocery_list(family.id, 'alice', 'Weekly')
    with pytest.raises(ValidationFailed):
        archive_grocery_list(grocery_list.id, 'alice')


def test_list_grocery_lists_filters_by_status(app, family):
    first = generate_grocery_list(family.id, 'alice', 'First')
    generate_grocery_list(family.id, 'alice', 'Second')
    complete_grocery_list(first.id, 'alice')

    assert [gl.name for gl in list_grocery_lists(family.id, 'bob', status='completed')] == ['First']
    assert len(list_grocery_lists(family.id, 'bob')) == 2
    with pytest.raises(AccessDenied):
        list_grocery_lists(family.id, 'carol')
