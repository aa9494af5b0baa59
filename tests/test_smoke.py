"""
Smoke tests for the recipe service: packages import and the app boots.
"""


def test_app_factory_imports():
    """Verify the app factory and db can be imported without errors."""
    from app import create_app, db
    assert callable(create_app)
    assert db is not None


def test_models_import():
    """Verify models can be imported."""
    from models import Recipe, Favorite, MealPlan, GroceryList, ApiBudgetWindow
    assert Recipe is not None
    assert Favorite is not None
    assert MealPlan is not None
    assert GroceryList is not None
    assert ApiBudgetWindow is not None


def test_sanitizer_utils_import():
    """Verify text utilities can be imported."""
    from utils import sanitize_text, strip_markup, truncate_text
    assert callable(sanitize_text)
    assert callable(strip_markup)
    assert callable(truncate_text)


def test_constants_unchanged():
    """Verify lookup tables other modules depend on."""
    from constants import GROCERY_CATEGORIES, MEAL_PLAN_DAYS, MEAL_TYPES, EXTERNAL_KEY_PREFIX

    assert EXTERNAL_KEY_PREFIX == 'spoon_'
    assert len(MEAL_PLAN_DAYS) == 7
    assert MEAL_PLAN_DAYS[0] == 'monday'
    assert list(MEAL_TYPES) == ['breakfast', 'lunch', 'dinner', 'snack']
    assert 'pantry' in GROCERY_CATEGORIES


def test_app_runs(client):
    """Verify the app serves the upstream status endpoint."""
    response = client.get('/api/upstream/status')
    assert response.status_code == 200
