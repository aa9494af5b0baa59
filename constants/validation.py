"""
Validation Constants

Contains whitelist values for validating user input to prevent
injection attacks and ensure data integrity.
"""

# Recipe visibility and lifecycle
VALID_VISIBILITIES = {'public', 'family', 'private'}
VALID_RECIPE_STATUSES = {'draft', 'published', 'archived'}

# Meal plan grid: 7 days x 4 meal types
MEAL_PLAN_DAYS = (
    'monday', 'tuesday', 'wednesday', 'thursday', 'friday', 'saturday', 'sunday',
)
MEAL_TYPES = ('breakfast', 'lunch', 'dinner', 'snack')

# Grocery list lifecycle (status -> statuses it may move to)
GROCERY_LIST_TRANSITIONS = {
    'active': {'completed'},
    'completed': {'archived'},
    'archived': set(),
}

# Search source selector
VALID_SEARCH_SOURCES = {'all', 'local', 'external'}

# Sort keys accepted by search (ours -> provider sort parameter)
SEARCH_SORT_KEYS = {
    'relevance': 'meta-score',
    'rating': 'popularity',
    'cook_time': 'time',
    'health_score': 'healthiness',
    'price': 'price',
    'random': 'random',
}
VALID_SORT_DIRECTIONS = {'asc', 'desc'}

# Diet filters that map to local dietary flag columns
DIET_FLAG_COLUMNS = {
    'vegetarian': 'is_vegetarian',
    'vegan': 'is_vegan',
    'gluten free': 'is_gluten_free',
    'dairy free': 'is_dairy_free',
}

# Maximum field lengths for security
MAX_LENGTHS = {
    'recipe_title': 200,
    'description': 5000,
    'ingredient_name': 200,
    'ingredient_text': 500,
    'item_name': 200,
    'list_name': 100,
    'plan_name': 100,
    'notes': 1000,
    'instruction': 5000,
}
