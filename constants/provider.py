"""
Provider Constants

Fixed tables used when normalizing Spoonacular responses.
"""

# Provider nutrient name -> internal nutrition key. Anything else is dropped.
NUTRIENT_KEYS = {
    'Calories': 'calories',
    'Fat': 'fat',
    'Saturated Fat': 'saturatedFat',
    'Carbohydrates': 'carbohydrates',
    'Net Carbohydrates': 'netCarbohydrates',
    'Sugar': 'sugar',
    'Cholesterol': 'cholesterol',
    'Sodium': 'sodium',
    'Protein': 'protein',
    'Fiber': 'fiber',
}

# Provider flag -> derived tag
FLAG_TAGS = (
    ('veryHealthy', 'healthy'),
    ('cheap', 'budget-friendly'),
    ('veryPopular', 'popular'),
    ('sustainable', 'sustainable'),
)

# Provider flag -> dietary flag name on the unified recipe
DIETARY_FLAGS = {
    'vegetarian': 'vegetarian',
    'vegan': 'vegan',
    'glutenFree': 'gluten_free',
    'dairyFree': 'dairy_free',
    'veryHealthy': 'very_healthy',
    'cheap': 'cheap',
    'veryPopular': 'very_popular',
    'sustainable': 'sustainable',
    'lowFodmap': 'low_fodmap',
}

QUICK_MINUTES = 20
SLOW_MINUTES = 60

SUMMARY_LENGTH = 200

# Query term used when an external search has no caller-supplied query
DEFAULT_EXTERNAL_QUERY = 'popular'

EXTERNAL_KEY_PREFIX = 'spoon_'

EQUIPMENT_IMAGE_URL = 'https://spoonacular.com/cdn/equipment_100x100/{}'

USER_AGENT = 'RecipeHub/1.0'
