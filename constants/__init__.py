"""
Constants Package

Lookup tables shared by the models, services and API layer.
"""

from .categories import (
    CATEGORY_KEYWORDS,
    DEFAULT_ADDITIONAL_CATEGORY,
    DEFAULT_CATEGORY,
    GROCERY_CATEGORIES,
)
from .provider import (
    DEFAULT_EXTERNAL_QUERY,
    DIETARY_FLAGS,
    EQUIPMENT_IMAGE_URL,
    EXTERNAL_KEY_PREFIX,
    FLAG_TAGS,
    NUTRIENT_KEYS,
    QUICK_MINUTES,
    SLOW_MINUTES,
    SUMMARY_LENGTH,
    USER_AGENT,
)
from .units import COMMON_FRACTIONS, UNICODE_FRACTIONS, UNIT_MAPPINGS
from .validation import (
    DIET_FLAG_COLUMNS,
    GROCERY_LIST_TRANSITIONS,
    MAX_LENGTHS,
    MEAL_PLAN_DAYS,
    MEAL_TYPES,
    SEARCH_SORT_KEYS,
    VALID_RECIPE_STATUSES,
    VALID_SEARCH_SOURCES,
    VALID_SORT_DIRECTIONS,
    VALID_VISIBILITIES,
)
