"""
Services Package

Business logic for recipe aggregation, collections, meal plans and grocery lists.
"""

from .errors import (
    RecipeServiceError,
    NotFound,
    ValidationFailed,
    AccessDenied,
    Conflict,
    UpstreamError,
    UpstreamRateLimited,
    UpstreamNotFound,
    UpstreamUnavailable,
)

from .unified import (
    RecipeRef,
    UnifiedRecipe,
    PageRequest,
    from_local,
    paging_block,
)

from .parsing import (
    float_to_fraction,
    normalize_fractions,
    parse_ingredient_line,
)

from .budget import (
    MemoryRateBudget,
    DatabaseRateBudget,
    build_rate_budget,
)

from .gateway import (
    SpoonacularGateway,
    SearchFilters,
    FetchOutcome,
)

from .search import search_recipes
from .collection import assemble_collection

from .favorites import (
    add_favorite,
    remove_favorite,
    toggle_favorite,
    favorite_keys,
)

from .recipes import (
    create_recipe,
    update_recipe,
    delete_recipe,
    get_recipe,
)

from .mealplan import (
    create_meal_plan,
    get_meal_plan,
    set_slot,
    deactivate_meal_plan,
    serialize_meal_plan,
)

from .shopping import (
    categorize_ingredient,
    consolidate_ingredients,
    generate_grocery_list,
    get_grocery_list,
    list_grocery_lists,
    toggle_item_checked,
    add_additional_item,
    remove_additional_item,
    complete_grocery_list,
    archive_grocery_list,
    serialize_grocery_list,
)

__all__ = [
    # Errors
    'RecipeServiceError',
    'NotFound',
    'ValidationFailed',
    'AccessDenied',
    'Conflict',
    'UpstreamError',
    'UpstreamRateLimited',
    'UpstreamNotFound',
    'UpstreamUnavailable',
    # Unified model
    'RecipeRef',
    'UnifiedRecipe',
    'PageRequest',
    'from_local',
    'paging_block',
    # Parsing
    'float_to_fraction',
    'normalize_fractions',
    'parse_ingredient_line',
    # Gateway
    'MemoryRateBudget',
    'DatabaseRateBudget',
    'build_rate_budget',
    'SpoonacularGateway',
    'SearchFilters',
    'FetchOutcome',
    # Search and collection
    'search_recipes',
    'assemble_collection',
    # Favorites
    'add_favorite',
    'remove_favorite',
    'toggle_favorite',
    'favorite_keys',
    # Recipes
    'create_recipe',
    'update_recipe',
    'delete_recipe',
    'get_recipe',
    # Meal plans
    'create_meal_plan',
    'get_meal_plan',
    'set_slot',
    'deactivate_meal_plan',
    'serialize_meal_plan',
    # Shopping
    'categorize_ingredient',
    'consolidate_ingredients',
    'generate_grocery_list',
    'get_grocery_list',
    'list_grocery_lists',
    'toggle_item_checked',
    'add_additional_item',
    'remove_additional_item',
    'complete_grocery_list',
    'archive_grocery_list',
    'serialize_grocery_list',
]
