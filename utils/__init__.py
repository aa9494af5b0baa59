# Utility modules for the recipe service
from .sanitizer import (
    strip_markup, truncate_text, sanitize_text, sanitize_url,
    sanitize_recipe_title, sanitize_item_name
)
