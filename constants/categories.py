"""
Grocery Category Constants

Fixed shopping-list taxonomy and the ordered keyword rules used to
categorize ingredients that arrive without a stored category.
"""

DEFAULT_CATEGORY = 'pantry'

# Fixed taxonomy for grocery items
GROCERY_CATEGORIES = (
    'produce', 'meat', 'dairy', 'bakery', 'frozen', 'beverages', 'pantry',
)

# Ordered keyword rules (category, keywords). First match wins, so the
# order matters: "frozen chicken" is meat, "buttermilk bread" is dairy.
CATEGORY_KEYWORDS = (
    ('dairy', ('milk', 'cheese', 'yogurt', 'butter')),
    ('meat', ('chicken', 'beef', 'pork', 'fish', 'meat', 'turkey', 'bacon',
              'sausage', 'salmon', 'shrimp', 'lamb', 'steak')),
    ('produce', ('apple', 'banana', 'tomato', 'onion', 'lettuce', 'garlic',
                 'carrot', 'potato', 'lemon', 'lime', 'spinach',
                 'celery', 'cucumber', 'mushroom', 'avocado', 'broccoli')),
    ('bakery', ('bread', 'rolls', 'bagel', 'bun', 'tortilla', 'croissant')),
    ('frozen', ('frozen',)),
    ('beverages', ('juice', 'soda', 'water', 'beer', 'wine', 'coffee')),
)

# Category assigned to manual extras when none is given
DEFAULT_ADDITIONAL_CATEGORY = 'other'
