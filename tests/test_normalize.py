from services.normalize import (
    describe,
    extract_tags,
    normalize_equipment,
    normalize_ingredients,
    normalize_instructions,
    normalize_nutrition,
    normalize_recipe,
)


def test_describe_strips_markup_and_truncates_summary():
    words = ' '.join(['word'] * 80)
    description, summary = describe(f'<p>A <b>bold</b> &amp; {words}</p>')

    assert description.startswith('A bold & word')
    assert '<' not in description
    assert summary.endswith('...')
    assert len(summary) <= 203
    # Cut at a word boundary, not mid-word
    assert summary[:-3].split()[-1] == 'word'


def test_short_summary_is_not_truncated():
    description, summary = describe('<i>Quick</i> soup')
    assert description == summary == 'Quick soup'


def test_ingredients_prefer_clean_name_and_us_short_unit():
    ingredients = normalize_ingredients([
        {
            'name': 'red onions',
            'nameClean': 'red onion',
            'amount': 1.5,
            'unit': 'medium',
            'measures': {'us': {'unitShort': 'med'}},
            'aisle': 'Produce',
            'original': '1 1/2 medium red onions',
        },
        {'name': 'mystery spice', 'amount': 2, 'unit': 'tsp'},
    ])

    onion, spice = ingredients
    assert onion.name == 'red onion'
    assert onion.amount == '1 1/2'
    assert onion.unit == 'med'
    assert onion.category == 'produce'
    assert onion.notes == '1 1/2 medium red onions'
    assert spice.unit == 'tsp'
    assert spice.category == 'pantry'


def test_instructions_flatten_groups_and_map_temperature():
    steps = normalize_instructions([
        {'steps': [{'number': 1, 'step': 'Preheat oven.',
                    'temperature': {'number': 350, 'unit': 'Fahrenheit'}}]},
        {'steps': [{'number': 1, 'step': 'Bake.', 'length': {'number': 25, 'unit': 'minutes'}},
                   {'number': 2, 'step': 'Rest.',
                    'temperature': {'number': 180, 'unit': 'Celsius'}}]},
    ])

    assert [step.text for step in steps] == ['Preheat oven.', 'Bake.', 'Rest.']
    assert steps[0].temperature.to_dict() == {'value': 350, 'unit': 'F'}
    assert steps[1].duration_minutes == 25
    assert steps[1].temperature is None
    assert steps[2].temperature.unit == 'C'


def test_equipment_is_deduplicated_by_name():
    groups = [{'steps': [
        {'equipment': [{'id': 1, 'name': 'oven', 'image': 'oven.jpg'}]},
        {'equipment': [{'id': 1, 'name': 'oven', 'image': 'oven.jpg'},
                       {'id': 2, 'name': 'whisk'}]},
    ]}]
    equipment = normalize_equipment(groups)
    assert [item['name'] for item in equipment] == ['oven', 'whisk']
    assert equipment[0]['image_url'].endswith('/oven.jpg')
    assert equipment[1]['image_url'] == ''


def test_tags_combine_types_cuisines_timing_and_flags():
    tags = extract_tags({
        'dishTypes': ['main course', 'dinner'],
        'cuisines': ['Italian', 'dinner'],
        'readyInMinutes': 15,
        'veryHealthy': True,
        'cheap': True,
        'veryPopular': False,
    })
    assert tags == ['main course', 'dinner', 'Italian', 'quick', 'healthy', 'budget-friendly']


def test_slow_tag_for_long_recipes():
    assert 'slow' in extract_tags({'readyInMinutes': 90})
    assert extract_tags({'readyInMinutes': 40}) == []


def test_nutrition_keeps_known_nutrients_only():
    nutrition = normalize_nutrition({'nutrients': [
        {'name': 'Calories', 'amount': 420.0},
        {'name': 'Protein', 'amount': 31.5},
        {'name': 'Vitamin K', 'amount': 12.0},
    ]})
    assert nutrition == {'calories': 420.0, 'protein': 31.5}
    assert normalize_nutrition(None) is None
    assert normalize_nutrition({'nutrients': []}) is None


def test_normalize_recipe_builds_read_only_external_recipe(provider_recipe):
    raw = provider_recipe(
        716429, 'Pasta with Garlic',
        cuisines=['Italian'],
        vegetarian=True,
        glutenFree=False,
        pricePerServing=163.15,
        sourceUrl='https://example.com/pasta',
    )
    recipe = normalize_recipe(raw)

    assert recipe.key == 'spoon_716429'
    assert recipe.origin == 'external'
    assert recipe.owner_id is None
    assert recipe.is_editable is False
    assert recipe.cuisine == 'Italian'
    assert recipe.dietary['vegetarian'] is True
    assert recipe.dietary['gluten_free'] is False
    assert recipe.price_per_serving == 1.63
    assert recipe.visibility == 'public'
    assert recipe.to_dict()['id'] == 'spoon_716429'
