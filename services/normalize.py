"""
Provider Normalization

Pure functions turning Spoonacular recipe JSON into UnifiedRecipe objects.
This is the only module that reads provider-native field names.
"""

from constants import (
    DIETARY_FLAGS,
    DEFAULT_CATEGORY,
    EQUIPMENT_IMAGE_URL,
    FLAG_TAGS,
    NUTRIENT_KEYS,
    QUICK_MINUTES,
    SLOW_MINUTES,
    SUMMARY_LENGTH,
)
from utils.sanitizer import strip_markup, truncate_text
from .parsing import float_to_fraction
from .unified import IngredientLine, InstructionStep, RecipeRef, Temperature, UnifiedRecipe


def _dedupe(values):
    """Drop repeats, keeping first-seen order."""
    seen = set()
    result = []
    for value in values:
        if value and value not in seen:
            seen.add(value)
            result.append(value)
    return result


def format_amount(amount):
    """Render a provider amount as the opaque string we store ('2', '1/2', '1 1/3')."""
    if amount is None or amount == '':
        return ''
    if isinstance(amount, str):
        return amount.strip()
    return float_to_fraction(float(amount))


def normalize_ingredients(raw_ingredients):
    """Map extendedIngredients onto IngredientLine (clean name, US unit, aisle category)."""
    ingredients = []
    for raw in raw_ingredients or []:
        name = raw.get('nameClean') or raw.get('name') or ''
        if not name:
            continue
        us_measure = (raw.get('measures') or {}).get('us') or {}
        aisle = raw.get('aisle')
        ingredients.append(IngredientLine(
            name=name,
            amount=format_amount(raw.get('amount')),
            unit=us_measure.get('unitShort') or raw.get('unit') or '',
            notes=raw.get('original') or '',
            category=aisle.lower() if aisle else DEFAULT_CATEGORY,
        ))
    return ingredients


def _normalize_temperature(raw):
    if not raw or raw.get('number') is None:
        return None
    unit = 'F' if raw.get('unit') in ('Fahrenheit', 'F') else 'C'
    return Temperature(value=raw['number'], unit=unit)


def normalize_instructions(instruction_groups):
    """Flatten every analyzedInstructions group into one ordered step list."""
    steps = []
    for group in instruction_groups or []:
        for raw_step in group.get('steps') or []:
            length = raw_step.get('length') or {}
            steps.append(InstructionStep(
                number=raw_step.get('number') or len(steps) + 1,
                text=raw_step.get('step') or '',
                duration_minutes=length.get('number'),
                temperature=_normalize_temperature(raw_step.get('temperature')),
            ))
    return steps


def normalize_equipment(instruction_groups):
    """Collect equipment across all steps, deduplicated by name."""
    seen = set()
    equipment = []
    for group in instruction_groups or []:
        for raw_step in group.get('steps') or []:
            for item in raw_step.get('equipment') or []:
                name = item.get('name')
                if not name or name in seen:
                    continue
                seen.add(name)
                image = item.get('image')
                equipment.append({
                    'name': name,
                    'image_url': EQUIPMENT_IMAGE_URL.format(image) if image else '',
                    'provider_id': item.get('id'),
                })
    return equipment


def extract_tags(raw):
    """Dish types and cuisines plus tags derived from timing and provider flags."""
    tags = list(raw.get('dishTypes') or []) + list(raw.get('cuisines') or [])

    ready = raw.get('readyInMinutes')
    if ready is not None:
        if ready <= QUICK_MINUTES:
            tags.append('quick')
        elif ready >= SLOW_MINUTES:
            tags.append('slow')

    for flag, tag in FLAG_TAGS:
        if raw.get(flag):
            tags.append(tag)

    return _dedupe(tags)


def normalize_nutrition(raw_nutrition):
    """Keep only the nutrients in NUTRIENT_KEYS. Returns None when none were sent."""
    if not raw_nutrition or not raw_nutrition.get('nutrients'):
        return None
    nutrition = {}
    for nutrient in raw_nutrition['nutrients']:
        key = NUTRIENT_KEYS.get(nutrient.get('name'))
        if key:
            nutrition[key] = nutrient.get('amount')
    return nutrition


def describe(summary_html):
    """Return (description, summary) from the provider's HTML summary."""
    description = strip_markup(summary_html)
    return description, truncate_text(description, SUMMARY_LENGTH)


def normalize_recipe(raw):
    """Convert one provider recipe object into a UnifiedRecipe."""
    description, summary = describe(raw.get('summary'))
    instruction_groups = raw.get('analyzedInstructions') or []
    price = raw.get('pricePerServing')
    cuisines = raw.get('cuisines') or []

    return UnifiedRecipe(
        ref=RecipeRef.external(raw['id']),
        title=raw.get('title') or '',
        description=description,
        summary=summary,
        prep_minutes=raw.get('preparationMinutes') or None,
        cook_minutes=raw.get('cookingMinutes') or None,
        ready_minutes=raw.get('readyInMinutes') or 0,
        servings=raw.get('servings') or 0,
        image_url=raw.get('image') or '',
        dietary={name: bool(raw.get(flag)) for flag, name in DIETARY_FLAGS.items()},
        health_score=raw.get('healthScore') or 0,
        # Provider prices are in cents
        price_per_serving=round(price / 100, 2) if price is not None else None,
        cuisine=cuisines[0] if cuisines else None,
        tags=extract_tags(raw),
        dish_types=list(raw.get('dishTypes') or []),
        diets=list(raw.get('diets') or []),
        ingredients=normalize_ingredients(raw.get('extendedIngredients')),
        instructions=normalize_instructions(instruction_groups),
        equipment=normalize_equipment(instruction_groups),
        nutrition=normalize_nutrition(raw.get('nutrition')),
        visibility='public',
        status='published',
        owner_id=None,
        source_url=raw.get('sourceUrl') or '',
    )
