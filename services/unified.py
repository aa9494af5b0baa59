"""
Unified Recipe Model

The one recipe shape every service returns, whether the recipe was authored
locally or fetched from the provider. Provider-native fields never get past
services/normalize.py; local rows are converted by ``from_local``.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from constants import EXTERNAL_KEY_PREFIX
from .errors import ValidationFailed

LOCAL = 'local'
EXTERNAL = 'external'


@dataclass(frozen=True)
class RecipeRef:
    """Recipe identity: origin plus an opaque id.

    Local recipes are keyed by their integer id ('12'), provider recipes by
    a prefixed id ('spoon_716429'), so the two id spaces never collide.
    """
    origin: str
    id: str

    @property
    def key(self):
        if self.origin == EXTERNAL:
            return f'{EXTERNAL_KEY_PREFIX}{self.id}'
        return self.id

    @property
    def is_external(self):
        return self.origin == EXTERNAL

    @classmethod
    def local(cls, recipe_id):
        return cls(LOCAL, str(recipe_id))

    @classmethod
    def external(cls, external_id):
        return cls(EXTERNAL, str(external_id))

    @classmethod
    def parse(cls, key):
        """Parse a recipe key, raising ValidationFailed for anything else."""
        key = str(key or '').strip()
        if key.startswith(EXTERNAL_KEY_PREFIX):
            external_id = key[len(EXTERNAL_KEY_PREFIX):]
            if external_id.isdigit():
                return cls.external(int(external_id))
        elif key.isdigit():
            return cls.local(int(key))
        raise ValidationFailed(f'Invalid recipe id: {key!r}', {'recipe_id': key})

    def __str__(self):
        return self.key


@dataclass
class IngredientLine:
    name: str
    amount: str = ''
    unit: str = ''
    notes: str = ''
    category: Optional[str] = None

    def to_dict(self):
        return {
            'name': self.name,
            'amount': self.amount,
            'unit': self.unit,
            'notes': self.notes,
            'category': self.category,
        }


@dataclass
class Temperature:
    value: float
    unit: str  # 'F' or 'C'

    def to_dict(self):
        return {'value': self.value, 'unit': self.unit}


@dataclass
class InstructionStep:
    number: int
    text: str
    duration_minutes: Optional[int] = None
    temperature: Optional[Temperature] = None

    def to_dict(self):
        return {
            'number': self.number,
            'text': self.text,
            'duration_minutes': self.duration_minutes,
            'temperature': self.temperature.to_dict() if self.temperature else None,
        }

    @classmethod
    def from_dict(cls, data):
        temperature = data.get('temperature')
        return cls(
            number=int(data.get('number') or 0),
            text=data.get('text') or '',
            duration_minutes=data.get('duration_minutes'),
            temperature=Temperature(temperature['value'], temperature['unit']) if temperature else None,
        )


@dataclass
class UnifiedRecipe:
    ref: RecipeRef
    title: str
    description: str = ''
    summary: str = ''
    prep_minutes: Optional[int] = None
    cook_minutes: Optional[int] = None
    ready_minutes: int = 0
    servings: int = 0
    image_url: str = ''
    dietary: Dict[str, bool] = field(default_factory=dict)
    health_score: int = 0
    price_per_serving: Optional[float] = None
    cuisine: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    dish_types: List[str] = field(default_factory=list)
    diets: List[str] = field(default_factory=list)
    ingredients: List[IngredientLine] = field(default_factory=list)
    instructions: List[InstructionStep] = field(default_factory=list)
    equipment: List[dict] = field(default_factory=list)
    nutrition: Optional[Dict[str, float]] = None
    visibility: str = 'public'
    status: str = 'published'
    owner_id: Optional[str] = None
    family_group_id: Optional[int] = None
    source_url: str = ''
    created_at: Optional[object] = None
    updated_at: Optional[object] = None
    is_favorited: Optional[bool] = None

    @property
    def key(self):
        return self.ref.key

    @property
    def origin(self):
        return self.ref.origin

    @property
    def is_editable(self):
        """Provider recipes are read-only through this service."""
        return self.ref.origin == LOCAL

    def to_dict(self):
        return {
            'id': self.key,
            'origin': self.origin,
            'title': self.title,
            'description': self.description,
            'summary': self.summary,
            'prep_minutes': self.prep_minutes,
            'cook_minutes': self.cook_minutes,
            'ready_minutes': self.ready_minutes,
            'servings': self.servings,
            'image_url': self.image_url,
            'dietary': dict(self.dietary),
            'health_score': self.health_score,
            'price_per_serving': self.price_per_serving,
            'cuisine': self.cuisine,
            'tags': list(self.tags),
            'dish_types': list(self.dish_types),
            'diets': list(self.diets),
            'ingredients': [ing.to_dict() for ing in self.ingredients],
            'instructions': [step.to_dict() for step in self.instructions],
            'equipment': list(self.equipment),
            'nutrition': dict(self.nutrition) if self.nutrition is not None else None,
            'visibility': self.visibility,
            'status': self.status,
            'owner_id': self.owner_id,
            'family_group_id': self.family_group_id,
            'source_url': self.source_url,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
            'is_favorited': self.is_favorited,
            'editable': self.is_editable,
        }


def from_local(recipe, include_content=True):
    """Convert a local Recipe row into the unified shape.

    Blank text fields become '' and missing numbers 0 so list views can
    render every item without null checks.
    """
    description = recipe.description or ''
    ingredients = []
    instructions = []
    if include_content:
        ingredients = [
            IngredientLine(
                name=ri.name,
                amount=ri.amount or '',
                unit=ri.unit or '',
                notes=ri.notes or '',
                category=ri.category,
            )
            for ri in recipe.ingredients
        ]
        instructions = [InstructionStep.from_dict(step) for step in (recipe.instructions or [])]

    return UnifiedRecipe(
        ref=RecipeRef.local(recipe.id),
        title=recipe.title,
        description=description,
        summary=recipe.summary or description,
        prep_minutes=recipe.prep_minutes,
        cook_minutes=recipe.cook_minutes,
        ready_minutes=recipe.ready_minutes or 0,
        servings=recipe.servings or 0,
        image_url=recipe.image_url or '',
        dietary={
            'vegetarian': bool(recipe.is_vegetarian),
            'vegan': bool(recipe.is_vegan),
            'gluten_free': bool(recipe.is_gluten_free),
            'dairy_free': bool(recipe.is_dairy_free),
        },
        health_score=recipe.health_score or 0,
        cuisine=recipe.cuisine,
        tags=list(recipe.tags or []),
        ingredients=ingredients,
        instructions=instructions,
        visibility=recipe.visibility,
        status=recipe.status,
        owner_id=recipe.user_id,
        family_group_id=recipe.family_group_id,
        source_url=recipe.source_url or '',
        created_at=recipe.created_at,
        updated_at=recipe.updated_at,
    )


@dataclass(frozen=True)
class PageRequest:
    """Offset/limit paging with the page size bounded."""
    limit: int = 12
    offset: int = 0

    def validate(self, max_limit=50):
        if self.limit < 1 or self.limit > max_limit:
            raise ValidationFailed(
                f'limit must be between 1 and {max_limit}', {'limit': self.limit})
        if self.offset < 0:
            raise ValidationFailed('offset must not be negative', {'offset': self.offset})
        return self

    @property
    def index(self):
        """Zero-based page number."""
        return self.offset // self.limit


def paging_block(page, total, exact=True):
    """Paging metadata for list responses. has_more is only a hint when not exact."""
    return {
        'limit': page.limit,
        'offset': page.offset,
        'total': total,
        'has_more': page.offset + page.limit < total,
        'exact': exact,
    }
