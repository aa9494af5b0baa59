"""
Recipe Models

Contains the Recipe and RecipeIngredient models for locally authored
recipes. Provider recipes are never stored here.
"""

from .base import db, utcnow


class Recipe(db.Model):
    """Locally authored recipe with metadata, visibility and lifecycle status."""
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False, index=True)
    description = db.Column(db.Text, default='')
    summary = db.Column(db.String(300), default='')
    user_id = db.Column(db.String(64), nullable=False, index=True)
    family_group_id = db.Column(db.Integer, db.ForeignKey('family_group.id', ondelete='SET NULL'), nullable=True, index=True)
    source_url = db.Column(db.String(500), default='')

    # Timing and servings
    prep_minutes = db.Column(db.Integer, nullable=True)
    cook_minutes = db.Column(db.Integer, nullable=True)
    ready_minutes = db.Column(db.Integer, nullable=True)
    servings = db.Column(db.Integer, default=4)

    image_url = db.Column(db.String(500), default='')
    health_score = db.Column(db.Integer, nullable=True)  # 0-100
    cuisine = db.Column(db.String(50), nullable=True, index=True)

    # Dietary flags
    is_vegetarian = db.Column(db.Boolean, default=False)
    is_vegan = db.Column(db.Boolean, default=False)
    is_gluten_free = db.Column(db.Boolean, default=False)
    is_dairy_free = db.Column(db.Boolean, default=False)

    tags = db.Column(db.JSON, default=list)
    instructions = db.Column(db.JSON, default=list)  # [{number, text, duration_minutes, temperature}]

    visibility = db.Column(db.String(20), default='private', index=True)  # public, family, private
    status = db.Column(db.String(20), default='draft', index=True)  # draft, published, archived

    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    ingredients = db.relationship(
        'RecipeIngredient', backref='recipe', lazy=True,
        cascade='all, delete-orphan', order_by='RecipeIngredient.position',
    )


class RecipeIngredient(db.Model):
    """One ingredient line of a recipe. Amount and unit are kept as typed."""
    id = db.Column(db.Integer, primary_key=True)
    recipe_id = db.Column(db.Integer, db.ForeignKey('recipe.id', ondelete='CASCADE'), nullable=False, index=True)
    position = db.Column(db.Integer, default=0)
    name = db.Column(db.String(200), nullable=False)
    amount = db.Column(db.String(50), default='')
    unit = db.Column(db.String(30), default='')
    notes = db.Column(db.String(500), default='')
    category = db.Column(db.String(50), nullable=True)
