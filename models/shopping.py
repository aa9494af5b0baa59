"""
Shopping Models

Contains the GroceryList and GroceryItem models for consolidated
shopping lists generated from meal plans.
"""

from .base import db, utcnow


class GroceryList(db.Model):
    """Shopping list for a family group, optionally derived from a meal plan."""
    id = db.Column(db.Integer, primary_key=True)
    family_group_id = db.Column(db.Integer, db.ForeignKey('family_group.id', ondelete='CASCADE'), nullable=False, index=True)
    meal_plan_id = db.Column(db.Integer, db.ForeignKey('meal_plan.id', ondelete='SET NULL'), nullable=True, index=True)
    name = db.Column(db.String(100), nullable=False)
    created_by = db.Column(db.String(64), nullable=False, index=True)
    status = db.Column(db.String(20), default='active', nullable=False, index=True)  # active, completed, archived
    completed_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)
    items = db.relationship(
        'GroceryItem', backref='grocery_list', lazy=True,
        cascade='all, delete-orphan', order_by='GroceryItem.position',
    )

    @property
    def recipe_items(self):
        return [item for item in self.items if item.source == 'recipe']

    @property
    def additional_items(self):
        return [item for item in self.items if item.source == 'manual']


class GroceryItem(db.Model):
    """Consolidated shopping list item with the recipes that contributed it."""
    id = db.Column(db.Integer, primary_key=True)
    grocery_list_id = db.Column(db.Integer, db.ForeignKey('grocery_list.id', ondelete='CASCADE'), nullable=False, index=True)
    position = db.Column(db.Integer, default=0)
    name = db.Column(db.String(200), nullable=False)
    amount = db.Column(db.String(50), default='')
    unit = db.Column(db.String(30), default='')
    category = db.Column(db.String(50), default='pantry')
    checked = db.Column(db.Boolean, default=False, nullable=False)
    notes = db.Column(db.String(500), default='')
    recipe_sources = db.Column(db.JSON, default=list)  # ordered recipe keys
    # Source tracking: 'recipe' (consolidated from recipes) or 'manual' (user added extra)
    source = db.Column(db.String(20), default='recipe')
