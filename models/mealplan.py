"""
Meal Plan Models

Contains the MealPlan model and its slot grid for weekly meal planning.
"""

from .base import db, utcnow


class MealPlan(db.Model):
    """Weekly meal plan for a family group. One active plan per group and week."""
    __table_args__ = (
        db.Index(
            'uq_meal_plan_active_week', 'family_group_id', 'week_start_date',
            unique=True,
            sqlite_where=db.text('is_active = 1'),
            postgresql_where=db.text('is_active'),
        ),
    )

    id = db.Column(db.Integer, primary_key=True)
    family_group_id = db.Column(db.Integer, db.ForeignKey('family_group.id', ondelete='CASCADE'), nullable=False, index=True)
    name = db.Column(db.String(100), nullable=False, default='Weekly Meal Plan')
    created_by = db.Column(db.String(64), nullable=False)
    week_start_date = db.Column(db.Date, nullable=False, index=True)
    week_end_date = db.Column(db.Date, nullable=False)
    notes = db.Column(db.String(1000), default='')
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)
    slots = db.relationship('MealPlanSlot', backref='meal_plan', lazy=True, cascade='all, delete-orphan')


class MealPlanSlot(db.Model):
    """One filled (day, meal type) cell of a plan. Empty cells have no row."""
    __table_args__ = (
        db.UniqueConstraint('meal_plan_id', 'day', 'meal_type', name='uq_meal_plan_slot'),
    )

    id = db.Column(db.Integer, primary_key=True)
    meal_plan_id = db.Column(db.Integer, db.ForeignKey('meal_plan.id', ondelete='CASCADE'), nullable=False, index=True)
    day = db.Column(db.String(10), nullable=False)  # 'monday'..'sunday'
    meal_type = db.Column(db.String(10), nullable=False)  # 'breakfast', 'lunch', 'dinner', 'snack'
    recipe_key = db.Column(db.String(64), nullable=True, index=True)
    recipe_name = db.Column(db.String(200), default='')
    servings = db.Column(db.Integer, nullable=True)
    notes = db.Column(db.String(500), default='')
