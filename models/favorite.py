"""
Favorite Model

A user's bookmark of a recipe. The recipe key may point at a provider
recipe that was never stored locally.
"""

from .base import db, utcnow


class Favorite(db.Model):
    """(user, recipe key) pair, unique per pair."""
    __table_args__ = (
        db.UniqueConstraint('user_id', 'recipe_key', name='uq_favorite_user_recipe'),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(64), nullable=False, index=True)
    recipe_key = db.Column(db.String(64), nullable=False, index=True)  # '12' or 'spoon_716429'
    created_at = db.Column(db.DateTime, default=utcnow)
