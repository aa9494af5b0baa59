"""
Budget Model

Shared external-call budget window, one row per budget name. Lets several
worker processes draw from the same provider quota.
"""

from .base import db


class ApiBudgetWindow(db.Model):
    """Current window of a named call budget."""
    name = db.Column(db.String(50), primary_key=True)
    window_start = db.Column(db.DateTime, nullable=False)
    call_count = db.Column(db.Integer, nullable=False, default=0)
