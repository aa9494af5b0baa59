"""
Family Group Models

Groups and their membership. Membership is maintained by the account layer;
the recipe services only read it to answer access questions.
"""

from .base import db, utcnow


class FamilyGroup(db.Model):
    """A small group sharing meal plans and grocery lists."""
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)
    members = db.relationship('FamilyGroupMember', backref='group', lazy=True, cascade='all, delete-orphan')


class FamilyGroupMember(db.Model):
    """Membership row: a user belongs to a group with a role."""
    __table_args__ = (
        db.UniqueConstraint('family_group_id', 'user_id', name='uq_family_group_member'),
    )

    id = db.Column(db.Integer, primary_key=True)
    family_group_id = db.Column(db.Integer, db.ForeignKey('family_group.id', ondelete='CASCADE'), nullable=False, index=True)
    user_id = db.Column(db.String(64), nullable=False, index=True)
    role = db.Column(db.String(20), default='member')  # 'admin' or 'member'
    joined_at = db.Column(db.DateTime, default=utcnow)
