"""In-app notification model."""
from school_portal import db
from school_portal.models.base import BaseModel

class Notification(BaseModel):
    """Message delivered to a single user's inbox."""

    __tablename__ = 'notifications'

    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    title = db.Column(db.String(200), nullable=False)
    message = db.Column(db.Text, nullable=False)
    type = db.Column(db.String(20), nullable=False, default='info')
    read = db.Column(db.Boolean, nullable=False, default=False)
