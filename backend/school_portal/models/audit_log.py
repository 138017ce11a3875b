"""Audit log model."""
from school_portal import db
from school_portal.models.base import BaseModel

class AuditLog(BaseModel):
    """Append-only record of who did what."""

    __tablename__ = 'audit_logs'

    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True, index=True)
    action = db.Column(db.String(100), nullable=False, index=True)
    resource_type = db.Column(db.String(50), nullable=False)
    resource_id = db.Column(db.String(50), nullable=True)
    details = db.Column(db.JSON, nullable=True)
