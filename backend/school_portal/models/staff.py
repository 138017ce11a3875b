"""Staff model."""
from school_portal import db
from school_portal.models.base import BaseModel

class Staff(BaseModel):
    """Teaching or administrative staff profile."""

    __tablename__ = 'staff'

    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, unique=True)
    full_name = db.Column(db.String(100), nullable=False)
    subject = db.Column(db.String(100), nullable=True)
    position = db.Column(db.String(100), nullable=True)
    gender = db.Column(db.String(20), nullable=True)
    address = db.Column(db.Text, nullable=True)

    user = db.relationship('User', backref=db.backref('staff_profile', uselist=False))

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'full_name': self.full_name,
            'email': self.user.email if self.user else None,
            'subject': self.subject,
            'position': self.position,
            'gender': self.gender,
            'is_active': self.user.is_active if self.user else None,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }
