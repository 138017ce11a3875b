"""Announcement model."""
import enum
from school_portal import db
from school_portal.models.base import BaseModel

class Audience(enum.Enum):
    """Who an announcement is addressed to."""
    ALL = 'all'
    STUDENTS = 'students'
    STAFF = 'staff'
    PARENTS = 'parents'

class Announcement(BaseModel):
    """School-wide announcement."""

    __tablename__ = 'announcements'

    title = db.Column(db.String(200), nullable=False)
    body = db.Column(db.Text, nullable=False)
    audience = db.Column(db.Enum(Audience), nullable=False, default=Audience.ALL)
    author_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)

    author = db.relationship('User')

    def to_dict(self, exclude: list = None):
        result = super().to_dict(exclude=exclude)
        result['author_name'] = self.author.name if self.author else None
        return result
