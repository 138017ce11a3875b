"""Assignment model."""
from school_portal import db
from school_portal.models.base import BaseModel

class Assignment(BaseModel):
    """Homework or coursework set for a class."""

    __tablename__ = 'assignments'

    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    subject = db.Column(db.String(100), nullable=True)
    class_id = db.Column(db.Integer, db.ForeignKey('classes.id', ondelete='CASCADE'), nullable=False, index=True)
    teacher_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    due_date = db.Column(db.Date, nullable=True)

    school_class = db.relationship('SchoolClass')

    def __repr__(self):
        return f'<Assignment {self.title}>'
