"""Class (form / homeroom) model."""
from school_portal import db
from school_portal.models.base import BaseModel

class SchoolClass(BaseModel):
    """A class of students with an optional class teacher."""

    __tablename__ = 'classes'

    name = db.Column(db.String(100), unique=True, nullable=False)
    teacher_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)

    teacher = db.relationship('User')
    students = db.relationship('Student', back_populates='school_class', lazy='select')

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'teacher_id': self.teacher_id,
            'teacher_name': self.teacher.name if self.teacher else None,
            'student_count': len(self.students),
            'created_at': self.created_at.isoformat() if self.created_at else None
        }

    def __repr__(self):
        return f'<SchoolClass {self.name}>'
