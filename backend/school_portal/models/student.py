"""Student and guardian models."""
import enum
from school_portal import db
from school_portal.models.base import BaseModel

class StudentStatus(enum.Enum):
    """Student status enumeration."""
    ACTIVE = 'active'
    SUSPENDED = 'suspended'
    GRADUATED = 'graduated'
    WITHDRAWN = 'withdrawn'

student_guardians = db.Table(
    'student_guardians',
    db.Column('student_id', db.Integer, db.ForeignKey('students.id', ondelete='CASCADE'), primary_key=True),
    db.Column('guardian_id', db.Integer, db.ForeignKey('guardians.id', ondelete='CASCADE'), primary_key=True),
    db.Column('relationship', db.String(30), nullable=False, default='parent'),
)

class Student(BaseModel):
    """Student profile linked to a login account."""

    __tablename__ = 'students'

    # Link to User
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, unique=True)

    roll_number = db.Column(db.String(50), unique=True, nullable=False, index=True)
    full_name = db.Column(db.String(100), nullable=False)
    class_id = db.Column(db.Integer, db.ForeignKey('classes.id'), nullable=True, index=True)

    # Personal Info
    date_of_birth = db.Column(db.Date, nullable=True)
    gender = db.Column(db.String(20), nullable=True)
    address = db.Column(db.Text, nullable=True)

    status = db.Column(db.Enum(StudentStatus), default=StudentStatus.ACTIVE, nullable=False)
    enrollment_date = db.Column(db.Date, nullable=True)

    # Relationships
    user = db.relationship('User', backref=db.backref('student_profile', uselist=False))
    school_class = db.relationship('SchoolClass', back_populates='students')
    guardians = db.relationship('Guardian', secondary=student_guardians, back_populates='students')

    def to_dict(self):
        """Convert to dictionary."""
        return {
            'id': self.id,
            'user_id': self.user_id,
            'roll_number': self.roll_number,
            'full_name': self.full_name,
            'email': self.user.email if self.user else None,
            'class_id': self.class_id,
            'class_name': self.school_class.name if self.school_class else None,
            'date_of_birth': self.date_of_birth.isoformat() if self.date_of_birth else None,
            'gender': self.gender,
            'status': self.status.value if self.status else None,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }

class Guardian(BaseModel):
    """Parent or guardian profile."""

    __tablename__ = 'guardians'

    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, unique=True)
    name = db.Column(db.String(100), nullable=False)
    phone = db.Column(db.String(20), nullable=True)

    user = db.relationship('User', backref=db.backref('guardian_profile', uselist=False))
    students = db.relationship('Student', secondary=student_guardians, back_populates='guardians')

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'name': self.name,
            'email': self.user.email if self.user else None,
            'phone': self.phone,
            'student_ids': [student.id for student in self.students]
        }
