"""Daily attendance model."""
import enum
from school_portal import db
from school_portal.models.base import BaseModel

class AttendanceStatus(enum.Enum):
    """Attendance status enumeration."""
    PRESENT = 'present'
    ABSENT = 'absent'
    LATE = 'late'
    EXCUSED = 'excused'

class AttendanceRecord(BaseModel):
    """One attendance mark per student per calendar day."""

    __tablename__ = 'attendance'
    __table_args__ = (
        db.UniqueConstraint('student_id', 'date', name='uq_attendance_student_date'),
    )

    student_id = db.Column(db.Integer, db.ForeignKey('students.id', ondelete='CASCADE'), nullable=False, index=True)
    date = db.Column(db.Date, nullable=False, index=True)
    # Stored as the lower-case enum value so the upsert can write it directly
    status = db.Column(db.String(20), nullable=False)
    recorded_by = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)

    student = db.relationship('Student', backref=db.backref('attendance_records', lazy='dynamic'))

    def __repr__(self):
        return f'<AttendanceRecord {self.student_id}@{self.date}: {self.status}>'
