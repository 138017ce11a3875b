"""Timetable model."""
import enum
from school_portal import db
from school_portal.models.base import BaseModel

class WeekDay(enum.Enum):
    """School days enumeration."""
    MONDAY = 'monday'
    TUESDAY = 'tuesday'
    WEDNESDAY = 'wednesday'
    THURSDAY = 'thursday'
    FRIDAY = 'friday'
    SATURDAY = 'saturday'

class TimetableEntry(BaseModel):
    """A subject period in a class's weekly timetable."""

    __tablename__ = 'timetable'
    __table_args__ = (
        db.UniqueConstraint('class_id', 'day', 'start_time', name='uq_timetable_slot'),
    )

    class_id = db.Column(db.Integer, db.ForeignKey('classes.id', ondelete='CASCADE'), nullable=False, index=True)
    day = db.Column(db.Enum(WeekDay), nullable=False)
    start_time = db.Column(db.Time, nullable=False)
    end_time = db.Column(db.Time, nullable=False)
    subject = db.Column(db.String(100), nullable=False)
    teacher_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)

    def to_dict(self, exclude: list = None):
        result = super().to_dict(exclude=exclude)
        result['start_time'] = self.start_time.strftime('%H:%M')
        result['end_time'] = self.end_time.strftime('%H:%M')
        return result
