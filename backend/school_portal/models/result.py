"""Subject result model."""
from school_portal import db
from school_portal.models.base import BaseModel

class ResultRecord(BaseModel):
    """Latest score of a student in a subject; grade is derived from score."""

    __tablename__ = 'results'
    __table_args__ = (
        db.UniqueConstraint('student_id', 'subject', name='uq_result_student_subject'),
        db.CheckConstraint('score >= 0 AND score <= 100', name='ck_result_score_range'),
    )

    student_id = db.Column(db.Integer, db.ForeignKey('students.id', ondelete='CASCADE'), nullable=False, index=True)
    subject = db.Column(db.String(100), nullable=False)
    score = db.Column(db.Integer, nullable=False)
    grade = db.Column(db.String(2), nullable=False)
    recorded_by = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)

    student = db.relationship('Student', backref=db.backref('results', lazy='dynamic'))

    def __repr__(self):
        return f'<ResultRecord {self.student_id}/{self.subject}: {self.score} {self.grade}>'
