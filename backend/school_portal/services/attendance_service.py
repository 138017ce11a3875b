"""Attendance recording and reporting service."""
from datetime import date
from typing import Any, Dict, Iterable, List, Optional
from flask import current_app
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from school_portal import db
from school_portal.models.attendance import AttendanceRecord, AttendanceStatus
from school_portal.models.student import Student
from school_portal.services.audit_service import AuditService
from school_portal.services.authorization import Caller, Operation, authorize
from school_portal.utils.exceptions import PersistenceError, ValidationError
from school_portal.utils.validators import AttendanceEntry, Validator

def ensure_students_exist(student_ids: Iterable[int]) -> None:
    """Reject the batch if any referenced student is unknown."""
    wanted = set(student_ids)
    found = {
        row[0] for row in
        db.session.query(Student.id).filter(Student.id.in_(wanted)).all()
    }
    missing = sorted(wanted - found)
    if missing:
        raise ValidationError(f"Unknown student id(s): {', '.join(map(str, missing))}")

class AttendanceService:
    """Service for daily attendance marks."""

    @staticmethod
    def record_attendance(caller: Caller, date_value: Any, records: Any) -> Dict:
        """Validate and upsert a batch of attendance marks for one day.

        The whole batch is validated before the first write. Each mark is
        then upserted on (student_id, date) and committed on its own, so a
        storage failure part-way reports how many marks were kept.
        """
        authorize(caller, Operation.RECORD_ATTENDANCE)

        config = current_app.config
        entries = Validator.parse_attendance_records(records, config['ATTENDANCE_MAX_BATCH'])
        day = Validator.validate_date(date_value, config['ATTENDANCE_MAX_FUTURE_DAYS'])
        ensure_students_exist(entry.student_id for entry in entries)

        written = AttendanceService._apply(caller, day, entries)

        AuditService.log(
            caller.user_id,
            'attendance_marked',
            'attendance',
            details={'date': day.isoformat(), 'count': written}
        )

        stored = AttendanceRecord.query.filter(
            AttendanceRecord.date == day,
            AttendanceRecord.student_id.in_({entry.student_id for entry in entries})
        ).order_by(AttendanceRecord.student_id).all()

        return {
            'date': day.isoformat(),
            'count': written,
            'records': [record.to_dict() for record in stored]
        }

    @staticmethod
    def _apply(caller: Caller, day: date, entries: List[AttendanceEntry]) -> int:
        written = 0
        for entry in entries:
            try:
                AttendanceRecord.upsert(
                    {
                        'student_id': entry.student_id,
                        'date': day,
                        'status': entry.status.value,
                        'recorded_by': caller.user_id,
                    },
                    conflict_columns=('student_id', 'date'),
                    update_columns=('status', 'recorded_by')
                )
                db.session.commit()
            except SQLAlchemyError as e:
                db.session.rollback()
                current_app.logger.error(
                    f"Attendance upsert failed for student {entry.student_id} on {day}: {str(e)}"
                )
                raise PersistenceError(
                    f"Failed to save attendance after {written} of {len(entries)} records",
                    succeeded=written,
                    total=len(entries)
                )
            written += 1
        return written

    @staticmethod
    def get_student_attendance(student_id: int, start: Optional[date] = None,
                               end: Optional[date] = None) -> List[AttendanceRecord]:
        query = AttendanceRecord.query.filter_by(student_id=student_id)
        if start:
            query = query.filter(AttendanceRecord.date >= start)
        if end:
            query = query.filter(AttendanceRecord.date <= end)
        return query.order_by(AttendanceRecord.date.desc()).all()

    @staticmethod
    def get_class_attendance(class_id: int, day: date) -> List[Dict]:
        """Every student of a class with their mark for ``day`` (None if unmarked)."""
        students = Student.query.filter_by(class_id=class_id).order_by(Student.full_name).all()
        marks = {
            record.student_id: record.status for record in
            AttendanceRecord.query.filter(
                AttendanceRecord.date == day,
                AttendanceRecord.student_id.in_([s.id for s in students])
            ).all()
        }
        return [
            {
                'student_id': student.id,
                'full_name': student.full_name,
                'roll_number': student.roll_number,
                'status': marks.get(student.id)
            }
            for student in students
        ]

    @staticmethod
    def summarize(student_id: int) -> Dict:
        """Counts per status and the share of days attended (present or late)."""
        rows = db.session.query(
            AttendanceRecord.status, func.count(AttendanceRecord.id)
        ).filter(AttendanceRecord.student_id == student_id).group_by(AttendanceRecord.status).all()

        counts = {status.value: 0 for status in AttendanceStatus}
        counts.update({status: count for status, count in rows})
        total = sum(counts.values())
        attended = counts[AttendanceStatus.PRESENT.value] + counts[AttendanceStatus.LATE.value]

        return {
            'total_days': total,
            'counts': counts,
            'attendance_rate': round(attended / total * 100, 1) if total else None
        }
