"""Assignments and timetable management."""
from typing import Any, Dict, List, Optional
from sqlalchemy.exc import IntegrityError
from school_portal import db
from school_portal.models.assignment import Assignment
from school_portal.models.school_class import SchoolClass
from school_portal.models.timetable import TimetableEntry, WeekDay
from school_portal.models.user import User
from school_portal.services.audit_service import AuditService
from school_portal.services.authorization import Caller, Operation, authorize
from school_portal.utils.exceptions import ConflictError, NotFoundError, ValidationError
from school_portal.utils.validators import Validator

# Assignments may be due up to a school year ahead
ASSIGNMENT_MAX_FUTURE_DAYS = 366

def _require_class(class_id: Any) -> SchoolClass:
    class_id = Validator.validate_id(class_id, 'classId')
    school_class = db.session.get(SchoolClass, class_id)
    if not school_class:
        raise ValidationError(f"Class {class_id} does not exist")
    return school_class

class AssignmentService:

    @staticmethod
    def _due_date(value: Any):
        if not value:
            return None
        return Validator.validate_date(value, max_future_days=ASSIGNMENT_MAX_FUTURE_DAYS)

    @staticmethod
    def create_assignment(caller: Caller, data: Dict) -> Dict[str, Any]:
        authorize(caller, Operation.MANAGE_COURSEWORK)

        assignment = Assignment(
            title=Validator.validate_text(data.get('title'), 'title', 255),
            description=Validator.validate_text(data.get('description'), 'description', 5000, required=False),
            subject=Validator.validate_text(data.get('subject'), 'subject', 100, required=False),
            class_id=_require_class(data.get('classId')).id,
            teacher_id=caller.user_id,
            due_date=AssignmentService._due_date(data.get('dueDate'))
        )
        db.session.add(assignment)
        db.session.commit()

        AuditService.log(caller.user_id, 'assignment_created', 'assignment', resource_id=assignment.id,
                         details={'classId': assignment.class_id, 'title': assignment.title})
        return assignment.to_dict()

    @staticmethod
    def get_assignment(assignment_id: int) -> Assignment:
        assignment = db.session.get(Assignment, assignment_id)
        if not assignment:
            raise NotFoundError("Assignment not found")
        return assignment

    @staticmethod
    def list_for_class(class_id: Optional[int]) -> List[Assignment]:
        query = Assignment.query
        if class_id:
            query = query.filter_by(class_id=class_id)
        return query.order_by(Assignment.due_date.desc(), Assignment.id.desc()).all()

    @staticmethod
    def update_assignment(caller: Caller, assignment_id: int, data: Dict) -> Dict[str, Any]:
        authorize(caller, Operation.MANAGE_COURSEWORK)
        assignment = AssignmentService.get_assignment(assignment_id)

        if 'title' in data:
            assignment.title = Validator.validate_text(data['title'], 'title', 255)
        if 'description' in data:
            assignment.description = Validator.validate_text(
                data['description'], 'description', 5000, required=False
            )
        if 'subject' in data:
            assignment.subject = Validator.validate_text(data['subject'], 'subject', 100, required=False)
        if 'dueDate' in data:
            assignment.due_date = AssignmentService._due_date(data['dueDate'])

        db.session.commit()
        AuditService.log(caller.user_id, 'assignment_updated', 'assignment', resource_id=assignment.id)
        return assignment.to_dict()

    @staticmethod
    def delete_assignment(caller: Caller, assignment_id: int) -> None:
        authorize(caller, Operation.MANAGE_COURSEWORK)
        assignment = AssignmentService.get_assignment(assignment_id)
        assignment.delete()
        AuditService.log(caller.user_id, 'assignment_deleted', 'assignment', resource_id=assignment_id)

class TimetableService:

    @staticmethod
    def _parse_slot(data: Dict) -> Dict[str, Any]:
        try:
            day = WeekDay(str(data.get('day', '')).lower())
        except ValueError:
            raise ValidationError(f"Day must be one of: {', '.join(d.value for d in WeekDay)}")

        start_time = Validator.validate_time(data.get('startTime'), 'start time')
        end_time = Validator.validate_time(data.get('endTime'), 'end time')
        if end_time <= start_time:
            raise ValidationError("End time must be after start time")

        teacher_id = data.get('teacherId')
        if teacher_id:
            teacher = db.session.get(User, Validator.validate_id(teacher_id, 'teacherId'))
            if not teacher or not teacher.is_teacher():
                raise ValidationError("Teacher must be an existing staff member")
            teacher_id = teacher.id

        return {
            'day': day,
            'start_time': start_time,
            'end_time': end_time,
            'subject': Validator.validate_text(data.get('subject'), 'subject', 100),
            'teacher_id': teacher_id or None
        }

    @staticmethod
    def create_entry(caller: Caller, data: Dict) -> Dict[str, Any]:
        authorize(caller, Operation.MANAGE_COURSEWORK)

        school_class = _require_class(data.get('classId'))
        entry = TimetableEntry(class_id=school_class.id, **TimetableService._parse_slot(data))
        db.session.add(entry)
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise ConflictError("This class already has a period starting at that time")

        AuditService.log(caller.user_id, 'timetable_entry_created', 'timetable', resource_id=entry.id,
                         details={'classId': entry.class_id, 'day': entry.day.value})
        return entry.to_dict()

    @staticmethod
    def get_entry(entry_id: int) -> TimetableEntry:
        entry = db.session.get(TimetableEntry, entry_id)
        if not entry:
            raise NotFoundError("Timetable entry not found")
        return entry

    @staticmethod
    def for_class(class_id: int) -> Dict[str, List[Dict]]:
        """Weekly timetable grouped by day, each day ordered by start time."""
        entries = TimetableEntry.query.filter_by(class_id=class_id) \
            .order_by(TimetableEntry.start_time).all()

        week = {day.value: [] for day in WeekDay}
        for entry in entries:
            week[entry.day.value].append(entry.to_dict())
        return week

    @staticmethod
    def update_entry(caller: Caller, entry_id: int, data: Dict) -> Dict[str, Any]:
        authorize(caller, Operation.MANAGE_COURSEWORK)
        entry = TimetableService.get_entry(entry_id)

        merged = {
            'day': entry.day.value,
            'startTime': entry.start_time.strftime('%H:%M'),
            'endTime': entry.end_time.strftime('%H:%M'),
            'subject': entry.subject,
            'teacherId': entry.teacher_id,
        }
        merged.update(data)
        for key, value in TimetableService._parse_slot(merged).items():
            setattr(entry, key, value)

        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise ConflictError("This class already has a period starting at that time")

        AuditService.log(caller.user_id, 'timetable_entry_updated', 'timetable', resource_id=entry.id)
        return entry.to_dict()

    @staticmethod
    def delete_entry(caller: Caller, entry_id: int) -> None:
        authorize(caller, Operation.MANAGE_COURSEWORK)
        entry = TimetableService.get_entry(entry_id)
        db.session.delete(entry)
        db.session.commit()
        AuditService.log(caller.user_id, 'timetable_entry_deleted', 'timetable', resource_id=entry_id)
