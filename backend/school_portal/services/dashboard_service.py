"""Role specific dashboard summaries."""
from datetime import date
from typing import Any, Dict
from sqlalchemy import func
from school_portal.models.announcement import Announcement
from school_portal.models.assignment import Assignment
from school_portal.models.attendance import AttendanceRecord, AttendanceStatus
from school_portal.models.notification import Notification
from school_portal.models.school_class import SchoolClass
from school_portal.models.staff import Staff
from school_portal.models.student import Student, StudentStatus
from school_portal.models.user import User, UserRole
from school_portal.services.announcement_service import audiences_for
from school_portal.services.attendance_service import AttendanceService
from school_portal.services.result_service import ResultService

RECENT_LIMIT = 5

class DashboardService:

    @staticmethod
    def for_user(user: User, today: date = None) -> Dict[str, Any]:
        """Pick the richest view the user's roles allow."""
        today = today or date.today()
        if user.has_role(UserRole.ADMIN):
            view = DashboardService.admin_summary(today)
        elif user.has_role(UserRole.TEACHER):
            view = DashboardService.teacher_summary(user, today)
        elif user.has_role(UserRole.PARENT):
            view = DashboardService.parent_summary(user)
        else:
            view = DashboardService.student_summary(user)

        view['unread_notifications'] = Notification.query.filter_by(user_id=user.id, read=False).count()
        view['announcements'] = [
            announcement.to_dict() for announcement in
            Announcement.query.filter(Announcement.audience.in_(audiences_for(user)))
            .order_by(Announcement.created_at.desc()).limit(RECENT_LIMIT).all()
        ]
        return view

    @staticmethod
    def _attendance_counts(query) -> Dict[str, int]:
        rows = query.with_entities(AttendanceRecord.status, func.count(AttendanceRecord.id)) \
            .group_by(AttendanceRecord.status).all()
        counts = {status.value: 0 for status in AttendanceStatus}
        counts.update({status: count for status, count in rows})
        return counts

    @staticmethod
    def admin_summary(today: date) -> Dict[str, Any]:
        return {
            'role': UserRole.ADMIN.value,
            'students': Student.query.filter_by(status=StudentStatus.ACTIVE).count(),
            'staff': Staff.query.join(User, Staff.user_id == User.id).filter(User.is_active.is_(True)).count(),
            'classes': SchoolClass.query.count(),
            'attendance_today': DashboardService._attendance_counts(
                AttendanceRecord.query.filter_by(date=today)
            )
        }

    @staticmethod
    def teacher_summary(user: User, today: date) -> Dict[str, Any]:
        classes = SchoolClass.query.filter_by(teacher_id=user.id).order_by(SchoolClass.name).all()
        return {
            'role': UserRole.TEACHER.value,
            'classes': [school_class.to_dict() for school_class in classes],
            'attendance_recorded_today': DashboardService._attendance_counts(
                AttendanceRecord.query.filter_by(date=today, recorded_by=user.id)
            ),
            'assignments': Assignment.query.filter_by(teacher_id=user.id).count()
        }

    @staticmethod
    def _child_summary(student: Student) -> Dict[str, Any]:
        return {
            'student': student.to_dict(),
            'attendance': AttendanceService.summarize(student.id),
            'results': [result.to_dict() for result in ResultService.get_student_results(student.id)],
            'results_summary': ResultService.summarize(student.id)
        }

    @staticmethod
    def parent_summary(user: User) -> Dict[str, Any]:
        children = user.guardian_profile.students if user.guardian_profile else []
        return {
            'role': UserRole.PARENT.value,
            'children': [DashboardService._child_summary(child) for child in children]
        }

    @staticmethod
    def student_summary(user: User) -> Dict[str, Any]:
        student = user.student_profile
        if student is None:
            return {'role': UserRole.STUDENT.value, 'student': None}

        view = DashboardService._child_summary(student)
        view['role'] = UserRole.STUDENT.value
        view['assignments'] = [
            assignment.to_dict() for assignment in
            Assignment.query.filter_by(class_id=student.class_id)
            .order_by(Assignment.due_date.desc()).limit(RECENT_LIMIT).all()
        ] if student.class_id else []
        return view
