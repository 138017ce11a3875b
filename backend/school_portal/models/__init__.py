"""Models package with all models."""
from .base import BaseModel
from .user import User, UserRole, RoleAssignment
from .student import Student, StudentStatus, Guardian, student_guardians
from .staff import Staff
from .school_class import SchoolClass
from .attendance import AttendanceRecord, AttendanceStatus
from .result import ResultRecord
from .assignment import Assignment
from .timetable import TimetableEntry, WeekDay
from .announcement import Announcement, Audience
from .notification import Notification
from .audit_log import AuditLog
from .verification import VerificationToken, LoginCode

__all__ = [
    'BaseModel', 'User', 'UserRole', 'RoleAssignment',
    'Student', 'StudentStatus', 'Guardian', 'student_guardians',
    'Staff', 'SchoolClass', 'AttendanceRecord', 'AttendanceStatus',
    'ResultRecord', 'Assignment', 'TimetableEntry', 'WeekDay',
    'Announcement', 'Audience', 'Notification', 'AuditLog',
    'VerificationToken', 'LoginCode'
]
