"""Role based authorization gate."""
from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet

from school_portal.models.user import User, UserRole
from school_portal.utils.exceptions import AuthorizationError

@dataclass(frozen=True)
class Caller:
    """Authenticated identity of the user making a request."""
    user_id: int
    roles: FrozenSet[UserRole]

    @classmethod
    def from_user(cls, user: User) -> 'Caller':
        return cls(user_id=user.id, roles=frozenset(user.roles))

    def has_any(self, roles) -> bool:
        return bool(self.roles & frozenset(roles))

class Operation(Enum):
    """Operations guarded by role membership."""
    RECORD_ATTENDANCE = 'record attendance'
    RECORD_RESULTS = 'record results'
    SEND_NOTIFICATION = 'send notifications'
    POST_ANNOUNCEMENT = 'post announcements'
    MANAGE_COURSEWORK = 'manage assignments and timetables'
    VIEW_RECORDS = 'view student records'
    CREATE_USER = 'create users'
    CREATE_CLASS = 'create classes'
    BULK_IMPORT = 'bulk import students'
    MANAGE_RECORDS = 'manage student and staff records'
    VIEW_AUDIT_LOG = 'view the audit log'

STAFF_ROLES = frozenset({UserRole.TEACHER, UserRole.ADMIN})
ADMIN_ROLES = frozenset({UserRole.ADMIN})

PERMISSIONS = {
    Operation.RECORD_ATTENDANCE: STAFF_ROLES,
    Operation.RECORD_RESULTS: STAFF_ROLES,
    Operation.SEND_NOTIFICATION: STAFF_ROLES,
    Operation.POST_ANNOUNCEMENT: STAFF_ROLES,
    Operation.MANAGE_COURSEWORK: STAFF_ROLES,
    Operation.VIEW_RECORDS: STAFF_ROLES,
    Operation.CREATE_USER: ADMIN_ROLES,
    Operation.CREATE_CLASS: ADMIN_ROLES,
    Operation.BULK_IMPORT: ADMIN_ROLES,
    Operation.MANAGE_RECORDS: ADMIN_ROLES,
    Operation.VIEW_AUDIT_LOG: ADMIN_ROLES,
}

def allowed_roles(operation: Operation) -> FrozenSet[UserRole]:
    return PERMISSIONS[operation]

def is_allowed(caller: Caller, operation: Operation) -> bool:
    return caller.has_any(PERMISSIONS[operation])

def authorize(caller: Caller, operation: Operation) -> None:
    """Raise AuthorizationError unless the caller may perform ``operation``."""
    if not is_allowed(caller, operation):
        names = ' and '.join(sorted(f'{role.value}s' for role in PERMISSIONS[operation]))
        raise AuthorizationError(f"Only {names} can {operation.value}")

def authorize_student_access(user: User, student) -> None:
    """Student records are visible to staff, the student and their guardians."""
    if user.is_teacher() or student.user_id == user.id:
        return
    guardian = getattr(user, 'guardian_profile', None)
    if guardian is not None and student in guardian.students:
        return
    raise AuthorizationError("You do not have access to this student's records")
