"""School announcements."""
from typing import Any, Dict, Set
from school_portal import db
from school_portal.models.announcement import Announcement, Audience
from school_portal.models.user import User, UserRole
from school_portal.services.audit_service import AuditService
from school_portal.services.authorization import Caller, Operation, authorize
from school_portal.utils.exceptions import NotFoundError, ValidationError
from school_portal.utils.validators import Validator

ROLE_AUDIENCES = {
    UserRole.STUDENT: Audience.STUDENTS,
    UserRole.PARENT: Audience.PARENTS,
    UserRole.TEACHER: Audience.STAFF,
    UserRole.ADMIN: Audience.STAFF,
}

def audiences_for(user: User) -> Set[Audience]:
    """Audiences whose announcements ``user`` should see."""
    audiences = {Audience.ALL}
    audiences.update(ROLE_AUDIENCES[role] for role in user.roles)
    return audiences

class AnnouncementService:

    @staticmethod
    def create(caller: Caller, data: Dict) -> Dict[str, Any]:
        authorize(caller, Operation.POST_ANNOUNCEMENT)

        title = Validator.validate_text(data.get('title'), 'title', 200)
        body = Validator.validate_text(data.get('body'), 'body', 10000)
        try:
            audience = Audience(str(data.get('audience') or 'all').lower())
        except ValueError:
            raise ValidationError(f"Audience must be one of: {', '.join(a.value for a in Audience)}")

        announcement = Announcement(title=title, body=body, audience=audience, author_id=caller.user_id)
        db.session.add(announcement)
        db.session.commit()

        AuditService.log(caller.user_id, 'announcement_posted', 'announcement', resource_id=announcement.id,
                         details={'title': title, 'audience': audience.value})
        return announcement.to_dict()

    @staticmethod
    def visible_to(user: User):
        """Query of announcements for the user's audiences, newest first."""
        if user.is_admin():
            query = Announcement.query
        else:
            query = Announcement.query.filter(Announcement.audience.in_(audiences_for(user)))
        return query.order_by(Announcement.created_at.desc(), Announcement.id.desc())

    @staticmethod
    def delete(caller: Caller, announcement_id: int) -> None:
        authorize(caller, Operation.MANAGE_RECORDS)
        announcement = db.session.get(Announcement, announcement_id)
        if not announcement:
            raise NotFoundError("Announcement not found")

        announcement.delete()
        AuditService.log(caller.user_id, 'announcement_deleted', 'announcement', resource_id=announcement_id)
