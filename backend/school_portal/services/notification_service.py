"""In-app notifications with optional email copies."""
from typing import Any, Dict, List
from markupsafe import escape
from school_portal import db
from school_portal.models.notification import Notification
from school_portal.models.user import User
from school_portal.services.audit_service import AuditService
from school_portal.services.authorization import Caller, Operation, authorize
from school_portal.services.email_service import EmailService
from school_portal.utils.exceptions import NotFoundError, ValidationError
from school_portal.utils.validators import Validator

NOTIFICATION_TYPES = {'info', 'warning', 'success', 'alert'}

class NotificationService:

    @staticmethod
    def send(caller: Caller, user_ids: Any, title: Any, message: Any,
             type: str = 'info', send_email: bool = False) -> List[Dict]:
        authorize(caller, Operation.SEND_NOTIFICATION)

        if not isinstance(user_ids, list) or not user_ids:
            raise ValidationError("User IDs array is required")
        user_ids = [Validator.validate_id(user_id, 'userId') for user_id in user_ids]
        title = Validator.validate_text(title, 'title', 200)
        message = Validator.validate_text(message, 'message', 5000)
        type = type or 'info'
        if type not in NOTIFICATION_TYPES:
            raise ValidationError(f"Type must be one of: {', '.join(sorted(NOTIFICATION_TYPES))}")

        recipients = User.query.filter(User.id.in_(user_ids)).all()
        if len(recipients) != len(set(user_ids)):
            raise ValidationError("One or more users do not exist")

        notifications = [
            Notification(user_id=user.id, title=title, message=message, type=type)
            for user in recipients
        ]
        db.session.add_all(notifications)
        db.session.commit()

        if send_email:
            html = (
                f"<h2>{escape(title)}</h2><p>{escape(message)}</p>"
                "<p style=\"color: #666; font-size: 12px;\">"
                "This is an automated notification from School Management Portal.</p>"
            )
            for user in recipients:
                EmailService.send_quietly([user.email], title, html)

        AuditService.log(
            caller.user_id,
            'notification_sent',
            'notification',
            details={'title': title, 'recipientCount': len(recipients), 'sendEmail': bool(send_email)}
        )
        return [notification.to_dict() for notification in notifications]

    @staticmethod
    def for_user(user_id: int, unread_only: bool = False):
        query = Notification.query.filter_by(user_id=user_id)
        if unread_only:
            query = query.filter_by(read=False)
        return query.order_by(Notification.created_at.desc(), Notification.id.desc())

    @staticmethod
    def mark_read(user_id: int, notification_id: int) -> Dict:
        """Mark one of the user's own notifications read."""
        notification = Notification.query.filter_by(id=notification_id, user_id=user_id).first()
        if not notification:
            raise NotFoundError("Notification not found")
        notification.read = True
        db.session.commit()
        return notification.to_dict()
