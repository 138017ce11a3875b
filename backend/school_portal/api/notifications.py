"""Notifications API for in-app messaging."""
from flask import Blueprint, request
from flask_jwt_extended import jwt_required
from school_portal.services.authorization import Operation
from school_portal.services.notification_service import NotificationService
from school_portal.utils.decorators import current_caller, current_user, operation_required
from school_portal.utils.helpers import success_response, get_json_body, get_pagination, paginated

notifications_bp = Blueprint('notifications', __name__)

@notifications_bp.route('/', methods=['GET'])
@jwt_required()
def get_notifications():
    """Get the caller's notifications; ``unread_only=true`` filters read ones out."""
    unread_only = request.args.get('unread_only', '').lower() == 'true'
    page, per_page = get_pagination()

    pagination = NotificationService.for_user(current_user().id, unread_only=unread_only) \
        .paginate(page=page, per_page=per_page, error_out=False)
    return success_response(data=paginated(pagination, 'notifications'))

@notifications_bp.route('/', methods=['POST'])
@jwt_required()
@operation_required(Operation.SEND_NOTIFICATION)
def send_notification():
    """Send an in-app notification (teacher/admin), optionally copied by email."""
    data = get_json_body()
    notifications = NotificationService.send(
        current_caller(),
        data.get('userIds'),
        data.get('title'),
        data.get('message'),
        type=data.get('type', 'info'),
        send_email=bool(data.get('sendEmail', False))
    )
    return success_response(
        data={'notifications': notifications, 'count': len(notifications)},
        message=f"Notification sent to {len(notifications)} users",
        status_code=201
    )

@notifications_bp.route('/<int:notification_id>/read', methods=['POST'])
@jwt_required()
def mark_read(notification_id):
    result = NotificationService.mark_read(current_user().id, notification_id)
    return success_response(data=result, message="Notification marked as read")
