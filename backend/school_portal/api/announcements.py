"""Announcements API."""
from flask import Blueprint
from flask_jwt_extended import jwt_required
from school_portal.services.announcement_service import AnnouncementService
from school_portal.services.authorization import Operation
from school_portal.utils.decorators import current_caller, current_user, operation_required
from school_portal.utils.helpers import success_response, get_json_body, get_pagination, paginated

announcements_bp = Blueprint('announcements', __name__)

@announcements_bp.route('/', methods=['GET'])
@jwt_required()
def get_announcements():
    """Announcements addressed to the caller, newest first."""
    page, per_page = get_pagination()
    pagination = AnnouncementService.visible_to(current_user()) \
        .paginate(page=page, per_page=per_page, error_out=False)
    return success_response(data=paginated(pagination, 'announcements'))

@announcements_bp.route('/', methods=['POST'])
@jwt_required()
@operation_required(Operation.POST_ANNOUNCEMENT)
def create_announcement():
    data = get_json_body()
    result = AnnouncementService.create(current_caller(), data)
    return success_response(data=result, message="Announcement posted", status_code=201)

@announcements_bp.route('/<int:announcement_id>', methods=['DELETE'])
@jwt_required()
@operation_required(Operation.MANAGE_RECORDS)
def delete_announcement(announcement_id):
    AnnouncementService.delete(current_caller(), announcement_id)
    return success_response(message="Announcement deleted")
