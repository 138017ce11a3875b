"""Audit log API (admin only)."""
from flask import Blueprint, request
from flask_jwt_extended import jwt_required
from school_portal.models.audit_log import AuditLog
from school_portal.services.authorization import Operation
from school_portal.utils.decorators import operation_required
from school_portal.utils.helpers import success_response, get_pagination, paginated

audit_bp = Blueprint('audit', __name__)

@audit_bp.route('/', methods=['GET'])
@jwt_required()
@operation_required(Operation.VIEW_AUDIT_LOG)
def get_audit_log():
    """Page through audit entries, newest first, filtered by action, resource or user."""
    query = AuditLog.query

    action = request.args.get('action')
    resource_type = request.args.get('resource_type')
    user_id = request.args.get('user_id', type=int)

    if action:
        query = query.filter_by(action=action)
    if resource_type:
        query = query.filter_by(resource_type=resource_type)
    if user_id:
        query = query.filter_by(user_id=user_id)

    page, per_page = get_pagination()
    pagination = query.order_by(AuditLog.created_at.desc(), AuditLog.id.desc()) \
        .paginate(page=page, per_page=per_page, error_out=False)
    return success_response(data=paginated(pagination, 'entries'))
