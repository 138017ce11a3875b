"""Staff Management API."""
from flask import Blueprint, request
from flask_jwt_extended import jwt_required
from school_portal.models.staff import Staff
from school_portal.models.user import User
from school_portal.services.authorization import Operation
from school_portal.services.staff_service import StaffService
from school_portal.utils.decorators import current_caller, operation_required, teacher_required
from school_portal.utils.helpers import success_response, get_json_body, get_pagination, paginated

staff_bp = Blueprint('staff', __name__)

@staff_bp.route('/', methods=['GET'])
@jwt_required()
@teacher_required
def get_staff_list():
    """List staff, optionally only active members or one subject."""
    query = Staff.query.join(User, Staff.user_id == User.id)

    subject = request.args.get('subject')
    if subject:
        query = query.filter(Staff.subject.ilike(subject))
    if request.args.get('active') == 'true':
        query = query.filter(User.is_active.is_(True))

    page, per_page = get_pagination()
    pagination = query.order_by(Staff.full_name).paginate(page=page, per_page=per_page, error_out=False)
    return success_response(data=paginated(pagination, 'staff'))

@staff_bp.route('/<int:staff_id>', methods=['GET'])
@jwt_required()
@teacher_required
def get_staff(staff_id):
    return success_response(data=StaffService.get_staff(staff_id).to_dict())

@staff_bp.route('/', methods=['POST'])
@jwt_required()
@operation_required(Operation.CREATE_USER)
def create_staff():
    data = get_json_body()
    result = StaffService.create_staff(current_caller(), data)
    return success_response(data=result, message="Staff member created successfully", status_code=201)

@staff_bp.route('/<int:staff_id>', methods=['PUT'])
@jwt_required()
@operation_required(Operation.MANAGE_RECORDS)
def update_staff(staff_id):
    data = get_json_body()
    result = StaffService.update_staff(current_caller(), staff_id, data)
    return success_response(data=result, message="Staff member updated successfully")

@staff_bp.route('/<int:staff_id>', methods=['DELETE'])
@jwt_required()
@operation_required(Operation.MANAGE_RECORDS)
def delete_staff(staff_id):
    """Deactivate the staff member's login; the profile is kept."""
    StaffService.deactivate_staff(current_caller(), staff_id)
    return success_response(message="Staff member deactivated successfully")
