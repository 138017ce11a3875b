"""Assignments API."""
from flask import Blueprint, request
from flask_jwt_extended import jwt_required
from school_portal.services.authorization import Operation
from school_portal.services.coursework_service import AssignmentService
from school_portal.utils.decorators import current_caller, current_user, operation_required
from school_portal.utils.exceptions import AuthorizationError
from school_portal.utils.helpers import success_response, get_json_body

assignments_bp = Blueprint('assignments', __name__)

def visible_class_ids(user):
    """Classes whose coursework a non-staff user may read."""
    if user.student_profile and user.student_profile.class_id:
        return {user.student_profile.class_id}
    if user.guardian_profile:
        return {s.class_id for s in user.guardian_profile.students if s.class_id}
    return set()

@assignments_bp.route('/', methods=['GET'])
@jwt_required()
def get_assignments():
    """Staff may filter by ``class_id``; students and parents see their own classes."""
    user = current_user()
    class_id = request.args.get('class_id', type=int)

    if user.is_teacher():
        assignments = AssignmentService.list_for_class(class_id)
    else:
        allowed = visible_class_ids(user)
        if class_id and class_id not in allowed:
            raise AuthorizationError("You do not have access to this class")
        assignments = [
            assignment
            for cid in sorted({class_id} if class_id else allowed)
            for assignment in AssignmentService.list_for_class(cid)
        ]

    return success_response(data=[assignment.to_dict() for assignment in assignments])

@assignments_bp.route('/<int:assignment_id>', methods=['GET'])
@jwt_required()
def get_assignment(assignment_id):
    user = current_user()
    assignment = AssignmentService.get_assignment(assignment_id)
    if not user.is_teacher() and assignment.class_id not in visible_class_ids(user):
        raise AuthorizationError("You do not have access to this assignment")
    return success_response(data=assignment.to_dict())

@assignments_bp.route('/', methods=['POST'])
@jwt_required()
@operation_required(Operation.MANAGE_COURSEWORK)
def create_assignment():
    data = get_json_body()
    result = AssignmentService.create_assignment(current_caller(), data)
    return success_response(data=result, message="Assignment created successfully", status_code=201)

@assignments_bp.route('/<int:assignment_id>', methods=['PUT'])
@jwt_required()
@operation_required(Operation.MANAGE_COURSEWORK)
def update_assignment(assignment_id):
    data = get_json_body()
    result = AssignmentService.update_assignment(current_caller(), assignment_id, data)
    return success_response(data=result, message="Assignment updated successfully")

@assignments_bp.route('/<int:assignment_id>', methods=['DELETE'])
@jwt_required()
@operation_required(Operation.MANAGE_COURSEWORK)
def delete_assignment(assignment_id):
    AssignmentService.delete_assignment(current_caller(), assignment_id)
    return success_response(message="Assignment deleted successfully")
