"""Timetable API."""
from flask import Blueprint
from flask_jwt_extended import jwt_required
from school_portal.services.authorization import Operation
from school_portal.services.class_service import ClassService
from school_portal.services.coursework_service import TimetableService
from school_portal.utils.decorators import current_caller, operation_required
from school_portal.utils.helpers import success_response, get_json_body

timetable_bp = Blueprint('timetable', __name__)

@timetable_bp.route('/class/<int:class_id>', methods=['GET'])
@jwt_required()
def get_class_timetable(class_id):
    """Weekly timetable of a class; readable by any signed-in user."""
    school_class = ClassService.get_class(class_id)
    return success_response(data={
        'class_id': school_class.id,
        'class_name': school_class.name,
        'week': TimetableService.for_class(school_class.id)
    })

@timetable_bp.route('/', methods=['POST'])
@jwt_required()
@operation_required(Operation.MANAGE_COURSEWORK)
def create_entry():
    data = get_json_body()
    result = TimetableService.create_entry(current_caller(), data)
    return success_response(data=result, message="Timetable entry created", status_code=201)

@timetable_bp.route('/<int:entry_id>', methods=['PUT'])
@jwt_required()
@operation_required(Operation.MANAGE_COURSEWORK)
def update_entry(entry_id):
    data = get_json_body()
    result = TimetableService.update_entry(current_caller(), entry_id, data)
    return success_response(data=result, message="Timetable entry updated")

@timetable_bp.route('/<int:entry_id>', methods=['DELETE'])
@jwt_required()
@operation_required(Operation.MANAGE_COURSEWORK)
def delete_entry(entry_id):
    TimetableService.delete_entry(current_caller(), entry_id)
    return success_response(message="Timetable entry deleted")
