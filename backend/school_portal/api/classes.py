"""Class Management API."""
from datetime import date
from flask import Blueprint, request
from flask_jwt_extended import jwt_required
from school_portal.models.school_class import SchoolClass
from school_portal.services.attendance_service import AttendanceService
from school_portal.services.authorization import Operation
from school_portal.services.class_service import ClassService
from school_portal.utils.decorators import current_caller, operation_required, teacher_required
from school_portal.utils.helpers import success_response, get_json_body
from school_portal.utils.validators import Validator

classes_bp = Blueprint('classes', __name__)

@classes_bp.route('/', methods=['GET'])
@jwt_required()
@teacher_required
def get_classes():
    classes = SchoolClass.query.order_by(SchoolClass.name).all()
    return success_response(data=[school_class.to_dict() for school_class in classes])

@classes_bp.route('/<int:class_id>', methods=['GET'])
@jwt_required()
@teacher_required
def get_class(class_id):
    """Class details with its roster."""
    school_class = ClassService.get_class(class_id)
    data = school_class.to_dict()
    data['students'] = [
        {'id': student.id, 'full_name': student.full_name, 'roll_number': student.roll_number}
        for student in sorted(school_class.students, key=lambda s: s.full_name)
    ]
    return success_response(data=data)

@classes_bp.route('/', methods=['POST'])
@jwt_required()
@operation_required(Operation.CREATE_CLASS)
def create_class():
    data = get_json_body()
    result = ClassService.create_class(current_caller(), data)
    return success_response(data=result, message="Class created successfully", status_code=201)

@classes_bp.route('/<int:class_id>', methods=['PUT'])
@jwt_required()
@operation_required(Operation.CREATE_CLASS)
def update_class(class_id):
    data = get_json_body()
    result = ClassService.update_class(current_caller(), class_id, data)
    return success_response(data=result, message="Class updated successfully")

@classes_bp.route('/<int:class_id>', methods=['DELETE'])
@jwt_required()
@operation_required(Operation.CREATE_CLASS)
def delete_class(class_id):
    ClassService.delete_class(current_caller(), class_id)
    return success_response(message="Class deleted successfully")

@classes_bp.route('/<int:class_id>/attendance', methods=['GET'])
@jwt_required()
@teacher_required
def get_class_attendance(class_id):
    """Roster for one day with each student's mark; defaults to today."""
    school_class = ClassService.get_class(class_id)
    day_value = request.args.get('date')
    day = Validator.validate_date(day_value) if day_value else date.today()

    return success_response(data={
        'class_id': school_class.id,
        'date': day.isoformat(),
        'students': AttendanceService.get_class_attendance(school_class.id, day)
    })
