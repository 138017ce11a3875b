"""Attendance API."""
from flask import Blueprint
from flask_jwt_extended import jwt_required
from school_portal.services.attendance_service import AttendanceService
from school_portal.services.authorization import Operation
from school_portal.utils.decorators import current_caller, operation_required
from school_portal.utils.helpers import success_response, get_json_body

attendance_bp = Blueprint('attendance', __name__)

@attendance_bp.route('/', methods=['POST'])
@jwt_required()
@operation_required(Operation.RECORD_ATTENDANCE)
def mark_attendance():
    """Record one day's marks for a batch of students.

    Expected JSON::

        {"date": "2024-03-01",
         "records": [{"studentId": 1, "status": "present"}, ...]}

    Re-sending a mark for the same student and day overwrites it.
    """
    data = get_json_body()
    result = AttendanceService.record_attendance(
        current_caller(),
        data.get('date'),
        data.get('records')
    )
    return success_response(
        data=result,
        message=f"Attendance saved for {result['count']} students"
    )
