"""Student Management API."""
from flask import Blueprint, Response, request
from flask_jwt_extended import jwt_required
from school_portal import limiter
from school_portal.models.student import Student, StudentStatus
from school_portal.services.attendance_service import AttendanceService
from school_portal.services.authorization import Operation, authorize_student_access
from school_portal.services.result_service import ResultService
from school_portal.services.student_service import StudentService
from school_portal.utils.decorators import admin_required, current_caller, current_user, operation_required, teacher_required
from school_portal.utils.exceptions import ValidationError
from school_portal.utils.helpers import success_response, get_json_body, get_pagination, paginated
from school_portal.utils.validators import Validator

students_bp = Blueprint('students', __name__)

# History reads are not bound by the recording window
HISTORY_MAX_FUTURE_DAYS = 366

def _parse_bound(value):
    return Validator.validate_date(value, max_future_days=HISTORY_MAX_FUTURE_DAYS) if value else None

def _filtered_query():
    query = Student.query

    class_id = request.args.get('class_id', type=int)
    status = request.args.get('status')
    search = request.args.get('search', '').strip()

    if class_id:
        query = query.filter_by(class_id=class_id)
    if status:
        try:
            query = query.filter_by(status=StudentStatus(status.lower()))
        except ValueError:
            raise ValidationError("Invalid student status")
    if search:
        pattern = f'%{search}%'
        query = query.filter(
            Student.full_name.ilike(pattern) | Student.roll_number.ilike(pattern)
        )
    return query.order_by(Student.full_name)

@students_bp.route('/', methods=['GET'])
@jwt_required()
@teacher_required
def get_students():
    """List students with optional class, status and search filters."""
    page, per_page = get_pagination()
    pagination = _filtered_query().paginate(page=page, per_page=per_page, error_out=False)
    return success_response(data=paginated(pagination, 'students'))

@students_bp.route('/<int:student_id>', methods=['GET'])
@jwt_required()
def get_student(student_id):
    student = StudentService.get_student(student_id)
    authorize_student_access(current_user(), student)

    data = student.to_dict()
    data['guardians'] = [
        {'id': guardian.id, 'name': guardian.name, 'phone': guardian.phone}
        for guardian in student.guardians
    ]
    return success_response(data=data)

@students_bp.route('/', methods=['POST'])
@jwt_required()
@operation_required(Operation.MANAGE_RECORDS)
def create_student():
    """Create single student."""
    data = get_json_body()
    result = StudentService.add_student(current_caller(), data)
    return success_response(data=result, message="Student created successfully", status_code=201)

@students_bp.route('/<int:student_id>', methods=['PUT'])
@jwt_required()
@operation_required(Operation.MANAGE_RECORDS)
def update_student(student_id):
    data = get_json_body()
    result = StudentService.update_student(current_caller(), student_id, data)
    return success_response(data=result, message="Student updated successfully")

@students_bp.route('/<int:student_id>', methods=['DELETE'])
@jwt_required()
@operation_required(Operation.MANAGE_RECORDS)
def delete_student(student_id):
    """Withdraw a student and deactivate their login."""
    StudentService.withdraw_student(current_caller(), student_id)
    return success_response(message="Student withdrawn successfully")

@students_bp.route('/bulk', methods=['POST'])
@jwt_required()
@operation_required(Operation.BULK_IMPORT)
@limiter.limit("10 per hour")
def create_students_bulk():
    """Create many students from a JSON array."""
    data = get_json_body()
    result = StudentService.bulk_import(current_caller(), data.get('students'))
    return success_response(
        data=result,
        message=f"Bulk import completed: {result['successful']} succeeded, {result['failed']} failed"
    )

@students_bp.route('/bulk/upload', methods=['POST'])
@jwt_required()
@operation_required(Operation.BULK_IMPORT)
@limiter.limit("10 per hour")
def upload_students_csv():
    """Create many students from an uploaded CSV file."""
    if 'file' not in request.files:
        raise ValidationError("No file uploaded")

    file = request.files['file']
    if not file.filename or not file.filename.lower().endswith('.csv'):
        raise ValidationError("Only CSV files are supported")

    result = StudentService.import_csv(current_caller(), file.stream)
    return success_response(
        data=result,
        message=f"Bulk import completed: {result['successful']} succeeded, {result['failed']} failed"
    )

@students_bp.route('/export', methods=['GET'])
@jwt_required()
@admin_required
def export_students():
    """Export the filtered student list as CSV."""
    csv_data = StudentService.export_csv(_filtered_query().all())
    return Response(
        csv_data,
        mimetype='text/csv',
        headers={'Content-Disposition': 'attachment; filename=students.csv'}
    )

@students_bp.route('/<int:student_id>/attendance', methods=['GET'])
@jwt_required()
def get_student_attendance(student_id):
    student = StudentService.get_student(student_id)
    authorize_student_access(current_user(), student)

    start = request.args.get('from')
    end = request.args.get('to')
    records = AttendanceService.get_student_attendance(
        student.id,
        start=_parse_bound(start),
        end=_parse_bound(end)
    )
    return success_response(data={
        'student_id': student.id,
        'records': [record.to_dict() for record in records],
        'summary': AttendanceService.summarize(student.id)
    })

@students_bp.route('/<int:student_id>/results', methods=['GET'])
@jwt_required()
def get_student_results(student_id):
    student = StudentService.get_student(student_id)
    authorize_student_access(current_user(), student)

    results = ResultService.get_student_results(student.id)
    return success_response(data={
        'student_id': student.id,
        'results': [result.to_dict() for result in results],
        'summary': ResultService.summarize(student.id)
    })
