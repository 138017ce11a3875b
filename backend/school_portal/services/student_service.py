"""Student management service."""
import io
from typing import Any, Dict, List, Optional
import pandas as pd
from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from school_portal import db
from school_portal.models.school_class import SchoolClass
from school_portal.models.student import Guardian, Student, StudentStatus
from school_portal.models.user import UserRole
from school_portal.services.audit_service import AuditService
from school_portal.services.auth_service import AuthService
from school_portal.services.authorization import Caller, Operation, authorize
from school_portal.utils.exceptions import ConflictError, NotFoundError, PortalError, ValidationError
from school_portal.utils.validators import StudentImportEntry, Validator

IMPORT_COLUMNS = ['email', 'password', 'name', 'rollNumber']
EXPORT_COLUMNS = ['roll_number', 'full_name', 'email', 'class_name', 'status', 'created_at']

class StudentService:
    """Service for managing students."""

    @staticmethod
    def create_student(entry: StudentImportEntry, guardian_id: Optional[int] = None) -> Student:
        """Create the login account and the student profile in one commit."""
        if Student.query.filter_by(roll_number=entry.roll_number).first():
            raise ConflictError(f"Roll number {entry.roll_number} already exists")
        if entry.class_id and not db.session.get(SchoolClass, entry.class_id):
            raise ValidationError(f"Class {entry.class_id} does not exist")

        try:
            user = AuthService.new_account(entry.email, entry.password, entry.name, UserRole.STUDENT)
            student = Student(
                user_id=user.id,
                roll_number=entry.roll_number,
                full_name=entry.name,
                class_id=entry.class_id
            )
            db.session.add(student)
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise ConflictError("Email or roll number already exists")

        if guardian_id:
            guardian = db.session.get(Guardian, guardian_id)
            if guardian:
                AuthService.link_students(guardian, [student.id])
        return student

    @staticmethod
    def register_student(data: Dict) -> Dict[str, Any]:
        """Public self-registration."""
        entry = Validator.parse_student(data)
        guardian_id = data.get('guardianId')
        guardian_id = Validator.validate_id(guardian_id, 'guardianId') if guardian_id else None

        student = StudentService.create_student(entry, guardian_id=guardian_id)
        AuthService.start_email_verification(student.user)
        AuditService.log(student.user_id, 'student_registered', 'student', resource_id=student.id,
                         details={'email': entry.email, 'name': entry.name, 'rollNumber': entry.roll_number})
        return {'userId': student.user_id, 'student': student.to_dict()}

    @staticmethod
    def add_student(caller: Caller, data: Dict) -> Dict[str, Any]:
        """Admin creation of a single student."""
        authorize(caller, Operation.MANAGE_RECORDS)

        entry = Validator.parse_student(data)
        student = StudentService.create_student(entry)
        AuthService.start_email_verification(student.user)
        AuditService.log(caller.user_id, 'student_created', 'student', resource_id=student.id,
                         details={'email': entry.email, 'rollNumber': entry.roll_number})
        return student.to_dict()

    @staticmethod
    def bulk_import(caller: Caller, students: Any) -> Dict[str, Any]:
        """Create many students, reporting successes and failures per row.

        The batch size is checked up front; each row then stands alone, so
        one bad row does not stop the others.
        """
        authorize(caller, Operation.BULK_IMPORT)
        Validator.validate_batch(students, current_app.config['IMPORT_MAX_BATCH'], 'students')

        results = []
        errors = []
        for index, record in enumerate(students):
            email = record.get('email') if isinstance(record, dict) else None
            try:
                entry = Validator.parse_student(record)
                student = StudentService.create_student(entry)
            except PortalError as e:
                errors.append({'row': index + 1, 'email': email, 'error': e.message})
                continue
            except SQLAlchemyError as e:
                db.session.rollback()
                current_app.logger.error(f"Bulk import row {index + 1} failed: {str(e)}")
                errors.append({'row': index + 1, 'email': email, 'error': 'Database error'})
                continue

            results.append({
                'row': index + 1,
                'email': entry.email,
                'userId': student.user_id,
                'studentId': student.id,
                'success': True
            })
            AuthService.start_email_verification(student.user)

        AuditService.log(
            caller.user_id,
            'bulk_import_students',
            'student',
            details={'total': len(students), 'success': len(results), 'failed': len(errors)}
        )
        return {
            'total': len(students),
            'successful': len(results),
            'failed': len(errors),
            'results': results,
            'errors': errors
        }

    @staticmethod
    def import_csv(caller: Caller, stream) -> Dict[str, Any]:
        """Bulk import from an uploaded CSV file."""
        authorize(caller, Operation.BULK_IMPORT)
        try:
            df = pd.read_csv(stream, dtype=str, keep_default_na=False)
        except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
            raise ValidationError(f"Error reading file: {str(e)}")

        missing_columns = [col for col in IMPORT_COLUMNS if col not in df.columns]
        if missing_columns:
            raise ValidationError(f"Missing columns: {', '.join(missing_columns)}")

        records = []
        for row in df.to_dict(orient='records'):
            if not row.get('classId'):
                row.pop('classId', None)
            records.append(row)
        return StudentService.bulk_import(caller, records)

    @staticmethod
    def export_csv(students: List[Student]) -> str:
        df = pd.DataFrame(
            [student.to_dict() for student in students],
            columns=EXPORT_COLUMNS
        )
        output = io.StringIO()
        df.to_csv(output, index=False, encoding='utf-8-sig')
        return output.getvalue()

    @staticmethod
    def get_student(student_id: int) -> Student:
        student = db.session.get(Student, student_id)
        if not student:
            raise NotFoundError("Student not found")
        return student

    @staticmethod
    def update_student(caller: Caller, student_id: int, data: Dict) -> Dict[str, Any]:
        authorize(caller, Operation.MANAGE_RECORDS)
        student = StudentService.get_student(student_id)

        if 'full_name' in data:
            student.full_name = Validator.validate_name(data['full_name'])
            student.user.name = student.full_name
        if 'roll_number' in data:
            roll_number = Validator.validate_roll_number(data['roll_number'])
            clash = Student.query.filter_by(roll_number=roll_number).first()
            if clash and clash.id != student.id:
                raise ConflictError(f"Roll number {roll_number} already exists")
            student.roll_number = roll_number
        if 'class_id' in data:
            class_id = data['class_id']
            if class_id is not None:
                class_id = Validator.validate_id(class_id, 'class_id')
                if not db.session.get(SchoolClass, class_id):
                    raise ValidationError(f"Class {class_id} does not exist")
            student.class_id = class_id
        if 'status' in data:
            try:
                student.status = StudentStatus(str(data['status']).lower())
            except ValueError:
                raise ValidationError("Invalid student status")
        if 'gender' in data:
            student.gender = Validator.validate_text(data['gender'], 'gender', 20, required=False)
        if 'address' in data:
            student.address = Validator.validate_text(data['address'], 'address', 500, required=False)
        if 'date_of_birth' in data:
            student.date_of_birth = Validator.validate_date(data['date_of_birth'], max_future_days=0) \
                if data['date_of_birth'] else None

        db.session.commit()
        AuditService.log(caller.user_id, 'student_updated', 'student', resource_id=student.id,
                         details={'fields': sorted(data.keys())})
        return student.to_dict()

    @staticmethod
    def withdraw_student(caller: Caller, student_id: int) -> None:
        """Soft delete: mark withdrawn and deactivate the login."""
        authorize(caller, Operation.MANAGE_RECORDS)
        student = StudentService.get_student(student_id)

        student.status = StudentStatus.WITHDRAWN
        student.user.is_active = False
        AuthService.revoke_login_codes(student.user_id)
        db.session.commit()
        AuditService.log(caller.user_id, 'student_withdrawn', 'student', resource_id=student.id)
