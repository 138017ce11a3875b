"""Validation utilities for the application.

Raw request payloads are checked here and turned into typed entries. Batch
helpers check every member before returning, so a single bad entry rejects
the whole batch before anything is written.
"""
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, List, Optional

from school_portal.models.attendance import AttendanceStatus
from school_portal.utils.exceptions import ValidationError

DATE_PATTERN = re.compile(r'[0-9]{4}-[0-9]{2}-[0-9]{2}')
EMAIL_PATTERN = re.compile(r'[^\s@]+@[^\s@]+\.[^\s@]+')
ROLL_NUMBER_PATTERN = re.compile(r'[A-Za-z0-9-]+')
PHONE_PATTERN = re.compile(r'\+?[0-9]{10,15}')
TIME_PATTERN = re.compile(r'([01][0-9]|2[0-3]):[0-5][0-9]')

@dataclass(frozen=True)
class AttendanceEntry:
    student_id: int
    status: AttendanceStatus

@dataclass(frozen=True)
class ResultEntry:
    student_id: int
    subject: str
    score: int

@dataclass(frozen=True)
class StudentImportEntry:
    email: str
    password: str
    name: str
    roll_number: str
    class_id: Optional[int] = None

class Validator:
    """Validation helper class."""

    @staticmethod
    def validate_date(value: Any, max_future_days: int = 30, today: date = None) -> date:
        """Parse a YYYY-MM-DD calendar date no further ahead than allowed."""
        if not value or not isinstance(value, str):
            raise ValidationError("Date is required")
        if not DATE_PATTERN.fullmatch(value):
            raise ValidationError("Date must be in YYYY-MM-DD format")
        try:
            parsed = datetime.strptime(value, '%Y-%m-%d').date()
        except ValueError:
            raise ValidationError("Invalid date")

        today = today or date.today()
        if parsed > today + timedelta(days=max_future_days):
            raise ValidationError(f"Date cannot be more than {max_future_days} days in the future")
        return parsed

    @staticmethod
    def validate_status(value: Any) -> AttendanceStatus:
        """Case-insensitive attendance status lookup."""
        if not value or not isinstance(value, str):
            raise ValidationError("Each record must have a valid status")
        try:
            return AttendanceStatus(value.strip().lower())
        except ValueError:
            allowed = ', '.join(status.value for status in AttendanceStatus)
            raise ValidationError(f"Status must be one of: {allowed}")

    @staticmethod
    def validate_score(value: Any) -> int:
        if value is None:
            raise ValidationError("Score is required")
        # bool is an int subclass; True is not a score
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError("Score must be a whole number")
        if value < 0 or value > 100:
            raise ValidationError("Score must be between 0 and 100")
        return value

    @staticmethod
    def validate_id(value: Any, field: str = 'studentId') -> int:
        """Accept a positive integer or its decimal string form."""
        if isinstance(value, bool):
            raise ValidationError(f"Invalid {field}")
        if isinstance(value, str) and value.strip().isdigit():
            value = int(value.strip())
        if not isinstance(value, int) or value <= 0:
            raise ValidationError(f"Each record must have a valid {field}")
        return value

    @staticmethod
    def validate_batch(records: Any, max_size: int, label: str = 'records') -> List:
        if not isinstance(records, list):
            raise ValidationError(f"{label.capitalize()} must be an array")
        if not records:
            raise ValidationError(f"{label.capitalize()} array cannot be empty")
        if len(records) > max_size:
            raise ValidationError(f"Maximum {max_size} {label} per request")
        return records

    @staticmethod
    def validate_email(email: Any) -> str:
        """Validate email format and return it normalised."""
        if not email or not isinstance(email, str):
            raise ValidationError("Email is required")
        email = email.strip().lower()
        if len(email) > 255:
            raise ValidationError("Email must be less than 255 characters")
        if not EMAIL_PATTERN.fullmatch(email):
            raise ValidationError("Invalid email format")
        return email

    @staticmethod
    def validate_password(password: Any) -> str:
        """Validate password strength."""
        if not password or not isinstance(password, str):
            raise ValidationError("Password is required")
        if len(password) < 8:
            raise ValidationError("Password must be at least 8 characters long")
        if len(password) > 128:
            raise ValidationError("Password is too long")
        if not re.search(r'[A-Z]', password):
            raise ValidationError("Password must contain at least one uppercase letter")
        if not re.search(r'[a-z]', password):
            raise ValidationError("Password must contain at least one lowercase letter")
        if not re.search(r'[0-9]', password):
            raise ValidationError("Password must contain at least one number")
        return password

    @staticmethod
    def validate_name(name: Any) -> str:
        """Validate a person's name."""
        if not name or not isinstance(name, str) or not name.strip():
            raise ValidationError("Name is required")
        name = name.strip()
        if len(name) < 2:
            raise ValidationError("Name must be at least 2 characters long")
        if len(name) > 100:
            raise ValidationError("Name must be less than 100 characters")
        if '<' in name or '>' in name:
            raise ValidationError("Name contains invalid characters")
        return name

    @staticmethod
    def validate_roll_number(roll_number: Any) -> str:
        if not roll_number or not isinstance(roll_number, str) or not roll_number.strip():
            raise ValidationError("Roll number is required")
        roll_number = roll_number.strip()
        if len(roll_number) > 50:
            raise ValidationError("Roll number must be less than 50 characters")
        if not ROLL_NUMBER_PATTERN.fullmatch(roll_number):
            raise ValidationError("Roll number must contain only letters, numbers, and hyphens")
        return roll_number

    @staticmethod
    def validate_phone(phone: Any) -> Optional[str]:
        """Optional phone number; separators are stripped before checking."""
        if not phone:
            return None
        if not isinstance(phone, str):
            raise ValidationError("Invalid phone number format")
        clean = re.sub(r'[\s\-()]', '', phone)
        if not PHONE_PATTERN.fullmatch(clean):
            raise ValidationError(
                "Invalid phone number format. Must be 10-15 digits, optionally starting with +"
            )
        return clean

    @staticmethod
    def validate_text(value: Any, field: str, max_length: int, required: bool = True) -> Optional[str]:
        """Trimmed free text of bounded length."""
        if value is None or (isinstance(value, str) and not value.strip()):
            if required:
                raise ValidationError(f"{field.capitalize()} is required")
            return None
        if not isinstance(value, str):
            raise ValidationError(f"{field.capitalize()} must be text")
        value = value.strip()
        if len(value) > max_length:
            raise ValidationError(f"{field.capitalize()} must be at most {max_length} characters")
        return value

    @staticmethod
    def validate_time(value: Any, field: str = 'time'):
        if not isinstance(value, str) or not TIME_PATTERN.fullmatch(value):
            raise ValidationError(f"{field.capitalize()} must be in HH:MM format")
        return datetime.strptime(value, '%H:%M').time()

    # Batch parsers

    @staticmethod
    def parse_attendance_records(records: Any, max_size: int = 200) -> List[AttendanceEntry]:
        Validator.validate_batch(records, max_size, 'attendance records')

        entries = []
        for record in records:
            if not isinstance(record, dict):
                raise ValidationError("Each attendance record must be an object")
            entries.append(AttendanceEntry(
                student_id=Validator.validate_id(record.get('studentId')),
                status=Validator.validate_status(record.get('status'))
            ))
        return entries

    @staticmethod
    def parse_result(record: Any) -> ResultEntry:
        if not isinstance(record, dict):
            raise ValidationError("Each result must be an object")
        if record.get('studentId') is None or not record.get('subject') or 'score' not in record:
            raise ValidationError("Student ID, subject, and score are required")
        return ResultEntry(
            student_id=Validator.validate_id(record.get('studentId')),
            subject=Validator.validate_text(record.get('subject'), 'subject', 100),
            score=Validator.validate_score(record.get('score'))
        )

    @staticmethod
    def parse_result_records(records: Any, max_size: int = 200) -> List[ResultEntry]:
        Validator.validate_batch(records, max_size, 'results')
        return [Validator.parse_result(record) for record in records]

    @staticmethod
    def parse_student(record: Any) -> StudentImportEntry:
        if not isinstance(record, dict):
            raise ValidationError("Each student must be an object")
        if not all(record.get(field) for field in ('email', 'password', 'name', 'rollNumber')):
            raise ValidationError("Missing required fields")

        class_id = record.get('classId')
        return StudentImportEntry(
            email=Validator.validate_email(record['email']),
            password=Validator.validate_password(record['password']),
            name=Validator.validate_name(record['name']),
            roll_number=Validator.validate_roll_number(record['rollNumber']),
            class_id=Validator.validate_id(class_id, 'classId') if class_id else None
        )
