"""Authentication service for user management."""
import secrets
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable
from flask import current_app
from flask_jwt_extended import create_access_token, create_refresh_token
from school_portal import db
from school_portal.models.student import Guardian, Student
from school_portal.models.user import User, UserRole
from school_portal.models.verification import LoginCode, VerificationToken
from school_portal.services.audit_service import AuditService
from school_portal.services.authorization import Caller, Operation, authorize
from school_portal.services.email_service import EmailService
from school_portal.utils.exceptions import (
    AuthenticationError, ConflictError, ValidationError
)
from school_portal.utils.validators import Validator

MAX_CODE_ATTEMPTS = 5

class AuthService:

    @staticmethod
    def issue_tokens(user: User) -> Dict[str, Any]:
        """Create access/refresh tokens carrying the user id as identity."""
        claims = {'roles': sorted(role.value for role in user.roles)}
        return {
            "access_token": create_access_token(identity=str(user.id), additional_claims=claims),
            "refresh_token": create_refresh_token(identity=str(user.id)),
            "user": user.to_dict()
        }

    @staticmethod
    def login(email: str, password: str) -> Dict[str, Any]:
        """Authenticate user and return tokens."""
        if not isinstance(email, str) or not isinstance(password, str) or not email or not password:
            raise ValidationError("Email and password are required")

        user = User.query.filter_by(email=email.lower().strip()).first()
        if not user:
            raise AuthenticationError("Invalid email or password")

        if not user.check_password(password):
            user.failed_login_attempts += 1
            db.session.commit()
            raise AuthenticationError("Invalid email or password")

        if not user.is_active:
            raise AuthenticationError("Account is deactivated")

        user.failed_login_attempts = 0
        user.last_login = datetime.utcnow()
        db.session.commit()

        return AuthService.issue_tokens(user)

    @staticmethod
    def refresh_token(user_id: int) -> Dict[str, Any]:
        """Generate new access token."""
        user = db.session.get(User, user_id)
        if not user or not user.is_active:
            raise AuthenticationError("User not found or inactive")

        claims = {'roles': sorted(role.value for role in user.roles)}
        return {
            "access_token": create_access_token(identity=str(user.id), additional_claims=claims),
            "user": user.to_dict()
        }

    # One-time codes

    @staticmethod
    def send_login_code(email: Any) -> None:
        """Email a six digit sign-in code.

        Unknown or inactive addresses are ignored silently so the endpoint
        does not reveal which emails have accounts.
        """
        email = Validator.validate_email(email)
        user = User.query.filter_by(email=email).first()
        if not user or not user.is_active:
            current_app.logger.info(f"Login code requested for unknown or inactive account {email}")
            return

        AuthService.revoke_login_codes(user.id)

        code = f"{secrets.randbelow(10 ** 6):06d}"
        login_code = LoginCode(
            user_id=user.id,
            expires_at=datetime.utcnow() + timedelta(minutes=current_app.config['LOGIN_CODE_TTL_MINUTES'])
        )
        login_code.set_code(code)
        db.session.add(login_code)
        db.session.commit()

        EmailService.send_login_code(user.email, code)

    @staticmethod
    def revoke_login_codes(user_id: int) -> None:
        """Drop outstanding codes; the caller commits."""
        LoginCode.query.filter_by(user_id=user_id).delete()

    @staticmethod
    def verify_login_code(email: Any, code: Any) -> Dict[str, Any]:
        """Exchange a valid one-time code for tokens."""
        email = Validator.validate_email(email)
        if not code or not isinstance(code, str) or not code.isdigit() or len(code) != 6:
            raise ValidationError("Code must be 6 digits")

        user = User.query.filter_by(email=email).first()
        login_code = LoginCode.query.filter_by(user_id=user.id).first() if user else None
        if not login_code or login_code.is_expired():
            raise AuthenticationError("Invalid or expired code")

        if not login_code.check_code(code):
            login_code.attempts += 1
            if login_code.attempts >= MAX_CODE_ATTEMPTS:
                db.session.delete(login_code)
            db.session.commit()
            raise AuthenticationError("Invalid or expired code")

        db.session.delete(login_code)
        if not user.is_active:
            db.session.commit()
            raise AuthenticationError("Account is deactivated")

        user.email_verified = True
        user.last_login = datetime.utcnow()
        db.session.commit()

        AuditService.log(user.id, 'code_login', 'user', resource_id=user.id)
        return AuthService.issue_tokens(user)

    # Email verification

    @staticmethod
    def start_email_verification(user: User) -> str:
        """Store a fresh verification token and email the link."""
        token = secrets.token_urlsafe(32)
        db.session.add(VerificationToken(
            user_id=user.id,
            token=token,
            expires_at=datetime.utcnow() + timedelta(hours=current_app.config['VERIFICATION_TOKEN_TTL_HOURS'])
        ))
        db.session.commit()

        EmailService.send_verification_email(user.email, user.name, token)
        return token

    @staticmethod
    def verify_email(token: Any) -> None:
        if not token or not isinstance(token, str):
            raise ValidationError("Verification token is required")

        record = VerificationToken.query.filter_by(token=token).first()
        if not record:
            raise ValidationError("Invalid or expired verification token")

        if record.is_expired():
            db.session.delete(record)
            db.session.commit()
            raise ValidationError("Verification token has expired")

        user = db.session.get(User, record.user_id)
        user.email_verified = True
        db.session.delete(record)
        db.session.commit()

        AuditService.log(user.id, 'email_verified', 'profile', resource_id=user.id)

    # Accounts

    @staticmethod
    def new_account(email: str, password: str, name: str, role: UserRole,
                    phone: str = None) -> User:
        """Add (without committing) a user holding ``role``."""
        if User.query.filter_by(email=email).first():
            raise ConflictError("Email already exists")

        user = User(email=email, name=name, phone=phone)
        user.set_password(password)
        user.grant_role(role)
        db.session.add(user)
        db.session.flush()
        return user

    @staticmethod
    def create_user(caller: Caller, data: Dict) -> Dict[str, Any]:
        """Admin-only creation of teacher, admin or parent accounts."""
        authorize(caller, Operation.CREATE_USER)

        email = Validator.validate_email(data.get('email'))
        password = Validator.validate_password(data.get('password'))
        name = Validator.validate_name(data.get('name'))
        phone = Validator.validate_phone(data.get('phone'))
        try:
            role = UserRole(str(data.get('role', '')).lower())
        except ValueError:
            raise ValidationError("Role must be one of: teacher, admin, parent")
        if role == UserRole.STUDENT:
            raise ValidationError("Students are created through the students endpoints")

        user = AuthService.new_account(email, password, name, role, phone=phone)
        if role == UserRole.PARENT:
            db.session.add(Guardian(user_id=user.id, name=name, phone=phone))
        db.session.commit()

        AuditService.log(caller.user_id, 'user_created', 'user', resource_id=user.id,
                         details={'email': email, 'role': role.value})
        AuthService.start_email_verification(user)
        return user.to_dict()

    @staticmethod
    def register_parent(data: Dict) -> Dict[str, Any]:
        """Self-registration of a parent, optionally linking existing students."""
        email = Validator.validate_email(data.get('email'))
        password = Validator.validate_password(data.get('password'))
        name = Validator.validate_name(data.get('name'))
        phone = Validator.validate_phone(data.get('phone'))
        student_ids = data.get('studentIds') or []
        if not isinstance(student_ids, list):
            raise ValidationError("studentIds must be an array")
        student_ids = [Validator.validate_id(student_id) for student_id in student_ids]

        user = AuthService.new_account(email, password, name, UserRole.PARENT, phone=phone)
        guardian = Guardian(user_id=user.id, name=name, phone=phone)
        db.session.add(guardian)
        db.session.commit()

        linked = AuthService.link_students(guardian, student_ids)

        AuthService.start_email_verification(user)
        AuditService.log(user.id, 'parent_registered', 'guardian', resource_id=guardian.id,
                         details={'email': email, 'name': name, 'studentIds': linked})
        return {'userId': user.id, 'guardianId': guardian.id, 'linkedStudentIds': linked}

    @staticmethod
    def link_students(guardian: Guardian, student_ids: Iterable[int]) -> list:
        """Link the students that exist; unknown ids are skipped and logged."""
        student_ids = list(student_ids)
        if not student_ids:
            return []
        students = Student.query.filter(Student.id.in_(student_ids)).all()
        missing = set(student_ids) - {student.id for student in students}
        if missing:
            current_app.logger.warning(
                f"Guardian {guardian.id}: could not link unknown students {sorted(missing)}"
            )
        for student in students:
            if student not in guardian.students:
                guardian.students.append(student)
        db.session.commit()
        return sorted(student.id for student in students)

