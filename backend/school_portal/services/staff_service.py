"""Staff management service."""
from typing import Any, Dict
from school_portal import db
from school_portal.models.staff import Staff
from school_portal.models.user import UserRole
from school_portal.services.audit_service import AuditService
from school_portal.services.auth_service import AuthService
from school_portal.services.authorization import Caller, Operation, authorize
from school_portal.utils.exceptions import NotFoundError
from school_portal.utils.validators import Validator

class StaffService:

    @staticmethod
    def create_staff(caller: Caller, data: Dict) -> Dict[str, Any]:
        """Create a teacher account with its staff profile."""
        authorize(caller, Operation.CREATE_USER)

        email = Validator.validate_email(data.get('email'))
        password = Validator.validate_password(data.get('password'))
        name = Validator.validate_name(data.get('full_name'))
        subject = Validator.validate_text(data.get('subject'), 'subject', 100, required=False)
        position = Validator.validate_text(data.get('position'), 'position', 100, required=False)
        phone = Validator.validate_phone(data.get('phone'))

        user = AuthService.new_account(email, password, name, UserRole.TEACHER, phone=phone)
        staff = Staff(user_id=user.id, full_name=name, subject=subject, position=position)
        db.session.add(staff)
        db.session.commit()

        AuditService.log(caller.user_id, 'staff_created', 'staff', resource_id=staff.id,
                         details={'email': email})
        AuthService.start_email_verification(user)
        return staff.to_dict()

    @staticmethod
    def get_staff(staff_id: int) -> Staff:
        staff = db.session.get(Staff, staff_id)
        if not staff:
            raise NotFoundError("Staff member not found")
        return staff

    @staticmethod
    def update_staff(caller: Caller, staff_id: int, data: Dict) -> Dict[str, Any]:
        authorize(caller, Operation.MANAGE_RECORDS)
        staff = StaffService.get_staff(staff_id)

        if 'full_name' in data:
            staff.full_name = Validator.validate_name(data['full_name'])
            staff.user.name = staff.full_name
        for field, limit in (('subject', 100), ('position', 100), ('gender', 20), ('address', 500)):
            if field in data:
                setattr(staff, field, Validator.validate_text(data[field], field, limit, required=False))

        db.session.commit()
        AuditService.log(caller.user_id, 'staff_updated', 'staff', resource_id=staff.id,
                         details={'fields': sorted(data.keys())})
        return staff.to_dict()

    @staticmethod
    def deactivate_staff(caller: Caller, staff_id: int) -> None:
        authorize(caller, Operation.MANAGE_RECORDS)
        staff = StaffService.get_staff(staff_id)
        staff.user.is_active = False
        AuthService.revoke_login_codes(staff.user_id)
        db.session.commit()
        AuditService.log(caller.user_id, 'staff_deactivated', 'staff', resource_id=staff.id)
