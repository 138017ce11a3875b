"""Class management service."""
from typing import Any, Dict
from school_portal import db
from school_portal.models.school_class import SchoolClass
from school_portal.models.user import User
from school_portal.services.audit_service import AuditService
from school_portal.services.authorization import Caller, Operation, authorize
from school_portal.utils.exceptions import ConflictError, NotFoundError, ValidationError
from school_portal.utils.validators import Validator

class ClassService:

    @staticmethod
    def _resolve_teacher(teacher_id: Any):
        if teacher_id in (None, ''):
            return None
        teacher_id = Validator.validate_id(teacher_id, 'teacherId')
        teacher = db.session.get(User, teacher_id)
        if not teacher or not teacher.is_teacher():
            raise ValidationError("Class teacher must be an existing staff member")
        return teacher.id

    @staticmethod
    def create_class(caller: Caller, data: Dict) -> Dict[str, Any]:
        authorize(caller, Operation.CREATE_CLASS)

        name = Validator.validate_text(data.get('name'), 'class name', 100)
        teacher_id = ClassService._resolve_teacher(data.get('teacherId'))
        if SchoolClass.query.filter_by(name=name).first():
            raise ConflictError(f"Class {name} already exists")

        school_class = SchoolClass(name=name, teacher_id=teacher_id)
        db.session.add(school_class)
        db.session.commit()

        AuditService.log(caller.user_id, 'class_created', 'class', resource_id=school_class.id,
                         details={'name': name, 'teacherId': teacher_id})
        return school_class.to_dict()

    @staticmethod
    def get_class(class_id: int) -> SchoolClass:
        school_class = db.session.get(SchoolClass, class_id)
        if not school_class:
            raise NotFoundError("Class not found")
        return school_class

    @staticmethod
    def update_class(caller: Caller, class_id: int, data: Dict) -> Dict[str, Any]:
        authorize(caller, Operation.CREATE_CLASS)
        school_class = ClassService.get_class(class_id)

        if 'name' in data:
            name = Validator.validate_text(data['name'], 'class name', 100)
            clash = SchoolClass.query.filter_by(name=name).first()
            if clash and clash.id != school_class.id:
                raise ConflictError(f"Class {name} already exists")
            school_class.name = name
        if 'teacherId' in data:
            school_class.teacher_id = ClassService._resolve_teacher(data['teacherId'])

        db.session.commit()
        AuditService.log(caller.user_id, 'class_updated', 'class', resource_id=school_class.id)
        return school_class.to_dict()

    @staticmethod
    def delete_class(caller: Caller, class_id: int) -> None:
        authorize(caller, Operation.CREATE_CLASS)
        school_class = ClassService.get_class(class_id)
        if school_class.students:
            raise ConflictError("Cannot delete a class that still has students")

        db.session.delete(school_class)
        db.session.commit()
        AuditService.log(caller.user_id, 'class_deleted', 'class', resource_id=class_id)
