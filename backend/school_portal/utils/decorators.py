"""Decorators resolving the caller's identity and enforcing roles."""
from functools import wraps
from flask_jwt_extended import get_jwt_identity
from school_portal.models.user import User
from school_portal.services.authorization import Caller, Operation, authorize
from school_portal.utils.exceptions import AuthenticationError

def current_user() -> User:
    """User behind the JWT of this request; must be called under jwt_required."""
    identity = get_jwt_identity()
    user = User.get_by_id(int(identity)) if identity else None
    if not user:
        raise AuthenticationError("User not found")
    if not user.is_active:
        raise AuthenticationError("Account is deactivated")
    return user

def current_caller() -> Caller:
    return Caller.from_user(current_user())

def operation_required(operation: Operation):
    """Allow the view only to callers whose roles permit ``operation``."""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            authorize(current_caller(), operation)
            return f(*args, **kwargs)
        return decorated_function
    return decorator

def admin_required(f):
    """Decorator to require admin role."""
    return operation_required(Operation.MANAGE_RECORDS)(f)

def teacher_required(f):
    """Decorator to require teacher role or higher."""
    return operation_required(Operation.VIEW_RECORDS)(f)
