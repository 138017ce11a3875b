"""Authentication API: passwords, one-time codes, registration."""
from flask import Blueprint
from flask_jwt_extended import jwt_required, get_jwt_identity
from school_portal import limiter
from school_portal.services.auth_service import AuthService
from school_portal.services.authorization import Operation
from school_portal.services.student_service import StudentService
from school_portal.utils.decorators import current_caller, current_user, operation_required
from school_portal.utils.helpers import success_response, get_json_body

auth_bp = Blueprint("auth", __name__)

@auth_bp.route("/health", methods=["GET"])
def health_check():
    """Health check endpoint."""
    return success_response(message="Auth service is running")

@auth_bp.route("/login", methods=["POST"])
@limiter.limit("5 per minute")
def login():
    """Password login for every role."""
    data = get_json_body()
    result = AuthService.login(data.get("email", ""), data.get("password", ""))
    return success_response(data=result, message="Login successful")

@auth_bp.route("/send-code", methods=["POST"])
@limiter.limit("3 per minute")
def send_code():
    """Email a one-time sign-in code."""
    data = get_json_body()
    AuthService.send_login_code(data.get("email"))
    return success_response(message="If the account exists, a sign-in code has been sent")

@auth_bp.route("/verify-code", methods=["POST"])
@limiter.limit("10 per minute")
def verify_code():
    data = get_json_body()
    result = AuthService.verify_login_code(data.get("email"), data.get("code"))
    return success_response(data=result, message="Login successful")

@auth_bp.route("/verify-email", methods=["POST"])
def verify_email():
    data = get_json_body()
    AuthService.verify_email(data.get("token"))
    return success_response(message="Email verified successfully")

@auth_bp.route("/register-student", methods=["POST"])
@limiter.limit("10 per hour")
def register_student():
    data = get_json_body()
    result = StudentService.register_student(data)
    return success_response(
        data=result,
        message="Student registered successfully. Please check email for verification link.",
        status_code=201
    )

@auth_bp.route("/register-parent", methods=["POST"])
@limiter.limit("10 per hour")
def register_parent():
    data = get_json_body()
    result = AuthService.register_parent(data)
    return success_response(
        data=result,
        message="Parent registered successfully. Please check email for verification link.",
        status_code=201
    )

@auth_bp.route("/users", methods=["POST"])
@jwt_required()
@operation_required(Operation.CREATE_USER)
def create_user():
    """Admin creates a teacher, admin or parent account."""
    data = get_json_body()
    result = AuthService.create_user(current_caller(), data)
    return success_response(data=result, message="User created", status_code=201)

@auth_bp.route("/me", methods=["GET"])
@jwt_required()
def me():
    """Profile of the signed-in user."""
    user = current_user()
    data = user.to_dict()
    if user.student_profile:
        data["student"] = user.student_profile.to_dict()
    if user.staff_profile:
        data["staff"] = user.staff_profile.to_dict()
    if user.guardian_profile:
        data["guardian"] = user.guardian_profile.to_dict()
    return success_response(data=data)

@auth_bp.route("/refresh", methods=["POST"])
@jwt_required(refresh=True)
def refresh():
    result = AuthService.refresh_token(int(get_jwt_identity()))
    return success_response(data=result, message="Token refreshed")
