"""Dashboard API."""
from flask import Blueprint
from flask_jwt_extended import jwt_required
from school_portal.services.dashboard_service import DashboardService
from school_portal.utils.decorators import current_user
from school_portal.utils.helpers import success_response

dashboard_bp = Blueprint('dashboard', __name__)

@dashboard_bp.route('/', methods=['GET'])
@jwt_required()
def get_dashboard():
    """Summary tailored to the caller's role."""
    return success_response(data=DashboardService.for_user(current_user()))
