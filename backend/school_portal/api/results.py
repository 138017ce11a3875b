"""Results API."""
from flask import Blueprint
from flask_jwt_extended import jwt_required
from school_portal.services.authorization import Operation
from school_portal.services.result_service import ResultService
from school_portal.utils.decorators import current_caller, operation_required
from school_portal.utils.helpers import success_response, get_json_body

results_bp = Blueprint('results', __name__)

@results_bp.route('/', methods=['POST'])
@jwt_required()
@operation_required(Operation.RECORD_RESULTS)
def record_results():
    """Record a single score or a ``{"results": [...]}`` batch.

    The grade is always derived from the score; any grade sent by the
    client is ignored.
    """
    data = get_json_body()
    caller = current_caller()

    if 'results' in data:
        result = ResultService.record_results(caller, data['results'])
        return success_response(data=result, message=f"{result['count']} results saved")

    result = ResultService.record_result(caller, data)
    return success_response(data=result, message="Result saved")
