"""Helper functions for the application."""
from flask import jsonify, request, current_app
from typing import Any, Tuple

def handle_error(error, status_code: int):
    """Handle application errors with consistent format."""
    return error_response(str(error), status_code)

def success_response(data: Any = None, message: str = "Success", status_code: int = 200):
    """Return consistent success response."""
    response = {
        'success': True,
        'message': message
    }
    if data is not None:
        response['data'] = data
    return jsonify(response), status_code

def error_response(message: str, status_code: int = 400, **extra):
    """Return consistent error response."""
    response = {
        'success': False,
        'error': message,
        'status_code': status_code
    }
    response.update(extra)
    return jsonify(response), status_code

def get_json_body() -> dict:
    """Return the JSON object body or raise a ValidationError."""
    from school_portal.utils.exceptions import ValidationError

    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data

def get_pagination() -> Tuple[int, int]:
    """Read page/per_page query args clamped to configured limits."""
    page = request.args.get('page', 1, type=int)
    per_page = request.args.get('per_page', current_app.config['DEFAULT_PAGE_SIZE'], type=int)

    page = page if page > 0 else 1
    per_page = min(max(per_page, 1), current_app.config['MAX_PAGE_SIZE'])
    return page, per_page

def paginated(pagination, key: str) -> dict:
    """Shape a Flask-SQLAlchemy pagination object for a response."""
    return {
        key: [item.to_dict() for item in pagination.items],
        'total': pagination.total,
        'pages': pagination.pages,
        'current_page': pagination.page
    }
