"""Swagger/OpenAPI configuration for the application."""
from flask_swagger_ui import get_swaggerui_blueprint

# Swagger UI configuration
SWAGGER_URL = '/api/docs'
API_URL = '/api/swagger.json'

def get_swagger_blueprint():
    """Create and return swagger UI blueprint."""
    return get_swaggerui_blueprint(
        SWAGGER_URL,
        API_URL,
        config={
            'app_name': "School Portal API",
            'defaultModelsExpandDepth': -1,
            'docExpansion': 'list',
            'filter': True,
            'supportedSubmitMethods': ['get', 'post', 'put', 'delete'],
            'validatorUrl': None,
        }
    )

def _json_body(schema):
    return {
        "required": True,
        "content": {"application/json": {"schema": schema}}
    }

def _responses(ok_code="200", ok_description="Success", errors=("400", "401", "403")):
    descriptions = {
        "400": "Validation error",
        "401": "Missing or invalid token",
        "403": "Role not allowed",
        "404": "Not found",
        "409": "Conflict",
    }
    responses = {
        ok_code: {
            "description": ok_description,
            "content": {"application/json": {"schema": {"$ref": "#/components/schemas/Success"}}}
        }
    }
    for code in errors:
        responses[code] = {
            "description": descriptions[code],
            "content": {"application/json": {"schema": {"$ref": "#/components/schemas/Error"}}}
        }
    return responses

SECURED = [{"bearerAuth": []}]

def generate_swagger_spec():
    """Generate OpenAPI/Swagger specification."""
    return {
        "openapi": "3.0.0",
        "info": {
            "title": "School Portal API",
            "description": "Records, attendance, results and communication for a school",
            "version": "1.0.0"
        },
        "servers": [
            {"url": "http://127.0.0.1:5000/api", "description": "Development server"}
        ],
        "components": {
            "securitySchemes": {
                "bearerAuth": {"type": "http", "scheme": "bearer", "bearerFormat": "JWT"}
            },
            "schemas": {
                "Success": {
                    "type": "object",
                    "properties": {
                        "success": {"type": "boolean", "example": True},
                        "message": {"type": "string"},
                        "data": {"type": "object"}
                    }
                },
                "Error": {
                    "type": "object",
                    "properties": {
                        "success": {"type": "boolean", "example": False},
                        "error": {"type": "string"},
                        "status_code": {"type": "integer"},
                        "succeeded": {"type": "integer", "description": "Rows saved before a storage failure"},
                        "failed": {"type": "integer", "description": "Rows not saved after a storage failure"}
                    }
                },
                "AttendanceMark": {
                    "type": "object",
                    "required": ["studentId", "status"],
                    "properties": {
                        "studentId": {"type": "integer"},
                        "status": {"type": "string", "enum": ["present", "absent", "late", "excused"]}
                    }
                },
                "ResultInput": {
                    "type": "object",
                    "required": ["studentId", "subject", "score"],
                    "properties": {
                        "studentId": {"type": "integer"},
                        "subject": {"type": "string", "maxLength": 100},
                        "score": {"type": "integer", "minimum": 0, "maximum": 100}
                    }
                },
                "StudentInput": {
                    "type": "object",
                    "required": ["email", "password", "name", "rollNumber"],
                    "properties": {
                        "email": {"type": "string", "format": "email"},
                        "password": {"type": "string", "minLength": 8},
                        "name": {"type": "string"},
                        "rollNumber": {"type": "string"},
                        "classId": {"type": "integer"}
                    }
                }
            }
        },
        "paths": {
            "/auth/login": {
                "post": {
                    "tags": ["Authentication"],
                    "summary": "Password login",
                    "requestBody": _json_body({
                        "type": "object",
                        "required": ["email", "password"],
                        "properties": {
                            "email": {"type": "string", "format": "email"},
                            "password": {"type": "string"}
                        }
                    }),
                    "responses": _responses(ok_description="Tokens and profile", errors=("400", "401"))
                }
            },
            "/auth/send-code": {
                "post": {
                    "tags": ["Authentication"],
                    "summary": "Email a one-time sign-in code",
                    "requestBody": _json_body({
                        "type": "object",
                        "properties": {"email": {"type": "string", "format": "email"}}
                    }),
                    "responses": _responses(errors=("400",))
                }
            },
            "/auth/verify-code": {
                "post": {
                    "tags": ["Authentication"],
                    "summary": "Exchange a one-time code for tokens",
                    "requestBody": _json_body({
                        "type": "object",
                        "properties": {
                            "email": {"type": "string", "format": "email"},
                            "code": {"type": "string", "pattern": "^[0-9]{6}$"}
                        }
                    }),
                    "responses": _responses(errors=("400", "401"))
                }
            },
            "/auth/register-student": {
                "post": {
                    "tags": ["Authentication"],
                    "summary": "Student self-registration",
                    "requestBody": _json_body({"$ref": "#/components/schemas/StudentInput"}),
                    "responses": _responses("201", "Student registered", errors=("400", "409"))
                }
            },
            "/auth/me": {
                "get": {
                    "tags": ["Authentication"],
                    "summary": "Current user profile",
                    "security": SECURED,
                    "responses": _responses(errors=("401",))
                }
            },
            "/attendance": {
                "post": {
                    "tags": ["Attendance"],
                    "summary": "Record one day's attendance for up to 200 students",
                    "security": SECURED,
                    "requestBody": _json_body({
                        "type": "object",
                        "required": ["date", "records"],
                        "properties": {
                            "date": {"type": "string", "format": "date"},
                            "records": {
                                "type": "array",
                                "minItems": 1,
                                "maxItems": 200,
                                "items": {"$ref": "#/components/schemas/AttendanceMark"}
                            }
                        }
                    }),
                    "responses": _responses(ok_description="Marks saved")
                }
            },
            "/results": {
                "post": {
                    "tags": ["Results"],
                    "summary": "Record a score, or a batch under 'results'; the grade is derived",
                    "security": SECURED,
                    "requestBody": _json_body({
                        "oneOf": [
                            {"$ref": "#/components/schemas/ResultInput"},
                            {
                                "type": "object",
                                "properties": {
                                    "results": {
                                        "type": "array",
                                        "maxItems": 200,
                                        "items": {"$ref": "#/components/schemas/ResultInput"}
                                    }
                                }
                            }
                        ]
                    }),
                    "responses": _responses(ok_description="Results saved")
                }
            },
            "/students": {
                "get": {
                    "tags": ["Students"],
                    "summary": "List students",
                    "security": SECURED,
                    "parameters": [
                        {"name": "class_id", "in": "query", "schema": {"type": "integer"}},
                        {"name": "status", "in": "query", "schema": {"type": "string"}},
                        {"name": "search", "in": "query", "schema": {"type": "string"}},
                        {"name": "page", "in": "query", "schema": {"type": "integer"}},
                        {"name": "per_page", "in": "query", "schema": {"type": "integer"}}
                    ],
                    "responses": _responses()
                },
                "post": {
                    "tags": ["Students"],
                    "summary": "Create a student (admin)",
                    "security": SECURED,
                    "requestBody": _json_body({"$ref": "#/components/schemas/StudentInput"}),
                    "responses": _responses("201", "Student created", errors=("400", "401", "403", "409"))
                }
            },
            "/students/bulk": {
                "post": {
                    "tags": ["Students"],
                    "summary": "Import up to 100 students; failures are reported per row",
                    "security": SECURED,
                    "requestBody": _json_body({
                        "type": "object",
                        "properties": {
                            "students": {
                                "type": "array",
                                "maxItems": 100,
                                "items": {"$ref": "#/components/schemas/StudentInput"}
                            }
                        }
                    }),
                    "responses": _responses()
                }
            },
            "/students/{student_id}/attendance": {
                "get": {
                    "tags": ["Students"],
                    "summary": "Attendance history of a student",
                    "security": SECURED,
                    "parameters": [
                        {"name": "student_id", "in": "path", "required": True, "schema": {"type": "integer"}}
                    ],
                    "responses": _responses(errors=("401", "403", "404"))
                }
            },
            "/students/{student_id}/results": {
                "get": {
                    "tags": ["Students"],
                    "summary": "Results of a student",
                    "security": SECURED,
                    "parameters": [
                        {"name": "student_id", "in": "path", "required": True, "schema": {"type": "integer"}}
                    ],
                    "responses": _responses(errors=("401", "403", "404"))
                }
            },
            "/notifications": {
                "get": {
                    "tags": ["Notifications"],
                    "summary": "The caller's notifications",
                    "security": SECURED,
                    "responses": _responses(errors=("401",))
                },
                "post": {
                    "tags": ["Notifications"],
                    "summary": "Send notifications (teacher/admin)",
                    "security": SECURED,
                    "requestBody": _json_body({
                        "type": "object",
                        "required": ["userIds", "title", "message"],
                        "properties": {
                            "userIds": {"type": "array", "items": {"type": "integer"}},
                            "title": {"type": "string"},
                            "message": {"type": "string"},
                            "type": {"type": "string", "enum": ["info", "warning", "success", "alert"]},
                            "sendEmail": {"type": "boolean"}
                        }
                    }),
                    "responses": _responses("201", "Notifications created")
                }
            },
            "/dashboard": {
                "get": {
                    "tags": ["Dashboard"],
                    "summary": "Role specific summary",
                    "security": SECURED,
                    "responses": _responses(errors=("401",))
                }
            },
            "/audit": {
                "get": {
                    "tags": ["Audit"],
                    "summary": "Audit log (admin)",
                    "security": SECURED,
                    "responses": _responses(errors=("401", "403"))
                }
            }
        }
    }
