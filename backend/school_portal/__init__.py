"""School Portal - Application Factory."""
import logging
import os
from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_jwt_extended import JWTManager
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()
jwt = JWTManager()
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["2000 per day", "500 per hour"]
)

def create_app(config_name: str = None) -> Flask:
    """Application factory pattern."""
    app = Flask(__name__)

    # Load configuration
    from school_portal.config import get_config
    config_class = get_config(config_name)
    app.config.from_object(config_class)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    limiter.init_app(app)

    # Configure CORS
    CORS(app, origins=app.config.get('CORS_ORIGINS', ["*"]))

    setup_logging(app)
    register_blueprints(app)
    register_error_handlers(app)
    setup_database(app)
    register_commands(app)

    @app.route('/health')
    def health_check():
        return jsonify({
            'status': 'healthy',
            'service': 'School Portal',
            'version': '1.0.0'
        })

    return app

def register_blueprints(app: Flask) -> None:
    """Register all application blueprints."""
    from school_portal.api.auth import auth_bp
    from school_portal.api.students import students_bp
    from school_portal.api.staff import staff_bp
    from school_portal.api.classes import classes_bp
    from school_portal.api.attendance import attendance_bp
    from school_portal.api.results import results_bp
    from school_portal.api.assignments import assignments_bp
    from school_portal.api.timetable import timetable_bp
    from school_portal.api.announcements import announcements_bp
    from school_portal.api.notifications import notifications_bp
    from school_portal.api.dashboard import dashboard_bp
    from school_portal.api.audit import audit_bp
    from school_portal.utils.swagger import API_URL, generate_swagger_spec, get_swagger_blueprint

    # Auth
    app.register_blueprint(auth_bp, url_prefix='/api/auth')

    # Admin Management
    app.register_blueprint(students_bp, url_prefix='/api/students')
    app.register_blueprint(staff_bp, url_prefix='/api/staff')
    app.register_blueprint(classes_bp, url_prefix='/api/classes')
    app.register_blueprint(audit_bp, url_prefix='/api/audit')

    # Academic records
    app.register_blueprint(attendance_bp, url_prefix='/api/attendance')
    app.register_blueprint(results_bp, url_prefix='/api/results')
    app.register_blueprint(assignments_bp, url_prefix='/api/assignments')
    app.register_blueprint(timetable_bp, url_prefix='/api/timetable')

    # Communication
    app.register_blueprint(announcements_bp, url_prefix='/api/announcements')
    app.register_blueprint(notifications_bp, url_prefix='/api/notifications')
    app.register_blueprint(dashboard_bp, url_prefix='/api/dashboard')

    # Swagger UI
    @app.route(API_URL)
    def swagger_spec():
        """Serve Swagger/OpenAPI specification."""
        return jsonify(generate_swagger_spec())

    app.register_blueprint(get_swagger_blueprint())

def register_error_handlers(app: Flask) -> None:
    """Register error handlers."""
    from school_portal.utils.helpers import handle_error, error_response
    from school_portal.utils.exceptions import PortalError, PersistenceError
    from werkzeug.exceptions import HTTPException

    @app.errorhandler(PortalError)
    def handle_portal_error(error):
        if isinstance(error, PersistenceError):
            app.logger.error(
                'Persistence failure: %s (%d of %d applied)',
                error.message, error.succeeded, error.total
            )
            return error_response(
                error.message,
                error.status_code,
                succeeded=error.succeeded,
                failed=error.total - error.succeeded
            )
        return error_response(error.message, error.status_code)

    @app.errorhandler(HTTPException)
    def handle_http_exception(e):
        return handle_error(e.description, e.code)

    @app.errorhandler(500)
    def internal_error(error):
        db.session.rollback()
        app.logger.exception('Unhandled error: %s', error)
        return handle_error('Internal server error', 500)

    # JWT error handlers
    @jwt.expired_token_loader
    def expired_token_callback(jwt_header, jwt_payload):
        return error_response('Token has expired', 401)

    @jwt.invalid_token_loader
    def invalid_token_callback(error):
        return error_response('Invalid token', 401)

    @jwt.unauthorized_loader
    def missing_token_callback(error):
        return error_response('Authorization token required', 401)

def setup_logging(app: Flask) -> None:
    """Setup application logging."""
    log_level = getattr(logging, app.config.get('LOG_LEVEL', 'INFO'), logging.INFO)
    app.logger.setLevel(log_level)

    if not app.debug and not app.testing:
        log_file = app.config.get('LOG_FILE', 'logs/app.log')
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)

        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'
        ))
        file_handler.setLevel(log_level)
        app.logger.addHandler(file_handler)
        app.logger.info('School Portal startup')

def setup_database(app: Flask) -> None:
    """Import models so metadata is complete."""
    with app.app_context():
        from school_portal.models import (  # noqa: F401
            User, RoleAssignment, UserRole,
            Student, Guardian, Staff, SchoolClass,
            AttendanceRecord, ResultRecord,
            Assignment, TimetableEntry, Announcement,
            Notification, AuditLog, VerificationToken, LoginCode
        )

def register_commands(app: Flask) -> None:
    """Register CLI commands."""
    import click

    @app.cli.command()
    @click.option('--drop', is_flag=True, help='Drop existing tables')
    def init_db(drop):
        """Initialize the database."""
        if drop:
            db.drop_all()
            click.echo('Dropped all tables.')

        db.create_all()
        click.echo('Created all tables.')

    @app.cli.command()
    def seed_db():
        """Seed database with sample school data."""
        from school_portal.services.seed_service import SeedService

        SeedService.seed_all()
        click.echo('Database seeded successfully!')

    @app.cli.command()
    def create_admin():
        """Create admin user."""
        from school_portal.models.user import User, UserRole
        from school_portal.utils.exceptions import ValidationError
        from school_portal.utils.validators import Validator

        email = click.prompt('Admin email')
        name = click.prompt('Admin name')
        password = click.prompt('Password', hide_input=True, confirmation_prompt=True)

        try:
            email = Validator.validate_email(email)
            name = Validator.validate_name(name)
            Validator.validate_password(password)
        except ValidationError as e:
            raise click.ClickException(e.message)

        admin = User(email=email, name=name, email_verified=True)
        admin.set_password(password)
        admin.grant_role(UserRole.ADMIN)
        db.session.add(admin)
        db.session.commit()
        click.echo(f'Admin user created: {email}')
