"""Settings shared by every environment."""
import os
from datetime import timedelta

class BaseConfig:
    """Base configuration class."""

    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')

    # Database
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = False

    # JWT Configuration
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY', 'jwt-secret-key-change-in-production')
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=2)
    JWT_REFRESH_TOKEN_EXPIRES = timedelta(days=7)
    JWT_ALGORITHM = 'HS256'

    # CORS
    CORS_ORIGINS = os.getenv('CORS_ORIGINS', 'http://localhost:3000,http://127.0.0.1:3000').split(',')

    # Rate Limiting
    RATELIMIT_STORAGE_URI = os.getenv('REDIS_URL', 'memory://')
    RATELIMIT_ENABLED = True

    # Record batches
    ATTENDANCE_MAX_BATCH = 200
    RESULT_MAX_BATCH = 200
    IMPORT_MAX_BATCH = 100
    ATTENDANCE_MAX_FUTURE_DAYS = 30

    # Authentication codes
    LOGIN_CODE_TTL_MINUTES = 10
    VERIFICATION_TOKEN_TTL_HOURS = 24

    # Email (Resend)
    EMAIL_ENABLED = os.getenv('EMAIL_ENABLED', 'false').lower() == 'true'
    RESEND_API_KEY = os.getenv('RESEND_API_KEY')
    RESEND_API_URL = 'https://api.resend.com/emails'
    RESEND_FROM_EMAIL = os.getenv('RESEND_FROM_EMAIL', 'onboarding@resend.dev')
    EMAIL_TIMEOUT_SECONDS = 10
    FRONTEND_URL = os.getenv('FRONTEND_URL', 'http://localhost:3000')

    # File Upload
    MAX_CONTENT_LENGTH = 4 * 1024 * 1024  # 4MB
    ALLOWED_EXTENSIONS = {'csv'}

    # Pagination
    DEFAULT_PAGE_SIZE = 20
    MAX_PAGE_SIZE = 100

    # Logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_FILE = os.getenv('LOG_FILE', 'logs/app.log')
