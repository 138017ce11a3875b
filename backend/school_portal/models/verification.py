"""Email verification tokens and one-time login codes."""
from datetime import datetime
from werkzeug.security import generate_password_hash, check_password_hash
from school_portal import db
from school_portal.models.base import BaseModel

class VerificationToken(BaseModel):
    """Single-use token proving ownership of an email address."""

    __tablename__ = 'verification_tokens'

    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    token = db.Column(db.String(128), unique=True, nullable=False, index=True)
    expires_at = db.Column(db.DateTime, nullable=False)

    def is_expired(self, now: datetime = None) -> bool:
        return (now or datetime.utcnow()) > self.expires_at

class LoginCode(BaseModel):
    """Hashed six digit code emailed for password-less login."""

    __tablename__ = 'login_codes'

    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    code_hash = db.Column(db.String(255), nullable=False)
    expires_at = db.Column(db.DateTime, nullable=False)
    attempts = db.Column(db.Integer, nullable=False, default=0)

    def set_code(self, code: str) -> None:
        self.code_hash = generate_password_hash(code)

    def check_code(self, code: str) -> bool:
        return check_password_hash(self.code_hash, code)

    def is_expired(self, now: datetime = None) -> bool:
        return (now or datetime.utcnow()) > self.expires_at
