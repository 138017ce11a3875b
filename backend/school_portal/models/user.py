"""User model for authentication and authorization."""
from enum import Enum
from typing import FrozenSet
from werkzeug.security import generate_password_hash, check_password_hash
from school_portal import db
from school_portal.models.base import BaseModel

class UserRole(Enum):
    """User roles enumeration."""
    STUDENT = 'student'
    PARENT = 'parent'
    TEACHER = 'teacher'
    ADMIN = 'admin'

class RoleAssignment(BaseModel):
    """Membership of a user in one role. A user may hold several."""

    __tablename__ = 'user_roles'
    __table_args__ = (
        db.UniqueConstraint('user_id', 'role', name='uq_user_role'),
    )

    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    role = db.Column(db.Enum(UserRole), nullable=False)

    def __repr__(self) -> str:
        return f'<RoleAssignment {self.user_id}:{self.role.value}>'

class User(BaseModel):
    """User model for all system users."""

    __tablename__ = 'users'

    # Basic Information
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    name = db.Column(db.String(100), nullable=False)
    phone = db.Column(db.String(20), nullable=True)

    # Security and Authentication
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    email_verified = db.Column(db.Boolean, default=False, nullable=False)
    last_login = db.Column(db.DateTime, nullable=True)
    failed_login_attempts = db.Column(db.Integer, default=0, nullable=False)

    # Relationships
    role_assignments = db.relationship(
        'RoleAssignment', backref='user', lazy='selectin',
        cascade='all, delete-orphan'
    )

    def set_password(self, password: str) -> None:
        """Set user password with hashing."""
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        """Check if provided password matches user's password."""
        return check_password_hash(self.password_hash, password)

    @property
    def roles(self) -> FrozenSet[UserRole]:
        return frozenset(assignment.role for assignment in self.role_assignments)

    def has_role(self, role: UserRole) -> bool:
        return role in self.roles

    def grant_role(self, role: UserRole) -> None:
        """Add a role membership if the user does not hold it yet."""
        if not self.has_role(role):
            self.role_assignments.append(RoleAssignment(role=role))

    def is_teacher(self) -> bool:
        """Check if user is staff (teachers and admins)."""
        return bool(self.roles & {UserRole.TEACHER, UserRole.ADMIN})

    def is_admin(self) -> bool:
        return self.has_role(UserRole.ADMIN)

    def to_dict(self, exclude: list = None) -> dict:
        """Convert to dictionary excluding sensitive data."""
        default_exclude = ['password_hash', 'failed_login_attempts']
        exclude = (exclude or []) + default_exclude

        result = super().to_dict(exclude=exclude)
        result['roles'] = sorted(role.value for role in self.roles)

        return result

    def __repr__(self) -> str:
        return f'<User {self.email}>'
