"""Shared fixtures: an app over in-memory SQLite and users for every role."""
import pytest
from flask_jwt_extended import create_access_token
from school_portal import create_app, db
from school_portal.models.school_class import SchoolClass
from school_portal.models.student import Guardian, Student
from school_portal.models.user import User, UserRole

PASSWORD = 'Password123'

@pytest.fixture
def app():
    """Create test app."""
    app = create_app('testing')
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()

@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()

@pytest.fixture
def make_user(app):
    """Factory creating an active user holding the given roles."""
    def _make_user(email, *roles, name='Test User'):
        user = User(email=email, name=name)
        user.set_password(PASSWORD)
        for role in roles:
            user.grant_role(role)
        return user.save()
    return _make_user

@pytest.fixture
def admin(make_user):
    return make_user('admin@school.edu', UserRole.ADMIN, name='Admin User')

@pytest.fixture
def teacher(make_user):
    return make_user('teacher@school.edu', UserRole.TEACHER, name='Teacher User')

@pytest.fixture
def school_class(app, teacher):
    return SchoolClass(name='Grade 7A', teacher_id=teacher.id).save()

@pytest.fixture
def make_student(make_user, school_class):
    """Factory creating a student account and profile in ``school_class``."""
    def _make_student(roll_number, name=None):
        name = name or f'Student {roll_number}'
        user = make_user(f'{roll_number.lower()}@school.edu', UserRole.STUDENT, name=name)
        return Student(
            user_id=user.id,
            roll_number=roll_number,
            full_name=name,
            class_id=school_class.id
        ).save()
    return _make_student

@pytest.fixture
def students(make_student):
    return [make_student(f'S{number:03d}') for number in range(1, 4)]

@pytest.fixture
def parent(make_user, students):
    """Parent linked to the first student only."""
    user = make_user('parent@school.edu', UserRole.PARENT, name='Parent User')
    guardian = Guardian(user_id=user.id, name=user.name)
    guardian.students.append(students[0])
    guardian.save()
    return user

@pytest.fixture
def auth_headers(app):
    """Build bearer headers for a user."""
    def _auth_headers(user):
        token = create_access_token(identity=str(user.id))
        return {'Authorization': f'Bearer {token}'}
    return _auth_headers
