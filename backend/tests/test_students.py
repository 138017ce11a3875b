"""Test student management endpoints."""
import io
from school_portal import db
from school_portal.models.audit_log import AuditLog
from school_portal.models.student import Student, StudentStatus
from school_portal.models.user import User

PASSWORD = 'Password123'

def student_payload(number, **overrides):
    payload = {
        'email': f'bulk{number}@school.edu',
        'password': PASSWORD,
        'name': f'Bulk Student {number}',
        'rollNumber': f'B{number:03d}'
    }
    payload.update(overrides)
    return payload

def test_admin_creates_student(client, admin, school_class, auth_headers):
    response = client.post('/api/students/', json=student_payload(1, classId=school_class.id),
                           headers=auth_headers(admin))

    assert response.status_code == 201
    data = response.get_json()['data']
    assert data['roll_number'] == 'B001'
    assert data['class_id'] == school_class.id

def test_teacher_cannot_create_student(client, teacher, auth_headers):
    response = client.post('/api/students/', json=student_payload(1), headers=auth_headers(teacher))
    assert response.status_code == 403

def test_unknown_class_is_rejected(client, admin, auth_headers):
    response = client.post('/api/students/', json=student_payload(1, classId=777), headers=auth_headers(admin))
    assert response.status_code == 400

def test_list_students_with_filters(client, teacher, students, auth_headers):
    response = client.get('/api/students/?search=S002', headers=auth_headers(teacher))

    assert response.status_code == 200
    data = response.get_json()['data']
    assert data['total'] == 1
    assert data['students'][0]['roll_number'] == 'S002'

def test_list_students_is_paginated(client, teacher, students, auth_headers):
    data = client.get('/api/students/?per_page=2&page=2', headers=auth_headers(teacher)).get_json()['data']
    assert data['total'] == 3
    assert data['pages'] == 2
    assert len(data['students']) == 1

def test_students_cannot_list_students(client, students, auth_headers):
    response = client.get('/api/students/', headers=auth_headers(students[0].user))
    assert response.status_code == 403

def test_update_student(client, admin, students, auth_headers):
    response = client.put(f'/api/students/{students[0].id}', json={
        'full_name': 'Renamed Student', 'status': 'suspended'
    }, headers=auth_headers(admin))

    assert response.status_code == 200
    student = db.session.get(Student, students[0].id)
    assert student.full_name == 'Renamed Student'
    assert student.user.name == 'Renamed Student'
    assert student.status == StudentStatus.SUSPENDED

def test_delete_withdraws_and_deactivates(client, admin, students, auth_headers):
    response = client.delete(f'/api/students/{students[0].id}', headers=auth_headers(admin))

    assert response.status_code == 200
    student = db.session.get(Student, students[0].id)
    assert student.status == StudentStatus.WITHDRAWN
    assert student.user.is_active is False

def test_missing_student(client, admin, auth_headers):
    response = client.get('/api/students/424242', headers=auth_headers(admin))
    assert response.status_code == 404
    assert response.get_json()['error'] == 'Student not found'

def test_student_sees_own_record_only(client, students, auth_headers):
    headers = auth_headers(students[0].user)
    assert client.get(f'/api/students/{students[0].id}', headers=headers).status_code == 200
    assert client.get(f'/api/students/{students[1].id}', headers=headers).status_code == 403

class TestBulkImport:

    def test_rows_succeed_or_fail_independently(self, client, admin, students, auth_headers):
        response = client.post('/api/students/bulk', json={'students': [
            student_payload(1),
            student_payload(2, email='not-an-email'),
            student_payload(3, rollNumber=students[0].roll_number),
            student_payload(4),
        ]}, headers=auth_headers(admin))

        assert response.status_code == 200
        data = response.get_json()['data']
        assert data['total'] == 4
        assert data['successful'] == 2
        assert data['failed'] == 2
        assert [row['row'] for row in data['errors']] == [2, 3]
        assert [row['row'] for row in data['results']] == [1, 4]
        assert Student.query.filter(Student.roll_number.like('B%')).count() == 2

    def test_import_is_audited_with_totals(self, client, admin, auth_headers):
        client.post('/api/students/bulk', json={'students': [student_payload(1), student_payload(2, name='')]},
                    headers=auth_headers(admin))

        entry = AuditLog.query.filter_by(action='bulk_import_students').one()
        assert entry.details == {'total': 2, 'success': 1, 'failed': 1}

    def test_more_than_one_hundred_rows_is_rejected(self, client, admin, auth_headers):
        response = client.post('/api/students/bulk', json={
            'students': [student_payload(n) for n in range(1, 102)]
        }, headers=auth_headers(admin))

        assert response.status_code == 400
        assert 'Maximum 100' in response.get_json()['error']
        assert User.query.filter(User.email.like('bulk%')).count() == 0

    def test_teacher_cannot_import(self, client, teacher, auth_headers):
        response = client.post('/api/students/bulk', json={'students': [student_payload(1)]},
                               headers=auth_headers(teacher))
        assert response.status_code == 403

    def test_csv_upload(self, client, admin, auth_headers):
        csv_content = (
            'email,password,name,rollNumber\n'
            f'csv1@school.edu,{PASSWORD},Csv One,C001\n'
            f'csv2@school.edu,{PASSWORD},Csv Two,C002\n'
        )
        response = client.post(
            '/api/students/bulk/upload',
            data={'file': (io.BytesIO(csv_content.encode('utf-8')), 'students.csv')},
            content_type='multipart/form-data',
            headers=auth_headers(admin)
        )

        assert response.status_code == 200
        assert response.get_json()['data']['successful'] == 2

    def test_csv_missing_columns(self, client, admin, auth_headers):
        response = client.post(
            '/api/students/bulk/upload',
            data={'file': (io.BytesIO(b'email,name\na@b.co,A B\n'), 'students.csv')},
            content_type='multipart/form-data',
            headers=auth_headers(admin)
        )

        assert response.status_code == 400
        assert 'Missing columns' in response.get_json()['error']

def test_export_csv(client, admin, students, auth_headers):
    response = client.get('/api/students/export', headers=auth_headers(admin))

    assert response.status_code == 200
    assert response.mimetype == 'text/csv'
    body = response.data.decode('utf-8-sig')
    assert body.splitlines()[0] == 'roll_number,full_name,email,class_name,status,created_at'
    assert 'S001' in body
