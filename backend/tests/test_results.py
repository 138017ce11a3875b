"""Test result recording and grade derivation."""
import pytest
from sqlalchemy.exc import OperationalError
from school_portal.models.audit_log import AuditLog
from school_portal.models.result import ResultRecord
from school_portal.services.authorization import Caller
from school_portal.services.result_service import ResultService
from school_portal.utils.exceptions import PersistenceError

def test_single_result_gets_derived_grade(client, teacher, students, auth_headers):
    response = client.post('/api/results/', json={
        'studentId': students[0].id,
        'subject': 'Mathematics',
        'score': 85,
        'grade': 'F'
    }, headers=auth_headers(teacher))

    assert response.status_code == 200
    data = response.get_json()['data']
    assert data['score'] == 85
    assert data['grade'] == 'A'
    assert data['recorded_by'] == teacher.id

@pytest.mark.parametrize('score,grade', [(90, 'A+'), (89, 'A'), (50, 'D'), (49, 'F'), (0, 'F')])
def test_boundary_scores(client, teacher, students, auth_headers, score, grade):
    response = client.post('/api/results/', json={
        'studentId': students[0].id, 'subject': 'Physics', 'score': score
    }, headers=auth_headers(teacher))

    assert response.get_json()['data']['grade'] == grade

def test_rescoring_updates_the_same_row(client, teacher, students, auth_headers):
    headers = auth_headers(teacher)
    client.post('/api/results/', json={'studentId': students[0].id, 'subject': 'Chemistry', 'score': 45},
                headers=headers)
    client.post('/api/results/', json={'studentId': students[0].id, 'subject': 'Chemistry', 'score': 72},
                headers=headers)

    rows = ResultRecord.query.filter_by(student_id=students[0].id, subject='Chemistry').all()
    assert len(rows) == 1
    assert rows[0].score == 72
    assert rows[0].grade == 'B'

def test_batch_of_results(client, admin, students, auth_headers):
    response = client.post('/api/results/', json={'results': [
        {'studentId': students[0].id, 'subject': 'History', 'score': 91},
        {'studentId': students[1].id, 'subject': 'History', 'score': 64},
    ]}, headers=auth_headers(admin))

    assert response.status_code == 200
    data = response.get_json()['data']
    assert data['count'] == 2
    assert [r['grade'] for r in data['results']] == ['A+', 'C']

def test_batch_with_bad_score_writes_nothing(client, teacher, students, auth_headers):
    response = client.post('/api/results/', json={'results': [
        {'studentId': students[0].id, 'subject': 'History', 'score': 91},
        {'studentId': students[1].id, 'subject': 'History', 'score': 101},
    ]}, headers=auth_headers(teacher))

    assert response.status_code == 400
    assert ResultRecord.query.count() == 0

@pytest.mark.parametrize('payload', [
    {'subject': 'Maths', 'score': 50},
    {'studentId': 1, 'score': 50},
    {'studentId': 1, 'subject': 'Maths'},
])
def test_missing_fields(client, teacher, students, auth_headers, payload):
    response = client.post('/api/results/', json=payload, headers=auth_headers(teacher))

    assert response.status_code == 400
    assert response.get_json()['error'] == 'Student ID, subject, and score are required'

@pytest.mark.parametrize('score', [85.5, '85', True, -1])
def test_score_must_be_integer_in_range(client, teacher, students, auth_headers, score):
    response = client.post('/api/results/', json={
        'studentId': students[0].id, 'subject': 'Maths', 'score': score
    }, headers=auth_headers(teacher))
    assert response.status_code == 400

def test_student_may_not_record_results(client, students, auth_headers):
    response = client.post('/api/results/', json={
        'studentId': students[0].id, 'subject': 'Maths', 'score': 100
    }, headers=auth_headers(students[0].user))

    assert response.status_code == 403
    assert ResultRecord.query.count() == 0

def test_unknown_student(client, teacher, auth_headers):
    response = client.post('/api/results/', json={
        'studentId': 4242, 'subject': 'Maths', 'score': 70
    }, headers=auth_headers(teacher))
    assert response.status_code == 400

def test_each_result_is_audited(client, teacher, students, auth_headers):
    client.post('/api/results/', json={'results': [
        {'studentId': students[0].id, 'subject': 'Art', 'score': 77},
        {'studentId': students[1].id, 'subject': 'Art', 'score': 38},
    ]}, headers=auth_headers(teacher))

    entries = AuditLog.query.filter_by(action='result_recorded').order_by(AuditLog.id).all()
    assert len(entries) == 2
    assert entries[0].details == {'student_id': students[0].id, 'subject': 'Art', 'score': 77, 'grade': 'B'}
    assert entries[1].details['grade'] == 'F'
    assert entries[0].resource_id is not None

def test_storage_failure_reports_partial_progress(app, teacher, students, monkeypatch):
    original = ResultRecord.upsert
    calls = []

    def flaky_upsert(values, conflict_columns, update_columns):
        calls.append(values)
        if len(calls) == 2:
            raise OperationalError('INSERT INTO results', {}, Exception('disk I/O error'))
        return original(values, conflict_columns=conflict_columns, update_columns=update_columns)

    monkeypatch.setattr(ResultRecord, 'upsert', flaky_upsert)

    with pytest.raises(PersistenceError) as exc_info:
        ResultService.record_results(Caller.from_user(teacher), [
            {'studentId': student.id, 'subject': 'Maths', 'score': 60} for student in students
        ])

    assert exc_info.value.succeeded == 1
    assert exc_info.value.total == 3
    assert ResultRecord.query.count() == 1

def test_results_visible_to_guardian_but_not_other_students(client, teacher, parent, students, auth_headers):
    client.post('/api/results/', json={'studentId': students[0].id, 'subject': 'Maths', 'score': 95},
                headers=auth_headers(teacher))

    response = client.get(f'/api/students/{students[0].id}/results', headers=auth_headers(parent))
    assert response.status_code == 200
    data = response.get_json()['data']
    assert data['results'][0]['grade'] == 'A+'
    assert data['summary'] == {'subjects': 1, 'average_score': 95.0, 'average_grade': 'A+'}

    response = client.get(f'/api/students/{students[0].id}/results', headers=auth_headers(students[1].user))
    assert response.status_code == 403

    response = client.get(f'/api/students/{students[1].id}/results', headers=auth_headers(parent))
    assert response.status_code == 403
