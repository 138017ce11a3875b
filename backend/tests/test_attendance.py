"""Test attendance recording."""
from datetime import date, timedelta
import pytest
from sqlalchemy.exc import OperationalError
from school_portal.models.attendance import AttendanceRecord
from school_portal.models.audit_log import AuditLog
from school_portal.services.attendance_service import AttendanceService
from school_portal.services.authorization import Caller
from school_portal.utils.exceptions import AuthorizationError, PersistenceError

DAY = '2024-03-01'

def post_attendance(client, headers, records, day=DAY):
    return client.post('/api/attendance/', json={'date': day, 'records': records}, headers=headers)

def test_teacher_records_attendance(client, teacher, students, auth_headers):
    records = [
        {'studentId': students[0].id, 'status': 'present'},
        {'studentId': students[1].id, 'status': 'ABSENT'},
        {'studentId': students[2].id, 'status': 'Late'},
    ]
    response = post_attendance(client, auth_headers(teacher), records)

    assert response.status_code == 200
    data = response.get_json()
    assert data['success'] is True
    assert data['data']['count'] == 3
    assert data['data']['date'] == DAY
    assert [r['status'] for r in data['data']['records']] == ['present', 'absent', 'late']
    assert all(r['recorded_by'] == teacher.id for r in data['data']['records'])

def test_replaying_a_batch_keeps_one_row_per_student_and_day(client, teacher, students, auth_headers):
    records = [{'studentId': students[0].id, 'status': 'present'}]
    post_attendance(client, auth_headers(teacher), records)
    post_attendance(client, auth_headers(teacher), records)

    assert AttendanceRecord.query.filter_by(student_id=students[0].id).count() == 1

def test_later_mark_overwrites_earlier_one(client, teacher, admin, students, auth_headers):
    post_attendance(client, auth_headers(teacher), [{'studentId': students[0].id, 'status': 'absent'}])
    post_attendance(client, auth_headers(admin), [{'studentId': students[0].id, 'status': 'excused'}])

    rows = AttendanceRecord.query.filter_by(student_id=students[0].id).all()
    assert len(rows) == 1
    assert rows[0].status == 'excused'
    assert rows[0].recorded_by == admin.id

def test_recorder_comes_from_token_not_payload(client, teacher, admin, students, auth_headers):
    response = client.post('/api/attendance/', json={
        'date': DAY,
        'recorded_by': admin.id,
        'records': [{'studentId': students[0].id, 'status': 'present', 'recorded_by': admin.id}]
    }, headers=auth_headers(teacher))

    assert response.status_code == 200
    assert AttendanceRecord.query.one().recorded_by == teacher.id

def test_invalid_status_rejects_whole_batch(client, teacher, students, auth_headers):
    response = post_attendance(client, auth_headers(teacher), [
        {'studentId': students[0].id, 'status': 'present'},
        {'studentId': students[1].id, 'status': 'maybe'},
    ])

    assert response.status_code == 400
    assert response.get_json()['success'] is False
    assert AttendanceRecord.query.count() == 0

def test_oversized_batch_is_rejected(client, teacher, students, auth_headers):
    records = [{'studentId': students[0].id, 'status': 'present'}] * 201
    response = post_attendance(client, auth_headers(teacher), records)

    assert response.status_code == 400
    assert 'Maximum 200' in response.get_json()['error']
    assert AttendanceRecord.query.count() == 0

def test_empty_batch_is_rejected(client, teacher, auth_headers):
    response = post_attendance(client, auth_headers(teacher), [])
    assert response.status_code == 400

@pytest.mark.parametrize('day', ['2099-01-01', '2024-13-01', '01-03-2024'])
def test_bad_dates_are_rejected(client, teacher, students, auth_headers, day):
    response = post_attendance(client, auth_headers(teacher), [{'studentId': students[0].id, 'status': 'present'}], day)
    assert response.status_code == 400
    assert AttendanceRecord.query.count() == 0

def test_today_is_accepted(client, teacher, students, auth_headers):
    response = post_attendance(
        client, auth_headers(teacher),
        [{'studentId': students[0].id, 'status': 'present'}],
        date.today().isoformat()
    )
    assert response.status_code == 200

def test_unknown_student_rejects_whole_batch(client, teacher, students, auth_headers):
    response = post_attendance(client, auth_headers(teacher), [
        {'studentId': students[0].id, 'status': 'present'},
        {'studentId': 9999, 'status': 'present'},
    ])

    assert response.status_code == 400
    assert '9999' in response.get_json()['error']
    assert AttendanceRecord.query.count() == 0

def test_student_may_not_record(client, students, auth_headers):
    response = post_attendance(client, auth_headers(students[0].user), [
        {'studentId': students[0].id, 'status': 'present'}
    ])

    assert response.status_code == 403
    assert response.get_json()['error'] == 'Only admins and teachers can record attendance'

def test_denial_happens_before_validation(client, parent, auth_headers):
    response = post_attendance(client, auth_headers(parent), [{'studentId': 'x', 'status': 'maybe'}], 'nope')
    assert response.status_code == 403

def test_missing_token(client):
    response = post_attendance(client, {}, [])
    assert response.status_code == 401

def test_success_writes_one_audit_entry_without_statuses(client, teacher, students, auth_headers):
    post_attendance(client, auth_headers(teacher), [
        {'studentId': student.id, 'status': 'present'} for student in students
    ])

    entries = AuditLog.query.filter_by(action='attendance_marked').all()
    assert len(entries) == 1
    assert entries[0].user_id == teacher.id
    assert entries[0].details == {'date': DAY, 'count': 3}

def test_storage_failure_reports_partial_progress(app, teacher, students, monkeypatch):
    original = AttendanceRecord.upsert
    calls = []

    def flaky_upsert(values, conflict_columns, update_columns):
        calls.append(values['student_id'])
        if len(calls) == 3:
            raise OperationalError('INSERT INTO attendance', {}, Exception('disk I/O error'))
        return original(values, conflict_columns=conflict_columns, update_columns=update_columns)

    monkeypatch.setattr(AttendanceRecord, 'upsert', flaky_upsert)

    with pytest.raises(PersistenceError) as exc_info:
        AttendanceService.record_attendance(
            Caller.from_user(teacher),
            DAY,
            [{'studentId': student.id, 'status': 'present'} for student in students]
        )

    assert exc_info.value.succeeded == 2
    assert exc_info.value.total == 3
    # Rows committed before the failure are kept
    assert AttendanceRecord.query.count() == 2
    assert AuditLog.query.filter_by(action='attendance_marked').count() == 0

def test_storage_failure_response_carries_counts(client, teacher, students, auth_headers, monkeypatch):
    def failing_upsert(values, conflict_columns, update_columns):
        raise OperationalError('INSERT INTO attendance', {}, Exception('database is locked'))

    monkeypatch.setattr(AttendanceRecord, 'upsert', failing_upsert)
    response = post_attendance(client, auth_headers(teacher), [
        {'studentId': student.id, 'status': 'present'} for student in students
    ])

    assert response.status_code == 400
    data = response.get_json()
    assert data['succeeded'] == 0
    assert data['failed'] == 3

def test_service_rejects_caller_without_role(app, students):
    caller = Caller(user_id=students[0].user_id, roles=frozenset())
    with pytest.raises(AuthorizationError):
        AttendanceService.record_attendance(caller, DAY, [])

def test_summary_counts_late_as_attended(app, teacher, students):
    caller = Caller.from_user(teacher)
    start = date(2024, 3, 1)
    for offset, status in enumerate(['present', 'late', 'absent', 'excused']):
        AttendanceService.record_attendance(
            caller,
            (start + timedelta(days=offset)).isoformat(),
            [{'studentId': students[0].id, 'status': status}]
        )

    summary = AttendanceService.summarize(students[0].id)
    assert summary['total_days'] == 4
    assert summary['counts'] == {'present': 1, 'absent': 1, 'late': 1, 'excused': 1}
    assert summary['attendance_rate'] == 50.0

def test_class_roster_shows_unmarked_students(client, teacher, students, school_class, auth_headers):
    post_attendance(client, auth_headers(teacher), [{'studentId': students[1].id, 'status': 'late'}])

    response = client.get(f'/api/classes/{school_class.id}/attendance?date={DAY}', headers=auth_headers(teacher))
    assert response.status_code == 200
    marks = {row['student_id']: row['status'] for row in response.get_json()['data']['students']}
    assert marks == {students[0].id: None, students[1].id: 'late', students[2].id: None}
