"""Test announcements, notifications, the audit log and dashboards."""
from datetime import date
from unittest.mock import patch
import requests
from sqlalchemy.exc import OperationalError
from school_portal import db
from school_portal.models.audit_log import AuditLog
from school_portal.models.notification import Notification
from school_portal.services.audit_service import AuditService

class TestAnnouncements:

    def post(self, client, user, auth_headers, audience, title):
        return client.post('/api/announcements/', json={
            'title': title, 'body': 'Details inside.', 'audience': audience
        }, headers=auth_headers(user))

    def test_audiences_filter_the_listing(self, client, admin, teacher, parent, students, auth_headers):
        self.post(client, teacher, auth_headers, 'all', 'Sports day')
        self.post(client, teacher, auth_headers, 'parents', 'Parents evening')
        self.post(client, teacher, auth_headers, 'staff', 'Staff meeting')

        def titles(user):
            data = client.get('/api/announcements/', headers=auth_headers(user)).get_json()['data']
            return sorted(a['title'] for a in data['announcements'])

        assert titles(parent) == ['Parents evening', 'Sports day']
        assert titles(students[0].user) == ['Sports day']
        assert titles(teacher) == ['Sports day', 'Staff meeting']
        assert titles(admin) == ['Parents evening', 'Sports day', 'Staff meeting']

    def test_students_cannot_post(self, client, students, auth_headers):
        response = self.post(client, students[0].user, auth_headers, 'all', 'Free cake')
        assert response.status_code == 403

    def test_unknown_audience(self, client, teacher, auth_headers):
        response = self.post(client, teacher, auth_headers, 'aliens', 'Hello')
        assert response.status_code == 400

    def test_only_admin_deletes(self, client, admin, teacher, auth_headers):
        created = self.post(client, teacher, auth_headers, 'all', 'Typo').get_json()['data']

        assert client.delete(f"/api/announcements/{created['id']}", headers=auth_headers(teacher)).status_code == 403
        assert client.delete(f"/api/announcements/{created['id']}", headers=auth_headers(admin)).status_code == 200

class TestNotifications:

    def test_send_and_read(self, client, teacher, parent, students, auth_headers):
        response = client.post('/api/notifications/', json={
            'userIds': [parent.id, students[0].user_id],
            'title': 'Trip tomorrow',
            'message': 'Bring a packed lunch.',
            'type': 'info'
        }, headers=auth_headers(teacher))

        assert response.status_code == 201
        assert response.get_json()['data']['count'] == 2

        inbox = client.get('/api/notifications/', headers=auth_headers(parent)).get_json()['data']
        assert inbox['total'] == 1
        notification_id = inbox['notifications'][0]['id']

        response = client.post(f'/api/notifications/{notification_id}/read', headers=auth_headers(parent))
        assert response.get_json()['data']['read'] is True

        unread = client.get('/api/notifications/?unread_only=true', headers=auth_headers(parent)).get_json()
        assert unread['data']['total'] == 0

        entry = AuditLog.query.filter_by(action='notification_sent').one()
        assert entry.details['recipientCount'] == 2

    def test_cannot_mark_someone_elses_notification(self, client, teacher, parent, students, auth_headers):
        client.post('/api/notifications/', json={
            'userIds': [parent.id], 'title': 'Private', 'message': 'For the parent only.'
        }, headers=auth_headers(teacher))
        notification = Notification.query.one()

        response = client.post(f'/api/notifications/{notification.id}/read', headers=auth_headers(students[0].user))
        assert response.status_code == 404

    def test_parent_cannot_send(self, client, parent, teacher, auth_headers):
        response = client.post('/api/notifications/', json={
            'userIds': [teacher.id], 'title': 'Hi', 'message': 'Hello there'
        }, headers=auth_headers(parent))
        assert response.status_code == 403

    def test_unknown_recipient(self, client, teacher, auth_headers):
        response = client.post('/api/notifications/', json={
            'userIds': [teacher.id, 9999], 'title': 'Hi', 'message': 'Hello'
        }, headers=auth_headers(teacher))
        assert response.status_code == 400
        assert Notification.query.count() == 0

    def test_email_failure_does_not_fail_the_send(self, app, client, teacher, parent, auth_headers):
        app.config['EMAIL_ENABLED'] = True
        with patch('school_portal.services.email_service.requests.post',
                   side_effect=requests.ConnectionError('provider down')) as post:
            response = client.post('/api/notifications/', json={
                'userIds': [parent.id], 'title': 'Hi', 'message': 'Hello', 'sendEmail': True
            }, headers=auth_headers(teacher))

        assert response.status_code == 201
        post.assert_called_once()
        assert Notification.query.count() == 1

class TestAudit:

    def test_admin_pages_through_entries(self, client, admin, auth_headers):
        for n in range(3):
            AuditService.log(admin.id, 'test_action', 'thing', resource_id=n)

        data = client.get('/api/audit/?per_page=2', headers=auth_headers(admin)).get_json()['data']
        assert data['total'] == 3
        assert [entry['resource_id'] for entry in data['entries']] == ['2', '1']

    def test_teacher_cannot_read_audit_log(self, client, teacher, auth_headers):
        assert client.get('/api/audit/', headers=auth_headers(teacher)).status_code == 403

    def test_audit_failure_is_swallowed(self, app, admin, monkeypatch):
        def broken_commit():
            raise OperationalError('INSERT INTO audit_logs', {}, Exception('read-only database'))

        monkeypatch.setattr(db.session, 'commit', broken_commit)
        assert AuditService.log(admin.id, 'test_action', 'thing') is None

class TestDashboard:

    def test_admin_counts(self, client, admin, teacher, students, auth_headers):
        client.post('/api/attendance/', json={'date': date.today().isoformat(), 'records': [
            {'studentId': students[0].id, 'status': 'present'},
            {'studentId': students[1].id, 'status': 'absent'},
        ]}, headers=auth_headers(teacher))

        data = client.get('/api/dashboard/', headers=auth_headers(admin)).get_json()['data']
        assert data['role'] == 'admin'
        assert data['students'] == 3
        assert data['classes'] == 1
        assert data['attendance_today']['present'] == 1
        assert data['attendance_today']['absent'] == 1

    def test_teacher_sees_own_classes(self, client, teacher, school_class, auth_headers):
        data = client.get('/api/dashboard/', headers=auth_headers(teacher)).get_json()['data']
        assert data['role'] == 'teacher'
        assert [c['name'] for c in data['classes']] == [school_class.name]

    def test_parent_sees_linked_children(self, client, teacher, parent, students, auth_headers):
        client.post('/api/results/', json={'studentId': students[0].id, 'subject': 'Maths', 'score': 81},
                    headers=auth_headers(teacher))

        data = client.get('/api/dashboard/', headers=auth_headers(parent)).get_json()['data']
        assert data['role'] == 'parent'
        assert len(data['children']) == 1
        child = data['children'][0]
        assert child['student']['id'] == students[0].id
        assert child['results_summary']['average_grade'] == 'A'

    def test_student_view(self, client, students, auth_headers):
        data = client.get('/api/dashboard/', headers=auth_headers(students[0].user)).get_json()['data']
        assert data['role'] == 'student'
        assert data['attendance']['total_days'] == 0
        assert data['assignments'] == []
