"""
Tests for notifications and subscriptions.
"""
from datetime import datetime, timedelta

from hiretrack_app.models import db, Notification
from hiretrack_app.services.notifications import notify_users


def add_notification(app, user_id, age_days=0, read=False, title='Hello'):
    with app.app_context():
        notification = Notification(
            user_id=user_id,
            type='test',
            title=title,
            message='Something happened',
            read=read,
            created_at=datetime.utcnow() - timedelta(days=age_days),
        )
        db.session.add(notification)
        db.session.commit()
        return notification.id


class TestNotifications:
    """Tests for the notification inbox."""

    def test_list_prunes_old_entries(self, app, client, admin):
        add_notification(app, admin.id, title='Fresh')
        add_notification(app, admin.id, age_days=120, title='Stale')

        response = client.get('/api/notifications', headers=admin.headers)

        assert [n['title'] for n in response.json['notifications']] == ['Fresh']
        assert response.json['unread_count'] == 1
        with app.app_context():
            assert Notification.query.count() == 1

    def test_mark_read_and_count(self, app, client, admin):
        first = add_notification(app, admin.id)
        add_notification(app, admin.id)

        client.patch(f'/api/notifications/{first}/read', headers=admin.headers)
        assert client.get('/api/notifications/unread-count', headers=admin.headers).json == {'count': 1}

        response = client.post('/api/notifications/mark-all-read', headers=admin.headers)
        assert response.json['updated'] == 1
        assert client.get('/api/notifications/unread-count', headers=admin.headers).json == {'count': 0}

    def test_cannot_touch_other_users_notifications(self, app, client, admin, reviewer):
        theirs = add_notification(app, admin.id)
        assert client.patch(f'/api/notifications/{theirs}/read', headers=reviewer.headers).status_code == 404
        assert client.delete(f'/api/notifications/{theirs}', headers=reviewer.headers).status_code == 404

    def test_delete(self, app, client, admin):
        notification_id = add_notification(app, admin.id)
        assert client.delete(f'/api/notifications/{notification_id}', headers=admin.headers).status_code == 200
        with app.app_context():
            assert db.session.get(Notification, notification_id) is None

    def test_notify_users_deduplicates(self, app, admin, reviewer):
        with app.app_context():
            created = notify_users([admin.id, admin.id, reviewer.id], 'test', 'Hi', 'There',
                                   exclude_user_id=reviewer.id)
            assert created == 1
            assert Notification.query.filter_by(user_id=admin.id).count() == 1


class TestSubscriptions:
    """Tests for subscription-driven notifications."""

    def test_replace_subscriptions(self, client, admin):
        response = client.put('/api/notifications/subscriptions', json={'subscriptions': [
            {'type': 'department', 'value': 'Design'},
            {'type': 'department', 'value': 'Design'},
            {'type': 'all', 'value': 'ignored'},
        ]}, headers=admin.headers)

        assert response.status_code == 200
        assert sorted((s['type'], s['value']) for s in response.json) == [
            ('all', None), ('department', 'Design'),
        ]

    def test_value_required_for_scoped_types(self, client, admin):
        response = client.put('/api/notifications/subscriptions',
                              json={'subscriptions': [{'type': 'job'}]}, headers=admin.headers)
        assert response.status_code == 400

    def test_department_subscriber_hears_about_new_applicant(self, app, client, admin, make_job,
                                                             application_form):
        client.put('/api/notifications/subscriptions',
                   json={'subscriptions': [{'type': 'department', 'value': 'Design'}]},
                   headers=admin.headers)
        job_id = make_job(department='Design')

        app.test_client().post('/api/applicants', data=application_form(job_id),
                               content_type='multipart/form-data')

        inbox = client.get('/api/notifications', headers=admin.headers).json
        assert inbox['unread_count'] == 1
        assert inbox['notifications'][0]['type'] == 'new_applicant'
        assert inbox['notifications'][0]['message'].startswith('Grace Hopper applied for Product Designer')

    def test_other_department_is_quiet(self, app, client, admin, make_job, application_form):
        client.put('/api/notifications/subscriptions',
                   json={'subscriptions': [{'type': 'department', 'value': 'Engineering'}]},
                   headers=admin.headers)
        job_id = make_job(department='Design')

        app.test_client().post('/api/applicants', data=application_form(job_id),
                               content_type='multipart/form-data')

        assert client.get('/api/notifications/unread-count', headers=admin.headers).json == {'count': 0}
