"""
Tests for user administration, reviews, settings and the dashboard.
"""
from datetime import datetime, timedelta
from hiretrack_app.models import db, User


def user_body(**overrides):
    body = {
        'email': 'new.reviewer@example.com',
        'password': 'Password123',
        'name': 'New Reviewer',
        'role': 'reviewer',
    }
    body.update(overrides)
    return body


class TestUsers:
    """Tests for /api/users."""

    def test_create_user(self, app, client, admin):
        response = client.post('/api/users', json=user_body(email='New.Reviewer@Example.com'),
                               headers=admin.headers)
        assert response.status_code == 201
        assert response.json['email'] == 'new.reviewer@example.com'
        assert 'password_hash' not in response.json

        with app.app_context():
            assert db.session.get(User, response.json['id']).check_password('Password123')

    def test_duplicate_email(self, client, admin):
        client.post('/api/users', json=user_body(), headers=admin.headers)
        response = client.post('/api/users', json=user_body(), headers=admin.headers)
        assert response.status_code == 400

    def test_weak_password(self, client, admin):
        response = client.post('/api/users', json=user_body(password='short'), headers=admin.headers)
        assert response.status_code == 400
        assert response.json['fields']['password'] == 'Password must be at least 8 characters long'

    def test_invalid_role(self, client, admin):
        response = client.post('/api/users', json=user_body(role='owner'), headers=admin.headers)
        assert response.status_code == 400
        assert response.json['fields']['role'].startswith('Invalid role')

    def test_admin_only(self, client, manager, reviewer):
        assert client.get('/api/users', headers=manager.headers).status_code == 403
        assert client.post('/api/users', json=user_body(), headers=manager.headers).status_code == 403
        assert client.get('/api/users', headers=reviewer.headers).status_code == 403

    def test_list_filters_by_role(self, client, admin, reviewer):
        response = client.get('/api/users?role=reviewer', headers=admin.headers)
        assert [u['id'] for u in response.json] == [reviewer.id]

    def test_update_scope(self, client, admin, make_user):
        target = make_user('hiring_manager')
        response = client.put(f'/api/users/{target.id}', json={
            'scoped_departments': ['Design'],
            'scope_mode': 'and',
            'offer_access': True,
        }, headers=admin.headers)

        assert response.status_code == 200
        assert response.json['scoped_departments'] == ['Design']
        assert response.json['scope_mode'] == 'and'
        assert response.json['offer_access'] is True

    def test_cannot_delete_self(self, client, admin):
        response = client.delete(f'/api/users/{admin.id}', headers=admin.headers)
        assert response.status_code == 400
        assert response.json['error'] == 'You cannot delete your own account'

    def test_delete_other_user(self, app, client, admin, reviewer):
        assert client.delete(f'/api/users/{reviewer.id}', headers=admin.headers).status_code == 200
        with app.app_context():
            assert db.session.get(User, reviewer.id) is None


class TestReviews:
    """Tests for reviewer scorecards."""

    def test_upsert_keeps_one_review_per_reviewer(self, client, admin, make_applicant):
        applicant_id = make_applicant()
        first = client.post(f'/api/reviews/applicant/{applicant_id}', json={'rating': 3}, headers=admin.headers)
        second = client.post(f'/api/reviews/applicant/{applicant_id}',
                             json={'rating': 5, 'recommendation': 'yes'}, headers=admin.headers)

        assert first.status_code == 201
        assert second.status_code == 200
        assert second.json['id'] == first.json['id']
        assert len(client.get(f'/api/reviews/applicant/{applicant_id}', headers=admin.headers).json) == 1

    def test_summary(self, client, admin, manager, make_applicant):
        applicant_id = make_applicant()
        client.post(f'/api/reviews/applicant/{applicant_id}', json={'rating': 4, 'recommendation': 'yes'},
                    headers=admin.headers)
        client.post(f'/api/reviews/applicant/{applicant_id}', json={'rating': 2, 'recommendation': 'no'},
                    headers=manager.headers)

        summary = client.get(f'/api/reviews/applicant/{applicant_id}/summary', headers=admin.headers).json
        assert summary['count'] == 2
        assert summary['averages']['rating'] == 3.0
        assert summary['averages']['culture_fit'] is None
        assert summary['recommendations']['yes'] == 1
        assert summary['recommendations']['no'] == 1

    def test_only_author_or_admin_deletes(self, client, admin, manager, make_user, make_applicant):
        applicant_id = make_applicant()
        review = client.post(f'/api/reviews/applicant/{applicant_id}', json={'rating': 4},
                             headers=admin.headers).json
        other_manager = make_user('hiring_manager')

        assert client.delete(f"/api/reviews/{review['id']}", headers=other_manager.headers).status_code == 403
        assert client.delete(f"/api/reviews/{review['id']}", headers=admin.headers).status_code == 200


class TestSettings:
    """Tests for site settings and email templates."""

    def test_public_setting_whitelist(self, client, admin):
        client.put('/api/settings/site/positions_intro', json={'value': '<p>Join us</p>'}, headers=admin.headers)
        client.put('/api/settings/site/internal_notes', json={'value': 'secret'}, headers=admin.headers)

        assert client.get('/api/settings/site/public/positions_intro').json['value'] == '<p>Join us</p>'
        assert client.get('/api/settings/site/public/internal_notes').status_code == 404

    def test_email_template_defaults_and_override(self, client, admin):
        default = client.get('/api/settings/email-templates/rejection', headers=admin.headers).json
        assert '{{jobTitle}}' in default['subject']

        client.put('/api/settings/email-templates/rejection',
                   json={'subject': 'About {{jobTitle}}', 'body': '<p>Hi {{firstName}}</p>'},
                   headers=admin.headers)
        stored = client.get('/api/settings/email-templates/rejection', headers=admin.headers).json
        assert stored['subject'] == 'About {{jobTitle}}'

    def test_unknown_template(self, client, admin):
        assert client.get('/api/settings/email-templates/welcome', headers=admin.headers).status_code == 404


class TestDashboard:
    """Tests for dashboard metrics."""

    def test_funnel_counts_later_stages(self, client, admin, make_applicant):
        make_applicant(stage='new')
        make_applicant(stage='interview')
        make_applicant(stage='hired')

        funnel = {row['stage']: row for row in client.get('/api/dashboard/funnel', headers=admin.headers).json}
        assert funnel['new']['count'] == 3
        assert funnel['interview']['count'] == 2
        assert funnel['hired']['count'] == 1
        assert funnel['hired']['rate'] == 33.3

    def test_stats_respect_visibility(self, client, admin, reviewer, make_job, make_applicant):
        make_job()
        make_applicant(stage='interview')

        assert client.get('/api/dashboard/stats', headers=admin.headers).json['in_interview'] == 1
        stats = client.get('/api/dashboard/stats', headers=reviewer.headers).json
        assert stats['in_interview'] == 0
        assert stats['open_jobs'] == 0

    def test_activity_lists_newest_first(self, client, admin, make_applicant):
        start = datetime(2026, 1, 1)
        ids = [make_applicant(first_name=f'Applicant{i}', created_at=start + timedelta(hours=i)) for i in range(12)]
        client.post(f'/api/reviews/applicant/{ids[0]}', json={'rating': 4}, headers=admin.headers)

        activity = client.get('/api/dashboard/activity', headers=admin.headers).json
        recent = [a['id'] for a in activity['recent_applicants']]
        assert recent == list(reversed(ids))[:10]
        assert len(activity['recent_reviews']) == 1
        review = activity['recent_reviews'][0]
        assert review['rating'] == 4
        assert review['applicant'] == {'id': ids[0], 'first_name': 'Applicant0', 'last_name': 'Lovelace'}

    def test_activity_respects_visibility(self, client, admin, reviewer, make_job, make_applicant):
        applicant_id = make_applicant(job_id=make_job())
        client.post(f'/api/reviews/applicant/{applicant_id}', json={'rating': 4}, headers=admin.headers)

        activity = client.get('/api/dashboard/activity', headers=reviewer.headers).json
        assert activity == {'recent_applicants': [], 'recent_reviews': []}

    def test_top_applicants_ranked_by_average(self, client, admin, manager, make_applicant):
        strong = make_applicant(stage='interview')
        steady = make_applicant(stage='screening')
        rejected = make_applicant(stage='rejected')
        hired = make_applicant(stage='hired')
        make_applicant(stage='new')
        client.post(f'/api/reviews/applicant/{strong}', json={'rating': 5}, headers=admin.headers)
        client.post(f'/api/reviews/applicant/{strong}', json={'rating': 4}, headers=manager.headers)
        client.post(f'/api/reviews/applicant/{steady}', json={'rating': 3}, headers=admin.headers)
        client.post(f'/api/reviews/applicant/{rejected}', json={'rating': 5}, headers=admin.headers)
        client.post(f'/api/reviews/applicant/{hired}', json={'rating': 5}, headers=admin.headers)

        ranked = client.get('/api/dashboard/top-applicants', headers=admin.headers).json
        assert [a['id'] for a in ranked] == [strong, steady]
        assert ranked[0]['average_rating'] == 4.5
        assert ranked[0]['review_count'] == 2
        assert ranked[1]['average_rating'] == 3.0
        assert ranked[1]['review_count'] == 1

    def test_top_applicants_scoped_to_manager_jobs(self, client, admin, make_user, make_job, make_applicant):
        design = make_applicant(job_id=make_job(department='Design'))
        engineering = make_applicant(job_id=make_job(department='Engineering'))
        for applicant_id in (design, engineering):
            client.post(f'/api/reviews/applicant/{applicant_id}', json={'rating': 4}, headers=admin.headers)
        scoped = make_user('hiring_manager', scoped_departments='["Engineering"]')

        ranked = client.get('/api/dashboard/top-applicants', headers=scoped.headers).json
        assert [a['id'] for a in ranked] == [engineering]
