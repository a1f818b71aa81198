"""
Tests for recruitment events and event intake.
"""
from hiretrack_app.models import db, Applicant, RecruitmentEvent, Review


def create_event(client, headers, **fields):
    body = {'name': 'Spring Design Fair', 'type': 'job_fair', 'date': '2026-04-12T10:00:00'}
    body.update(fields)
    return client.post('/api/events', json=body, headers=headers)


def intake_body(**overrides):
    body = {
        'first_name': 'Dorothy',
        'last_name': 'Vaughan',
        'email': 'dorothy@example.com',
        'rating': 5,
        'recommendation': 'strong_yes',
        'comments': 'Impressive portfolio review',
    }
    body.update(overrides)
    return body


class TestEvents:
    """Tests for event CRUD and visibility."""

    def test_create_and_get(self, client, admin):
        created = create_event(client, admin.headers)
        assert created.status_code == 201

        response = client.get(f"/api/events/{created.json['id']}", headers=admin.headers)
        assert response.json['name'] == 'Spring Design Fair'
        assert response.json['applicants'] == []

    def test_manager_without_event_access(self, client, make_user):
        manager = make_user('hiring_manager', event_access=False)
        assert create_event(client, manager.headers).status_code == 403
        assert client.get('/api/events', headers=manager.headers).json == []

    def test_reviewer_sees_attended_events_only(self, client, admin, reviewer):
        attended = create_event(client, admin.headers).json['id']
        create_event(client, admin.headers, name='Campus Visit', type='campus_visit')

        client.put(f'/api/events/{attended}/attendees', json={'user_ids': [reviewer.id]}, headers=admin.headers)

        response = client.get('/api/events', headers=reviewer.headers)
        assert [e['id'] for e in response.json] == [attended]

    def test_invalid_type(self, client, admin):
        response = create_event(client, admin.headers, type='party')
        assert response.status_code == 400
        assert 'type' in response.json['fields']


class TestIntake:
    """Tests for POST /api/events/<id>/intake."""

    def test_creates_applicant_review_and_note(self, app, client, admin, reviewer):
        event_id = create_event(client, admin.headers).json['id']
        client.put(f'/api/events/{event_id}/attendees', json={'user_ids': [reviewer.id]}, headers=admin.headers)

        response = client.post(f'/api/events/{event_id}/intake', json=intake_body(), headers=reviewer.headers)

        assert response.status_code == 201
        assert response.json['stage'] == 'fair_intake'
        assert response.json['event_id'] == event_id
        assert response.json['source'] == 'Spring Design Fair'
        assert response.json['notes'][0]['content'] == f'Added at Spring Design Fair by {reviewer.email}'

        with app.app_context():
            review = Review.query.filter_by(applicant_id=response.json['id']).one()
            assert review.reviewer_id == reviewer.id
            assert review.rating == 5

        # Attending the event makes its applicants visible
        detail = client.get(f"/api/applicants/{response.json['id']}", headers=reviewer.headers)
        assert detail.status_code == 200

    def test_non_attendee_cannot_intake(self, client, admin, reviewer):
        event_id = create_event(client, admin.headers).json['id']
        response = client.post(f'/api/events/{event_id}/intake', json=intake_body(), headers=reviewer.headers)
        assert response.status_code == 404

    def test_review_fields_required(self, app, client, admin):
        event_id = create_event(client, admin.headers).json['id']
        response = client.post(f'/api/events/{event_id}/intake', json=intake_body(rating=None),
                               headers=admin.headers)
        assert response.status_code == 400
        assert 'rating' in response.json['fields']
        with app.app_context():
            assert Applicant.query.count() == 0

    def test_event_with_applicants_cannot_be_deleted(self, client, admin):
        event_id = create_event(client, admin.headers).json['id']
        client.post(f'/api/events/{event_id}/intake', json=intake_body(), headers=admin.headers)

        response = client.delete(f'/api/events/{event_id}', headers=admin.headers)
        assert response.status_code == 400

    def test_empty_event_can_be_deleted(self, app, client, admin):
        event_id = create_event(client, admin.headers).json['id']
        assert client.delete(f'/api/events/{event_id}', headers=admin.headers).status_code == 200
        with app.app_context():
            assert db.session.get(RecruitmentEvent, event_id) is None
