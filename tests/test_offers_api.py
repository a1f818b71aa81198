"""
Tests for offers and the stage changes they trigger.
"""
from conftest import PDF_BYTES, file_part
from hiretrack_app.models import db, Applicant


def applicant_notes(client, applicant_id, headers):
    return [n['content'] for n in client.get(f'/api/applicants/{applicant_id}/notes', headers=headers).json]


class TestOfferAccess:
    """Offer routes are limited to admins and hiring managers with offer access."""

    def test_reviewer_forbidden(self, client, reviewer, make_applicant):
        applicant_id = make_applicant()
        response = client.get(f'/api/offers/applicant/{applicant_id}', headers=reviewer.headers)
        assert response.status_code == 403
        assert response.json['error'] == 'No access to offers'

    def test_manager_without_offer_access_forbidden(self, client, make_user, make_applicant):
        manager = make_user('hiring_manager', offer_access=False)
        response = client.post(f'/api/offers/applicant/{make_applicant()}', json={'status': 'draft'},
                               headers=manager.headers)
        assert response.status_code == 403

    def test_manager_with_offer_access_allowed(self, client, manager, make_applicant):
        response = client.get(f'/api/offers/applicant/{make_applicant()}', headers=manager.headers)
        assert response.status_code == 200
        assert response.json == []


class TestOfferStageChanges:
    """Tests for automatic stage moves driven by offer status."""

    def test_draft_does_not_move_stage(self, client, admin, make_applicant):
        applicant_id = make_applicant(stage='interview')
        response = client.post(f'/api/offers/applicant/{applicant_id}', json={'status': 'draft'},
                               headers=admin.headers)

        assert response.status_code == 201
        assert response.json['applicant_stage_changed'] is False
        assert response.json['new_stage'] == 'interview'

    def test_extended_moves_to_offer(self, client, admin, make_applicant):
        applicant_id = make_applicant(stage='interview')
        response = client.post(f'/api/offers/applicant/{applicant_id}', json={'status': 'extended'},
                               headers=admin.headers)

        assert response.json['applicant_stage_changed'] is True
        assert response.json['new_stage'] == 'offer'
        assert 'Automatically moved to offer stage (offer extended)' in applicant_notes(
            client, applicant_id, admin.headers)

    def test_extended_leaves_hired_alone(self, client, admin, make_applicant):
        applicant_id = make_applicant(stage='hired')
        response = client.post(f'/api/offers/applicant/{applicant_id}', json={'status': 'extended'},
                               headers=admin.headers)
        assert response.json['applicant_stage_changed'] is False
        assert response.json['new_stage'] == 'hired'

    def test_accepting_moves_offer_to_hired(self, app, client, admin, make_applicant):
        applicant_id = make_applicant(stage='offer')
        offer = client.post(f'/api/offers/applicant/{applicant_id}', json={'status': 'extended'},
                            headers=admin.headers).json

        response = client.put(f"/api/offers/{offer['id']}", json={'status': 'accepted'}, headers=admin.headers)

        assert response.status_code == 200
        assert response.json['applicant_stage_changed'] is True
        assert response.json['new_stage'] == 'hired'
        assert response.json['accepted_date'] is not None
        with app.app_context():
            assert db.session.get(Applicant, applicant_id).stage == 'hired'
        assert 'Automatically moved to hired (offer accepted)' in applicant_notes(
            client, applicant_id, admin.headers)

    def test_accepting_outside_offer_stage_does_not_hire(self, client, admin, make_applicant):
        applicant_id = make_applicant(stage='screening')
        response = client.post(f'/api/offers/applicant/{applicant_id}', json={'status': 'accepted'},
                               headers=admin.headers)
        assert response.json['new_stage'] == 'screening'

    def test_creating_accepted_offer_does_not_hire(self, app, client, admin, make_applicant):
        applicant_id = make_applicant(stage='offer')
        response = client.post(f'/api/offers/applicant/{applicant_id}', json={'status': 'accepted'},
                               headers=admin.headers)

        assert response.status_code == 201
        assert response.json['applicant_stage_changed'] is False
        assert response.json['new_stage'] == 'offer'
        assert response.json['accepted_date'] is not None
        with app.app_context():
            assert db.session.get(Applicant, applicant_id).stage == 'offer'
        assert 'Automatically moved to hired (offer accepted)' not in applicant_notes(
            client, applicant_id, admin.headers)

    def test_create_keeps_given_dates(self, client, admin, make_applicant):
        response = client.post(f'/api/offers/applicant/{make_applicant()}', json={
            'status': 'draft',
            'accepted_date': '2026-01-02T00:00:00',
            'declined_date': '2026-01-03T12:30:00Z',
        }, headers=admin.headers)

        assert response.status_code == 201
        assert response.json['accepted_date'] == '2026-01-02T00:00:00'
        assert response.json['declined_date'] == '2026-01-03T12:30:00'

    def test_accepted_create_keeps_given_accepted_date(self, client, admin, make_applicant):
        response = client.post(f'/api/offers/applicant/{make_applicant()}', json={
            'status': 'accepted',
            'accepted_date': '2026-01-02T00:00:00',
        }, headers=admin.headers)
        assert response.json['accepted_date'] == '2026-01-02T00:00:00'

    def test_invalid_status(self, client, admin, make_applicant):
        response = client.post(f'/api/offers/applicant/{make_applicant()}', json={'status': 'maybe'},
                               headers=admin.headers)
        assert response.status_code == 400
        assert 'status' in response.json['fields']


class TestOfferLetter:
    """Tests for offer letter uploads."""

    def test_create_with_letter_and_replace(self, app, client, admin, make_applicant):
        applicant_id = make_applicant()
        created = client.post(
            f'/api/offers/applicant/{applicant_id}',
            data={'status': 'draft', 'salary': '$120,000', 'offer_letter': file_part(PDF_BYTES, 'offer.pdf')},
            content_type='multipart/form-data',
            headers=admin.headers,
        )
        assert created.status_code == 201
        first_path = created.json['file_path']
        assert first_path.startswith('/uploads/offers/')

        replaced = client.patch(
            f"/api/offers/{created.json['id']}/upload",
            data={'offer_letter': file_part(PDF_BYTES, 'offer-v2.pdf')},
            content_type='multipart/form-data',
            headers=admin.headers,
        )
        assert replaced.status_code == 200
        assert replaced.json['file_path'] != first_path

        download = client.get(first_path, headers=admin.headers)
        assert download.status_code == 404
        download = client.get(replaced.json['file_path'], headers=admin.headers)
        assert download.status_code == 200
        assert download.data == PDF_BYTES

    def test_upload_without_file(self, client, admin, make_applicant):
        offer = client.post(f'/api/offers/applicant/{make_applicant()}', json={}, headers=admin.headers).json
        response = client.patch(f"/api/offers/{offer['id']}/upload", data={},
                                content_type='multipart/form-data', headers=admin.headers)
        assert response.status_code == 400
        assert response.json['error'] == 'No file provided'
