"""
Tests for the public application endpoint: uploads, spam and duplicates.
"""
import os

import pyclamd

from conftest import GIF_BYTES, PDF_BYTES, file_part
from hiretrack_app.models import db, Applicant, ActivityLog
from hiretrack_app.services.virus_scan import scanner


def stored_files(app, category):
    directory = os.path.join(app.config['UPLOAD_FOLDER'], category)
    if not os.path.isdir(directory):
        return []
    return os.listdir(directory)


class InfectedClamd:
    def __init__(self, filename=None, timeout=None):
        pass

    def ping(self):
        return True

    def scan_file(self, path):
        return {path: ('FOUND', 'Eicar-Test-Signature')}


class TestPublicApplication:
    """Tests for POST /api/applicants."""

    def test_accepts_pdf_resume_without_scanner(self, app, client, make_job, application_form):
        job_id = make_job()
        response = client.post(
            '/api/applicants',
            data={**application_form(job_id), 'resume': file_part(PDF_BYTES, 'cv.pdf')},
            content_type='multipart/form-data',
        )

        assert response.status_code == 201
        assert response.json['success'] is True
        assert len(stored_files(app, 'resumes')) == 1

        with app.app_context():
            applicant = db.session.get(Applicant, response.json['id'])
            assert applicant.stage == 'new'
            assert applicant.source == 'Direct Application'
            assert applicant.resume_path.startswith('/uploads/resumes/')
            assert applicant.resume_path.endswith('.pdf')

    def test_rejects_gif_renamed_to_pdf(self, app, client, make_job, application_form):
        job_id = make_job()
        response = client.post(
            '/api/applicants',
            data={**application_form(job_id), 'resume': file_part(GIF_BYTES, 'cv.pdf')},
            content_type='multipart/form-data',
        )

        assert response.status_code == 400
        assert response.json['error'] == 'File validation failed'
        assert 'resume: File type "image/gif" is not allowed' in response.json['fields']
        assert stored_files(app, 'resumes') == []
        with app.app_context():
            assert Applicant.query.count() == 0

    def test_rejects_wrong_extension(self, app, client, application_form):
        response = client.post(
            '/api/applicants',
            data={**application_form(), 'resume': file_part(PDF_BYTES, 'cv.txt')},
            content_type='multipart/form-data',
        )
        assert response.status_code == 400
        assert response.json['fields'] == ['resume: Only DOC, DOCX, PDF files are allowed']

    def test_unrecognised_doc_is_allowed(self, app, client, application_form):
        response = client.post(
            '/api/applicants',
            data={**application_form(), 'resume': file_part(b'plain text resume', 'cv.doc')},
            content_type='multipart/form-data',
        )
        assert response.status_code == 201
        assert len(stored_files(app, 'resumes')) == 1

    def test_unrecognised_docx_is_rejected(self, app, client, application_form):
        response = client.post(
            '/api/applicants',
            data={**application_form(), 'resume': file_part(b'plain text resume', 'cv.docx')},
            content_type='multipart/form-data',
        )
        assert response.status_code == 400
        assert response.json['fields'] == ['resume: Unable to verify file type']
        assert stored_files(app, 'resumes') == []

    def test_bad_portfolio_discards_good_resume(self, app, client, application_form):
        response = client.post(
            '/api/applicants',
            data={
                **application_form(),
                'resume': file_part(PDF_BYTES, 'cv.pdf'),
                'portfolio': file_part(b'not an image', 'work.png'),
            },
            content_type='multipart/form-data',
        )
        assert response.status_code == 400
        assert stored_files(app, 'resumes') == []
        assert stored_files(app, 'portfolios') == []

    def test_second_resume_rejected(self, app, client, application_form):
        response = client.post(
            '/api/applicants',
            data={
                **application_form(),
                'resume': [file_part(PDF_BYTES, 'cv.pdf'), file_part(PDF_BYTES, 'cv-2.pdf')],
                'portfolio': file_part(PDF_BYTES, 'work.pdf'),
            },
            content_type='multipart/form-data',
        )
        assert response.status_code == 400
        assert response.json['fields'] == ['resume: Only one file is allowed']
        assert stored_files(app, 'resumes') == []
        assert stored_files(app, 'portfolios') == []
        with app.app_context():
            assert Applicant.query.count() == 0

    def test_infected_file_rejected(self, app, client, monkeypatch, application_form):
        monkeypatch.setattr(pyclamd, 'ClamdUnixSocket', InfectedClamd)
        scanner.reset()

        response = client.post(
            '/api/applicants',
            data={**application_form(), 'resume': file_part(PDF_BYTES, 'cv.pdf')},
            content_type='multipart/form-data',
        )

        assert response.status_code == 400
        assert response.json['fields'] == ['resume: File rejected by virus scan: Eicar-Test-Signature']
        assert stored_files(app, 'resumes') == []

    def test_honeypot_submission_looks_successful(self, app, client, make_job, application_form):
        job_id = make_job()
        response = client.post(
            '/api/applicants',
            data={**application_form(job_id, website2='http://bot.example'),
                  'resume': file_part(PDF_BYTES, 'cv.pdf')},
            content_type='multipart/form-data',
        )

        assert response.status_code == 201
        assert 'id' not in response.json
        assert stored_files(app, 'resumes') == []
        with app.app_context():
            assert Applicant.query.count() == 0
            blocked = ActivityLog.query.filter_by(action='application_blocked_spam').one()
            assert 'Honeypot field filled' in blocked.details

    def test_duplicate_application_rejected(self, app, client, make_job, application_form):
        job_id = make_job()
        first = client.post('/api/applicants', data=application_form(job_id),
                            content_type='multipart/form-data')
        assert first.status_code == 201

        second = client.post('/api/applicants', data=application_form(job_id, email='GRACE@example.com'),
                             content_type='multipart/form-data')
        assert second.status_code == 400
        assert second.json['error'] == 'You have already applied for this position'

    def test_same_email_for_another_job_is_fine(self, client, make_job, application_form):
        first = client.post('/api/applicants', data=application_form(make_job()),
                            content_type='multipart/form-data')
        second = client.post('/api/applicants', data=application_form(make_job()),
                             content_type='multipart/form-data')
        assert first.status_code == 201
        assert second.status_code == 201

    def test_closed_job_rejected(self, app, client, make_job, application_form):
        job_id = make_job(status='closed')
        response = client.post(
            '/api/applicants',
            data={**application_form(job_id), 'resume': file_part(PDF_BYTES, 'cv.pdf')},
            content_type='multipart/form-data',
        )
        assert response.status_code == 400
        assert response.json['error'] == 'This job is no longer accepting applications'
        assert stored_files(app, 'resumes') == []

    def test_unknown_job_rejected(self, client, application_form):
        response = client.post('/api/applicants', data=application_form('no-such-job'),
                               content_type='multipart/form-data')
        assert response.status_code == 404

    def test_general_pool_application(self, app, client, application_form):
        response = client.post('/api/applicants', data=application_form(job_id=''),
                               content_type='multipart/form-data')
        assert response.status_code == 201
        with app.app_context():
            applicant = db.session.get(Applicant, response.json['id'])
            assert applicant.job_id is None
            assert applicant.source == 'General Application'

    def test_validation_errors_by_field(self, client, application_form):
        response = client.post(
            '/api/applicants',
            data=application_form(first_name='   ', email='not-an-email'),
            content_type='multipart/form-data',
        )
        assert response.status_code == 400
        assert response.json['error'] == 'Validation failed'
        assert response.json['fields']['first_name'] == 'First name is required'
        assert response.json['fields']['email'] == 'Invalid email address'

    def test_markup_stripped_from_names(self, app, client, application_form):
        response = client.post(
            '/api/applicants',
            data=application_form(first_name='<b>Grace</b>',
                                  cover_letter='<script>alert(1)</script><p>Hello</p>'),
            content_type='multipart/form-data',
        )
        assert response.status_code == 201
        with app.app_context():
            applicant = db.session.get(Applicant, response.json['id'])
            assert applicant.first_name == 'Grace'
            assert applicant.cover_letter == '<p>Hello</p>'
