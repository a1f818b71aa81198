"""
Shared fixtures: an app on in-memory SQLite, a temp upload folder, and
factories that return plain ids/headers so tests never hold ORM objects
across requests.
"""
import io
import uuid
from types import SimpleNamespace

import pytest

from hiretrack_app import create_app
from hiretrack_app.models import db, User, Job, Applicant
from hiretrack_app.services.virus_scan import scanner
from hiretrack_app.utils.auth import generate_auth_token

PDF_BYTES = b'%PDF-1.4\n1 0 obj\n<< /Type /Catalog >>\nendobj\ntrailer\n<< /Root 1 0 R >>\n%%EOF\n'
GIF_BYTES = b'GIF89a\x01\x00\x01\x00\x80\x00\x00\x00\x00\x00\xff\xff\xff!\xf9\x04\x01\x00\x00\x00\x00,' \
            b'\x00\x00\x00\x00\x01\x00\x01\x00\x00\x02\x02D\x01\x00;'
PASSWORD = 'Password123'


@pytest.fixture
def app(tmp_path):
    app = create_app('testing')
    app.config.update(
        UPLOAD_FOLDER=str(tmp_path / 'uploads'),
        # Nothing listens here, so the scanner comes up unavailable
        CLAMAV_SOCKET=str(tmp_path / 'clamd.ctl'),
        VIRUS_SCAN_ENABLED=True,
    )
    scanner.init_app(app)

    with app.app_context():
        db.create_all()
    app._db_initialized = True

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()
    scanner.reset()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    def _make(role='admin', **fields):
        with app.app_context():
            user = User(
                email=fields.pop('email', f'{role}-{uuid.uuid4().hex[:8]}@example.com'),
                name=fields.pop('name', role.replace('_', ' ').title()),
                role=role,
                **fields,
            )
            user.set_password(PASSWORD)
            db.session.add(user)
            db.session.commit()
            return SimpleNamespace(
                id=user.id,
                email=user.email,
                headers={'Authorization': f'Bearer {generate_auth_token(user)}'},
            )
    return _make


@pytest.fixture
def admin(make_user):
    return make_user('admin')


@pytest.fixture
def manager(make_user):
    return make_user('hiring_manager', offer_access=True)


@pytest.fixture
def reviewer(make_user):
    return make_user('reviewer')


@pytest.fixture
def make_job(app):
    def _make(**fields):
        with app.app_context():
            title = fields.pop('title', 'Product Designer')
            job = Job(
                title=title,
                slug=fields.pop('slug', f'{uuid.uuid4().hex[:10]}'),
                department=fields.pop('department', 'Design'),
                location=fields.pop('location', 'Boston, MA'),
                type=fields.pop('type', 'Full-time'),
                description=fields.pop('description', '<p>Design things.</p>'),
                status=fields.pop('status', 'open'),
                **fields,
            )
            db.session.add(job)
            db.session.commit()
            return job.id
    return _make


@pytest.fixture
def make_applicant(app):
    def _make(**fields):
        with app.app_context():
            applicant = Applicant(
                first_name=fields.pop('first_name', 'Ada'),
                last_name=fields.pop('last_name', 'Lovelace'),
                email=fields.pop('email', f'ada-{uuid.uuid4().hex[:6]}@example.com'),
                stage=fields.pop('stage', 'new'),
                **fields,
            )
            db.session.add(applicant)
            db.session.commit()
            return applicant.id
    return _make


@pytest.fixture
def application_form():
    """Builder for a valid multipart public application."""
    def _build(job_id=None, **overrides):
        form = {
            'first_name': 'Grace',
            'last_name': 'Hopper',
            'email': 'grace@example.com',
            'cover_letter': '<p>I would love to join.</p>',
        }
        if job_id:
            form['job_id'] = job_id
        form.update(overrides)
        return form
    return _build


def file_part(data, filename):
    return (io.BytesIO(data), filename)
