"""
Authentication and authorization utilities for HireTrack.

Staff authenticate with a Flask-Login session cookie or a signed bearer
token. Visibility of jobs, events and applicants is derived from the user's
role and scope on every request.
"""
import logging
from functools import wraps
from flask import current_app, request, jsonify, g
from flask_login import current_user
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from sqlalchemy import and_, or_
from hiretrack_app.models import db, User, Job, JobReviewer, EventAttendee, Applicant

logger = logging.getLogger(__name__)

TOKEN_SALT = 'hiretrack-auth-token'


def _serializer():
    return URLSafeTimedSerializer(current_app.config['SECRET_KEY'], salt=TOKEN_SALT)


def generate_auth_token(user):
    """Signed token carrying the user id and current token version."""
    return _serializer().dumps({'id': user.id, 'tv': user.token_version})


def load_user_from_token(token):
    """Return the user for a valid token, or None if it is bad, expired or revoked."""
    try:
        payload = _serializer().loads(token, max_age=current_app.config['TOKEN_MAX_AGE'])
    except (SignatureExpired, BadSignature):
        return None
    if not isinstance(payload, dict):
        return None
    user = db.session.get(User, payload.get('id'))
    if not user or user.token_version != payload.get('tv'):
        return None
    return user


def load_user_from_request(req):
    """Flask-Login request loader for `Authorization: Bearer <token>`."""
    header = req.headers.get('Authorization', '')
    if not header.startswith('Bearer '):
        return None
    user = load_user_from_token(header[len('Bearer '):].strip())
    if user is None:
        g.token_error = True
    return user


def _unauthenticated():
    if g.get('token_error'):
        return jsonify({'error': 'Invalid or expired token'}), 401
    return jsonify({'error': 'Authentication required'}), 401


def api_login_required(f):
    """Decorator for API endpoints that require authentication."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated:
            logger.info("Unauthenticated API request to %s", request.path)
            return _unauthenticated()
        return f(*args, **kwargs)
    return decorated_function


def role_required(*roles):
    """Require an authenticated user whose role is one of `roles`."""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not current_user.is_authenticated:
                return _unauthenticated()
            if current_user.role not in roles:
                return jsonify({'error': 'Insufficient permissions'}), 403
            return f(*args, **kwargs)
        return decorated_function
    return decorator


def has_offer_access(user):
    if user.is_admin:
        return True
    return user.is_hiring_manager and bool(user.offer_access)


def offer_access_required(f):
    """Offers are visible to admins and to hiring managers granted offer access."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated:
            return _unauthenticated()
        if not has_offer_access(current_user):
            return jsonify({'error': 'No access to offers'}), 403
        return f(*args, **kwargs)
    return decorated_function


def get_accessible_job_ids(user):
    """
    Job ids the user may see, or None for "all jobs".

    Scoped hiring managers see jobs matching their departments and/or offices
    (scope_mode 'or' by default, 'and' requires both when both are set).
    """
    if user.is_admin:
        return None

    if user.is_hiring_manager:
        departments = user.department_scope
        offices = user.office_scope
        if departments is None and offices is None:
            return None
        conditions = []
        if departments:
            conditions.append(Job.department.in_(departments))
        if offices:
            conditions.append(Job.office_id.in_(offices))
        if not conditions:
            return []
        if user.scope_mode == 'and':
            criterion = and_(*conditions)
        else:
            criterion = or_(*conditions)
        return [row.id for row in db.session.query(Job.id).filter(criterion)]

    if user.is_reviewer:
        return [row.job_id for row in JobReviewer.query.filter_by(user_id=user.id)]

    return []


def get_accessible_event_ids(user):
    """Event ids the user may see, or None for "all events"."""
    if user.is_admin:
        return None
    if user.is_hiring_manager:
        return None if user.event_access else []
    if user.is_reviewer:
        return [row.event_id for row in EventAttendee.query.filter_by(user_id=user.id)]
    return []


def applicant_visibility_filter(user):
    """SQLAlchemy criterion limiting Applicant rows to what `user` may see, or None."""
    job_ids = get_accessible_job_ids(user)
    if user.is_reviewer:
        event_ids = get_accessible_event_ids(user)
        return or_(Applicant.job_id.in_(job_ids), Applicant.event_id.in_(event_ids))
    if job_ids is None:
        return None
    return Applicant.job_id.in_(job_ids)


def can_access_applicant(user, applicant):
    job_ids = get_accessible_job_ids(user)
    if user.is_reviewer:
        if applicant.job_id and applicant.job_id in job_ids:
            return True
        return bool(applicant.event_id) and applicant.event_id in get_accessible_event_ids(user)
    if job_ids is None:
        return True
    return applicant.job_id in job_ids


def can_access_job(user, job):
    job_ids = get_accessible_job_ids(user)
    return job_ids is None or job.id in job_ids


def can_access_event(user, event):
    event_ids = get_accessible_event_ids(user)
    return event_ids is None or event.id in event_ids


def get_accessible_applicant(applicant_id):
    """
    The applicant if it exists and the current user may see it, else None.
    Callers answer 404 either way so hidden applicants are indistinguishable
    from missing ones.
    """
    applicant = db.session.get(Applicant, applicant_id)
    if applicant is None or not can_access_applicant(current_user, applicant):
        return None
    return applicant
