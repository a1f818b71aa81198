"""
Job posting API routes.
"""
import logging
from datetime import datetime
from flask import Blueprint, g, jsonify, request
from flask_login import current_user
from sqlalchemy import func
from hiretrack_app.models import db, Applicant, Job, JobReviewer, Office, User
from hiretrack_app.schemas import JobCreateSchema, JobUpdateSchema, ReviewerAssignmentSchema
from hiretrack_app.services.activity_log import log_activity
from hiretrack_app.utils.auth import (
    api_login_required, can_access_job, get_accessible_job_ids, role_required,
)
from hiretrack_app.utils.constants import STAGES
from hiretrack_app.utils.pagination import get_pagination_params, paginated_response
from hiretrack_app.utils.slugify import generate_unique_slug
from hiretrack_app.utils.validation import validate_body

logger = logging.getLogger(__name__)

bp = Blueprint('jobs_api', __name__, url_prefix='/api/jobs')


def _applicant_counts(job_ids):
    if not job_ids:
        return {}
    rows = db.session.query(Applicant.job_id, func.count(Applicant.id)).filter(
        Applicant.job_id.in_(job_ids)
    ).group_by(Applicant.job_id).all()
    return dict(rows)


def _public_jobs_query():
    return Job.query.filter_by(status='open', archived=False).order_by(Job.created_at.desc())


@bp.route('', methods=['GET'])
@api_login_required
def list_jobs():
    """List jobs visible to the current user."""
    query = Job.query

    if request.args.get('archived') == 'true' and current_user.is_admin:
        query = query.filter(Job.archived.is_(True))
    else:
        query = query.filter(Job.archived.is_(False))

    for name in ('status', 'department', 'type'):
        value = request.args.get(name, '').strip()
        if value:
            query = query.filter(getattr(Job, name) == value)

    job_ids = get_accessible_job_ids(current_user)
    if job_ids is not None:
        query = query.filter(Job.id.in_(job_ids))

    query = query.order_by(Job.created_at.desc())

    def serialize(job, counts):
        data = job.to_dict(include_description=False)
        data['applicant_count'] = counts.get(job.id, 0)
        return data

    paging = get_pagination_params()
    if paging:
        page, page_size = paging
        result = paginated_response(query, page, page_size, lambda job: job)
        counts = _applicant_counts([job.id for job in result['data']])
        result['data'] = [serialize(job, counts) for job in result['data']]
        return jsonify(result)

    jobs = query.all()
    counts = _applicant_counts([job.id for job in jobs])
    return jsonify([serialize(job, counts) for job in jobs])


@bp.route('/public', methods=['GET'])
def list_public_jobs():
    """Open jobs for the application form."""
    return jsonify([job.to_public_dict() for job in _public_jobs_query()])


@bp.route('/website', methods=['GET'])
def list_website_jobs():
    """Open jobs flagged for the marketing website."""
    jobs = _public_jobs_query().filter(Job.publish_to_website.is_(True))
    return jsonify([job.to_public_dict() for job in jobs])


@bp.route('/website/<slug>', methods=['GET'])
def get_website_job(slug):
    job = Job.query.filter_by(slug=slug, status='open', archived=False, publish_to_website=True).first()
    if not job:
        return jsonify({'error': 'Job not found'}), 404
    return jsonify(job.to_public_dict())


@bp.route('/<job_id>/public', methods=['GET'])
def get_public_job(job_id):
    job = db.session.get(Job, job_id)
    if not job or job.archived or job.status != 'open':
        return jsonify({'error': 'Job not found'}), 404
    return jsonify(job.to_public_dict())


@bp.route('/<job_id>', methods=['GET'])
@api_login_required
def get_job(job_id):
    job = db.session.get(Job, job_id)
    if not job or not can_access_job(current_user, job):
        return jsonify({'error': 'Job not found'}), 404
    data = job.to_dict()
    data['applicant_count'] = job.applicants.count()
    return jsonify(data)


def _resolve_location(location, office_id):
    """Explicit location wins; otherwise 'City, State' from the office."""
    if location:
        return location, None
    if office_id:
        office = db.session.get(Office, office_id)
        if office and office.display_location:
            return office.display_location, None
    return None, 'Location is required (set one or pick an office with a city)'


@bp.route('', methods=['POST'])
@role_required('admin', 'hiring_manager')
@validate_body(JobCreateSchema)
def create_job():
    data = g.data
    if data.office_id and not db.session.get(Office, data.office_id):
        return jsonify({'error': 'Office not found'}), 400

    location, error = _resolve_location(data.location, data.office_id)
    if error:
        return jsonify({'error': error}), 400

    try:
        job = Job(
            title=data.title,
            slug=generate_unique_slug(data.title),
            department=data.department,
            location=location,
            type=data.type,
            description=data.description,
            responsibilities=data.responsibilities or None,
            requirements=data.requirements or None,
            benefits=data.benefits or None,
            salary=data.salary or None,
            status=data.status,
            publish_to_website=data.publish_to_website,
            office_id=data.office_id,
            created_by_id=current_user.id,
            closed_at=datetime.utcnow() if data.status == 'closed' else None,
        )
        db.session.add(job)
        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.exception("Failed to create job")
        return jsonify({'error': 'Failed to create job'}), 500

    log_activity('job_created', user_id=current_user.id, details={'job_id': job.id, 'title': job.title})
    return jsonify(job.to_dict()), 201


@bp.route('/<job_id>', methods=['PUT'])
@role_required('admin', 'hiring_manager')
@validate_body(JobUpdateSchema)
def update_job(job_id):
    job = db.session.get(Job, job_id)
    if not job or not can_access_job(current_user, job):
        return jsonify({'error': 'Job not found'}), 404

    changes = g.data.provided()

    if 'office_id' in changes and changes['office_id'] and not db.session.get(Office, changes['office_id']):
        return jsonify({'error': 'Office not found'}), 400

    for required in ('title', 'department', 'type', 'description', 'status'):
        if required in changes and changes[required] is None:
            return jsonify({'error': f'{required} cannot be empty'}), 400

    if 'title' in changes and changes['title'] != job.title:
        job.slug = generate_unique_slug(changes['title'], exclude_id=job.id)

    if 'status' in changes and changes['status'] != job.status:
        job.closed_at = datetime.utcnow() if changes['status'] == 'closed' else None

    for field in ('title', 'department', 'type', 'description', 'status', 'publish_to_website'):
        if field in changes and changes[field] is not None:
            setattr(job, field, changes[field])
    for field in ('responsibilities', 'requirements', 'benefits', 'salary', 'office_id'):
        if field in changes:
            setattr(job, field, changes[field] or None)

    if 'location' in changes or 'office_id' in changes:
        location, error = _resolve_location(changes.get('location', job.location), job.office_id)
        if error:
            db.session.rollback()
            return jsonify({'error': error}), 400
        job.location = location

    db.session.commit()
    log_activity('job_updated', user_id=current_user.id,
                 details={'job_id': job.id, 'fields': sorted(changes)})
    return jsonify(job.to_dict())


@bp.route('/<job_id>', methods=['DELETE'])
@role_required('admin')
def archive_job(job_id):
    """Jobs are archived, never deleted, so applicants keep their history."""
    job = db.session.get(Job, job_id)
    if not job:
        return jsonify({'error': 'Job not found'}), 404

    job.archived = True
    job.archived_at = datetime.utcnow()
    db.session.commit()
    log_activity('job_archived', user_id=current_user.id, details={'job_id': job.id})
    return jsonify({'success': True})


@bp.route('/<job_id>/unarchive', methods=['PATCH'])
@role_required('admin')
def unarchive_job(job_id):
    job = db.session.get(Job, job_id)
    if not job:
        return jsonify({'error': 'Job not found'}), 404

    job.archived = False
    job.archived_at = None
    db.session.commit()
    log_activity('job_unarchived', user_id=current_user.id, details={'job_id': job.id})
    return jsonify(job.to_dict())


@bp.route('/<job_id>/stats', methods=['GET'])
@api_login_required
def job_stats(job_id):
    job = db.session.get(Job, job_id)
    if not job or not can_access_job(current_user, job):
        return jsonify({'error': 'Job not found'}), 404

    rows = db.session.query(Applicant.stage, func.count(Applicant.id)).filter(
        Applicant.job_id == job.id
    ).group_by(Applicant.stage).all()
    by_stage = {stage: 0 for stage in STAGES}
    by_stage.update(dict(rows))

    return jsonify({
        'job_id': job.id,
        'total': sum(by_stage.values()),
        'by_stage': by_stage,
    })


@bp.route('/<job_id>/reviewers', methods=['GET'])
@role_required('admin', 'hiring_manager')
def list_job_reviewers(job_id):
    job = db.session.get(Job, job_id)
    if not job or not can_access_job(current_user, job):
        return jsonify({'error': 'Job not found'}), 404
    return jsonify([
        {'user_id': r.user_id, 'name': r.user.name, 'email': r.user.email}
        for r in job.reviewers
    ])


@bp.route('/<job_id>/reviewers', methods=['PUT'])
@role_required('admin', 'hiring_manager')
@validate_body(ReviewerAssignmentSchema)
def set_job_reviewers(job_id):
    """Replace the job's reviewer assignments."""
    job = db.session.get(Job, job_id)
    if not job or not can_access_job(current_user, job):
        return jsonify({'error': 'Job not found'}), 404

    user_ids = list(dict.fromkeys(g.data.user_ids))
    reviewers = User.query.filter(User.id.in_(user_ids), User.role == 'reviewer').all() if user_ids else []
    if len(reviewers) != len(user_ids):
        return jsonify({'error': 'All assignees must be existing reviewers'}), 400

    try:
        JobReviewer.query.filter_by(job_id=job.id).delete()
        for user_id in user_ids:
            db.session.add(JobReviewer(job_id=job.id, user_id=user_id))
        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.exception("Failed to assign reviewers to job %s", job.id)
        return jsonify({'error': 'Failed to assign reviewers'}), 500

    log_activity('job_reviewers_updated', user_id=current_user.id,
                 details={'job_id': job.id, 'user_ids': user_ids})
    return jsonify({'success': True, 'user_ids': user_ids})

