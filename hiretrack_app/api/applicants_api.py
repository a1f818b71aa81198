"""
Applicant API routes, including the public application endpoint.
"""
import csv
import io
import logging
from datetime import date
from flask import Blueprint, Response, g, jsonify, request
from flask_login import current_user
from sqlalchemy import func, or_
from hiretrack_app.models import db, Applicant, Job, User
from hiretrack_app.schemas import (
    PublicApplicationSchema, ManualApplicantSchema, ApplicantUpdateSchema, StageUpdateSchema,
    RejectionSchema, AssignJobSchema, NoteSchema, ReviewRequestSchema,
)
from hiretrack_app.services.activity_log import log_activity
from hiretrack_app.services.email import send_rejection_email, send_review_request_email, send_thank_you_email
from hiretrack_app.services.notifications import notify_subscribers, notify_users
from hiretrack_app.services.pipeline import move_to_stage
from hiretrack_app.services.spam_detection import check_spam
from hiretrack_app.services.uploads import accept_uploads, uploaded_path
from hiretrack_app.services.url_safety import check_applicant_urls
from hiretrack_app.utils.auth import (
    api_login_required, applicant_visibility_filter, get_accessible_applicant, get_accessible_job_ids,
    role_required,
)
from hiretrack_app.utils.constants import GENERAL_POOL_LABEL
from hiretrack_app.utils.files import delete_uploaded_files
from hiretrack_app.utils.pagination import get_pagination_params, paginated_response
from hiretrack_app.utils.validation import validate_body

logger = logging.getLogger(__name__)

bp = Blueprint('applicants_api', __name__, url_prefix='/api/applicants')


def _not_found():
    return jsonify({'error': 'Applicant not found'}), 404


def _filtered_query():
    query = Applicant.query
    visibility = applicant_visibility_filter(current_user)
    if visibility is not None:
        query = query.filter(visibility)

    job_id = request.args.get('job_id', '').strip()
    if job_id == 'general':
        query = query.filter(Applicant.job_id.is_(None))
    elif job_id:
        query = query.filter(Applicant.job_id == job_id)

    event_id = request.args.get('event_id', '').strip()
    if event_id:
        query = query.filter(Applicant.event_id == event_id)

    stage = request.args.get('stage', '').strip()
    if stage:
        query = query.filter(Applicant.stage == stage)

    search = request.args.get('search', '').strip()
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(
            Applicant.first_name.ilike(pattern),
            Applicant.last_name.ilike(pattern),
            Applicant.email.ilike(pattern),
        ))
    return query.order_by(Applicant.created_at.desc())


@bp.route('', methods=['GET'])
@api_login_required
def list_applicants():
    query = _filtered_query()
    paging = get_pagination_params()
    if paging:
        page, page_size = paging
        return jsonify(paginated_response(query, page, page_size, lambda a: a.to_dict()))
    return jsonify([a.to_dict() for a in query.all()])


@bp.route('/export', methods=['GET'])
@role_required('admin', 'hiring_manager')
def export_applicants():
    """CSV of the applicants matching the list filters."""
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(['First Name', 'Last Name', 'Email', 'Phone', 'Job', 'Stage', 'Source', 'Applied'])
    for a in _filtered_query():
        writer.writerow([
            a.first_name, a.last_name, a.email, a.phone or '',
            a.job.title if a.job else GENERAL_POOL_LABEL,
            a.stage, a.source or '',
            a.created_at.strftime('%Y-%m-%d') if a.created_at else '',
        ])
    return Response(
        output.getvalue(),
        mimetype='text/csv',
        headers={'Content-Disposition': 'attachment; filename=applicants.csv'},
    )


@bp.route('/<applicant_id>', methods=['GET'])
@api_login_required
def get_applicant(applicant_id):
    applicant = get_accessible_applicant(applicant_id)
    if not applicant:
        return _not_found()
    return jsonify(applicant.to_dict(include_details=True))


def _announce_new_applicant(applicant, source_label):
    job_title = applicant.job.title if applicant.job else GENERAL_POOL_LABEL
    notify_subscribers(
        'new_applicant',
        'New Applicant',
        f"{applicant.full_name} applied for {job_title} ({source_label})",
        link=f"/applicants/{applicant.id}",
        job=applicant.job,
        event_id=applicant.event_id,
        exclude_user_id=current_user.id if current_user.is_authenticated else None,
    )


@bp.route('', methods=['POST'])
@validate_body(PublicApplicationSchema)
@accept_uploads('resume', 'portfolio')
def submit_application():
    """Public application from the careers site (multipart form)."""
    data = g.data
    resume_path = uploaded_path('resume')
    portfolio_path = uploaded_path('portfolio')

    def reject(message, status):
        delete_uploaded_files(resume_path, portfolio_path)
        return jsonify({'error': message}), status

    spam = check_spam(data.first_name, data.last_name, data.email,
                      cover_letter=data.cover_letter, honeypot=data.website2)
    if spam.is_spam:
        # Answer like a real submission so bots learn nothing
        delete_uploaded_files(resume_path, portfolio_path)
        logger.warning("Blocked spam application from %s: %s", spam.client_ip, spam.reasons)
        log_activity('application_blocked_spam', details={
            'reasons': spam.reasons, 'ip': spam.client_ip, 'email': data.email,
        })
        return jsonify({'success': True, 'message': 'Application received'}), 201

    job = None
    if data.job_id:
        job = db.session.get(Job, data.job_id)
        if not job or job.archived:
            return reject('Job not found', 404)
        if job.status != 'open':
            return reject('This job is no longer accepting applications', 400)
        duplicate = Applicant.query.filter(
            Applicant.job_id == job.id,
            func.lower(Applicant.email) == data.email.lower(),
        ).first()
        if duplicate:
            return reject('You have already applied for this position', 400)

    try:
        applicant = Applicant(
            job_id=job.id if job else None,
            first_name=data.first_name,
            last_name=data.last_name,
            email=data.email,
            phone=data.phone or None,
            linked_in=data.linked_in or None,
            website=data.website or None,
            portfolio_url=data.portfolio_url or None,
            cover_letter=data.cover_letter or None,
            resume_path=resume_path,
            portfolio_path=portfolio_path,
            source=data.source or ('Direct Application' if job else 'General Application'),
            source_details=data.source_details or None,
            referrer=data.referrer or None,
            utm_source=data.utm_source or None,
            utm_medium=data.utm_medium or None,
            utm_campaign=data.utm_campaign or None,
            stage='new',
        )
        db.session.add(applicant)
        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.exception("Failed to save application")
        return reject('Failed to submit application', 500)

    log_activity('application_submitted', applicant_id=applicant.id,
                 details={'job_id': applicant.job_id, 'ip': spam.client_ip})
    # Follow-ups log their own failures and never fail the submission
    check_applicant_urls(applicant)
    send_thank_you_email(applicant)
    _announce_new_applicant(applicant, applicant.source)

    return jsonify({'success': True, 'message': 'Application received', 'id': applicant.id}), 201


def _can_add_to_job(job_id):
    if current_user.is_admin or current_user.is_hiring_manager:
        job_ids = get_accessible_job_ids(current_user)
        return job_ids is None or job_id in job_ids
    # Reviewers only add to jobs they are assigned to
    return bool(job_id) and job_id in get_accessible_job_ids(current_user)


@bp.route('/manual', methods=['POST'])
@api_login_required
@validate_body(ManualApplicantSchema)
@accept_uploads('resume', 'portfolio')
def create_manual_applicant():
    """Staff-entered applicant (referral, sourced candidate...)."""
    data = g.data
    resume_path = uploaded_path('resume')
    portfolio_path = uploaded_path('portfolio')

    def reject(message, status):
        delete_uploaded_files(resume_path, portfolio_path)
        return jsonify({'error': message}), status

    if data.job_id and not db.session.get(Job, data.job_id):
        return reject('Job not found', 404)
    if not _can_add_to_job(data.job_id):
        return reject('Insufficient permissions', 403)

    try:
        applicant = Applicant(
            job_id=data.job_id,
            first_name=data.first_name,
            last_name=data.last_name,
            email=data.email,
            phone=data.phone or None,
            linked_in=data.linked_in or None,
            website=data.website or None,
            portfolio_url=data.portfolio_url or None,
            cover_letter=data.cover_letter or None,
            resume_path=resume_path,
            portfolio_path=portfolio_path,
            source=data.source or 'Manual Entry',
            source_details=data.source_details or None,
            stage='new',
        )
        db.session.add(applicant)
        applicant.add_note(f"Added manually by {current_user.email}")
        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.exception("Failed to create applicant")
        return reject('Failed to create applicant', 500)

    log_activity('applicant_created', applicant_id=applicant.id, user_id=current_user.id)
    check_applicant_urls(applicant)
    _announce_new_applicant(applicant, applicant.source)
    return jsonify(applicant.to_dict(include_details=True)), 201


@bp.route('/<applicant_id>/stage', methods=['PATCH'])
@api_login_required
@validate_body(StageUpdateSchema)
def update_stage(applicant_id):
    applicant = get_accessible_applicant(applicant_id)
    if not applicant:
        return _not_found()

    new_stage = g.data.stage
    old_stage = move_to_stage(applicant, new_stage)
    db.session.commit()

    if old_stage != new_stage:
        log_activity('stage_changed', applicant_id=applicant.id, user_id=current_user.id,
                     details={'from': old_stage, 'to': new_stage})
        notify_subscribers(
            'stage_changed',
            'Stage Changed',
            f"{applicant.full_name} moved from {old_stage} to {new_stage}",
            link=f"/applicants/{applicant.id}",
            job=applicant.job,
            exclude_user_id=current_user.id,
        )
    return jsonify(applicant.to_dict())


@bp.route('/<applicant_id>', methods=['PUT'])
@api_login_required
@validate_body(ApplicantUpdateSchema)
def update_applicant(applicant_id):
    applicant = get_accessible_applicant(applicant_id)
    if not applicant:
        return _not_found()

    changes = g.data.provided()
    for field in ('first_name', 'last_name', 'email'):
        if field in changes:
            if not changes[field]:
                return jsonify({'error': f'{field} cannot be empty'}), 400
            setattr(applicant, field, changes[field])
    for field in ('phone', 'linked_in', 'website', 'portfolio_url', 'cover_letter', 'source', 'source_details'):
        if field in changes:
            setattr(applicant, field, changes[field] or None)

    db.session.commit()
    log_activity('applicant_updated', applicant_id=applicant.id, user_id=current_user.id,
                 details={'fields': sorted(changes)})
    return jsonify(applicant.to_dict(include_details=True))


@bp.route('/<applicant_id>/notes', methods=['GET'])
@api_login_required
def list_notes(applicant_id):
    applicant = get_accessible_applicant(applicant_id)
    if not applicant:
        return _not_found()
    return jsonify([n.to_dict() for n in applicant.notes])


@bp.route('/<applicant_id>/notes', methods=['POST'])
@api_login_required
@validate_body(NoteSchema)
def add_note(applicant_id):
    applicant = get_accessible_applicant(applicant_id)
    if not applicant:
        return _not_found()

    note = applicant.add_note(g.data.content)
    db.session.commit()
    log_activity('note_added', applicant_id=applicant.id, user_id=current_user.id)
    return jsonify(note.to_dict()), 201


@bp.route('/<applicant_id>/send-rejection', methods=['POST'])
@role_required('admin', 'hiring_manager')
@validate_body(RejectionSchema)
def send_rejection(applicant_id):
    applicant = get_accessible_applicant(applicant_id)
    if not applicant:
        return _not_found()

    result = send_rejection_email(applicant, subject=g.data.subject, body=g.data.body)
    if not result.get('success'):
        return jsonify({'error': 'Failed to send rejection email'}), 502

    previous = move_to_stage(
        applicant, 'rejected',
        f"Rejection letter sent on {date.today().strftime('%B %d, %Y')} by {current_user.email}",
    )
    db.session.commit()
    log_activity('rejection_sent', applicant_id=applicant.id, user_id=current_user.id,
                 details={'from': previous})
    return jsonify({'success': True, 'applicant': applicant.to_dict()})


@bp.route('/<applicant_id>/assign-job', methods=['PATCH'])
@role_required('admin', 'hiring_manager')
@validate_body(AssignJobSchema)
def assign_job(applicant_id):
    """Move an applicant between jobs or into the general pool."""
    applicant = get_accessible_applicant(applicant_id)
    if not applicant:
        return _not_found()

    new_job = None
    if g.data.job_id:
        new_job = db.session.get(Job, g.data.job_id)
        if not new_job:
            return jsonify({'error': 'Job not found'}), 404
        if not _can_add_to_job(new_job.id):
            return jsonify({'error': 'Insufficient permissions'}), 403

    old_title = applicant.job.title if applicant.job else GENERAL_POOL_LABEL
    if (new_job.id if new_job else None) == applicant.job_id:
        return jsonify(applicant.to_dict())

    applicant.job_id = new_job.id if new_job else None
    if new_job:
        applicant.add_note(f"Reassigned from {old_title} to {new_job.title} by {current_user.email}")
    else:
        applicant.add_note(f"Moved to {GENERAL_POOL_LABEL} from {old_title} by {current_user.email}")
    db.session.commit()
    db.session.refresh(applicant)

    log_activity('job_reassigned', applicant_id=applicant.id, user_id=current_user.id,
                 details={'from': old_title, 'to': new_job.title if new_job else GENERAL_POOL_LABEL})
    return jsonify(applicant.to_dict())


@bp.route('/<applicant_id>/request-review', methods=['POST'])
@role_required('admin', 'hiring_manager')
@validate_body(ReviewRequestSchema)
def request_review(applicant_id):
    """Email and notify chosen colleagues asking for a review."""
    applicant = get_accessible_applicant(applicant_id)
    if not applicant:
        return _not_found()

    users = User.query.filter(User.id.in_(g.data.user_ids)).all()
    if not users:
        return jsonify({'error': 'No valid users selected'}), 400

    sent = 0
    for user in users:
        if send_review_request_email(user, applicant, current_user, g.data.message).get('success'):
            sent += 1
    notify_users(
        [u.id for u in users],
        'review_requested',
        'Review Requested',
        f"{current_user.name} asked you to review {applicant.full_name}",
        link=f"/applicants/{applicant.id}",
    )
    log_activity('review_requested', applicant_id=applicant.id, user_id=current_user.id,
                 details={'user_ids': [u.id for u in users]})
    return jsonify({'success': True, 'sent': sent})


@bp.route('/<applicant_id>', methods=['DELETE'])
@role_required('admin', 'hiring_manager')
def delete_applicant(applicant_id):
    applicant = get_accessible_applicant(applicant_id)
    if not applicant:
        return _not_found()

    paths = [applicant.resume_path, applicant.portfolio_path]
    paths += [offer.file_path for offer in applicant.offers]
    name = applicant.full_name

    db.session.delete(applicant)
    db.session.commit()
    delete_uploaded_files(*paths)

    log_activity('applicant_deleted', user_id=current_user.id,
                 details={'applicant_id': applicant_id, 'name': name})
    return jsonify({'success': True})
