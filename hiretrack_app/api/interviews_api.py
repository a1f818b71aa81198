"""
Interview scheduling API routes.
"""
import logging
from flask import Blueprint, g, jsonify
from flask_login import current_user
from hiretrack_app.models import db, Interview, InterviewParticipant, User
from hiretrack_app.schemas import InterviewCreateSchema, InterviewUpdateSchema, InterviewFeedbackSchema
from hiretrack_app.services.activity_log import log_activity
from hiretrack_app.services.notifications import notify_users
from hiretrack_app.services.pipeline import advance_for_interview
from hiretrack_app.utils.auth import api_login_required, get_accessible_applicant, role_required
from hiretrack_app.utils.validation import validate_body

logger = logging.getLogger(__name__)

bp = Blueprint('interviews_api', __name__, url_prefix='/api/interviews')


def _get_interview(interview_id):
    interview = db.session.get(Interview, interview_id)
    if interview is None or not get_accessible_applicant(interview.applicant_id):
        return None
    return interview


def _valid_participants(user_ids):
    user_ids = list(dict.fromkeys(user_ids))
    found = User.query.filter(User.id.in_(user_ids)).count()
    return user_ids if found == len(user_ids) else None


def _when(interview):
    return interview.scheduled_at.strftime('%b %d, %Y %I:%M %p')


@bp.route('/applicant/<applicant_id>', methods=['GET'])
@api_login_required
def list_interviews(applicant_id):
    applicant = get_accessible_applicant(applicant_id)
    if not applicant:
        return jsonify({'error': 'Applicant not found'}), 404
    interviews = applicant.interviews.order_by(Interview.scheduled_at.asc())
    return jsonify([i.to_dict() for i in interviews])


@bp.route('/mine', methods=['GET'])
@api_login_required
def my_interviews():
    """Upcoming interviews the current user sits on."""
    interviews = Interview.query.join(InterviewParticipant).filter(
        InterviewParticipant.user_id == current_user.id,
        Interview.status == 'scheduled',
    ).order_by(Interview.scheduled_at.asc())
    return jsonify([i.to_dict() for i in interviews])


@bp.route('/applicant/<applicant_id>', methods=['POST'])
@role_required('admin', 'hiring_manager')
@validate_body(InterviewCreateSchema)
def schedule_interview(applicant_id):
    applicant = get_accessible_applicant(applicant_id)
    if not applicant:
        return jsonify({'error': 'Applicant not found'}), 404

    data = g.data
    participant_ids = _valid_participants(data.participant_ids)
    if participant_ids is None:
        return jsonify({'error': 'One or more participants not found'}), 400

    try:
        interview = Interview(
            applicant_id=applicant.id,
            scheduled_at=data.scheduled_at,
            location=data.location or None,
            type=data.type,
            notes=data.notes or None,
            status='scheduled',
            created_by_id=current_user.id,
        )
        db.session.add(interview)
        for user_id in participant_ids:
            db.session.add(InterviewParticipant(interview=interview, user_id=user_id))

        applicant.add_note(
            f"Interview scheduled for {_when(interview)} ({interview.type.replace('_', ' ')}) "
            f"by {current_user.email}"
        )
        stage_changed = advance_for_interview(applicant)
        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.exception("Failed to schedule interview for applicant %s", applicant_id)
        return jsonify({'error': 'Failed to schedule interview'}), 500

    log_activity('interview_scheduled', applicant_id=applicant.id, user_id=current_user.id,
                 details={'interview_id': interview.id, 'scheduled_at': interview.scheduled_at.isoformat()})
    notify_users(
        participant_ids,
        'interview_scheduled',
        'Interview Scheduled',
        f"You are on the panel for {applicant.full_name} on {_when(interview)}",
        link=f"/applicants/{applicant.id}",
        exclude_user_id=current_user.id,
    )

    result = interview.to_dict()
    result['applicant_stage_changed'] = stage_changed
    result['new_stage'] = applicant.stage
    return jsonify(result), 201


@bp.route('/<interview_id>', methods=['GET'])
@api_login_required
def get_interview(interview_id):
    interview = _get_interview(interview_id)
    if not interview:
        return jsonify({'error': 'Interview not found'}), 404
    return jsonify(interview.to_dict())


@bp.route('/<interview_id>', methods=['PUT'])
@role_required('admin', 'hiring_manager')
@validate_body(InterviewUpdateSchema)
def update_interview(interview_id):
    interview = _get_interview(interview_id)
    if not interview:
        return jsonify({'error': 'Interview not found'}), 404

    changes = g.data.provided()
    applicant = interview.applicant
    old_status = interview.status
    old_outcome = interview.outcome
    old_time = interview.scheduled_at

    participant_ids = None
    if changes.get('participant_ids') is not None:
        participant_ids = _valid_participants(changes['participant_ids'])
        if participant_ids is None:
            return jsonify({'error': 'One or more participants not found'}), 400

    for field in ('scheduled_at', 'type', 'status'):
        if changes.get(field) is not None:
            setattr(interview, field, changes[field])
    for field in ('location', 'notes', 'feedback', 'outcome'):
        if field in changes:
            setattr(interview, field, changes[field] or None)

    if participant_ids is not None:
        InterviewParticipant.query.filter_by(interview_id=interview.id).delete()
        for user_id in participant_ids:
            db.session.add(InterviewParticipant(interview_id=interview.id, user_id=user_id))

    if interview.status != old_status:
        applicant.add_note(
            f"Interview on {_when(interview)} marked {interview.status.replace('_', ' ')} by {current_user.email}"
        )
    if interview.outcome and interview.outcome != old_outcome:
        applicant.add_note(f"Interview outcome: {interview.outcome} (recorded by {current_user.email})")

    db.session.commit()

    log_activity('interview_updated', applicant_id=applicant.id, user_id=current_user.id,
                 details={'interview_id': interview.id, 'fields': sorted(changes)})
    if interview.scheduled_at != old_time:
        notify_users(
            interview.participant_ids(),
            'interview_rescheduled',
            'Interview Rescheduled',
            f"Interview with {applicant.full_name} moved to {_when(interview)}",
            link=f"/applicants/{applicant.id}",
            exclude_user_id=current_user.id,
        )
    return jsonify(interview.to_dict())


@bp.route('/<interview_id>', methods=['DELETE'])
@role_required('admin', 'hiring_manager')
def cancel_interview(interview_id):
    interview = _get_interview(interview_id)
    if not interview:
        return jsonify({'error': 'Interview not found'}), 404

    applicant = interview.applicant
    participant_ids = interview.participant_ids()
    when = _when(interview)

    applicant.add_note(f"Interview cancelled by {current_user.email}")
    db.session.delete(interview)
    db.session.commit()

    log_activity('interview_cancelled', applicant_id=applicant.id, user_id=current_user.id,
                 details={'interview_id': interview_id})
    notify_users(
        participant_ids,
        'interview_cancelled',
        'Interview Cancelled',
        f"Interview with {applicant.full_name} on {when} was cancelled",
        link=f"/applicants/{applicant.id}",
        exclude_user_id=current_user.id,
    )
    return jsonify({'success': True})


@bp.route('/<interview_id>/feedback', methods=['PATCH'])
@api_login_required
@validate_body(InterviewFeedbackSchema)
def submit_feedback(interview_id):
    """Panel members record their own feedback and rating."""
    interview = db.session.get(Interview, interview_id)
    if not interview:
        return jsonify({'error': 'Interview not found'}), 404

    participant = InterviewParticipant.query.filter_by(
        interview_id=interview.id, user_id=current_user.id
    ).first()
    if not participant:
        return jsonify({'error': 'Only interview participants can submit feedback'}), 403

    participant.feedback = g.data.feedback
    participant.rating = g.data.rating
    db.session.commit()

    log_activity('interview_feedback', applicant_id=interview.applicant_id, user_id=current_user.id,
                 details={'interview_id': interview.id, 'rating': participant.rating})
    return jsonify(participant.to_dict())
