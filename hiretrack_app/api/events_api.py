"""
Recruitment event API routes (job fairs, campus visits, info sessions).
"""
import logging
from flask import Blueprint, g, jsonify
from flask_login import current_user
from hiretrack_app.models import db, Applicant, EventAttendee, Job, RecruitmentEvent, Review, User
from hiretrack_app.schemas import EventCreateSchema, EventUpdateSchema, AttendeesSchema, FairIntakeSchema
from hiretrack_app.services.activity_log import log_activity
from hiretrack_app.services.notifications import notify_subscribers
from hiretrack_app.utils.auth import (
    api_login_required, can_access_event, get_accessible_event_ids, role_required,
)
from hiretrack_app.utils.validation import validate_body

logger = logging.getLogger(__name__)

bp = Blueprint('events_api', __name__, url_prefix='/api/events')


def _get_event(event_id):
    event = db.session.get(RecruitmentEvent, event_id)
    if event is None or not can_access_event(current_user, event):
        return None
    return event


@bp.route('', methods=['GET'])
@api_login_required
def list_events():
    query = RecruitmentEvent.query
    event_ids = get_accessible_event_ids(current_user)
    if event_ids is not None:
        query = query.filter(RecruitmentEvent.id.in_(event_ids))
    return jsonify([e.to_dict() for e in query.order_by(RecruitmentEvent.date.desc())])


@bp.route('/<event_id>', methods=['GET'])
@api_login_required
def get_event(event_id):
    event = _get_event(event_id)
    if not event:
        return jsonify({'error': 'Event not found'}), 404
    data = event.to_dict()
    data['applicants'] = [a.to_dict() for a in event.applicants.order_by(Applicant.created_at.desc())]
    return jsonify(data)


@bp.route('', methods=['POST'])
@role_required('admin', 'hiring_manager')
@validate_body(EventCreateSchema)
def create_event():
    if not current_user.is_admin and not current_user.event_access:
        return jsonify({'error': 'No access to events'}), 403

    data = g.data
    event = RecruitmentEvent(
        name=data.name,
        type=data.type,
        location=data.location or None,
        date=data.date,
        notes=data.notes or None,
        created_by_id=current_user.id,
    )
    db.session.add(event)
    db.session.commit()

    log_activity('event_created', user_id=current_user.id, details={'event_id': event.id, 'name': event.name})
    return jsonify(event.to_dict()), 201


@bp.route('/<event_id>', methods=['PUT'])
@role_required('admin', 'hiring_manager')
@validate_body(EventUpdateSchema)
def update_event(event_id):
    event = _get_event(event_id)
    if not event:
        return jsonify({'error': 'Event not found'}), 404

    changes = g.data.provided()
    for field in ('name', 'type', 'date'):
        if changes.get(field) is not None:
            setattr(event, field, changes[field])
    for field in ('location', 'notes'):
        if field in changes:
            setattr(event, field, changes[field] or None)
    db.session.commit()

    log_activity('event_updated', user_id=current_user.id, details={'event_id': event.id})
    return jsonify(event.to_dict())


@bp.route('/<event_id>', methods=['DELETE'])
@role_required('admin')
def delete_event(event_id):
    event = db.session.get(RecruitmentEvent, event_id)
    if not event:
        return jsonify({'error': 'Event not found'}), 404
    if event.applicants.count():
        return jsonify({'error': 'Cannot delete an event with linked applicants'}), 400

    db.session.delete(event)
    db.session.commit()
    log_activity('event_deleted', user_id=current_user.id, details={'event_id': event_id})
    return jsonify({'success': True})


@bp.route('/<event_id>/attendees', methods=['PUT'])
@role_required('admin', 'hiring_manager')
@validate_body(AttendeesSchema)
def set_attendees(event_id):
    """Replace the staff attending the event."""
    event = _get_event(event_id)
    if not event:
        return jsonify({'error': 'Event not found'}), 404

    user_ids = list(dict.fromkeys(g.data.user_ids))
    if user_ids and User.query.filter(User.id.in_(user_ids)).count() != len(user_ids):
        return jsonify({'error': 'One or more users not found'}), 400

    EventAttendee.query.filter_by(event_id=event.id).delete()
    for user_id in user_ids:
        db.session.add(EventAttendee(event_id=event.id, user_id=user_id))
    db.session.commit()

    log_activity('event_attendees_updated', user_id=current_user.id,
                 details={'event_id': event.id, 'user_ids': user_ids})
    return jsonify(event.to_dict())


@bp.route('/<event_id>/intake', methods=['POST'])
@api_login_required
@validate_body(FairIntakeSchema)
def intake_applicant(event_id):
    """Record someone met at the event along with the recruiter's review, in one transaction."""
    event = _get_event(event_id)
    if not event:
        return jsonify({'error': 'Event not found'}), 404

    data = g.data
    job = None
    if data.job_id:
        job = db.session.get(Job, data.job_id)
        if not job:
            return jsonify({'error': 'Job not found'}), 404

    try:
        applicant = Applicant(
            job_id=job.id if job else None,
            event_id=event.id,
            first_name=data.first_name,
            last_name=data.last_name,
            email=data.email,
            phone=data.phone or None,
            linked_in=data.linked_in or None,
            portfolio_url=data.portfolio_url or None,
            source=event.name,
            source_details=event.type.replace('_', ' '),
            stage='fair_intake',
        )
        db.session.add(applicant)
        db.session.add(Review(
            applicant=applicant,
            reviewer_id=current_user.id,
            rating=data.rating,
            recommendation=data.recommendation,
            comments=data.comments or None,
        ))
        applicant.add_note(f"Added at {event.name} by {current_user.email}")
        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.exception("Failed to record intake at event %s", event_id)
        return jsonify({'error': 'Failed to add applicant'}), 500

    log_activity('event_intake', applicant_id=applicant.id, user_id=current_user.id,
                 details={'event_id': event.id})
    notify_subscribers(
        'new_applicant',
        'New Event Applicant',
        f"{applicant.full_name} was added at {event.name}",
        link=f"/applicants/{applicant.id}",
        job=job,
        event_id=event.id,
        exclude_user_id=current_user.id,
    )
    return jsonify(applicant.to_dict(include_details=True)), 201
