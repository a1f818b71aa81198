"""
Offer API routes.

Offers are visible to admins and to hiring managers with offer access.
"""
import logging
from datetime import datetime
from flask import Blueprint, g, jsonify
from flask_login import current_user
from hiretrack_app.models import db, Offer
from hiretrack_app.schemas import OfferCreateSchema, OfferUpdateSchema
from hiretrack_app.services.activity_log import log_activity
from hiretrack_app.services.notifications import notify_subscribers
from hiretrack_app.services.pipeline import advance_for_offer_status
from hiretrack_app.services.uploads import accept_uploads, uploaded_path
from hiretrack_app.utils.auth import get_accessible_applicant, offer_access_required
from hiretrack_app.utils.constants import NOTIFIABLE_OFFER_STATUSES
from hiretrack_app.utils.files import delete_uploaded_files
from hiretrack_app.utils.validation import validate_body

logger = logging.getLogger(__name__)

bp = Blueprint('offers_api', __name__, url_prefix='/api/offers')


def _get_offer(offer_id):
    offer = db.session.get(Offer, offer_id)
    if offer is None or not get_accessible_applicant(offer.applicant_id):
        return None
    return offer


def _stamp_status_dates(offer, status):
    if status == 'accepted' and not offer.accepted_date:
        offer.accepted_date = datetime.utcnow()
    elif status == 'declined' and not offer.declined_date:
        offer.declined_date = datetime.utcnow()


def _announce_status(offer, status):
    title = NOTIFIABLE_OFFER_STATUSES.get(status)
    if not title:
        return
    applicant = offer.applicant
    notify_subscribers(
        f'offer_{status}',
        title,
        f"Offer for {applicant.full_name} is now {status}",
        link=f"/applicants/{applicant.id}",
        job=applicant.job,
        exclude_user_id=current_user.id,
    )


@bp.route('/applicant/<applicant_id>', methods=['GET'])
@offer_access_required
def list_offers(applicant_id):
    applicant = get_accessible_applicant(applicant_id)
    if not applicant:
        return jsonify({'error': 'Applicant not found'}), 404
    offers = applicant.offers.order_by(Offer.created_at.desc())
    return jsonify([o.to_dict() for o in offers])


@bp.route('/applicant/<applicant_id>', methods=['POST'])
@offer_access_required
@validate_body(OfferCreateSchema)
@accept_uploads('offer_letter')
def create_offer(applicant_id):
    data = g.data
    file_path = uploaded_path('offer_letter')

    applicant = get_accessible_applicant(applicant_id)
    if not applicant:
        delete_uploaded_files(file_path)
        return jsonify({'error': 'Applicant not found'}), 404

    try:
        offer = Offer(
            applicant_id=applicant.id,
            status=data.status,
            notes=data.notes or None,
            salary=data.salary or None,
            offer_date=data.offer_date,
            accepted_date=data.accepted_date,
            declined_date=data.declined_date,
            file_path=file_path,
            created_by_id=current_user.id,
        )
        _stamp_status_dates(offer, data.status)
        db.session.add(offer)
        # Only an extended offer moves the applicant on create
        stage_changed = False
        if data.status == 'extended':
            stage_changed = advance_for_offer_status(applicant, data.status)
        db.session.commit()
    except Exception:
        db.session.rollback()
        delete_uploaded_files(file_path)
        logger.exception("Failed to create offer for applicant %s", applicant_id)
        return jsonify({'error': 'Failed to create offer'}), 500

    log_activity('offer_created', applicant_id=applicant.id, user_id=current_user.id,
                 details={'offer_id': offer.id, 'status': offer.status})
    if offer.status == 'extended':
        _announce_status(offer, offer.status)

    result = offer.to_dict()
    result['applicant_stage_changed'] = stage_changed
    result['new_stage'] = applicant.stage
    return jsonify(result), 201


@bp.route('/<offer_id>', methods=['GET'])
@offer_access_required
def get_offer(offer_id):
    offer = _get_offer(offer_id)
    if not offer:
        return jsonify({'error': 'Offer not found'}), 404
    return jsonify(offer.to_dict())


@bp.route('/<offer_id>', methods=['PUT'])
@offer_access_required
@validate_body(OfferUpdateSchema)
def update_offer(offer_id):
    offer = _get_offer(offer_id)
    if not offer:
        return jsonify({'error': 'Offer not found'}), 404

    changes = g.data.provided()
    old_status = offer.status
    new_status = changes.get('status') or old_status

    for field in ('notes', 'salary'):
        if field in changes:
            setattr(offer, field, changes[field] or None)
    for field in ('offer_date', 'accepted_date', 'declined_date'):
        if field in changes:
            setattr(offer, field, changes[field])

    stage_changed = False
    if new_status != old_status:
        offer.status = new_status
        _stamp_status_dates(offer, new_status)
        stage_changed = advance_for_offer_status(offer.applicant, new_status)

    db.session.commit()

    if new_status != old_status:
        log_activity('offer_status_changed', applicant_id=offer.applicant_id, user_id=current_user.id,
                     details={'offer_id': offer.id, 'from': old_status, 'to': new_status})
        _announce_status(offer, new_status)

    result = offer.to_dict()
    result['applicant_stage_changed'] = stage_changed
    result['new_stage'] = offer.applicant.stage
    return jsonify(result)


@bp.route('/<offer_id>/upload', methods=['PATCH'])
@offer_access_required
@accept_uploads('offer_letter')
def upload_offer_letter(offer_id):
    """Attach or replace the offer letter; the previous file is removed."""
    new_path = uploaded_path('offer_letter')
    offer = _get_offer(offer_id)
    if not offer:
        delete_uploaded_files(new_path)
        return jsonify({'error': 'Offer not found'}), 404
    if not new_path:
        return jsonify({'error': 'No file provided'}), 400

    old_path = offer.file_path
    offer.file_path = new_path
    db.session.commit()
    delete_uploaded_files(old_path)

    log_activity('offer_letter_uploaded', applicant_id=offer.applicant_id, user_id=current_user.id,
                 details={'offer_id': offer.id})
    return jsonify(offer.to_dict())


@bp.route('/<offer_id>', methods=['DELETE'])
@offer_access_required
def delete_offer(offer_id):
    offer = _get_offer(offer_id)
    if not offer:
        return jsonify({'error': 'Offer not found'}), 404

    applicant_id = offer.applicant_id
    file_path = offer.file_path
    db.session.delete(offer)
    db.session.commit()
    delete_uploaded_files(file_path)

    log_activity('offer_deleted', applicant_id=applicant_id, user_id=current_user.id,
                 details={'offer_id': offer_id})
    return jsonify({'success': True})
