"""
Download route for stored uploads (resumes, portfolios, offer letters).
"""
import os
from flask import Blueprint, current_app, jsonify, send_from_directory
from flask_login import current_user
from hiretrack_app.models import Applicant, Offer
from hiretrack_app.utils.auth import api_login_required, can_access_applicant, has_offer_access
from hiretrack_app.utils.files import resolve_upload_path

bp = Blueprint('files_api', __name__, url_prefix='/uploads')


def _owner_visible(public_path):
    """Whether the current user may see the applicant or offer that owns the file."""
    applicant = Applicant.query.filter(
        (Applicant.resume_path == public_path) | (Applicant.portfolio_path == public_path)
    ).first()
    if applicant:
        return can_access_applicant(current_user, applicant)
    offer = Offer.query.filter_by(file_path=public_path).first()
    if offer:
        return has_offer_access(current_user) and can_access_applicant(current_user, offer.applicant)
    return False


@bp.route('/<category>/<filename>', methods=['GET'])
@api_login_required
def download(category, filename):
    public_path = f"/uploads/{category}/{filename}"
    full_path = resolve_upload_path(public_path)
    if not full_path or not os.path.isfile(full_path) or not _owner_visible(public_path):
        return jsonify({'error': 'File not found'}), 404
    return send_from_directory(os.path.join(current_app.config['UPLOAD_FOLDER'], category), filename)
