"""
Office API routes.
"""
from flask import Blueprint, g, jsonify
from flask_login import current_user
from hiretrack_app.models import db, Office
from hiretrack_app.schemas import OfficeSchema, OfficeUpdateSchema
from hiretrack_app.services.activity_log import log_activity
from hiretrack_app.utils.auth import api_login_required, role_required
from hiretrack_app.utils.validation import validate_body

bp = Blueprint('offices_api', __name__, url_prefix='/api/offices')

FIELDS = ('name', 'address', 'city', 'state', 'zip', 'phone')


@bp.route('', methods=['GET'])
@api_login_required
def list_offices():
    return jsonify([o.to_dict() for o in Office.query.order_by(Office.name.asc())])


@bp.route('', methods=['POST'])
@role_required('admin')
@validate_body(OfficeSchema)
def create_office():
    office = Office(**{field: getattr(g.data, field) or None for field in FIELDS})
    db.session.add(office)
    db.session.commit()
    log_activity('office_created', user_id=current_user.id, details={'office_id': office.id})
    return jsonify(office.to_dict()), 201


@bp.route('/<office_id>', methods=['PUT'])
@role_required('admin')
@validate_body(OfficeUpdateSchema)
def update_office(office_id):
    office = db.session.get(Office, office_id)
    if not office:
        return jsonify({'error': 'Office not found'}), 404

    changes = g.data.provided()
    if 'name' in changes and not changes['name']:
        return jsonify({'error': 'Office name is required'}), 400
    for field in FIELDS:
        if field in changes:
            setattr(office, field, changes[field] or None)
    db.session.commit()
    log_activity('office_updated', user_id=current_user.id, details={'office_id': office.id})
    return jsonify(office.to_dict())


@bp.route('/<office_id>', methods=['DELETE'])
@role_required('admin')
def delete_office(office_id):
    office = db.session.get(Office, office_id)
    if not office:
        return jsonify({'error': 'Office not found'}), 404
    if office.jobs.count():
        return jsonify({'error': 'Cannot delete an office with assigned jobs'}), 400

    db.session.delete(office)
    db.session.commit()
    log_activity('office_deleted', user_id=current_user.id, details={'office_id': office_id})
    return jsonify({'success': True})
