"""
User administration API routes (admin only).
"""
from flask import Blueprint, g, jsonify, request
from flask_login import current_user
from sqlalchemy import or_
from hiretrack_app.models import db, User
from hiretrack_app.schemas import UserCreateSchema, UserUpdateSchema
from hiretrack_app.services.activity_log import log_activity
from hiretrack_app.utils.auth import role_required
from hiretrack_app.utils.pagination import get_pagination_params, paginated_response
from hiretrack_app.utils.validation import validate_body

bp = Blueprint('users_api', __name__, url_prefix='/api/users')


@bp.route('', methods=['GET'])
@role_required('admin')
def list_users():
    query = User.query
    role = request.args.get('role', '').strip()
    if role:
        query = query.filter(User.role == role)
    search = request.args.get('search', '').strip()
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(User.name.ilike(pattern), User.email.ilike(pattern)))
    query = query.order_by(User.name.asc())

    paging = get_pagination_params()
    if paging:
        page, page_size = paging
        return jsonify(paginated_response(query, page, page_size, lambda u: u.to_dict()))
    return jsonify([u.to_dict() for u in query.all()])


@bp.route('', methods=['POST'])
@role_required('admin')
@validate_body(UserCreateSchema)
def create_user():
    data = g.data
    email = data.email.lower()
    if User.query.filter_by(email=email).first():
        return jsonify({'error': 'A user with this email already exists'}), 400

    user = User(
        email=email,
        name=data.name,
        role=data.role,
        scope_mode=data.scope_mode,
        event_access=data.event_access,
        offer_access=data.offer_access,
    )
    user.department_scope = data.scoped_departments
    user.office_scope = data.scoped_offices
    user.set_password(data.password)
    db.session.add(user)
    db.session.commit()

    log_activity('user_created', user_id=current_user.id, details={'created_user_id': user.id, 'role': user.role})
    return jsonify(user.to_dict()), 201


@bp.route('/<user_id>', methods=['PUT'])
@role_required('admin')
@validate_body(UserUpdateSchema)
def update_user(user_id):
    user = db.session.get(User, user_id)
    if not user:
        return jsonify({'error': 'User not found'}), 404

    changes = g.data.provided()
    if changes.get('email'):
        email = changes['email'].lower()
        if User.query.filter(User.email == email, User.id != user.id).first():
            return jsonify({'error': 'A user with this email already exists'}), 400
        user.email = email

    for field in ('name', 'role', 'scope_mode', 'event_access', 'offer_access'):
        if changes.get(field) is not None:
            setattr(user, field, changes[field])
    if 'scoped_departments' in changes:
        user.department_scope = changes['scoped_departments']
    if 'scoped_offices' in changes:
        user.office_scope = changes['scoped_offices']
    if changes.get('password'):
        user.set_password(changes['password'])
        user.token_version = (user.token_version or 0) + 1

    db.session.commit()
    log_activity('user_updated', user_id=current_user.id,
                 details={'updated_user_id': user.id, 'fields': sorted(k for k in changes if k != 'password')})
    return jsonify(user.to_dict())


@bp.route('/<user_id>', methods=['DELETE'])
@role_required('admin')
def delete_user(user_id):
    if user_id == current_user.id:
        return jsonify({'error': 'You cannot delete your own account'}), 400

    user = db.session.get(User, user_id)
    if not user:
        return jsonify({'error': 'User not found'}), 404

    db.session.delete(user)
    db.session.commit()
    log_activity('user_deleted', user_id=current_user.id, details={'deleted_user_id': user_id})
    return jsonify({'success': True})
