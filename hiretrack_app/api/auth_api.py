"""
Authentication API routes.
"""
from datetime import datetime
from flask import Blueprint, g, jsonify
from flask_login import current_user, login_user, logout_user
from hiretrack_app.models import db, User
from hiretrack_app.schemas import LoginSchema, PasswordChangeSchema
from hiretrack_app.services.activity_log import log_activity
from hiretrack_app.utils.auth import api_login_required, generate_auth_token
from hiretrack_app.utils.validation import validate_body

bp = Blueprint('auth_api', __name__, url_prefix='/api/auth')


@bp.route('/login', methods=['POST'])
@validate_body(LoginSchema)
def login():
    data = g.data
    email = data.email.lower()
    user = User.query.filter_by(email=email).first()

    if not user or not user.check_password(data.password):
        log_activity('login_failed', details={'email': email})
        return jsonify({'error': 'Invalid credentials'}), 401

    user.last_login_at = datetime.utcnow()
    db.session.commit()
    login_user(user)
    log_activity('login_success', user_id=user.id)

    return jsonify({'token': generate_auth_token(user), 'user': user.to_dict()})


@bp.route('/logout', methods=['POST'])
@api_login_required
def logout():
    log_activity('logout', user_id=current_user.id)
    logout_user()
    return jsonify({'success': True})


@bp.route('/register', methods=['POST'])
def register():
    """Accounts are created by admins only."""
    return jsonify({'error': 'Not found'}), 404


@bp.route('/me', methods=['GET'])
@api_login_required
def me():
    return jsonify(current_user.to_dict())


@bp.route('/password', methods=['PUT'])
@api_login_required
@validate_body(PasswordChangeSchema)
def change_password():
    """Change password and revoke every previously issued token."""
    data = g.data
    if not current_user.check_password(data.current_password):
        return jsonify({'error': 'Current password is incorrect'}), 400

    current_user.set_password(data.new_password)
    current_user.token_version = (current_user.token_version or 0) + 1
    db.session.commit()
    log_activity('password_changed', user_id=current_user.id)

    return jsonify({'success': True, 'token': generate_auth_token(current_user)})
