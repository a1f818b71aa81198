"""
In-app notification API routes.
"""
from datetime import datetime, timedelta
from flask import Blueprint, g, jsonify
from flask_login import current_user
from hiretrack_app.models import db, Notification, NotificationSubscription
from hiretrack_app.schemas import SubscriptionsSchema
from hiretrack_app.utils.auth import api_login_required
from hiretrack_app.utils.constants import NOTIFICATION_LIST_LIMIT, NOTIFICATION_RETENTION_DAYS
from hiretrack_app.utils.validation import validate_body

bp = Blueprint('notifications_api', __name__, url_prefix='/api/notifications')


def _unread_count():
    return Notification.query.filter_by(user_id=current_user.id, read=False).count()


@bp.route('', methods=['GET'])
@api_login_required
def list_notifications():
    """Latest notifications; old ones are pruned on the way."""
    cutoff = datetime.utcnow() - timedelta(days=NOTIFICATION_RETENTION_DAYS)
    Notification.query.filter(
        Notification.user_id == current_user.id,
        Notification.created_at < cutoff,
    ).delete(synchronize_session=False)
    db.session.commit()

    notifications = Notification.query.filter_by(user_id=current_user.id).order_by(
        Notification.created_at.desc()
    ).limit(NOTIFICATION_LIST_LIMIT)
    return jsonify({
        'notifications': [n.to_dict() for n in notifications],
        'unread_count': _unread_count(),
    })


@bp.route('/unread-count', methods=['GET'])
@api_login_required
def unread_count():
    return jsonify({'count': _unread_count()})


@bp.route('/<notification_id>/read', methods=['PATCH'])
@api_login_required
def mark_read(notification_id):
    notification = Notification.query.filter_by(id=notification_id, user_id=current_user.id).first()
    if not notification:
        return jsonify({'error': 'Notification not found'}), 404
    notification.read = True
    db.session.commit()
    return jsonify(notification.to_dict())


@bp.route('/mark-all-read', methods=['POST'])
@api_login_required
def mark_all_read():
    updated = Notification.query.filter_by(user_id=current_user.id, read=False).update(
        {'read': True}, synchronize_session=False
    )
    db.session.commit()
    return jsonify({'success': True, 'updated': updated})


@bp.route('/<notification_id>', methods=['DELETE'])
@api_login_required
def delete_notification(notification_id):
    notification = Notification.query.filter_by(id=notification_id, user_id=current_user.id).first()
    if not notification:
        return jsonify({'error': 'Notification not found'}), 404
    db.session.delete(notification)
    db.session.commit()
    return jsonify({'success': True})


@bp.route('/subscriptions', methods=['GET'])
@api_login_required
def list_subscriptions():
    subscriptions = NotificationSubscription.query.filter_by(user_id=current_user.id)
    return jsonify([s.to_dict() for s in subscriptions])


@bp.route('/subscriptions', methods=['PUT'])
@api_login_required
@validate_body(SubscriptionsSchema)
def replace_subscriptions():
    wanted = []
    for item in g.data.subscriptions:
        # 'all' has no value; every other type needs one
        value = None if item.type == 'all' else (item.value or None)
        if item.type != 'all' and not value:
            return jsonify({'error': f'A value is required for {item.type} subscriptions'}), 400
        if (item.type, value) not in wanted:
            wanted.append((item.type, value))

    NotificationSubscription.query.filter_by(user_id=current_user.id).delete()
    for sub_type, value in wanted:
        db.session.add(NotificationSubscription(user_id=current_user.id, type=sub_type, value=value))
    db.session.commit()

    subscriptions = NotificationSubscription.query.filter_by(user_id=current_user.id)
    return jsonify([s.to_dict() for s in subscriptions])
