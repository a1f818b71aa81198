"""
In-app notifications and subscriptions.
"""
from datetime import datetime
from sqlalchemy import Index, UniqueConstraint
from hiretrack_app.models.base import db, generate_uuid, iso


class Notification(db.Model):
    __tablename__ = 'notifications'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    user_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    type = db.Column(db.String(50), nullable=False)
    title = db.Column(db.String(255), nullable=False)
    message = db.Column(db.Text, nullable=False)
    link = db.Column(db.String(500))
    read = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    __table_args__ = (
        Index('idx_notification_user_read', 'user_id', 'read'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'type': self.type,
            'title': self.title,
            'message': self.message,
            'link': self.link,
            'read': self.read,
            'created_at': iso(self.created_at),
        }


class NotificationSubscription(db.Model):
    """What a user wants to hear about: a job, department, office, event, or everything."""
    __tablename__ = 'notification_subscriptions'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    user_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    type = db.Column(db.String(20), nullable=False)  # job, department, office, event, all
    value = db.Column(db.String(255))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint('user_id', 'type', 'value', name='uq_notification_subscription'),
    )

    def to_dict(self):
        return {'id': self.id, 'type': self.type, 'value': self.value}
