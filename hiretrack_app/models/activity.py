"""
ActivityLog model for the audit trail.
"""
import json
from datetime import datetime
from sqlalchemy import Index
from hiretrack_app.models.base import db, generate_uuid, iso


class ActivityLog(db.Model):
    """Who did what to which applicant."""
    __tablename__ = 'activity_logs'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    user_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='SET NULL'), index=True)
    applicant_id = db.Column(db.String(36), db.ForeignKey('applicants.id', ondelete='SET NULL'), index=True)

    action = db.Column(db.String(100), nullable=False)
    details = db.Column(db.Text)  # JSON
    ip_address = db.Column(db.String(50))
    user_agent = db.Column(db.String(255))

    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    user = db.relationship('User')

    __table_args__ = (
        Index('idx_activity_user_action', 'user_id', 'action'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'action': self.action,
            'applicant_id': self.applicant_id,
            'user': {'id': self.user.id, 'name': self.user.name} if self.user else None,
            'details': json.loads(self.details) if self.details else None,
            'created_at': iso(self.created_at),
        }
