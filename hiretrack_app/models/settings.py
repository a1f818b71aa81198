"""
Site-wide settings and editable email templates.
"""
from datetime import datetime
from hiretrack_app.models.base import db, generate_uuid, iso


class SiteSetting(db.Model):
    """Rich-text blurbs shown on the public careers site."""
    __tablename__ = 'site_settings'

    key = db.Column(db.String(100), primary_key=True)
    value = db.Column(db.Text, nullable=False, default='')
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {'key': self.key, 'value': self.value, 'updated_at': iso(self.updated_at)}


class EmailTemplate(db.Model):
    __tablename__ = 'email_templates'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    type = db.Column(db.String(50), unique=True, nullable=False)  # thank_you, rejection
    subject = db.Column(db.String(500), nullable=False)
    body = db.Column(db.Text, nullable=False)
    updated_by_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='SET NULL'))
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'type': self.type,
            'subject': self.subject,
            'body': self.body,
            'updated_at': iso(self.updated_at),
        }
