"""
Offer model.
"""
from datetime import datetime
from hiretrack_app.models.base import db, generate_uuid, iso


class Offer(db.Model):
    """An offer extended (or drafted) for an applicant."""
    __tablename__ = 'offers'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    applicant_id = db.Column(
        db.String(36),
        db.ForeignKey('applicants.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    # draft, extended, accepted, declined, rescinded
    status = db.Column(db.String(20), default='draft', nullable=False)
    notes = db.Column(db.Text)
    salary = db.Column(db.String(200))
    offer_date = db.Column(db.DateTime)
    accepted_date = db.Column(db.DateTime)
    declined_date = db.Column(db.DateTime)
    file_path = db.Column(db.String(500))

    created_by_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='SET NULL'))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    created_by = db.relationship('User')

    def to_dict(self):
        return {
            'id': self.id,
            'applicant_id': self.applicant_id,
            'status': self.status,
            'notes': self.notes,
            'salary': self.salary,
            'offer_date': iso(self.offer_date),
            'accepted_date': iso(self.accepted_date),
            'declined_date': iso(self.declined_date),
            'file_path': self.file_path,
            'created_by': {'id': self.created_by.id, 'name': self.created_by.name} if self.created_by else None,
            'created_at': iso(self.created_at),
            'updated_at': iso(self.updated_at),
        }
