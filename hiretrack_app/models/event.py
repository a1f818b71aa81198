"""
Recruitment event models (job fairs, campus visits, info sessions).
"""
from datetime import datetime
from sqlalchemy import UniqueConstraint
from hiretrack_app.models.base import db, generate_uuid, iso


class RecruitmentEvent(db.Model):
    __tablename__ = 'recruitment_events'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    name = db.Column(db.String(200), nullable=False)
    type = db.Column(db.String(20), default='job_fair', nullable=False)  # job_fair, campus_visit, info_session
    location = db.Column(db.String(500))
    date = db.Column(db.DateTime, nullable=False, index=True)
    notes = db.Column(db.Text)

    created_by_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='SET NULL'))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    created_by = db.relationship('User')
    attendees = db.relationship(
        'EventAttendee',
        backref='event',
        lazy='dynamic',
        cascade='all, delete-orphan',
    )
    applicants = db.relationship('Applicant', backref='event', lazy='dynamic')

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'type': self.type,
            'location': self.location,
            'date': iso(self.date),
            'notes': self.notes,
            'created_by': {'id': self.created_by.id, 'name': self.created_by.name} if self.created_by else None,
            'attendees': [a.to_dict() for a in self.attendees],
            'applicant_count': self.applicants.count(),
            'created_at': iso(self.created_at),
        }


class EventAttendee(db.Model):
    """Staff attending an event; reviewers see the event's applicants."""
    __tablename__ = 'event_attendees'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    event_id = db.Column(
        db.String(36),
        db.ForeignKey('recruitment_events.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    user_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)

    user = db.relationship('User')

    __table_args__ = (
        UniqueConstraint('event_id', 'user_id', name='uq_event_attendee'),
    )

    def to_dict(self):
        return {
            'user_id': self.user_id,
            'name': self.user.name if self.user else None,
            'email': self.user.email if self.user else None,
        }
