"""
Interview and InterviewParticipant models.
"""
from datetime import datetime
from sqlalchemy import UniqueConstraint
from hiretrack_app.models.base import db, generate_uuid, iso


class Interview(db.Model):
    """A scheduled interview with one or more staff participants."""
    __tablename__ = 'interviews'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    applicant_id = db.Column(
        db.String(36),
        db.ForeignKey('applicants.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    scheduled_at = db.Column(db.DateTime, nullable=False, index=True)
    location = db.Column(db.String(500))
    type = db.Column(db.String(20), default='in_person', nullable=False)  # in_person, video, phone
    notes = db.Column(db.Text)
    # scheduled, completed, cancelled, no_show
    status = db.Column(db.String(20), default='scheduled', nullable=False)
    feedback = db.Column(db.Text)
    outcome = db.Column(db.String(20))  # advance, hold, reject

    created_by_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='SET NULL'))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    created_by = db.relationship('User')
    participants = db.relationship(
        'InterviewParticipant',
        backref='interview',
        lazy='dynamic',
        cascade='all, delete-orphan',
    )

    def participant_ids(self):
        return [p.user_id for p in self.participants]

    def to_dict(self):
        return {
            'id': self.id,
            'applicant_id': self.applicant_id,
            'applicant_name': self.applicant.full_name if self.applicant else None,
            'scheduled_at': iso(self.scheduled_at),
            'location': self.location,
            'type': self.type,
            'notes': self.notes,
            'status': self.status,
            'feedback': self.feedback,
            'outcome': self.outcome,
            'created_by': {'id': self.created_by.id, 'name': self.created_by.name} if self.created_by else None,
            'participants': [p.to_dict() for p in self.participants],
            'created_at': iso(self.created_at),
            'updated_at': iso(self.updated_at),
        }


class InterviewParticipant(db.Model):
    """A staff member on an interview panel, with their own feedback."""
    __tablename__ = 'interview_participants'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    interview_id = db.Column(
        db.String(36),
        db.ForeignKey('interviews.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    user_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    feedback = db.Column(db.Text)
    rating = db.Column(db.Integer)

    user = db.relationship('User')

    __table_args__ = (
        UniqueConstraint('interview_id', 'user_id', name='uq_interview_participant'),
    )

    def to_dict(self):
        return {
            'user_id': self.user_id,
            'name': self.user.name if self.user else None,
            'email': self.user.email if self.user else None,
            'feedback': self.feedback,
            'rating': self.rating,
        }
