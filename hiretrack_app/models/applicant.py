"""
Applicant, Note and Review models.
"""
import json
from datetime import datetime
from sqlalchemy import Index, UniqueConstraint
from hiretrack_app.models.base import db, generate_uuid, iso


class Applicant(db.Model):
    """Someone who applied to a job, the general pool, or was met at an event."""
    __tablename__ = 'applicants'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    job_id = db.Column(
        db.String(36),
        db.ForeignKey('jobs.id', ondelete='SET NULL'),
        nullable=True,
        index=True,
    )
    event_id = db.Column(
        db.String(36),
        db.ForeignKey('recruitment_events.id', ondelete='SET NULL'),
        nullable=True,
        index=True,
    )

    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(255), nullable=False, index=True)
    phone = db.Column(db.String(50))
    linked_in = db.Column(db.String(500))
    website = db.Column(db.String(500))
    portfolio_url = db.Column(db.String(500))
    cover_letter = db.Column(db.Text)
    resume_path = db.Column(db.String(500))
    portfolio_path = db.Column(db.String(500))

    # Attribution
    source = db.Column(db.String(100))
    source_details = db.Column(db.String(500))
    referrer = db.Column(db.String(1000))
    utm_source = db.Column(db.String(200))
    utm_medium = db.Column(db.String(200))
    utm_campaign = db.Column(db.String(200))

    # new, screening, interview, offer, hired, rejected, holding, fair_intake
    stage = db.Column(db.String(30), default='new', nullable=False, index=True)

    # Google Safe Browsing result for the submitted links
    url_safe = db.Column(db.Boolean)
    url_flags = db.Column(db.Text)  # JSON
    url_checked_at = db.Column(db.DateTime)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    notes = db.relationship(
        'Note',
        backref='applicant',
        lazy='dynamic',
        cascade='all, delete-orphan',
        order_by='Note.created_at.desc()',
    )
    reviews = db.relationship(
        'Review',
        backref='applicant',
        lazy='dynamic',
        cascade='all, delete-orphan',
    )
    offers = db.relationship(
        'Offer',
        backref='applicant',
        lazy='dynamic',
        cascade='all, delete-orphan',
    )
    interviews = db.relationship(
        'Interview',
        backref='applicant',
        lazy='dynamic',
        cascade='all, delete-orphan',
    )

    __table_args__ = (
        Index('idx_applicant_job_email', 'job_id', 'email'),
    )

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"

    def add_note(self, content):
        note = Note(applicant=self, content=content)
        db.session.add(note)
        return note

    def to_dict(self, include_details=False):
        data = {
            'id': self.id,
            'job_id': self.job_id,
            'job_title': self.job.title if self.job else None,
            'event_id': self.event_id,
            'first_name': self.first_name,
            'last_name': self.last_name,
            'email': self.email,
            'phone': self.phone,
            'stage': self.stage,
            'source': self.source,
            'resume_path': self.resume_path,
            'portfolio_path': self.portfolio_path,
            'url_safe': self.url_safe,
            'created_at': iso(self.created_at),
            'updated_at': iso(self.updated_at),
        }
        if include_details:
            data.update({
                'linked_in': self.linked_in,
                'website': self.website,
                'portfolio_url': self.portfolio_url,
                'cover_letter': self.cover_letter,
                'source_details': self.source_details,
                'referrer': self.referrer,
                'utm_source': self.utm_source,
                'utm_medium': self.utm_medium,
                'utm_campaign': self.utm_campaign,
                'url_flags': json.loads(self.url_flags) if self.url_flags else [],
                'url_checked_at': iso(self.url_checked_at),
                'job': self.job.to_dict(include_description=False) if self.job else None,
                'notes': [n.to_dict() for n in self.notes],
            })
        return data


class Note(db.Model):
    """Timeline note on an applicant; also used for automatic stage notes."""
    __tablename__ = 'notes'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    applicant_id = db.Column(
        db.String(36),
        db.ForeignKey('applicants.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    content = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'applicant_id': self.applicant_id,
            'content': self.content,
            'created_at': iso(self.created_at),
        }


class Review(db.Model):
    """One reviewer's scorecard for one applicant."""
    __tablename__ = 'reviews'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    applicant_id = db.Column(
        db.String(36),
        db.ForeignKey('applicants.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    reviewer_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False)

    rating = db.Column(db.Integer, nullable=False)
    technical_skills = db.Column(db.Integer)
    design_ability = db.Column(db.Integer)
    portfolio_quality = db.Column(db.Integer)
    communication = db.Column(db.Integer)
    culture_fit = db.Column(db.Integer)
    # strong_yes, yes, maybe, no, strong_no
    recommendation = db.Column(db.String(20))
    comments = db.Column(db.Text)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    reviewer = db.relationship('User')

    __table_args__ = (
        UniqueConstraint('reviewer_id', 'applicant_id', name='uq_review_reviewer_applicant'),
    )

    SCORE_FIELDS = ('rating', 'technical_skills', 'design_ability',
                    'portfolio_quality', 'communication', 'culture_fit')

    def to_dict(self):
        data = {
            'id': self.id,
            'applicant_id': self.applicant_id,
            'reviewer_id': self.reviewer_id,
            'reviewer_name': self.reviewer.name if self.reviewer else None,
            'recommendation': self.recommendation,
            'comments': self.comments,
            'created_at': iso(self.created_at),
            'updated_at': iso(self.updated_at),
        }
        for field in self.SCORE_FIELDS:
            data[field] = getattr(self, field)
        return data
