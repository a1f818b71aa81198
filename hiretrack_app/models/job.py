"""
Office, Job and JobReviewer models.
"""
from datetime import datetime
from sqlalchemy import UniqueConstraint
from hiretrack_app.models.base import db, generate_uuid, iso


class Office(db.Model):
    """A physical office jobs can be attached to."""
    __tablename__ = 'offices'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    name = db.Column(db.String(200), nullable=False)
    address = db.Column(db.String(500))
    city = db.Column(db.String(200))
    state = db.Column(db.String(100))
    zip = db.Column(db.String(20))
    phone = db.Column(db.String(50))

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    jobs = db.relationship('Job', backref='office', lazy='dynamic')

    @property
    def display_location(self):
        """'City, State' or None when the office has no city."""
        if not self.city:
            return None
        return f"{self.city}, {self.state}" if self.state else self.city

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'address': self.address,
            'city': self.city,
            'state': self.state,
            'zip': self.zip,
            'phone': self.phone,
            'created_at': iso(self.created_at),
        }


class Job(db.Model):
    """A job posting."""
    __tablename__ = 'jobs'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    title = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(255), unique=True, nullable=False, index=True)
    department = db.Column(db.String(100), nullable=False, index=True)
    location = db.Column(db.String(200), nullable=False)
    type = db.Column(db.String(50), nullable=False)  # Full-time, Part-time, Contract...
    description = db.Column(db.Text, nullable=False)
    responsibilities = db.Column(db.Text)
    requirements = db.Column(db.Text)
    benefits = db.Column(db.Text)
    salary = db.Column(db.String(200))

    # Status: open, closed, on-hold
    status = db.Column(db.String(20), default='open', nullable=False, index=True)
    publish_to_website = db.Column(db.Boolean, default=False, nullable=False)
    archived = db.Column(db.Boolean, default=False, nullable=False, index=True)
    archived_at = db.Column(db.DateTime)
    closed_at = db.Column(db.DateTime)

    office_id = db.Column(
        db.String(36),
        db.ForeignKey('offices.id', ondelete='SET NULL'),
        nullable=True,
        index=True,
    )
    created_by_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='SET NULL'))

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    applicants = db.relationship('Applicant', backref='job', lazy='dynamic')
    reviewers = db.relationship(
        'JobReviewer',
        backref='job',
        lazy='dynamic',
        cascade='all, delete-orphan',
    )

    def to_dict(self, include_description=True):
        data = {
            'id': self.id,
            'title': self.title,
            'slug': self.slug,
            'department': self.department,
            'location': self.location,
            'type': self.type,
            'salary': self.salary,
            'status': self.status,
            'publish_to_website': self.publish_to_website,
            'archived': self.archived,
            'archived_at': iso(self.archived_at),
            'closed_at': iso(self.closed_at),
            'office_id': self.office_id,
            'office': self.office.to_dict() if self.office else None,
            'created_at': iso(self.created_at),
            'updated_at': iso(self.updated_at),
        }
        if include_description:
            data.update({
                'description': self.description,
                'responsibilities': self.responsibilities,
                'requirements': self.requirements,
                'benefits': self.benefits,
            })
        return data

    def to_public_dict(self):
        """Fields safe to show on the careers page."""
        return {
            'id': self.id,
            'title': self.title,
            'slug': self.slug,
            'department': self.department,
            'location': self.location,
            'type': self.type,
            'salary': self.salary,
            'description': self.description,
            'responsibilities': self.responsibilities,
            'requirements': self.requirements,
            'benefits': self.benefits,
            'created_at': iso(self.created_at),
        }


class JobReviewer(db.Model):
    """Assignment of a reviewer to a job."""
    __tablename__ = 'job_reviewers'

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    job_id = db.Column(db.String(36), db.ForeignKey('jobs.id', ondelete='CASCADE'), nullable=False, index=True)
    user_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    user = db.relationship('User')

    __table_args__ = (
        UniqueConstraint('job_id', 'user_id', name='uq_job_reviewer'),
    )
