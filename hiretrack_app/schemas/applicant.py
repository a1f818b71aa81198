"""
Applicant request bodies.
"""
from typing import List, Optional
from pydantic import Field
from hiretrack_app.schemas.common import (
    RequestSchema, EmailAddress, OptionalId, Url, choice, plain_text, rich_text,
)
from hiretrack_app.utils.constants import SETTABLE_STAGES


class ApplicantFields(RequestSchema):
    first_name: plain_text(100, required='First name is required')
    last_name: plain_text(100, required='Last name is required')
    email: EmailAddress
    phone: Optional[plain_text(50)] = None
    linked_in: Optional[Url] = None
    website: Optional[Url] = None
    portfolio_url: Optional[Url] = None
    cover_letter: Optional[rich_text(10000)] = None


class PublicApplicationSchema(ApplicantFields):
    """Careers-site submission. `website2` is a honeypot real visitors never see."""
    job_id: OptionalId = None
    source: Optional[plain_text(100)] = None
    source_details: Optional[plain_text(500)] = None
    referrer: Optional[plain_text(1000)] = None
    utm_source: Optional[plain_text(200)] = None
    utm_medium: Optional[plain_text(200)] = None
    utm_campaign: Optional[plain_text(200)] = None
    website2: Optional[str] = None


class ManualApplicantSchema(ApplicantFields):
    job_id: OptionalId = None
    source: Optional[plain_text(100)] = None
    source_details: Optional[plain_text(500)] = None


class ApplicantUpdateSchema(RequestSchema):
    first_name: Optional[plain_text(100, required='First name is required')] = None
    last_name: Optional[plain_text(100, required='Last name is required')] = None
    email: Optional[EmailAddress] = None
    phone: Optional[plain_text(50)] = None
    linked_in: Optional[Url] = None
    website: Optional[Url] = None
    portfolio_url: Optional[Url] = None
    cover_letter: Optional[rich_text(10000)] = None
    source: Optional[plain_text(100)] = None
    source_details: Optional[plain_text(500)] = None


class StageUpdateSchema(RequestSchema):
    stage: choice(SETTABLE_STAGES, 'stage')


class RejectionSchema(RequestSchema):
    """Optional overrides for the stored rejection template."""
    subject: Optional[plain_text(500)] = None
    body: Optional[rich_text(20000)] = None


class AssignJobSchema(RequestSchema):
    job_id: OptionalId = None


class NoteSchema(RequestSchema):
    content: rich_text(10000, required='Note content is required')


class ReviewRequestSchema(RequestSchema):
    user_ids: List[str] = Field(min_length=1, max_length=50)
    message: Optional[rich_text(5000)] = None
