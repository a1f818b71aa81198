"""
Offer, interview, review and event request bodies.
"""
from typing import List, Optional
from pydantic import Field
from hiretrack_app.schemas.common import (
    RequestSchema, EmailAddress, OptionalId, OptionalScore, OptionalTimestamp, Score, Timestamp, Url,
    choice, plain_text, rich_text,
)
from hiretrack_app.utils.constants import (
    EVENT_TYPES, INTERVIEW_OUTCOMES, INTERVIEW_STATUSES, INTERVIEW_TYPES, OFFER_STATUSES, RECOMMENDATIONS,
)


class OfferCreateSchema(RequestSchema):
    status: choice(OFFER_STATUSES, 'offer status') = 'draft'
    notes: Optional[rich_text(10000)] = None
    salary: Optional[plain_text(200)] = None
    offer_date: OptionalTimestamp = None
    accepted_date: OptionalTimestamp = None
    declined_date: OptionalTimestamp = None


class OfferUpdateSchema(RequestSchema):
    status: Optional[choice(OFFER_STATUSES, 'offer status')] = None
    notes: Optional[rich_text(10000)] = None
    salary: Optional[plain_text(200)] = None
    offer_date: OptionalTimestamp = None
    accepted_date: OptionalTimestamp = None
    declined_date: OptionalTimestamp = None


class InterviewCreateSchema(RequestSchema):
    scheduled_at: Timestamp
    location: Optional[plain_text(500)] = None
    type: choice(INTERVIEW_TYPES, 'interview type') = 'in_person'
    notes: Optional[rich_text(10000)] = None
    participant_ids: List[str] = Field(min_length=1, max_length=20)


class InterviewUpdateSchema(RequestSchema):
    scheduled_at: OptionalTimestamp = None
    location: Optional[plain_text(500)] = None
    type: Optional[choice(INTERVIEW_TYPES, 'interview type')] = None
    notes: Optional[rich_text(10000)] = None
    status: Optional[choice(INTERVIEW_STATUSES, 'interview status')] = None
    feedback: Optional[rich_text(10000)] = None
    outcome: Optional[choice(INTERVIEW_OUTCOMES, 'outcome')] = None
    participant_ids: Optional[List[str]] = Field(default=None, min_length=1, max_length=20)


class InterviewFeedbackSchema(RequestSchema):
    feedback: rich_text(10000, required='Feedback is required')
    rating: OptionalScore = None


class ReviewSchema(RequestSchema):
    rating: Score
    technical_skills: OptionalScore = None
    design_ability: OptionalScore = None
    portfolio_quality: OptionalScore = None
    communication: OptionalScore = None
    culture_fit: OptionalScore = None
    recommendation: Optional[choice(RECOMMENDATIONS, 'recommendation')] = None
    comments: Optional[rich_text(10000)] = None


class EventCreateSchema(RequestSchema):
    name: plain_text(200, required='Event name is required')
    type: choice(EVENT_TYPES, 'event type') = 'job_fair'
    location: Optional[plain_text(500)] = None
    date: Timestamp
    notes: Optional[rich_text(10000)] = None


class EventUpdateSchema(RequestSchema):
    name: Optional[plain_text(200, required='Event name is required')] = None
    type: Optional[choice(EVENT_TYPES, 'event type')] = None
    location: Optional[plain_text(500)] = None
    date: OptionalTimestamp = None
    notes: Optional[rich_text(10000)] = None


class AttendeesSchema(RequestSchema):
    user_ids: List[str] = Field(default_factory=list, max_length=100)


class FairIntakeSchema(RequestSchema):
    """Applicant met at an event plus the recruiter's on-the-spot review."""
    first_name: plain_text(100, required='First name is required')
    last_name: plain_text(100, required='Last name is required')
    email: EmailAddress
    phone: Optional[plain_text(50)] = None
    linked_in: Optional[Url] = None
    portfolio_url: Optional[Url] = None
    job_id: OptionalId = None
    rating: Score
    recommendation: choice(RECOMMENDATIONS, 'recommendation')
    comments: Optional[rich_text(10000)] = None
