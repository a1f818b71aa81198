"""
Job and office request bodies.
"""
from typing import List, Optional
from pydantic import Field
from hiretrack_app.schemas.common import RequestSchema, OptionalId, choice, plain_text, rich_text
from hiretrack_app.utils.constants import JOB_STATUSES


class JobCreateSchema(RequestSchema):
    title: plain_text(200, required='Title is required')
    department: plain_text(100, required='Department is required')
    location: Optional[plain_text(200)] = None
    type: plain_text(50, required='Job type is required')
    description: rich_text(20000, required='Description is required')
    responsibilities: Optional[rich_text(20000)] = None
    requirements: Optional[rich_text(20000)] = None
    benefits: Optional[rich_text(20000)] = None
    salary: Optional[plain_text(200)] = None
    status: choice(JOB_STATUSES, 'status') = 'open'
    publish_to_website: bool = False
    office_id: OptionalId = None


class JobUpdateSchema(RequestSchema):
    title: Optional[plain_text(200, required='Title is required')] = None
    department: Optional[plain_text(100, required='Department is required')] = None
    location: Optional[plain_text(200)] = None
    type: Optional[plain_text(50)] = None
    description: Optional[rich_text(20000)] = None
    responsibilities: Optional[rich_text(20000)] = None
    requirements: Optional[rich_text(20000)] = None
    benefits: Optional[rich_text(20000)] = None
    salary: Optional[plain_text(200)] = None
    status: Optional[choice(JOB_STATUSES, 'status')] = None
    publish_to_website: Optional[bool] = None
    office_id: OptionalId = None


class ReviewerAssignmentSchema(RequestSchema):
    user_ids: List[str] = Field(default_factory=list, max_length=100)


class OfficeSchema(RequestSchema):
    name: plain_text(200, required='Office name is required')
    address: Optional[plain_text(500)] = None
    city: Optional[plain_text(200)] = None
    state: Optional[plain_text(100)] = None
    zip: Optional[plain_text(20)] = None
    phone: Optional[plain_text(50)] = None


class OfficeUpdateSchema(RequestSchema):
    name: Optional[plain_text(200, required='Office name is required')] = None
    address: Optional[plain_text(500)] = None
    city: Optional[plain_text(200)] = None
    state: Optional[plain_text(100)] = None
    zip: Optional[plain_text(20)] = None
    phone: Optional[plain_text(50)] = None
