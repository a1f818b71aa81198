"""
Pydantic request schemas.
"""
from hiretrack_app.schemas.applicant import (
    PublicApplicationSchema, ManualApplicantSchema, ApplicantUpdateSchema, StageUpdateSchema,
    RejectionSchema, AssignJobSchema, NoteSchema, ReviewRequestSchema,
)
from hiretrack_app.schemas.job import (
    JobCreateSchema, JobUpdateSchema, ReviewerAssignmentSchema, OfficeSchema, OfficeUpdateSchema,
)
from hiretrack_app.schemas.hiring import (
    OfferCreateSchema, OfferUpdateSchema, InterviewCreateSchema, InterviewUpdateSchema,
    InterviewFeedbackSchema, ReviewSchema, EventCreateSchema, EventUpdateSchema, AttendeesSchema,
    FairIntakeSchema,
)
from hiretrack_app.schemas.account import (
    LoginSchema, PasswordChangeSchema, UserCreateSchema, UserUpdateSchema, SubscriptionsSchema,
    SiteSettingSchema, EmailTemplateSchema,
)

__all__ = [
    'PublicApplicationSchema',
    'ManualApplicantSchema',
    'ApplicantUpdateSchema',
    'StageUpdateSchema',
    'RejectionSchema',
    'AssignJobSchema',
    'NoteSchema',
    'ReviewRequestSchema',
    'JobCreateSchema',
    'JobUpdateSchema',
    'ReviewerAssignmentSchema',
    'OfficeSchema',
    'OfficeUpdateSchema',
    'OfferCreateSchema',
    'OfferUpdateSchema',
    'InterviewCreateSchema',
    'InterviewUpdateSchema',
    'InterviewFeedbackSchema',
    'ReviewSchema',
    'EventCreateSchema',
    'EventUpdateSchema',
    'AttendeesSchema',
    'FairIntakeSchema',
    'LoginSchema',
    'PasswordChangeSchema',
    'UserCreateSchema',
    'UserUpdateSchema',
    'SubscriptionsSchema',
    'SiteSettingSchema',
    'EmailTemplateSchema',
]
