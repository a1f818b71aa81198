"""
Database models for HireTrack.
"""
from hiretrack_app.models.base import db, generate_uuid
from hiretrack_app.models.user import User
from hiretrack_app.models.job import Office, Job, JobReviewer
from hiretrack_app.models.event import RecruitmentEvent, EventAttendee
from hiretrack_app.models.applicant import Applicant, Note, Review
from hiretrack_app.models.offer import Offer
from hiretrack_app.models.interview import Interview, InterviewParticipant
from hiretrack_app.models.notification import Notification, NotificationSubscription
from hiretrack_app.models.activity import ActivityLog
from hiretrack_app.models.settings import SiteSetting, EmailTemplate

__all__ = [
    'db',
    'generate_uuid',
    'User',
    'Office',
    'Job',
    'JobReviewer',
    'RecruitmentEvent',
    'EventAttendee',
    'Applicant',
    'Note',
    'Review',
    'Offer',
    'Interview',
    'InterviewParticipant',
    'Notification',
    'NotificationSubscription',
    'ActivityLog',
    'SiteSetting',
    'EmailTemplate',
]
