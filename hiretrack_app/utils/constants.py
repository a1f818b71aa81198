"""
Constants used throughout the application.
"""
ROLES = ('admin', 'hiring_manager', 'reviewer')

STAGES = ('new', 'screening', 'interview', 'offer', 'hired', 'rejected', 'holding', 'fair_intake')
# fair_intake is only ever set by event intake
SETTABLE_STAGES = ('new', 'screening', 'interview', 'offer', 'hired', 'rejected', 'holding')

# Stages that move forward automatically
PRE_INTERVIEW_STAGES = ('fair_intake', 'new', 'screening')
PRE_OFFER_STAGES = ('new', 'screening', 'interview', 'fair_intake')

JOB_STATUSES = ('open', 'closed', 'on-hold')

OFFER_STATUSES = ('draft', 'extended', 'accepted', 'declined', 'rescinded')
NOTIFIABLE_OFFER_STATUSES = {
    'extended': 'Offer Extended',
    'accepted': 'Offer Accepted',
    'declined': 'Offer Declined',
    'rescinded': 'Offer Rescinded',
}

INTERVIEW_TYPES = ('in_person', 'video', 'phone')
INTERVIEW_STATUSES = ('scheduled', 'completed', 'cancelled', 'no_show')
INTERVIEW_OUTCOMES = ('advance', 'hold', 'reject')

EVENT_TYPES = ('job_fair', 'campus_visit', 'info_session')

RECOMMENDATIONS = ('strong_yes', 'yes', 'maybe', 'no', 'strong_no')

SUBSCRIPTION_TYPES = ('job', 'department', 'office', 'event', 'all')

PUBLIC_SITE_SETTING_KEYS = ('about_whlc', 'events_intro', 'positions_intro')

EMAIL_TEMPLATE_TYPES = ('thank_you', 'rejection')

DEFAULT_EMAIL_TEMPLATES = {
    'thank_you': {
        'subject': 'Thank you for applying - {{jobTitle}}',
        'body': (
            '<p>Hi {{firstName}},</p>'
            '<p>Thank you for applying for the <strong>{{jobTitle}}</strong> position. '
            'We have received your application and our team will review it shortly.</p>'
            '<p>If your qualifications match our needs, we will reach out to discuss next steps.</p>'
            '<p>Best regards,<br>The Hiring Team</p>'
        ),
    },
    'rejection': {
        'subject': 'Update on your application - {{jobTitle}}',
        'body': (
            '<p>Hi {{firstName}},</p>'
            '<p>Thank you for your interest in the <strong>{{jobTitle}}</strong> position '
            'and for the time you invested in your application.</p>'
            '<p>After careful consideration, we have decided to move forward with other candidates. '
            'We encourage you to apply for future openings that match your experience.</p>'
            '<p>Best regards,<br>The Hiring Team</p>'
        ),
    },
}

GENERAL_POOL_LABEL = 'General Pool'

NOTIFICATION_RETENTION_DAYS = 90
NOTIFICATION_LIST_LIMIT = 50
