"""
Activity (audit) logging.
"""
import json
import logging
from flask import has_request_context, request
from hiretrack_app.models import db, ActivityLog

logger = logging.getLogger(__name__)


def log_activity(action, applicant_id=None, user_id=None, details=None):
    """
    Record an activity entry. Never raises: a failed audit write is logged
    and must not break the request that triggered it.
    """
    try:
        ip_address = None
        user_agent = None
        if has_request_context():
            ip_address = request.remote_addr
            user_agent = request.user_agent.string[:255] if request.user_agent else None

        entry = ActivityLog(
            action=action,
            applicant_id=applicant_id,
            user_id=user_id,
            details=json.dumps(details) if details else None,
            ip_address=ip_address,
            user_agent=user_agent,
        )
        db.session.add(entry)
        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.exception("Failed to log activity %s", action)
