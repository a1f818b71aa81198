"""
In-app notification fan-out.
"""
import logging
from sqlalchemy import and_, or_
from hiretrack_app.models import db, Notification, NotificationSubscription

logger = logging.getLogger(__name__)


def notify_users(user_ids, type, title, message, link=None, exclude_user_id=None):
    """Create one notification per distinct user. Failures are logged, never raised."""
    recipients = {uid for uid in user_ids if uid and uid != exclude_user_id}
    if not recipients:
        return 0
    try:
        for user_id in recipients:
            db.session.add(Notification(
                user_id=user_id,
                type=type,
                title=title,
                message=message,
                link=link,
            ))
        db.session.commit()
        return len(recipients)
    except Exception:
        db.session.rollback()
        logger.exception("Failed to create %s notifications", type)
        return 0


def subscriber_ids(job_id=None, department=None, office_id=None, event_id=None):
    """Users subscribed to any of the given scopes, or to everything."""
    conditions = [NotificationSubscription.type == 'all']
    for sub_type, value in (('job', job_id), ('department', department),
                            ('office', office_id), ('event', event_id)):
        if value:
            conditions.append(and_(NotificationSubscription.type == sub_type,
                                   NotificationSubscription.value == value))
    rows = db.session.query(NotificationSubscription.user_id).filter(or_(*conditions)).distinct()
    return [row.user_id for row in rows]


def notify_subscribers(type, title, message, link=None, job=None, event_id=None, exclude_user_id=None):
    """Notify everyone subscribed to the job, its department or office, or the event."""
    try:
        user_ids = subscriber_ids(
            job_id=job.id if job else None,
            department=job.department if job else None,
            office_id=job.office_id if job else None,
            event_id=event_id,
        )
    except Exception:
        logger.exception("Failed to look up subscribers for %s", type)
        return 0
    return notify_users(user_ids, type, title, message, link, exclude_user_id=exclude_user_id)
