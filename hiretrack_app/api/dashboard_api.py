"""
Dashboard API routes: pipeline counts, funnel metrics and recent activity.
"""
from datetime import datetime, timedelta
from flask import Blueprint, jsonify
from flask_login import current_user
from sqlalchemy import func
from hiretrack_app.models import db, Applicant, Interview, Job, Review
from hiretrack_app.utils.auth import api_login_required, applicant_visibility_filter, get_accessible_job_ids
from hiretrack_app.utils.constants import STAGES

bp = Blueprint('dashboard_api', __name__, url_prefix='/api/dashboard')

FUNNEL_STAGES = ('new', 'screening', 'interview', 'offer', 'hired')

# Applicants out of the running are left off the top-rated list
CLOSED_STAGES = ('rejected', 'hired')

RECENT_LIMIT = 10


def _visible(query):
    visibility = applicant_visibility_filter(current_user)
    return query.filter(visibility) if visibility is not None else query


def _stage_counts():
    rows = _visible(db.session.query(Applicant.stage, func.count(Applicant.id))).group_by(Applicant.stage).all()
    counts = {stage: 0 for stage in STAGES}
    counts.update(dict(rows))
    return counts


@bp.route('/stats', methods=['GET'])
@api_login_required
def stats():
    jobs = Job.query.filter_by(status='open', archived=False)
    job_ids = get_accessible_job_ids(current_user)
    if job_ids is not None:
        jobs = jobs.filter(Job.id.in_(job_ids))

    week_ago = datetime.utcnow() - timedelta(days=7)
    counts = _stage_counts()
    upcoming = _visible(Interview.query.join(Applicant)).filter(
        Interview.status == 'scheduled',
        Interview.scheduled_at >= datetime.utcnow(),
    ).count()

    return jsonify({
        'open_jobs': jobs.count(),
        'total_applicants': sum(counts.values()),
        'new_this_week': _visible(Applicant.query).filter(Applicant.created_at >= week_ago).count(),
        'in_interview': counts['interview'],
        'offers_out': counts['offer'],
        'hired': counts['hired'],
        'upcoming_interviews': upcoming,
    })


@bp.route('/pipeline', methods=['GET'])
@api_login_required
def pipeline():
    """Per-stage count and the five newest applicants in each stage."""
    counts = _stage_counts()
    result = []
    for stage in STAGES:
        recent = _visible(Applicant.query).filter(Applicant.stage == stage).order_by(
            Applicant.created_at.desc()
        ).limit(5)
        result.append({
            'stage': stage,
            'count': counts[stage],
            'recent': [a.to_dict() for a in recent],
        })
    return jsonify(result)


@bp.route('/funnel', methods=['GET'])
@api_login_required
def funnel():
    """How many applicants reached each stage (later stages count as having passed earlier ones)."""
    counts = _stage_counts()
    reached = []
    running = 0
    for stage in reversed(FUNNEL_STAGES):
        running += counts[stage]
        reached.append((stage, running))
    reached.reverse()

    top = reached[0][1] if reached else 0
    return jsonify([
        {'stage': stage, 'count': count, 'rate': round(count / top * 100, 1) if top else 0}
        for stage, count in reached
    ])


@bp.route('/sources', methods=['GET'])
@api_login_required
def sources():
    rows = _visible(db.session.query(Applicant.source, func.count(Applicant.id))).group_by(
        Applicant.source
    ).order_by(func.count(Applicant.id).desc()).all()
    return jsonify([{'source': source or 'Unknown', 'count': count} for source, count in rows])


@bp.route('/activity', methods=['GET'])
@api_login_required
def activity():
    """Newest applicants and newest reviews the user can see."""
    applicants = _visible(Applicant.query).order_by(Applicant.created_at.desc()).limit(RECENT_LIMIT)
    reviews = _visible(Review.query.join(Applicant, Review.applicant_id == Applicant.id)).order_by(
        Review.created_at.desc()
    ).limit(RECENT_LIMIT)

    recent_reviews = []
    for review in reviews:
        item = review.to_dict()
        item['applicant'] = {
            'id': review.applicant.id,
            'first_name': review.applicant.first_name,
            'last_name': review.applicant.last_name,
        }
        recent_reviews.append(item)

    return jsonify({
        'recent_applicants': [a.to_dict() for a in applicants],
        'recent_reviews': recent_reviews,
    })


@bp.route('/top-applicants', methods=['GET'])
@api_login_required
def top_applicants():
    """Open applicants ranked by their average review rating."""
    average = func.avg(Review.rating)
    review_count = func.count(Review.id)
    rows = _visible(
        db.session.query(Applicant, average, review_count).join(Review, Review.applicant_id == Applicant.id)
    ).filter(
        Applicant.stage.notin_(CLOSED_STAGES)
    ).group_by(Applicant.id).order_by(average.desc(), review_count.desc()).limit(RECENT_LIMIT).all()

    result = []
    for applicant, avg_rating, count in rows:
        item = applicant.to_dict()
        item['average_rating'] = round(float(avg_rating), 2)
        item['review_count'] = count
        result.append(item)
    return jsonify(result)
