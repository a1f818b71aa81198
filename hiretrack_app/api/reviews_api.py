"""
Reviewer scorecard API routes.
"""
from flask import Blueprint, g, jsonify
from flask_login import current_user
from hiretrack_app.models import db, Review
from hiretrack_app.schemas import ReviewSchema
from hiretrack_app.services.activity_log import log_activity
from hiretrack_app.utils.auth import api_login_required, get_accessible_applicant
from hiretrack_app.utils.constants import RECOMMENDATIONS
from hiretrack_app.utils.validation import validate_body

bp = Blueprint('reviews_api', __name__, url_prefix='/api/reviews')


def _not_found():
    return jsonify({'error': 'Applicant not found'}), 404


@bp.route('/applicant/<applicant_id>', methods=['GET'])
@api_login_required
def list_reviews(applicant_id):
    applicant = get_accessible_applicant(applicant_id)
    if not applicant:
        return _not_found()
    reviews = applicant.reviews.order_by(Review.created_at.desc())
    return jsonify([r.to_dict() for r in reviews])


@bp.route('/applicant/<applicant_id>/summary', methods=['GET'])
@api_login_required
def review_summary(applicant_id):
    """Average of each score and a tally of recommendations."""
    applicant = get_accessible_applicant(applicant_id)
    if not applicant:
        return _not_found()

    reviews = applicant.reviews.all()
    averages = {}
    for field in Review.SCORE_FIELDS:
        values = [getattr(r, field) for r in reviews if getattr(r, field) is not None]
        averages[field] = round(sum(values) / len(values), 2) if values else None

    recommendations = {rec: 0 for rec in RECOMMENDATIONS}
    for r in reviews:
        if r.recommendation:
            recommendations[r.recommendation] += 1

    return jsonify({
        'count': len(reviews),
        'averages': averages,
        'recommendations': recommendations,
    })


@bp.route('/applicant/<applicant_id>/mine', methods=['GET'])
@api_login_required
def my_review(applicant_id):
    applicant = get_accessible_applicant(applicant_id)
    if not applicant:
        return _not_found()
    review = Review.query.filter_by(applicant_id=applicant.id, reviewer_id=current_user.id).first()
    return jsonify(review.to_dict() if review else None)


@bp.route('/applicant/<applicant_id>', methods=['POST'])
@api_login_required
@validate_body(ReviewSchema)
def upsert_review(applicant_id):
    """Create or replace the current user's review of the applicant."""
    applicant = get_accessible_applicant(applicant_id)
    if not applicant:
        return _not_found()

    data = g.data
    review = Review.query.filter_by(applicant_id=applicant.id, reviewer_id=current_user.id).first()
    created = review is None
    if created:
        review = Review(applicant_id=applicant.id, reviewer_id=current_user.id)
        db.session.add(review)

    for field in Review.SCORE_FIELDS:
        setattr(review, field, getattr(data, field))
    review.recommendation = data.recommendation
    review.comments = data.comments or None
    db.session.commit()

    log_activity('review_submitted' if created else 'review_updated',
                 applicant_id=applicant.id, user_id=current_user.id,
                 details={'rating': review.rating, 'recommendation': review.recommendation})
    return jsonify(review.to_dict()), 201 if created else 200


@bp.route('/<review_id>', methods=['DELETE'])
@api_login_required
def delete_review(review_id):
    review = db.session.get(Review, review_id)
    if not review or not get_accessible_applicant(review.applicant_id):
        return jsonify({'error': 'Review not found'}), 404
    if review.reviewer_id != current_user.id and not current_user.is_admin:
        return jsonify({'error': 'Access denied'}), 403

    applicant_id = review.applicant_id
    db.session.delete(review)
    db.session.commit()
    log_activity('review_deleted', applicant_id=applicant_id, user_id=current_user.id)
    return jsonify({'success': True})
