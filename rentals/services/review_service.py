"""
Review Service
"""

from flask import current_app

from extensions import db
from rentals.errors import ConflictError, ValidationError
from rentals.models.property import Property
from rentals.models.review import Review
from rentals.models.user import User
from rentals.services.base import commit_or_rollback, get_or_404


class ReviewService:
    """Service for property reviews; one review per user per property"""

    @staticmethod
    def create_review(user_id, property_id, rating, comment):
        author = get_or_404(User, user_id, 'User')
        listing = get_or_404(Property, property_id, 'Property')

        try:
            rating = int(rating)
        except (TypeError, ValueError):
            raise ValidationError('rating must be an integer')
        if not 1 <= rating <= 5:
            raise ValidationError('rating must be between 1 and 5')
        if not comment or len(comment.strip()) < 10:
            raise ValidationError('comment must be at least 10 characters')

        existing_review = Review.query.filter_by(user_id=author.id, property_id=listing.id).first()
        if existing_review:
            raise ConflictError('You have already reviewed this property')

        review = Review(
            property_id=listing.id,
            user_id=author.id,
            rating=rating,
            comment=comment.strip(),
        )
        db.session.add(review)
        commit_or_rollback()

        current_app.logger.info(f'Review {review.id} ({rating}/5) on property {listing.id}')
        return review

    @staticmethod
    def reviews_for_property(property_id):
        return (Review.query
                .filter_by(property_id=property_id)
                .order_by(Review.created_at.desc())
                .all())
