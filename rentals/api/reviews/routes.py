"""
Reviews Blueprint
"""

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required, get_jwt_identity
from extensions import db
from rentals.models.property import Property
from rentals.services.review_service import ReviewService

reviews_bp = Blueprint('reviews', __name__)


@reviews_bp.route('/', methods=['POST'])
@jwt_required()
def create_review():
    """Create a review for a property"""
    current_user_id = get_jwt_identity()
    data = request.get_json(silent=True) or {}

    # Validate required fields
    required_fields = ['property_id', 'rating', 'comment']
    for field in required_fields:
        if field not in data:
            return jsonify({'error': f'{field} is required'}), 400

    review = ReviewService.create_review(
        user_id=current_user_id,
        property_id=data['property_id'],
        rating=data['rating'],
        comment=data['comment'],
    )

    return jsonify({
        'message': 'Review created successfully',
        'review': review.to_dict(include_user=True)
    }), 201


@reviews_bp.route('/property/<string:property_id>', methods=['GET'])
def get_property_reviews(property_id):
    """Get all reviews for a property"""
    listing = db.session.get(Property, property_id)
    if not listing:
        return jsonify({'error': 'Property not found'}), 404

    reviews = ReviewService.reviews_for_property(listing.id)

    return jsonify({
        'reviews': [review.to_dict(include_user=True) for review in reviews],
        'total': len(reviews),
        'average_rating': listing.average_rating
    }), 200
