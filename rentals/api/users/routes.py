"""
Users Blueprint
"""

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required, get_jwt_identity
from extensions import db
from rentals.models.user import User
from rentals.services.base import commit_or_rollback
from rentals.services.booking_service import BookingService
from rentals.views import user_stats

users_bp = Blueprint('users', __name__)


@users_bp.route('/<string:user_id>', methods=['GET'])
def get_user(user_id):
    """Get user profile"""
    user = db.session.get(User, user_id)

    if not user:
        return jsonify({'error': 'User not found'}), 404

    return jsonify({
        'user': user.to_dict()
    }), 200


@users_bp.route('/<string:user_id>/stats', methods=['GET'])
def get_user_stats(user_id):
    """Listings, bookings and reviews counts for a user"""
    stats = user_stats(user_id)
    if not stats:
        return jsonify({'error': 'User not found'}), 404

    entry = stats[0]
    return jsonify({
        'stats': {
            'user_id': entry['user_id'],
            'role': entry['role'],
            'properties_owned': entry['properties_owned'],
            'total_bookings': entry['total_bookings'],
            'reviews_written': entry['reviews_written'],
        }
    }), 200


@users_bp.route('/me', methods=['PUT'])
@jwt_required()
def update_profile():
    """Update current user profile"""
    current_user_id = get_jwt_identity()
    user = db.session.get(User, current_user_id)

    if not user:
        return jsonify({'error': 'User not found'}), 404

    data = request.get_json(silent=True) or {}

    # Update allowed fields only
    allowed_fields = ['first_name', 'last_name', 'phone_number']
    for field in allowed_fields:
        if field in data:
            setattr(user, field, data[field] if data[field] else None)

    commit_or_rollback()

    return jsonify({
        'message': 'Profile updated successfully',
        'user': user.to_dict(include_email=True)
    }), 200


@users_bp.route('/me/bookings', methods=['GET'])
@jwt_required()
def get_my_bookings():
    """Get current user's bookings"""
    bookings = BookingService.bookings_for_user(get_jwt_identity())
    return jsonify({
        'bookings': [booking.to_dict(include_property=True) for booking in bookings]
    }), 200
