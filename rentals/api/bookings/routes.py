"""
Bookings Blueprint
"""

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required, get_jwt_identity
from extensions import db
from rentals.models.booking import Booking
from rentals.models.user import User, UserRole
from rentals.services.booking_service import BookingService
from rentals.views import booking_details

bookings_bp = Blueprint('bookings', __name__)


@bookings_bp.route('/', methods=['POST'])
@jwt_required()
def create_booking():
    """Create a new booking"""
    current_user_id = get_jwt_identity()
    data = request.get_json(silent=True) or {}

    # Validate required fields
    required_fields = ['property_id', 'start_date', 'end_date']
    for field in required_fields:
        if field not in data:
            return jsonify({'error': f'{field} is required'}), 400

    booking = BookingService.create_booking(
        user_id=current_user_id,
        property_id=data['property_id'],
        start_date=data['start_date'],
        end_date=data['end_date'],
    )

    return jsonify({
        'message': 'Booking created successfully',
        'booking': booking.to_dict(include_property=True)
    }), 201


@bookings_bp.route('/<string:booking_id>', methods=['GET'])
@jwt_required()
def get_booking(booking_id):
    """Get booking details with the derived total price"""
    current_user_id = get_jwt_identity()
    booking = db.session.get(Booking, booking_id)

    if not booking:
        return jsonify({'error': 'Booking not found'}), 404

    # Check authorization
    viewer = db.session.get(User, current_user_id)
    is_admin = viewer is not None and viewer.role == UserRole.ADMIN
    if current_user_id not in (booking.user_id, booking.property.host_id) and not is_admin:
        return jsonify({'error': 'Unauthorized'}), 403

    details = booking_details(booking.id)[0]
    data = booking.to_dict(include_property=True)
    data['price_per_night'] = float(details['price_per_night'])
    data['total_price'] = float(details['total_price'])

    return jsonify({'booking': data}), 200


@bookings_bp.route('/<string:booking_id>/confirm', methods=['POST'])
@jwt_required()
def confirm_booking(booking_id):
    """Host confirms a pending booking"""
    booking = BookingService.confirm_booking(booking_id, acting_user_id=get_jwt_identity())
    return jsonify({
        'message': 'Booking confirmed',
        'booking': booking.to_dict()
    }), 200


@bookings_bp.route('/<string:booking_id>/cancel', methods=['POST'])
@jwt_required()
def cancel_booking(booking_id):
    """Cancel a booking"""
    booking = BookingService.cancel_booking(booking_id, acting_user_id=get_jwt_identity())
    return jsonify({
        'message': 'Booking cancelled successfully',
        'booking': booking.to_dict()
    }), 200
