"""
Payments Routes
"""

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required, get_jwt_identity
from extensions import db
from rentals.models.booking import Booking
from rentals.models.payment import Payment
from rentals.services.payment_service import PaymentService

payments_bp = Blueprint('payments', __name__)


@payments_bp.route('/', methods=['POST'])
@jwt_required()
def record_payment():
    """Open a pending payment for one of the user's bookings"""
    current_user_id = get_jwt_identity()
    data = request.get_json(silent=True) or {}

    # Validate required fields
    required_fields = ['booking_id', 'payment_method']
    for field in required_fields:
        if field not in data:
            return jsonify({'error': f'{field} is required'}), 400

    booking = db.session.get(Booking, data['booking_id'])
    if not booking:
        return jsonify({'error': 'Booking not found'}), 404

    # Verify user owns this booking
    if booking.user_id != current_user_id:
        return jsonify({'error': 'Unauthorized'}), 403

    payment = PaymentService.record_payment(
        booking_id=booking.id,
        payment_method=data['payment_method'],
        amount=data.get('amount'),
    )

    return jsonify({
        'message': 'Payment recorded',
        'payment': payment.to_dict()
    }), 201


@payments_bp.route('/<string:payment_id>/complete', methods=['POST'])
@jwt_required()
def complete_payment(payment_id):
    """Settle a payment with the processor's transaction id"""
    current_user_id = get_jwt_identity()
    data = request.get_json(silent=True) or {}

    payment = db.session.get(Payment, payment_id)
    if not payment:
        return jsonify({'error': 'Payment not found'}), 404

    if payment.booking.user_id != current_user_id:
        return jsonify({'error': 'Unauthorized'}), 403

    payment = PaymentService.complete_payment(payment.id, data.get('transaction_id'))

    return jsonify({
        'message': 'Payment successful',
        'payment': payment.to_dict(),
        'booking': payment.booking.to_dict()
    }), 200


@payments_bp.route('/<string:payment_id>', methods=['GET'])
@jwt_required()
def get_payment(payment_id):
    """Get payment details"""
    current_user_id = get_jwt_identity()
    payment = db.session.get(Payment, payment_id)
    if not payment:
        return jsonify({'error': 'Payment not found'}), 404

    if current_user_id not in (payment.booking.user_id, payment.booking.property.host_id):
        return jsonify({'error': 'Unauthorized'}), 403

    return jsonify({'payment': payment.to_dict()}), 200
