"""
Payment Service
Records payments against bookings; settlement confirms the booking
"""

from decimal import Decimal, InvalidOperation

from flask import current_app

from extensions import db
from rentals.errors import ConflictError, ValidationError
from rentals.models.booking import Booking, BookingStatus
from rentals.models.payment import Payment, PaymentStatus
from rentals.services.base import commit_or_rollback, get_or_404


class PaymentService:
    """Service for booking payments"""

    @staticmethod
    def record_payment(booking_id, payment_method, amount=None):
        """
        Open a pending payment for a booking

        Args:
            booking_id: Booking being paid for
            payment_method: credit_card, paypal, stripe or bank_transfer
            amount: Defaults to nights x price per night
        """
        booking = get_or_404(Booking, booking_id, 'Booking')
        if booking.status == BookingStatus.CANCELED:
            raise ValidationError('Cannot pay for a canceled booking')
        if booking.payment is not None:
            raise ConflictError('Booking already has a payment')

        if amount is None:
            amount = Decimal(booking.property.price_per_night) * booking.nights
        try:
            amount = Decimal(str(amount))
        except (InvalidOperation, TypeError):
            raise ValidationError('amount must be a number')
        if not amount.is_finite() or amount <= 0:
            raise ValidationError('amount must be a positive amount')

        payment = Payment(
            booking_id=booking.id,
            amount=amount,
            payment_method=payment_method,
        )
        db.session.add(payment)
        commit_or_rollback()

        current_app.logger.info(f'Payment {payment.id} recorded for booking {booking.id}')
        return payment

    @staticmethod
    def complete_payment(payment_id, transaction_id):
        """Settle a payment and confirm its booking"""
        if not transaction_id:
            raise ValidationError('transaction_id is required')

        payment = get_or_404(Payment, payment_id, 'Payment')
        if payment.payment_status != PaymentStatus.PENDING:
            raise ValidationError(f'Payment is already {payment.payment_status.value}')

        payment.complete(transaction_id)
        if payment.booking.status == BookingStatus.PENDING:
            payment.booking.confirm()
        commit_or_rollback()

        current_app.logger.info(f'Payment {payment.id} completed ({transaction_id})')
        return payment

    @staticmethod
    def fail_payment(payment_id, transaction_id):
        """Record a declined charge; only pending payments can fail"""
        if not transaction_id:
            raise ValidationError('transaction_id is required')

        payment = get_or_404(Payment, payment_id, 'Payment')
        if payment.payment_status != PaymentStatus.PENDING:
            raise ValidationError(f'Payment is already {payment.payment_status.value}')

        payment.fail(transaction_id)
        commit_or_rollback()
        current_app.logger.warning(f'Payment {payment.id} failed ({transaction_id})')
        return payment
