"""
Payment Model
"""

from extensions import db
from datetime import datetime
from enum import Enum
from sqlalchemy.orm import validates
from rentals.errors import ValidationError
from rentals.models.common import generate_uuid, enum_values


class PaymentMethod(str, Enum):
    """Payment method enum"""
    CREDIT_CARD = 'credit_card'
    PAYPAL = 'paypal'
    STRIPE = 'stripe'
    BANK_TRANSFER = 'bank_transfer'


class PaymentStatus(str, Enum):
    """Payment status enum"""
    PENDING = 'pending'
    COMPLETED = 'completed'
    FAILED = 'failed'
    REFUNDED = 'refunded'


class Payment(db.Model):
    """One payment per booking"""

    __tablename__ = 'payments'
    __table_args__ = (
        db.CheckConstraint('amount > 0', name='chk_payment_amount'),
        db.CheckConstraint(
            "payment_status = 'pending' OR transaction_id IS NOT NULL",
            name='chk_transaction_id'
        ),
    )

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    booking_id = db.Column(db.String(36), db.ForeignKey('bookings.id', ondelete='CASCADE', onupdate='CASCADE'),
                           nullable=False, unique=True, index=True)
    amount = db.Column(db.Numeric(10, 2), nullable=False)
    payment_date = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    payment_method = db.Column(
        db.Enum(PaymentMethod, name='payment_method', values_callable=enum_values,
                create_constraint=True, validate_strings=True),
        nullable=False, index=True
    )
    payment_status = db.Column(
        db.Enum(PaymentStatus, name='payment_status', values_callable=enum_values,
                create_constraint=True, validate_strings=True),
        default=PaymentStatus.PENDING, nullable=False, index=True
    )
    transaction_id = db.Column(db.String(255))

    # Timestamps
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    booking = db.relationship('Booking', back_populates='payment')

    def __init__(self, **kwargs):
        """Initialize payment"""
        self.payment_status = PaymentStatus.PENDING
        for key, value in kwargs.items():
            if hasattr(self, key):
                setattr(self, key, value)

    @validates('payment_method')
    def validate_payment_method(self, key, value):
        try:
            return PaymentMethod(value)
        except ValueError:
            raise ValidationError(f'Unknown payment method: {value!r}')

    @validates('payment_status')
    def validate_payment_status(self, key, value):
        try:
            return PaymentStatus(value)
        except ValueError:
            raise ValidationError(f'Unknown payment status: {value!r}')

    def complete(self, transaction_id):
        """Mark payment as settled by the processor"""
        self.transaction_id = transaction_id
        self.payment_status = PaymentStatus.COMPLETED
        self.payment_date = datetime.utcnow()

    def fail(self, transaction_id):
        self.transaction_id = transaction_id
        self.payment_status = PaymentStatus.FAILED

    def refund(self):
        if self.payment_status != PaymentStatus.COMPLETED:
            raise ValidationError('Only completed payments can be refunded')
        self.payment_status = PaymentStatus.REFUNDED

    def to_dict(self):
        return {
            'id': self.id,
            'booking_id': self.booking_id,
            'amount': float(self.amount),
            'payment_date': self.payment_date.isoformat() if self.payment_date else None,
            'payment_method': self.payment_method.value,
            'payment_status': self.payment_status.value,
            'transaction_id': self.transaction_id,
        }

    def __repr__(self):
        return f'<Payment {self.id} - Booking {self.booking_id}>'
