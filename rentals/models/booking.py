"""
Booking Model
"""

from extensions import db
from datetime import datetime
from enum import Enum
from sqlalchemy.orm import validates
from rentals.errors import ValidationError
from rentals.models.common import generate_uuid, enum_values


MAX_STAY_NIGHTS = 365


class BookingStatus(str, Enum):
    """Booking status enum"""
    PENDING = 'pending'
    CONFIRMED = 'confirmed'
    CANCELED = 'canceled'


# Statuses that hold the property's calendar
ACTIVE_STATUSES = (BookingStatus.PENDING, BookingStatus.CONFIRMED)


class Booking(db.Model):
    """Booking/Reservation model over the half-open stay [start_date, end_date)"""

    __tablename__ = 'bookings'
    __table_args__ = (
        db.CheckConstraint('end_date > start_date', name='chk_date_range'),
        db.Index('idx_booking_dates', 'start_date', 'end_date'),
    )

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    property_id = db.Column(db.String(36), db.ForeignKey('properties.id', ondelete='CASCADE', onupdate='CASCADE'),
                            nullable=False, index=True)
    user_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='CASCADE', onupdate='CASCADE'),
                        nullable=False, index=True)

    # Stay
    start_date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date, nullable=False)

    # Status
    status = db.Column(
        db.Enum(BookingStatus, name='booking_status', values_callable=enum_values,
                create_constraint=True, validate_strings=True),
        default=BookingStatus.PENDING, nullable=False, index=True
    )

    # Timestamps
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    guest = db.relationship('User', back_populates='bookings')
    payment = db.relationship('Payment', back_populates='booking', uselist=False,
                              cascade='all, delete-orphan', passive_deletes=True)

    def __init__(self, **kwargs):
        """Initialize booking"""
        self.status = BookingStatus.PENDING
        for key, value in kwargs.items():
            if hasattr(self, key):
                setattr(self, key, value)

    @validates('status')
    def validate_status(self, key, value):
        try:
            return BookingStatus(value)
        except ValueError:
            raise ValidationError(f"Unknown booking status: {value!r}")

    @property
    def nights(self):
        return (self.end_date - self.start_date).days

    @property
    def is_active(self):
        return self.status in ACTIVE_STATUSES

    def overlaps(self, start_date, end_date):
        """Two half-open stays overlap when each starts before the other ends"""
        return self.start_date < end_date and start_date < self.end_date

    def confirm(self):
        """Confirm booking"""
        self.status = BookingStatus.CONFIRMED

    def cancel(self):
        """Cancel booking"""
        self.status = BookingStatus.CANCELED

    def can_cancel(self):
        """Check if booking can be cancelled"""
        return self.status in ACTIVE_STATUSES

    def to_dict(self, include_property=False, include_guest=False):
        """Convert booking to dictionary"""
        data = {
            'id': self.id,
            'property_id': self.property_id,
            'user_id': self.user_id,
            'start_date': self.start_date.isoformat() if self.start_date else None,
            'end_date': self.end_date.isoformat() if self.end_date else None,
            'nights': self.nights,
            'status': self.status.value,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

        if include_property:
            data['property'] = self.property.to_dict()

        if include_guest:
            data['guest'] = self.guest.to_dict()

        return data

    def __repr__(self):
        return f'<Booking {self.id} - Property {self.property_id}>'
