"""
Models package initialization
Import all models here for easy access
"""

from rentals.models.user import User, UserRole
from rentals.models.location import Location
from rentals.models.property import Property
from rentals.models.booking import Booking, BookingStatus, ACTIVE_STATUSES
from rentals.models.payment import Payment, PaymentMethod, PaymentStatus
from rentals.models.review import Review
from rentals.models.message import Message, MessageType

# Registers the booking overlap and host promotion rules on the models above
from rentals import integrity  # noqa: E402,F401

__all__ = [
    'User',
    'UserRole',
    'Location',
    'Property',
    'Booking',
    'BookingStatus',
    'ACTIVE_STATUSES',
    'Payment',
    'PaymentMethod',
    'PaymentStatus',
    'Review',
    'Message',
    'MessageType',
]
