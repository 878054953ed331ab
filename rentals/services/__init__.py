"""
Services Package
Write paths that check business rules before touching the database
"""

from rentals.services.base import commit_or_rollback
from rentals.services.user_service import UserService
from rentals.services.property_service import PropertyService
from rentals.services.booking_service import BookingService
from rentals.services.payment_service import PaymentService
from rentals.services.review_service import ReviewService
from rentals.services.message_service import MessageService

__all__ = [
    'commit_or_rollback',
    'UserService',
    'PropertyService',
    'BookingService',
    'PaymentService',
    'ReviewService',
    'MessageService',
]
