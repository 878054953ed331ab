"""
API Package
"""

# Import all blueprints for easy access
from rentals.api.auth import auth_bp
from rentals.api.users import users_bp
from rentals.api.properties import properties_bp
from rentals.api.bookings import bookings_bp
from rentals.api.reviews import reviews_bp
from rentals.api.payments import payments_bp
from rentals.api.messages import messages_bp

__all__ = [
    'auth_bp',
    'users_bp',
    'properties_bp',
    'bookings_bp',
    'reviews_bp',
    'payments_bp',
    'messages_bp',
]
