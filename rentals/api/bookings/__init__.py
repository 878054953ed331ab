"""
Bookings Blueprint
"""

from rentals.api.bookings.routes import bookings_bp

__all__ = ['bookings_bp']
