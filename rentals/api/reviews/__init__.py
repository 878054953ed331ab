"""
Reviews Blueprint
"""

from rentals.api.reviews.routes import reviews_bp

__all__ = ['reviews_bp']
