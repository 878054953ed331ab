"""
Users Blueprint
"""

from rentals.api.users.routes import users_bp

__all__ = ['users_bp']
