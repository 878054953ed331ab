"""
Messages Blueprint
"""

from rentals.api.messages.routes import messages_bp

__all__ = ['messages_bp']
