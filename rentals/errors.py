"""
Domain errors raised by models and services
"""


class DomainError(Exception):
    """Base class for rule violations reported back to the caller"""

    status_code = 400
    error = 'Bad Request'

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {'error': self.error, 'message': self.message}


class ValidationError(DomainError):
    status_code = 400
    error = 'Validation Error'


class NotFoundError(DomainError):
    status_code = 404
    error = 'Not Found'


class PermissionDeniedError(DomainError):
    status_code = 403
    error = 'Forbidden'


class ConflictError(DomainError):
    status_code = 409
    error = 'Conflict'


class BookingOverlapError(ConflictError):
    """Raised when an active booking would share a night with another one"""

    def __init__(self, message='Booking dates overlap with existing booking'):
        super().__init__(message)
