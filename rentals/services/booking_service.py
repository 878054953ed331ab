"""
Booking Service
Reservation lifecycle: request, confirm, cancel
"""

from datetime import date, datetime

from flask import current_app

from extensions import db
from rentals.errors import BookingOverlapError, PermissionDeniedError, ValidationError
from rentals.integrity import check_stay_dates
from rentals.models.booking import Booking, BookingStatus
from rentals.models.property import Property
from rentals.models.user import User, UserRole
from rentals.services.base import commit_or_rollback, get_or_404


def parse_date(value, field):
    """Accept a date or an ISO YYYY-MM-DD string"""
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(value, '%Y-%m-%d').date()
    except (TypeError, ValueError):
        raise ValidationError(f'{field} must be a date in YYYY-MM-DD format')


class BookingService:
    """Service for booking a property's calendar"""

    @staticmethod
    def create_booking(user_id, property_id, start_date, end_date, today=None):
        """
        Request a stay; the booking starts out pending

        Args:
            user_id: Guest making the booking
            property_id: Property being booked
            start_date: Check-in date (first night)
            end_date: Check-out date (not a night of the stay)
            today: Reference date for the no-past-bookings rule

        Returns:
            The new Booking

        Raises:
            ValidationError: bad or past dates, stay too long
            NotFoundError: unknown guest or property
            BookingOverlapError: the property is taken for some of those nights
        """
        start_date = parse_date(start_date, 'start_date')
        end_date = parse_date(end_date, 'end_date')
        check_stay_dates(start_date, end_date)

        today = today or date.today()
        if start_date < today:
            raise ValidationError('start_date cannot be in the past')

        max_nights = current_app.config.get('MAX_BOOKING_NIGHTS', 365)
        if (end_date - start_date).days > max_nights:
            raise ValidationError(f'A stay cannot exceed {max_nights} nights')

        guest = get_or_404(User, user_id, 'User')
        listing = get_or_404(Property, property_id, 'Property')

        if not listing.is_available(start_date, end_date):
            current_app.logger.warning(
                f'Property {listing.id} not available for {start_date}..{end_date}'
            )
            raise BookingOverlapError()

        booking = Booking(
            property_id=listing.id,
            user_id=guest.id,
            start_date=start_date,
            end_date=end_date,
        )
        db.session.add(booking)
        commit_or_rollback()

        current_app.logger.info(f'Booking {booking.id} created for property {listing.id}')
        return booking

    @staticmethod
    def confirm_booking(booking_id, acting_user_id=None):
        """Host (or admin) accepts a pending booking"""
        booking = get_or_404(Booking, booking_id, 'Booking')
        if acting_user_id is not None:
            actor = get_or_404(User, acting_user_id, 'User')
            if actor.id != booking.property.host_id and actor.role != UserRole.ADMIN:
                raise PermissionDeniedError('Only the host can confirm this booking')

        if booking.status != BookingStatus.PENDING:
            raise ValidationError(f'Cannot confirm a {booking.status.value} booking')

        booking.confirm()
        commit_or_rollback()
        current_app.logger.info(f'Booking {booking.id} confirmed')
        return booking

    @staticmethod
    def cancel_booking(booking_id, acting_user_id=None):
        """Guest, host or admin releases the nights held by a booking"""
        booking = get_or_404(Booking, booking_id, 'Booking')
        if acting_user_id is not None:
            actor = get_or_404(User, acting_user_id, 'User')
            allowed = (booking.user_id, booking.property.host_id)
            if actor.id not in allowed and actor.role != UserRole.ADMIN:
                raise PermissionDeniedError('Not allowed to cancel this booking')

        if not booking.can_cancel():
            raise ValidationError('Booking cannot be cancelled')

        booking.cancel()
        commit_or_rollback()
        current_app.logger.info(f'Booking {booking.id} cancelled')
        return booking

    @staticmethod
    def bookings_for_user(user_id):
        return (Booking.query
                .filter_by(user_id=user_id)
                .order_by(Booking.start_date)
                .all())
