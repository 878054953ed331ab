"""
Read views over the normalized tables

BookingDetails derives what the booking table deliberately does not store
(nights and total price); PropertyWithLocation flattens a listing and its
address; UserStats summarizes each user's activity.
"""

from decimal import Decimal

from sqlalchemy import case, distinct, func, select

from extensions import db
from rentals.models import Booking, Location, Property, Review, User, UserRole


def booking_details(booking_id=None):
    stmt = (
        select(
            Booking.id.label('booking_id'),
            Booking.property_id,
            Booking.user_id,
            Booking.start_date,
            Booking.end_date,
            Booking.status,
            Booking.created_at,
            Property.price_per_night,
        )
        .join(Property, Booking.property_id == Property.id)
        .order_by(Booking.start_date)
    )
    if booking_id is not None:
        stmt = stmt.where(Booking.id == booking_id)

    details = []
    for row in db.session.execute(stmt).mappings():
        nights = (row['end_date'] - row['start_date']).days
        price = Decimal(row['price_per_night'])
        details.append({
            'booking_id': row['booking_id'],
            'property_id': row['property_id'],
            'user_id': row['user_id'],
            'start_date': row['start_date'],
            'end_date': row['end_date'],
            'status': row['status'].value,
            'created_at': row['created_at'],
            'nights': nights,
            'price_per_night': price,
            'total_price': price * nights,
        })
    return details


def property_with_location(property_id=None):
    stmt = (
        select(
            Property.id.label('property_id'),
            Property.host_id,
            Property.name,
            Property.description,
            Property.price_per_night,
            Location.country,
            Location.state_province,
            Location.city,
            Location.address,
            Location.postal_code,
            Location.latitude,
            Location.longitude,
            Property.created_at,
            Property.updated_at,
        )
        .join(Location, Property.location_id == Location.id)
        .order_by(Property.name)
    )
    if property_id is not None:
        stmt = stmt.where(Property.id == property_id)
    return [dict(row) for row in db.session.execute(stmt).mappings()]


def user_stats(user_id=None):
    # Listings only count for users allowed to host
    owned = case((User.role.in_([UserRole.HOST, UserRole.ADMIN]), Property.id))
    stmt = (
        select(
            User.id.label('user_id'),
            User.first_name,
            User.last_name,
            User.email,
            User.role,
            func.count(distinct(owned)).label('properties_owned'),
            func.count(distinct(Booking.id)).label('total_bookings'),
            func.count(distinct(Review.id)).label('reviews_written'),
            User.created_at,
        )
        .outerjoin(Property, Property.host_id == User.id)
        .outerjoin(Booking, Booking.user_id == User.id)
        .outerjoin(Review, Review.user_id == User.id)
        .group_by(User.id)
        .order_by(User.created_at)
    )
    if user_id is not None:
        stmt = stmt.where(User.id == user_id)

    stats = []
    for row in db.session.execute(stmt).mappings():
        entry = dict(row)
        entry['role'] = row['role'].value
        stats.append(entry)
    return stats
