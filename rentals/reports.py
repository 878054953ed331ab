"""
Reporting queries: joins, subqueries, aggregates and window rankings
"""

from sqlalchemy import func, select
from sqlalchemy.orm import aliased

from extensions import db
from rentals.models import Booking, Property, Review, User


def _rows(stmt):
    return [dict(row) for row in db.session.execute(stmt).mappings()]


def bookings_with_guests():
    """Every booking with the user who made it, newest first"""
    stmt = (
        select(
            Booking.id.label('booking_id'),
            Booking.property_id,
            Booking.start_date,
            Booking.end_date,
            Booking.status,
            Booking.created_at.label('booking_created_at'),
            User.id.label('user_id'),
            User.first_name,
            User.last_name,
            User.email,
            User.phone_number,
        )
        .join(User, Booking.user_id == User.id)
        .order_by(Booking.created_at.desc())
    )
    rows = _rows(stmt)
    for row in rows:
        row['status'] = row['status'].value
        row['nights_booked'] = (row['end_date'] - row['start_date']).days
    return rows


def properties_with_reviews():
    """Every property with its reviews; unreviewed properties get one row of NULLs"""
    reviewer = aliased(User)
    stmt = (
        select(
            Property.id.label('property_id'),
            Property.name.label('property_name'),
            Property.price_per_night,
            Review.id.label('review_id'),
            Review.rating,
            Review.comment,
            Review.created_at.label('review_created_at'),
            reviewer.first_name.label('reviewer_first_name'),
            reviewer.last_name.label('reviewer_last_name'),
        )
        .outerjoin(Review, Review.property_id == Property.id)
        .outerjoin(reviewer, Review.user_id == reviewer.id)
        .order_by(Property.name, Review.created_at.desc())
    )
    return _rows(stmt)


def users_and_bookings():
    """Users with or without bookings, plus bookings whose user no longer exists"""
    with_users = (
        select(
            User.id.label('user_id'),
            User.email,
            Booking.id.label('booking_id'),
            Booking.property_id,
            Booking.start_date,
            Booking.end_date,
        )
        .outerjoin(Booking, Booking.user_id == User.id)
        .order_by(User.email, Booking.start_date)
    )
    orphaned = (
        select(
            Booking.user_id,
            Booking.id.label('booking_id'),
            Booking.property_id,
            Booking.start_date,
            Booking.end_date,
        )
        .outerjoin(User, Booking.user_id == User.id)
        .where(User.id.is_(None))
    )

    rows = _rows(with_users)
    for row in db.session.execute(orphaned).mappings():
        entry = dict(row)
        entry['email'] = None
        rows.append(entry)
    return rows


def top_rated_properties(min_rating=4.0):
    """Properties whose average rating is above min_rating"""
    rated = (
        select(Review.property_id)
        .group_by(Review.property_id)
        .having(func.avg(Review.rating) > min_rating)
    )
    average = (
        select(func.avg(Review.rating))
        .where(Review.property_id == Property.id)
        .scalar_subquery()
    )
    stmt = (
        select(
            Property.id.label('property_id'),
            Property.name,
            Property.price_per_night,
            average.label('average_rating'),
        )
        .where(Property.id.in_(rated))
        .order_by(average.desc(), Property.name)
    )
    return _rows(stmt)


def frequent_guests(min_bookings=3):
    """Users with more than min_bookings bookings"""
    booking_count = (
        select(func.count(Booking.id))
        .where(Booking.user_id == User.id)
        .scalar_subquery()
    )
    stmt = (
        select(
            User.id.label('user_id'),
            User.first_name,
            User.last_name,
            User.email,
            booking_count.label('total_bookings'),
        )
        .where(booking_count > min_bookings)
        .order_by(booking_count.desc(), User.email)
    )
    return _rows(stmt)


def bookings_per_user():
    total = func.count(Booking.id)
    stmt = (
        select(
            User.id.label('user_id'),
            User.first_name,
            User.last_name,
            total.label('total_bookings'),
        )
        .outerjoin(Booking, Booking.user_id == User.id)
        .group_by(User.id)
        .order_by(total.desc(), User.email)
    )
    return _rows(stmt)


def property_booking_rankings():
    """Properties ranked by number of bookings; ties share a RANK but not a ROW_NUMBER"""
    total = func.count(Booking.id)
    stmt = (
        select(
            Property.id.label('property_id'),
            Property.name,
            total.label('total_bookings'),
            func.rank().over(order_by=total.desc()).label('booking_rank'),
            func.row_number().over(order_by=(total.desc(), Property.name)).label('row_number'),
        )
        .outerjoin(Booking, Booking.property_id == Property.id)
        .group_by(Property.id)
        .order_by(total.desc(), Property.name)
    )
    return _rows(stmt)
