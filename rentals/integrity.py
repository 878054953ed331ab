"""
Row-level integrity rules

The booking calendar rule and the guest-to-host promotion are enforced twice:
by mapper/session events for everything written through the ORM, and by
database triggers (SQLite, PostgreSQL and MySQL) for rows written behind its back.
On PostgreSQL an exclusion constraint also covers concurrent transactions,
which a trigger's EXISTS check cannot see.
"""

from flask import current_app, has_app_context
from sqlalchemy import DDL, event, func, inspect, select
from sqlalchemy.orm import Session

from rentals.errors import BookingOverlapError, ValidationError
from rentals.models.booking import ACTIVE_STATUSES, MAX_STAY_NIGHTS, Booking
from rentals.models.property import Property
from rentals.models.user import User, UserRole


OVERLAP_MESSAGE = 'Booking dates overlap with existing booking'

# Columns whose change can move a booking onto someone else's nights
CALENDAR_COLUMNS = ('start_date', 'end_date', 'status', 'property_id')


def _log(level, message, *args):
    if has_app_context():
        getattr(current_app.logger, level)(message, *args)


def check_stay_dates(start_date, end_date):
    if start_date is None or end_date is None:
        raise ValidationError('start_date and end_date are required')
    if end_date <= start_date:
        raise ValidationError('end_date must be after start_date')
    if (end_date - start_date).days > MAX_STAY_NIGHTS:
        raise ValidationError(f'A stay cannot exceed {MAX_STAY_NIGHTS} nights')


def count_overlapping_bookings(connection, property_id, start_date, end_date, exclude_id=None):
    """Active bookings on the property sharing at least one night with the stay"""
    stmt = select(func.count(Booking.id)).where(
        Booking.property_id == property_id,
        Booking.status.in_(ACTIVE_STATUSES),
        Booking.start_date < end_date,
        Booking.end_date > start_date,
    )
    if exclude_id is not None:
        stmt = stmt.where(Booking.id != exclude_id)
    return connection.execute(stmt).scalar_one()


def _assert_no_overlap(connection, target, exclude_id=None):
    check_stay_dates(target.start_date, target.end_date)
    if target.status not in ACTIVE_STATUSES:
        return

    overlap_count = count_overlapping_bookings(
        connection, target.property_id, target.start_date, target.end_date, exclude_id=exclude_id
    )
    if overlap_count > 0:
        _log('warning', 'Rejected booking on property %s for %s..%s: overlaps %d booking(s)',
             target.property_id, target.start_date, target.end_date, overlap_count)
        raise BookingOverlapError(OVERLAP_MESSAGE)


@event.listens_for(Booking, 'before_insert')
def prevent_booking_overlap_on_insert(mapper, connection, target):
    _assert_no_overlap(connection, target)


@event.listens_for(Booking, 'before_update')
def prevent_booking_overlap_on_update(mapper, connection, target):
    state = inspect(target)
    if not any(state.attrs[name].history.has_changes() for name in CALENDAR_COLUMNS):
        return
    _assert_no_overlap(connection, target, exclude_id=target.id)


def _calendar_key(booking):
    if booking.property_id is not None:
        return booking.property_id
    listing = booking.property
    if listing is None:
        return None
    return listing.id or listing


@event.listens_for(Session, 'before_flush')
def prevent_overlap_within_flush(session, flush_context, instances):
    """Bookings written by the same flush cannot see each other's rows yet"""
    pending = [
        obj for obj in list(session.new) + list(session.dirty)
        if isinstance(obj, Booking) and obj not in session.deleted
    ]
    if len(pending) < 2:
        return

    calendars = {}
    with session.no_autoflush:
        for booking in pending:
            if booking.status not in ACTIVE_STATUSES:
                continue
            if booking.start_date is None or booking.end_date is None:
                continue
            key = _calendar_key(booking)
            if key is None:
                continue

            for other in calendars.get(key, []):
                if other.overlaps(booking.start_date, booking.end_date):
                    _log('warning', 'Rejected booking for %s..%s: overlaps another booking in the same flush',
                         booking.start_date, booking.end_date)
                    raise BookingOverlapError(OVERLAP_MESSAGE)
            calendars.setdefault(key, []).append(booking)


@event.listens_for(Session, 'before_flush')
def promote_new_hosts(session, flush_context, instances):
    """A guest who lists a property becomes a host"""
    new_properties = [obj for obj in session.new if isinstance(obj, Property)]
    if not new_properties:
        return

    with session.no_autoflush:
        for listing in new_properties:
            host = listing.host
            if host is None and listing.host_id is not None:
                host = session.get(User, listing.host_id)
            if host is not None and host.role == UserRole.GUEST:
                host.role = UserRole.HOST
                _log('info', 'Promoted user %s to host after listing %r', host.id, listing.name)


# Database-side equivalents, installed when the tables are created

SQLITE_OVERLAP_CONDITION = """
    NEW.status IN ('pending', 'confirmed')
    AND EXISTS (
        SELECT 1 FROM bookings
        WHERE property_id = NEW.property_id
          AND id <> NEW.id
          AND status IN ('pending', 'confirmed')
          AND start_date < NEW.end_date
          AND end_date > NEW.start_date
    )
"""

SQLITE_TRIGGERS = [
    f"""
    CREATE TRIGGER IF NOT EXISTS tr_prevent_booking_overlap
    BEFORE INSERT ON bookings
    FOR EACH ROW WHEN {SQLITE_OVERLAP_CONDITION}
    BEGIN
        SELECT RAISE(ABORT, '{OVERLAP_MESSAGE}');
    END
    """,
    f"""
    CREATE TRIGGER IF NOT EXISTS tr_prevent_booking_overlap_update
    BEFORE UPDATE OF start_date, end_date, status, property_id ON bookings
    FOR EACH ROW WHEN {SQLITE_OVERLAP_CONDITION}
    BEGIN
        SELECT RAISE(ABORT, '{OVERLAP_MESSAGE}');
    END
    """,
]

SQLITE_HOST_TRIGGER = """
    CREATE TRIGGER IF NOT EXISTS tr_update_user_to_host
    AFTER INSERT ON properties
    FOR EACH ROW
    BEGIN
        UPDATE users SET role = 'host' WHERE id = NEW.host_id AND role = 'guest';
    END
"""

POSTGRES_OVERLAP_FUNCTION = f"""
    CREATE OR REPLACE FUNCTION prevent_booking_overlap() RETURNS trigger AS $$
    BEGIN
        IF NEW.status IN ('pending', 'confirmed') AND EXISTS (
            SELECT 1 FROM bookings
            WHERE property_id = NEW.property_id
              AND id <> NEW.id
              AND status IN ('pending', 'confirmed')
              AND start_date < NEW.end_date
              AND end_date > NEW.start_date
        ) THEN
            RAISE EXCEPTION '{OVERLAP_MESSAGE}' USING ERRCODE = 'exclusion_violation';
        END IF;
        RETURN NEW;
    END;
    $$ LANGUAGE plpgsql
"""

POSTGRES_OVERLAP_TRIGGER = """
    CREATE TRIGGER tr_prevent_booking_overlap
    BEFORE INSERT OR UPDATE OF start_date, end_date, status, property_id ON bookings
    FOR EACH ROW EXECUTE FUNCTION prevent_booking_overlap()
"""

POSTGRES_BTREE_GIST = 'CREATE EXTENSION IF NOT EXISTS btree_gist'

# Trigger keeps the readable message; the constraint holds across concurrent inserts
POSTGRES_OVERLAP_EXCLUSION = """
    ALTER TABLE bookings ADD CONSTRAINT ex_booking_no_overlap
    EXCLUDE USING gist (
        property_id WITH =,
        daterange(start_date, end_date, '[)') WITH &&
    ) WHERE (status IN ('pending', 'confirmed'))
"""

POSTGRES_HOST_FUNCTION = """
    CREATE OR REPLACE FUNCTION update_user_to_host() RETURNS trigger AS $$
    BEGIN
        UPDATE users SET role = 'host' WHERE id = NEW.host_id AND role = 'guest';
        RETURN NEW;
    END;
    $$ LANGUAGE plpgsql
"""

POSTGRES_HOST_TRIGGER = """
    CREATE TRIGGER tr_update_user_to_host
    AFTER INSERT ON properties
    FOR EACH ROW EXECUTE FUNCTION update_user_to_host()
"""

MYSQL_OVERLAP_BODY = f"""
    FOR EACH ROW
    BEGIN
        IF NEW.status IN ('pending', 'confirmed') AND EXISTS (
            SELECT 1 FROM bookings
            WHERE property_id = NEW.property_id
              AND id <> NEW.id
              AND status IN ('pending', 'confirmed')
              AND start_date < NEW.end_date
              AND end_date > NEW.start_date
        ) THEN
            SIGNAL SQLSTATE '45000' SET MESSAGE_TEXT = '{OVERLAP_MESSAGE}';
        END IF;
    END
"""

MYSQL_TRIGGERS = [
    'CREATE TRIGGER tr_prevent_booking_overlap BEFORE INSERT ON bookings' + MYSQL_OVERLAP_BODY,
    'CREATE TRIGGER tr_prevent_booking_overlap_update BEFORE UPDATE ON bookings' + MYSQL_OVERLAP_BODY,
]

MYSQL_HOST_TRIGGER = """
    CREATE TRIGGER tr_update_user_to_host
    AFTER INSERT ON properties
    FOR EACH ROW
    UPDATE users SET role = 'host' WHERE id = NEW.host_id AND role = 'guest'
"""

for statement in SQLITE_TRIGGERS:
    event.listen(Booking.__table__, 'after_create', DDL(statement).execute_if(dialect='sqlite'))
event.listen(Booking.__table__, 'after_create', DDL(POSTGRES_OVERLAP_FUNCTION).execute_if(dialect='postgresql'))
event.listen(Booking.__table__, 'after_create', DDL(POSTGRES_OVERLAP_TRIGGER).execute_if(dialect='postgresql'))
event.listen(Booking.__table__, 'after_create', DDL(POSTGRES_BTREE_GIST).execute_if(dialect='postgresql'))
event.listen(Booking.__table__, 'after_create', DDL(POSTGRES_OVERLAP_EXCLUSION).execute_if(dialect='postgresql'))
for statement in MYSQL_TRIGGERS:
    event.listen(Booking.__table__, 'after_create', DDL(statement).execute_if(dialect='mysql'))

event.listen(Property.__table__, 'after_create', DDL(SQLITE_HOST_TRIGGER).execute_if(dialect='sqlite'))
event.listen(Property.__table__, 'after_create', DDL(POSTGRES_HOST_FUNCTION).execute_if(dialect='postgresql'))
event.listen(Property.__table__, 'after_create', DDL(POSTGRES_HOST_TRIGGER).execute_if(dialect='postgresql'))
event.listen(Property.__table__, 'after_create', DDL(MYSQL_HOST_TRIGGER).execute_if(dialect='mysql'))
