from decimal import Decimal

import pytest

from extensions import db
from rentals.errors import (
    BookingOverlapError, ConflictError, NotFoundError, PermissionDeniedError, ValidationError
)
from rentals.models import BookingStatus, Location, PaymentStatus, Property, User, UserRole
from rentals.services import (
    BookingService, MessageService, PaymentService, PropertyService, ReviewService, UserService
)
from rentals.services.booking_service import parse_date
from tests.conftest import days_from_now


# ---------- USERS ----------

def test_register_and_authenticate(app):
    user = UserService.register('Sarah.Jones@Example.com', 'hunter2-pass', 'Sarah', 'Jones')
    assert user.role == UserRole.GUEST
    assert UserService.authenticate('sarah.jones@example.com', 'hunter2-pass') == user
    assert UserService.authenticate('sarah.jones@example.com', 'wrong') is None
    assert UserService.authenticate('nobody@example.com', 'hunter2-pass') is None


def test_register_duplicate_email(app):
    UserService.register('dup@example.com', 'pw-one', 'A', 'B')
    with pytest.raises(ConflictError):
        UserService.register('DUP@example.com', 'pw-two', 'C', 'D')


def test_register_host(app):
    user = UserService.register('host@example.com', 'pw', 'Hana', 'Host', role='host')
    assert user.is_host


def test_ensure_default_admin_is_idempotent(app):
    admin, created = UserService.ensure_default_admin()
    assert created
    assert admin.email == 'admin@example.com'
    assert admin.role == UserRole.ADMIN
    assert admin.check_password('admin-password')

    again, created = UserService.ensure_default_admin()
    assert not created
    assert again.id == admin.id
    assert User.query.filter_by(role=UserRole.ADMIN).count() == 1


def test_promote_to_admin(guest):
    assert UserService.promote_to_admin('emma.wilson@example.com').role == UserRole.ADMIN
    assert UserService.promote_to_admin('missing@example.com') is None


def test_non_string_email(app):
    with pytest.raises(ValidationError):
        UserService.register(123, 'hunter2-pass', 'Sarah', 'Jones')
    assert UserService.authenticate(123, 'hunter2-pass') is None
    assert UserService.promote_to_admin(['admin@example.com']) is None


# ---------- PROPERTIES ----------

def test_create_listing_with_new_location_promotes_guest(guest):
    listing = PropertyService.create_listing(
        host_id=guest.id,
        name='Cozy Mountain Cabin',
        description='Rustic cabin surrounded by pine forest.',
        price_per_night='150.00',
        location={'country': 'United States', 'state_province': 'Colorado',
                  'city': 'Aspen', 'address': '45 Pine Ridge Road'},
    )
    assert listing.location.city == 'Aspen'
    assert listing.price_per_night == Decimal('150.00')
    assert db.session.get(User, guest.id).role == UserRole.HOST


def test_create_listing_reuses_location(host, make_location):
    location = make_location()
    PropertyService.create_listing(host.id, 'Loft One', 'First loft in the building.', 100, location_id=location.id)
    PropertyService.create_listing(host.id, 'Loft Two', 'Second loft in the building.', 120, location_id=location.id)
    assert Location.query.count() == 1


@pytest.mark.parametrize('kwargs,error', [
    ({'price_per_night': 0, 'location_id': 'x'}, ValidationError),
    ({'price_per_night': 'abc', 'location_id': 'x'}, ValidationError),
    ({'price_per_night': 100}, ValidationError),
    ({'price_per_night': 100, 'location': {'city': 'Paris'}}, ValidationError),
    ({'price_per_night': 100, 'location_id': 'missing'}, NotFoundError),
])
def test_create_listing_rejects_bad_input(host, kwargs, error):
    with pytest.raises(error):
        PropertyService.create_listing(host.id, 'Some Place', 'A perfectly fine description.', **kwargs)


@pytest.mark.parametrize('price', ['NaN', 'Infinity', '-Infinity', 'sNaN'])
def test_create_listing_rejects_non_finite_price(host, make_location, price):
    with pytest.raises(ValidationError):
        PropertyService.create_listing(host.id, 'Some Place', 'A perfectly fine description.', price,
                                       location_id=make_location().id)


@pytest.mark.parametrize('name,description', [
    ('ab', 'A perfectly fine description.'),
    ('   ab   ', 'A perfectly fine description.'),
    ('Fine Name', 'too short'),
    (None, 'A perfectly fine description.'),
    ('Fine Name', 12345),
])
def test_create_listing_validates_text_before_writing(host, make_location, name, description):
    location_id = make_location().id
    with pytest.raises(ValidationError):
        PropertyService.create_listing(host.id, name, description, 100, location_id=location_id)
    assert Property.query.count() == 0
    assert db.session.get(User, host.id).role == UserRole.GUEST


# ---------- BOOKINGS ----------

def test_parse_date():
    assert parse_date('2025-02-01', 'start_date').isoformat() == '2025-02-01'
    with pytest.raises(ValidationError):
        parse_date('01/02/2025', 'start_date')
    with pytest.raises(ValidationError):
        parse_date(None, 'start_date')


def test_create_booking(listing, guest):
    booking = BookingService.create_booking(guest.id, listing.id, days_from_now(3), days_from_now(6))
    assert booking.status == BookingStatus.PENDING
    assert booking.nights == 3


def test_create_booking_accepts_iso_strings(listing, guest):
    booking = BookingService.create_booking(
        guest.id, listing.id, days_from_now(3).isoformat(), days_from_now(4).isoformat()
    )
    assert booking.nights == 1


def test_create_booking_starting_today_allowed(listing, guest):
    booking = BookingService.create_booking(guest.id, listing.id, days_from_now(0), days_from_now(2))
    assert booking.start_date == days_from_now(0)


@pytest.mark.parametrize('start_in,end_in', [
    (-1, 2),     # starts in the past
    (5, 5),      # zero nights
    (5, 3),      # ends before it starts
    (1, 367),    # longer than a year
])
def test_create_booking_rejects_bad_dates(listing, guest, start_in, end_in):
    with pytest.raises(ValidationError):
        BookingService.create_booking(guest.id, listing.id, days_from_now(start_in), days_from_now(end_in))


def test_create_booking_unknown_property(guest):
    with pytest.raises(NotFoundError):
        BookingService.create_booking(guest.id, 'no-such-property', days_from_now(1), days_from_now(2))


def test_create_booking_overlap(listing, guest, make_user):
    BookingService.create_booking(guest.id, listing.id, days_from_now(10), days_from_now(15))
    with pytest.raises(BookingOverlapError):
        BookingService.create_booking(make_user().id, listing.id, days_from_now(14), days_from_now(16))


def test_confirm_booking_by_host(host, listing, guest, make_booking):
    booking = make_booking(listing, guest, start_in=10, nights=2)
    BookingService.confirm_booking(booking.id, acting_user_id=host.id)
    assert booking.status == BookingStatus.CONFIRMED

    with pytest.raises(ValidationError):
        BookingService.confirm_booking(booking.id, acting_user_id=host.id)


def test_guest_cannot_confirm(listing, guest, make_booking):
    booking = make_booking(listing, guest, start_in=10, nights=2)
    with pytest.raises(PermissionDeniedError):
        BookingService.confirm_booking(booking.id, acting_user_id=guest.id)


def test_cancel_booking_permissions(listing, guest, make_user, make_booking):
    booking = make_booking(listing, guest, start_in=10, nights=2)
    with pytest.raises(PermissionDeniedError):
        BookingService.cancel_booking(booking.id, acting_user_id=make_user().id)

    BookingService.cancel_booking(booking.id, acting_user_id=guest.id)
    assert booking.status == BookingStatus.CANCELED

    with pytest.raises(ValidationError):
        BookingService.cancel_booking(booking.id, acting_user_id=guest.id)


def test_admin_may_cancel_any_booking(listing, guest, make_user, make_booking):
    admin = make_user(role=UserRole.ADMIN)
    booking = make_booking(listing, guest, start_in=10, nights=2)
    BookingService.cancel_booking(booking.id, acting_user_id=admin.id)
    assert booking.status == BookingStatus.CANCELED


def test_bookings_for_user_ordered_by_start(listing, guest, make_booking):
    later = make_booking(listing, guest, start_in=20, nights=2)
    sooner = make_booking(listing, guest, start_in=5, nights=2)
    assert BookingService.bookings_for_user(guest.id) == [sooner, later]


# ---------- PAYMENTS ----------

def test_record_payment_defaults_to_stay_total(listing, guest, make_booking):
    booking = make_booking(listing, guest, start_in=10, nights=3)
    payment = PaymentService.record_payment(booking.id, 'credit_card')
    assert payment.amount == Decimal('885.00')
    assert payment.payment_status == PaymentStatus.PENDING


def test_completing_payment_confirms_booking(listing, guest, make_booking):
    booking = make_booking(listing, guest, start_in=10, nights=3)
    payment = PaymentService.record_payment(booking.id, 'stripe')
    PaymentService.complete_payment(payment.id, 'txn_abc123')
    assert payment.payment_status == PaymentStatus.COMPLETED
    assert payment.transaction_id == 'txn_abc123'
    assert booking.status == BookingStatus.CONFIRMED

    with pytest.raises(ValidationError):
        PaymentService.complete_payment(payment.id, 'txn_again')


def test_complete_payment_requires_transaction_id(listing, guest, make_booking):
    booking = make_booking(listing, guest, start_in=10, nights=3)
    payment = PaymentService.record_payment(booking.id, 'paypal')
    with pytest.raises(ValidationError):
        PaymentService.complete_payment(payment.id, '')


def test_fail_payment(listing, guest, make_booking):
    booking = make_booking(listing, guest, start_in=10, nights=3)
    payment = PaymentService.record_payment(booking.id, 'bank_transfer')
    PaymentService.fail_payment(payment.id, 'txn_declined')
    assert payment.payment_status == PaymentStatus.FAILED
    assert booking.status == BookingStatus.PENDING


def test_fail_payment_requires_transaction_id(listing, guest, make_booking):
    booking = make_booking(listing, guest, start_in=10, nights=3)
    payment = PaymentService.record_payment(booking.id, 'bank_transfer')
    for transaction_id in (None, ''):
        with pytest.raises(ValidationError):
            PaymentService.fail_payment(payment.id, transaction_id)
    assert payment.payment_status == PaymentStatus.PENDING


def test_settled_payment_cannot_fail(listing, guest, make_booking):
    booking = make_booking(listing, guest, start_in=10, nights=3)
    payment = PaymentService.record_payment(booking.id, 'stripe')
    PaymentService.complete_payment(payment.id, 'txn_ok')

    with pytest.raises(ValidationError):
        PaymentService.fail_payment(payment.id, 'txn_late')
    assert payment.payment_status == PaymentStatus.COMPLETED
    assert payment.transaction_id == 'txn_ok'
    assert booking.status == BookingStatus.CONFIRMED


@pytest.mark.parametrize('amount', ['NaN', 'Infinity', '-Infinity'])
def test_record_payment_rejects_non_finite_amount(listing, guest, make_booking, amount):
    booking = make_booking(listing, guest, start_in=10, nights=3)
    with pytest.raises(ValidationError):
        PaymentService.record_payment(booking.id, 'stripe', amount=amount)
    assert booking.payment is None


def test_payment_rules(listing, guest, make_booking):
    booking = make_booking(listing, guest, start_in=10, nights=3)
    PaymentService.record_payment(booking.id, 'stripe', amount='100.00')
    with pytest.raises(ConflictError):
        PaymentService.record_payment(booking.id, 'stripe')

    canceled = make_booking(listing, guest, start_in=30, nights=1, status='canceled')
    with pytest.raises(ValidationError):
        PaymentService.record_payment(canceled.id, 'stripe')

    other = make_booking(listing, guest, start_in=40, nights=1)
    with pytest.raises(ValidationError):
        PaymentService.record_payment(other.id, 'stripe', amount=-5)
    with pytest.raises(ValidationError):
        PaymentService.record_payment(other.id, 'cash')


# ---------- REVIEWS ----------

def test_create_review(listing, guest):
    review = ReviewService.create_review(guest.id, listing.id, '5', '  Perfect weekend getaway!  ')
    assert review.rating == 5
    assert review.comment == 'Perfect weekend getaway!'
    assert ReviewService.reviews_for_property(listing.id) == [review]


@pytest.mark.parametrize('rating,comment', [
    (0, 'Rating is too low here.'),
    (6, 'Rating is too high here.'),
    ('five', 'Rating is not a number.'),
    (4, 'Too short'),
])
def test_create_review_validation(listing, guest, rating, comment):
    with pytest.raises(ValidationError):
        ReviewService.create_review(guest.id, listing.id, rating, comment)


def test_one_review_per_property(listing, guest):
    ReviewService.create_review(guest.id, listing.id, 4, 'Very comfortable apartment.')
    with pytest.raises(ConflictError):
        ReviewService.create_review(guest.id, listing.id, 2, 'Second thoughts on this one.')


# ---------- MESSAGES ----------

def test_messaging_flow(host, guest):
    first = MessageService.send_message(guest.id, host.id, 'Is early check-in possible?', 'inquiry')
    MessageService.send_message(guest.id, host.id, 'Also, is there parking?')

    assert MessageService.unread_count(host.id) == 2
    assert MessageService.unread_count(guest.id) == 0

    MessageService.mark_read(first.id, host.id)
    assert first.is_read
    assert MessageService.unread_count(host.id) == 1
    assert len(MessageService.inbox(host.id)) == 2
    assert len(MessageService.inbox(host.id, unread_only=True)) == 1


def test_message_rules(host, guest):
    with pytest.raises(ValidationError):
        MessageService.send_message(guest.id, guest.id, 'Talking to myself')
    with pytest.raises(ValidationError):
        MessageService.send_message(guest.id, host.id, '   ')
    with pytest.raises(NotFoundError):
        MessageService.send_message(guest.id, 'nobody', 'Hello?')

    message = MessageService.send_message(guest.id, host.id, 'Hello host')
    with pytest.raises(PermissionDeniedError):
        MessageService.mark_read(message.id, guest.id)
