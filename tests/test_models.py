from datetime import datetime, timedelta
from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError

from extensions import db
from rentals.errors import ValidationError
from rentals.models import (
    Booking, BookingStatus, Location, Message, MessageType, Payment,
    PaymentMethod, PaymentStatus, Property, Review, User, UserRole
)
from tests.conftest import days_from_now


def assert_rejected(instance):
    db.session.add(instance)
    with pytest.raises(IntegrityError):
        db.session.commit()
    db.session.rollback()


# ---------- USER ----------

def test_user_defaults_and_password(make_user):
    user = make_user(email='Alice.Admin@Example.com')
    assert user.role == UserRole.GUEST
    assert user.email == 'alice.admin@example.com'
    assert len(user.id) == 36
    assert user.password_hash != 'secret-password'
    assert user.check_password('secret-password')
    assert not user.check_password('wrong')
    assert user.created_at is not None


def test_user_email_is_unique(make_user):
    make_user(email='dup@example.com')
    assert_rejected(User(email='dup@example.com', password='pw', first_name='A', last_name='B'))


@pytest.mark.parametrize('email', ['not-an-email', 'a@b', '@example.com', 'x@example.c'])
def test_user_rejects_malformed_email(app, email):
    with pytest.raises(ValidationError):
        User(email=email, password='pw', first_name='A', last_name='B')


def test_user_phone_number_format(app):
    user = User(email='p@example.com', password='pw', first_name='A', last_name='B',
                phone_number='+1-555-000-0001')
    assert user.phone_number == '+1-555-000-0001'
    with pytest.raises(ValidationError):
        User(email='q@example.com', password='pw', first_name='A', last_name='B', phone_number='12ab')


def test_user_rejects_blank_names_and_unknown_roles(app):
    with pytest.raises(ValidationError):
        User(email='n@example.com', password='pw', first_name='  ', last_name='B')
    with pytest.raises(ValidationError):
        User(email='n@example.com', password='pw', first_name='A', last_name='B', role='superuser')


@pytest.mark.parametrize('field,value', [
    ('first_name', 123),
    ('last_name', ['B']),
    ('email', 42),
    ('phone_number', 5551234567),
])
def test_user_rejects_non_text_values(app, field, value):
    fields = {'email': 'n@example.com', 'password': 'pw', 'first_name': 'A', 'last_name': 'B'}
    fields[field] = value
    with pytest.raises(ValidationError):
        User(**fields)


# ---------- LOCATION ----------

@pytest.mark.parametrize('field,value', [
    ('latitude', Decimal('91')),
    ('latitude', Decimal('-90.5')),
    ('longitude', Decimal('180.5')),
    ('address', 'abc'),
])
def test_location_value_constraints(app, field, value):
    fields = {
        'country': 'France', 'state_province': 'Ile-de-France', 'city': 'Paris',
        'address': '12 Rue de la Paix',
    }
    fields[field] = value
    assert_rejected(Location(**fields))


def test_location_coordinates_are_optional(make_location):
    location = make_location(latitude=None, longitude=None)
    assert location.id is not None


# ---------- PROPERTY ----------

@pytest.mark.parametrize('field,value', [
    ('price_per_night', Decimal('0')),
    ('price_per_night', Decimal('-10')),
    ('name', 'ab'),
    ('description', 'too short'),
])
def test_property_value_constraints(host, make_location, field, value):
    fields = {
        'host_id': host.id,
        'location_id': make_location().id,
        'name': 'Parisian Charm Studio',
        'description': 'Cozy studio apartment near the Louvre.',
        'price_per_night': Decimal('95.00'),
    }
    fields[field] = value
    assert_rejected(Property(**fields))


def test_property_requires_existing_host(make_location):
    assert_rejected(Property(
        host_id='00000000-0000-0000-0000-000000000000',
        location_id=make_location().id,
        name='Ghost House',
        description='Owned by nobody at all.',
        price_per_night=Decimal('100'),
    ))


def test_property_quote(listing):
    quote = listing.quote(days_from_now(10), days_from_now(13))
    assert quote == {'nights': 3, 'price_per_night': 295.0, 'total_price': 885.0}


def test_property_average_rating(listing, make_user):
    assert listing.average_rating is None
    for rating in (5, 4):
        author = make_user()
        db.session.add(Review(property_id=listing.id, user_id=author.id, rating=rating,
                              comment='Lovely place, would stay again.'))
    db.session.commit()
    assert listing.average_rating == 4.5


# ---------- BOOKING ----------

def test_booking_defaults(listing, guest, make_booking):
    booking = make_booking(listing, guest, start_in=10, nights=3)
    assert booking.status == BookingStatus.PENDING
    assert booking.nights == 3
    assert booking.is_active
    assert booking.to_dict()['status'] == 'pending'


def test_booking_status_transitions(listing, guest, make_booking):
    booking = make_booking(listing, guest, start_in=10, nights=3)
    booking.confirm()
    db.session.commit()
    assert booking.status == BookingStatus.CONFIRMED
    assert booking.can_cancel()

    booking.cancel()
    db.session.commit()
    assert booking.status == BookingStatus.CANCELED
    assert not booking.can_cancel()
    assert not booking.is_active


def test_booking_rejects_unknown_status(app):
    with pytest.raises(ValidationError):
        Booking(status='archived')


def test_booking_end_must_follow_start(listing, guest):
    booking = Booking(property_id=listing.id, user_id=guest.id,
                      start_date=days_from_now(5), end_date=days_from_now(5))
    db.session.add(booking)
    with pytest.raises(ValidationError):
        db.session.commit()
    db.session.rollback()


def test_booking_stay_limited_to_a_year(listing, guest):
    booking = Booking(property_id=listing.id, user_id=guest.id,
                      start_date=days_from_now(5), end_date=days_from_now(5 + 366))
    db.session.add(booking)
    with pytest.raises(ValidationError):
        db.session.commit()
    db.session.rollback()


def test_booking_in_the_past_is_allowed_at_model_level(listing, guest):
    # Historical stays are valid rows; only new requests are checked against today
    booking = Booking(property_id=listing.id, user_id=guest.id,
                      start_date=days_from_now(-30), end_date=days_from_now(-25),
                      status=BookingStatus.CONFIRMED)
    db.session.add(booking)
    db.session.commit()
    assert booking.nights == 5


def test_booking_requires_existing_property(guest):
    assert_rejected(Booking(property_id='00000000-0000-0000-0000-000000000000', user_id=guest.id,
                            start_date=days_from_now(1), end_date=days_from_now(2)))


# ---------- PAYMENT ----------

def test_payment_lifecycle(listing, guest, make_booking):
    booking = make_booking(listing, guest, start_in=10, nights=2)
    payment = Payment(booking_id=booking.id, amount=Decimal('590.00'), payment_method='credit_card')
    db.session.add(payment)
    db.session.commit()
    assert payment.payment_status == PaymentStatus.PENDING
    assert payment.payment_method == PaymentMethod.CREDIT_CARD

    payment.complete('txn_001')
    db.session.commit()
    assert payment.payment_status == PaymentStatus.COMPLETED

    payment.refund()
    db.session.commit()
    assert payment.payment_status == PaymentStatus.REFUNDED


def test_payment_needs_transaction_id_once_settled(listing, guest, make_booking):
    booking = make_booking(listing, guest, start_in=10, nights=2)
    assert_rejected(Payment(booking_id=booking.id, amount=Decimal('10'), payment_method='paypal',
                            payment_status='completed'))


def test_payment_amount_positive(listing, guest, make_booking):
    booking = make_booking(listing, guest, start_in=10, nights=2)
    assert_rejected(Payment(booking_id=booking.id, amount=Decimal('0'), payment_method='stripe'))


def test_one_payment_per_booking(listing, guest, make_booking):
    booking = make_booking(listing, guest, start_in=10, nights=2)
    db.session.add(Payment(booking_id=booking.id, amount=Decimal('10'), payment_method='stripe'))
    db.session.commit()
    assert_rejected(Payment(booking_id=booking.id, amount=Decimal('10'), payment_method='stripe'))


def test_payment_rejects_unknown_method(app):
    with pytest.raises(ValidationError):
        Payment(payment_method='cash')


def test_refund_requires_completed_payment(listing, guest, make_booking):
    booking = make_booking(listing, guest, start_in=10, nights=2)
    payment = Payment(booking_id=booking.id, amount=Decimal('10'), payment_method='stripe')
    with pytest.raises(ValidationError):
        payment.refund()


# ---------- REVIEW ----------

@pytest.mark.parametrize('rating', [0, 6])
def test_review_rating_bounds(listing, guest, rating):
    assert_rejected(Review(property_id=listing.id, user_id=guest.id, rating=rating,
                           comment='Rating outside the allowed range.'))


def test_review_comment_minimum_length(listing, guest):
    assert_rejected(Review(property_id=listing.id, user_id=guest.id, rating=4, comment='Nice'))


def test_one_review_per_user_and_property(listing, guest):
    db.session.add(Review(property_id=listing.id, user_id=guest.id, rating=5,
                          comment='Amazing location and views.'))
    db.session.commit()
    assert_rejected(Review(property_id=listing.id, user_id=guest.id, rating=3,
                           comment='Changed my mind about this.'))


def test_same_user_may_review_different_properties(host, guest, make_property):
    first = make_property(host, name='First Place')
    second = make_property(host, name='Second Place')
    for listing in (first, second):
        db.session.add(Review(property_id=listing.id, user_id=guest.id, rating=5,
                              comment='Great stay, highly recommended.'))
    db.session.commit()
    assert Review.query.filter_by(user_id=guest.id).count() == 2


# ---------- MESSAGE ----------

def test_message_defaults_and_mark_read(host, guest):
    message = Message(sender_id=guest.id, recipient_id=host.id, message_body='Is parking available?')
    db.session.add(message)
    db.session.commit()
    assert message.message_type == MessageType.GENERAL
    assert not message.is_read

    message.mark_read()
    db.session.commit()
    assert message.is_read


def test_message_cannot_be_sent_to_self(guest):
    assert_rejected(Message(sender_id=guest.id, recipient_id=guest.id, message_body='Hello me'))


def test_message_body_required(host, guest):
    assert_rejected(Message(sender_id=guest.id, recipient_id=host.id, message_body=''))


def test_message_read_before_sent_rejected(host, guest):
    sent_at = datetime.utcnow()
    assert_rejected(Message(sender_id=guest.id, recipient_id=host.id, message_body='Hi',
                            sent_at=sent_at, read_at=sent_at - timedelta(minutes=5)))


# ---------- CASCADES ----------

def test_deleting_host_removes_listings_bookings_and_reviews(host, guest, listing, make_booking):
    booking = make_booking(listing, guest, start_in=10, nights=2)
    db.session.add(Payment(booking_id=booking.id, amount=Decimal('590'), payment_method='stripe'))
    db.session.add(Review(property_id=listing.id, user_id=guest.id, rating=4,
                          comment='Very comfortable apartment.'))
    db.session.commit()

    db.session.delete(host)
    db.session.commit()

    assert Property.query.count() == 0
    assert Booking.query.count() == 0
    assert Payment.query.count() == 0
    assert Review.query.count() == 0
    assert db.session.get(User, guest.id) is not None


def test_deleting_guest_removes_their_bookings_and_messages(host, guest, listing, make_booking):
    make_booking(listing, guest, start_in=10, nights=2)
    db.session.add(Message(sender_id=guest.id, recipient_id=host.id, message_body='Thanks!'))
    db.session.commit()

    db.session.delete(guest)
    db.session.commit()

    assert Booking.query.count() == 0
    assert Message.query.count() == 0
    assert Property.query.count() == 1


def test_location_in_use_cannot_be_deleted(listing):
    location = db.session.get(Location, listing.location_id)
    db.session.delete(location)
    with pytest.raises(IntegrityError):
        db.session.commit()
    db.session.rollback()
    assert Location.query.count() == 1
