from datetime import date, timedelta
from decimal import Decimal

import pytest

from extensions import db
from rentals import create_app
from rentals.models import Booking, Location, Property, User

# ---------- TEST FIXTURES ----------


@pytest.fixture
def app():
    """Application with a fresh in-memory schema for each test."""
    app = create_app('testing')
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


# ---------- TEST DATA HELPERS ----------

def days_from_now(days):
    return date.today() + timedelta(days=days)


@pytest.fixture
def make_user(app):
    counter = {'n': 0}

    def _make_user(email=None, first_name='Test', last_name='User', **kwargs):
        counter['n'] += 1
        user = User(
            email=email or f"user{counter['n']}@example.com",
            password='secret-password',
            first_name=first_name,
            last_name=last_name,
            **kwargs
        )
        db.session.add(user)
        db.session.commit()
        return user

    return _make_user


@pytest.fixture
def make_location(app):
    def _make_location(city='San Francisco', **kwargs):
        fields = {
            'country': 'United States',
            'state_province': 'California',
            'city': city,
            'address': '123 Market Street',
            'postal_code': '94102',
            'latitude': Decimal('37.7749'),
            'longitude': Decimal('-122.4194'),
        }
        fields.update(kwargs)
        location = Location(**fields)
        db.session.add(location)
        db.session.commit()
        return location

    return _make_location


@pytest.fixture
def make_property(app, make_location):
    def _make_property(host, name='Luxury Downtown Loft', price='295.00', location=None, **kwargs):
        listing = Property(
            host_id=host.id,
            location_id=(location or make_location()).id,
            name=name,
            description='Stunning modern loft with panoramic city views.',
            price_per_night=Decimal(price),
            **kwargs
        )
        db.session.add(listing)
        db.session.commit()
        return listing

    return _make_property


@pytest.fixture
def make_booking(app):
    def _make_booking(listing, guest, start_in, nights, status='pending'):
        booking = Booking(
            property_id=listing.id,
            user_id=guest.id,
            start_date=days_from_now(start_in),
            end_date=days_from_now(start_in + nights),
            status=status,
        )
        db.session.add(booking)
        db.session.commit()
        return booking

    return _make_booking


@pytest.fixture
def host(make_user):
    return make_user(email='john.smith@example.com', first_name='John', last_name='Smith')


@pytest.fixture
def guest(make_user):
    return make_user(email='emma.wilson@example.com', first_name='Emma', last_name='Wilson')


@pytest.fixture
def listing(host, make_property):
    return make_property(host)
