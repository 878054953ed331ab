"""
Property Service
"""

from decimal import Decimal, InvalidOperation

from flask import current_app

from extensions import db
from rentals.errors import ValidationError
from rentals.models.location import Location
from rentals.models.property import Property
from rentals.models.user import User
from rentals.services.base import commit_or_rollback, get_or_404


LOCATION_FIELDS = ('country', 'state_province', 'city', 'address', 'postal_code', 'latitude', 'longitude')


class PropertyService:
    """Service for listing properties"""

    @staticmethod
    def create_listing(host_id, name, description, price_per_night, location=None, location_id=None):
        """
        List a property; a guest listing their first property becomes a host

        Args:
            host_id: Owner's user id
            name, description: Listing text
            price_per_night: Positive amount
            location: Dict of location fields for a new Location, or
            location_id: Id of an existing Location
        """
        host = get_or_404(User, host_id, 'Host')

        try:
            price = Decimal(str(price_per_night))
        except (InvalidOperation, TypeError):
            raise ValidationError('price_per_night must be a number')
        if not price.is_finite() or price <= 0:
            raise ValidationError('price_per_night must be a positive amount')
        if not isinstance(name, str) or len(name.strip()) < 3:
            raise ValidationError('name must be at least 3 characters')
        if not isinstance(description, str) or len(description.strip()) < 10:
            raise ValidationError('description must be at least 10 characters')

        if location_id is not None:
            place = get_or_404(Location, location_id, 'Location')
        elif location:
            missing = [field for field in ('country', 'state_province', 'city', 'address') if not location.get(field)]
            if missing:
                raise ValidationError(f'location is missing: {", ".join(missing)}')
            place = Location(**{key: location.get(key) for key in LOCATION_FIELDS})
            db.session.add(place)
        else:
            raise ValidationError('location or location_id is required')

        listing = Property(
            host=host,
            location=place,
            name=name,
            description=description,
            price_per_night=price,
        )
        db.session.add(listing)
        commit_or_rollback()

        current_app.logger.info(f'Property {listing.id} listed by {host.id}')
        return listing
