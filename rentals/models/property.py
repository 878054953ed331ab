"""
Property Model
"""

from extensions import db
from datetime import datetime
from decimal import Decimal
from rentals.models.common import generate_uuid


class Property(db.Model):
    """Property/Listing model"""

    __tablename__ = 'properties'
    __table_args__ = (
        db.CheckConstraint('price_per_night > 0', name='chk_price_positive'),
        db.CheckConstraint('length(name) >= 3', name='chk_property_name_length'),
        db.CheckConstraint('length(description) >= 10', name='chk_description_length'),
    )

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    host_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='CASCADE', onupdate='CASCADE'),
                        nullable=False, index=True)
    location_id = db.Column(db.String(36), db.ForeignKey('locations.id', ondelete='RESTRICT', onupdate='CASCADE'),
                            nullable=False, index=True)

    # Basic Information
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)

    # Pricing
    price_per_night = db.Column(db.Numeric(10, 2), nullable=False, index=True)

    # Timestamps
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    host = db.relationship('User', back_populates='properties')
    location = db.relationship('Location', back_populates='properties')
    bookings = db.relationship('Booking', backref='property',
                               cascade='all, delete-orphan', passive_deletes=True)
    reviews = db.relationship('Review', backref='property',
                              cascade='all, delete-orphan', passive_deletes=True)

    def __init__(self, **kwargs):
        """Initialize property"""
        for key, value in kwargs.items():
            if hasattr(self, key):
                setattr(self, key, value)

    @property
    def average_rating(self):
        if not self.reviews:
            return None
        return round(sum(review.rating for review in self.reviews) / len(self.reviews), 2)

    def is_available(self, start_date, end_date):
        """Check if property is free for the [start_date, end_date) stay"""
        from rentals.models.booking import Booking, ACTIVE_STATUSES

        overlapping_booking = Booking.query.filter(
            Booking.property_id == self.id,
            Booking.status.in_(ACTIVE_STATUSES),
            Booking.start_date < end_date,
            Booking.end_date > start_date
        ).first()

        return overlapping_booking is None

    def quote(self, start_date, end_date):
        """Price a stay; the booking table stores no totals"""
        nights = (end_date - start_date).days
        price = Decimal(self.price_per_night)
        return {
            'nights': nights,
            'price_per_night': float(price),
            'total_price': float(price * nights),
        }

    def to_dict(self, include_host=False, include_location=True):
        """Convert property to dictionary"""
        data = {
            'id': self.id,
            'host_id': self.host_id,
            'location_id': self.location_id,
            'name': self.name,
            'description': self.description,
            'price_per_night': float(self.price_per_night),
            'average_rating': self.average_rating,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

        if include_location and self.location is not None:
            data['location'] = self.location.to_dict()

        if include_host:
            data['host'] = self.host.to_dict()

        return data

    def __repr__(self):
        return f'<Property {self.name}>'
