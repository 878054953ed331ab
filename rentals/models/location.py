"""
Location Model
"""

from extensions import db
from datetime import datetime
from rentals.models.common import generate_uuid


class Location(db.Model):
    """Address and coordinates shared by properties"""

    __tablename__ = 'locations'
    __table_args__ = (
        db.CheckConstraint(
            'latitude IS NULL OR (latitude >= -90 AND latitude <= 90)',
            name='chk_latitude'
        ),
        db.CheckConstraint(
            'longitude IS NULL OR (longitude >= -180 AND longitude <= 180)',
            name='chk_longitude'
        ),
        db.CheckConstraint('length(address) >= 5', name='chk_address_length'),
        db.Index('idx_location_coordinates', 'latitude', 'longitude'),
    )

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    country = db.Column(db.String(100), nullable=False, index=True)
    state_province = db.Column(db.String(100), nullable=False)
    city = db.Column(db.String(100), nullable=False, index=True)
    address = db.Column(db.String(255), nullable=False)
    postal_code = db.Column(db.String(20), index=True)
    latitude = db.Column(db.Numeric(10, 8))
    longitude = db.Column(db.Numeric(11, 8))

    # Timestamps
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Deleting a location that still has properties is refused by the database
    properties = db.relationship('Property', back_populates='location', passive_deletes='all')

    def __init__(self, **kwargs):
        """Initialize location"""
        for key, value in kwargs.items():
            if hasattr(self, key):
                setattr(self, key, value)

    def to_dict(self):
        return {
            'id': self.id,
            'country': self.country,
            'state_province': self.state_province,
            'city': self.city,
            'address': self.address,
            'postal_code': self.postal_code,
            'latitude': float(self.latitude) if self.latitude is not None else None,
            'longitude': float(self.longitude) if self.longitude is not None else None,
        }

    def __repr__(self):
        return f'<Location {self.city}, {self.country}>'
