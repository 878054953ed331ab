"""
Review Model
"""

from extensions import db
from datetime import datetime
from rentals.models.common import generate_uuid


class Review(db.Model):
    """Review/Rating model"""

    __tablename__ = 'reviews'
    __table_args__ = (
        db.CheckConstraint('rating >= 1 AND rating <= 5', name='chk_rating_range'),
        db.CheckConstraint('length(comment) >= 10', name='chk_comment_length'),
        db.UniqueConstraint('user_id', 'property_id', name='uk_user_property_review'),
    )

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    property_id = db.Column(db.String(36), db.ForeignKey('properties.id', ondelete='CASCADE', onupdate='CASCADE'),
                            nullable=False, index=True)
    user_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='CASCADE', onupdate='CASCADE'),
                        nullable=False, index=True)

    # Review Content
    rating = db.Column(db.Integer, nullable=False, index=True)  # 1-5 stars
    comment = db.Column(db.Text, nullable=False)

    # Timestamps
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    author = db.relationship('User', back_populates='reviews_written')

    def __init__(self, **kwargs):
        """Initialize review"""
        for key, value in kwargs.items():
            if hasattr(self, key):
                setattr(self, key, value)

    def to_dict(self, include_user=False, include_property=False):
        """Convert review to dictionary"""
        data = {
            'id': self.id,
            'property_id': self.property_id,
            'user_id': self.user_id,
            'rating': self.rating,
            'comment': self.comment,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

        if include_user:
            data['author'] = self.author.to_dict()

        if include_property:
            data['property'] = self.property.to_dict()

        return data

    def __repr__(self):
        return f'<Review {self.id} - Property {self.property_id}>'
