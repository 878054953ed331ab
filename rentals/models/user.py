"""
User Model
"""

import re
from extensions import db, bcrypt
from datetime import datetime
from enum import Enum
from sqlalchemy.orm import validates
from rentals.errors import ValidationError
from rentals.models.common import generate_uuid, enum_values


EMAIL_PATTERN = re.compile(r'^[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$')
PHONE_PATTERN = re.compile(r'^[+]?[0-9\s\-\(\)]{10,20}$')


def _require_text(key, value):
    if value is not None and not isinstance(value, str):
        raise ValidationError(f'{key} must be a string')


class UserRole(str, Enum):
    """User roles enum"""
    GUEST = 'guest'
    HOST = 'host'
    ADMIN = 'admin'


class User(db.Model):
    """Platform user: guest, host or admin"""

    __tablename__ = 'users'
    __table_args__ = (
        db.CheckConstraint(
            'length(first_name) >= 1 AND length(last_name) >= 1',
            name='chk_name_length'
        ),
    )

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    phone_number = db.Column(db.String(20))

    role = db.Column(
        db.Enum(UserRole, name='user_role', values_callable=enum_values,
                create_constraint=True, validate_strings=True),
        default=UserRole.GUEST, nullable=False, index=True
    )

    # Timestamps
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    properties = db.relationship('Property', back_populates='host',
                                 cascade='all, delete-orphan', passive_deletes=True)
    bookings = db.relationship('Booking', back_populates='guest',
                               cascade='all, delete-orphan', passive_deletes=True)
    reviews_written = db.relationship('Review', back_populates='author',
                                      cascade='all, delete-orphan', passive_deletes=True)
    sent_messages = db.relationship('Message', back_populates='sender',
                                    foreign_keys='Message.sender_id',
                                    cascade='all, delete-orphan', passive_deletes=True)
    received_messages = db.relationship('Message', back_populates='recipient',
                                        foreign_keys='Message.recipient_id',
                                        cascade='all, delete-orphan', passive_deletes=True)

    def __init__(self, email, password, first_name, last_name, **kwargs):
        """Initialize user with hashed password"""
        self.email = email
        self.set_password(password)
        self.first_name = first_name
        self.last_name = last_name
        self.role = UserRole.GUEST

        # Handle optional fields
        for key, value in kwargs.items():
            if hasattr(self, key):
                setattr(self, key, value)

    @validates('email')
    def validate_email(self, key, value):
        _require_text(key, value)
        value = (value or '').strip().lower()
        if not EMAIL_PATTERN.match(value):
            raise ValidationError(f'Invalid email address: {value!r}')
        return value

    @validates('phone_number')
    def validate_phone_number(self, key, value):
        if value in (None, ''):
            return None
        _require_text(key, value)
        if not PHONE_PATTERN.match(value):
            raise ValidationError(f'Invalid phone number: {value!r}')
        return value

    @validates('first_name', 'last_name')
    def validate_name(self, key, value):
        _require_text(key, value)
        value = (value or '').strip()
        if not value:
            raise ValidationError(f'{key} is required')
        return value

    @validates('role')
    def validate_role(self, key, value):
        try:
            return UserRole(value)
        except ValueError:
            raise ValidationError(f'Unknown role: {value!r}')

    def set_password(self, password):
        """Hash and set password"""
        if not password:
            raise ValidationError('password is required')
        self.password_hash = bcrypt.generate_password_hash(password).decode('utf-8')

    def check_password(self, password):
        """Verify password against hash"""
        return bcrypt.check_password_hash(self.password_hash, password)

    @property
    def full_name(self):
        """Return full name"""
        return f"{self.first_name} {self.last_name}"

    @property
    def is_host(self):
        return self.role in (UserRole.HOST, UserRole.ADMIN)

    def to_dict(self, include_email=False):
        """Convert user to dictionary"""
        data = {
            'id': self.id,
            'first_name': self.first_name,
            'last_name': self.last_name,
            'full_name': self.full_name,
            'role': self.role.value,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

        if include_email:
            data['email'] = self.email
            data['phone_number'] = self.phone_number

        return data

    def __repr__(self):
        return f'<User {self.email}>'
