from extensions import db
from datetime import datetime
from enum import Enum
from sqlalchemy.orm import validates
from rentals.errors import ValidationError
from rentals.models.common import generate_uuid, enum_values


class MessageType(str, Enum):
    INQUIRY = 'inquiry'
    BOOKING = 'booking'
    GENERAL = 'general'
    SUPPORT = 'support'


class Message(db.Model):
    __tablename__ = 'messages'
    __table_args__ = (
        db.CheckConstraint('sender_id != recipient_id', name='chk_different_users'),
        db.CheckConstraint('length(message_body) >= 1', name='chk_message_length'),
        db.CheckConstraint('read_at IS NULL OR read_at >= sent_at', name='chk_read_after_sent'),
        db.Index('idx_message_unread', 'recipient_id', 'read_at'),
    )

    id = db.Column(db.String(36), primary_key=True, default=generate_uuid)
    sender_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='CASCADE', onupdate='CASCADE'),
                          nullable=False, index=True)
    recipient_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='CASCADE', onupdate='CASCADE'),
                             nullable=False, index=True)
    message_body = db.Column(db.Text, nullable=False)
    sent_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    read_at = db.Column(db.DateTime)
    message_type = db.Column(
        db.Enum(MessageType, name='message_type', values_callable=enum_values,
                create_constraint=True, validate_strings=True),
        default=MessageType.GENERAL, nullable=False, index=True
    )

    sender = db.relationship('User', foreign_keys=[sender_id], back_populates='sent_messages')
    recipient = db.relationship('User', foreign_keys=[recipient_id], back_populates='received_messages')

    def __init__(self, **kwargs):
        self.message_type = MessageType.GENERAL
        for key, value in kwargs.items():
            if hasattr(self, key):
                setattr(self, key, value)

    @validates('message_type')
    def validate_message_type(self, key, value):
        try:
            return MessageType(value)
        except ValueError:
            raise ValidationError(f'Unknown message type: {value!r}')

    @property
    def is_read(self):
        return self.read_at is not None

    def mark_read(self, when=None):
        if self.read_at is None:
            self.read_at = when or datetime.utcnow()

    def to_dict(self):
        return {
            'id': self.id,
            'sender_id': self.sender_id,
            'recipient_id': self.recipient_id,
            'message_body': self.message_body,
            'message_type': self.message_type.value,
            'sent_at': self.sent_at.isoformat() if self.sent_at else None,
            'read_at': self.read_at.isoformat() if self.read_at else None,
        }
