"""
Message Service
Direct messages between users
"""

from extensions import db
from rentals.errors import PermissionDeniedError, ValidationError
from rentals.models.message import Message, MessageType
from rentals.models.user import User
from rentals.services.base import commit_or_rollback, get_or_404


class MessageService:

    @staticmethod
    def send_message(sender_id, recipient_id, message_body, message_type=MessageType.GENERAL):
        if sender_id == recipient_id:
            raise ValidationError('Cannot message yourself')
        if not message_body or not message_body.strip():
            raise ValidationError('message_body is required')

        sender = get_or_404(User, sender_id, 'Sender')
        recipient = get_or_404(User, recipient_id, 'Recipient')

        message = Message(
            sender_id=sender.id,
            recipient_id=recipient.id,
            message_body=message_body,
            message_type=message_type,
        )
        db.session.add(message)
        commit_or_rollback()
        return message

    @staticmethod
    def mark_read(message_id, user_id):
        message = get_or_404(Message, message_id, 'Message')
        if message.recipient_id != user_id:
            raise PermissionDeniedError('Only the recipient can mark a message read')
        message.mark_read()
        commit_or_rollback()
        return message

    @staticmethod
    def inbox(user_id, unread_only=False):
        query = Message.query.filter(Message.recipient_id == user_id)
        if unread_only:
            query = query.filter(Message.read_at.is_(None))
        return query.order_by(Message.sent_at.desc()).all()

    @staticmethod
    def unread_count(user_id):
        return Message.query.filter(
            Message.recipient_id == user_id,
            Message.read_at.is_(None)
        ).count()
