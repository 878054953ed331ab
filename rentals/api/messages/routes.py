from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required, get_jwt_identity
from rentals.models.message import MessageType
from rentals.services.message_service import MessageService

messages_bp = Blueprint('messages', __name__)


@messages_bp.route('/', methods=['POST'])
@jwt_required()
def send_message():
    current_user_id = get_jwt_identity()
    data = request.get_json(silent=True) or {}

    recipient_id = data.get('recipient_id')
    if not recipient_id:
        return jsonify({'error': 'recipient_id is required'}), 400

    message = MessageService.send_message(
        sender_id=current_user_id,
        recipient_id=recipient_id,
        message_body=data.get('message_body'),
        message_type=data.get('message_type', MessageType.GENERAL.value),
    )
    return jsonify({'message': message.to_dict()}), 201


@messages_bp.route('/inbox', methods=['GET'])
@jwt_required()
def inbox():
    user_id = get_jwt_identity()
    unread_only = request.args.get('unread', 'false').lower() in ('1', 'true', 'yes')
    messages = MessageService.inbox(user_id, unread_only=unread_only)
    return jsonify({
        'messages': [m.to_dict() for m in messages],
        'unread_count': MessageService.unread_count(user_id)
    })


@messages_bp.route('/<string:message_id>/read', methods=['POST'])
@jwt_required()
def mark_read(message_id):
    message = MessageService.mark_read(message_id, get_jwt_identity())
    return jsonify({'message': message.to_dict()})
