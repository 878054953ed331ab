"""
Authentication Routes
"""

from flask import Blueprint, request, jsonify
from flask_jwt_extended import (
    create_access_token,
    create_refresh_token,
    jwt_required,
    get_jwt_identity
)
from extensions import db, limiter
from rentals.models.user import User, UserRole
from rentals.services.user_service import UserService

auth_bp = Blueprint('auth', __name__)


def _tokens_for(user):
    return {
        'access_token': create_access_token(identity=user.id),
        'refresh_token': create_refresh_token(identity=user.id),
    }


@auth_bp.route('/register', methods=['POST'])
@limiter.limit("5 per hour")
def register():
    """Register a new user"""
    data = request.get_json(silent=True) or {}

    # Validate required fields
    required_fields = ['email', 'password', 'first_name', 'last_name']
    for field in required_fields:
        if field not in data:
            return jsonify({'error': f'{field} is required'}), 400

    # Admins are only made through the CLI
    role = data.get('role', UserRole.GUEST.value)
    if role not in (UserRole.GUEST.value, UserRole.HOST.value):
        return jsonify({'error': 'role must be guest or host'}), 400

    user = UserService.register(
        email=data['email'],
        password=data['password'],
        first_name=data['first_name'],
        last_name=data['last_name'],
        phone_number=data.get('phone_number'),
        role=role,
    )

    return jsonify({
        'message': 'User registered successfully',
        'user': user.to_dict(include_email=True),
        **_tokens_for(user)
    }), 201


@auth_bp.route('/login', methods=['POST'])
@limiter.limit("50 per hour")
def login():
    """Login user"""
    data = request.get_json(silent=True) or {}

    # Validate required fields
    if 'email' not in data or 'password' not in data:
        return jsonify({'error': 'Email and password are required'}), 400

    user = UserService.authenticate(data['email'], data['password'])
    if not user:
        return jsonify({'error': 'Invalid email or password'}), 401

    return jsonify({
        'message': 'Login successful',
        'user': user.to_dict(include_email=True),
        **_tokens_for(user)
    }), 200


@auth_bp.route('/refresh', methods=['POST'])
@jwt_required(refresh=True)
def refresh():
    """Issue a new access token"""
    current_user_id = get_jwt_identity()
    return jsonify({'access_token': create_access_token(identity=current_user_id)}), 200


@auth_bp.route('/me', methods=['GET'])
@jwt_required()
def me():
    """Get the authenticated user"""
    user = db.session.get(User, get_jwt_identity())
    if not user:
        return jsonify({'error': 'User not found'}), 404
    return jsonify({'user': user.to_dict(include_email=True)}), 200
