"""
User Service
Registration and authentication
"""

from flask import current_app

from extensions import db
from rentals.errors import ConflictError
from rentals.models.user import User, UserRole
from rentals.services.base import commit_or_rollback


def _normalize_email(email):
    return email.strip().lower() if isinstance(email, str) else ''


class UserService:
    """Service for creating and authenticating users"""

    @staticmethod
    def register(email, password, first_name, last_name, phone_number=None, role=UserRole.GUEST):
        """
        Create a user account

        Args:
            email: Unique email address
            password: Plain text password, stored as a bcrypt hash
            first_name, last_name: Display names
            phone_number: Optional phone number
            role: guest (default), host or admin

        Returns:
            The new User
        """
        if User.query.filter_by(email=_normalize_email(email)).first():
            raise ConflictError('Email already registered')

        user = User(
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
            phone_number=phone_number,
            role=role,
        )
        db.session.add(user)
        commit_or_rollback()

        current_app.logger.info(f'Registered user {user.id} ({user.role.value})')
        return user

    @staticmethod
    def authenticate(email, password):
        """Return the user for valid credentials, None otherwise"""
        user = User.query.filter_by(email=_normalize_email(email)).first()
        if not user or not user.check_password(password):
            return None
        return user

    @staticmethod
    def promote_to_admin(email):
        user = User.query.filter_by(email=_normalize_email(email)).first()
        if user is None:
            return None
        user.role = UserRole.ADMIN
        commit_or_rollback()
        return user

    @staticmethod
    def ensure_default_admin():
        """Create the configured admin account unless an admin already exists"""
        admin = User.query.filter_by(role=UserRole.ADMIN).first()
        if admin:
            return admin, False

        admin = User(
            email=current_app.config['ADMIN_EMAIL'],
            password=current_app.config['ADMIN_PASSWORD'],
            first_name='Admin',
            last_name='User',
            role=UserRole.ADMIN,
        )
        db.session.add(admin)
        commit_or_rollback()
        current_app.logger.info(f'Created default admin {admin.email}')
        return admin, True
