"""
Flask Application Factory
"""

import logging
import os

from flask import Flask, jsonify
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

from config import config
from extensions import db, migrate, jwt, bcrypt, cors, limiter
from rentals.errors import DomainError


def create_app(config_name=None):
    """Application factory pattern"""

    if config_name is None:
        config_name = os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)

    # Load configuration
    app.config.from_object(config[config_name])
    app.logger.setLevel(getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO))

    # Models must be imported before the schema is touched
    from rentals import models  # noqa: F401

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    bcrypt.init_app(app)
    cors.init_app(app, resources={
        r"/api/*": {
            "origins": app.config['CORS_ORIGINS'],
            "methods": ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
            "allow_headers": ["Content-Type", "Authorization"]
        }
    })
    limiter.init_app(app)

    # Register blueprints
    register_blueprints(app)

    # Register error handlers
    register_error_handlers(app)

    # Register CLI commands
    from rentals.cli import register_commands
    register_commands(app)

    return app


def register_blueprints(app):
    """Register Flask blueprints"""
    from rentals.api.auth import auth_bp
    from rentals.api.users import users_bp
    from rentals.api.properties import properties_bp
    from rentals.api.bookings import bookings_bp
    from rentals.api.reviews import reviews_bp
    from rentals.api.payments import payments_bp
    from rentals.api.messages import messages_bp

    # API v1
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(users_bp, url_prefix='/api/users')
    app.register_blueprint(properties_bp, url_prefix='/api/properties')
    app.register_blueprint(bookings_bp, url_prefix='/api/bookings')
    app.register_blueprint(reviews_bp, url_prefix='/api/reviews')
    app.register_blueprint(payments_bp, url_prefix='/api/payments')
    app.register_blueprint(messages_bp, url_prefix='/api/messages')

    # Health check endpoint
    @app.route('/health')
    def health_check():
        return jsonify({'status': 'healthy', 'message': 'API is running'}), 200

    @app.route('/')
    def index():
        return jsonify({
            'message': 'Vacation Rental Marketplace API',
            'version': '1.0.0',
            'endpoints': {
                'auth': '/api/auth',
                'users': '/api/users',
                'properties': '/api/properties',
                'bookings': '/api/bookings',
                'reviews': '/api/reviews',
                'payments': '/api/payments',
                'messages': '/api/messages'
            }
        }), 200


def register_error_handlers(app):
    """Register error handlers"""

    @app.errorhandler(DomainError)
    def domain_error(error):
        db.session.rollback()
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(IntegrityError)
    def integrity_error(error):
        db.session.rollback()
        app.logger.warning(f'Integrity violation: {error.orig}')
        return jsonify({'error': 'Conflict', 'message': str(error.orig)}), 409

    @app.errorhandler(400)
    def bad_request(error):
        return jsonify({'error': 'Bad Request', 'message': str(error)}), 400

    @app.errorhandler(401)
    def unauthorized(error):
        return jsonify({'error': 'Unauthorized', 'message': 'Authentication required'}), 401

    @app.errorhandler(403)
    def forbidden(error):
        return jsonify({'error': 'Forbidden', 'message': 'Insufficient permissions'}), 403

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({'error': 'Not Found', 'message': 'Resource not found'}), 404

    @app.errorhandler(429)
    def rate_limited(error):
        return jsonify({'error': 'Too Many Requests', 'message': str(error.description)}), 429

    @app.errorhandler(500)
    def internal_error(error):
        db.session.rollback()
        return jsonify({'error': 'Internal Server Error', 'message': 'An unexpected error occurred'}), 500

    @app.errorhandler(Exception)
    def handle_exception(error):
        if isinstance(error, HTTPException):
            return jsonify({'error': error.name, 'message': error.description}), error.code
        db.session.rollback()
        app.logger.error(f'Unhandled exception: {str(error)}')
        return jsonify({'error': 'Internal Server Error', 'message': 'An unexpected error occurred'}), 500
