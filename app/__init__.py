"""
Flask Application Factory
"""

from flask import Flask, jsonify
from config import config
from extensions import db, migrate, jwt, cors, limiter
from app.services.availability_service import init_availability
from app.services.change_feed import ChangeFeed
from app.utils.errors import AvailabilityError, BookingConflictError, BookingStateError
import os


def create_app(config_name=None, pusher_client=None):
    """Application factory pattern"""

    if config_name is None:
        config_name = os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)

    # Load configuration
    app.config.from_object(config[config_name])

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    cors.init_app(app, resources={
        r"/api/*": {
            "origins": app.config['CORS_ORIGINS'],
            "methods": ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
            "allow_headers": ["Content-Type", "Authorization"]
        }
    })
    limiter.init_app(app)

    # Change feed first: the availability service subscribes to it
    change_feed = ChangeFeed(app, pusher_client=pusher_client)
    init_availability(app, change_feed)

    # Register blueprints
    register_blueprints(app)

    # Register error handlers
    register_error_handlers(app)

    # Create database tables
    with app.app_context():
        db.create_all()

    return app


def register_blueprints(app):
    """Register Flask blueprints"""
    from app.api.availability import availability_bp
    from app.api.blocked_dates import blocked_dates_bp
    from app.api.bookings import bookings_bp

    app.register_blueprint(availability_bp, url_prefix='/api/availability')
    app.register_blueprint(blocked_dates_bp, url_prefix='/api/blocked-dates')
    app.register_blueprint(bookings_bp, url_prefix='/api/bookings')

    # Health check endpoint
    @app.route('/health')
    def health_check():
        return jsonify({'status': 'healthy', 'message': 'API is running'}), 200

    @app.route('/')
    def index():
        return jsonify({
            'message': 'Campervan Admin API',
            'version': '1.0.0',
            'endpoints': {
                'availability': '/api/availability',
                'blocked_dates': '/api/blocked-dates',
                'bookings': '/api/bookings'
            }
        }), 200


def register_error_handlers(app):
    """Register error handlers"""

    @app.errorhandler(AvailabilityError)
    def availability_error(error):
        return jsonify({'error': 'Bad Request', 'message': str(error)}), 400

    @app.errorhandler(BookingStateError)
    def booking_state_error(error):
        return jsonify({'error': 'Bad Request', 'message': str(error)}), 400

    @app.errorhandler(BookingConflictError)
    def booking_conflict(error):
        return jsonify({
            'error': 'Conflict',
            'message': str(error),
            'conflicts': [conflict.to_dict() for conflict in error.conflicts]
        }), 409

    @app.errorhandler(400)
    def bad_request(error):
        return jsonify({'error': 'Bad Request', 'message': str(error)}), 400

    @app.errorhandler(401)
    def unauthorized(error):
        return jsonify({'error': 'Unauthorized', 'message': 'Authentication required'}), 401

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
