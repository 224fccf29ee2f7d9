import os
from datetime import timedelta
from dotenv import load_dotenv

load_dotenv()

class Config:
    """Base configuration"""
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # JWT Configuration
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY', 'jwt-secret-key-change-in-production')
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=12)
    JWT_TOKEN_LOCATION = ['headers']
    JWT_HEADER_NAME = 'Authorization'
    JWT_HEADER_TYPE = 'Bearer'

    # Pusher Configuration (change feed for open dashboards)
    PUSHER_APP_ID = os.getenv('PUSHER_APP_ID')
    PUSHER_KEY = os.getenv('PUSHER_KEY')
    PUSHER_SECRET = os.getenv('PUSHER_SECRET')
    PUSHER_CLUSTER = os.getenv('PUSHER_CLUSTER', 'eu')
    PUSHER_CHANNEL = os.getenv('PUSHER_CHANNEL', 'admin-changes')

    # Rate limiting
    RATELIMIT_ENABLED = os.getenv('RATELIMIT_ENABLED', 'True') == 'True'
    RATELIMIT_STORAGE_URI = os.getenv('RATELIMIT_STORAGE_URI', 'memory://')

    # Bookings
    REJECT_CONFLICTING_BOOKINGS = os.getenv('REJECT_CONFLICTING_BOOKINGS', 'True') == 'True'
    DEFAULT_CHANGED_BY = os.getenv('DEFAULT_CHANGED_BY', 'contact@coconutroads.com')

    # Seconds before a cached availability snapshot is reloaded (0 disables)
    AVAILABILITY_SNAPSHOT_MAX_AGE = int(os.getenv('AVAILABILITY_SNAPSHOT_MAX_AGE', '30'))

    SQLALCHEMY_ENGINE_OPTIONS = {
    'pool_pre_ping': True,
    'pool_recycle': 280,
}

    CORS_ORIGINS = [
    os.getenv('FRONTEND_URL', 'http://localhost:3000'),
    'http://127.0.0.1:3000',
]


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    TESTING = False
    SQLALCHEMY_DATABASE_URI = os.getenv('SQLALCHEMY_DATABASE_URI', 'sqlite:///campervans.db')
    SQLALCHEMY_ECHO = True


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    TESTING = False
    SQLALCHEMY_DATABASE_URI = os.getenv('SQLALCHEMY_DATABASE_URI')
    SQLALCHEMY_ECHO = False

    # Stronger session security for production
    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'


class TestingConfig(Config):
    """Testing configuration"""
    DEBUG = True
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SQLALCHEMY_ENGINE_OPTIONS = {}
    SQLALCHEMY_ECHO = False
    RATELIMIT_ENABLED = False
    PUSHER_APP_ID = None
    REJECT_CONFLICTING_BOOKINGS = True


# Configuration dictionary
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
