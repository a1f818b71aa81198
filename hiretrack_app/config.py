"""
Configuration management for HireTrack.

Values come from the environment (a local .env is loaded first). Pick a
class with FLASK_ENV (see wsgi.py) or the name passed to create_app().
"""
import os
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
LOCAL_DATABASE = 'sqlite:///' + os.path.join(BASE_DIR, 'instance', 'hiretrack.db')


def env(name, default=None):
    """Environment value with surrounding whitespace removed; blank counts as unset."""
    value = (os.environ.get(name) or '').strip()
    return value or default


def env_flag(name, default=False):
    value = env(name)
    if value is None:
        return default
    return value.lower() in ('1', 'true', 'yes', 'on')


class Config:
    """Settings shared by every environment."""
    SECRET_KEY = env('SECRET_KEY') or env('FLASK_SECRET_KEY')
    LOG_LEVEL = env('LOG_LEVEL', 'INFO').upper()

    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {'pool_pre_ping': True, 'pool_recycle': 300}

    # Bearer tokens live for a week
    TOKEN_MAX_AGE = 7 * 24 * 60 * 60

    # Portfolios and offer letters may be up to 50MB
    MAX_CONTENT_LENGTH = 50 * 1024 * 1024
    UPLOAD_FOLDER = env('UPLOAD_FOLDER', os.path.join(BASE_DIR, 'uploads'))

    VIRUS_SCAN_ENABLED = env_flag('VIRUS_SCAN_ENABLED', True)
    CLAMAV_SOCKET = env('CLAMAV_SOCKET', '/var/run/clamav/clamd.ctl')
    CLAMAV_TIMEOUT = int(env('CLAMAV_TIMEOUT', '30'))

    PUBLIC_BASE_URL = env('PUBLIC_BASE_URL', 'http://localhost:5000').rstrip('/')
    RESEND_API_KEY = env('RESEND_API_KEY')
    EMAIL_FROM = env('EMAIL_FROM', 'HireTrack <onboarding@resend.dev>')
    GOOGLE_SAFE_BROWSING_KEY = env('GOOGLE_SAFE_BROWSING_KEY')


class DevelopmentConfig(Config):
    DEBUG = True
    SECRET_KEY = Config.SECRET_KEY or 'hiretrack-dev-key'
    SQLALCHEMY_DATABASE_URI = env('DATABASE_URL', LOCAL_DATABASE)


class ProductionConfig(Config):
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = env('DATABASE_URL', LOCAL_DATABASE)
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    SESSION_COOKIE_SECURE = env_flag('SESSION_COOKIE_SECURE')
    PERMANENT_SESSION_LIFETIME = 24 * 60 * 60

    @staticmethod
    def init_app(app):
        # Sessions and bearer tokens are signed with this key
        if not app.config.get('SECRET_KEY'):
            raise RuntimeError('SECRET_KEY must be set in production')


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret-key'
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SQLALCHEMY_ENGINE_OPTIONS = {}
    RESEND_API_KEY = None
    GOOGLE_SAFE_BROWSING_KEY = None


config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig,
}
