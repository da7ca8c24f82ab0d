import os
from datetime import timedelta
from dotenv import load_dotenv

load_dotenv()


def _split_emails(raw):
    """Parse a comma separated email list into lowercase addresses."""
    return tuple(e.strip().lower() for e in (raw or '').split(',') if e.strip())


class Config:
    """Base configuration class with all settings as static attributes."""

    # Core configuration
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'your-secret-key-here'
    DEBUG = os.environ.get('FLASK_DEBUG', 'false').lower() == 'true'
    VERSION = '1.0.0'

    # Session settings
    PERMANENT_SESSION_LIFETIME = timedelta(hours=2)
    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    SESSION_REFRESH_EACH_REQUEST = True

    # External REST API
    API_BASE_URL = os.environ.get('API_BASE_URL', 'http://localhost:4000/api').rstrip('/')
    API_TIMEOUT = float(os.environ.get('API_TIMEOUT', 10))

    # Accounts granted the admin role on sign-in
    ADMIN_EMAILS = _split_emails(os.environ.get('ADMIN_EMAILS') or os.environ.get('ADMIN_EMAIL'))

    # Site settings
    SITE_NAME = os.environ.get('SITE_NAME', 'Themusinest.com')
    CONTACT_EMAIL = os.environ.get('CONTACT_EMAIL', 'support@themusinest.com')
    CONTACT_PHONE = os.environ.get('CONTACT_PHONE', '+91-98765-43210')
    CURRENCY_SYMBOL = '₹'

    # Forms and listings
    PHONE_MAX_LENGTH = 17
    FEATURED_COURSE_LIMIT = 6
    LOG_TO_FILE = True


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    SESSION_COOKIE_SECURE = False


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False

    # Ensure secret key is set in production
    SECRET_KEY = os.environ.get('SECRET_KEY')

    SYSLOG_SERVER = os.environ.get('SYSLOG_SERVER')

    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'


class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    SECRET_KEY = 'testing-secret-key'
    WTF_CSRF_ENABLED = False
    SESSION_COOKIE_SECURE = False
    LOG_TO_FILE = False

    API_BASE_URL = 'http://api.test/api'
    API_TIMEOUT = 2
    ADMIN_EMAILS = ('admin@themusinest.com',)


# Configuration dictionary
config_by_name = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig
}

