# extensions.py
"""
Flask extensions initialization.
This file initializes all Flask extensions to avoid circular imports.
Extensions are initialized here and then bound to the app in the application factory.
"""

import logging

from flask import session
from flask_wtf.csrf import CSRFProtect
from flask_login import LoginManager

from music_school.services.enrollment_reconciler import EnrollmentReconciler
from music_school.utils.api_client import ApiClient, ApiError

# Initialize extensions without app binding
csrf = CSRFProtect()
login_manager = LoginManager()
api_client = ApiClient()
reconciler = EnrollmentReconciler(api_client)

logger = logging.getLogger(__name__)


def check_api_health():
    """
    Check whether the external REST API answers its health endpoint.

    Returns:
        tuple: (bool, str) indicating health status and message
    """
    try:
        api_client.get('/health')
        return True, "API is reachable"
    except ApiError as e:
        logger.error(f"API health check failed: {e}")
        return False, f"API check failed: {str(e)}"


def init_extensions(app):
    """
    Initialize all extensions with proper order and configuration.

    Args:
        app: Flask application instance
    """
    # Step 1: Bind the REST client to the configured base URL
    api_client.init_app(app)

    # Step 2: Initialize Flask-Login (requires SECRET_KEY from config)
    login_manager.init_app(app)

    # Step 3: Configure Flask-Login settings
    login_manager.login_view = 'auth.sign_in'
    login_manager.login_message = 'Please sign in to access this page.'
    login_manager.login_message_category = 'info'
    login_manager.session_protection = 'basic'

    # Step 4: Initialize CSRF protection (after login manager)
    csrf.init_app(app)

    # Step 5: Rebuild the viewer from the session on each request
    @login_manager.user_loader
    def load_user(user_id):
        from music_school.models import SessionUser

        user = SessionUser.from_session(session.get(SessionUser.SESSION_KEY))
        if user is None or user.id != str(user_id):
            return None
        return user

    app.logger.info("Extensions initialized successfully in correct order")
