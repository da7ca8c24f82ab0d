# __init__.py
"""
Application factory for the music school website and admin console.
This module creates and configures the Flask application using the application factory pattern.
"""

import os
import logging
from datetime import datetime
from logging.handlers import RotatingFileHandler

from flask import Flask, jsonify, render_template, request
from dotenv import load_dotenv

from music_school.config import config_by_name
from music_school.extensions import init_extensions, check_api_health


def setup_logging(app):
    """
    Configure structured logging for the application.

    Args:
        app: Flask application instance
    """
    # Create logs directory if it doesn't exist
    log_dir = os.path.join(app.root_path, 'logs')
    os.makedirs(log_dir, exist_ok=True)

    # Configure log format
    log_format = logging.Formatter(
        '%(asctime)s %(levelname)s %(name)s %(threadName)s : %(message)s'
    )

    # File handler with rotation
    file_handler = RotatingFileHandler(
        os.path.join(log_dir, 'app.log'),
        maxBytes=1024 * 1024 * 10,  # 10MB
        backupCount=5
    )
    file_handler.setFormatter(log_format)
    file_handler.setLevel(logging.INFO)

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(log_format)
    console_handler.setLevel(logging.DEBUG if app.debug else logging.INFO)

    app.logger.setLevel(logging.DEBUG if app.debug else logging.INFO)
    app.logger.addHandler(file_handler)
    app.logger.addHandler(console_handler)

    # Service loggers share the app handlers
    for name in ('api_client', 'auth_service', 'admin_service', 'catalog_service',
                 'form_state', 'enrollment_reconciler', 'submission_service'):
        service_logger = logging.getLogger(name)
        service_logger.setLevel(logging.DEBUG if app.debug else logging.INFO)
        service_logger.addHandler(file_handler)
        service_logger.addHandler(console_handler)

    # Quiet per-request connection logs from requests
    logging.getLogger('urllib3').setLevel(logging.WARNING)


def register_blueprints(app):
    """
    Register all application blueprints.

    Args:
        app: Flask application instance
    """
    try:
        # Import blueprints here to avoid circular imports
        from .controllers.main import main_bp
        from .controllers.auth import auth_bp
        from .controllers.admin import admin_bp
        from .controllers.api import api_bp

        # Register blueprints with their URL prefixes
        app.register_blueprint(main_bp)
        app.register_blueprint(auth_bp, url_prefix='/auth')
        app.register_blueprint(admin_bp, url_prefix='/admin')
        app.register_blueprint(api_bp)

        app.logger.info("All blueprints registered successfully")

    except ImportError as e:
        app.logger.error(f"Failed to import blueprint: {str(e)}")
        raise


def _wants_json():
    return request.path.startswith('/api/') or request.path.startswith('/health')


def register_error_handlers(app):
    """
    Register global error handlers.

    JSON callers (``/api/*`` and ``/health*``) get JSON bodies, browsers get
    an error page.

    Args:
        app: Flask application instance
    """

    @app.errorhandler(404)
    def handle_404(e):
        if _wants_json():
            return jsonify({'error': 'Resource not found'}), 404
        return render_template('errors/error.html', code=404, message='Page not found'), 404

    @app.errorhandler(403)
    def handle_403(e):
        if _wants_json():
            return jsonify({'error': 'Access forbidden'}), 403
        return render_template('errors/error.html', code=403, message='Access forbidden'), 403

    @app.errorhandler(500)
    def handle_500(e):
        app.logger.error(f"Internal server error: {str(e)}")
        if _wants_json():
            return jsonify({'error': 'Internal server error'}), 500
        return render_template('errors/error.html', code=500, message='Something went wrong'), 500


def register_health_checks(app):
    """
    Register health check endpoints.

    Args:
        app: Flask application instance
    """

    @app.route('/health')
    def health_check():
        """Basic health check endpoint."""
        return jsonify({
            'status': 'ok',
            'timestamp': datetime.now().isoformat(),
            'version': app.config.get('VERSION', '1.0.0')
        })

    @app.route('/health/api')
    def api_health_check():
        """External REST API health check endpoint."""
        healthy, message = check_api_health()
        body = {
            'status': 'healthy' if healthy else 'unhealthy',
            'message': message,
            'api_base_url': app.config['API_BASE_URL'],
            'timestamp': datetime.now().isoformat()
        }
        return jsonify(body), (200 if healthy else 503)


def register_template_context(app):
    """Expose site-wide settings to every template."""

    @app.context_processor
    def inject_site():
        return {
            'site_name': app.config['SITE_NAME'],
            'contact_email': app.config['CONTACT_EMAIL'],
            'contact_phone': app.config['CONTACT_PHONE'],
            'phone_max_length': app.config['PHONE_MAX_LENGTH'],
            'current_year': datetime.now().year
        }


def create_app(config_name=None):
    """
    Application factory function.

    Args:
        config_name (str): Configuration name ('development', 'production', 'testing')

    Returns:
        Flask: Configured Flask application instance
    """
    # Load environment variables
    load_dotenv()

    # Create Flask application
    app = Flask(__name__)

    # Load configuration
    config_name = config_name or os.environ.get('FLASK_CONFIG') or os.environ.get('FLASK_ENV', 'development')
    app.config.from_object(config_by_name[config_name])

    if not app.config.get('SECRET_KEY'):
        raise RuntimeError("SECRET_KEY must be set in production")

    # Setup logging first
    if app.config.get('LOG_TO_FILE') and not app.testing:
        setup_logging(app)
    app.logger.info(f"Starting application with config: {config_name}")

    # Initialize extensions
    init_extensions(app)

    # Register components
    register_blueprints(app)
    register_error_handlers(app)
    register_health_checks(app)
    register_template_context(app)

    # Register CLI commands
    from .cli import register_cli_commands
    register_cli_commands(app)

    app.logger.info("Application factory completed successfully")

    return app
