# app.py
"""
Flask Application Factory for the Contact Form Relay

Wires together:
- The contact endpoint blueprint
- Primary (SMTP client) and fallback (sendmail) mail transports
- Logging, security headers and JSON error handling
- A health check endpoint
"""

import os
import logging
from datetime import datetime, timezone

from flask import Flask
from werkzeug.exceptions import HTTPException

from api.contact import contact_bp
from api.responses import method_not_allowed, write_json
from config.settings import CONFIGS, environment_overrides
from core.mail_dispatcher import MailDispatcher
from middleware.security import init_security_headers
from services.mail_transport import SendmailTransport, SMTPClientTransport


def setup_logging(app: Flask) -> None:
    """
    Configure application logging

    A single stream handler on the app logger; third-party loggers are
    quieted outside debug mode.
    """
    app.logger.handlers.clear()

    formatter = logging.Formatter(
        fmt='%(asctime)s %(name)-20s %(levelname)-8s %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    log_level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    app.logger.setLevel(log_level)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    stream_handler.setLevel(log_level)
    app.logger.addHandler(stream_handler)

    for name in ('api', 'core', 'services'):
        package_logger = logging.getLogger(name)
        package_logger.setLevel(log_level)
        if not package_logger.handlers:
            package_logger.addHandler(stream_handler)

    if not app.debug:
        logging.getLogger('werkzeug').setLevel(logging.WARNING)
        logging.getLogger('aiosmtplib').setLevel(logging.WARNING)


def configure_mail(app: Flask) -> MailDispatcher:
    """Select the mail transports available to this process"""
    fallback = SendmailTransport(app.config['SENDMAIL_PATH'])

    primary = None
    if app.config.get('MAIL_CLIENT_ENABLED', True):
        primary = SMTPClientTransport(
            timeout=app.config.get('SMTP_TIMEOUT', 60),
            local_transport=SendmailTransport(app.config['SENDMAIL_PATH'])
        )

    app.logger.info(
        f"Mail transports: primary={primary.name if primary else 'none'}, fallback={fallback.name}"
    )
    return MailDispatcher(fallback=fallback, primary=primary)


def configure_error_handlers(app: Flask) -> None:
    """JSON error responses in the same shape as contact results"""
    @app.errorhandler(404)
    def not_found(error):
        return write_json({'success': False, 'error': 'Not found'}, 404)

    @app.errorhandler(405)
    def method_error(error):
        return method_not_allowed()

    @app.errorhandler(Exception)
    def handle_exception(e):
        """Handle unexpected exceptions"""
        if isinstance(e, HTTPException):
            return write_json({'success': False, 'error': e.name}, e.code)

        app.logger.error(f"Unhandled exception: {e}", exc_info=True)
        return write_json({'success': False, 'error': 'Internal server error'}, 500)


def configure_health_checks(app: Flask) -> None:
    @app.route('/health')
    def health_check():
        """Basic health check endpoint"""
        return write_json({
            'status': 'healthy',
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'version': app.config.get('VERSION', '1.0.0')
        })


def create_app(config_name: str = None) -> Flask:
    """
    Flask application factory

    Args:
        config_name: Configuration environment ('development', 'testing', 'production')

    Returns:
        Configured Flask application instance
    """
    app = Flask(__name__)

    config_name = config_name or os.environ.get('FLASK_ENV', 'production')
    app.config.from_object(CONFIGS.get(config_name, CONFIGS['production']))
    app.config.update(environment_overrides())

    setup_logging(app)
    app.logger.info(f"Starting contact relay in {config_name} mode")

    app.mail_dispatcher = configure_mail(app)

    app.register_blueprint(contact_bp)
    configure_error_handlers(app)
    configure_health_checks(app)
    init_security_headers(app)

    return app


# Production WSGI application
application = create_app()

if __name__ == '__main__':
    # Development server
    app = create_app('development')
    app.run(host='0.0.0.0', port=int(os.environ.get('PORT', 5000)), debug=True)
