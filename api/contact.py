# api/contact.py
"""
Contact form endpoint

Accepts a POSTed form (name, email, subject, message), validates it and
relays it by email. Business failures answer 200 with success=false; only
a wrong HTTP method answers 405.
"""

import logging
from urllib.parse import urlsplit

from flask import Blueprint, current_app, request

from api.responses import method_not_allowed, write_json
from core.contact_log import ContactLog
from core.env_loader import load_env
from core.validation import validate_submission

contact_bp = Blueprint('contact', __name__)
logger = logging.getLogger(__name__)

ALL_METHODS = ['GET', 'HEAD', 'POST', 'PUT', 'PATCH', 'DELETE', 'OPTIONS']


def request_host_name() -> str:
    """Host name the client addressed, without any port"""
    try:
        return urlsplit(f"//{request.host}").hostname or ''
    except ValueError:
        return ''


@contact_bp.route('/api/contact', methods=ALL_METHODS, provide_automatic_options=False)
@contact_bp.route('/send_contact', methods=ALL_METHODS, provide_automatic_options=False)
def send_contact():
    """
    Relay a contact form submission

    Form fields:
        name, email, message: required
        subject: optional, defaults when absent
    """
    if request.method != 'POST':
        return method_not_allowed()

    env = load_env(current_app.config['CONTACT_ENV_FILE'])
    log = ContactLog(env, current_app.config['PROJECT_ROOT'])

    outcome = validate_submission(request.form)
    if not outcome.is_valid:
        logger.info(f"Contact submission rejected: {', '.join(outcome.errors)}")
        return write_json({'success': False, 'errors': outcome.errors})

    server_name = request_host_name() or 'localhost'
    result = current_app.mail_dispatcher.dispatch(
        outcome.submission,
        env,
        log,
        server_name=server_name
    )

    return write_json(result.to_payload())
