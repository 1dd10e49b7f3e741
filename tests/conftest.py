"""
Shared fixtures for the contact relay tests.

The app runs with the real blueprint and dispatcher; only the two mail
transports are replaced by recording fakes so no mail leaves the machine.
Mail configuration and logs live under a temp directory.
"""

from __future__ import annotations

import pytest

from app import create_app
from core.mail_dispatcher import FailureKind, MailDispatcher, SendResult


class FakePrimary:
    """Records messages handed to the SMTP client transport"""

    name = 'fake-smtp'

    def __init__(self, error=None):
        self.error = error
        self.sent = []

    def send(self, mail, env):
        self.sent.append((mail, dict(env)))
        if self.error:
            return SendResult.failure(FailureKind.PRIMARY_TRANSPORT, self.error)
        return SendResult.ok('sent')


class FakeFallback:
    """Records direct-send calls and reports a fixed outcome"""

    name = 'fake-sendmail'

    def __init__(self, succeed=True):
        self.succeed = succeed
        self.calls = []

    def send(self, to, subject, body, headers):
        self.calls.append({'to': to, 'subject': subject, 'body': body, 'headers': headers})
        return self.succeed


VALID_FORM = {
    'name': 'Ada Lovelace',
    'email': 'ada@example.com',
    'subject': 'Engines',
    'message': 'Hello there',
}


@pytest.fixture
def project_root(tmp_path):
    return tmp_path


@pytest.fixture
def env_file(project_root):
    """Writes the per-request mail configuration file"""
    path = project_root / '.env'

    def write(text: str):
        path.write_text(text, encoding='utf-8')
        return path

    write("MAIL_TO=owner@example.com\nLOG_FILE=contact.log\n")
    return write


@pytest.fixture
def fallback():
    return FakeFallback()


@pytest.fixture
def app(project_root, env_file, fallback):
    app = create_app('testing')
    app.config.update({
        'CONTACT_ENV_FILE': str(project_root / '.env'),
        'PROJECT_ROOT': str(project_root),
    })
    app.mail_dispatcher = MailDispatcher(fallback=fallback)
    return app


@pytest.fixture
def client(app):
    with app.test_client() as client:
        yield client


@pytest.fixture
def log_path(project_root):
    return project_root / 'contact.log'


@pytest.fixture
def make_primary():
    return FakePrimary


@pytest.fixture
def make_fallback():
    return FakeFallback


@pytest.fixture
def valid_form():
    return dict(VALID_FORM)
