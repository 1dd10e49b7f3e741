"""Tests for the application factory and its default configuration."""

from pathlib import Path

import pytest

import app as app_module
from app import create_app
from services.mail_transport import SMTPClientTransport

ROOT = Path(app_module.__file__).resolve().parent


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in ('CONTACT_ENV_FILE', 'CONTACT_PROJECT_ROOT', 'MAIL_CLIENT_ENABLED',
                 'SENDMAIL_PATH', 'SMTP_TIMEOUT', 'FLASK_ENV'):
        monkeypatch.delenv(name, raising=False)


def test_module_exposes_wsgi_application():
    assert app_module.application.mail_dispatcher is not None


def test_default_paths_point_at_project_root():
    app = create_app('testing')

    assert app.config['PROJECT_ROOT'] == str(ROOT)
    assert app.config['CONTACT_ENV_FILE'] == str(ROOT / '.env')
    assert app.config['TESTING'] is True


def test_testing_config_has_no_primary():
    app = create_app('testing')

    assert app.mail_dispatcher.has_primary is False
    assert app.mail_dispatcher.fallback.sendmail_path == '/usr/sbin/sendmail'


def test_production_config_has_smtp_primary():
    app = create_app('production')

    primary = app.mail_dispatcher.primary
    assert app.mail_dispatcher.has_primary is True
    assert isinstance(primary, SMTPClientTransport)
    assert primary.timeout == 60
    assert primary.local_transport.sendmail_path == app.config['SENDMAIL_PATH']


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv('CONTACT_ENV_FILE', str(tmp_path / 'mail.env'))
    monkeypatch.setenv('MAIL_CLIENT_ENABLED', 'false')
    monkeypatch.setenv('SMTP_TIMEOUT', '5')

    app = create_app('production')

    assert app.config['CONTACT_ENV_FILE'] == str(tmp_path / 'mail.env')
    assert app.config['SMTP_TIMEOUT'] == 5.0
    assert app.mail_dispatcher.has_primary is False
