# config/settings.py
"""
Application configuration for the contact relay
"""

import os
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parent.parent


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() in ('true', '1', 'yes', 'on')


class BaseConfig:
    """Settings shared by every environment"""

    # Per-request mail configuration file and log root
    PROJECT_ROOT = str(ROOT_DIR)
    CONTACT_ENV_FILE = str(ROOT_DIR / '.env')

    # Mail transports
    MAIL_CLIENT_ENABLED = True
    SENDMAIL_PATH = '/usr/sbin/sendmail'
    SMTP_TIMEOUT = 60

    LOG_LEVEL = 'INFO'

    # Form posts are small
    MAX_CONTENT_LENGTH = 1024 * 1024  # 1MB

    # Security headers
    SECURITY_HEADERS = {
        'X-Content-Type-Options': 'nosniff',
        'X-Frame-Options': 'DENY',
        'Referrer-Policy': 'strict-origin-when-cross-origin',
        'Permissions-Policy': 'camera=(), microphone=(), geolocation=()'
    }


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    LOG_LEVEL = 'DEBUG'


class TestingConfig(BaseConfig):
    TESTING = True
    MAIL_CLIENT_ENABLED = False


class ProductionConfig(BaseConfig):
    SECURITY_HEADERS = dict(
        BaseConfig.SECURITY_HEADERS,
        **{'Strict-Transport-Security': 'max-age=31536000; includeSubDomains'}
    )


CONFIGS = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
}


def environment_overrides() -> dict:
    """Settings taken from process environment variables"""
    overrides = {}

    if os.environ.get('CONTACT_ENV_FILE'):
        overrides['CONTACT_ENV_FILE'] = os.environ['CONTACT_ENV_FILE']
    if os.environ.get('CONTACT_PROJECT_ROOT'):
        overrides['PROJECT_ROOT'] = os.environ['CONTACT_PROJECT_ROOT']
    if os.environ.get('MAIL_CLIENT_ENABLED'):
        overrides['MAIL_CLIENT_ENABLED'] = _env_flag('MAIL_CLIENT_ENABLED', 'true')
    if os.environ.get('SENDMAIL_PATH'):
        overrides['SENDMAIL_PATH'] = os.environ['SENDMAIL_PATH']
    if os.environ.get('SMTP_TIMEOUT'):
        overrides['SMTP_TIMEOUT'] = float(os.environ['SMTP_TIMEOUT'])
    if os.environ.get('LOG_LEVEL'):
        overrides['LOG_LEVEL'] = os.environ['LOG_LEVEL']

    overrides['VERSION'] = os.environ.get('APP_VERSION', '1.0.0')
    return overrides
