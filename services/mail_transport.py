# services/mail_transport.py
"""
Mail transports for the contact relay

- SMTPClientTransport: full client built on aiosmtplib, submits to SMTP_HOST
  with credentials and transport security when configured, otherwise hands
  the complete message to local sendmail
- SendmailTransport: minimal direct send through the local sendmail binary
"""

import asyncio
import logging
import os
import subprocess
import uuid
from email.header import Header
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr, formatdate
from typing import Any, Dict, Mapping, Optional

import aiosmtplib

from core.mail_dispatcher import (
    FailureKind, OutgoingMail, SendResult, TransportUnavailableError
)

logger = logging.getLogger(__name__)

IMPLICIT_TLS_MODES = ('ssl', 'smtps')
STARTTLS_MODES = ('tls', 'starttls')
MAX_PORT = 65535


def single_line(value: str) -> str:
    """Collapse line breaks so a value is safe inside a header"""
    return ' '.join(value.splitlines())


def parse_port(value: Optional[str]) -> Optional[int]:
    """Integer port from configuration, None when unset or not a valid port"""
    if not value:
        return None
    try:
        port = int(value.strip())
    except ValueError:
        logger.warning(f"Ignoring non-numeric SMTP_PORT: {value!r}")
        return None
    if not 0 < port <= MAX_PORT:
        logger.warning(f"Ignoring out-of-range SMTP_PORT: {value!r}")
        return None
    return port


def smtp_settings(env: Mapping[str, str], timeout: float = 60) -> Optional[Dict[str, Any]]:
    """
    Map mail configuration onto aiosmtplib.send keyword arguments

    Returns None without SMTP_HOST: the client then uses its default
    transport, local sendmail.
    """
    host = (env.get('SMTP_HOST') or '').strip()
    if not host:
        return None

    settings: Dict[str, Any] = {
        'hostname': host,
        'timeout': timeout,
    }

    username = env.get('SMTP_USER') or ''
    if username:
        settings['username'] = username
        settings['password'] = env.get('SMTP_PASS') or ''

    port = parse_port(env.get('SMTP_PORT'))
    if port is not None:
        settings['port'] = port

    secure = (env.get('SMTP_SECURE') or '').strip().lower()
    if secure in IMPLICIT_TLS_MODES:
        settings['use_tls'] = True
    elif secure in STARTTLS_MODES:
        settings['start_tls'] = True

    return settings


def build_mime_message(mail: OutgoingMail) -> MIMEMultipart:
    """Plain-text message with identical body and alternative body"""
    msg = MIMEMultipart('alternative')

    msg['Subject'] = single_line(mail.subject)
    msg['From'] = formataddr((mail.from_name, mail.from_address))
    msg['To'] = mail.to
    msg['Reply-To'] = formataddr((single_line(mail.reply_to_name), mail.reply_to))
    msg['Date'] = formatdate(localtime=True)
    domain = mail.from_address.rpartition('@')[2] or 'localhost'
    msg['Message-ID'] = f"<{uuid.uuid4()}@{domain}>"
    msg['X-Mailer'] = 'Contact Relay'

    msg.attach(MIMEText(mail.body, 'plain', 'utf-8'))
    msg.attach(MIMEText(mail.body, 'plain', 'utf-8'))

    return msg


class SendmailTransport:
    """Fallback transport: pipe the message to the local sendmail binary"""

    name = 'sendmail'

    def __init__(self, sendmail_path: str = '/usr/sbin/sendmail'):
        self.sendmail_path = sendmail_path

    def build_raw_message(self, to: str, subject: str, body: str, headers: str) -> bytes:
        subject = single_line(subject)
        encoded_subject = subject if subject.isascii() else Header(subject, 'utf-8').encode()
        lines = [f"To: {to}", f"Subject: {encoded_subject}"]
        if headers:
            lines.append(headers)
        raw = "\r\n".join(lines) + "\r\n\r\n" + body
        return raw.encode('utf-8')

    def send(self, to: str, subject: str, body: str, headers: str) -> bool:
        """
        Best-effort direct send

        Returns:
            True when sendmail accepted the message, False otherwise
        """
        try:
            self._run(self.build_raw_message(to, subject, body, headers))
        except TransportUnavailableError as e:
            logger.debug(f"Direct send unavailable: {e}")
            return False
        except subprocess.CalledProcessError as e:
            logger.debug(f"sendmail exited with status {e.returncode}")
            return False
        return True

    def send_message(self, msg: MIMEMultipart) -> None:
        """Hand a complete MIME message to sendmail, raising on failure"""
        self._run(msg.as_bytes())

    def _run(self, raw: bytes) -> None:
        if not os.access(self.sendmail_path, os.X_OK):
            raise TransportUnavailableError(f"{self.sendmail_path} is not executable")
        try:
            subprocess.run(
                [self.sendmail_path, '-t', '-i'],
                input=raw,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                check=True
            )
        except OSError as e:
            raise TransportUnavailableError(str(e)) from e


class SMTPClientTransport:
    """
    Primary transport: full mail client

    Submits over SMTP when SMTP_HOST is configured; otherwise the complete
    message goes through the local sendmail binary, the client's default.
    """

    name = 'smtp'

    def __init__(self, timeout: float = 60, local_transport: Optional[SendmailTransport] = None):
        self.timeout = timeout
        self.local_transport = local_transport or SendmailTransport()

    def send(self, mail: OutgoingMail, env: Mapping[str, str]) -> SendResult:
        """Deliver a message, reporting any client error as a failed result"""
        try:
            msg = build_mime_message(mail)
            settings = smtp_settings(env, self.timeout)
            if settings is None:
                logger.debug("Submitting contact message through local sendmail")
                self.local_transport.send_message(msg)
            else:
                logger.debug(f"Submitting contact message to {settings['hostname']}")
                asyncio.run(self._async_send(msg, settings))
        except aiosmtplib.SMTPException as e:
            return SendResult.failure(FailureKind.PRIMARY_TRANSPORT, str(e))
        except subprocess.CalledProcessError as e:
            return SendResult.failure(FailureKind.PRIMARY_TRANSPORT, f"sendmail exited with status {e.returncode}")
        except Exception as e:
            return SendResult.failure(FailureKind.PRIMARY_TRANSPORT, f"{type(e).__name__}: {e}")

        return SendResult.ok('sent')

    async def _async_send(self, msg: MIMEMultipart, settings: Dict[str, Any]):
        return await aiosmtplib.send(msg, **settings)
