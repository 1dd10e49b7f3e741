# core/mail_dispatcher.py
"""
Mail dispatch for validated contact submissions

Delivery is attempted through the full SMTP client transport when one was
made available at startup. A failed or absent primary transport routes to
the minimal direct-send fallback. Both transports report a result instead
of raising, so the fallback decision is explicit here.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from core.contact_log import ContactLog
from core.validation import ContactSubmission

logger = logging.getLogger(__name__)

FROM_DISPLAY_NAME = 'Website Contact'

MESSAGE_SENT = 'Message sent'
MESSAGE_SENT_FALLBACK = 'Message sent (mail fallback)'
RECIPIENT_NOT_CONFIGURED = 'Recipient (MAIL_TO) not configured.'
UNABLE_TO_SEND = 'Unable to send message.'


class ContactRelayError(Exception):
    """Base exception for contact relay operations"""
    pass


class TransportUnavailableError(ContactRelayError):
    """A mail transport could not be reached or started"""
    pass


class FailureKind(Enum):
    """Why a send attempt did not succeed"""
    CONFIGURATION = "configuration"
    PRIMARY_TRANSPORT = "primary_transport"
    DELIVERY = "delivery"


@dataclass(frozen=True)
class SendResult:
    """Outcome of a send attempt"""
    success: bool
    message: Optional[str] = None
    kind: Optional[FailureKind] = None
    detail: Optional[str] = None

    @classmethod
    def ok(cls, message: str) -> 'SendResult':
        return cls(success=True, message=message)

    @classmethod
    def failure(cls, kind: FailureKind, detail: str) -> 'SendResult':
        return cls(success=False, kind=kind, detail=detail)

    def to_payload(self) -> Dict[str, Any]:
        """JSON body for this result"""
        if self.success:
            return {'success': True, 'message': self.message}
        return {'success': False, 'error': self.detail}


@dataclass(frozen=True)
class OutgoingMail:
    """Everything a transport needs to deliver one contact message"""
    to: str
    from_address: str
    from_name: str
    reply_to: str
    reply_to_name: str
    subject: str
    body: str


def build_message_body(submission: ContactSubmission) -> str:
    """Fixed-format plain-text body for a submission"""
    return (
        "You have a new contact form submission:\n\n"
        f"Name: {submission.name}\n"
        f"Email: {submission.email}\n"
        f"Subject: {submission.subject}\n\n"
        f"Message:\n{submission.message}\n"
    )


def resolve_from_address(env: Mapping[str, str], server_name: Optional[str]) -> str:
    """MAIL_FROM if set, otherwise no-reply at the serving host"""
    configured = env.get('MAIL_FROM') or ''
    if configured:
        return configured
    return f"no-reply@{server_name or 'localhost'}"


def build_fallback_headers(from_address: str, reply_to: str) -> str:
    """Header block for the direct-send fallback, CRLF separated"""
    headers: List[str] = [
        f"From: {from_address}",
        f"Reply-To: {reply_to}",
        'MIME-Version: 1.0',
        'Content-Type: text/plain; charset=UTF-8',
    ]
    return "\r\n".join(headers)


class MailDispatcher:
    """
    Delivers contact submissions through a primary and a fallback transport

    Args:
        primary: Full mail client transport, or None when unavailable
        fallback: Minimal direct-send transport, always present
    """

    def __init__(self, fallback, primary=None):
        self.primary = primary
        self.fallback = fallback

    @property
    def has_primary(self) -> bool:
        return self.primary is not None

    def dispatch(self,
                 submission: ContactSubmission,
                 env: Mapping[str, str],
                 log: ContactLog,
                 server_name: Optional[str] = None) -> SendResult:
        """
        Send a submission to the configured recipient

        Args:
            submission: Validated contact submission
            env: Mail configuration loaded for this request
            log: Diagnostic log for this request
            server_name: Host serving the request, used for the default sender

        Returns:
            SendResult describing the client-visible outcome
        """
        to = env.get('MAIL_TO') or ''
        if not to:
            log.write('MAIL_TO not configured in .env')
            return SendResult.failure(FailureKind.CONFIGURATION, RECIPIENT_NOT_CONFIGURED)

        mail = OutgoingMail(
            to=to,
            from_address=resolve_from_address(env, server_name),
            from_name=FROM_DISPLAY_NAME,
            reply_to=submission.email,
            reply_to_name=submission.name,
            subject=submission.subject,
            body=build_message_body(submission)
        )

        if self.has_primary:
            result = self.primary.send(mail, env)
            if result.success:
                logger.info(f"Contact message from {submission.email} delivered to {to}")
                return SendResult.ok(MESSAGE_SENT)
            log.write(f"SMTP client error: {result.detail}")

        return self._send_fallback(mail, log)

    def _send_fallback(self, mail: OutgoingMail, log: ContactLog) -> SendResult:
        headers = build_fallback_headers(mail.from_address, mail.reply_to)
        sent = self.fallback.send(mail.to, mail.subject, mail.body, headers)

        if sent:
            logger.info(f"Contact message delivered to {mail.to} via fallback")
            return SendResult.ok(MESSAGE_SENT_FALLBACK)

        log.write('mail() failed to send.')
        return SendResult.failure(FailureKind.DELIVERY, UNABLE_TO_SEND)
