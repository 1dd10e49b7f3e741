# core/validation.py
"""
Contact form validation

Extracts the expected fields from a submitted form, trims them and collects
every field-level problem instead of stopping at the first one.
"""

from dataclasses import dataclass, field
from typing import List, Mapping, Optional

from email_validator import validate_email, EmailNotValidError

DEFAULT_SUBJECT = 'New contact message'

NAME_REQUIRED = 'Name is required'
EMAIL_REQUIRED = 'Valid email is required'
MESSAGE_REQUIRED = 'Message is required'


@dataclass(frozen=True)
class ContactSubmission:
    """A validated contact form submission"""
    name: str
    email: str
    subject: str
    message: str


@dataclass
class ValidationOutcome:
    """Either a submission or the list of errors that prevented one"""
    submission: Optional[ContactSubmission] = None
    errors: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors and self.submission is not None


def is_valid_email(address: str) -> bool:
    """Syntax-only email check, no DNS lookups"""
    if not address:
        return False
    try:
        validate_email(address, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def _field(form: Mapping[str, str], name: str, default: str = '') -> str:
    value = form.get(name)
    if value is None:
        return default
    return str(value).strip()


def validate_submission(form: Mapping[str, str]) -> ValidationOutcome:
    """
    Validate a contact form mapping

    The subject falls back to DEFAULT_SUBJECT only when the field is absent;
    an explicitly empty subject stays empty.
    """
    name = _field(form, 'name')
    email = _field(form, 'email')
    subject = _field(form, 'subject', DEFAULT_SUBJECT)
    message = _field(form, 'message')

    errors = []
    if name == '':
        errors.append(NAME_REQUIRED)
    if email == '' or not is_valid_email(email):
        errors.append(EMAIL_REQUIRED)
    if message == '':
        errors.append(MESSAGE_REQUIRED)

    if errors:
        return ValidationOutcome(errors=errors)

    return ValidationOutcome(
        submission=ContactSubmission(
            name=name,
            email=email,
            subject=subject,
            message=message
        )
    )
