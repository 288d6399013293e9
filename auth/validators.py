"""
auth/validators.py -- Stateless rule sets for registration, login and passwords.

Each function returns the ordered list of violation messages for its input;
an empty list means the input is valid. Every predicate is evaluated on its
own, so one input can produce several messages (e.g. an empty email is both
missing and malformed).

The password strength rule is applied by change-password and reset-password
only. Registration checks that a password is present and confirmed, not
that it is strong.
"""

from __future__ import annotations

import re

from email_validator import EmailNotValidError, validate_email

from auth.models import Credentials, Registration

PASSWORD_MIN_LENGTH = 10
PASSWORD_SPECIAL_CHARACTERS = "@$!%*?&"

_PASSWORD_RULES: list[tuple[re.Pattern, str]] = [
    (re.compile(r"[A-Z]"), "Password must contain at least one uppercase letter."),
    (re.compile(r"[a-z]"), "Password must contain at least one lowercase letter."),
    (re.compile(r"\d"), "Password must contain at least one digit."),
    (re.compile(f"[{re.escape(PASSWORD_SPECIAL_CHARACTERS)}]"), "Password must contain at least one special character."),
]


def is_valid_email(email: str) -> bool:
    """Syntax check only. No DNS lookup, and single-label hosts are allowed."""
    try:
        validate_email(email, check_deliverability=False, globally_deliverable=False)
    except EmailNotValidError:
        return False
    return True


def _email_errors(email: str) -> list[str]:
    errors: list[str] = []
    if not email.strip():
        errors.append("Email is required.")
    if not is_valid_email(email):
        errors.append("A valid email is required.")
    return errors


def validate_registration(registration: Registration) -> list[str]:
    errors: list[str] = []
    if not registration.first_name.strip():
        errors.append("First name is required.")
    if not registration.last_name.strip():
        errors.append("Last name is required.")
    errors.extend(_email_errors(registration.email))
    if not registration.password.strip():
        errors.append("Password is required.")
    if registration.confirm_password != registration.password:
        errors.append("Passwords must match.")
    return errors


def validate_login(credentials: Credentials) -> list[str]:
    errors = _email_errors(credentials.email)
    if not credentials.password.strip():
        errors.append("Password is required.")
    return errors


def validate_password(password: str) -> list[str]:
    """Check password strength: length, upper, lower, digit, special character."""
    errors: list[str] = []
    if len(password) < PASSWORD_MIN_LENGTH:
        errors.append(f"Password must be at least {PASSWORD_MIN_LENGTH} characters long.")
    for pattern, message in _PASSWORD_RULES:
        if not pattern.search(password):
            errors.append(message)
    return errors
