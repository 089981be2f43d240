"""Credential Validation — pure rule checks for usernames, emails and passwords.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Return the first failing rule's message, None on success
    - Rules are checked in a fixed order so the reported message is deterministic

Design Decisions:
    - Return messages (not exceptions): pydantic validators wrap them in ValueError,
      service code wraps them in InputValidationError — one rule set, two callers
    - Email syntax delegated to email-validator via pydantic's EmailStr at the schema
      edge; only length bounds live here
"""

import re

USERNAME_MIN_LENGTH = 8
USERNAME_MAX_LENGTH = 30
EMAIL_MIN_LENGTH = 5
EMAIL_MAX_LENGTH = 255
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 128
IDENTIFIER_MAX_LENGTH = 255

_USERNAME_CHARS = re.compile(r"^[a-zA-Z0-9_-]+$")
_STARTS_WITH_LETTER = re.compile(r"^[a-zA-Z]")


def check_username(username: str) -> str | None:
    if len(username) < USERNAME_MIN_LENGTH:
        return f"Username must be at least {USERNAME_MIN_LENGTH} characters"
    if len(username) > USERNAME_MAX_LENGTH:
        return f"Username must be less than {USERNAME_MAX_LENGTH} characters"
    if not _USERNAME_CHARS.match(username):
        return "Username can only contain letters, numbers, hyphens, and underscores"
    if not _STARTS_WITH_LETTER.match(username):
        return "Username must start with a letter"
    return None


def check_email_length(email: str) -> str | None:
    if len(email) < EMAIL_MIN_LENGTH:
        return "Email is too short"
    if len(email) > EMAIL_MAX_LENGTH:
        return "Email is too long"
    return None


def check_password(password: str) -> str | None:
    if len(password) < PASSWORD_MIN_LENGTH:
        return f"Password must be at least {PASSWORD_MIN_LENGTH} characters"
    if len(password) > PASSWORD_MAX_LENGTH:
        return f"Password must be less than {PASSWORD_MAX_LENGTH} characters"
    if not re.search(r"[A-Z]", password):
        return "Password must contain at least one uppercase letter"
    if not re.search(r"[a-z]", password):
        return "Password must contain at least one lowercase letter"
    if not re.search(r"[0-9]", password):
        return "Password must contain at least one number"
    return None


def check_login_identifier(identifier: str) -> str | None:
    if not identifier:
        return "Email or username is required"
    if len(identifier) > IDENTIFIER_MAX_LENGTH:
        return "Email or username is too long"
    return None


def is_email_identifier(identifier: str) -> bool:
    """Login identifiers containing '@' are looked up by email, others by username."""
    return "@" in identifier
