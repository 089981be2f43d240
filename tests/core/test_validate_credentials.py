"""Credential Validation — verifies username/email/password rules and their order.

Invariants:
    - First failing rule wins; None when everything passes
    - Login identifiers with '@' are emails
"""

import pytest

from cresp.core.validate_credentials import (
    check_email_length, check_login_identifier, check_password, check_username,
    is_email_identifier,
)


def test_valid_username_passes():
    assert check_username("janedoe_01") is None


@pytest.mark.parametrize("username, message", [
    ("short", "Username must be at least 8 characters"),
    ("a" * 31, "Username must be less than 30 characters"),
    ("jane doe!", "Username can only contain letters, numbers, hyphens, and underscores"),
    ("1janedoe", "Username must start with a letter"),
])
def test_username_rules(username, message):
    assert check_username(username) == message


def test_length_rule_reported_before_charset():
    assert check_username("ab!") == "Username must be at least 8 characters"


def test_email_length_bounds():
    assert check_email_length("a@b") == "Email is too short"
    assert check_email_length("a" * 250 + "@x.com") == "Email is too long"
    assert check_email_length("jane@example.com") is None


@pytest.mark.parametrize("password, message", [
    ("Ab1", "Password must be at least 8 characters"),
    ("lowercase1", "Password must contain at least one uppercase letter"),
    ("UPPERCASE1", "Password must contain at least one lowercase letter"),
    ("NoDigitsHere", "Password must contain at least one number"),
])
def test_password_rules(password, message):
    assert check_password(password) == message


def test_strong_password_passes():
    assert check_password("Sup3rSecret") is None


def test_password_upper_bound():
    assert check_password("Aa1" + "x" * 130) == "Password must be less than 128 characters"


def test_login_identifier():
    assert check_login_identifier("") == "Email or username is required"
    assert check_login_identifier("janedoe_01") is None
    assert is_email_identifier("jane@example.com")
    assert not is_email_identifier("janedoe_01")
