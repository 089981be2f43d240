"""Anonymize Request — IP truncation, user-agent clipping and action categories."""

from cresp.core.anonymize_request import (
    action_category, anonymize_ip, client_ip_from_headers, truncate_user_agent,
)


def test_ipv4_last_octet_zeroed():
    assert anonymize_ip("203.0.113.42") == "203.0.113.0"


def test_ipv6_truncated():
    assert anonymize_ip("2001:0db8:85a3:0000:0000:8a2e:0370:7334") == "2001:0db8:85a3:0000:"


def test_user_agent_truncated():
    assert len(truncate_user_agent("x" * 400)) == 255


def test_action_category():
    assert action_category("auth.login") == "auth"
    assert action_category("") == "general"


def test_client_ip_header_precedence():
    assert client_ip_from_headers({"x-forwarded-for": "1.2.3.4, 10.0.0.1"}) == "1.2.3.4"
    assert client_ip_from_headers({"x-real-ip": "5.6.7.8"}) == "5.6.7.8"
    assert client_ip_from_headers({}) is None
