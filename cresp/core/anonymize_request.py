"""Request Anonymization — pure helpers that shape request metadata for the activity log.

Invariants:
    - IPv4 addresses lose their last octet; anything else is cut to 20 chars
    - User agents are cut to 255 chars
    - Action category is the text before the first '.', "general" when empty
"""

from collections.abc import Mapping
from dataclasses import dataclass

IP_MAX_LENGTH = 20
USER_AGENT_MAX_LENGTH = 255


@dataclass(frozen=True)
class RequestMetadata:
    method: str | None = None
    endpoint: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None


def anonymize_ip(ip: str) -> str:
    parts = ip.split(".")
    if len(parts) == 4:
        return f"{parts[0]}.{parts[1]}.{parts[2]}.0"
    return ip[:IP_MAX_LENGTH]


def truncate_user_agent(user_agent: str) -> str:
    return user_agent[:USER_AGENT_MAX_LENGTH]


def action_category(action: str) -> str:
    return action.split(".", 1)[0] or "general"


def client_ip_from_headers(headers: Mapping[str, str]) -> str | None:
    """First hop of X-Forwarded-For, else X-Real-IP, else CF-Connecting-IP."""
    forwarded = headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return headers.get("x-real-ip") or headers.get("cf-connecting-ip") or None
