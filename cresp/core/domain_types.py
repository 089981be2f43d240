"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - UserId, PostId wrap UUIDs — never use bare UUID in domain logic
    - Reference data (roles, actions, professional roles, categories) keyed by stable string ids
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders and store as plain VARCHAR
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", UUID)
PostId = NewType("PostId", UUID)
ProfessionalRoleId = NewType("ProfessionalRoleId", str)
RoleId = NewType("RoleId", str)


# ─── Auth / RBAC ─────────────────────────────────────────────────

class TokenType(str, Enum):
    """Purpose claim carried by every signed token."""
    SESSION = "session"
    EMAIL_VERIFICATION = "email_verification"
    PASSWORD_RESET = "password_reset"


class SubjectType(str, Enum):
    """Who an authorization row applies to."""
    USER = "USER"
    ROLE = "ROLE"


class AuthorizationEffect(str, Enum):
    ALLOW = "ALLOW"
    DENY = "DENY"


class RoleKey(str, Enum):
    """Built-in roles with ascending priority."""
    GUEST = "guest"
    MEMBER = "member"
    MODERATOR = "moderator"
    ADMIN = "admin"


ROLE_PRIORITIES: dict[RoleKey, int] = {
    RoleKey.GUEST: 0,
    RoleKey.MEMBER: 20,
    RoleKey.MODERATOR: 40,
    RoleKey.ADMIN: 60,
}


# ─── Posts / Feed ────────────────────────────────────────────────

class PostType(str, Enum):
    CASUAL = "CASUAL"
    PORTFOLIO = "PORTFOLIO"


class PostStatus(str, Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"


class PostVisibility(str, Enum):
    PUBLIC = "PUBLIC"
    CONNECTIONS = "CONNECTIONS"
    PRIVATE = "PRIVATE"


class InteractionAudience(str, Enum):
    """Who may comment / share / download a post."""
    EVERYONE = "EVERYONE"
    CONNECTIONS = "CONNECTIONS"
    NO_ONE = "NO_ONE"


class MediaType(str, Enum):
    IMAGE = "IMAGE"
    VIDEO_LINK = "VIDEO_LINK"
    AUDIO_LINK = "AUDIO_LINK"
    DOCUMENT = "DOCUMENT"


class FeedSort(str, Enum):
    LATEST = "latest"
    POPULAR = "popular"
    DISCUSSED = "discussed"


# ─── Moderation ──────────────────────────────────────────────────

class ModerationPriority(str, Enum):
    LOW = "LOW"
    NORMAL = "NORMAL"
    HIGH = "HIGH"


class ModerationStatus(str, Enum):
    PENDING = "PENDING"
    RESOLVED = "RESOLVED"
    DISMISSED = "DISMISSED"


class ModerationAutoAction(str, Enum):
    WARN = "warn"
    REMOVE = "remove"
    BAN = "ban"


# ─── Referral ────────────────────────────────────────────────────

class ReferralStatus(str, Enum):
    """Referral funnel, in order. A referral never moves backwards."""
    SIGNED_UP = "SIGNED_UP"
    EMAIL_VERIFIED = "EMAIL_VERIFIED"
    PROFILE_COMPLETED = "PROFILE_COMPLETED"
    FIRST_POST = "FIRST_POST"
    FIRST_COLLABORATION = "FIRST_COLLABORATION"


# ─── Storage ─────────────────────────────────────────────────────

class FileKind(str, Enum):
    """Upload categories with distinct size and MIME policies."""
    IMAGE = "image"
    DOCUMENT = "document"


class StorageProvider(str, Enum):
    LOCAL = "local"
    S3 = "s3"
    R2 = "r2"
    B2 = "b2"


# ─── Activity ────────────────────────────────────────────────────

class ActivityStatus(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
