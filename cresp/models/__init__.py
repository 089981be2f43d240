"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - User is the aggregate root; every user-owned row cascades on user deletion

Design Decisions:
    - One file per aggregate for locality (post + its children live together)
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from cresp.models.user import (  # noqa: F401
    User, AuthAccount, EmailVerificationToken, PasswordResetToken,
)
from cresp.models.rbac import Role, Action, Authorization, UserRole  # noqa: F401
from cresp.models.professional_role import (  # noqa: F401
    ProfessionalRole, UserProfessionalRole,
)
from cresp.models.post import (  # noqa: F401
    Post, PostPrivacy, PortfolioPost, PostProfessionalRole,
    Hashtag, PostHashtag, PostMedia, PostAnalytics,
)
from cresp.models.moderation import (  # noqa: F401
    ModerationCategory, ModerationQueue, ModerationReport, UserReport,
)
from cresp.models.referral import ReferralCode, ReferralClick, Referral  # noqa: F401
from cresp.models.feedback import FeedbackPromptLog, UserFeedback  # noqa: F401
from cresp.models.activity_log import ActivityLog  # noqa: F401
from cresp.models.waitlist import WaitlistEntry  # noqa: F401
