"""Authorization Decision — pure RBAC evaluation over pre-fetched grants.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Decision order is fixed: user DENY > user ALLOW > role DENY > role ALLOW
      > role priority threshold > default deny
    - Unknown action always denies

Design Decisions:
    - Shell loads grants for (user, action) in bulk, core decides: one round trip
      instead of one query per rule
    - Grants passed as plain dataclass: core never touches ORM rows
"""

from dataclasses import dataclass, field

from cresp.core.domain_types import AuthorizationEffect


@dataclass
class ActionGrants:
    """Everything needed to decide whether a user may perform one action."""
    action_exists: bool
    min_role_priority: int | None = None
    user_effects: set[AuthorizationEffect] = field(default_factory=set)
    role_effects: set[AuthorizationEffect] = field(default_factory=set)
    role_priorities: list[int] = field(default_factory=list)


def decide(grants: ActionGrants) -> bool:
    """Evaluate the RBAC decision chain. Returns True when the action is allowed."""
    if not grants.action_exists:
        return False
    if AuthorizationEffect.DENY in grants.user_effects:
        return False
    if AuthorizationEffect.ALLOW in grants.user_effects:
        return True
    if AuthorizationEffect.DENY in grants.role_effects:
        return False
    if AuthorizationEffect.ALLOW in grants.role_effects:
        return True
    if grants.min_role_priority is not None and grants.role_priorities:
        return max(grants.role_priorities) >= grants.min_role_priority
    return False
