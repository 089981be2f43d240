"""Authorization Decision — verifies the fixed RBAC evaluation order.

Invariants:
    - user DENY > user ALLOW > role DENY > role ALLOW > priority threshold > deny
    - Unknown actions always deny
"""

from cresp.core.decide_authorization import ActionGrants, decide
from cresp.core.domain_types import AuthorizationEffect

ALLOW = AuthorizationEffect.ALLOW
DENY = AuthorizationEffect.DENY


def test_unknown_action_denies_even_with_grants():
    assert decide(ActionGrants(action_exists=False, user_effects={ALLOW})) is False


def test_user_deny_beats_everything():
    grants = ActionGrants(
        action_exists=True, min_role_priority=0,
        user_effects={DENY, ALLOW}, role_effects={ALLOW}, role_priorities=[60],
    )
    assert decide(grants) is False


def test_user_allow_beats_role_deny():
    grants = ActionGrants(action_exists=True, user_effects={ALLOW}, role_effects={DENY})
    assert decide(grants) is True


def test_role_deny_beats_role_allow_and_priority():
    grants = ActionGrants(
        action_exists=True, min_role_priority=0,
        role_effects={DENY, ALLOW}, role_priorities=[60],
    )
    assert decide(grants) is False


def test_role_allow_without_priority_threshold():
    assert decide(ActionGrants(action_exists=True, role_effects={ALLOW})) is True


def test_priority_threshold_uses_highest_role():
    grants = ActionGrants(action_exists=True, min_role_priority=40, role_priorities=[20, 40])
    assert decide(grants) is True


def test_priority_below_threshold_denies():
    grants = ActionGrants(action_exists=True, min_role_priority=40, role_priorities=[20])
    assert decide(grants) is False


def test_no_roles_and_no_grants_denies():
    assert decide(ActionGrants(action_exists=True, min_role_priority=0)) is False
