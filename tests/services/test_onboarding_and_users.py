"""Onboarding & User Routes — profile completion, skip, own account and public profiles.

Invariants:
    - complete stores trimmed profile fields and role assignments, then refreshes the cookie
    - skip marks onboarding done without touching the profile
    - Public profiles expose roles but never email
"""

from uuid import uuid4

from sqlalchemy import select

from cresp.infrastructure.security import decode_session_token
from cresp.models.activity_log import ActivityLog
from cresp.models.user import User


async def test_complete_onboarding(client, make_user, auth_headers, test_db):
    user = await make_user()
    res = await client.post(
        "/api/v1/onboarding/complete",
        json={
            "professional_role_ids": ["prof_director_001", "prof_writer_001"],
            "name": "  Jane Doe ",
            "bio": "   ",
            "location": "Lisbon",
        },
        headers=auth_headers(user),
    )
    assert res.status_code == 200
    assert res.json()["onboarding_completed"] is True

    token = res.cookies.get("auth-token")
    claims = decode_session_token(token)
    assert claims.onboarding_completed is True

    me = (await client.get("/api/v1/users/me", headers=auth_headers(user))).json()
    assert me["name"] == "Jane Doe"
    assert me["bio"] is None
    assert me["location"] == "Lisbon"
    assert me["onboarding_completed"] is True

    actions = (await test_db.execute(
        select(ActivityLog.action).where(ActivityLog.user_id == user.id),
    )).scalars().all()
    assert "onboarding.complete" in actions


async def test_complete_onboarding_rejects_unknown_role(client, make_user, auth_headers):
    user = await make_user()
    res = await client.post(
        "/api/v1/onboarding/complete",
        json={"professional_role_ids": ["prof_wizard_001"]},
        headers=auth_headers(user),
    )
    assert res.status_code == 400
    assert res.json()["error"]["message"] == "One or more professional roles are invalid"


async def test_complete_onboarding_requires_roles(client, make_user, auth_headers):
    user = await make_user()
    res = await client.post(
        "/api/v1/onboarding/complete", json={"professional_role_ids": []},
        headers=auth_headers(user),
    )
    assert res.status_code == 400


async def test_skip_onboarding(client, make_user, auth_headers, test_db):
    user = await make_user(name="Kept Name")
    res = await client.post("/api/v1/onboarding/skip", headers=auth_headers(user))
    assert res.status_code == 200

    stored = (await test_db.execute(
        select(User).where(User.id == user.id).execution_options(populate_existing=True),
    )).scalar_one()
    assert stored.onboarding_completed is True
    assert stored.name == "Kept Name"


async def test_onboarding_requires_session(client):
    res = await client.post("/api/v1/onboarding/skip")
    assert res.status_code == 401
    assert res.json()["error"]["message"] == "Unauthorized"


async def test_public_profile_hides_email(client, make_user, auth_headers):
    user = await make_user(bio="Filmmaker")
    await client.put(
        "/api/v1/users/me/professional-roles",
        json={"professional_role_ids": ["prof_director_001"]},
        headers=auth_headers(user),
    )
    res = await client.get(f"/api/v1/users/{user.id}")
    assert res.status_code == 200
    profile = res.json()
    assert "email" not in profile
    assert profile["bio"] == "Filmmaker"
    assert [r["key"] for r in profile["professional_roles"]] == ["director"]


async def test_public_profile_missing_user(client):
    res = await client.get(f"/api/v1/users/{uuid4()}")
    assert res.status_code == 404
    assert res.json()["error"]["message"] == "User not found"


async def test_activity_history_is_own_and_newest_first(client, make_user, auth_headers):
    user = await make_user()
    other = await make_user("other_user_1")
    await client.post("/api/v1/onboarding/skip", headers=auth_headers(user))
    await client.post("/api/v1/onboarding/skip", headers=auth_headers(other))
    await client.post("/api/v1/auth/logout", headers=auth_headers(user))

    res = await client.get("/api/v1/users/me/activity", headers=auth_headers(user))
    rows = res.json()
    assert [r["action"] for r in rows] == ["auth.logout", "onboarding.skip"]
    assert rows[0]["action_category"] == "auth"
    assert "metadata" in rows[0]
