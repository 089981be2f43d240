"""Referral Routes — share codes, click tracking, attribution and funnel milestones.

Invariants:
    - One code per user, stable across requests
    - track-click never errors; only known codes are recorded and set the cookie
    - Signup with the referral cookie attributes the new user exactly once
    - Milestones advance forward only; profile completion counts one conversion

Design Decisions:
    - Referral cookie sent as an explicit Cookie header: the test client does
      not persist response cookies
"""

from sqlalchemy import select

from cresp.models.referral import Referral, ReferralClick, ReferralCode
from cresp.models.user import User


async def _code(client, headers) -> dict:
    return (await client.get("/api/v1/referral/code", headers=headers)).json()


async def _referred_signup(client, code: str, username: str = "newcomer_01") -> dict:
    res = await client.post(
        "/api/v1/auth/signup",
        json={"username": username, "email": f"{username}@example.com", "password": "Sup3rSecret"},
        headers={"Cookie": f"referral_code={code}"},
    )
    assert res.status_code == 201
    return res.json()


async def _referral(test_db) -> Referral:
    return (await test_db.execute(
        select(Referral).execution_options(populate_existing=True),
    )).scalar_one()


async def test_code_is_created_once(client, make_user, auth_headers):
    user = await make_user("janedoe_01")
    headers = auth_headers(user)
    first = await _code(client, headers)
    second = await _code(client, headers)
    assert first["code"] == second["code"]
    assert first["code"].startswith("JANEDOE_")
    assert first["link"] == f"http://test/join?ref={first['code']}"
    assert first["stats"] == {"clicks": 0, "signups": 0, "conversions": 0}


async def test_link_honours_forwarded_proto(client, make_user, auth_headers):
    user = await make_user()
    res = await client.get(
        "/api/v1/referral/code",
        headers={**auth_headers(user), "X-Forwarded-Proto": "https", "Host": "cresp.app"},
    )
    assert res.json()["link"].startswith("https://cresp.app/join?ref=")


async def test_track_click_records_and_sets_cookie(client, make_user, auth_headers, test_db):
    user = await make_user()
    code = (await _code(client, auth_headers(user)))["code"]

    res = await client.post(
        "/api/v1/referral/track-click",
        json={"code": code, "landing_page": "/join"},
        headers={"Referer": "https://social.example/post/1"},
    )
    assert res.json() == {"success": True}
    assert res.cookies.get("referral_code") == code

    click = (await test_db.execute(select(ReferralClick))).scalar_one()
    assert click.landing_page == "/join"
    assert click.referrer == "https://social.example/post/1"
    assert click.ip_address == "127.0.0.0"
    row = (await test_db.execute(
        select(ReferralCode).execution_options(populate_existing=True),
    )).scalar_one()
    assert row.total_clicks == 1


async def test_track_click_unknown_code(client):
    res = await client.post("/api/v1/referral/track-click", json={"code": "NOBODY_AAAAAA"})
    assert res.json() == {"success": False}
    assert "referral_code" not in res.cookies

    empty = await client.post("/api/v1/referral/track-click", json={})
    assert empty.json() == {"success": False}


async def test_referred_signup_walks_the_funnel(client, make_user, auth_headers, test_db):
    referrer = await make_user("referrer_01")
    code = (await _code(client, auth_headers(referrer)))["code"]
    await client.post("/api/v1/referral/track-click", json={"code": code})

    signup = await _referred_signup(client, code)
    referral = await _referral(test_db)
    assert referral.status == "SIGNED_UP"
    assert referral.referrer_id == referrer.id
    click = (await test_db.execute(
        select(ReferralClick).execution_options(populate_existing=True),
    )).scalar_one()
    assert click.converted_to_signup is True

    await client.post("/api/v1/auth/verify-email", json={"token": signup["verification_token"]})
    assert (await _referral(test_db)).status == "EMAIL_VERIFIED"

    newcomer = (await test_db.execute(select(User).where(User.username == "newcomer_01"))).scalar_one()
    await client.post(
        "/api/v1/onboarding/complete",
        json={"professional_role_ids": ["prof_writer_001"]},
        headers=auth_headers(newcomer),
    )
    referral = await _referral(test_db)
    assert referral.status == "PROFILE_COMPLETED"
    assert referral.profile_completed_at is not None

    await client.post("/api/v1/posts", json={"content": "hello"}, headers=auth_headers(newcomer))
    assert (await _referral(test_db)).status == "FIRST_POST"

    stats = (await client.get("/api/v1/referral/stats", headers=auth_headers(referrer))).json()
    assert stats["total_clicks"] == 1
    assert stats["total_signups"] == 1
    assert stats["total_conversions"] == 1
    assert stats["conversion_rate"] == 100.0
    assert stats["referrals_by_status"] == {"FIRST_POST": 1}
    assert stats["recent_referrals"][0]["user"]["username"] == "newcomer_01"

    info = (await client.get("/api/v1/referral/referrer", headers=auth_headers(newcomer))).json()
    assert info["referred_by"]["username"] == "referrer_01"
    assert info["status"] == "FIRST_POST"


async def test_only_known_codes_attribute_signups(client, make_user, auth_headers, test_db):
    referrer = await make_user("referrer_01")
    code = (await _code(client, auth_headers(referrer)))["code"]
    await _referred_signup(client, "NOBODY_ZZZZZZ")
    await _referred_signup(client, code, username="newcomer_02")
    referrals = (await test_db.execute(select(Referral))).scalars().all()
    assert len(referrals) == 1


async def test_stats_without_code(client, make_user, auth_headers):
    user = await make_user()
    stats = (await client.get("/api/v1/referral/stats", headers=auth_headers(user))).json()
    assert stats["code"] is None
    assert stats["total_clicks"] == 0
    assert stats["recent_referrals"] == []


async def test_referrer_is_null_for_organic_user(client, make_user, auth_headers):
    user = await make_user()
    res = await client.get("/api/v1/referral/referrer", headers=auth_headers(user))
    assert res.status_code == 200
    assert res.json() is None
