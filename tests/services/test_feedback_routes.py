"""Feedback Routes — prompt cooldown, dismissals and submissions.

Invariants:
    - Any prompt shown in the last 7 days blocks all prompts
    - Three dismissals of a trigger retire it
    - Submitting marks that trigger's shown prompts as responded
"""

from datetime import timedelta

from sqlalchemy import select

from cresp.core.time_utils import utcnow
from cresp.models.feedback import FeedbackPromptLog, UserFeedback


async def _cooldown(client, headers, trigger="first_post"):
    return (await client.get(
        "/api/v1/feedback/check-cooldown", params={"trigger": trigger}, headers=headers,
    )).json()


async def test_fresh_user_can_see_prompt(client, make_user, auth_headers):
    user = await make_user()
    assert await _cooldown(client, auth_headers(user)) == {
        "can_show": True, "reason": None, "last_shown": None,
    }


async def test_recent_prompt_blocks_every_trigger(client, make_user, auth_headers):
    user = await make_user()
    headers = auth_headers(user)
    res = await client.post("/api/v1/feedback/log-shown", json={"trigger": "onboarding"}, headers=headers)
    assert res.json()["message"] == "Prompt logged"

    decision = await _cooldown(client, headers, trigger="first_post")
    assert decision["can_show"] is False
    assert decision["reason"] == "Recently shown"
    assert decision["last_shown"] is not None


async def test_three_dismissals_retire_trigger(client, make_user, auth_headers, test_db):
    user = await make_user()
    long_ago = utcnow() - timedelta(days=30)
    for _ in range(3):
        test_db.add(FeedbackPromptLog(
            user_id=user.id, trigger="first_post", shown_at=long_ago, dismissed=True,
        ))
    await test_db.commit()

    headers = auth_headers(user)
    decision = await _cooldown(client, headers)
    assert decision == {"can_show": False, "reason": "Dismissed too many times", "last_shown": None}
    assert (await _cooldown(client, headers, trigger="profile_view"))["can_show"] is True


async def test_dismiss_marks_logs(client, make_user, auth_headers, test_db):
    user = await make_user()
    headers = auth_headers(user)
    await client.post("/api/v1/feedback/log-shown", json={"trigger": "first_post"}, headers=headers)
    res = await client.post("/api/v1/feedback/dismiss", json={"trigger": "first_post"}, headers=headers)
    assert res.json()["message"] == "Prompt dismissed"

    log = (await test_db.execute(select(FeedbackPromptLog))).scalar_one()
    assert log.dismissed is True


async def test_submit_stores_feedback(client, make_user, auth_headers, test_db):
    user = await make_user()
    headers = {**auth_headers(user), "User-Agent": "pytest-browser"}
    await client.post("/api/v1/feedback/log-shown", json={"trigger": "first_post"}, headers=headers)

    res = await client.post(
        "/api/v1/feedback/submit",
        json={"trigger": "first_post", "feedback_type": "nps", "rating": 5, "comment": "Love it"},
        headers=headers,
    )
    assert res.json()["message"] == "Thank you for your feedback!"

    feedback = (await test_db.execute(select(UserFeedback))).scalar_one()
    assert feedback.rating == 5
    assert feedback.user_agent == "pytest-browser"
    log = (await test_db.execute(select(FeedbackPromptLog))).scalar_one()
    assert log.responded is True


async def test_submit_rejects_out_of_range_rating(client, make_user, auth_headers):
    user = await make_user()
    res = await client.post(
        "/api/v1/feedback/submit",
        json={"trigger": "first_post", "feedback_type": "nps", "rating": 9},
        headers=auth_headers(user),
    )
    assert res.status_code == 400


async def test_cooldown_requires_trigger_query(client, make_user, auth_headers):
    headers = auth_headers(await make_user())
    res = await client.get("/api/v1/feedback/check-cooldown", headers=headers)
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_cooldown_is_read_only(client, make_user, auth_headers):
    headers = auth_headers(await make_user())
    res = await client.post(
        "/api/v1/feedback/check-cooldown", json={"trigger": "first_post"}, headers=headers,
    )
    assert res.status_code == 405
