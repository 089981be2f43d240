"""Moderation Routes — reports, weighted queue aggregation and moderator review.

Invariants:
    - One report per (post, reporter) and per (user, reporter)
    - Reports of the same post and category share one queue entry; weights accumulate
    - Categories requiring proof reject reports without a reason
    - Only moderators (moderation.review) see or resolve the queue
"""

from uuid import uuid4

import pytest
from sqlalchemy import select

from cresp.core.domain_types import RoleKey
from cresp.models.activity_log import ActivityLog
from cresp.models.moderation import ModerationQueue


@pytest.fixture
async def reported_post(client, make_user, auth_headers):
    author = await make_user("post_author_1")
    res = await client.post("/api/v1/posts", json={"content": "buy now"}, headers=auth_headers(author))
    return res.json()["post_id"]


async def _report(client, headers, post_id, category="spam", **extra):
    return await client.post(
        "/api/v1/moderation/reports/posts",
        json={"post_id": post_id, "category": category, **extra},
        headers=headers,
    )


async def test_categories_listed_in_display_order(client):
    res = await client.get("/api/v1/moderation/categories")
    keys = [c["key"] for c in res.json()]
    assert keys[0] == "ai_undisclosed"
    assert "hate_speech" in keys
    assert len(keys) == 11


async def test_report_post_creates_queue_entry(client, make_user, auth_headers, reported_post, test_db):
    reporter = await make_user("reporter_001", trust_score=2.0)
    res = await _report(client, auth_headers(reporter), reported_post, details="bot account")
    assert res.status_code == 201
    assert res.json()["message"] == "Report submitted successfully"

    entry = (await test_db.execute(select(ModerationQueue))).scalar_one()
    assert entry.report_count == 1
    assert entry.total_weight == 2.0
    assert entry.priority == "NORMAL"
    assert entry.status == "PENDING"


async def test_reports_accumulate_weight(client, make_user, auth_headers, reported_post, test_db):
    first = await make_user("reporter_001", trust_score=2.0)
    second = await make_user("reporter_002", trust_score=0.5)
    await _report(client, auth_headers(first), reported_post)
    await _report(client, auth_headers(second), reported_post)

    entry = (await test_db.execute(
        select(ModerationQueue).execution_options(populate_existing=True),
    )).scalar_one()
    assert entry.report_count == 2
    assert entry.total_weight == 2.5
    assert entry.average_weight == 1.25


async def test_duplicate_post_report_rejected(client, make_user, auth_headers, reported_post):
    reporter = await make_user("reporter_001")
    headers = auth_headers(reporter)
    await _report(client, headers, reported_post)
    res = await _report(client, headers, reported_post, category="nsfw")
    assert res.status_code == 400
    assert res.json()["error"]["message"] == "You have already reported this post"


async def test_report_unknown_category(client, make_user, auth_headers, reported_post):
    reporter = await make_user("reporter_001")
    res = await _report(client, auth_headers(reporter), reported_post, category="boring")
    assert res.status_code == 400
    assert res.json()["error"]["message"] == "Invalid report category"


async def test_report_missing_post(client, make_user, auth_headers):
    reporter = await make_user("reporter_001")
    res = await _report(client, auth_headers(reporter), str(uuid4()))
    assert res.status_code == 404


async def test_report_user_rules(client, make_user, auth_headers, test_db):
    reporter = await make_user("reporter_001")
    target = await make_user("target_user1")
    headers = auth_headers(reporter)
    url = "/api/v1/moderation/reports/users"

    own = await client.post(url, json={"user_id": str(reporter.id), "category": "spam"}, headers=headers)
    assert own.json()["error"]["message"] == "You cannot report your own profile"

    no_proof = await client.post(
        url, json={"user_id": str(target.id), "category": "harassment", "reason": "  "}, headers=headers,
    )
    assert no_proof.status_code == 400
    assert no_proof.json()["error"]["message"] == "Additional details are required for this report type"

    ok = await client.post(
        url, json={"user_id": str(target.id), "category": "harassment", "reason": "threats in DMs"},
        headers=headers,
    )
    assert ok.status_code == 201

    again = await client.post(url, json={"user_id": str(target.id), "category": "spam"}, headers=headers)
    assert again.json()["error"]["message"] == "You have already reported this user"

    statuses = (await test_db.execute(
        select(ActivityLog.status).where(ActivityLog.action == "user.report"),
    )).scalars().all()
    assert sorted(statuses) == ["failure", "failure", "failure", "success"]


async def test_queue_requires_moderator(client, make_user, auth_headers):
    member = await make_user("member_0001")
    res = await client.get("/api/v1/moderation/queue", headers=auth_headers(member))
    assert res.status_code == 403


async def test_queue_sorted_by_priority(client, make_user, auth_headers, reported_post):
    reporter = await make_user("reporter_001")
    moderator = await make_user("moderator_01", roles=(RoleKey.MODERATOR,))
    author = await make_user("author_two_1")
    other_post = (await client.post(
        "/api/v1/posts", json={"content": "edited photo"}, headers=auth_headers(author),
    )).json()["post_id"]

    await _report(client, auth_headers(reporter), reported_post, category="off_topic")
    await _report(client, auth_headers(reporter), other_post, category="fake_content")

    queue = (await client.get("/api/v1/moderation/queue", headers=auth_headers(moderator))).json()
    assert [e["priority"] for e in queue] == ["HIGH", "LOW"]
    assert queue[0]["category"]["key"] == "fake_content"


async def test_resolve_entry_closes_it(client, make_user, auth_headers, reported_post):
    reporter = await make_user("reporter_001")
    moderator = await make_user("moderator_01", roles=(RoleKey.MODERATOR,))
    headers = auth_headers(moderator)
    await _report(client, auth_headers(reporter), reported_post)
    entry_id = (await client.get("/api/v1/moderation/queue", headers=headers)).json()[0]["id"]

    res = await client.post(
        f"/api/v1/moderation/queue/{entry_id}/resolve",
        json={"status": "DISMISSED", "note": "not spam"}, headers=headers,
    )
    assert res.status_code == 200
    assert res.json()["status"] == "DISMISSED"
    assert res.json()["resolution_note"] == "not spam"

    pending = (await client.get("/api/v1/moderation/queue", headers=headers)).json()
    assert pending == []

    again = await client.post(
        f"/api/v1/moderation/queue/{entry_id}/resolve", json={"status": "RESOLVED"}, headers=headers,
    )
    assert again.json()["error"]["message"] == "Moderation queue entry is already closed"
