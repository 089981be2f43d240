"""Waitlist & Health Routes — landing-page signups and liveness/readiness probes."""

from sqlalchemy import select

from cresp.infrastructure import database
from cresp.models.waitlist import WaitlistEntry


async def test_join_waitlist(client, test_db):
    res = await client.post(
        "/api/v1/waitlist/", json={"email": "Fan@Example.com", "feedback": "  more portfolios  "},
    )
    assert res.status_code == 201
    assert res.json()["message"] == "Thanks for joining the waitlist!"

    entry = (await test_db.execute(select(WaitlistEntry))).scalar_one()
    assert entry.email == "fan@example.com"
    assert entry.feedback == "more portfolios"


async def test_waitlist_duplicate_email(client):
    await client.post("/api/v1/waitlist/", json={"email": "fan@example.com"})
    res = await client.post("/api/v1/waitlist/", json={"email": "FAN@example.com"})
    assert res.status_code == 400
    assert res.json()["error"]["message"] == "This email is already on the waitlist!"


async def test_waitlist_invalid_email(client):
    res = await client.post("/api/v1/waitlist/", json={"email": "not-an-email"})
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_liveness(client):
    res = await client.get("/api/v1/health/")
    assert res.json() == {"status": "healthy", "service": "cresp-api", "version": "1.0.0"}


async def test_readiness_with_database(client):
    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 200
    assert res.json()["checks"]["database"] == "healthy"


async def test_readiness_without_database(client, monkeypatch):
    monkeypatch.setattr(database, "db_manager", None)
    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 503
    assert res.json() == {"status": "not_ready", "reason": "database_unavailable"}
