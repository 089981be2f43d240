"""Professional Roles — catalog listing, user role replacement and primary role.

Invariants:
    - Catalog ordered by display order; grouped by category
    - Replacing roles is all-or-nothing: 1-3 existing ids, first becomes primary
    - Replacement is logged with before/after snapshots
"""

import pytest
from sqlalchemy import select

from cresp.core.errors import InputValidationError
from cresp.models.activity_log import ActivityLog
from cresp.services.log_activity import ActivityLogger
from cresp.services.manage_professional_roles import ProfessionalRoleService


async def test_catalog_lists_twenty_roles(client):
    res = await client.get("/api/v1/professional-roles/")
    assert res.status_code == 200
    roles = res.json()
    assert len(roles) == 20
    assert roles[0]["key"] == "director"


async def test_catalog_filter_by_category(client):
    res = await client.get("/api/v1/professional-roles/", params={"category": "music"})
    assert {r["key"] for r in res.json()} == {"singer", "musician", "lyricist", "composer"}


async def test_roles_by_category(client):
    res = await client.get("/api/v1/professional-roles/by-category")
    grouped = res.json()
    assert set(grouped) == {
        "film_video", "performance", "writing", "music", "visual", "design", "audio",
    }
    assert [r["key"] for r in grouped["audio"]] == ["sound_designer"]


async def test_complementary_roles(client):
    res = await client.get("/api/v1/professional-roles/singer/complementary")
    assert res.json() == ["musician", "lyricist", "composer"]


async def test_replace_roles_first_is_primary(client, make_user, auth_headers, test_db):
    user = await make_user()
    res = await client.put(
        "/api/v1/users/me/professional-roles",
        json={"professional_role_ids": ["prof_actor_001", "prof_singer_001"]},
        headers=auth_headers(user),
    )
    assert res.status_code == 200
    roles = res.json()
    assert [(r["key"], r["is_primary"]) for r in roles] == [("actor", True), ("singer", False)]

    log = (await test_db.execute(
        select(ActivityLog).where(ActivityLog.action == "profile.professional_roles_update"),
    )).scalar_one()
    assert log.changes_before == {"professional_role_ids": []}
    assert log.changes_after == {"professional_role_ids": ["prof_actor_001", "prof_singer_001"]}


async def test_replace_roles_rejects_too_many(client, make_user, auth_headers):
    user = await make_user()
    res = await client.put(
        "/api/v1/users/me/professional-roles",
        json={"professional_role_ids": [
            "prof_actor_001", "prof_singer_001", "prof_writer_001", "prof_director_001",
        ]},
        headers=auth_headers(user),
    )
    assert res.status_code == 400
    assert res.json()["error"]["message"] == (
        "Invalid professional role selection. Please select 1-3 roles."
    )


async def test_replace_roles_rejects_unknown_id(test_db, make_user):
    user = await make_user()
    service = ProfessionalRoleService(test_db, ActivityLogger(test_db, None))
    with pytest.raises(InputValidationError, match="One or more professional roles are invalid"):
        await service.replace_user_roles(user.id, ["prof_astronaut_001"])


async def test_set_primary_role(client, make_user, auth_headers):
    user = await make_user()
    headers = auth_headers(user)
    await client.put(
        "/api/v1/users/me/professional-roles",
        json={"professional_role_ids": ["prof_actor_001", "prof_singer_001"]},
        headers=headers,
    )
    res = await client.put(
        "/api/v1/users/me/professional-roles/primary",
        json={"professional_role_id": "prof_singer_001"}, headers=headers,
    )
    assert res.status_code == 200
    roles = (await client.get("/api/v1/users/me/professional-roles", headers=headers)).json()
    assert roles[0]["key"] == "singer" and roles[0]["is_primary"] is True
    assert [r["is_primary"] for r in roles].count(True) == 1


async def test_set_primary_requires_held_role(client, make_user, auth_headers):
    user = await make_user()
    res = await client.put(
        "/api/v1/users/me/professional-roles/primary",
        json={"professional_role_id": "prof_actor_001"}, headers=auth_headers(user),
    )
    assert res.status_code == 400


async def test_find_users_by_roles(test_db, make_user):
    actor = await make_user("actor_user_1", total_reputation=5)
    director = await make_user("director_user", total_reputation=50)
    service = ProfessionalRoleService(test_db)
    await service.assign_roles(actor.id, ["prof_actor_001"])
    await service.assign_roles(director.id, ["prof_director_001", "prof_actor_001"])
    await test_db.commit()

    found = await service.find_users_by_roles(["actor"])
    assert [u.username for u in found] == ["director_user", "actor_user_1"]

    primary = await service.find_users_by_roles(["actor"], primary_only=True)
    assert [u.username for u in primary] == ["actor_user_1"]

    excluded = await service.find_users_by_roles(["actor"], exclude_user_id=director.id)
    assert [u.username for u in excluded] == ["actor_user_1"]
