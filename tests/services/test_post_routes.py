"""Post Routes — creation rules, first-post flags, detail view and soft delete.

Invariants:
    - Portfolio posts need roles the author holds; casual posts silently drop unowned ones
    - A post needs text or media
    - Counters increment per type; first-of-type flags only on the first post of that type
    - Deleted posts disappear from detail (404) and cannot be deleted twice
"""

from uuid import uuid4

import pytest
from sqlalchemy import select

from cresp.models.post import Hashtag
from cresp.models.user import User
from cresp.services.manage_professional_roles import ProfessionalRoleService


@pytest.fixture
async def author(make_user, test_db):
    user = await make_user("author_user_1")
    await ProfessionalRoleService(test_db).assign_roles(user.id, ["prof_photographer_001"])
    await test_db.commit()
    return user


async def _create(client, headers, **body):
    return await client.post("/api/v1/posts", json=body, headers=headers)


async def test_create_casual_post(client, author, auth_headers, test_db):
    res = await _create(
        client, auth_headers(author), content="First light #Photo", hashtags=["#Photo", "photo", "Film"],
    )
    assert res.status_code == 201
    body = res.json()
    assert body["is_first_casual_post"] is True
    assert body["is_first_portfolio_post"] is False

    post = (await client.get(f"/api/v1/posts/{body['post_id']}")).json()
    assert post["post_type"] == "CASUAL"
    assert post["author"]["username"] == "author_user_1"
    assert sorted(post["hashtags"]) == ["film", "photo"]

    tag = (await test_db.execute(select(Hashtag).where(Hashtag.name == "photo"))).scalar_one()
    assert tag.use_count == 1


async def test_second_casual_post_is_not_first(client, author, auth_headers, test_db):
    headers = auth_headers(author)
    await _create(client, headers, content="one")
    res = await _create(client, headers, content="two")
    assert res.json()["is_first_casual_post"] is False

    stored = (await test_db.execute(
        select(User.casual_post_count).where(User.id == author.id),
    )).scalar_one()
    assert stored == 2


async def test_post_needs_content_or_media(client, author, auth_headers):
    res = await _create(client, auth_headers(author), content="   ")
    assert res.status_code == 400
    assert res.json()["error"]["message"] == "Post must have either content or media"


async def test_media_only_post_ordered(client, author, auth_headers):
    res = await _create(
        client, auth_headers(author),
        documents=[{"url": "/api/v1/uploads/documents/x/cv.pdf", "file_name": "cv.pdf"}],
        images=[{"url": "/api/v1/uploads/images/x/a.png", "width": 10, "height": 10}],
        videos=[{"provider": "youtube", "external_id": "abc", "url": "https://youtu.be/abc"}],
    )
    assert res.status_code == 201
    post = (await client.get(f"/api/v1/posts/{res.json()['post_id']}")).json()
    assert post["content"] is None
    assert [m["media_type"] for m in post["media"]] == ["IMAGE", "VIDEO_LINK", "DOCUMENT"]
    assert [m["display_order"] for m in post["media"]] == [0, 1, 2]


async def test_portfolio_post_requires_roles(client, author, auth_headers):
    res = await _create(
        client, auth_headers(author), post_type="PORTFOLIO", content="Project",
        portfolio={"project_title": "Lookbook"},
    )
    assert res.status_code == 400
    assert res.json()["error"]["message"] == "Professional roles are required for portfolio posts"


async def test_portfolio_post_rejects_unheld_role(client, author, auth_headers):
    res = await _create(
        client, auth_headers(author), post_type="PORTFOLIO", content="Project",
        professional_role_ids=["prof_director_001"],
    )
    assert res.status_code == 400
    assert res.json()["error"]["message"] == "One or more professional roles are invalid"


async def test_portfolio_post_with_details(client, author, auth_headers):
    res = await _create(
        client, auth_headers(author), post_type="PORTFOLIO", content="Spring campaign",
        professional_role_ids=["prof_photographer_001"],
        portfolio={"project_title": "Spring Lookbook", "tools": ["Lightroom"], "team_size": 3},
    )
    assert res.status_code == 201
    assert res.json()["is_first_portfolio_post"] is True

    post = (await client.get(f"/api/v1/posts/{res.json()['post_id']}")).json()
    assert post["portfolio"]["project_title"] == "Spring Lookbook"
    assert post["portfolio"]["tools"] == ["Lightroom"]
    assert [r["key"] for r in post["professional_roles"]] == ["photographer"]


async def test_casual_post_drops_unheld_roles(client, author, auth_headers):
    res = await _create(
        client, auth_headers(author), content="bts",
        professional_role_ids=["prof_photographer_001", "prof_director_001"],
    )
    post = (await client.get(f"/api/v1/posts/{res.json()['post_id']}")).json()
    assert [r["key"] for r in post["professional_roles"]] == ["photographer"]


async def test_create_requires_session(client):
    res = await client.post("/api/v1/posts", json={"content": "hi"})
    assert res.status_code == 401


async def test_delete_own_post(client, author, auth_headers):
    headers = auth_headers(author)
    post_id = (await _create(client, headers, content="bye")).json()["post_id"]

    res = await client.delete(f"/api/v1/posts/{post_id}", headers=headers)
    assert res.status_code == 200
    assert (await client.get(f"/api/v1/posts/{post_id}")).status_code == 404

    again = await client.delete(f"/api/v1/posts/{post_id}", headers=headers)
    assert again.status_code == 400
    assert again.json()["error"]["message"] == "Post is already deleted"


async def test_cannot_delete_someone_elses_post(client, author, make_user, auth_headers):
    post_id = (await _create(client, auth_headers(author), content="mine")).json()["post_id"]
    intruder = await make_user("intruder_01")
    res = await client.delete(f"/api/v1/posts/{post_id}", headers=auth_headers(intruder))
    assert res.status_code == 403
    assert res.json()["error"]["message"] == "You can only delete your own posts"


async def test_missing_post(client):
    res = await client.get(f"/api/v1/posts/{uuid4()}")
    assert res.status_code == 404
    assert res.json()["error"]["message"] == "Post not found"
