"""Feed Routes — keyset pagination over public, non-deleted posts.

Invariants:
    - Newest first; pages of 20; next_cursor only when more rows exist
    - Walking cursors visits every post exactly once
    - Unknown cursor → empty page; deleted posts never appear
"""

from uuid import UUID, uuid4

from sqlalchemy import update

from cresp.models.post import Post


async def _seed_posts(client, headers, count: int) -> list[str]:
    ids = []
    for i in range(count):
        res = await client.post("/api/v1/posts", json={"content": f"post {i}"}, headers=headers)
        ids.append(res.json()["post_id"])
    return ids


async def test_empty_feed(client):
    res = await client.get("/api/v1/feed")
    assert res.json() == {"posts": [], "next_cursor": None, "has_more": False}


async def test_cursor_walk_visits_each_post_once(client, make_user, auth_headers):
    user = await make_user()
    created = await _seed_posts(client, auth_headers(user), 25)

    first = (await client.get("/api/v1/feed")).json()
    assert len(first["posts"]) == 20
    assert first["has_more"] is True
    assert first["next_cursor"] == first["posts"][-1]["id"]

    second = (await client.get("/api/v1/feed", params={"cursor": first["next_cursor"]})).json()
    assert len(second["posts"]) == 5
    assert second["has_more"] is False
    assert second["next_cursor"] is None

    seen = [p["id"] for p in first["posts"] + second["posts"]]
    assert sorted(seen) == sorted(created)
    assert len(set(seen)) == 25
    assert seen[0] == created[-1]


async def test_unknown_cursor_gives_empty_page(client, make_user, auth_headers):
    user = await make_user()
    await _seed_posts(client, auth_headers(user), 2)
    res = await client.get("/api/v1/feed", params={"cursor": str(uuid4())})
    assert res.json()["posts"] == []


async def test_deleted_posts_hidden(client, make_user, auth_headers):
    user = await make_user()
    headers = auth_headers(user)
    keep, gone = await _seed_posts(client, headers, 2)
    await client.delete(f"/api/v1/posts/{gone}", headers=headers)
    ids = [p["id"] for p in (await client.get("/api/v1/feed")).json()["posts"]]
    assert ids == [keep]


async def test_popular_sort_orders_by_likes(client, make_user, auth_headers, test_db):
    user = await make_user()
    low, high = await _seed_posts(client, auth_headers(user), 2)
    await test_db.execute(update(Post).where(Post.id == UUID(low)).values(like_count=1))
    await test_db.execute(update(Post).where(Post.id == UUID(high)).values(like_count=9))
    await test_db.commit()

    ids = [p["id"] for p in (await client.get("/api/v1/feed", params={"sort": "popular"})).json()["posts"]]
    assert ids == [high, low]


async def test_unknown_sort_falls_back_to_latest(client, make_user, auth_headers):
    user = await make_user()
    older, newer = await _seed_posts(client, auth_headers(user), 2)
    res = await client.get("/api/v1/feed", params={"sort": "trending"})
    assert res.status_code == 200
    assert [p["id"] for p in res.json()["posts"]] == [newer, older]


async def test_user_posts_only_that_author(client, make_user, auth_headers):
    alice = await make_user("alice_user_1")
    bob = await make_user("bob_user_001")
    await _seed_posts(client, auth_headers(alice), 2)
    await _seed_posts(client, auth_headers(bob), 1)
    res = await client.get(f"/api/v1/users/{bob.id}/posts")
    posts = res.json()["posts"]
    assert len(posts) == 1
    assert posts[0]["author"]["username"] == "bob_user_001"


async def test_discussed_cursor_walk_with_tied_counts(client, make_user, auth_headers, test_db):
    user = await make_user()
    created = await _seed_posts(client, auth_headers(user), 23)
    for i, post_id in enumerate(created):
        await test_db.execute(
            update(Post).where(Post.id == UUID(post_id)).values(comment_count=i % 3),
        )
    await test_db.commit()

    first = (await client.get("/api/v1/feed", params={"sort": "discussed"})).json()
    assert first["has_more"] is True
    second = (await client.get(
        "/api/v1/feed", params={"sort": "discussed", "cursor": first["next_cursor"]},
    )).json()
    assert second["has_more"] is False

    posts = first["posts"] + second["posts"]
    assert sorted(p["id"] for p in posts) == sorted(created)
    counts = [p["comment_count"] for p in posts]
    assert counts == sorted(counts, reverse=True)
    for count in (2, 1, 0):
        tied = [p["created_at"] for p in posts if p["comment_count"] == count]
        assert tied == sorted(tied, reverse=True)
