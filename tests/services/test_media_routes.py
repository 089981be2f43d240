"""Media Routes — local uploads, file serving and cloud-only presigned URLs.

Invariants:
    - Local uploads land under <kind>s/<user_id>/ and are served back with
      an immutable Cache-Control header
    - Disallowed MIME types never reach storage
    - Paths escaping the upload root are 404
    - Presigned URLs are refused (403) on local storage
"""

from cresp.core.storage_rules import UPLOAD_CACHE_CONTROL

PNG = b"\x89PNG\r\n\x1a\nfake-image-bytes"


async def _upload(client, headers, name="shot.png", content=PNG, mime="image/png", kind="image"):
    return await client.post(
        "/api/v1/media/upload-local",
        files={"file": (name, content, mime)},
        data={"kind": kind},
        headers=headers,
    )


async def test_upload_and_serve_local_file(client, make_user, auth_headers, storage):
    user = await make_user()
    res = await _upload(client, auth_headers(user))
    assert res.status_code == 200
    body = res.json()
    assert body["key"].startswith(f"images/{user.id}/")
    assert body["key"].endswith(".png")
    assert body["url"] == f"/api/v1/uploads/{body['key']}"
    assert body["size"] == len(PNG)
    assert body["file_name"] == "shot.png"

    served = await client.get(body["url"])
    assert served.status_code == 200
    assert served.content == PNG
    assert served.headers["content-type"] == "image/png"
    assert served.headers["cache-control"] == UPLOAD_CACHE_CONTROL


async def test_upload_document(client, make_user, auth_headers):
    user = await make_user()
    res = await _upload(
        client, auth_headers(user), name="resume.pdf", content=b"%PDF-1.4", mime="application/pdf",
        kind="document",
    )
    assert res.json()["key"].startswith(f"documents/{user.id}/")


async def test_upload_rejects_mime_type(client, make_user, auth_headers, storage):
    user = await make_user()
    res = await _upload(client, auth_headers(user), name="run.exe", mime="application/x-msdownload")
    assert res.status_code == 400
    assert res.json()["error"]["message"].startswith("File type not allowed")
    assert not any(storage.root.rglob("*.exe"))


async def test_upload_requires_session(client):
    res = await _upload(client, {})
    assert res.status_code == 401


async def test_missing_file_is_404(client):
    res = await client.get("/api/v1/uploads/images/nobody/missing.png")
    assert res.status_code == 404


async def test_traversal_is_404(client):
    res = await client.get("/api/v1/uploads/..%2F..%2Fetc%2Fpasswd")
    assert res.status_code == 404


async def test_presigned_url_needs_cloud_storage(client, make_user, auth_headers):
    user = await make_user()
    res = await client.post(
        "/api/v1/media/upload-url",
        json={"file_name": "a.png", "content_type": "image/png", "size": 100},
        headers=auth_headers(user),
    )
    assert res.status_code == 403
    assert res.json()["error"]["code"] == "STORAGE_UNAVAILABLE"
