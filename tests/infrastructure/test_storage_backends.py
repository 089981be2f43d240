"""Storage Backends — local filesystem writes/reads and S3 presigned URLs.

Invariants:
    - LocalStorage never reads or writes outside its root
    - Local storage refuses presigned uploads; S3 signs them without network access
"""

import pytest

from cresp.config import Settings
from cresp.core.domain_types import StorageProvider
from cresp.core.errors import StorageUnavailableError
from cresp.infrastructure.storage import LocalStorage, S3Storage, build_storage


async def test_local_write_then_read(tmp_path):
    storage = LocalStorage(tmp_path, "/api/v1/uploads")
    info = await storage.write("images/u1/a.png", b"png", "image/png")
    assert info.url == "/api/v1/uploads/images/u1/a.png"
    assert info.size_bytes == 3
    assert (tmp_path / "images" / "u1" / "a.png").read_bytes() == b"png"
    assert await storage.read("images/u1/a.png") == b"png"


async def test_local_read_outside_root(tmp_path):
    (tmp_path / "secret.txt").write_text("x")
    storage = LocalStorage(tmp_path / "uploads", "/api/v1/uploads")
    with pytest.raises(FileNotFoundError):
        await storage.read("../secret.txt")
    with pytest.raises(FileNotFoundError):
        await storage.read("images/missing.png")


async def test_local_refuses_presign(tmp_path):
    storage = LocalStorage(tmp_path, "/api/v1/uploads")
    with pytest.raises(StorageUnavailableError):
        await storage.presigned_upload_url("images/u1/a.png", "image/png", 60)


async def test_s3_presigned_put_url():
    storage = S3Storage(
        provider=StorageProvider.R2,
        bucket="cresp-media",
        base_url="https://media.cresp.app",
        region="us-east-1",
        access_key="AKIDEXAMPLE",
        secret_key="secret",
        endpoint_url="https://account.r2.cloudflarestorage.com",
    )
    url = await storage.presigned_upload_url("images/u1/a.png", "image/png", 300)
    assert url.startswith("https://")
    assert "cresp-media" in url
    assert "images/u1/a.png?" in url
    assert "X-Amz-Signature=" in url
    assert "X-Amz-Expires=300" in url
    assert storage.url_for("images/u1/a.png") == "https://media.cresp.app/images/u1/a.png"
    assert storage.is_local is False


def test_build_storage_selects_backend(tmp_path):
    local = build_storage(Settings(storage_provider="local", storage_local_path=str(tmp_path)))
    assert isinstance(local, LocalStorage)
    assert local.is_local is True
