"""Storage Rules — pure upload validation, key generation and path safety.

Invariants:
    - All functions are PURE (time and randomness injected by the caller)
    - Keys look like <kind>s/<user_id>/<epoch_ms>-<random>.<ext>, always exactly three
      segments: <ext> is 1-10 lowercase alphanumerics or "bin"
    - Served paths are relative, normalized, and never escape the storage root

Design Decisions:
    - Size limits passed in (not read from settings): core stays config-free,
      tests exercise boundaries without env manipulation
"""

import posixpath
import re
import secrets
import string
from pathlib import PurePosixPath

from cresp.core.domain_types import FileKind

ALLOWED_MIME_TYPES: dict[FileKind, tuple[str, ...]] = {
    FileKind.IMAGE: ("image/jpeg", "image/png", "image/webp", "image/gif"),
    FileKind.DOCUMENT: (
        "application/pdf",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "text/plain",
    ),
}

CONTENT_TYPES_BY_EXTENSION: dict[str, str] = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "webp": "image/webp",
    "pdf": "application/pdf",
    "txt": "text/plain",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}

UPLOAD_CACHE_CONTROL = "public, max-age=31536000, immutable"
KEY_RANDOM_LENGTH = 13
FALLBACK_EXTENSION = "bin"

_KEY_ALPHABET = string.ascii_lowercase + string.digits
_EXTENSION_PATTERN = re.compile(r"[a-z0-9]{1,10}")


def check_file(size: int, mime_type: str, kind: FileKind, max_bytes: int) -> str | None:
    """Size first, then MIME type. Returns error message or None."""
    if size > max_bytes:
        return f"File too large. Maximum size is {max_bytes / 1024 / 1024:g}MB"
    allowed = ALLOWED_MIME_TYPES[kind]
    if mime_type not in allowed:
        return f"File type not allowed. Allowed types: {', '.join(allowed)}"
    return None


def file_extension(filename: str) -> str:
    """Lower-cased extension of the base name; FALLBACK_EXTENSION unless it is 1-10 alphanumerics."""
    name = PurePosixPath(filename.replace("\\", "/")).name
    if "." not in name:
        return FALLBACK_EXTENSION
    ext = name.rsplit(".", 1)[-1].lower()
    return ext if _EXTENSION_PATTERN.fullmatch(ext) else FALLBACK_EXTENSION


def random_key_part(length: int = KEY_RANDOM_LENGTH) -> str:
    return "".join(secrets.choice(_KEY_ALPHABET) for _ in range(length))


def generate_key(
    user_id: str, kind: FileKind, filename: str, epoch_ms: int, random_part: str,
) -> str:
    return f"{kind.value}s/{user_id}/{epoch_ms}-{random_part}.{file_extension(filename)}"


def public_url(base_url: str, key: str) -> str:
    return f"{base_url.rstrip('/')}/{key}"


def safe_relative_path(path: str) -> str | None:
    """Normalize a requested upload path. None when it is absolute or escapes the root."""
    if not path or path.startswith("/") or "\\" in path or "\x00" in path:
        return None
    normalized = posixpath.normpath(path)
    if normalized in (".", "..") or normalized.startswith("../"):
        return None
    return normalized


def content_type_for(path: str) -> str:
    ext = path.rsplit(".", 1)[-1].lower() if "." in path else ""
    return CONTENT_TYPES_BY_EXTENSION.get(ext, "application/octet-stream")
