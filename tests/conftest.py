"""Root conftest — shared test configuration and the recording email outbox."""

import os

# Settings are cached on first import of the app: fix the environment before that
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("JWT_SECRET", "test-secret-not-for-production")
os.environ.setdefault("PASSWORD_HASH_ROUNDS", "4")
os.environ.setdefault("STORAGE_PROVIDER", "local")
os.environ.setdefault("EMAIL_PROVIDER", "console")
os.environ.setdefault("LOG_FORMAT", "text")

import pytest  # noqa: E402

from cresp.infrastructure.email import (  # noqa: E402
    ConsoleProvider, EmailMessage, EmailResult, EmailService,
)


class RecordingProvider(ConsoleProvider):
    """Console transport that also keeps every message for assertions."""

    def __init__(self):
        super().__init__()
        self.sent: list[EmailMessage] = []

    async def send(self, message: EmailMessage) -> EmailResult:
        self.sent.append(message)
        return await super().send(message)


@pytest.fixture
def emails():
    return EmailService(RecordingProvider(), "http://localhost:3000")
