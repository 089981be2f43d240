"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache) — single instance per process
    - Storage limits are expressed in bytes, TTLs in seconds

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all non-secret settings: local storage + console email
      make the API usable with only DATABASE_URL set
"""

from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_JWT_SECRET = "your-secret-key-change-this"


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    environment: Literal["development", "production", "test"] = "development"
    app_url: str = "http://localhost:3000"

    # Database
    database_url: str = "postgresql+asyncpg://cresp:cresp@db:5432/cresp"

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting providers hand out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Auth
    jwt_secret: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    session_ttl_seconds: int = 7 * 24 * 60 * 60
    session_cookie_name: str = "auth-token"
    verification_token_ttl_seconds: int = 24 * 60 * 60
    reset_token_ttl_seconds: int = 60 * 60
    password_hash_rounds: int = 12
    # Verification/reset tokens are echoed in API responses while outbound
    # email is disabled for the prototype
    expose_auth_tokens: bool = True

    # Storage
    storage_provider: Literal["local", "s3", "r2", "b2"] = "local"
    storage_base_url: str = "/api/v1/uploads"
    storage_local_path: str = "./uploads"
    storage_bucket: str = "cresp-media"
    storage_region: str = "auto"
    storage_access_key_id: str = ""
    storage_secret_access_key: str = ""
    storage_endpoint: str | None = None
    storage_presign_ttl_seconds: int = 3600
    storage_max_image_bytes: int = 5 * 1024 * 1024
    storage_max_document_bytes: int = 10 * 1024 * 1024

    # Email
    email_provider: Literal["console", "sendgrid", "mailjet"] = "console"
    from_email: str = "noreply@cresp.app"
    from_name: str = "Cresp"
    sendgrid_api_key: str = ""
    mailjet_api_key: str = ""
    mailjet_secret_key: str = ""

    # API
    cors_origins: list[str] = ["http://localhost:3000"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    return Settings()
