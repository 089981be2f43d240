"""Cresp API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map CrespError → structured JSON responses
    - CORS configured from settings with credentials (session cookie)
    - Database initialized on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cresp.api.error_handlers import register_error_handlers
from cresp.api.routes import (
    admin, auth, feedback, health, media, moderation, onboarding, posts,
    professional_roles, referral, users, waitlist,
)
from cresp.config import DEFAULT_JWT_SECRET, get_settings
from cresp.infrastructure.database import close_db, init_db
from cresp.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    if settings.jwt_secret == DEFAULT_JWT_SECRET:
        logger.warning("JWT_SECRET is not set; using the development default")
    init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("Cresp API started")
    yield
    await close_db()
    logger.info("Cresp API shutting down")


app = FastAPI(title="Cresp API", version="1.0.0", lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(onboarding.router)
app.include_router(professional_roles.router)
app.include_router(admin.router)
app.include_router(users.router)
app.include_router(posts.router)
app.include_router(moderation.router)
app.include_router(referral.router)
app.include_router(feedback.router)
app.include_router(media.router)
app.include_router(waitlist.router)
