"""Onboarding Storage API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map OnboardingError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Blob store, repositories, and config loader built once in the lifespan

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - One RetryExecutor shared by both repositories: uniform backoff schedule
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from onboarding.api.error_handlers import register_error_handlers
from onboarding.api.routes import health, partners, submissions
from onboarding.api.routes import config as config_routes
from onboarding.config import Settings, get_settings
from onboarding.core.domain_types import PARTNERS_STORE, SUBMISSIONS_STORE
from onboarding.core.retry import RetryExecutor, RetryPolicy
from onboarding.infrastructure.blob_store import (
    InMemoryBlobStoreProvider, SqlBlobStoreProvider,
)
from onboarding.infrastructure.config_loader import ConfigCache, ConfigLoader
from onboarding.infrastructure.database import init_db
from onboarding.infrastructure.observability import setup_logging
from onboarding.services.partner_repository import PartnerRepository
from onboarding.services.submission_repository import SubmissionRepository

logger = logging.getLogger(__name__)


async def wire_components(app: FastAPI, settings: Settings) -> None:
    """Build storage components from settings and attach them to app.state."""
    if settings.storage_backend == "sql":
        db = init_db(
            settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )
        if settings.database_create_tables:
            await db.create_all()
        provider = SqlBlobStoreProvider(db)
    else:
        provider = InMemoryBlobStoreProvider()

    retry = RetryExecutor(RetryPolicy.linear(
        settings.storage_max_retries, settings.storage_retry_base_delay_seconds,
    ))
    app.state.blob_provider = provider
    app.state.partner_repository = PartnerRepository(
        provider.get_store(PARTNERS_STORE), retry,
    )
    app.state.submission_repository = SubmissionRepository(
        provider.get_store(SUBMISSIONS_STORE), retry,
    )
    app.state.config_loader = ConfigLoader(
        settings.config_dir, ConfigCache(settings.config_cache_ttl_seconds),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    await wire_components(app, settings)
    logger.info(f"Onboarding storage API started ({settings.storage_backend} backend)")
    yield
    provider = app.state.blob_provider
    if isinstance(provider, SqlBlobStoreProvider):
        await provider.db.dispose()
    logger.info("Onboarding storage API shutting down")


app = FastAPI(
    title="Partner Onboarding Storage API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(partners.router)
app.include_router(submissions.router)
app.include_router(config_routes.router)

register_error_handlers(app)
