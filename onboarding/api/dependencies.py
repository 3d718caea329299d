"""API Dependencies — resolve repositories and loaders wired onto app.state at startup.

Invariants:
    - Components are constructed once in the lifespan, never per request
    - Missing wiring is a startup bug: raises RuntimeError, not a 404/500 guess

Design Decisions:
    - app.state over module globals: tests swap components via dependency_overrides
"""

from fastapi import Request

from onboarding.core.repository_protocols import BlobStoreProvider
from onboarding.infrastructure.config_loader import ConfigLoader
from onboarding.services.partner_repository import PartnerRepository
from onboarding.services.submission_repository import SubmissionRepository


def _state(request: Request, name: str):
    component = getattr(request.app.state, name, None)
    if component is None:
        raise RuntimeError(f"{name} not initialized")
    return component


def get_partner_repository(request: Request) -> PartnerRepository:
    return _state(request, "partner_repository")


def get_submission_repository(request: Request) -> SubmissionRepository:
    return _state(request, "submission_repository")


def get_config_loader(request: Request) -> ConfigLoader:
    return _state(request, "config_loader")


def get_blob_provider(request: Request) -> BlobStoreProvider:
    return _state(request, "blob_provider")
