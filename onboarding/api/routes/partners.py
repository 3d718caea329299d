"""Partner Routes — list, create, read, update, delete partner records.

Invariants:
    - POST stamps createdAt = updatedAt = now and generates an id when omitted
    - PUT merges into the stored record; id and createdAt never change; updatedAt = now
    - GET/PUT on an absent id → 404; DELETE is idempotent → 204
    - StorageError propagates to the global handler with its code (503 outage,
      409 reused id, 400 rejected input)

Design Decisions:
    - The route layer stamps updatedAt; the repository stores whatever it is given
    - List sorted newest first so pages are stable across calls
"""

import logging

from fastapi import APIRouter, Depends, Query, Response, status

from onboarding.api.dependencies import get_partner_repository
from onboarding.api.payloads import (
    created_or_updated, new_record_id, page_of, to_record, utc_now,
)
from onboarding.core.codec import PARTNER_CODEC, format_datetime
from onboarding.core.errors import ResourceNotFoundError
from onboarding.schemas.partner import PartnerCreate, PartnerUpdate
from onboarding.services.partner_repository import PartnerRepository

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/partners", tags=["partners"])


@router.get("")
async def list_partners(
    page: int | None = Query(None, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    repo: PartnerRepository = Depends(get_partner_repository),
):
    """List partners, optionally paginated."""
    partners = await repo.list_partners()
    partners.sort(key=created_or_updated, reverse=True)
    return page_of(
        [PARTNER_CODEC.serialize(p) for p in partners], page, page_size,
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_partner(
    body: PartnerCreate,
    repo: PartnerRepository = Depends(get_partner_repository),
):
    """Create a partner record with defaults for omitted fields."""
    now = utc_now()
    payload = body.model_dump(mode="json", exclude_none=True)
    payload["id"] = body.id or new_record_id("partner")
    payload["createdAt"] = payload["updatedAt"] = format_datetime(now)
    partner = to_record(PARTNER_CODEC, payload)

    await repo.save_partner(partner)
    logger.info(
        f"Created partner {partner['id']}", extra={"partner_id": partner["id"]},
    )
    return {"success": True, "data": PARTNER_CODEC.serialize(partner)}


@router.get("/{partner_id}")
async def get_partner(
    partner_id: str,
    repo: PartnerRepository = Depends(get_partner_repository),
):
    partner = await repo.get_partner(partner_id)
    if partner is None:
        raise ResourceNotFoundError("Partner", partner_id)
    return {"success": True, "data": PARTNER_CODEC.serialize(partner)}


@router.put("/{partner_id}")
async def update_partner(
    partner_id: str,
    body: PartnerUpdate,
    repo: PartnerRepository = Depends(get_partner_repository),
):
    """Merge the update into the stored partner and stamp updatedAt."""
    existing = await repo.get_partner(partner_id)
    if existing is None:
        raise ResourceNotFoundError("Partner", partner_id)

    merged = PARTNER_CODEC.serialize(existing)
    merged.update(body.model_dump(mode="json", exclude_unset=True))
    partner = to_record(PARTNER_CODEC, merged)
    partner["updatedAt"] = max(utc_now(), created_or_updated(partner))

    await repo.save_partner(partner)
    return {"success": True, "data": PARTNER_CODEC.serialize(partner)}


@router.delete("/{partner_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_partner(
    partner_id: str,
    repo: PartnerRepository = Depends(get_partner_repository),
):
    await repo.delete_partner(partner_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
