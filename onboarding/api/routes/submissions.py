"""Submission Routes — create, list (optionally by partner), read, update, delete submissions.

Invariants:
    - POST stamps createdAt = updatedAt = now; signature.timestamp defaults to now
    - PUT merges into the stored submission; id and createdAt never change;
      updatedAt = now; a replaced signature without a timestamp is stamped now
    - GET ?partner_id= returns exactly that partner's submissions
    - GET/PUT on an absent id → 404; DELETE is idempotent → 204
"""

import logging

from fastapi import APIRouter, Depends, Query, Response, status

from onboarding.api.dependencies import get_submission_repository
from onboarding.api.payloads import (
    created_or_updated, new_record_id, page_of, to_record, utc_now,
)
from onboarding.core.codec import SUBMISSION_CODEC, format_datetime
from onboarding.core.errors import ResourceNotFoundError
from onboarding.schemas.submission import SubmissionCreate, SubmissionUpdate
from onboarding.services.submission_repository import SubmissionRepository

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/submissions", tags=["submissions"])


@router.get("")
async def list_submissions(
    partner_id: str | None = Query(None),
    page: int | None = Query(None, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    repo: SubmissionRepository = Depends(get_submission_repository),
):
    if partner_id is not None:
        submissions = await repo.list_submissions_by_partner(partner_id)
    else:
        submissions = await repo.list_submissions()
    submissions.sort(key=created_or_updated, reverse=True)
    return page_of(
        [SUBMISSION_CODEC.serialize(s) for s in submissions], page, page_size,
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_submission(
    body: SubmissionCreate,
    repo: SubmissionRepository = Depends(get_submission_repository),
):
    now = format_datetime(utc_now())
    payload = body.model_dump(mode="json", exclude_none=True)
    payload["id"] = body.id or new_record_id("submission")
    payload["createdAt"] = payload["updatedAt"] = now
    payload["signature"].setdefault("timestamp", now)
    payload["signature"].setdefault("ipAddress", body.ipAddress)
    submission = to_record(SUBMISSION_CODEC, payload)

    await repo.save_submission(submission)
    logger.info(
        f"Created submission {submission['id']} for partner {submission['partnerId']}",
        extra={"submission_id": submission["id"], "partner_id": submission["partnerId"]},
    )
    return {"success": True, "data": SUBMISSION_CODEC.serialize(submission)}


@router.get("/{submission_id}")
async def get_submission(
    submission_id: str,
    repo: SubmissionRepository = Depends(get_submission_repository),
):
    submission = await repo.get_submission(submission_id)
    if submission is None:
        raise ResourceNotFoundError("Submission", submission_id)
    return {"success": True, "data": SUBMISSION_CODEC.serialize(submission)}


@router.put("/{submission_id}")
async def update_submission(
    submission_id: str,
    body: SubmissionUpdate,
    repo: SubmissionRepository = Depends(get_submission_repository),
):
    """Merge the update into the stored submission and stamp updatedAt."""
    existing = await repo.get_submission(submission_id)
    if existing is None:
        raise ResourceNotFoundError("Submission", submission_id)

    now = utc_now()
    merged = SUBMISSION_CODEC.serialize(existing)
    changes = body.model_dump(mode="json", exclude_unset=True)
    if "signature" in changes:
        changes["signature"].setdefault("timestamp", format_datetime(now))
        changes["signature"].setdefault(
            "ipAddress", changes.get("ipAddress") or merged.get("ipAddress"),
        )
    merged.update(changes)
    submission = to_record(SUBMISSION_CODEC, merged)
    submission["updatedAt"] = max(now, created_or_updated(submission))

    await repo.save_submission(submission)
    logger.info(
        f"Updated submission {submission_id}",
        extra={"submission_id": submission_id, "fields": sorted(changes)},
    )
    return {"success": True, "data": SUBMISSION_CODEC.serialize(submission)}


@router.delete("/{submission_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_submission(
    submission_id: str,
    repo: SubmissionRepository = Depends(get_submission_repository),
):
    await repo.delete_submission(submission_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
