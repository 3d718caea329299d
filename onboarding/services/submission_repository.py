"""Submission Repository — CRUD and listing over the `submissions` blob namespace.

Invariants:
    - Mirrors PartnerRepository: None on not-found, caller-owned updatedAt, idempotent delete
    - list_submissions_by_partner returns exactly the submissions whose partnerId
      matches: none missing, none extra, any order
    - partnerId is not checked against the partners namespace (caller's responsibility)

Design Decisions:
    - No partner index: lookup by partner is a linear scan over all submissions,
      acceptable for low-to-moderate record volumes
"""

import logging

from onboarding.core.codec import SUBMISSION_CODEC
from onboarding.core.errors import RecordIdReusedError, StorageErrorCode
from onboarding.core.records import Submission
from onboarding.core.repository_protocols import BlobStore
from onboarding.core.retry import RetryExecutor
from onboarding.services.blob_repository import (
    BlobRepository, check_timestamps, require_id,
)

logger = logging.getLogger(__name__)


class SubmissionRepository(BlobRepository):
    """Questionnaire submissions keyed by submission id."""

    def __init__(self, store: BlobStore, retry: RetryExecutor | None = None):
        super().__init__(store, SUBMISSION_CODEC, retry)
        self._deleted_ids: set[str] = set()

    async def get_submission(self, submission_id: str) -> Submission | None:
        return await self._execute(
            StorageErrorCode.GET_SUBMISSION_ERROR,
            f"Failed to retrieve submission {submission_id}",
            lambda: self._load(submission_id),
            key=submission_id,
        )

    async def save_submission(self, submission: Submission) -> None:
        submission_id = submission.get("id")

        async def operation():
            key = require_id(submission, "Submission")
            if key in self._deleted_ids:
                raise RecordIdReusedError(
                    f"Submission id {key} was deleted and cannot be reused",
                )
            check_timestamps(submission, "Submission")
            await self._write(key, submission)

        await self._execute(
            StorageErrorCode.SAVE_SUBMISSION_ERROR,
            f"Failed to save submission {submission_id}",
            operation, key=submission_id,
        )
        logger.info(
            f"Saved submission {submission_id}",
            extra={"submission_id": submission_id},
        )

    async def list_submissions(self) -> list[Submission]:
        return await self._execute(
            StorageErrorCode.LIST_SUBMISSIONS_ERROR,
            "Failed to list submissions",
            self._load_all,
        )

    async def list_submissions_by_partner(self, partner_id: str) -> list[Submission]:
        """Submissions belonging to `partner_id` (linear scan)."""
        async def operation():
            return [
                s for s in await self._load_all()
                if s.get("partnerId") == partner_id
            ]

        return await self._execute(
            StorageErrorCode.LIST_SUBMISSIONS_ERROR,
            f"Failed to list submissions for partner {partner_id}",
            operation,
        )

    async def delete_submission(self, submission_id: str) -> None:
        removed = await self._execute(
            StorageErrorCode.DELETE_SUBMISSION_ERROR,
            f"Failed to delete submission {submission_id}",
            lambda: self.store.delete(submission_id),
            key=submission_id,
        )
        if removed:
            self._deleted_ids.add(submission_id)
        logger.info(
            f"Deleted submission {submission_id}",
            extra={"submission_id": submission_id},
        )
