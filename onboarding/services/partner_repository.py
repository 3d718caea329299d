"""Partner Repository — CRUD and listing over the `partners` blob namespace.

Invariants:
    - get_partner returns None for an absent id (absence is not a failure)
    - save_partner upserts by id and writes the caller's updatedAt verbatim (no auto-stamp)
    - save_partner requires updatedAt; createdAt is optional but must not follow it
    - An id whose record this repository instance removed is never saved again by it;
      deleting an id that held nothing leaves it usable
    - delete_partner is idempotent
    - Records read back are migrated: the deprecated tpmOwner field is stripped

Design Decisions:
    - Trusting the caller's updatedAt keeps saves pure and testable; the API layer stamps
    - Tombstones are per repository instance: no guarantee across processes or
      backend resets
"""

import logging

from onboarding.core.codec import PARTNER_CODEC
from onboarding.core.errors import RecordIdReusedError, StorageErrorCode
from onboarding.core.partner_migration import (
    AuditSink, migrate_legacy_partner, migrate_legacy_partners,
)
from onboarding.core.records import PartnerRecord
from onboarding.core.repository_protocols import BlobStore
from onboarding.core.retry import RetryExecutor
from onboarding.services.blob_repository import (
    BlobRepository, check_timestamps, require_id,
)

logger = logging.getLogger(__name__)


class PartnerRepository(BlobRepository):
    """Partner records keyed by partner id."""

    def __init__(
        self,
        store: BlobStore,
        retry: RetryExecutor | None = None,
        audit: AuditSink | None = None,
    ):
        super().__init__(store, PARTNER_CODEC, retry)
        self._audit = audit
        self._deleted_ids: set[str] = set()

    async def get_partner(self, partner_id: str) -> PartnerRecord | None:
        """Get a partner record by id, or None if not found."""
        async def operation():
            record = await self._load(partner_id)
            if record is None:
                return None
            return migrate_legacy_partner(record, self._audit)

        return await self._execute(
            StorageErrorCode.GET_PARTNER_ERROR,
            f"Failed to retrieve partner {partner_id}",
            operation, key=partner_id,
        )

    async def save_partner(self, partner: PartnerRecord) -> None:
        """Upsert a partner record by id."""
        partner_id = partner.get("id")

        async def operation():
            key = require_id(partner, "Partner")
            if key in self._deleted_ids:
                raise RecordIdReusedError(f"Partner id {key} was deleted and cannot be reused")
            check_timestamps(partner, "Partner")
            await self._write(key, partner)

        await self._execute(
            StorageErrorCode.SAVE_PARTNER_ERROR,
            f"Failed to save partner {partner_id}",
            operation, key=partner_id,
        )
        logger.info(f"Saved partner {partner_id}", extra={"partner_id": partner_id})

    async def list_partners(self) -> list[PartnerRecord]:
        """All partner records, in backend listing order."""
        async def operation():
            records = await self._load_all()
            return migrate_legacy_partners(records, self._audit)

        return await self._execute(
            StorageErrorCode.LIST_PARTNERS_ERROR,
            "Failed to list partners",
            operation,
        )

    async def delete_partner(self, partner_id: str) -> None:
        """Delete a partner record. Deleting an absent id is not an error.

        Only an id whose record was actually removed is retired from reuse.
        """
        removed = await self._execute(
            StorageErrorCode.DELETE_PARTNER_ERROR,
            f"Failed to delete partner {partner_id}",
            lambda: self.store.delete(partner_id),
            key=partner_id,
        )
        if removed:
            self._deleted_ids.add(partner_id)
        logger.info(f"Deleted partner {partner_id}", extra={"partner_id": partner_id})
