"""Blob Repository — shared plumbing for record repositories over a BlobStore.

Invariants:
    - Each public operation runs as ONE retried unit: list + per-key gets share a retry
    - Any failure that escapes the retry executor becomes exactly one StorageError
      carrying the operation's code and the original failure
    - asyncio.CancelledError passes through unwrapped (BaseException, not Exception)
    - Timestamp checks run inside the operation, so violations surface as the
      operation's StorageError without being retried

Design Decisions:
    - Base class over mixin: two repositories, identical failure semantics
    - Keys that disappear between list() and get() are skipped, not errors:
      concurrent deletes are expected under last-write-wins
"""

import logging
from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import TypeVar

from onboarding.core.codec import RecordCodec, as_utc
from onboarding.core.errors import ErrorContext, StorageError, StorageErrorCode
from onboarding.core.repository_protocols import BlobStore
from onboarding.core.retry import RetryExecutor

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BlobRepository:
    """Record repository over one blob store namespace."""

    def __init__(
        self,
        store: BlobStore,
        codec: RecordCodec,
        retry: RetryExecutor | None = None,
    ):
        self.store = store
        self.codec = codec
        self.retry = retry or RetryExecutor()

    async def _execute(
        self,
        code: StorageErrorCode,
        message: str,
        operation: Callable[[], Awaitable[T]],
        key: str | None = None,
    ) -> T:
        """Run `operation` under the retry policy and map any failure to StorageError."""
        try:
            return await self.retry.run(operation)
        except Exception as e:
            logger.error(
                f"{message}: {e}",
                extra={"error_code": code.value, "store": self.store.name, "key": key},
            )
            raise StorageError(
                message, code, original_error=e,
                context=ErrorContext(store=self.store.name, key=key),
            ) from e

    async def _load(self, key: str) -> dict | None:
        raw = await self.store.get(key)
        if raw is None:
            return None
        return self.codec.decode(raw)

    async def _load_all(self) -> list[dict]:
        records = []
        for key in await self.store.list():
            record = await self._load(key)
            if record is not None:
                records.append(record)
        return records

    async def _write(self, key: str, record: dict) -> None:
        await self.store.set(key, self.codec.encode(record))


def require_id(record: dict, kind: str) -> str:
    record_id = record.get("id")
    if not isinstance(record_id, str) or not record_id:
        raise ValueError(f"{kind} record requires a non-empty string id")
    return record_id


def check_timestamps(record: dict, kind: str) -> None:
    """updatedAt must be a datetime; createdAt, when present, must not follow it."""
    created, updated = record.get("createdAt"), record.get("updatedAt")
    if not isinstance(updated, datetime):
        raise ValueError(f"{kind} record requires updatedAt as a datetime")
    if created is None:
        return
    if not isinstance(created, datetime):
        raise ValueError(f"{kind} createdAt must be a datetime")
    if as_utc(updated) < as_utc(created):
        raise ValueError(f"{kind} updatedAt precedes createdAt")
