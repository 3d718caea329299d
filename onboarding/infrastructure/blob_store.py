"""Blob Store Backends — in-memory and SQL implementations of the BlobStore protocol.

Invariants:
    - One BlobStore instance per namespace per provider (get_store is idempotent)
    - set() is an upsert: last write wins, no conflict detection
    - delete() of an absent key succeeds silently and reports False
    - list(prefix) returns keys only, sorted; values are fetched with get()
    - SQL failures leave as BlobStoreError via DatabaseSessionManager.session()

Design Decisions:
    - In-memory backend for tests and local development: same async surface, no IO
    - SQL backend stores every namespace in one `blobs` table keyed by (store, key)
    - Dialect-native INSERT .. ON CONFLICT for SQLite/PostgreSQL so concurrent saves of
      one key never race into an integrity error; session.merge() for other dialects
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import delete, select
from sqlalchemy.dialects import postgresql, sqlite

from onboarding.core.repository_protocols import BlobStore
from onboarding.infrastructure.database import DatabaseSessionManager
from onboarding.models.blob import Blob

logger = logging.getLogger(__name__)


# ─── In-Memory ───────────────────────────────────────────────────

class InMemoryBlobStore:
    """Dict-backed namespace. State lives as long as the instance."""

    def __init__(self, name: str):
        self.name = name
        self._data: dict[str, str] = {}

    async def get(self, key: str) -> str | None:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    async def list(self, prefix: str = "") -> list[str]:
        return sorted(k for k in self._data if k.startswith(prefix))


class InMemoryBlobStoreProvider:
    """Hands out one InMemoryBlobStore per namespace."""

    def __init__(self):
        self._stores: dict[str, InMemoryBlobStore] = {}

    def get_store(self, name: str) -> BlobStore:
        if name not in self._stores:
            self._stores[name] = InMemoryBlobStore(name)
        return self._stores[name]

    async def health_check(self) -> bool:
        return True


# ─── SQL ─────────────────────────────────────────────────────────

class SqlBlobStore:
    """Namespace backed by the `blobs` table."""

    def __init__(self, name: str, db: DatabaseSessionManager):
        self.name = name
        self._db = db

    async def get(self, key: str) -> str | None:
        async with self._db.session("get") as session:
            result = await session.execute(
                select(Blob.value).where(Blob.store == self.name, Blob.key == key),
            )
            return result.scalar_one_or_none()

    async def set(self, key: str, value: str) -> None:
        async with self._db.session("set") as session:
            dialect = self._db.engine.dialect.name
            now = datetime.now(timezone.utc)
            if dialect in ("sqlite", "postgresql"):
                insert = sqlite.insert if dialect == "sqlite" else postgresql.insert
                stmt = insert(Blob).values(
                    store=self.name, key=key, value=value, updated_at=now,
                )
                stmt = stmt.on_conflict_do_update(
                    index_elements=[Blob.store, Blob.key],
                    set_={"value": stmt.excluded.value, "updated_at": now},
                )
                await session.execute(stmt)
            else:
                await session.merge(
                    Blob(store=self.name, key=key, value=value, updated_at=now),
                )
            await session.commit()
        logger.debug(
            f"Stored blob {self.name}/{key}",
            extra={"store": self.name, "key": key},
        )

    async def delete(self, key: str) -> bool:
        async with self._db.session("delete") as session:
            result = await session.execute(
                delete(Blob).where(Blob.store == self.name, Blob.key == key),
            )
            await session.commit()
            return result.rowcount > 0

    async def list(self, prefix: str = "") -> list[str]:
        query = select(Blob.key).where(Blob.store == self.name)
        if prefix:
            query = query.where(Blob.key.startswith(prefix, autoescape=True))
        async with self._db.session("list") as session:
            result = await session.execute(query.order_by(Blob.key))
            keys = result.scalars().all()
        # SQLite LIKE is case-insensitive for ASCII
        return [k for k in keys if k.startswith(prefix)]


class SqlBlobStoreProvider:
    """Hands out one SqlBlobStore per namespace over a shared session manager."""

    def __init__(self, db: DatabaseSessionManager):
        self.db = db
        self._stores: dict[str, SqlBlobStore] = {}

    def get_store(self, name: str) -> BlobStore:
        if name not in self._stores:
            self._stores[name] = SqlBlobStore(name, self.db)
        return self._stores[name]

    async def health_check(self) -> bool:
        return await self.db.health_check()
