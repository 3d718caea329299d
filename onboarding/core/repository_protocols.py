"""Boundary Protocols — contracts between the repositories and blob store backends.

Invariants:
    - Repositories NEVER import a concrete backend — they receive a BlobStore
    - A BlobStore is bound to one namespace ("partners" or "submissions")
    - Values are the JSON text produced by the codec; backends treat them as opaque
    - get() returns None for an absent key; delete() of an absent key is a no-op
      that returns False; True means a stored value was removed
    - Backend failures surface as BlobStoreError (core/errors.py)

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - Async in Protocol: every implementation does IO
"""

from typing import Protocol


class BlobStore(Protocol):
    """Key-value blob store for a single namespace."""
    name: str

    async def get(self, key: str) -> str | None: ...
    async def set(self, key: str, value: str) -> None: ...
    async def delete(self, key: str) -> bool: ...
    async def list(self, prefix: str = "") -> list[str]: ...


class BlobStoreProvider(Protocol):
    """Resolves a namespace name to its BlobStore."""
    def get_store(self, name: str) -> BlobStore: ...

    async def health_check(self) -> bool: ...
