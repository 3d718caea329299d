"""Blob ORM — one row per (store, key) pair of the SQL-backed blob store.

Invariants:
    - (store, key) is the composite primary key: one value per key per namespace
    - value holds the codec's JSON text verbatim; the database never parses it
    - updated_at is bookkeeping for operators, not the record's own updatedAt

Design Decisions:
    - Text column over JSON column: the store is opaque, and keeping the exact text
      avoids dialect-specific JSON normalization
"""

from datetime import datetime, timezone

from sqlalchemy import String, Text, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from onboarding.db.base import Base


class Blob(Base):
    """A stored value in a named blob namespace."""
    __tablename__ = "blobs"

    store: Mapped[str] = mapped_column(String(64), primary_key=True)
    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
