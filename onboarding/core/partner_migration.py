"""Legacy Partner Migration — strips the deprecated tpmOwner field from stored partners.

Invariants:
    - Output never contains tpmOwner; every other key is preserved
    - Input record is never mutated
    - A deprecated key is "present" when the key exists, whatever its value:
      has_deprecated_fields and the migration apply that same test
    - An audit event is emitted only for a non-empty (not None, not "") value

Design Decisions:
    - Audit emitted through an injected callback, not a console write: callers and
      tests decide where the trail goes (default sink: WARNING log record)
"""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEPRECATED_FIELDS = ("tpmOwner",)


@dataclass(frozen=True)
class MigrationAuditEvent:
    """A deprecated field value dropped from a partner record."""
    partner_id: str | None
    partner_name: str | None
    field: str
    value: object


AuditSink = Callable[[MigrationAuditEvent], None]


def log_audit_event(event: MigrationAuditEvent) -> None:
    """Default audit sink."""
    logger.warning(
        f"[Migration] Partner {event.partner_id} ({event.partner_name}) had "
        f"{event.field}: {event.value} - field removed during migration",
        extra={"partner_id": event.partner_id},
    )


def has_deprecated_fields(record: dict) -> bool:
    """True when migration would change `record` (a deprecated key exists)."""
    return any(name in record for name in DEPRECATED_FIELDS)


def migrate_legacy_partner(record: dict, audit: AuditSink | None = None) -> dict:
    """Return a copy of `record` without deprecated fields.

    Every present deprecated key is dropped; only non-empty values are audited.
    """
    migrated = dict(record)
    if not has_deprecated_fields(record):
        return migrated
    sink = audit or log_audit_event
    for name in DEPRECATED_FIELDS:
        value = migrated.pop(name, None)
        if value not in (None, ""):
            sink(MigrationAuditEvent(
                partner_id=record.get("id"),
                partner_name=record.get("partnerName"),
                field=name,
                value=value,
            ))
    return migrated


def migrate_legacy_partners(
    records: Iterable[dict], audit: AuditSink | None = None,
) -> list[dict]:
    return [migrate_legacy_partner(r, audit) for r in records]
