"""Serialization Codec — converts records between in-memory dicts and stored JSON payloads.

Invariants:
    - serialize(): every datetime/date value anywhere in the record becomes an
      ISO-8601 UTC string with millisecond precision ("2024-01-02T03:04:05.678Z")
    - deserialize(): every known date path is parsed back into an aware UTC datetime;
      all other fields (known or unknown) pass through unchanged
    - deserialize(serialize(r)) == r to millisecond precision for datetime values
    - Any malformed payload raises DeserializationError naming the field path

Design Decisions:
    - Date fields declared as dotted paths with "*" (any mapping value) and "[]"
      (every list element): one generic walker serves both record kinds
    - Naive datetimes treated as UTC: the store never holds local times
    - Optional date fields may be absent or null; only updatedAt is required, so
      a record saved without createdAt can still be read back
    - A plain `date` is written as midnight UTC and read back as a datetime: the wire
      format has one date type, so callers needing a calendar date call .date()
"""

import json
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any

from onboarding.core.errors import DeserializationError

_ANY_KEY = "*"
_EACH_ITEM = "[]"


# ─── Date Primitives ─────────────────────────────────────────────

def format_datetime(value: datetime | date) -> str:
    """Format a date value as ISO-8601 UTC with milliseconds and a Z suffix.

    A plain date becomes midnight UTC of that day.
    """
    if not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_datetime(value: Any, field: str) -> datetime:
    """Parse an ISO-8601 string into an aware UTC datetime."""
    if not isinstance(value, str):
        raise DeserializationError(
            f"Field '{field}' must be an ISO-8601 string, got {type(value).__name__}",
            field=field,
        )
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise DeserializationError(
            f"Field '{field}' is not a valid ISO-8601 date: {value!r}",
            field=field, original_error=e,
        ) from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def truncate_to_millis(value: datetime) -> datetime:
    """Drop sub-millisecond precision, matching what the wire format keeps."""
    return value.replace(microsecond=value.microsecond - value.microsecond % 1000)


# ─── Record Codec ────────────────────────────────────────────────

class RecordCodec:
    """Codec for one record kind, described by its date-typed field paths."""

    def __init__(
        self,
        kind: str,
        date_paths: tuple[str, ...],
        required_dates: tuple[str, ...] = ("updatedAt",),
    ):
        self.kind = kind
        self._date_paths = [tuple(p.split(".")) for p in date_paths]
        self._required_dates = required_dates

    def serialize(self, record: dict) -> dict:
        """Convert every date value in the record to its ISO-8601 string form."""
        return _serialize_value(record)

    def deserialize(self, payload: Any) -> dict:
        """Parse known date fields back to datetimes; pass everything else through."""
        if not isinstance(payload, dict):
            raise DeserializationError(
                f"{self.kind} payload must be a JSON object, got {type(payload).__name__}",
            )
        for name in self._required_dates:
            if payload.get(name) is None:
                raise DeserializationError(
                    f"{self.kind} payload is missing required date '{name}'",
                    field=name,
                )
        record = dict(payload)
        for path in self._date_paths:
            _parse_path(record, path, ())
        return record

    def encode(self, record: dict) -> str:
        """Serialize and render as the JSON text stored in the blob store."""
        return json.dumps(self.serialize(record), ensure_ascii=False)

    def decode(self, raw: str | bytes) -> dict:
        """Parse stored JSON text and deserialize it."""
        try:
            payload = json.loads(raw)
        except (ValueError, TypeError) as e:
            raise DeserializationError(
                f"{self.kind} payload is not valid JSON: {e}",
                original_error=e,
            ) from e
        return self.deserialize(payload)


def _serialize_value(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return format_datetime(value)
    if isinstance(value, dict):
        return {k: _serialize_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_serialize_value(v) for v in value]
    if isinstance(value, Enum):
        return value.value
    return value


def _parse_path(container: dict, path: tuple[str, ...], seen: tuple[str, ...]) -> None:
    """Walk `path` inside `container`, replacing date strings in place.

    Intermediate dicts/lists are copied before mutation so the caller's payload
    is never modified.
    """
    head, rest = path[0], path[1:]
    if not rest:
        value = container.get(head)
        if value is not None:
            container[head] = parse_datetime(value, ".".join(seen + (head,)))
        return

    if head == _ANY_KEY:
        for key in list(container):
            child = container[key]
            if isinstance(child, dict):
                container[key] = dict(child)
                _parse_path(container[key], rest, seen + (key,))
        return

    child = container.get(head)
    if child is None:
        return
    if rest[0] == _EACH_ITEM:
        if not isinstance(child, list):
            raise DeserializationError(
                f"Field '{'.'.join(seen + (head,))}' must be a list",
                field=".".join(seen + (head,)),
            )
        items = []
        for index, item in enumerate(child):
            if isinstance(item, dict):
                item = dict(item)
                if rest[1:]:
                    _parse_path(item, rest[1:], seen + (f"{head}[{index}]",))
            items.append(item)
        container[head] = items
        return
    if isinstance(child, dict):
        container[head] = dict(child)
        _parse_path(container[head], rest, seen + (head,))


# ─── Codec Instances ─────────────────────────────────────────────

PARTNER_CODEC = RecordCodec(
    "partner",
    date_paths=(
        "contractSignedDate",
        "targetLaunchDate",
        "actualLaunchDate",
        "onboardingStartDate",
        "createdAt",
        "updatedAt",
        "gates.*.startedDate",
        "gates.*.completedDate",
        "gates.*.approvals.[].approvedAt",
    ),
)

SUBMISSION_CODEC = RecordCodec(
    "submission",
    date_paths=(
        "createdAt",
        "updatedAt",
        "submittedAt",
        "signature.timestamp",
        "sections.[].status.evaluatedAt",
        "sectionStatuses.*.evaluatedAt",
    ),
)
