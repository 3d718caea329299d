"""Payload Helpers — move request/response JSON across the codec boundary.

Invariants:
    - Request JSON becomes a record only via RecordCodec.deserialize
    - A codec failure on request input is the client's fault: RecordValidationError (400)
"""

from datetime import datetime, timezone
from uuid import uuid4

from onboarding.core.codec import RecordCodec
from onboarding.core.errors import DeserializationError, RecordValidationError


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_record_id(prefix: str) -> str:
    return f"{prefix}-{uuid4()}"


def created_or_updated(record: dict) -> datetime:
    """Creation time for ordering; records stored without createdAt use updatedAt."""
    return record.get("createdAt") or record["updatedAt"]


def to_record(codec: RecordCodec, payload: dict) -> dict:
    """Deserialize request JSON, reporting bad dates as validation errors."""
    try:
        return codec.deserialize(payload)
    except DeserializationError as e:
        raise RecordValidationError(e.message, e.field or "body") from e


def page_of(items: list, page: int | None, page_size: int) -> dict:
    """Envelope for a list response, sliced when `page` is given."""
    if page is None:
        return {"success": True, "data": items, "count": len(items)}
    start = (page - 1) * page_size
    data = items[start:start + page_size]
    return {
        "success": True,
        "data": data,
        "count": len(data),
        "page": page,
        "pageSize": page_size,
        "totalCount": len(items),
        "totalPages": (len(items) + page_size - 1) // page_size,
    }
