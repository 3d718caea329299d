"""Root conftest — shared fakes and record factories.

Invariants:
    - No test ever waits on a real backoff: retry executors use RecordingSleep
    - FlakyBlobStore counts every backend call per operation and fails on demand
    - Record factories return fresh dicts with millisecond-aligned UTC datetimes

Design Decisions:
    - Fakes live here, not in a helper module: fixtures are the only import surface
      tests need
    - FlakyBlobStore wraps the real InMemoryBlobStore so success paths exercise
      production code
"""

import os
from collections import Counter
from datetime import datetime, timedelta, timezone

import pytest

# Keep the app on the in-memory backend and out of the working directory
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("LOG_FORMAT", "text")

from onboarding.core.errors import BlobStoreError  # noqa: E402
from onboarding.core.retry import RetryExecutor, RetryPolicy  # noqa: E402
from onboarding.infrastructure.blob_store import InMemoryBlobStore  # noqa: E402
from onboarding.services.partner_repository import PartnerRepository  # noqa: E402
from onboarding.services.submission_repository import SubmissionRepository  # noqa: E402

T0 = datetime(2024, 1, 1, 9, 30, 0, 125000, tzinfo=timezone.utc)


class RecordingSleep:
    """Async sleep stand-in that records requested delays and returns at once."""

    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


class FlakyBlobStore:
    """BlobStore wrapper that raises BlobStoreError on configured operations.

    fail_times[op] = n  → the next n calls of `op` fail transiently
    always_fail = {op}  → every call of `op` fails transiently
    """

    def __init__(self, inner: InMemoryBlobStore):
        self.inner = inner
        self.name = inner.name
        self.fail_times: dict[str, int] = {}
        self.always_fail: set[str] = set()
        self.calls: Counter = Counter()

    def _maybe_fail(self, op: str) -> None:
        self.calls[op] += 1
        if op in self.always_fail:
            raise BlobStoreError("connection reset", op)
        if self.fail_times.get(op, 0) > 0:
            self.fail_times[op] -= 1
            raise BlobStoreError("timed out", op)

    async def get(self, key: str) -> str | None:
        self._maybe_fail("get")
        return await self.inner.get(key)

    async def set(self, key: str, value: str) -> None:
        self._maybe_fail("set")
        await self.inner.set(key, value)

    async def delete(self, key: str) -> bool:
        self._maybe_fail("delete")
        return await self.inner.delete(key)

    async def list(self, prefix: str = "") -> list[str]:
        self._maybe_fail("list")
        return await self.inner.list(prefix)


# ─── Fixtures ────────────────────────────────────────────────────

@pytest.fixture
def sleep():
    return RecordingSleep()


@pytest.fixture
def retry(sleep):
    return RetryExecutor(RetryPolicy(), sleep=sleep)


@pytest.fixture
def partner_store():
    return FlakyBlobStore(InMemoryBlobStore("partners"))


@pytest.fixture
def submission_store():
    return FlakyBlobStore(InMemoryBlobStore("submissions"))


@pytest.fixture
def audit_events():
    return []


@pytest.fixture
def partner_repo(partner_store, retry, audit_events):
    return PartnerRepository(partner_store, retry, audit=audit_events.append)


@pytest.fixture
def submission_repo(submission_store, retry):
    return SubmissionRepository(submission_store, retry)


@pytest.fixture
def make_partner():
    """Factory for partner records; keyword overrides replace top-level fields."""
    def _make(partner_id: str = "p1", **overrides) -> dict:
        record = {
            "id": partner_id,
            "partnerName": "Acme Energy",
            "pamOwner": "pam@example.com",
            "pdmOwner": "pdm@example.com",
            "contractType": "PPA",
            "tier": "tier-1",
            "ccv": 1000,
            "lrp": 2500,
            "currentGate": "gate-0",
            "contractSignedDate": T0 - timedelta(days=30),
            "gates": {
                "pre-contract": {
                    "gateId": "pre-contract",
                    "status": "passed",
                    "startedDate": T0 - timedelta(days=60),
                    "completedDate": T0 - timedelta(days=31),
                    "questionnaires": {"pre-contract-v1": "s1"},
                    "approvals": [
                        {
                            "approvedBy": "pam@example.com",
                            "approvedByRole": "PAM",
                            "approvedAt": T0 - timedelta(days=31),
                            "signature": {"type": "typed", "data": "Pat Manager"},
                        },
                    ],
                },
            },
            "createdAt": T0,
            "updatedAt": T0,
        }
        record.update(overrides)
        return record
    return _make


@pytest.fixture
def make_submission():
    """Factory for submission records; keyword overrides replace top-level fields."""
    def _make(
        submission_id: str = "s1", partner_id: str = "p1", **overrides,
    ) -> dict:
        record = {
            "id": submission_id,
            "questionnaireId": "gate-0-kickoff",
            "version": "1.2.0",
            "partnerId": partner_id,
            "sections": [
                {
                    "sectionId": "contacts",
                    "fields": {"primaryContact": "ops@acme.example"},
                    "status": {
                        "result": "pass",
                        "evaluatedAt": T0 + timedelta(hours=1),
                        "evaluatedBy": "pdm@example.com",
                    },
                },
                {
                    "sectionId": "integration",
                    "fields": {},
                    "status": {"result": "pending"},
                },
            ],
            "sectionStatuses": {
                "contacts": {"result": "pass", "evaluatedAt": T0 + timedelta(hours=1)},
                "integration": {"result": "pending"},
            },
            "overallStatus": "partial",
            "signature": {
                "type": "typed",
                "data": "Pat Manager",
                "signerName": "Pat Manager",
                "signerEmail": "pam@example.com",
                "timestamp": T0 + timedelta(hours=2),
                "ipAddress": "203.0.113.7",
                "userAgent": "pytest",
            },
            "createdAt": T0,
            "updatedAt": T0 + timedelta(hours=2),
            "submittedBy": "pam@example.com",
            "submittedByRole": "PAM",
            "ipAddress": "203.0.113.7",
        }
        record.update(overrides)
        return record
    return _make
