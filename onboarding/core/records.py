"""Record Shapes — TypedDicts describing partner records and questionnaire submissions.

Invariants:
    - Keys are the camelCase wire names used in stored payloads
    - Date fields hold timezone-aware datetimes in memory, ISO-8601 strings on the wire
    - Records are plain dicts at runtime: unknown keys survive a load/save cycle

Design Decisions:
    - TypedDict over dataclass/Pydantic: the codec must pass through fields it does not
      know about, and a dict keeps every stored key without a schema migration
    - total=False on optional-heavy shapes; required keys listed in the docstrings
"""

from datetime import datetime
from typing import Any, TypedDict


# ─── Partner ─────────────────────────────────────────────────────

class ApprovalSignature(TypedDict):
    type: str
    data: str


class Approval(TypedDict, total=False):
    approvedBy: str
    approvedByRole: str
    approvedAt: datetime
    signature: ApprovalSignature
    notes: str


class GateProgress(TypedDict, total=False):
    gateId: str
    status: str
    startedDate: datetime
    completedDate: datetime
    questionnaires: dict[str, str]  # questionnaireId -> submissionId
    approvals: list[Approval]
    blockers: list[str]


class PartnerRecord(TypedDict, total=False):
    """Partner record. Required: id, partnerName, pamOwner, createdAt, updatedAt."""
    id: str
    partnerName: str

    pamOwner: str
    pdmOwner: str
    psmOwner: str
    tamOwner: str

    contractSignedDate: datetime
    contractType: str
    tier: str
    ccv: int  # Contractually Committed Value
    lrp: int  # Launch Revenue Potential

    targetLaunchDate: datetime
    actualLaunchDate: datetime
    onboardingStartDate: datetime

    currentGate: str
    gates: dict[str, GateProgress]

    createdAt: datetime
    updatedAt: datetime


# ─── Submission ──────────────────────────────────────────────────

class Signature(TypedDict, total=False):
    type: str
    data: str  # base64 for drawn signatures, plain text for typed
    signerName: str
    signerEmail: str
    timestamp: datetime
    ipAddress: str
    userAgent: str


class SectionStatus(TypedDict, total=False):
    result: str
    evaluatedAt: datetime
    evaluatedBy: str
    notes: str
    failureReasons: list[str]


class SectionData(TypedDict):
    sectionId: str
    fields: dict[str, Any]
    status: SectionStatus


class Submission(TypedDict, total=False):
    """Questionnaire submission. Required: id, questionnaireId, partnerId, createdAt, updatedAt."""
    id: str
    questionnaireId: str
    version: str
    partnerId: str

    sections: list[SectionData]
    sectionStatuses: dict[str, SectionStatus]
    overallStatus: str

    signature: Signature

    createdAt: datetime
    updatedAt: datetime
    submittedAt: datetime
    submittedBy: str
    submittedByRole: str
    ipAddress: str
    userAgent: str
