"""Domain Types — identity types and enums shared by records, codec, and API schemas.

Invariants:
    - PartnerId, SubmissionId wrap str — ids are opaque strings chosen by the caller
    - All valid lifecycle states encoded as Enums — no raw string matching
    - Enum values are the exact wire strings stored in the blob store

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

PartnerId = NewType("PartnerId", str)
SubmissionId = NewType("SubmissionId", str)
QuestionnaireId = NewType("QuestionnaireId", str)


# ─── Store Namespaces ────────────────────────────────────────────

PARTNERS_STORE = "partners"
SUBMISSIONS_STORE = "submissions"


# ─── Enums ───────────────────────────────────────────────────────

class GateId(str, Enum):
    """Partner lifecycle gates, in progression order."""
    PRE_CONTRACT = "pre-contract"
    GATE_0 = "gate-0"
    GATE_1 = "gate-1"
    GATE_2 = "gate-2"
    GATE_3 = "gate-3"
    POST_LAUNCH = "post-launch"


class GateStatus(str, Enum):
    NOT_STARTED = "not-started"
    IN_PROGRESS = "in-progress"
    PASSED = "passed"
    FAILED = "failed"
    BLOCKED = "blocked"


class ContractType(str, Enum):
    PPA = "PPA"
    DISTRIBUTION = "Distribution"
    SALES_AGENT = "Sales-Agent"
    OTHER = "Other"


class TierClassification(str, Enum):
    TIER_0 = "tier-0"
    TIER_1 = "tier-1"
    TIER_2 = "tier-2"


class UserRole(str, Enum):
    """Partner-facing roles. TPM is kept for submissions signed before its removal."""
    PAM = "PAM"
    PDM = "PDM"
    TPM = "TPM"
    PSM = "PSM"
    TAM = "TAM"
    ADMIN = "Admin"


class SubmissionStatus(str, Enum):
    """Overall questionnaire outcome."""
    PASS = "pass"
    FAIL = "fail"
    PARTIAL = "partial"
    PENDING = "pending"


class SectionResult(str, Enum):
    PASS = "pass"
    FAIL = "fail"
    PENDING = "pending"


class SignatureType(str, Enum):
    TYPED = "typed"
    DRAWN = "drawn"
