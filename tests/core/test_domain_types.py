"""Domain Types — enum wire values and namespace names.

Tests cover:
    - Enum values are the exact strings stored in the blob store
    - Gate progression order
    - str Enums compare equal to their wire strings
"""

from onboarding.core.domain_types import (
    PARTNERS_STORE, SUBMISSIONS_STORE, ContractType, GateId, GateStatus,
    SignatureType, SubmissionStatus, TierClassification, UserRole,
)


def test_store_namespaces():
    assert PARTNERS_STORE == "partners"
    assert SUBMISSIONS_STORE == "submissions"


def test_gate_progression_order():
    assert [g.value for g in GateId] == [
        "pre-contract", "gate-0", "gate-1", "gate-2", "gate-3", "post-launch",
    ]


def test_wire_values():
    assert {s.value for s in GateStatus} == {
        "not-started", "in-progress", "passed", "failed", "blocked",
    }
    assert {c.value for c in ContractType} == {
        "PPA", "Distribution", "Sales-Agent", "Other",
    }
    assert {t.value for t in TierClassification} == {"tier-0", "tier-1", "tier-2"}
    assert {s.value for s in SubmissionStatus} == {"pass", "fail", "partial", "pending"}
    assert {s.value for s in SignatureType} == {"typed", "drawn"}


def test_str_enums_equal_wire_strings():
    assert UserRole.PAM == "PAM"
    assert UserRole("Admin") is UserRole.ADMIN
    assert TierClassification("tier-1") is TierClassification.TIER_1
