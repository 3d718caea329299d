"""Partner Schemas — Pydantic models with field-level validation for API boundaries.

Invariants:
    - PartnerCreate: partnerName and pamOwner required, non-empty after stripping
    - ccv/lrp are non-negative integers
    - contractType, tier, currentGate restricted to their enums
    - PartnerUpdate never carries id or createdAt (immutable after creation)

Design Decisions:
    - Extra fields ignored at the boundary: deprecated tpmOwner cannot be written back
    - gates left as free-form dicts: GateProgress dates are parsed by the codec, which
      reports the exact failing path
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from onboarding.core.domain_types import ContractType, GateId, TierClassification

_ID_PATTERN = r"^[A-Za-z0-9][A-Za-z0-9_.:-]{0,127}$"


class PartnerCreate(BaseModel):
    """Partner creation — id generated when omitted."""
    id: str | None = Field(None, pattern=_ID_PATTERN)
    partnerName: str = Field(min_length=1, max_length=200)
    pamOwner: str = Field(min_length=1, max_length=320)
    pdmOwner: str | None = None
    psmOwner: str | None = None
    tamOwner: str | None = None

    contractSignedDate: datetime | None = None
    contractType: ContractType = ContractType.OTHER
    tier: TierClassification = TierClassification.TIER_2
    ccv: int = Field(0, ge=0)
    lrp: int = Field(0, ge=0)

    targetLaunchDate: datetime | None = None
    actualLaunchDate: datetime | None = None
    onboardingStartDate: datetime | None = None

    currentGate: GateId = GateId.PRE_CONTRACT
    gates: dict[str, dict[str, Any]] = Field(default_factory=dict)

    @field_validator("partnerName", "pamOwner")
    @classmethod
    def strip_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("cannot be empty or whitespace")
        return v


class PartnerUpdate(BaseModel):
    """Partial update merged into the stored record."""
    partnerName: str | None = Field(None, min_length=1, max_length=200)
    pamOwner: str | None = Field(None, min_length=1, max_length=320)
    pdmOwner: str | None = None
    psmOwner: str | None = None
    tamOwner: str | None = None

    contractSignedDate: datetime | None = None
    contractType: ContractType | None = None
    tier: TierClassification | None = None
    ccv: int | None = Field(None, ge=0)
    lrp: int | None = Field(None, ge=0)

    targetLaunchDate: datetime | None = None
    actualLaunchDate: datetime | None = None
    onboardingStartDate: datetime | None = None

    currentGate: GateId | None = None
    gates: dict[str, dict[str, Any]] | None = None
