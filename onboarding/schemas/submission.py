"""Submission Schemas — Pydantic models for questionnaire submission requests.

Invariants:
    - questionnaireId, partnerId, submittedBy required and non-empty
    - submittedByRole restricted to UserRole; signature.type to SignatureType
    - version is a semantic version string (MAJOR.MINOR.PATCH)
    - SubmissionUpdate must change at least one of sections, sectionStatuses,
      overallStatus or signature
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, model_validator

from onboarding.core.domain_types import SignatureType, SubmissionStatus, UserRole

_ID_PATTERN = r"^[A-Za-z0-9][A-Za-z0-9_.:-]{0,127}$"


class SignatureIn(BaseModel):
    type: SignatureType
    data: str = Field(min_length=1)
    signerName: str = Field(min_length=1)
    signerEmail: str = Field(min_length=3)
    timestamp: datetime | None = None
    ipAddress: str | None = None
    userAgent: str | None = None


class SectionIn(BaseModel):
    sectionId: str = Field(min_length=1)
    fields: dict[str, Any] = Field(default_factory=dict)
    status: dict[str, Any] = Field(default_factory=lambda: {"result": "pending"})


class SubmissionCreate(BaseModel):
    """Submission creation — id generated when omitted."""
    id: str | None = Field(None, pattern=_ID_PATTERN)
    questionnaireId: str = Field(min_length=1)
    version: str = Field("1.0.0", pattern=r"^\d+\.\d+\.\d+$")
    partnerId: str = Field(min_length=1)

    sections: list[SectionIn] = Field(default_factory=list)
    sectionStatuses: dict[str, dict[str, Any]] = Field(default_factory=dict)
    overallStatus: SubmissionStatus = SubmissionStatus.PENDING

    signature: SignatureIn

    submittedAt: datetime | None = None
    submittedBy: str = Field(min_length=1)
    submittedByRole: UserRole
    ipAddress: str = "unknown"
    userAgent: str | None = None


class SubmissionUpdate(BaseModel):
    """Partial update merged into the stored submission; id and createdAt never change."""
    sections: list[SectionIn] | None = None
    sectionStatuses: dict[str, dict[str, Any]] | None = None
    overallStatus: SubmissionStatus | None = None
    signature: SignatureIn | None = None

    submittedAt: datetime | None = None
    submittedBy: str | None = Field(None, min_length=1)
    submittedByRole: UserRole | None = None
    ipAddress: str | None = None
    userAgent: str | None = None

    @model_validator(mode="after")
    def require_content_change(self) -> "SubmissionUpdate":
        changes = (self.sections, self.sectionStatuses, self.overallStatus, self.signature)
        if all(value is None for value in changes):
            raise ValueError(
                "at least one of sections, sectionStatuses, overallStatus, "
                "signature must be provided",
            )
        return self
