"""Contract request/response schemas."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from gradeup.models.enums import (
    ContractStatus,
    ContractTemplate,
    PartyType,
    SignatureStatus,
    SignatureType,
)
from gradeup.schemas.common import CleanStr, OptionalCleanStr, PageInfo

MAX_COMPENSATION = Decimal("100000000")


class ContractClause(BaseModel):
    title: CleanStr = Field(min_length=1, max_length=200)
    content: CleanStr = Field(min_length=1, max_length=5000)
    is_required: bool = True
    is_editable: bool = False
    order: int = Field(default=0, ge=0)


class ContractPartyInput(BaseModel):
    party_type: PartyType
    user_id: uuid.UUID | None = None
    name: CleanStr = Field(min_length=1, max_length=200)
    email: EmailStr
    title: OptionalCleanStr = Field(default=None, max_length=100)


class _ContractTerms(BaseModel):
    @model_validator(mode="after")
    def _check_dates(self):
        effective = getattr(self, "effective_date", None)
        expiration = getattr(self, "expiration_date", None)
        if effective and expiration and expiration < effective:
            raise ValueError("expiration_date must be on or after effective_date")
        return self


class ContractCreateRequest(_ContractTerms):
    deal_id: uuid.UUID
    template_type: ContractTemplate = ContractTemplate.CUSTOM
    title: CleanStr = Field(min_length=1, max_length=300)
    description: OptionalCleanStr = Field(default=None, max_length=2000)
    effective_date: date | None = None
    expiration_date: date | None = None
    compensation_amount: Decimal = Field(ge=0, le=MAX_COMPENSATION, decimal_places=2)
    compensation_terms: OptionalCleanStr = Field(default=None, max_length=2000)
    deliverables_summary: OptionalCleanStr = Field(default=None, max_length=3000)
    clauses: list[ContractClause] = Field(default_factory=list, max_length=50)
    parties: list[ContractPartyInput] = Field(min_length=2, max_length=10)
    custom_terms: OptionalCleanStr = Field(default=None, max_length=10000)
    requires_guardian_signature: bool = False
    requires_witness: bool = False


class ContractUpdateRequest(_ContractTerms):
    """Editable contract fields; identity and lifecycle fields are ignored."""

    template_type: ContractTemplate | None = None
    title: OptionalCleanStr = Field(default=None, min_length=1, max_length=300)
    description: OptionalCleanStr = Field(default=None, max_length=2000)
    effective_date: date | None = None
    expiration_date: date | None = None
    compensation_amount: Decimal | None = Field(default=None, ge=0, le=MAX_COMPENSATION, decimal_places=2)
    compensation_terms: OptionalCleanStr = Field(default=None, max_length=2000)
    deliverables_summary: OptionalCleanStr = Field(default=None, max_length=3000)
    clauses: list[ContractClause] | None = Field(default=None, max_length=50)
    custom_terms: OptionalCleanStr = Field(default=None, max_length=10000)
    requires_guardian_signature: bool | None = None
    requires_witness: bool | None = None

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class SignContractRequest(BaseModel):
    party_type: PartyType
    signature_data: str = Field(min_length=1, max_length=50000)
    signature_type: SignatureType = SignatureType.TYPED
    agreed_to_terms: bool

    @field_validator("signature_data")
    @classmethod
    def _strip_nul(cls, value: str) -> str:
        cleaned = value.replace("\x00", "").strip()
        if not cleaned:
            raise ValueError("Signature is required")
        return cleaned

    @field_validator("agreed_to_terms")
    @classmethod
    def _must_agree(cls, value: bool) -> bool:
        if not value:
            raise ValueError("You must agree to the terms to sign")
        return value


class DeclineContractRequest(BaseModel):
    party_type: PartyType
    reason: CleanStr = Field(min_length=1, max_length=1000)


class VoidContractRequest(BaseModel):
    reason: CleanStr = Field(min_length=1, max_length=1000)
    notify_parties: bool = True


class ContractSignatureResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    party_type: PartyType
    user_id: uuid.UUID | None = None
    name: str
    email: str
    title: str | None = None
    signature_status: SignatureStatus
    signature_type: SignatureType | None = None
    signed_at: datetime | None = None
    declined_at: datetime | None = None
    decline_reason: str | None = None


class ContractResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    deal_id: uuid.UUID
    template_type: ContractTemplate
    title: str
    description: str | None = None
    effective_date: date | None = None
    expiration_date: date | None = None
    compensation_amount: Decimal
    compensation_terms: str | None = None
    deliverables_summary: str | None = None
    clauses: list[dict] = Field(default_factory=list)
    custom_terms: str | None = None
    requires_guardian_signature: bool
    requires_witness: bool
    status: ContractStatus
    signed_at: datetime | None = None
    voided_at: datetime | None = None
    void_reason: str | None = None
    created_by: uuid.UUID | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ContractDetailResponse(ContractResponse):
    parties: list[ContractSignatureResponse] = Field(default_factory=list)


class ContractListResponse(BaseModel):
    contracts: list[ContractResponse]
    pagination: PageInfo
