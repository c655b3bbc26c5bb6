"""Contract and contract signature model module."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gradeup.models.base import AuditMixin, Base, UUIDPrimaryKeyMixin, str_enum
from gradeup.models.enums import ContractStatus, ContractTemplate, PartyType, SignatureStatus, SignatureType


class Contract(Base, UUIDPrimaryKeyMixin, AuditMixin):
    __tablename__ = "contracts"
    __table_args__ = (
        Index("idx_contracts_deal_status", "deal_id", "status"),
        Index("idx_contracts_status_expiration", "status", "expiration_date"),
    )

    deal_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("deals.id", ondelete="RESTRICT"), nullable=False)
    template_type: Mapped[ContractTemplate] = mapped_column(
        str_enum(ContractTemplate), default=ContractTemplate.CUSTOM, nullable=False
    )
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    effective_date: Mapped[date | None] = mapped_column(Date)
    expiration_date: Mapped[date | None] = mapped_column(Date)
    compensation_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    compensation_terms: Mapped[str | None] = mapped_column(Text)
    deliverables_summary: Mapped[str | None] = mapped_column(Text)
    clauses: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    custom_terms: Mapped[str | None] = mapped_column(Text)
    requires_guardian_signature: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    requires_witness: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    status: Mapped[ContractStatus] = mapped_column(
        str_enum(ContractStatus), default=ContractStatus.DRAFT, nullable=False
    )
    signed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    voided_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    void_reason: Mapped[str | None] = mapped_column(Text)
    created_by: Mapped[uuid.UUID | None] = mapped_column(Uuid)

    deal = relationship("Deal")
    parties = relationship(
        "ContractSignature",
        back_populates="contract",
        order_by="ContractSignature.position",
        cascade="all, delete-orphan",
    )


class ContractSignature(Base, UUIDPrimaryKeyMixin, AuditMixin):
    __tablename__ = "contract_signatures"
    __table_args__ = (
        UniqueConstraint("contract_id", "party_type", name="uq_contract_signatures_party"),
    )

    contract_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("contracts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    party_type: Mapped[PartyType] = mapped_column(str_enum(PartyType), nullable=False)
    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    user_id: Mapped[uuid.UUID | None] = mapped_column(Uuid)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    title: Mapped[str | None] = mapped_column(String(100))
    signature_status: Mapped[SignatureStatus] = mapped_column(
        str_enum(SignatureStatus), default=SignatureStatus.PENDING, nullable=False
    )
    signature_data: Mapped[str | None] = mapped_column(Text)
    signature_type: Mapped[SignatureType | None] = mapped_column(str_enum(SignatureType))
    signed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    signature_ip: Mapped[str | None] = mapped_column(String(45))
    declined_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    decline_reason: Mapped[str | None] = mapped_column(Text)

    contract = relationship("Contract", back_populates="parties")
