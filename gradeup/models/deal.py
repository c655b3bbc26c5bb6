"""Brand and deal model module."""

from __future__ import annotations

import uuid
from decimal import Decimal

from sqlalchemy import ForeignKey, Index, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gradeup.models.base import AuditMixin, Base, UUIDPrimaryKeyMixin, str_enum
from gradeup.models.enums import DealStatus


class Brand(Base, UUIDPrimaryKeyMixin, AuditMixin):
    __tablename__ = "brands"

    profile_id: Mapped[uuid.UUID] = mapped_column(Uuid, unique=True, nullable=False)
    company_name: Mapped[str] = mapped_column(String(255), nullable=False)
    contact_name: Mapped[str | None] = mapped_column(String(200))
    contact_email: Mapped[str | None] = mapped_column(String(255))
    stripe_customer_id: Mapped[str | None] = mapped_column(String(255), unique=True)


class Deal(Base, UUIDPrimaryKeyMixin, AuditMixin):
    __tablename__ = "deals"
    __table_args__ = (
        Index("idx_deals_athlete_status", "athlete_id", "status"),
        Index("idx_deals_brand_status", "brand_id", "status"),
    )

    athlete_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("athletes.id", ondelete="RESTRICT"), nullable=False)
    brand_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("brands.id", ondelete="RESTRICT"), nullable=False)
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    status: Mapped[DealStatus] = mapped_column(str_enum(DealStatus), default=DealStatus.PENDING, nullable=False)

    athlete = relationship("Athlete")
    brand = relationship("Brand")

    def is_participant(self, profile_id: uuid.UUID) -> bool:
        return profile_id in {self.athlete.profile_id, self.brand.profile_id}
