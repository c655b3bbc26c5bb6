"""Campaign model module."""

from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal

from sqlalchemy import JSON, Date, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gradeup.models.base import AuditMixin, Base, UUIDPrimaryKeyMixin, str_enum
from gradeup.models.enums import CampaignStatus


class Campaign(Base, UUIDPrimaryKeyMixin, AuditMixin):
    __tablename__ = "campaigns"
    __table_args__ = (Index("idx_campaigns_brand_status", "brand_id", "status"),)

    brand_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("brands.id", ondelete="CASCADE"), nullable=False)
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    budget: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date | None] = mapped_column(Date)
    status: Mapped[CampaignStatus] = mapped_column(
        str_enum(CampaignStatus), default=CampaignStatus.DRAFT, nullable=False
    )
    target_sports: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    target_divisions: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    target_min_gpa: Mapped[Decimal | None] = mapped_column(Numeric(3, 2))
    target_min_followers: Mapped[int | None] = mapped_column(Integer)

    brand = relationship("Brand")
