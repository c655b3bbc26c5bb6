"""Athlete profile and academic/athletic reference tables."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    CheckConstraint,
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

from gradeup.models.base import AuditMixin, Base, UUIDPrimaryKeyMixin


class Sport(Base, UUIDPrimaryKeyMixin):
    __tablename__ = "sports"
    __table_args__ = (CheckConstraint("tier >= 1 AND tier <= 5", name="ck_sports_tier"),)

    name: Mapped[str] = mapped_column(String(120), unique=True, nullable=False)
    # 1 = highest exposure (football, basketball), 5 = lowest.
    tier: Mapped[int] = mapped_column(Integer, default=3, nullable=False)


class MajorCategory(Base, UUIDPrimaryKeyMixin):
    __tablename__ = "major_categories"
    __table_args__ = (
        CheckConstraint("multiplier >= 0.50 AND multiplier <= 2.00", name="ck_major_categories_multiplier"),
    )

    name: Mapped[str] = mapped_column(String(120), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    multiplier: Mapped[Decimal] = mapped_column(Numeric(3, 2), default=Decimal("1.00"), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class Athlete(Base, UUIDPrimaryKeyMixin, AuditMixin):
    __tablename__ = "athletes"
    __table_args__ = (
        CheckConstraint("athletic_rating >= 0 AND athletic_rating <= 100", name="ck_athletes_rating"),
        CheckConstraint("gradeup_score >= 0 AND gradeup_score <= 1000", name="ck_athletes_gradeup_score"),
        Index("idx_athletes_gradeup_score", "gradeup_score"),
    )

    profile_id: Mapped[uuid.UUID] = mapped_column(Uuid, unique=True, nullable=False)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255))
    sport_id: Mapped[uuid.UUID | None] = mapped_column(ForeignKey("sports.id", ondelete="SET NULL"))
    major_category_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("major_categories.id", ondelete="SET NULL"), index=True
    )

    gpa: Mapped[Decimal | None] = mapped_column(Numeric(3, 2))
    cumulative_gpa: Mapped[Decimal | None] = mapped_column(Numeric(3, 2))
    athletic_rating: Mapped[int] = mapped_column(Integer, default=50, nullable=False)

    instagram_followers: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    twitter_followers: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    tiktok_followers: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_followers: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    deals_completed: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    avg_deal_rating: Mapped[Decimal | None] = mapped_column(Numeric(3, 2))

    grades_verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    enrollment_verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    sport_verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    gradeup_score: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_searchable: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    accepting_deals: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    sport = relationship("Sport")
    major_category = relationship("MajorCategory")
    academic_records = relationship(
        "AcademicRecord", back_populates="athlete", cascade="all, delete-orphan"
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class AcademicRecord(Base, UUIDPrimaryKeyMixin, AuditMixin):
    """One academic term; verified terms feed the consistency bonus."""

    __tablename__ = "academic_records"
    __table_args__ = (
        UniqueConstraint("athlete_id", "semester", "year", name="uq_academic_records_term"),
        CheckConstraint("gpa >= 0 AND gpa <= 4.0", name="ck_academic_records_gpa"),
    )

    athlete_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("athletes.id", ondelete="CASCADE"), nullable=False, index=True)
    semester: Mapped[str] = mapped_column(String(16), nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    gpa: Mapped[Decimal] = mapped_column(Numeric(3, 2), nullable=False)
    credits: Mapped[int | None] = mapped_column(Integer)
    verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    verified_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    athlete = relationship("Athlete", back_populates="academic_records")
