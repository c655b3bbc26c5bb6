"""GradeUp score history model module."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import JSON, CheckConstraint, DateTime, ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from gradeup.models.base import Base, UUIDPrimaryKeyMixin, utcnow


class GradeUpScore(Base, UUIDPrimaryKeyMixin):
    """Append-only snapshot of one score calculation."""

    __tablename__ = "gradeup_scores"
    __table_args__ = (
        CheckConstraint("score >= 0 AND score <= 1000", name="ck_gradeup_scores_score"),
        CheckConstraint("athletic_score >= 0 AND athletic_score <= 400", name="ck_gradeup_scores_athletic"),
        CheckConstraint("social_score >= 0 AND social_score <= 300", name="ck_gradeup_scores_social"),
        CheckConstraint("academic_score >= 0 AND academic_score <= 300", name="ck_gradeup_scores_academic"),
        Index("idx_gradeup_scores_athlete_time", "athlete_id", "calculated_at"),
    )

    athlete_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("athletes.id", ondelete="CASCADE"), nullable=False)
    score: Mapped[int] = mapped_column(Integer, nullable=False)
    athletic_score: Mapped[int] = mapped_column(Integer, nullable=False)
    social_score: Mapped[int] = mapped_column(Integer, nullable=False)
    academic_score: Mapped[int] = mapped_column(Integer, nullable=False)
    gpa_multiplier: Mapped[Decimal] = mapped_column(Numeric(3, 2), nullable=False)
    major_multiplier: Mapped[Decimal] = mapped_column(Numeric(3, 2), nullable=False)
    consistency_bonus: Mapped[Decimal] = mapped_column(Numeric(3, 2), nullable=False)
    input_data: Mapped[dict] = mapped_column(JSON, default=dict, nullable=False)
    calculation_version: Mapped[str] = mapped_column(String(20), default="2.0", nullable=False)
    calculated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
