"""Score request/response schemas."""

from __future__ import annotations

import uuid
from decimal import Decimal

from pydantic import BaseModel, Field, model_validator

from gradeup.schemas.common import OptionalCleanStr


class ScoreCalculateRequest(BaseModel):
    """Omitting ``athlete_id`` scores the caller's own athlete profile."""

    athlete_id: uuid.UUID | None = None


class ScoreBatchRequest(BaseModel):
    athlete_ids: list[uuid.UUID] = Field(min_length=1, max_length=100)


class AthleteSearchQuery(BaseModel):
    min_score: int | None = Field(default=None, ge=0, le=1000)
    max_score: int | None = Field(default=None, ge=0, le=1000)
    major_category: OptionalCleanStr = Field(default=None, max_length=120)
    min_gpa: Decimal | None = Field(default=None, ge=0, le=4)
    verified_only: bool = False
    limit: int = Field(default=20, ge=1, le=100)

    @model_validator(mode="after")
    def _check_range(self):
        if self.min_score is not None and self.max_score is not None and self.min_score > self.max_score:
            raise ValueError("min_score must not exceed max_score")
        return self
