"""Campaign request/response schemas."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from gradeup.models.enums import CampaignStatus
from gradeup.schemas.common import CleanStr, OptionalCleanStr, PageInfo


class CampaignCreateRequest(BaseModel):
    title: CleanStr = Field(min_length=1, max_length=300)
    description: OptionalCleanStr = Field(default=None, max_length=2000)
    budget: Decimal = Field(ge=0, le=Decimal("100000000"), decimal_places=2)
    start_date: date
    end_date: date | None = None
    status: CampaignStatus = CampaignStatus.DRAFT
    target_sports: list[CleanStr] = Field(default_factory=list, max_length=50)
    target_divisions: list[CleanStr] = Field(default_factory=list, max_length=20)
    target_min_gpa: Decimal | None = Field(default=None, ge=0, le=4)
    target_min_followers: int | None = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _check_dates(self):
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("end_date must be on or after start_date")
        return self


class CampaignResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    brand_id: uuid.UUID
    title: str
    description: str | None = None
    budget: Decimal
    start_date: date
    end_date: date | None = None
    status: CampaignStatus
    target_sports: list[str] = Field(default_factory=list)
    target_divisions: list[str] = Field(default_factory=list)
    target_min_gpa: Decimal | None = None
    target_min_followers: int | None = None
    created_at: datetime | None = None


class CampaignListResponse(BaseModel):
    campaigns: list[CampaignResponse]
    pagination: PageInfo
