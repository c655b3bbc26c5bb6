"""Brand campaign listing and creation."""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import func, select

from gradeup.core.dependencies import CurrentUser
from gradeup.core.exceptions import NotFoundError
from gradeup.models.campaign import Campaign
from gradeup.models.deal import Brand
from gradeup.models.enums import CampaignStatus
from gradeup.schemas.campaigns import CampaignCreateRequest
from gradeup.services.base_service import BaseService

logger = logging.getLogger(__name__)


class CampaignService(BaseService):
    def brand_for_user(self, user: CurrentUser) -> Brand | None:
        return self.db.scalars(select(Brand).where(Brand.profile_id == user.user_id)).first()

    def list_campaigns(
        self,
        user: CurrentUser,
        page: int = 1,
        page_size: int = 10,
        brand_id: uuid.UUID | None = None,
        statuses: list[CampaignStatus] | None = None,
    ) -> tuple[list[Campaign], int]:
        """One page of campaigns, scoped to ``brand_id`` or the caller's brand when they own one."""
        if brand_id is None:
            brand = self.brand_for_user(user)
            brand_id = brand.id if brand is not None else None

        stmt = select(Campaign)
        if brand_id is not None:
            stmt = stmt.where(Campaign.brand_id == brand_id)
        if statuses:
            stmt = stmt.where(Campaign.status.in_(statuses))

        total = self.db.scalar(select(func.count()).select_from(stmt.subquery())) or 0
        rows = self.db.scalars(
            stmt.order_by(Campaign.created_at.desc()).offset((page - 1) * page_size).limit(page_size)
        ).all()
        return list(rows), total

    def create_campaign(self, user: CurrentUser, payload: CampaignCreateRequest) -> Campaign:
        brand = self.brand_for_user(user)
        if brand is None:
            raise NotFoundError("Brand profile not found.")
        campaign = Campaign(
            id=uuid.uuid4(),
            brand_id=brand.id,
            title=payload.title,
            description=payload.description,
            budget=payload.budget,
            start_date=payload.start_date,
            end_date=payload.end_date,
            status=payload.status,
            target_sports=list(payload.target_sports),
            target_divisions=list(payload.target_divisions),
            target_min_gpa=payload.target_min_gpa,
            target_min_followers=payload.target_min_followers,
        )
        self.db.add(campaign)
        self.commit()
        logger.info("campaign.created", extra={"event": "campaign.created", "user_id": str(user.user_id)})
        return campaign
