"""Campaign endpoints for API v1."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Header, Query, status

from gradeup.api.v1._authz import authorize
from gradeup.api.v1._providers import get_campaign_service
from gradeup.models.enums import CampaignStatus
from gradeup.schemas.campaigns import CampaignCreateRequest, CampaignListResponse, CampaignResponse
from gradeup.schemas.common import PageInfo
from gradeup.services.campaign_service import CampaignService

router = APIRouter(tags=["campaigns"])


@router.get("/campaigns", response_model=CampaignListResponse)
def list_campaigns(
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=10, ge=1, le=100),
    brand_id: uuid.UUID | None = Query(default=None),
    status_filter: list[CampaignStatus] | None = Query(default=None, alias="status"),
    authorization: str | None = Header(default=None, alias="Authorization"),
    service: CampaignService = Depends(get_campaign_service),
) -> CampaignListResponse:
    user = authorize(authorization=authorization, scopes=["campaigns.read"])
    rows, total = service.list_campaigns(
        user, page=page, page_size=page_size, brand_id=brand_id, statuses=status_filter
    )
    return CampaignListResponse(
        campaigns=[CampaignResponse.model_validate(row) for row in rows],
        pagination=PageInfo.build(page, page_size, total),
    )


@router.post("/campaigns", response_model=CampaignResponse, status_code=status.HTTP_201_CREATED)
def create_campaign(
    payload: CampaignCreateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    service: CampaignService = Depends(get_campaign_service),
) -> CampaignResponse:
    user = authorize(authorization=authorization, scopes=["campaigns.write"])
    return CampaignResponse.model_validate(service.create_campaign(user, payload))
