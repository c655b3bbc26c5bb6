from __future__ import annotations

import uuid
from datetime import date

import pytest

from gradeup.core.dependencies import CurrentUser
from gradeup.core.exceptions import NotFoundError
from gradeup.models import CampaignStatus
from gradeup.schemas.campaigns import CampaignCreateRequest
from gradeup.services.campaign_service import CampaignService


def _request(**overrides) -> CampaignCreateRequest:
    data = {"title": "Back to campus", "budget": "25000.00", "start_date": str(date(2026, 8, 1))}
    data.update(overrides)
    return CampaignCreateRequest.model_validate(data)


def test_brand_creates_and_lists_own_campaigns(db_session, marketplace):
    service = CampaignService(db_session)
    brand_user = CurrentUser(user_id=marketplace.brand_profile_id, role="brand")

    created = service.create_campaign(brand_user, _request(target_sports=["Basketball"]))
    service.create_campaign(brand_user, _request(title="Spring push", status="active"))

    assert created.brand_id == marketplace.brand.id
    assert created.status == CampaignStatus.DRAFT
    rows, total = service.list_campaigns(brand_user)
    assert total == 2
    rows, total = service.list_campaigns(brand_user, statuses=[CampaignStatus.ACTIVE])
    assert total == 1 and rows[0].title == "Spring push"


def test_create_requires_brand_profile(db_session, marketplace):
    service = CampaignService(db_session)
    athlete_user = CurrentUser(user_id=marketplace.athlete_profile_id, role="athlete")
    with pytest.raises(NotFoundError):
        service.create_campaign(athlete_user, _request())


def test_listing_pages(db_session, marketplace):
    service = CampaignService(db_session)
    brand_user = CurrentUser(user_id=marketplace.brand_profile_id, role="brand")
    for index in range(3):
        service.create_campaign(brand_user, _request(title=f"Campaign {index}"))

    rows, total = service.list_campaigns(brand_user, page=2, page_size=2)
    assert total == 3
    assert len(rows) == 1
    rows, total = service.list_campaigns(
        CurrentUser(user_id=uuid.uuid4(), role="athlete"), brand_id=marketplace.brand.id
    )
    assert total == 3
