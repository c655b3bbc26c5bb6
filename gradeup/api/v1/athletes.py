"""Athlete discovery endpoints for API v1."""

from __future__ import annotations

from decimal import Decimal

from fastapi import APIRouter, Depends, Header, Query

from gradeup.api.v1._authz import authorize
from gradeup.api.v1._providers import get_score_service
from gradeup.repositories.scores import AthleteSearchFilters
from gradeup.schemas.scores import AthleteSearchQuery
from gradeup.services.score_service import GradeUpScoreService

router = APIRouter(prefix="/athletes", tags=["athletes"])


@router.get("/search")
def search_athletes(
    min_score: int | None = Query(default=None),
    max_score: int | None = Query(default=None),
    major_category: str | None = Query(default=None),
    min_gpa: Decimal | None = Query(default=None),
    verified_only: bool = Query(default=False),
    limit: int = Query(default=20),
    authorization: str | None = Header(default=None, alias="Authorization"),
    service: GradeUpScoreService = Depends(get_score_service),
) -> dict:
    authorize(authorization=authorization, scopes=["athletes.search"])
    query = AthleteSearchQuery.model_validate(
        {
            "min_score": min_score,
            "max_score": max_score,
            "major_category": major_category,
            "min_gpa": min_gpa,
            "verified_only": verified_only,
            "limit": limit,
        }
    )
    athletes = service.search_by_score(AthleteSearchFilters(**query.model_dump()))
    return {"athletes": athletes, "count": len(athletes)}
