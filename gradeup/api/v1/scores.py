"""GradeUp score endpoints for API v1."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Header, Query

from gradeup.api.v1._authz import authorize
from gradeup.api.v1._providers import get_score_service
from gradeup.core.exceptions import AuthorizationError
from gradeup.schemas.scores import ScoreBatchRequest, ScoreCalculateRequest
from gradeup.services.score_service import GradeUpScoreService

router = APIRouter(prefix="/scores", tags=["scores"])


@router.post("/calculate")
def calculate_score(
    payload: ScoreCalculateRequest | None = None,
    authorization: str | None = Header(default=None, alias="Authorization"),
    service: GradeUpScoreService = Depends(get_score_service),
) -> dict:
    user = authorize(authorization=authorization, scopes=["scores.calculate"])
    athlete_id = payload.athlete_id if payload is not None else None
    if user.role == "athlete":
        own_id = service.resolve_athlete_id(user)
        if athlete_id is not None and athlete_id != own_id:
            raise AuthorizationError("Athletes can only calculate their own score.")
        athlete_id = own_id
    return service.calculate_for_user(user, athlete_id).to_dict()


@router.post("/batch")
def batch_calculate(
    payload: ScoreBatchRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    service: GradeUpScoreService = Depends(get_score_service),
) -> dict:
    authorize(authorization=authorization, scopes=["scores.batch"])
    return service.batch_calculate(payload.athlete_ids)


@router.get("/{athlete_id}/history")
def score_history(
    athlete_id: uuid.UUID,
    limit: int = Query(default=10),
    authorization: str | None = Header(default=None, alias="Authorization"),
    service: GradeUpScoreService = Depends(get_score_service),
) -> dict:
    authorize(authorization=authorization, scopes=["scores.read"])
    return service.get_history(athlete_id, limit)


@router.get("/{athlete_id}/breakdown")
def score_breakdown(
    athlete_id: uuid.UUID,
    authorization: str | None = Header(default=None, alias="Authorization"),
    service: GradeUpScoreService = Depends(get_score_service),
) -> dict:
    authorize(authorization=authorization, scopes=["scores.read"])
    return service.get_breakdown(athlete_id)
