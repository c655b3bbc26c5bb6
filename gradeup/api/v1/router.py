"""Root API router for v1 endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from gradeup.api.v1 import athletes, campaigns, contracts, health, payments, scores
from gradeup.core.config import get_config


def get_api_router() -> APIRouter:
    api_router = APIRouter(prefix=get_config().API_PREFIX)
    api_router.include_router(health.router)
    api_router.include_router(contracts.router)
    api_router.include_router(scores.router)
    api_router.include_router(athletes.router)
    api_router.include_router(campaigns.router)
    api_router.include_router(payments.router)
    return api_router
