"""Request-scoped service factories, overridable in tests."""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy.orm import Session

from gradeup.core.dependencies import get_db_session
from gradeup.repositories.contracts import SqlContractRepository
from gradeup.repositories.scores import SqlScoreRepository
from gradeup.services.campaign_service import CampaignService
from gradeup.services.contract_service import ContractService
from gradeup.services.payment_service import PaymentService
from gradeup.services.score_service import GradeUpScoreService
from gradeup.services.stripe_gateway import StripeGateway
from gradeup.services.webhook_service import WebhookService


def get_stripe_gateway() -> StripeGateway:
    return StripeGateway()


def get_contract_service(db: Session = Depends(get_db_session)) -> ContractService:
    return ContractService(SqlContractRepository(db))


def get_score_service(db: Session = Depends(get_db_session)) -> GradeUpScoreService:
    return GradeUpScoreService(SqlScoreRepository(db))


def get_campaign_service(db: Session = Depends(get_db_session)) -> CampaignService:
    return CampaignService(db)


def get_payment_service(
    db: Session = Depends(get_db_session), gateway: StripeGateway = Depends(get_stripe_gateway)
) -> PaymentService:
    return PaymentService(db, gateway=gateway)


def get_webhook_service(
    db: Session = Depends(get_db_session), gateway: StripeGateway = Depends(get_stripe_gateway)
) -> WebhookService:
    return WebhookService(db, gateway=gateway)
