"""Payment and Stripe webhook endpoints for API v1."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header, Request, status
from starlette.concurrency import run_in_threadpool

from gradeup.api.v1._authz import authorize
from gradeup.api.v1._providers import get_payment_service, get_webhook_service
from gradeup.schemas.payments import PaymentIntentRequest, PaymentIntentResponse
from gradeup.services.payment_service import PaymentService
from gradeup.services.webhook_service import WebhookService

router = APIRouter(tags=["payments"])


@router.post("/payments/intents", response_model=PaymentIntentResponse, status_code=status.HTTP_201_CREATED)
def create_payment_intent(
    payload: PaymentIntentRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    service: PaymentService = Depends(get_payment_service),
) -> PaymentIntentResponse:
    user = authorize(authorization=authorization, scopes=["payments.create"])
    return service.create_payment_intent(user, payload.deal_id)


@router.post("/webhooks/stripe")
async def stripe_webhook(
    request: Request,
    stripe_signature: str | None = Header(default=None, alias="Stripe-Signature"),
    service: WebhookService = Depends(get_webhook_service),
) -> dict:
    # Signature verification needs the exact bytes Stripe sent.
    payload = await request.body()
    return await run_in_threadpool(service.process, payload, stripe_signature)
