"""Payment request/response schemas."""

from __future__ import annotations

import uuid

from pydantic import BaseModel


class PaymentIntentRequest(BaseModel):
    deal_id: uuid.UUID


class PaymentIntentResponse(BaseModel):
    payment_id: uuid.UUID
    client_secret: str | None = None
    payment_intent_id: str
    amount_cents: int
    platform_fee_cents: int
    athlete_amount_cents: int
    currency: str
    status: str
    reused: bool = False
