"""Deal payments routed through Stripe destination charges."""

from __future__ import annotations

import logging
import uuid
from decimal import ROUND_CEILING, ROUND_HALF_UP, Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from gradeup.core.config import Config, get_config
from gradeup.core.dependencies import CurrentUser
from gradeup.core.exceptions import InvalidStateError, NotFoundError, ValidationError
from gradeup.models.deal import Deal
from gradeup.models.enums import OPEN_PAYMENT_STATUSES, DealStatus, PaymentStatus
from gradeup.models.payment import Payment, StripeConnectedAccount
from gradeup.schemas.payments import PaymentIntentResponse
from gradeup.services.base_service import BaseService
from gradeup.services.stripe_gateway import StripeGateway

logger = logging.getLogger(__name__)

PAYABLE_DEAL_STATUSES = frozenset({DealStatus.ACCEPTED, DealStatus.ACTIVE})


def to_minor_units(amount: Decimal) -> int:
    return int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def split_amount(amount_cents: int, fee_percent: float | Decimal) -> tuple[int, int]:
    """Return ``(platform_fee, athlete_amount)``; the fee rounds up to the next minor unit."""
    fee = int((Decimal(amount_cents) * Decimal(str(fee_percent)) / 100).to_integral_value(rounding=ROUND_CEILING))
    return fee, amount_cents - fee


class PaymentService(BaseService):
    def __init__(
        self,
        db: Session | None = None,
        gateway: StripeGateway | None = None,
        settings: Config | None = None,
    ) -> None:
        super().__init__(db)
        self.settings = settings or get_config()
        self.gateway = gateway or StripeGateway(self.settings)

    def create_payment_intent(self, user: CurrentUser, deal_id: uuid.UUID) -> PaymentIntentResponse:
        deal = self.db.scalars(
            select(Deal)
            .options(selectinload(Deal.brand), selectinload(Deal.athlete))
            .where(Deal.id == deal_id)
        ).first()
        if deal is None or not (user.is_admin or deal.brand.profile_id == user.user_id):
            raise NotFoundError("Deal not found.")
        if deal.status not in PAYABLE_DEAL_STATUSES:
            raise InvalidStateError(f"Deal in status '{deal.status.value}' cannot be paid.")

        account = self.db.scalars(
            select(StripeConnectedAccount).where(StripeConnectedAccount.athlete_id == deal.athlete_id)
        ).first()
        if account is None or not (account.charges_enabled and account.payouts_enabled):
            raise InvalidStateError("Athlete has not completed payment onboarding.")

        existing = self.db.scalars(
            select(Payment)
            .where(Payment.deal_id == deal.id, Payment.status.in_(list(OPEN_PAYMENT_STATUSES)))
            .order_by(Payment.created_at.desc())
        ).first()
        if existing is not None and existing.stripe_payment_intent_id:
            intent = self.gateway.retrieve_payment_intent(existing.stripe_payment_intent_id)
            logger.info(
                "payment.intent_reused",
                extra={"event": "payment.intent_reused", "deal_id": str(deal.id)},
            )
            return self._response(existing, intent, reused=True)

        amount_cents = to_minor_units(deal.amount)
        if amount_cents <= 0:
            raise ValidationError(fields={"amount": ["Deal amount must be greater than zero"]})
        fee_cents, athlete_cents = split_amount(amount_cents, self.settings.PLATFORM_FEE_PERCENT)

        brand = deal.brand
        if not brand.stripe_customer_id:
            customer = self.gateway.create_customer(
                email=brand.contact_email,
                name=brand.company_name,
                metadata={"brand_id": str(brand.id)},
            )
            brand.stripe_customer_id = customer["id"]

        intent = self.gateway.create_payment_intent(
            amount_cents=amount_cents,
            currency=self.settings.PAYMENT_CURRENCY,
            customer_id=brand.stripe_customer_id,
            destination_account=account.stripe_account_id,
            transfer_amount_cents=athlete_cents,
            metadata={
                "deal_id": str(deal.id),
                "brand_id": str(brand.id),
                "athlete_id": str(deal.athlete_id),
                "platform_fee_cents": str(fee_cents),
            },
        )
        payment = Payment(
            id=uuid.uuid4(),
            deal_id=deal.id,
            brand_id=brand.id,
            athlete_id=deal.athlete_id,
            stripe_payment_intent_id=intent["id"],
            amount_cents=amount_cents,
            platform_fee_cents=fee_cents,
            athlete_amount_cents=athlete_cents,
            platform_fee_percent=Decimal(str(self.settings.PLATFORM_FEE_PERCENT)),
            currency=self.settings.PAYMENT_CURRENCY,
            status=PaymentStatus.PENDING,
        )
        self.db.add(payment)
        self.commit()
        logger.info(
            "payment.intent_created",
            extra={"event": "payment.intent_created", "deal_id": str(deal.id)},
        )
        return self._response(payment, intent, reused=False)

    @staticmethod
    def _response(payment: Payment, intent, reused: bool) -> PaymentIntentResponse:
        return PaymentIntentResponse(
            payment_id=payment.id,
            client_secret=intent.get("client_secret"),
            payment_intent_id=intent["id"],
            amount_cents=payment.amount_cents,
            platform_fee_cents=payment.platform_fee_cents,
            athlete_amount_cents=payment.athlete_amount_cents,
            currency=payment.currency,
            status=payment.status.value,
            reused=reused,
        )
