"""Stripe webhook handling.

Stripe delivers each event at least once, so every handler below is a keyed
update (payment intent, charge, refund, payout, account or subscription id)
that leaves the row unchanged when the same event arrives again.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from gradeup.models.base import utcnow
from gradeup.models.deal import Brand, Deal
from gradeup.models.enums import OPEN_PAYMENT_STATUSES, DealStatus, PaymentStatus, PayoutStatus, SubscriptionStatus
from gradeup.models.payment import Payment, Payout, Refund, StripeConnectedAccount, Subscription
from gradeup.services.base_service import BaseService
from gradeup.services.stripe_gateway import StripeGateway

logger = logging.getLogger(__name__)

SUBSCRIPTION_STATUS_MAP: dict[str, SubscriptionStatus] = {
    "active": SubscriptionStatus.ACTIVE,
    "past_due": SubscriptionStatus.PAST_DUE,
    "canceled": SubscriptionStatus.CANCELED,
    "unpaid": SubscriptionStatus.UNPAID,
    "trialing": SubscriptionStatus.TRIALING,
    "incomplete": SubscriptionStatus.INCOMPLETE,
    "incomplete_expired": SubscriptionStatus.CANCELED,
    "paused": SubscriptionStatus.PAST_DUE,
}


def _from_timestamp(value: Any) -> datetime | None:
    if value is None:
        return None
    return datetime.fromtimestamp(int(value), tz=timezone.utc)


class WebhookService(BaseService):
    def __init__(self, db: Session | None = None, gateway: StripeGateway | None = None) -> None:
        super().__init__(db)
        self.gateway = gateway or StripeGateway()
        self._handlers: dict[str, Callable[[dict[str, Any], dict[str, Any]], None]] = {
            "payment_intent.succeeded": self._payment_succeeded,
            "payment_intent.payment_failed": self._payment_failed,
            "charge.refunded": self._charge_refunded,
            "account.updated": self._account_updated,
            "payout.paid": self._payout_event,
            "payout.failed": self._payout_event,
            "customer.subscription.created": self._subscription_upserted,
            "customer.subscription.updated": self._subscription_upserted,
            "customer.subscription.deleted": self._subscription_deleted,
        }

    def process(self, payload: bytes, signature: str | None) -> dict[str, Any]:
        """Verify a raw delivery and dispatch it."""
        event = self.gateway.construct_event(payload, signature)
        return self.handle_event(event)

    def handle_event(self, event: dict[str, Any]) -> dict[str, Any]:
        event_type = event["type"]
        handler = self._handlers.get(event_type)
        if handler is None:
            logger.info("webhook.unhandled type=%s", event_type, extra={"event": "webhook.unhandled"})
            return {"received": True, "handled": False}

        handler(event["data"]["object"], event)
        self.commit()
        logger.info("webhook.processed type=%s", event_type, extra={"event": "webhook.processed"})
        return {"received": True, "handled": True}

    # ----------------------------------------------------------------- payments

    def _payment_succeeded(self, intent: dict[str, Any], event: dict[str, Any]) -> None:
        payment = self._payment_by_intent(intent["id"])
        if payment is None:
            logger.warning("webhook.payment_missing", extra={"event": "webhook.payment_missing"})
            return
        method_types = intent.get("payment_method_types") or []
        self.db.execute(
            update(Payment)
            .where(
                Payment.id == payment.id,
                Payment.status.in_(list(OPEN_PAYMENT_STATUSES | {PaymentStatus.FAILED})),
            )
            .values(
                status=PaymentStatus.SUCCEEDED,
                stripe_charge_id=intent.get("latest_charge"),
                payment_method_type=method_types[0] if method_types else None,
                paid_at=utcnow(),
                failure_code=None,
                failure_message=None,
            )
            .execution_options(synchronize_session="fetch")
        )
        self.db.execute(
            update(Deal)
            .where(Deal.id == payment.deal_id, Deal.status == DealStatus.ACCEPTED)
            .values(status=DealStatus.ACTIVE)
            .execution_options(synchronize_session="fetch")
        )

    def _payment_failed(self, intent: dict[str, Any], event: dict[str, Any]) -> None:
        payment = self._payment_by_intent(intent["id"])
        if payment is None:
            logger.warning("webhook.payment_missing", extra={"event": "webhook.payment_missing"})
            return
        error = intent.get("last_payment_error") or {}
        self.db.execute(
            update(Payment)
            .where(Payment.id == payment.id, Payment.status.in_(list(OPEN_PAYMENT_STATUSES)))
            .values(
                status=PaymentStatus.FAILED,
                failure_code=error.get("code"),
                failure_message=error.get("message"),
            )
            .execution_options(synchronize_session="fetch")
        )

    def _charge_refunded(self, charge: dict[str, Any], event: dict[str, Any]) -> None:
        payment = self.db.scalars(select(Payment).where(Payment.stripe_charge_id == charge["id"])).first()
        if payment is None and charge.get("payment_intent"):
            payment = self._payment_by_intent(charge["payment_intent"])
        if payment is None:
            logger.warning("webhook.payment_missing", extra={"event": "webhook.payment_missing"})
            return

        refunds = (charge.get("refunds") or {}).get("data") or []
        for refund in refunds:
            known = self.db.scalar(select(Refund.id).where(Refund.stripe_refund_id == refund["id"]))
            if known is None:
                self.db.add(
                    Refund(
                        id=uuid.uuid4(),
                        payment_id=payment.id,
                        stripe_refund_id=refund["id"],
                        amount_cents=int(refund.get("amount") or 0),
                        reason=refund.get("reason"),
                        status=refund.get("status"),
                    )
                )

        fully_refunded = int(charge.get("amount_refunded") or 0) >= int(charge.get("amount") or 0)
        payment.status = PaymentStatus.REFUNDED if fully_refunded else PaymentStatus.PARTIALLY_REFUNDED
        payment.refunded_at = payment.refunded_at or utcnow()

    def _payment_by_intent(self, payment_intent_id: str) -> Payment | None:
        return self.db.scalars(select(Payment).where(Payment.stripe_payment_intent_id == payment_intent_id)).first()

    # ------------------------------------------------------- connect / payouts

    def _account_updated(self, account: dict[str, Any], event: dict[str, Any]) -> None:
        self.db.execute(
            update(StripeConnectedAccount)
            .where(StripeConnectedAccount.stripe_account_id == account["id"])
            .values(
                charges_enabled=bool(account.get("charges_enabled")),
                payouts_enabled=bool(account.get("payouts_enabled")),
                details_submitted=bool(account.get("details_submitted")),
            )
            .execution_options(synchronize_session="fetch")
        )

    def _payout_event(self, payout: dict[str, Any], event: dict[str, Any]) -> None:
        paid = event["type"] == "payout.paid"
        row = self.db.scalars(select(Payout).where(Payout.stripe_payout_id == payout["id"])).first()
        if row is None:
            athlete_id = None
            if event.get("account"):
                athlete_id = self.db.scalar(
                    select(StripeConnectedAccount.athlete_id).where(
                        StripeConnectedAccount.stripe_account_id == event["account"]
                    )
                )
            row = Payout(
                id=uuid.uuid4(),
                athlete_id=athlete_id,
                stripe_payout_id=payout["id"],
                amount_cents=int(payout.get("amount") or 0),
            )
            self.db.add(row)
        row.status = PayoutStatus.PAID if paid else PayoutStatus.FAILED
        if paid:
            row.paid_at = _from_timestamp(payout.get("arrival_date")) or utcnow()
        else:
            row.failure_code = payout.get("failure_code")
            row.failure_message = payout.get("failure_message")

    # ------------------------------------------------------------ subscriptions

    def _subscription_upserted(self, subscription: dict[str, Any], event: dict[str, Any]) -> None:
        row = self.db.scalars(
            select(Subscription).where(Subscription.stripe_subscription_id == subscription["id"])
        ).first()
        if row is None:
            brand_id = self.db.scalar(select(Brand.id).where(Brand.stripe_customer_id == subscription.get("customer")))
            row = Subscription(id=uuid.uuid4(), brand_id=brand_id, stripe_subscription_id=subscription["id"])
            self.db.add(row)

        items = (subscription.get("items") or {}).get("data") or []
        price = items[0].get("price") if items else None
        if price:
            row.price_id = price.get("id")
            interval = (price.get("recurring") or {}).get("interval")
            row.billing_cycle = "yearly" if interval == "year" else "monthly"
        row.status = SUBSCRIPTION_STATUS_MAP.get(subscription.get("status", ""), SubscriptionStatus.INCOMPLETE)
        row.current_period_start = _from_timestamp(subscription.get("current_period_start"))
        row.current_period_end = _from_timestamp(subscription.get("current_period_end"))
        row.trial_end = _from_timestamp(subscription.get("trial_end"))
        row.cancel_at_period_end = bool(subscription.get("cancel_at_period_end"))
        row.canceled_at = _from_timestamp(subscription.get("canceled_at"))

    def _subscription_deleted(self, subscription: dict[str, Any], event: dict[str, Any]) -> None:
        self.db.execute(
            update(Subscription)
            .where(
                Subscription.stripe_subscription_id == subscription["id"],
                Subscription.status != SubscriptionStatus.CANCELED,
            )
            .values(status=SubscriptionStatus.CANCELED, canceled_at=utcnow())
            .execution_options(synchronize_session="fetch")
        )
