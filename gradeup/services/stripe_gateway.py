"""Thin wrapper over the Stripe SDK calls the marketplace makes."""

from __future__ import annotations

import logging
from typing import Any

import stripe

from gradeup.core.config import Config, get_config
from gradeup.core.exceptions import ConfigurationError, UpstreamError, ValidationError

logger = logging.getLogger(__name__)


class StripeGateway:
    def __init__(self, settings: Config | None = None) -> None:
        cfg = settings or get_config()
        self._api_key = cfg.STRIPE_SECRET_KEY
        self._webhook_secret = cfg.STRIPE_WEBHOOK_SECRET

    def _require_key(self) -> str:
        if not self._api_key:
            raise ConfigurationError("STRIPE_SECRET_KEY is not configured.")
        return self._api_key

    def create_customer(self, email: str | None, name: str, metadata: dict[str, str]) -> Any:
        try:
            return stripe.Customer.create(api_key=self._require_key(), email=email, name=name, metadata=metadata)
        except stripe.StripeError as exc:
            logger.error("stripe.customer_create_failed: %s", exc, extra={"event": "stripe.customer_create_failed"})
            raise UpstreamError(str(exc.user_message or exc)) from exc

    def create_payment_intent(
        self,
        amount_cents: int,
        currency: str,
        customer_id: str,
        destination_account: str,
        transfer_amount_cents: int,
        metadata: dict[str, str],
    ) -> Any:
        try:
            return stripe.PaymentIntent.create(
                api_key=self._require_key(),
                amount=amount_cents,
                currency=currency,
                customer=customer_id,
                automatic_payment_methods={"enabled": True},
                transfer_data={"destination": destination_account, "amount": transfer_amount_cents},
                metadata=metadata,
            )
        except stripe.StripeError as exc:
            logger.error(
                "stripe.payment_intent_create_failed: %s",
                exc,
                extra={"event": "stripe.payment_intent_create_failed", "deal_id": metadata.get("deal_id")},
            )
            raise UpstreamError(str(exc.user_message or exc)) from exc

    def retrieve_payment_intent(self, payment_intent_id: str) -> Any:
        try:
            return stripe.PaymentIntent.retrieve(payment_intent_id, api_key=self._require_key())
        except stripe.StripeError as exc:
            logger.error(
                "stripe.payment_intent_retrieve_failed: %s",
                exc,
                extra={"event": "stripe.payment_intent_retrieve_failed"},
            )
            raise UpstreamError(str(exc.user_message or exc)) from exc

    def construct_event(self, payload: bytes, signature: str | None) -> Any:
        """Verify the ``Stripe-Signature`` header and parse the event."""
        if not signature:
            raise ValidationError("Missing signature", fields={"stripe-signature": ["Header is required"]})
        if not self._webhook_secret:
            raise ConfigurationError("STRIPE_WEBHOOK_SECRET is not configured.")
        try:
            return stripe.Webhook.construct_event(payload, signature, self._webhook_secret)
        except stripe.SignatureVerificationError as exc:
            logger.warning("webhook.signature_invalid", extra={"event": "webhook.signature_invalid"})
            raise ValidationError("Invalid signature", fields={"stripe-signature": ["Signature is invalid"]}) from exc
        except ValueError as exc:
            raise ValidationError("Invalid payload", fields={"body": ["Payload is not a valid event"]}) from exc
