"""Canonical enum values for the marketplace schema."""

from __future__ import annotations

import enum


class DealStatus(str, enum.Enum):
    DRAFT = "draft"
    PENDING = "pending"
    NEGOTIATING = "negotiating"
    ACCEPTED = "accepted"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    REJECTED = "rejected"
    EXPIRED = "expired"


class ContractStatus(str, enum.Enum):
    DRAFT = "draft"
    PENDING_SIGNATURE = "pending_signature"
    PARTIALLY_SIGNED = "partially_signed"
    FULLY_SIGNED = "fully_signed"
    ACTIVE = "active"
    EXPIRED = "expired"
    CANCELLED = "cancelled"
    VOIDED = "voided"


class ContractTemplate(str, enum.Enum):
    STANDARD_ENDORSEMENT = "standard_endorsement"
    SOCIAL_MEDIA_CAMPAIGN = "social_media_campaign"
    APPEARANCE_AGREEMENT = "appearance_agreement"
    MERCHANDISE_LICENSING = "merchandise_licensing"
    AUTOGRAPH_SESSION = "autograph_session"
    CAMP_PARTICIPATION = "camp_participation"
    CUSTOM = "custom"


class PartyType(str, enum.Enum):
    ATHLETE = "athlete"
    BRAND = "brand"
    GUARDIAN = "guardian"
    WITNESS = "witness"


class SignatureStatus(str, enum.Enum):
    PENDING = "pending"
    SIGNED = "signed"
    DECLINED = "declined"
    EXPIRED = "expired"


class SignatureType(str, enum.Enum):
    DRAWN = "drawn"
    TYPED = "typed"
    UPLOADED = "uploaded"


class CampaignStatus(str, enum.Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    REQUIRES_ACTION = "requires_action"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    REFUNDED = "refunded"
    PARTIALLY_REFUNDED = "partially_refunded"


class PayoutStatus(str, enum.Enum):
    PENDING = "pending"
    IN_TRANSIT = "in_transit"
    PAID = "paid"
    FAILED = "failed"
    CANCELED = "canceled"


class SubscriptionStatus(str, enum.Enum):
    TRIALING = "trialing"
    ACTIVE = "active"
    PAST_DUE = "past_due"
    CANCELED = "canceled"
    UNPAID = "unpaid"
    INCOMPLETE = "incomplete"


REQUIRED_PARTIES = frozenset({PartyType.ATHLETE, PartyType.BRAND})
SIGNABLE_STATUSES = frozenset({ContractStatus.PENDING_SIGNATURE, ContractStatus.PARTIALLY_SIGNED})
EDITABLE_STATUSES = frozenset({ContractStatus.DRAFT, ContractStatus.PENDING_SIGNATURE})
OPEN_PAYMENT_STATUSES = frozenset(
    {PaymentStatus.PENDING, PaymentStatus.PROCESSING, PaymentStatus.REQUIRES_ACTION}
)
