"""SQLAlchemy model package for the marketplace schema."""

from gradeup.models.athlete import AcademicRecord, Athlete, MajorCategory, Sport
from gradeup.models.base import Base
from gradeup.models.campaign import Campaign
from gradeup.models.contract import Contract, ContractSignature
from gradeup.models.deal import Brand, Deal
from gradeup.models.enums import (
    CampaignStatus,
    ContractStatus,
    ContractTemplate,
    DealStatus,
    PartyType,
    PaymentStatus,
    PayoutStatus,
    SignatureStatus,
    SignatureType,
    SubscriptionStatus,
)
from gradeup.models.payment import Payment, Payout, Refund, StripeConnectedAccount, Subscription
from gradeup.models.score import GradeUpScore

__all__ = [
    "AcademicRecord",
    "Athlete",
    "Base",
    "Brand",
    "Campaign",
    "CampaignStatus",
    "Contract",
    "ContractSignature",
    "ContractStatus",
    "ContractTemplate",
    "Deal",
    "DealStatus",
    "GradeUpScore",
    "MajorCategory",
    "PartyType",
    "Payment",
    "PaymentStatus",
    "Payout",
    "PayoutStatus",
    "Refund",
    "SignatureStatus",
    "SignatureType",
    "Sport",
    "StripeConnectedAccount",
    "Subscription",
    "SubscriptionStatus",
]
