from __future__ import annotations

import uuid
from decimal import Decimal

import pytest

from gradeup.core.config import get_config
from gradeup.core.dependencies import CurrentUser
from gradeup.core.exceptions import InvalidStateError, NotFoundError
from gradeup.models import DealStatus, Payment, PaymentStatus
from gradeup.services.payment_service import PaymentService, split_amount, to_minor_units
from tests.factories import connect_athlete
from tests.fakes import FakeStripeGateway


@pytest.mark.parametrize(
    ("amount", "percent", "fee", "athlete"),
    [(150000, 12.0, 18000, 132000), (999, 12.0, 120, 879), (1, 12.0, 1, 0), (1000, 0, 0, 1000)],
)
def test_split_amount_rounds_fee_up(amount, percent, fee, athlete):
    assert split_amount(amount, percent) == (fee, athlete)


def test_split_amount_conserves_total():
    for amount in range(1, 2000, 37):
        fee, athlete = split_amount(amount, 12.5)
        assert fee + athlete == amount
        assert fee >= 0 and athlete >= 0


def test_to_minor_units():
    assert to_minor_units(Decimal("1500.00")) == 150000
    assert to_minor_units(Decimal("19.995")) == 2000


def _service(db_session, gateway=None):
    return PaymentService(db_session, gateway=gateway or FakeStripeGateway(), settings=get_config())


def test_create_intent_records_pending_payment(db_session, marketplace):
    connect_athlete(db_session, marketplace.athlete)
    gateway = FakeStripeGateway()
    brand_user = CurrentUser(user_id=marketplace.brand_profile_id, role="brand")

    response = _service(db_session, gateway).create_payment_intent(brand_user, marketplace.deal.id)

    assert response.amount_cents == 150000
    assert response.platform_fee_cents + response.athlete_amount_cents == 150000
    assert response.reused is False
    assert response.client_secret.endswith("_secret")
    payment = db_session.get(Payment, response.payment_id)
    assert payment.status == PaymentStatus.PENDING
    assert [name for name, _ in gateway.calls] == ["create_customer", "create_payment_intent"]
    intent_call = gateway.calls[1][1]
    assert intent_call["transfer_amount_cents"] == response.athlete_amount_cents
    assert marketplace.brand.stripe_customer_id is not None


def test_create_intent_reuses_open_payment(db_session, marketplace):
    connect_athlete(db_session, marketplace.athlete)
    gateway = FakeStripeGateway()
    brand_user = CurrentUser(user_id=marketplace.brand_profile_id, role="brand")
    service = _service(db_session, gateway)

    first = service.create_payment_intent(brand_user, marketplace.deal.id)
    second = service.create_payment_intent(brand_user, marketplace.deal.id)

    assert second.reused is True
    assert second.payment_id == first.payment_id
    assert gateway.calls[-1][0] == "retrieve_payment_intent"
    assert db_session.query(Payment).count() == 1


def test_create_intent_requires_onboarded_athlete(db_session, marketplace):
    connect_athlete(db_session, marketplace.athlete, enabled=False)
    brand_user = CurrentUser(user_id=marketplace.brand_profile_id, role="brand")
    with pytest.raises(InvalidStateError):
        _service(db_session).create_payment_intent(brand_user, marketplace.deal.id)


def test_create_intent_requires_payable_deal(db_session, marketplace):
    connect_athlete(db_session, marketplace.athlete)
    marketplace.deal.status = DealStatus.PENDING
    db_session.commit()
    brand_user = CurrentUser(user_id=marketplace.brand_profile_id, role="brand")
    with pytest.raises(InvalidStateError):
        _service(db_session).create_payment_intent(brand_user, marketplace.deal.id)


def test_only_deal_brand_may_pay(db_session, marketplace):
    connect_athlete(db_session, marketplace.athlete)
    athlete_user = CurrentUser(user_id=marketplace.athlete_profile_id, role="athlete")
    with pytest.raises(NotFoundError):
        _service(db_session).create_payment_intent(athlete_user, marketplace.deal.id)
    with pytest.raises(NotFoundError):
        _service(db_session).create_payment_intent(
            CurrentUser(user_id=marketplace.brand_profile_id, role="brand"), uuid.uuid4()
        )
