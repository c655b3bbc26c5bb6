from __future__ import annotations

import json
import uuid
from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient

from gradeup.api.v1._providers import get_stripe_gateway
from gradeup.core.config import get_config
from gradeup.core.dependencies import get_db_session
from gradeup.main import create_app
from gradeup.models import (
    Campaign,
    ContractSignature,
    Deal,
    DealStatus,
    GradeUpScore,
    Payment,
    PaymentStatus,
)
from gradeup.models.enums import PartyType
from tests.factories import auth_header, connect_athlete, seed_athlete
from tests.fakes import FakeStripeGateway

PREFIX = get_config().API_PREFIX


@pytest.fixture
def gateway():
    return FakeStripeGateway()


@pytest.fixture
def client(db_session, gateway):
    app = create_app()

    def _session():
        yield db_session

    app.dependency_overrides[get_db_session] = _session
    app.dependency_overrides[get_stripe_gateway] = lambda: gateway
    # No context manager: the lifespan startup checks are covered in test_startup.
    return TestClient(app)


def _contract_body(deal_id) -> dict:
    return {
        "deal_id": str(deal_id),
        "title": "Season <b>endorsement</b>",
        "compensation_amount": "1500.00",
        "effective_date": str(date.today()),
        "expiration_date": str(date.today() + timedelta(days=90)),
        "clauses": [{"title": "Exclusivity", "content": "No competing beverage brands."}],
        "parties": [
            {"party_type": "athlete", "name": "Jordan Reyes", "email": "jordan@example.edu"},
            {"party_type": "brand", "name": "Peak Hydration", "email": "partners@peak.example.com"},
        ],
    }


def test_health_reports_database(client):
    response = client.get(f"{PREFIX}/health")
    assert response.status_code == 200
    assert response.json()["status"] in {"ok", "degraded"}


def test_requests_without_token_get_401(client):
    response = client.get(f"{PREFIX}/contracts")
    assert response.status_code == 401
    assert "error" in response.json()


def test_missing_scope_gets_403(client):
    response = client.post(
        f"{PREFIX}/scores/batch",
        json={"athlete_ids": [str(uuid.uuid4())]},
        headers=auth_header(uuid.uuid4(), "brand"),
    )
    assert response.status_code == 403


def test_contract_signing_flow_over_http(client, marketplace):
    brand = auth_header(marketplace.brand_profile_id, "brand")
    athlete = auth_header(marketplace.athlete_profile_id, "athlete")

    created = client.post(f"{PREFIX}/contracts", json=_contract_body(marketplace.deal.id), headers=brand)
    assert created.status_code == 201
    body = created.json()
    assert body["status"] == "draft"
    assert body["title"] == "Season endorsement"
    assert [party["party_type"] for party in body["parties"]] == ["athlete", "brand"]
    contract_url = f"{PREFIX}/contracts/{body['id']}"

    sent = client.post(contract_url, params={"action": "send"}, headers=brand)
    assert sent.json()["status"] == "pending_signature"

    signed = client.post(
        contract_url,
        params={"action": "sign"},
        json={"party_type": "athlete", "signature_data": "Jordan Reyes", "agreed_to_terms": True},
        headers={**athlete, "X-Forwarded-For": "203.0.113.7, 10.0.0.1"},
    )
    assert signed.status_code == 200
    assert signed.json()["status"] == "partially_signed"

    repeat = client.post(
        contract_url,
        params={"action": "sign"},
        json={"party_type": "athlete", "signature_data": "Jordan Reyes", "agreed_to_terms": True},
        headers=athlete,
    )
    assert repeat.status_code == 409

    done = client.post(
        contract_url,
        params={"action": "sign"},
        json={"party_type": "brand", "signature_data": "Peak Hydration", "agreed_to_terms": True},
        headers=brand,
    )
    assert done.json()["status"] == "fully_signed"
    assert done.json()["signed_at"] is not None

    listed = client.get(f"{PREFIX}/contracts", params={"status": "fully_signed"}, headers=athlete)
    assert listed.json()["pagination"]["total"] == 1


def test_sign_requires_agreement(client, marketplace):
    brand = auth_header(marketplace.brand_profile_id, "brand")
    contract_id = client.post(f"{PREFIX}/contracts", json=_contract_body(marketplace.deal.id), headers=brand).json()["id"]
    client.post(f"{PREFIX}/contracts/{contract_id}", params={"action": "send"}, headers=brand)

    response = client.post(
        f"{PREFIX}/contracts/{contract_id}",
        params={"action": "sign"},
        json={"party_type": "brand", "signature_data": "Peak Hydration", "agreed_to_terms": False},
        headers=brand,
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Validation failed"
    assert "agreed_to_terms" in response.json()["fields"]


def test_signature_ip_comes_from_request_headers(client, db_session, marketplace):
    brand = auth_header(marketplace.brand_profile_id, "brand")
    contract_id = client.post(f"{PREFIX}/contracts", json=_contract_body(marketplace.deal.id), headers=brand).json()["id"]
    client.post(f"{PREFIX}/contracts/{contract_id}", params={"action": "send"}, headers=brand)

    response = client.post(
        f"{PREFIX}/contracts/{contract_id}",
        params={"action": "sign"},
        json={
            "party_type": "brand",
            "signature_data": "Peak Hydration",
            "agreed_to_terms": True,
            "ip_address": "6.6.6.6",
        },
        headers={**brand, "X-Forwarded-For": "203.0.113.7"},
    )
    assert response.status_code == 200

    signature = (
        db_session.query(ContractSignature)
        .filter_by(contract_id=uuid.UUID(contract_id), party_type=PartyType.BRAND)
        .one()
    )
    assert signature.signature_ip == "203.0.113.7"


def test_edit_cannot_require_missing_guardian(client, marketplace):
    brand = auth_header(marketplace.brand_profile_id, "brand")
    contract_id = client.post(f"{PREFIX}/contracts", json=_contract_body(marketplace.deal.id), headers=brand).json()["id"]

    response = client.patch(
        f"{PREFIX}/contracts/{contract_id}",
        json={"requires_guardian_signature": True},
        headers=brand,
    )
    assert response.status_code == 400
    assert "parties" in response.json()["fields"]


def test_unknown_action_is_a_validation_error(client, marketplace):
    brand = auth_header(marketplace.brand_profile_id, "brand")
    response = client.post(f"{PREFIX}/contracts/{uuid.uuid4()}", params={"action": "approve"}, headers=brand)
    assert response.status_code == 400
    assert "fields" in response.json()


def test_create_contract_field_errors(client, marketplace):
    payload = _contract_body(marketplace.deal.id)
    payload["compensation_amount"] = "-5"
    payload["parties"] = payload["parties"][:1]
    response = client.post(
        f"{PREFIX}/contracts", json=payload, headers=auth_header(marketplace.brand_profile_id, "brand")
    )
    assert response.status_code == 400
    fields = response.json()["fields"]
    assert "compensation_amount" in fields
    assert "parties" in fields


def test_outsider_gets_404_for_contract(client, marketplace):
    brand = auth_header(marketplace.brand_profile_id, "brand")
    contract_id = client.post(f"{PREFIX}/contracts", json=_contract_body(marketplace.deal.id), headers=brand).json()["id"]

    response = client.get(f"{PREFIX}/contracts/{contract_id}", headers=auth_header(uuid.uuid4(), "brand"))
    assert response.status_code == 404


def test_edit_and_delete_draft(client, marketplace):
    brand = auth_header(marketplace.brand_profile_id, "brand")
    contract_id = client.post(f"{PREFIX}/contracts", json=_contract_body(marketplace.deal.id), headers=brand).json()["id"]

    patched = client.patch(
        f"{PREFIX}/contracts/{contract_id}",
        json={"title": "Updated title", "status": "active"},
        headers=brand,
    )
    assert patched.status_code == 200
    assert patched.json()["title"] == "Updated title"
    assert patched.json()["status"] == "draft"

    deleted = client.delete(f"{PREFIX}/contracts/{contract_id}", headers=brand)
    assert deleted.status_code == 204
    assert client.get(f"{PREFIX}/contracts/{contract_id}", headers=brand).status_code == 404


def test_activate_draft_is_invalid_state(client, marketplace):
    brand = auth_header(marketplace.brand_profile_id, "brand")
    contract_id = client.post(f"{PREFIX}/contracts", json=_contract_body(marketplace.deal.id), headers=brand).json()["id"]

    response = client.post(f"{PREFIX}/contracts/{contract_id}", params={"action": "activate"}, headers=brand)
    assert response.status_code == 400
    assert "draft" in response.json()["error"]


def test_expire_is_admin_only(client):
    assert client.post(f"{PREFIX}/contracts/expire", headers=auth_header(uuid.uuid4(), "brand")).status_code == 403
    response = client.post(f"{PREFIX}/contracts/expire", headers=auth_header(uuid.uuid4(), "admin"))
    assert response.status_code == 200
    assert response.json() == {"expired": [], "count": 0}


def test_athlete_scores_own_profile(client, db_session, marketplace):
    athlete = auth_header(marketplace.athlete_profile_id, "athlete")

    response = client.post(f"{PREFIX}/scores/calculate", headers=athlete)
    assert response.status_code == 200
    body = response.json()
    assert body["athlete_id"] == str(marketplace.athlete.id)
    assert 0 <= body["score"] <= 1000
    assert body["components"]["academic"]["max"] == 300

    other = seed_athlete(db_session)
    forbidden = client.post(f"{PREFIX}/scores/calculate", json={"athlete_id": str(other.id)}, headers=athlete)
    assert forbidden.status_code == 403

    history = client.get(f"{PREFIX}/scores/{marketplace.athlete.id}/history", headers=athlete)
    assert history.json()["count"] == 1
    breakdown = client.get(f"{PREFIX}/scores/{marketplace.athlete.id}/breakdown", headers=athlete)
    assert breakdown.json()["current_score"] == body["score"]


def test_director_batch_scores(client, db_session, marketplace):
    director = auth_header(uuid.uuid4(), "director")
    ids = [str(marketplace.athlete.id), str(uuid.uuid4())]

    response = client.post(f"{PREFIX}/scores/batch", json={"athlete_ids": ids}, headers=director)
    assert response.status_code == 200
    assert response.json()["successful"] == 1
    assert response.json()["failed"] == 1
    assert db_session.query(GradeUpScore).count() == 1


def test_breakdown_for_unknown_athlete_is_404(client):
    response = client.get(f"{PREFIX}/scores/{uuid.uuid4()}/breakdown", headers=auth_header(uuid.uuid4(), "director"))
    assert response.status_code == 404


def test_athlete_search(client, db_session, marketplace):
    marketplace.athlete.gradeup_score = 720
    db_session.commit()
    brand = auth_header(marketplace.brand_profile_id, "brand")

    response = client.get(f"{PREFIX}/athletes/search", params={"min_score": 700}, headers=brand)
    assert response.status_code == 200
    assert response.json()["count"] == 1
    assert response.json()["athletes"][0]["grade"]["letter"]

    bad = client.get(f"{PREFIX}/athletes/search", params={"min_score": 800, "max_score": 100}, headers=brand)
    assert bad.status_code == 400


def test_campaign_create_and_list(client, db_session, marketplace):
    brand = auth_header(marketplace.brand_profile_id, "brand")
    created = client.post(
        f"{PREFIX}/campaigns",
        json={"title": "Back to school", "budget": "5000.00", "start_date": str(date.today())},
        headers=brand,
    )
    assert created.status_code == 201
    assert created.json()["brand_id"] == str(marketplace.brand.id)

    listed = client.get(f"{PREFIX}/campaigns", headers=brand)
    assert [row["title"] for row in listed.json()["campaigns"]] == ["Back to school"]
    assert db_session.query(Campaign).count() == 1

    athlete = auth_header(marketplace.athlete_profile_id, "athlete")
    payload = {"title": "Not mine", "budget": "10.00", "start_date": str(date.today())}
    assert client.post(f"{PREFIX}/campaigns", json=payload, headers=athlete).status_code == 403


def test_payment_intent_then_webhook(client, db_session, gateway, marketplace):
    connect_athlete(db_session, marketplace.athlete)
    brand = auth_header(marketplace.brand_profile_id, "brand")

    created = client.post(f"{PREFIX}/payments/intents", json={"deal_id": str(marketplace.deal.id)}, headers=brand)
    assert created.status_code == 201
    intent = created.json()
    assert intent["amount_cents"] == 150000
    assert intent["platform_fee_cents"] + intent["athlete_amount_cents"] == 150000

    event = {
        "id": "evt_1",
        "type": "payment_intent.succeeded",
        "data": {
            "object": {
                "id": intent["payment_intent_id"],
                "latest_charge": "ch_1",
                "payment_method_types": ["card"],
            }
        },
    }
    delivered = client.post(
        f"{PREFIX}/webhooks/stripe",
        content=json.dumps(event),
        headers={"Stripe-Signature": FakeStripeGateway.WEBHOOK_SIGNATURE},
    )
    assert delivered.status_code == 200
    assert delivered.json() == {"received": True, "handled": True}

    db_session.expire_all()
    payment = db_session.get(Payment, uuid.UUID(intent["payment_id"]))
    assert payment.status == PaymentStatus.SUCCEEDED
    assert db_session.get(Deal, marketplace.deal.id).status == DealStatus.ACTIVE


def test_webhook_rejects_bad_signature(client):
    response = client.post(
        f"{PREFIX}/webhooks/stripe",
        content=b'{"type": "payment_intent.succeeded"}',
        headers={"Stripe-Signature": "t=1,v1=forged"},
    )
    assert response.status_code == 400
    assert "stripe-signature" in response.json()["fields"]
