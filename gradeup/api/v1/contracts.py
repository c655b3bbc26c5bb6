"""Contract endpoints for API v1."""

from __future__ import annotations

import uuid
from datetime import date
from typing import Any, Literal

from fastapi import APIRouter, Body, Depends, Header, Query, Request, Response, status

from gradeup.api.v1._authz import authorize
from gradeup.api.v1._providers import get_contract_service
from gradeup.models.enums import ContractStatus, ContractTemplate
from gradeup.repositories.contracts import ContractFilters
from gradeup.schemas.common import PageInfo
from gradeup.schemas.contracts import (
    ContractCreateRequest,
    ContractDetailResponse,
    ContractListResponse,
    ContractResponse,
    ContractSignatureResponse,
    ContractUpdateRequest,
    DeclineContractRequest,
    SignContractRequest,
    VoidContractRequest,
)
from gradeup.services.contract_service import ContractService, ContractWithParties
from gradeup.utils.validators import client_ip

router = APIRouter(tags=["contracts"])

ContractAction = Literal["sign", "decline", "send", "void", "activate"]

_ACTION_SCOPES: dict[str, str] = {
    "sign": "contracts.sign",
    "decline": "contracts.sign",
    "send": "contracts.write",
    "void": "contracts.write",
    "activate": "contracts.write",
}


def _detail(aggregate: ContractWithParties) -> ContractDetailResponse:
    base = ContractResponse.model_validate(aggregate.contract)
    return ContractDetailResponse(
        **base.model_dump(),
        parties=[ContractSignatureResponse.model_validate(party) for party in aggregate.parties],
    )


def _signer_ip(request: Request) -> str | None:
    forwarded = client_ip(request.headers.get("x-forwarded-for"), request.headers.get("x-real-ip"))
    if forwarded:
        return forwarded
    return request.client.host if request.client else None


@router.get("/contracts", response_model=ContractListResponse)
def list_contracts(
    deal_id: uuid.UUID | None = Query(default=None),
    status_filter: list[ContractStatus] | None = Query(default=None, alias="status"),
    template_type: list[ContractTemplate] | None = Query(default=None),
    from_date: date | None = Query(default=None),
    to_date: date | None = Query(default=None),
    page: int = Query(default=1),
    page_size: int = Query(default=10),
    authorization: str | None = Header(default=None, alias="Authorization"),
    service: ContractService = Depends(get_contract_service),
) -> ContractListResponse:
    user = authorize(authorization=authorization, scopes=["contracts.read"])
    filters = ContractFilters(
        deal_id=deal_id,
        statuses=list(status_filter or []),
        template_types=list(template_type or []),
        from_date=from_date,
        to_date=to_date,
        page=page,
        page_size=page_size,
    )
    result = service.list_contracts(user, filters)
    return ContractListResponse(
        contracts=[ContractResponse.model_validate(item) for item in result.items],
        pagination=PageInfo.build(result.page, result.page_size, result.total),
    )


@router.post("/contracts", response_model=ContractDetailResponse, status_code=status.HTTP_201_CREATED)
def create_contract(
    payload: ContractCreateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    service: ContractService = Depends(get_contract_service),
) -> ContractDetailResponse:
    user = authorize(authorization=authorization, scopes=["contracts.write"])
    return _detail(service.create_contract(user, payload))


@router.post("/contracts/expire")
def expire_contracts(
    as_of: date | None = Query(default=None),
    authorization: str | None = Header(default=None, alias="Authorization"),
    service: ContractService = Depends(get_contract_service),
) -> dict:
    authorize(authorization=authorization, scopes=["contracts.expire"])
    expired = service.expire_due(as_of)
    return {"expired": [str(contract_id) for contract_id in expired], "count": len(expired)}


@router.get("/contracts/{contract_id}", response_model=ContractDetailResponse)
def get_contract(
    contract_id: uuid.UUID,
    authorization: str | None = Header(default=None, alias="Authorization"),
    service: ContractService = Depends(get_contract_service),
) -> ContractDetailResponse:
    user = authorize(authorization=authorization, scopes=["contracts.read"])
    return _detail(service.get_contract(user, contract_id))


@router.patch("/contracts/{contract_id}", response_model=ContractDetailResponse)
def update_contract(
    contract_id: uuid.UUID,
    payload: ContractUpdateRequest,
    authorization: str | None = Header(default=None, alias="Authorization"),
    service: ContractService = Depends(get_contract_service),
) -> ContractDetailResponse:
    user = authorize(authorization=authorization, scopes=["contracts.write"])
    return _detail(service.update_contract(user, contract_id, payload.changes()))


@router.delete("/contracts/{contract_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_contract(
    contract_id: uuid.UUID,
    authorization: str | None = Header(default=None, alias="Authorization"),
    service: ContractService = Depends(get_contract_service),
) -> Response:
    user = authorize(authorization=authorization, scopes=["contracts.write"])
    service.delete_contract(user, contract_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/contracts/{contract_id}", response_model=ContractDetailResponse)
def contract_action(
    contract_id: uuid.UUID,
    request: Request,
    action: ContractAction = Query(...),
    body: dict[str, Any] | None = Body(default=None),
    authorization: str | None = Header(default=None, alias="Authorization"),
    service: ContractService = Depends(get_contract_service),
) -> ContractDetailResponse:
    user = authorize(authorization=authorization, scopes=[_ACTION_SCOPES[action]])
    body = body or {}

    if action == "sign":
        sign = SignContractRequest.model_validate(body)
        aggregate = service.sign(
            user,
            contract_id,
            party_type=sign.party_type,
            signature_data=sign.signature_data,
            signature_type=sign.signature_type,
            ip_address=_signer_ip(request),
        )
    elif action == "decline":
        decline = DeclineContractRequest.model_validate(body)
        aggregate = service.decline(user, contract_id, party_type=decline.party_type, reason=decline.reason)
    elif action == "void":
        void = VoidContractRequest.model_validate(body)
        aggregate = service.void(user, contract_id, reason=void.reason)
    elif action == "send":
        aggregate = service.send_for_signature(user, contract_id)
    else:
        aggregate = service.activate(user, contract_id)
    return _detail(aggregate)
