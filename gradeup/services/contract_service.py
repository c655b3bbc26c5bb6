"""Contract lifecycle and e-signature workflow."""

from __future__ import annotations

import logging
import math
import uuid
from dataclasses import dataclass
from datetime import date
from typing import Any

from gradeup.auth.rbac import is_oversight_role
from gradeup.core.dependencies import CurrentUser
from gradeup.core.exceptions import (
    AuthorizationError,
    ConflictError,
    InvalidStateError,
    NotFoundError,
    SignatureNotFoundError,
    ValidationError,
)
from gradeup.models.base import utcnow
from gradeup.models.contract import Contract, ContractSignature
from gradeup.models.deal import Deal
from gradeup.models.enums import (
    EDITABLE_STATUSES,
    REQUIRED_PARTIES,
    SIGNABLE_STATUSES,
    ContractStatus,
    PartyType,
    SignatureStatus,
    SignatureType,
)
from gradeup.repositories.contracts import ContractFilters, ContractRepository
from gradeup.schemas.contracts import ContractCreateRequest
from gradeup.workflow.contract_status import recompute_status
from gradeup.workflow.state_machine import contract_state_machine

logger = logging.getLogger(__name__)

PROTECTED_FIELDS = frozenset(
    {"id", "deal_id", "status", "created_at", "created_by", "signed_at", "voided_at", "void_reason", "parties", "deal"}
)
# Columns that stay as they are when an edit sends null.
REQUIRED_COLUMNS = frozenset(
    {"template_type", "title", "compensation_amount", "clauses", "requires_guardian_signature", "requires_witness"}
)


@dataclass(frozen=True)
class ContractWithParties:
    contract: Contract
    parties: list[ContractSignature]


@dataclass(frozen=True)
class ContractPage:
    items: list[Contract]
    page: int
    page_size: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size)


class ContractService:
    """Drives a contract from draft through signature collection to a terminal state."""

    def __init__(self, repository: ContractRepository) -> None:
        self.repository = repository

    # ------------------------------------------------------------------ reads

    def get_contract(self, user: CurrentUser, contract_id: uuid.UUID) -> ContractWithParties:
        contract, _ = self._load_visible(user, contract_id)
        return self._aggregate(contract.id)

    def list_contracts(self, user: CurrentUser, filters: ContractFilters) -> ContractPage:
        if filters.page < 1:
            raise ValidationError(fields={"page": ["page must be >= 1"]})
        if not 1 <= filters.page_size <= 100:
            raise ValidationError(fields={"page_size": ["page_size must be between 1 and 100"]})
        participant_id = None if is_oversight_role(user.role) else user.user_id
        items, total = self.repository.list_contracts(filters, participant_id=participant_id)
        return ContractPage(items=items, page=filters.page, page_size=filters.page_size, total=total)

    # ------------------------------------------------------------- authoring

    def create_contract(self, user: CurrentUser, payload: ContractCreateRequest) -> ContractWithParties:
        deal = self.repository.get_deal(payload.deal_id)
        if deal is None or not (user.is_admin or deal.is_participant(user.user_id)):
            raise NotFoundError("Deal not found.")
        self._check_parties(payload)

        now = utcnow()
        contract = Contract(
            id=uuid.uuid4(),
            deal_id=deal.id,
            template_type=payload.template_type,
            title=payload.title,
            description=payload.description,
            effective_date=payload.effective_date,
            expiration_date=payload.expiration_date,
            compensation_amount=payload.compensation_amount,
            compensation_terms=payload.compensation_terms,
            deliverables_summary=payload.deliverables_summary,
            clauses=[clause.model_dump() for clause in payload.clauses],
            custom_terms=payload.custom_terms,
            requires_guardian_signature=payload.requires_guardian_signature,
            requires_witness=payload.requires_witness,
            status=ContractStatus.DRAFT,
            created_by=user.user_id,
            created_at=now,
            updated_at=now,
        )
        signatures = [
            ContractSignature(
                id=uuid.uuid4(),
                contract_id=contract.id,
                party_type=party.party_type,
                position=position,
                user_id=party.user_id or self._default_signer(deal, party.party_type),
                name=party.name,
                email=str(party.email),
                title=party.title,
                signature_status=SignatureStatus.PENDING,
                created_at=now,
                updated_at=now,
            )
            for position, party in enumerate(payload.parties)
        ]
        self.repository.add_contract(contract, signatures)
        self.repository.commit()
        logger.info(
            "contract.created",
            extra={"event": "contract.created", "contract_id": str(contract.id), "deal_id": str(deal.id)},
        )
        return self._aggregate(contract.id)

    def update_contract(
        self, user: CurrentUser, contract_id: uuid.UUID, changes: dict[str, Any]
    ) -> ContractWithParties:
        contract, _ = self._load_visible(user, contract_id)
        if contract.status not in EDITABLE_STATUSES:
            raise InvalidStateError(f"Contract cannot be edited in status '{contract.status.value}'.")
        allowed = {
            key: value
            for key, value in changes.items()
            if key not in PROTECTED_FIELDS and not (value is None and key in REQUIRED_COLUMNS)
        }
        self._check_edit(contract, allowed)
        if allowed:
            if not self.repository.update_contract(contract.id, EDITABLE_STATUSES, allowed):
                self.repository.rollback()
                raise InvalidStateError("Contract is no longer editable.")
            self.repository.commit()
            logger.info(
                "contract.updated",
                extra={"event": "contract.updated", "contract_id": str(contract.id)},
            )
        return self._aggregate(contract.id)

    def delete_contract(self, user: CurrentUser, contract_id: uuid.UUID) -> None:
        contract, _ = self._load_visible(user, contract_id)
        if contract.status != ContractStatus.DRAFT:
            raise InvalidStateError("Only draft contracts can be deleted.")
        if not self.repository.delete_contract(contract.id, expected_status=ContractStatus.DRAFT):
            raise InvalidStateError("Only draft contracts can be deleted.")
        self.repository.commit()
        logger.info("contract.deleted", extra={"event": "contract.deleted", "contract_id": str(contract.id)})

    # ------------------------------------------------------------ transitions

    def send_for_signature(self, user: CurrentUser, contract_id: uuid.UUID) -> ContractWithParties:
        contract, _ = self._load_visible(user, contract_id)
        self._transition(contract, {ContractStatus.DRAFT}, ContractStatus.PENDING_SIGNATURE)
        logger.info(
            "contract.sent",
            extra={"event": "contract.sent", "contract_id": str(contract.id)},
        )
        return self._aggregate(contract.id)

    def sign(
        self,
        user: CurrentUser,
        contract_id: uuid.UUID,
        party_type: PartyType,
        signature_data: str,
        signature_type: SignatureType = SignatureType.TYPED,
        ip_address: str | None = None,
    ) -> ContractWithParties:
        contract, _ = self._load_visible(user, contract_id)
        signature = self._pending_signature(user, contract, party_type)

        now = utcnow()
        updated = self.repository.update_signature(
            signature.id,
            SignatureStatus.PENDING,
            signature_status=SignatureStatus.SIGNED,
            signature_data=signature_data,
            signature_type=signature_type,
            signed_at=now,
            signature_ip=ip_address,
            updated_at=now,
        )
        if not updated:
            self.repository.rollback()
            raise ConflictError("Signature already signed or declined.")

        signatures = self.repository.list_signatures(contract.id)
        new_status = recompute_status(
            signatures,
            requires_guardian=contract.requires_guardian_signature,
            requires_witness=contract.requires_witness,
        )
        changes: dict[str, Any] = {"updated_at": now}
        if new_status == ContractStatus.FULLY_SIGNED:
            changes["signed_at"] = now
        expected = contract_state_machine.sources_for(new_status) & SIGNABLE_STATUSES
        if not self.repository.update_contract_status(contract.id, expected, new_status, **changes):
            self._reconcile_after_lost_race(contract)

        self.repository.commit()
        logger.info(
            "contract.signed",
            extra={
                "event": "contract.signed",
                "contract_id": str(contract.id),
                "party_type": party_type.value,
                "status": new_status.value,
            },
        )
        return self._aggregate(contract.id)

    def decline(
        self, user: CurrentUser, contract_id: uuid.UUID, party_type: PartyType, reason: str
    ) -> ContractWithParties:
        contract, _ = self._load_visible(user, contract_id)
        signature = self._pending_signature(user, contract, party_type)

        now = utcnow()
        updated = self.repository.update_signature(
            signature.id,
            SignatureStatus.PENDING,
            signature_status=SignatureStatus.DECLINED,
            declined_at=now,
            decline_reason=reason,
            updated_at=now,
        )
        if not updated:
            self.repository.rollback()
            raise ConflictError("Signature already signed or declined.")

        if party_type in REQUIRED_PARTIES:
            if not self.repository.update_contract_status(
                contract.id, SIGNABLE_STATUSES, ContractStatus.CANCELLED, updated_at=now
            ):
                self.repository.rollback()
                raise InvalidStateError("Contract is no longer awaiting signatures.")

        self.repository.commit()
        logger.info(
            "contract.declined",
            extra={"event": "contract.declined", "contract_id": str(contract.id), "party_type": party_type.value},
        )
        return self._aggregate(contract.id)

    def void(self, user: CurrentUser, contract_id: uuid.UUID, reason: str) -> ContractWithParties:
        contract, _ = self._load_visible(user, contract_id)
        if contract.status == ContractStatus.VOIDED:
            raise InvalidStateError("Contract is already voided.")
        now = utcnow()
        self._transition(
            contract,
            contract_state_machine.sources_for(ContractStatus.VOIDED),
            ContractStatus.VOIDED,
            voided_at=now,
            void_reason=reason,
            updated_at=now,
        )
        logger.info("contract.voided", extra={"event": "contract.voided", "contract_id": str(contract.id)})
        return self._aggregate(contract.id)

    def activate(self, user: CurrentUser, contract_id: uuid.UUID) -> ContractWithParties:
        contract, _ = self._load_visible(user, contract_id)
        self._transition(contract, {ContractStatus.FULLY_SIGNED}, ContractStatus.ACTIVE, updated_at=utcnow())
        logger.info("contract.activated", extra={"event": "contract.activated", "contract_id": str(contract.id)})
        return self._aggregate(contract.id)

    def expire_due(self, as_of: date | None = None) -> list[uuid.UUID]:
        """Expire every active contract whose expiration date has passed."""
        cutoff = as_of or utcnow().date()
        expired: list[uuid.UUID] = []
        for contract in self.repository.list_active_expiring(cutoff):
            if self.repository.update_contract_status(
                contract.id, {ContractStatus.ACTIVE}, ContractStatus.EXPIRED, updated_at=utcnow()
            ):
                expired.append(contract.id)
        self.repository.commit()
        logger.info(
            "contract.expire_due.completed count=%s",
            len(expired),
            extra={"event": "contract.expire_due.completed"},
        )
        return expired

    # ---------------------------------------------------------------- helpers

    def _aggregate(self, contract_id: uuid.UUID) -> ContractWithParties:
        contract = self.repository.get_contract(contract_id)
        if contract is None:
            raise NotFoundError("Contract not found.")
        return ContractWithParties(contract=contract, parties=self.repository.list_signatures(contract_id))

    def _load_visible(self, user: CurrentUser, contract_id: uuid.UUID) -> tuple[Contract, Deal]:
        contract = self.repository.get_contract(contract_id)
        if contract is None:
            raise NotFoundError("Contract not found.")
        deal = self.repository.get_deal(contract.deal_id)
        if deal is None:
            raise NotFoundError("Contract not found.")
        if not (is_oversight_role(user.role) or deal.is_participant(user.user_id)):
            raise NotFoundError("Contract not found.")
        return contract, deal

    def _pending_signature(
        self, user: CurrentUser, contract: Contract, party_type: PartyType
    ) -> ContractSignature:
        signature = self.repository.get_signature(contract.id, party_type)
        if signature is None:
            raise SignatureNotFoundError(f"No signature record for party '{party_type.value}'.")
        if signature.user_id is not None and signature.user_id != user.user_id and not user.is_admin:
            raise AuthorizationError("Only the named signer can act on this signature.")
        if signature.signature_status != SignatureStatus.PENDING:
            raise ConflictError("Signature already signed or declined.")
        if contract.status not in SIGNABLE_STATUSES:
            raise InvalidStateError(f"Contract is not awaiting signatures (status '{contract.status.value}').")
        return signature

    def _transition(
        self,
        contract: Contract,
        expected: set[ContractStatus] | frozenset[ContractStatus],
        target: ContractStatus,
        **changes: Any,
    ) -> None:
        contract_state_machine.assert_transition(contract.status, target)
        if contract.status not in expected:
            raise InvalidStateError(f"Transition not allowed: {contract.status.value} -> {target.value}")
        if not self.repository.update_contract_status(contract.id, expected, target, **changes):
            self.repository.rollback()
            raise InvalidStateError(f"Contract changed state before {target.value} could be applied.")
        self.repository.commit()

    def _reconcile_after_lost_race(self, contract: Contract) -> None:
        """Keep a recorded signature when a concurrent signer already advanced the contract."""
        current = self.repository.get_contract(contract.id)
        fresh = recompute_status(
            self.repository.list_signatures(contract.id),
            requires_guardian=contract.requires_guardian_signature,
            requires_witness=contract.requires_witness,
        )
        if current is not None and current.status == fresh:
            return
        self.repository.rollback()
        raise InvalidStateError("Contract is no longer awaiting signatures.")

    @staticmethod
    def _default_signer(deal: Deal, party_type: PartyType) -> uuid.UUID | None:
        if party_type == PartyType.ATHLETE:
            return deal.athlete.profile_id
        if party_type == PartyType.BRAND:
            return deal.brand.profile_id
        return None

    @staticmethod
    def _check_parties(payload: ContractCreateRequest) -> None:
        messages: list[str] = []
        party_types = [party.party_type for party in payload.parties]
        if len(party_types) != len(set(party_types)):
            messages.append("Each party type may appear only once")
        present = set(party_types)
        for required in sorted(REQUIRED_PARTIES, key=lambda item: item.value):
            if required not in present:
                messages.append(f"A {required.value} party is required")
        if payload.requires_guardian_signature and PartyType.GUARDIAN not in present:
            messages.append("A guardian party is required when guardian signature is required")
        if payload.requires_witness and PartyType.WITNESS not in present:
            messages.append("A witness party is required when a witness is required")
        if messages:
            raise ValidationError(fields={"parties": messages})

    def _check_edit(self, contract: Contract, changes: dict[str, Any]) -> None:
        """Validate an edit against the stored dates and the contract's existing parties."""
        effective = changes.get("effective_date", contract.effective_date)
        expiration = changes.get("expiration_date", contract.expiration_date)
        if effective and expiration and expiration < effective:
            raise ValidationError(fields={"expiration_date": ["expiration_date must be on or after effective_date"]})

        present = {signature.party_type for signature in self.repository.list_signatures(contract.id)}
        messages: list[str] = []
        if changes.get("requires_guardian_signature") and PartyType.GUARDIAN not in present:
            messages.append("A guardian party is required when guardian signature is required")
        if changes.get("requires_witness") and PartyType.WITNESS not in present:
            messages.append("A witness party is required when a witness is required")
        if messages:
            raise ValidationError(fields={"parties": messages})
