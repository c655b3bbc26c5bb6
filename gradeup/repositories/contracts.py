"""Contract persistence boundary.

``ContractRepository`` is the narrow interface the contract workflow needs.
``SqlContractRepository`` implements it with conditional ``UPDATE ... WHERE
status = ?`` statements so concurrent signers cannot lose each other's
updates.
"""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from typing import Any

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.orm import Session, selectinload

from gradeup.models.athlete import Athlete
from gradeup.models.contract import Contract, ContractSignature
from gradeup.models.deal import Brand, Deal
from gradeup.models.enums import ContractStatus, ContractTemplate, PartyType, SignatureStatus
from gradeup.services.base_service import BaseService


@dataclass
class ContractFilters:
    deal_id: uuid.UUID | None = None
    statuses: list[ContractStatus] = field(default_factory=list)
    template_types: list[ContractTemplate] = field(default_factory=list)
    from_date: date | None = None
    to_date: date | None = None
    page: int = 1
    page_size: int = 10


class ContractRepository(ABC):
    """Storage operations used by the contract workflow."""

    @abstractmethod
    def get_deal(self, deal_id: uuid.UUID) -> Deal | None:
        raise NotImplementedError

    @abstractmethod
    def get_contract(self, contract_id: uuid.UUID) -> Contract | None:
        raise NotImplementedError

    @abstractmethod
    def list_signatures(self, contract_id: uuid.UUID) -> list[ContractSignature]:
        """Return every signature of the contract, read fresh, in party order."""
        raise NotImplementedError

    @abstractmethod
    def get_signature(self, contract_id: uuid.UUID, party_type: PartyType) -> ContractSignature | None:
        raise NotImplementedError

    @abstractmethod
    def update_signature(
        self, signature_id: uuid.UUID, expected_status: SignatureStatus, **changes: Any
    ) -> bool:
        """Apply ``changes`` only while the signature is in ``expected_status``."""
        raise NotImplementedError

    @abstractmethod
    def update_contract_status(
        self,
        contract_id: uuid.UUID,
        expected_statuses: Iterable[ContractStatus],
        new_status: ContractStatus,
        **changes: Any,
    ) -> bool:
        """Move the contract to ``new_status`` only from one of ``expected_statuses``."""
        raise NotImplementedError

    @abstractmethod
    def update_contract(
        self, contract_id: uuid.UUID, expected_statuses: Iterable[ContractStatus], changes: dict[str, Any]
    ) -> bool:
        raise NotImplementedError

    @abstractmethod
    def add_contract(self, contract: Contract, signatures: list[ContractSignature]) -> Contract:
        raise NotImplementedError

    @abstractmethod
    def delete_contract(self, contract_id: uuid.UUID, expected_status: ContractStatus) -> bool:
        raise NotImplementedError

    @abstractmethod
    def list_contracts(
        self, filters: ContractFilters, participant_id: uuid.UUID | None = None
    ) -> tuple[list[Contract], int]:
        """Return one page of contracts and the total match count.

        ``participant_id`` limits results to deals where that profile is the
        athlete or the brand; ``None`` means unrestricted.
        """
        raise NotImplementedError

    @abstractmethod
    def list_active_expiring(self, as_of: date) -> list[Contract]:
        raise NotImplementedError

    @abstractmethod
    def commit(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def rollback(self) -> None:
        raise NotImplementedError


def _start_of_day(value: date) -> datetime:
    return datetime.combine(value, time.min, tzinfo=timezone.utc)


def _end_of_day(value: date) -> datetime:
    return datetime.combine(value, time.max, tzinfo=timezone.utc)


class SqlContractRepository(BaseService, ContractRepository):
    def __init__(self, db: Session | None = None) -> None:
        super().__init__(db)

    def get_deal(self, deal_id: uuid.UUID) -> Deal | None:
        stmt = (
            select(Deal)
            .options(selectinload(Deal.athlete), selectinload(Deal.brand))
            .where(Deal.id == deal_id)
        )
        return self.db.scalars(stmt).first()

    def get_contract(self, contract_id: uuid.UUID) -> Contract | None:
        stmt = select(Contract).where(Contract.id == contract_id).execution_options(populate_existing=True)
        return self.db.scalars(stmt).first()

    def list_signatures(self, contract_id: uuid.UUID) -> list[ContractSignature]:
        stmt = (
            select(ContractSignature)
            .where(ContractSignature.contract_id == contract_id)
            .order_by(ContractSignature.position)
            .execution_options(populate_existing=True)
        )
        return list(self.db.scalars(stmt))

    def get_signature(self, contract_id: uuid.UUID, party_type: PartyType) -> ContractSignature | None:
        stmt = select(ContractSignature).where(
            ContractSignature.contract_id == contract_id,
            ContractSignature.party_type == party_type,
        )
        return self.db.scalars(stmt).first()

    def update_signature(
        self, signature_id: uuid.UUID, expected_status: SignatureStatus, **changes: Any
    ) -> bool:
        stmt = (
            update(ContractSignature)
            .where(
                ContractSignature.id == signature_id,
                ContractSignature.signature_status == expected_status,
            )
            .values(**changes)
            .execution_options(synchronize_session="fetch")
        )
        return self.db.execute(stmt).rowcount == 1

    def update_contract_status(
        self,
        contract_id: uuid.UUID,
        expected_statuses: Iterable[ContractStatus],
        new_status: ContractStatus,
        **changes: Any,
    ) -> bool:
        return self.update_contract(contract_id, expected_statuses, {**changes, "status": new_status})

    def update_contract(
        self, contract_id: uuid.UUID, expected_statuses: Iterable[ContractStatus], changes: dict[str, Any]
    ) -> bool:
        stmt = (
            update(Contract)
            .where(Contract.id == contract_id, Contract.status.in_(list(expected_statuses)))
            .values(**changes)
            .execution_options(synchronize_session="fetch")
        )
        return self.db.execute(stmt).rowcount == 1

    def add_contract(self, contract: Contract, signatures: list[ContractSignature]) -> Contract:
        self.db.add(contract)
        self.db.add_all(signatures)
        self.flush()
        return contract

    def delete_contract(self, contract_id: uuid.UUID, expected_status: ContractStatus) -> bool:
        self.db.execute(
            delete(ContractSignature)
            .where(ContractSignature.contract_id == contract_id)
            .execution_options(synchronize_session=False)
        )
        deleted = self.db.execute(
            delete(Contract)
            .where(Contract.id == contract_id, Contract.status == expected_status)
            .execution_options(synchronize_session=False)
        ).rowcount
        if deleted != 1:
            self.rollback()
            return False
        return True

    def list_contracts(
        self, filters: ContractFilters, participant_id: uuid.UUID | None = None
    ) -> tuple[list[Contract], int]:
        stmt = select(Contract)
        if participant_id is not None:
            stmt = (
                stmt.join(Deal, Deal.id == Contract.deal_id)
                .join(Athlete, Athlete.id == Deal.athlete_id)
                .join(Brand, Brand.id == Deal.brand_id)
                .where(or_(Athlete.profile_id == participant_id, Brand.profile_id == participant_id))
            )
        if filters.deal_id is not None:
            stmt = stmt.where(Contract.deal_id == filters.deal_id)
        if filters.statuses:
            stmt = stmt.where(Contract.status.in_(filters.statuses))
        if filters.template_types:
            stmt = stmt.where(Contract.template_type.in_(filters.template_types))
        if filters.from_date is not None:
            stmt = stmt.where(Contract.created_at >= _start_of_day(filters.from_date))
        if filters.to_date is not None:
            stmt = stmt.where(Contract.created_at <= _end_of_day(filters.to_date))

        total = self.db.scalar(select(func.count()).select_from(stmt.subquery())) or 0
        page_stmt = (
            stmt.order_by(Contract.created_at.desc())
            .offset((filters.page - 1) * filters.page_size)
            .limit(filters.page_size)
        )
        return list(self.db.scalars(page_stmt)), total

    def list_active_expiring(self, as_of: date) -> list[Contract]:
        stmt = select(Contract).where(
            Contract.status == ContractStatus.ACTIVE,
            Contract.expiration_date.is_not(None),
            Contract.expiration_date < as_of,
        )
        return list(self.db.scalars(stmt))
