"""Canonical state transition helpers for lifecycle entities."""

from __future__ import annotations

from gradeup.core.exceptions import InvalidStateError
from gradeup.models.enums import ContractStatus


class InvalidTransitionError(InvalidStateError):
    """Raised when a disallowed state transition is attempted."""


class StateMachine:
    """Allowed-target map with assertion helpers."""

    def __init__(self, transitions: dict[str, set[str]]) -> None:
        self._transitions = transitions

    def can_transition(self, current: str, target: str) -> bool:
        return target in self._transitions.get(current, set())

    def assert_transition(self, current: str, target: str) -> None:
        if not self.can_transition(current=current, target=target):
            raise InvalidTransitionError(f"Transition not allowed: {_label(current)} -> {_label(target)}")

    def sources_for(self, target: str) -> set[str]:
        """Return every status from which ``target`` is reachable in one step."""
        return {current for current, targets in self._transitions.items() if target in targets}


def _label(value: object) -> str:
    return str(getattr(value, "value", value))


# Self-loops on the signing states let a recomputation land on the same status.
CONTRACT_TRANSITIONS: dict[ContractStatus, set[ContractStatus]] = {
    ContractStatus.DRAFT: {ContractStatus.PENDING_SIGNATURE, ContractStatus.VOIDED},
    ContractStatus.PENDING_SIGNATURE: {
        ContractStatus.PENDING_SIGNATURE,
        ContractStatus.PARTIALLY_SIGNED,
        ContractStatus.FULLY_SIGNED,
        ContractStatus.CANCELLED,
        ContractStatus.VOIDED,
    },
    ContractStatus.PARTIALLY_SIGNED: {
        ContractStatus.PARTIALLY_SIGNED,
        ContractStatus.FULLY_SIGNED,
        ContractStatus.CANCELLED,
        ContractStatus.VOIDED,
    },
    ContractStatus.FULLY_SIGNED: {ContractStatus.ACTIVE, ContractStatus.VOIDED},
    ContractStatus.ACTIVE: {ContractStatus.EXPIRED, ContractStatus.VOIDED},
    ContractStatus.CANCELLED: {ContractStatus.VOIDED},
    ContractStatus.EXPIRED: {ContractStatus.VOIDED},
    ContractStatus.VOIDED: set(),
}

contract_state_machine = StateMachine(CONTRACT_TRANSITIONS)
