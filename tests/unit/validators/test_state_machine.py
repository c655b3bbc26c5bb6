from __future__ import annotations

import pytest

from gradeup.core.exceptions import InvalidStateError
from gradeup.models.enums import ContractStatus
from gradeup.workflow.state_machine import InvalidTransitionError, StateMachine, contract_state_machine


def test_state_machine_allows_valid_transition():
    sm = StateMachine({"draft": {"pending"}, "pending": {"done"}})
    assert sm.can_transition("draft", "pending") is True
    sm.assert_transition("draft", "pending")


def test_state_machine_rejects_invalid_transition():
    sm = StateMachine({"draft": {"pending"}})
    with pytest.raises(InvalidTransitionError):
        sm.assert_transition("draft", "done")


def test_invalid_transition_is_an_invalid_state_error():
    with pytest.raises(InvalidStateError, match="voided -> draft"):
        contract_state_machine.assert_transition(ContractStatus.VOIDED, ContractStatus.DRAFT)


@pytest.mark.parametrize(
    ("current", "target"),
    [
        (ContractStatus.DRAFT, ContractStatus.PENDING_SIGNATURE),
        (ContractStatus.PENDING_SIGNATURE, ContractStatus.PARTIALLY_SIGNED),
        (ContractStatus.PENDING_SIGNATURE, ContractStatus.FULLY_SIGNED),
        (ContractStatus.PARTIALLY_SIGNED, ContractStatus.FULLY_SIGNED),
        (ContractStatus.PARTIALLY_SIGNED, ContractStatus.CANCELLED),
        (ContractStatus.FULLY_SIGNED, ContractStatus.ACTIVE),
        (ContractStatus.ACTIVE, ContractStatus.EXPIRED),
        (ContractStatus.EXPIRED, ContractStatus.VOIDED),
    ],
)
def test_contract_lifecycle_edges(current, target):
    assert contract_state_machine.can_transition(current, target)


@pytest.mark.parametrize(
    ("current", "target"),
    [
        (ContractStatus.DRAFT, ContractStatus.FULLY_SIGNED),
        (ContractStatus.PARTIALLY_SIGNED, ContractStatus.PENDING_SIGNATURE),
        (ContractStatus.FULLY_SIGNED, ContractStatus.CANCELLED),
        (ContractStatus.CANCELLED, ContractStatus.ACTIVE),
        (ContractStatus.VOIDED, ContractStatus.VOIDED),
    ],
)
def test_contract_lifecycle_rejects(current, target):
    assert not contract_state_machine.can_transition(current, target)


def test_every_status_but_voided_can_be_voided():
    sources = contract_state_machine.sources_for(ContractStatus.VOIDED)
    assert sources == set(ContractStatus) - {ContractStatus.VOIDED}


def test_voided_is_terminal():
    assert all(
        not contract_state_machine.can_transition(ContractStatus.VOIDED, target) for target in ContractStatus
    )
