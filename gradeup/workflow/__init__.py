from gradeup.workflow.contract_status import recompute_status
from gradeup.workflow.state_machine import (
    CONTRACT_TRANSITIONS,
    InvalidTransitionError,
    StateMachine,
    contract_state_machine,
)

__all__ = [
    "CONTRACT_TRANSITIONS",
    "InvalidTransitionError",
    "StateMachine",
    "contract_state_machine",
    "recompute_status",
]
