"""Pure reduction from a contract's signature set to its status."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from gradeup.models.enums import REQUIRED_PARTIES, ContractStatus, PartyType, SignatureStatus


class SignatureLike(Protocol):
    party_type: PartyType
    signature_status: SignatureStatus


def _is_signed(signature: SignatureLike) -> bool:
    return signature.signature_status == SignatureStatus.SIGNED


def _party_satisfied(signatures: list[SignatureLike], party_type: PartyType, required: bool) -> bool:
    if not required:
        return True
    return any(sig.party_type == party_type and _is_signed(sig) for sig in signatures)


def recompute_status(
    signatures: Iterable[SignatureLike],
    requires_guardian: bool = False,
    requires_witness: bool = False,
) -> ContractStatus:
    """Derive the signing status of a contract from its signatures.

    Athlete and brand are the required parties. Once both have signed the
    contract is fully signed when the guardian and witness conditions also
    hold. Otherwise any signature at all yields ``partially_signed``.
    """
    signatures = list(signatures)
    required = [sig for sig in signatures if sig.party_type in REQUIRED_PARTIES]

    if required and all(_is_signed(sig) for sig in required):
        guardian_ok = _party_satisfied(signatures, PartyType.GUARDIAN, requires_guardian)
        witness_ok = _party_satisfied(signatures, PartyType.WITNESS, requires_witness)
        if guardian_ok and witness_ok:
            return ContractStatus.FULLY_SIGNED
        return ContractStatus.PARTIALLY_SIGNED

    if any(_is_signed(sig) for sig in signatures):
        return ContractStatus.PARTIALLY_SIGNED
    return ContractStatus.PENDING_SIGNATURE
