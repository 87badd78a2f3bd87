"""
Attestation responses.

A response carries the attested data, the round in which it was validated
and, once the round is finalized, the Merkle proof tying it to the round's
published root. Every hashed field is optional: a response missing any of
them cannot be hashed and is treated as incomplete.
"""

from __future__ import annotations

from typing import ClassVar

from pydantic import ConfigDict
from typing_extensions import Self

from attestation_protocol.types import (
    Bytes32,
    CamelModel,
    Int256,
    Uint8,
    Uint64,
    Uint128,
    Uint256,
)

from .attestation_type import AttestationType


class AttestationResponse(CamelModel):
    """Fields shared by all attestation responses."""

    model_config = CamelModel.model_config | ConfigDict(frozen=True, extra="ignore")

    ATTESTATION_TYPE: ClassVar[AttestationType]
    """The attestation type this response class belongs to."""

    state_connector_round: Uint256 | None = None
    """Round id in which the attestation request was validated."""

    merkle_proof: list[Bytes32] | None = None
    """Merkle proof of the response hash. None while the response is unproven."""

    @property
    def is_proved(self) -> bool:
        """Whether the response carries a Merkle proof."""
        return self.merkle_proof is not None

    def with_proof(self, round: int, merkle_proof: list[Bytes32]) -> Self:
        """Return a copy stamped with its validation round and Merkle proof."""
        return self.model_copy(
            update={"state_connector_round": round, "merkle_proof": list(merkle_proof)}
        )


class PaymentResponse(AttestationResponse):
    """Attested data about a payment transaction."""

    ATTESTATION_TYPE = AttestationType.PAYMENT

    block_number: Uint64 | None = None
    """Number of the transaction block on the source ledger."""

    block_timestamp: Uint64 | None = None
    """Timestamp of the transaction block on the source ledger."""

    transaction_hash: Bytes32 | None = None
    """Hash of the transaction on the source ledger."""

    in_utxo: Uint8 | None = None
    """Index of the input holding the source address (0 on non-UTXO chains)."""

    utxo: Uint8 | None = None
    """Index of the output holding the receiving address (0 on non-UTXO chains)."""

    source_address_hash: Bytes32 | None = None
    """Standardized hash of the source address."""

    intended_source_address_hash: Bytes32 | None = None
    """Standardized hash of the intended source address."""

    receiving_address_hash: Bytes32 | None = None
    """Standardized hash of the receiving address."""

    intended_receiving_address_hash: Bytes32 | None = None
    """Standardized hash of the intended receiving address."""

    spent_amount: Int256 | None = None
    """
    Amount that went out of the source address, in the smallest units.

    On UTXO chains it is outgoing minus returned amount and can be negative.
    """

    intended_spent_amount: Int256 | None = None
    """Amount the source address intended to spend. Equals `spent_amount` on success."""

    received_amount: Int256 | None = None
    """Amount received by the receiving address. Can be negative on UTXO chains."""

    intended_received_amount: Int256 | None = None
    """Amount the receiving address was meant to receive."""

    payment_reference: Bytes32 | None = None
    """Standardized payment reference, zero if the transaction has none."""

    one_to_one: bool | None = None
    """True if the transaction has exactly one source and one other receiving address."""

    status: Uint8 | None = None
    """0 success, 1 failure due to the sender, 2 failure due to the receiver."""


class BalanceDecreasingTransactionResponse(AttestationResponse):
    """Attested data about a transaction that decreased an address balance."""

    ATTESTATION_TYPE = AttestationType.BALANCE_DECREASING_TRANSACTION

    block_number: Uint64 | None = None
    """Number of the transaction block on the source ledger."""

    block_timestamp: Uint64 | None = None
    """Timestamp of the transaction block on the source ledger."""

    transaction_hash: Bytes32 | None = None
    """Hash of the transaction on the source ledger."""

    source_address_indicator: Bytes32 | None = None
    """The source address indicator as provided in the request."""

    source_address_hash: Bytes32 | None = None
    """Standardized hash of the indicated source address."""

    spent_amount: Int256 | None = None
    """Amount that went out of the source address, in the smallest units."""

    payment_reference: Bytes32 | None = None
    """Standardized payment reference, zero if the transaction has none."""


class ConfirmedBlockHeightExistsResponse(AttestationResponse):
    """Attested data about a confirmed block."""

    ATTESTATION_TYPE = AttestationType.CONFIRMED_BLOCK_HEIGHT_EXISTS

    block_number: Uint64 | None = None
    """Number of the confirmed block."""

    block_timestamp: Uint64 | None = None
    """Timestamp of the confirmed block."""

    number_of_confirmations: Uint8 | None = None
    """Number of confirmations the ledger requires."""

    lowest_query_window_block_number: Uint64 | None = None
    """Number of the last block before the query window."""

    lowest_query_window_block_timestamp: Uint64 | None = None
    """Timestamp of the last block before the query window."""


class ReferencedPaymentNonexistenceResponse(AttestationResponse):
    """Attested data about the absence of a referenced payment."""

    ATTESTATION_TYPE = AttestationType.REFERENCED_PAYMENT_NONEXISTENCE

    deadline_block_number: Uint64 | None = None
    """Deadline block number from the request."""

    deadline_timestamp: Uint64 | None = None
    """Deadline timestamp from the request."""

    destination_address_hash: Bytes32 | None = None
    """Standardized hash of the destination address searched for."""

    payment_reference: Bytes32 | None = None
    """The payment reference searched for."""

    amount: Uint128 | None = None
    """The minimal amount searched for."""

    lower_boundary_block_number: Uint64 | None = None
    """First block that was checked. Equals `minimal_block_number` from the request."""

    lower_boundary_block_timestamp: Uint64 | None = None
    """Timestamp of the lower boundary block."""

    first_overflow_block_number: Uint64 | None = None
    """First block with number and timestamp both past the deadline."""

    first_overflow_block_timestamp: Uint64 | None = None
    """Timestamp of the first overflow block."""
