"""
Attestation requests.

One immutable model per attestation type. Every request starts with the
common prefix (attestation type, source id, message integrity code) and
adds the fields its type needs to identify the fact to be proven.
"""

from __future__ import annotations

from typing import ClassVar

from pydantic import model_validator
from typing_extensions import Self

from attestation_protocol.subspecs.sources import SourceId
from attestation_protocol.types import ByteSequenceLike, FrozenModel, NumberLike

from .attestation_type import AttestationType


class AttestationRequest(FrozenModel):
    """Fields shared by all attestation requests."""

    ATTESTATION_TYPE: ClassVar[AttestationType]
    """The attestation type this request class represents."""

    attestation_type: AttestationType
    """Attestation type id for this request."""

    source_id: SourceId
    """The id of the source ledger."""

    message_integrity_code: ByteSequenceLike
    """
    Salted hash of the anticipated attestation response.

    Lets a verifier check that the response matches what the requester
    expected. All zeros when the requester does not anticipate a response.
    """

    @model_validator(mode="after")
    def check_attestation_type(self) -> Self:
        """Ensure the attestation type field matches the request class."""
        expected = getattr(type(self), "ATTESTATION_TYPE", None)
        if expected is not None and self.attestation_type != expected:
            raise ValueError(
                f"{type(self).__name__} requires attestation type {expected.name}, "
                f"got {self.attestation_type!r}"
            )
        return self


class PaymentRequest(AttestationRequest):
    """Request to prove that a transaction moved funds between two addresses."""

    ATTESTATION_TYPE = AttestationType.PAYMENT

    attestation_type: AttestationType = AttestationType.PAYMENT

    id: ByteSequenceLike
    """Transaction hash to search for."""

    block_number: NumberLike
    """Block number of the transaction."""

    in_utxo: NumberLike
    """Index of the source address on UTXO chains. Always 0 on non-UTXO chains."""

    utxo: NumberLike
    """Index of the receiving address on UTXO chains. Always 0 on non-UTXO chains."""


class BalanceDecreasingTransactionRequest(AttestationRequest):
    """Request to prove that a transaction decreased the balance of an address."""

    ATTESTATION_TYPE = AttestationType.BALANCE_DECREASING_TRANSACTION

    attestation_type: AttestationType = AttestationType.BALANCE_DECREASING_TRANSACTION

    id: ByteSequenceLike
    """Transaction hash to search for."""

    block_number: NumberLike
    """Block number of the transaction."""

    source_address_indicator: ByteSequenceLike
    """Either the standardized hash of a source address or a UTXO input index."""


class ConfirmedBlockHeightExistsRequest(AttestationRequest):
    """Request to prove that a block with a given number is confirmed."""

    ATTESTATION_TYPE = AttestationType.CONFIRMED_BLOCK_HEIGHT_EXISTS

    attestation_type: AttestationType = AttestationType.CONFIRMED_BLOCK_HEIGHT_EXISTS

    block_number: NumberLike
    """Block number to be proved to be confirmed."""

    query_window: NumberLike
    """
    Period in seconds considered for sampling block production.

    The lowest query window block in the response is the last block with a
    timestamp strictly smaller than `block.timestamp - query_window`.
    """


class ReferencedPaymentNonexistenceRequest(AttestationRequest):
    """Request to prove that no payment with a given reference arrived before a deadline."""

    ATTESTATION_TYPE = AttestationType.REFERENCED_PAYMENT_NONEXISTENCE

    attestation_type: AttestationType = AttestationType.REFERENCED_PAYMENT_NONEXISTENCE

    minimal_block_number: NumberLike
    """First block of the search window."""

    deadline_block_number: NumberLike
    """Maximum number of the block where the transaction is searched for."""

    deadline_timestamp: NumberLike
    """Maximum timestamp of the block where the transaction is searched for."""

    destination_address_hash: ByteSequenceLike
    """Standardized hash of the address the payment should have been made to."""

    amount: NumberLike
    """The minimal amount to search for."""

    payment_reference: ByteSequenceLike
    """The payment reference to search for."""
