"""
Attestation prover over the in-memory ledger.

Answers each attestation type the way a verifier of the attestation network
would. Requests that cannot be proved (unknown or not yet final
transactions, found payments, missing overflow blocks) produce no response.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from attestation_protocol.subspecs.ledger import LedgerBlock, LedgerTransaction, TxStatus
from attestation_protocol.subspecs.requests import (
    AttestationRequest,
    AttestationResponse,
    BalanceDecreasingTransactionRequest,
    BalanceDecreasingTransactionResponse,
    ConfirmedBlockHeightExistsRequest,
    ConfirmedBlockHeightExistsResponse,
    PaymentRequest,
    PaymentResponse,
    ReferencedPaymentNonexistenceRequest,
    ReferencedPaymentNonexistenceResponse,
)
from attestation_protocol.types import (
    ZERO_BYTES32,
    Bytes32,
    number_like_to_int,
    standard_address_hash,
)

from .chain import InMemoryLedger

MAX_INPUT_INDEX_INDICATOR = 2**16
"""Source address indicators below this value are UTXO input indices, larger ones are hashes."""


def _total_for(ios: Iterable[tuple[str, int]], address_hash: bytes) -> int:
    return sum(value for address, value in ios if standard_address_hash(address) == address_hash)


def _total_spent(transaction: LedgerTransaction, address_hash: bytes) -> int:
    return _total_for(transaction.inputs, address_hash) - _total_for(
        transaction.outputs, address_hash
    )


def _total_received(transaction: LedgerTransaction, address_hash: bytes) -> int:
    return _total_for(transaction.outputs, address_hash) - _total_for(
        transaction.inputs, address_hash
    )


@dataclass(slots=True)
class InMemoryAttestationProver:
    """Builds attestation responses from an `InMemoryLedger`."""

    ledger: InMemoryLedger

    def prove(self, request: AttestationRequest) -> AttestationResponse | None:
        """Answer any supported request, or None if it cannot be proved."""
        match request:
            case PaymentRequest():
                return self.payment(
                    Bytes32.left_padded(request.id),
                    number_like_to_int(request.in_utxo),
                    number_like_to_int(request.utxo),
                )
            case BalanceDecreasingTransactionRequest():
                return self.balance_decreasing_transaction(
                    Bytes32.left_padded(request.id),
                    Bytes32.left_padded(request.source_address_indicator),
                )
            case ConfirmedBlockHeightExistsRequest():
                return self.confirmed_block_height_exists(
                    number_like_to_int(request.block_number),
                    number_like_to_int(request.query_window),
                )
            case ReferencedPaymentNonexistenceRequest():
                return self.referenced_payment_nonexistence(
                    Bytes32.left_padded(request.destination_address_hash),
                    Bytes32.left_padded(request.payment_reference),
                    number_like_to_int(request.amount),
                    number_like_to_int(request.minimal_block_number),
                    number_like_to_int(request.deadline_block_number),
                    number_like_to_int(request.deadline_timestamp),
                )
        return None

    def payment(self, transaction_hash: Bytes32, in_utxo: int, utxo: int) -> PaymentResponse | None:
        found = self._find_final_transaction(transaction_hash)
        if found is None:
            return None
        transaction, block = found
        if in_utxo >= len(transaction.inputs) or utxo >= len(transaction.outputs):
            return None

        source = transaction.inputs[in_utxo][0]
        receiver = transaction.outputs[utxo][0]
        source_hash = standard_address_hash(source)
        receiver_hash = standard_address_hash(receiver)
        spent = _total_spent(transaction, source_hash)
        received = _total_received(transaction, receiver_hash)

        sources = {address for address, _ in transaction.inputs}
        receivers = {address for address, _ in transaction.outputs} - sources

        return PaymentResponse(
            block_number=block.number,
            block_timestamp=block.timestamp,
            transaction_hash=transaction.hash,
            in_utxo=in_utxo,
            utxo=utxo,
            source_address_hash=source_hash,
            intended_source_address_hash=source_hash,
            receiving_address_hash=receiver_hash,
            intended_receiving_address_hash=receiver_hash,
            spent_amount=spent,
            intended_spent_amount=spent,
            received_amount=received,
            intended_received_amount=received,
            payment_reference=transaction.reference or ZERO_BYTES32,
            one_to_one=len(sources) == 1 and len(receivers) <= 1,
            status=int(transaction.status),
        )

    def balance_decreasing_transaction(
        self, transaction_hash: Bytes32, source_address_indicator: Bytes32
    ) -> BalanceDecreasingTransactionResponse | None:
        found = self._find_final_transaction(transaction_hash)
        if found is None:
            return None
        transaction, block = found

        # The indicator is either the standardized hash of the source address
        # or the index of an input.
        indicator = int.from_bytes(source_address_indicator, "big")
        if indicator < MAX_INPUT_INDEX_INDICATOR:
            if indicator >= len(transaction.inputs):
                return None
            source_hash = standard_address_hash(transaction.inputs[indicator][0])
        else:
            source_hash = source_address_indicator

        spent = _total_spent(transaction, source_hash)
        if spent == 0:
            return None

        return BalanceDecreasingTransactionResponse(
            block_number=block.number,
            block_timestamp=block.timestamp,
            transaction_hash=transaction.hash,
            source_address_indicator=source_address_indicator,
            source_address_hash=source_hash,
            spent_amount=spent,
            payment_reference=transaction.reference or ZERO_BYTES32,
        )

    def confirmed_block_height_exists(
        self, block_number: int, query_window: int
    ) -> ConfirmedBlockHeightExistsResponse | None:
        if not self._is_final(block_number):
            return None
        blocks = self.ledger.blocks
        block = blocks[block_number]

        # The lowest query window block is the last one strictly before the window.
        window_start = block.timestamp - query_window
        index = block_number
        while index >= 0 and blocks[index].timestamp >= window_start:
            index -= 1

        # A short chain may have no block before the window; report zeros then.
        lowest = blocks[index] if index >= 0 else None
        return ConfirmedBlockHeightExistsResponse(
            block_number=block.number,
            block_timestamp=block.timestamp,
            number_of_confirmations=self.ledger.finalization_blocks,
            lowest_query_window_block_number=lowest.number if lowest else 0,
            lowest_query_window_block_timestamp=lowest.timestamp if lowest else 0,
        )

    def referenced_payment_nonexistence(
        self,
        destination_address_hash: Bytes32,
        payment_reference: Bytes32,
        amount: int,
        minimal_block_number: int,
        deadline_block_number: int,
        deadline_timestamp: int,
    ) -> ReferencedPaymentNonexistenceResponse | None:
        blocks = self.ledger.blocks
        if not 0 <= minimal_block_number < len(blocks):
            return None

        overflow: LedgerBlock | None = None
        for block in blocks[minimal_block_number:]:
            if block.number > deadline_block_number and block.timestamp > deadline_timestamp:
                overflow = block
                break
            for tx_hash in block.transactions:
                transaction = self.ledger.transactions[tx_hash]
                if (
                    transaction.reference == payment_reference
                    and _total_received(transaction, destination_address_hash) >= amount
                    and transaction.status != TxStatus.FAILED
                ):
                    return None

        if overflow is None or not self._is_final(overflow.number):
            return None

        lower = blocks[minimal_block_number]
        return ReferencedPaymentNonexistenceResponse(
            deadline_block_number=deadline_block_number,
            deadline_timestamp=deadline_timestamp,
            destination_address_hash=destination_address_hash,
            payment_reference=payment_reference,
            amount=amount,
            lower_boundary_block_number=lower.number,
            lower_boundary_block_timestamp=lower.timestamp,
            first_overflow_block_number=overflow.number,
            first_overflow_block_timestamp=overflow.timestamp,
        )

    def _is_final(self, block_number: int) -> bool:
        return (
            0 <= block_number
            and block_number + self.ledger.finalization_blocks <= self.ledger.block_height()
        )

    def _find_final_transaction(
        self, transaction_hash: Bytes32
    ) -> tuple[LedgerTransaction, LedgerBlock] | None:
        number = self.ledger.transaction_index.get(transaction_hash)
        if number is None or not self._is_final(number):
            return None
        return self.ledger.transactions[transaction_hash], self.ledger.blocks[number]
