"""
Attestation client.

Drives one proof request through its stages:

1. **Locate**: find the subject on the source ledger and build the request.
2. **Submit**: hand the request to the attestation network, which files it
   into a voting round.
3. **Wait**: suspend until that round is finalized.
4. **Fetch**: retrieve the response and its Merkle proof.

There are four flows, one per attestation type. They differ only in how the
subject is located and which request fields are filled in. Submission,
waiting and fetching are shared.

Each `try_prove_*` method returns a `ProofOutcome` and never raises for
expected absence (subject not on the ledger yet, request not proved). The
`prove_*` methods return the proved response or raise `ProofFailedError`.
Errors of the network itself always propagate.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Sequence

from attestation_protocol.subspecs import codec
from attestation_protocol.subspecs.ledger import LedgerTransaction, SourceLedger, TxInputOutput
from attestation_protocol.subspecs.oracle import OracleNetworkClient
from attestation_protocol.subspecs.requests import (
    AttestationRequest,
    AttestationRequestId,
    AttestationResponse,
    BalanceDecreasingTransactionRequest,
    BalanceDecreasingTransactionResponse,
    ConfirmedBlockHeightExistsRequest,
    ConfirmedBlockHeightExistsResponse,
    ObtainedProof,
    PaymentRequest,
    PaymentResponse,
    ReferencedPaymentNonexistenceRequest,
    ReferencedPaymentNonexistenceResponse,
)
from attestation_protocol.subspecs.schemes import DEFAULT_REGISTRY, SchemeRegistry
from attestation_protocol.subspecs.sources import SourceId
from attestation_protocol.types import (
    ZERO_BYTES32,
    Bytes32,
    LedgerLookupError,
    NumberLike,
    OverflowBlockNotFoundError,
    ProofFailedError,
    RoundFinalizationTimeoutError,
    SubjectNotFoundError,
    coerce_to_bytes,
    standard_address_hash,
    to_hex,
)

from .config import DEFAULT_FINALIZATION_TIMEOUT, DEFAULT_QUERY_WINDOW
from .outcome import FailureReason, ProofOutcome
from .states import ProofState

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _ProofFlow:
    """Mutable progress of one proof request."""

    operation: str
    state: ProofState = ProofState.IDLE
    request_id: AttestationRequestId | None = None

    def transition_to(self, new_state: ProofState) -> None:
        """
        Move to `new_state`.

        Raises:
            ValueError: If the transition is not allowed.
        """
        if not self.state.can_transition_to(new_state):
            raise ValueError(f"Invalid state transition: {self.state.name} -> {new_state.name}")
        self.state = new_state

    def fail(
        self,
        reason: FailureReason,
        detail: str,
        block_height: int | None = None,
    ) -> ProofOutcome:
        """End the flow in FAILED."""
        self.transition_to(ProofState.FAILED)
        logger.warning(f"{self.operation} failed: {reason.name} ({detail})")
        return ProofOutcome(
            state=ProofState.FAILED,
            reason=reason,
            request_id=self.request_id,
            block_height=block_height,
            detail=detail,
        )

    def prove(self, response: AttestationResponse) -> ProofOutcome:
        """End the flow in PROVED."""
        self.transition_to(ProofState.PROVED)
        return ProofOutcome(state=ProofState.PROVED, response=response, request_id=self.request_id)


def _find_address_index(ios: Sequence[TxInputOutput], address: str | None) -> int | None:
    """Index of `address` among inputs or outputs, 0 if no address is given."""
    if address is None:
        return 0
    for i, (io_address, _) in enumerate(ios):
        if io_address == address:
            return i
    return None


@dataclass(slots=True)
class AttestationClient:
    """
    Proves facts about one source ledger through an attestation network.

    One client is bound to one source, so its source id is fixed. The client
    holds no state between flows, so many flows may run concurrently.
    """

    oracle: OracleNetworkClient
    """The attestation network."""

    ledger: SourceLedger
    """The source ledger the facts are about."""

    source_id: SourceId
    """Id of the source ledger, written into every request."""

    finalization_blocks: int | None = None
    """Confirmation depth. Defaults to the ledger's own value."""

    registry: SchemeRegistry = DEFAULT_REGISTRY
    """Schemes used to check message integrity codes."""

    finalization_timeout: float | None = DEFAULT_FINALIZATION_TIMEOUT
    """Bound on waiting for round finalization, in seconds. None waits indefinitely."""

    def __post_init__(self) -> None:
        if self.finalization_blocks is None:
            self.finalization_blocks = self.ledger.finalization_blocks
        if self.finalization_blocks < 0:
            raise ValueError("finalization_blocks must be non-negative")

    async def round_finalized(self, round: int) -> bool:
        """Whether `round` is finalized."""
        return await self.oracle.round_finalized(round)

    async def wait_for_round_finalization(self, round: int) -> None:
        """
        Suspend until `round` is finalized.

        Cancelling the calling task abandons the wait without side effects.

        Raises:
            RoundFinalizationTimeoutError: If `finalization_timeout` is set
                and elapses first.
        """
        if self.finalization_timeout is None:
            await self.oracle.wait_for_round_finalization(round)
            return
        try:
            await asyncio.wait_for(
                self.oracle.wait_for_round_finalization(round),
                timeout=self.finalization_timeout,
            )
        except asyncio.TimeoutError as exc:
            raise RoundFinalizationTimeoutError(round, self.finalization_timeout) from exc

    async def obtain_proof(self, round: int, request_data: bytes) -> ObtainedProof:
        """Fetch the network's answer for a submitted request."""
        return await self.oracle.obtain_proof(round, request_data)

    # Request submission.
    #
    # These stop after the Submitted stage and hand the request id back, so
    # callers can wait and fetch on their own schedule.

    async def request_payment_proof(
        self,
        transaction_hash: bytes | str,
        source_address: str | None = None,
        receiving_address: str | None = None,
        message_integrity_code: bytes | None = None,
    ) -> AttestationRequestId | ProofOutcome:
        """Locate a payment and submit a request to prove it."""
        flow = _ProofFlow("request_payment_proof")
        return await self._request(
            flow,
            self._payment_request(
                transaction_hash, source_address, receiving_address, message_integrity_code
            ),
        )

    async def request_balance_decreasing_transaction_proof(
        self,
        transaction_hash: bytes | str,
        source_address: str,
        message_integrity_code: bytes | None = None,
    ) -> AttestationRequestId | ProofOutcome:
        """Locate a balance decreasing transaction and submit a request to prove it."""
        flow = _ProofFlow("request_balance_decreasing_transaction_proof")
        return await self._request(
            flow,
            self._balance_decreasing_request(
                transaction_hash, source_address, message_integrity_code
            ),
        )

    async def request_confirmed_block_height_exists_proof(
        self,
        query_window: int = DEFAULT_QUERY_WINDOW,
        message_integrity_code: bytes | None = None,
    ) -> AttestationRequestId | ProofOutcome:
        """Submit a request proving the latest finalized block height."""
        flow = _ProofFlow("request_confirmed_block_height_exists_proof")
        return await self._request(
            flow, self._block_height_request(query_window, message_integrity_code)
        )

    async def request_referenced_payment_nonexistence_proof(
        self,
        destination_address: str,
        payment_reference: bytes | str,
        amount: NumberLike,
        start_block: int,
        end_block: int,
        end_timestamp: int,
        message_integrity_code: bytes | None = None,
    ) -> AttestationRequestId | ProofOutcome:
        """Find the overflow block and submit a request proving a payment's absence."""
        flow = _ProofFlow("request_referenced_payment_nonexistence_proof")
        return await self._request(
            flow,
            self._nonexistence_request(
                destination_address,
                payment_reference,
                amount,
                start_block,
                end_block,
                end_timestamp,
                message_integrity_code,
            ),
        )

    # Full flows returning outcomes.

    async def try_prove_payment(
        self,
        transaction_hash: bytes | str,
        source_address: str | None = None,
        receiving_address: str | None = None,
        message_integrity_code: bytes | None = None,
    ) -> ProofOutcome:
        """Prove that a transaction paid from one address to another."""
        return await self._prove(
            _ProofFlow("prove_payment"),
            self._payment_request(
                transaction_hash, source_address, receiving_address, message_integrity_code
            ),
        )

    async def try_prove_balance_decreasing_transaction(
        self,
        transaction_hash: bytes | str,
        source_address: str,
        message_integrity_code: bytes | None = None,
    ) -> ProofOutcome:
        """Prove that a transaction decreased the balance of `source_address`."""
        return await self._prove(
            _ProofFlow("prove_balance_decreasing_transaction"),
            self._balance_decreasing_request(
                transaction_hash, source_address, message_integrity_code
            ),
        )

    async def try_prove_confirmed_block_height_exists(
        self,
        query_window: int = DEFAULT_QUERY_WINDOW,
        message_integrity_code: bytes | None = None,
    ) -> ProofOutcome:
        """Prove that the latest finalized block exists."""
        return await self._prove(
            _ProofFlow("prove_confirmed_block_height_exists"),
            self._block_height_request(query_window, message_integrity_code),
        )

    async def try_prove_referenced_payment_nonexistence(
        self,
        destination_address: str,
        payment_reference: bytes | str,
        amount: NumberLike,
        start_block: int,
        end_block: int,
        end_timestamp: int,
        message_integrity_code: bytes | None = None,
    ) -> ProofOutcome:
        """Prove that no matching payment arrived between `start_block` and the deadline."""
        return await self._prove(
            _ProofFlow("prove_referenced_payment_nonexistence"),
            self._nonexistence_request(
                destination_address,
                payment_reference,
                amount,
                start_block,
                end_block,
                end_timestamp,
                message_integrity_code,
            ),
        )

    # Strict flows.

    async def prove_payment(
        self,
        transaction_hash: bytes | str,
        source_address: str | None = None,
        receiving_address: str | None = None,
        message_integrity_code: bytes | None = None,
    ) -> PaymentResponse:
        """
        Like `try_prove_payment`, but return the proved response.

        Raises:
            ProofFailedError: If no proof was obtained.
        """
        outcome = await self.try_prove_payment(
            transaction_hash, source_address, receiving_address, message_integrity_code
        )
        return self._proved("prove_payment", outcome)

    async def prove_balance_decreasing_transaction(
        self,
        transaction_hash: bytes | str,
        source_address: str,
        message_integrity_code: bytes | None = None,
    ) -> BalanceDecreasingTransactionResponse:
        """
        Like `try_prove_balance_decreasing_transaction`, but return the proved response.

        Raises:
            ProofFailedError: If no proof was obtained.
        """
        outcome = await self.try_prove_balance_decreasing_transaction(
            transaction_hash, source_address, message_integrity_code
        )
        return self._proved("prove_balance_decreasing_transaction", outcome)

    async def prove_confirmed_block_height_exists(
        self,
        query_window: int = DEFAULT_QUERY_WINDOW,
        message_integrity_code: bytes | None = None,
    ) -> ConfirmedBlockHeightExistsResponse:
        """
        Like `try_prove_confirmed_block_height_exists`, but return the proved response.

        Raises:
            ProofFailedError: If no proof was obtained.
        """
        outcome = await self.try_prove_confirmed_block_height_exists(
            query_window, message_integrity_code
        )
        return self._proved("prove_confirmed_block_height_exists", outcome)

    async def prove_referenced_payment_nonexistence(
        self,
        destination_address: str,
        payment_reference: bytes | str,
        amount: NumberLike,
        start_block: int,
        end_block: int,
        end_timestamp: int,
        message_integrity_code: bytes | None = None,
    ) -> ReferencedPaymentNonexistenceResponse:
        """
        Like `try_prove_referenced_payment_nonexistence`, but return the proved response.

        Raises:
            ProofFailedError: If no proof was obtained.
        """
        outcome = await self.try_prove_referenced_payment_nonexistence(
            destination_address,
            payment_reference,
            amount,
            start_block,
            end_block,
            end_timestamp,
            message_integrity_code,
        )
        return self._proved("prove_referenced_payment_nonexistence", outcome)

    # Shared stages.

    async def _request(
        self, flow: _ProofFlow, locate: Awaitable[AttestationRequest]
    ) -> AttestationRequestId | ProofOutcome:
        """Run the Located and Submitted stages, returning the request id."""
        submitted = await self._submit(flow, locate)
        if isinstance(submitted, ProofOutcome):
            return submitted
        return submitted[1]

    async def _submit(
        self, flow: _ProofFlow, locate: Awaitable[AttestationRequest]
    ) -> tuple[AttestationRequest, AttestationRequestId] | ProofOutcome:
        """Run the Located and Submitted stages."""
        try:
            request = await locate
        except LedgerLookupError as exc:
            return flow.fail(
                FailureReason.for_lookup_error(exc), exc.detail, block_height=exc.block_height
            )
        flow.transition_to(ProofState.LOCATED)

        request_id = await self.oracle.submit_request(request)
        if request_id is None:
            return flow.fail(FailureReason.NOT_PROVED, "request rejected by the network")

        flow.request_id = request_id
        flow.transition_to(ProofState.SUBMITTED)
        logger.info(f"{flow.operation}: request submitted in round {request_id.round}")
        return request, request_id

    async def _prove(
        self, flow: _ProofFlow, locate: Awaitable[AttestationRequest]
    ) -> ProofOutcome:
        """Run a whole proof flow."""
        submitted = await self._submit(flow, locate)
        if isinstance(submitted, ProofOutcome):
            return submitted
        request, request_id = submitted

        await self.wait_for_round_finalization(request_id.round)
        flow.transition_to(ProofState.ROUND_FINALIZED)

        obtained = await self.obtain_proof(request_id.round, request_id.data)
        flow.transition_to(ProofState.FETCHED)

        response = obtained.result
        if response is None or response.merkle_proof is None:
            return flow.fail(
                FailureReason.NOT_PROVED,
                f"no proved response in round {request_id.round} (finalized={obtained.finalized})",
            )

        expected = Bytes32.left_padded(request.message_integrity_code)
        if expected != ZERO_BYTES32:
            actual = codec.message_integrity_code(request, response, registry=self.registry)
            if actual != expected:
                return flow.fail(
                    FailureReason.INTEGRITY_MISMATCH,
                    f"expected code {to_hex(expected)}, response gives "
                    f"{to_hex(actual) if actual is not None else 'none'}",
                )

        logger.info(f"{flow.operation}: proof obtained in round {request_id.round}")
        return flow.prove(response)

    @staticmethod
    def _proved(operation: str, outcome: ProofOutcome) -> Any:
        """Return the response of a proved outcome or raise."""
        if not outcome.is_proved or outcome.response is None:
            raise ProofFailedError(operation, outcome)
        return outcome.response

    # Locating subjects on the ledger.

    async def _not_found(self, detail: str) -> SubjectNotFoundError:
        """Build a lookup error carrying the current ledger height."""
        return SubjectNotFoundError(detail, block_height=await self.ledger.get_block_height())

    async def _locate_transaction(
        self, transaction_hash: bytes | str
    ) -> tuple[LedgerTransaction, int]:
        """
        Find a transaction, its block number and check that it is final.

        Raises:
            SubjectNotFoundError: If the transaction, its block or its
                finalization block is missing.
        """
        tx_hash = Bytes32.left_padded(transaction_hash)
        transaction = await self.ledger.get_transaction(tx_hash)
        block = await self.ledger.get_transaction_block(tx_hash)
        if transaction is None or block is None:
            raise await self._not_found(f"transaction {to_hex(tx_hash)} not found")

        finalization_number = block.number + self.finalization_blocks
        if await self.ledger.get_block_at(finalization_number) is None:
            raise await self._not_found(f"finalization block {finalization_number} not mined yet")
        return transaction, block.number

    async def _payment_request(
        self,
        transaction_hash: bytes | str,
        source_address: str | None,
        receiving_address: str | None,
        mic: bytes | None,
    ) -> PaymentRequest:
        transaction, block_number = await self._locate_transaction(transaction_hash)

        in_utxo = _find_address_index(transaction.inputs, source_address)
        if in_utxo is None:
            raise await self._not_found(f"source address {source_address} not in transaction")
        utxo = _find_address_index(transaction.outputs, receiving_address)
        if utxo is None:
            raise await self._not_found(
                f"receiving address {receiving_address} not in transaction"
            )

        return PaymentRequest(
            source_id=self.source_id,
            message_integrity_code=mic or ZERO_BYTES32,
            id=transaction.hash,
            block_number=block_number,
            in_utxo=in_utxo,
            utxo=utxo,
        )

    async def _balance_decreasing_request(
        self,
        transaction_hash: bytes | str,
        source_address: str,
        mic: bytes | None,
    ) -> BalanceDecreasingTransactionRequest:
        transaction, block_number = await self._locate_transaction(transaction_hash)
        if _find_address_index(transaction.inputs, source_address) is None:
            raise await self._not_found(f"source address {source_address} not in transaction")

        return BalanceDecreasingTransactionRequest(
            source_id=self.source_id,
            message_integrity_code=mic or ZERO_BYTES32,
            id=transaction.hash,
            block_number=block_number,
            source_address_indicator=standard_address_hash(source_address),
        )

    async def _block_height_request(
        self, query_window: int, mic: bytes | None
    ) -> ConfirmedBlockHeightExistsRequest:
        height = await self.ledger.get_block_height()
        block_number = height - self.finalization_blocks
        if block_number < 0 or await self.ledger.get_block_at(block_number) is None:
            raise SubjectNotFoundError(
                f"no finalized block at height {height}", block_height=height
            )

        return ConfirmedBlockHeightExistsRequest(
            source_id=self.source_id,
            message_integrity_code=mic or ZERO_BYTES32,
            block_number=block_number,
            query_window=query_window,
        )

    async def _nonexistence_request(
        self,
        destination_address: str,
        payment_reference: bytes | str,
        amount: NumberLike,
        start_block: int,
        end_block: int,
        end_timestamp: int,
        mic: bytes | None,
    ) -> ReferencedPaymentNonexistenceRequest:
        # The overflow block is the first block past the deadline in both
        # number and timestamp. Blocks at exactly the deadline timestamp are
        # still inside the window.
        overflow = await self.ledger.get_block_at(end_block + 1)
        while overflow is not None and overflow.timestamp <= end_timestamp:
            overflow = await self.ledger.get_block_at(overflow.number + 1)

        height = await self.ledger.get_block_height()
        if overflow is None:
            raise OverflowBlockNotFoundError(
                f"no block after deadline (block {end_block}, timestamp {end_timestamp})",
                block_height=height,
            )

        finalization_number = overflow.number + self.finalization_blocks
        if await self.ledger.get_block_at(finalization_number) is None:
            raise OverflowBlockNotFoundError(
                f"overflow block {overflow.number} not final yet", block_height=height
            )

        return ReferencedPaymentNonexistenceRequest(
            source_id=self.source_id,
            message_integrity_code=mic or ZERO_BYTES32,
            minimal_block_number=start_block,
            deadline_block_number=end_block,
            deadline_timestamp=end_timestamp,
            destination_address_hash=standard_address_hash(destination_address),
            amount=amount,
            payment_reference=coerce_to_bytes(payment_reference),
        )
