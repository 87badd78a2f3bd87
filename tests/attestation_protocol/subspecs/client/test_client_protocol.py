"""
Tests for the client's protocol handling against a scripted network.

The ledger is real, the attestation network is a mock, so each terminal
state can be forced directly.
"""

from __future__ import annotations

import pytest

from attestation_protocol.subspecs.client import (
    AttestationClient,
    FailureReason,
    ProofState,
)
from attestation_protocol.subspecs.codec import decode_request, message_integrity_code
from attestation_protocol.subspecs.ledger import LedgerTransaction
from attestation_protocol.subspecs.requests import AttestationRequestId
from attestation_protocol.subspecs.simulation import InMemoryLedger
from attestation_protocol.types import (
    ProofFailedError,
    RoundFinalizationTimeoutError,
)
from tests.attestation_protocol.helpers import (
    ALICE,
    BOB,
    CAROL,
    TEST_SOURCE,
    MockOracleNetwork,
    make_bytes32,
    make_payment_response,
    run_async,
)


@pytest.fixture
def payment(ledger: InMemoryLedger) -> LedgerTransaction:
    """A final payment from ALICE to BOB."""
    transaction = ledger.add_simple_transaction(ALICE, BOB, 100, 1)
    ledger.mine(2)
    return transaction


def _client(
    oracle: MockOracleNetwork, ledger: InMemoryLedger, **kwargs: object
) -> AttestationClient:
    return AttestationClient(oracle=oracle, ledger=ledger, source_id=TEST_SOURCE, **kwargs)


class TestClientConfiguration:
    """Tests for client construction."""

    def test_finalization_blocks_from_ledger(self, ledger: InMemoryLedger) -> None:
        """The confirmation depth defaults to the ledger's."""
        assert _client(MockOracleNetwork(), ledger).finalization_blocks == 2

    def test_explicit_finalization_blocks(self, ledger: InMemoryLedger) -> None:
        """An explicit depth overrides the ledger's."""
        assert _client(MockOracleNetwork(), ledger, finalization_blocks=5).finalization_blocks == 5

    def test_negative_finalization_blocks(self, ledger: InMemoryLedger) -> None:
        """Negative depths are rejected."""
        with pytest.raises(ValueError, match="non-negative"):
            _client(MockOracleNetwork(), ledger, finalization_blocks=-1)


class TestProofOutcomes:
    """Tests for the terminal states of a flow."""

    def test_proved(self, ledger: InMemoryLedger, payment: LedgerTransaction) -> None:
        """A response with a Merkle proof ends the flow in PROVED."""
        response = make_payment_response().with_proof(0, [])
        oracle = MockOracleNetwork(response=response)
        outcome = run_async(_client(oracle, ledger).try_prove_payment(payment.hash, ALICE, BOB))

        assert outcome.state is ProofState.PROVED
        assert outcome.is_proved
        assert outcome.reason is None
        assert outcome.response == response
        assert outcome.request_id is not None
        assert oracle.waited == [0]
        assert oracle.fetched == [(0, outcome.request_id.data)]

    def test_submitted_request_describes_transaction(
        self, ledger: InMemoryLedger, payment: LedgerTransaction
    ) -> None:
        """The submitted request carries the located transaction."""
        oracle = MockOracleNetwork(reject=True)
        run_async(_client(oracle, ledger).try_prove_payment(payment.hash, ALICE, BOB))

        request = decode_request(oracle.submitted[0])
        assert request.id == payment.hash
        assert request.block_number == 0
        assert request.in_utxo == 0
        assert request.utxo == 0
        assert request.source_id == TEST_SOURCE

    def test_request_only_returns_request_id(
        self, ledger: InMemoryLedger, payment: LedgerTransaction
    ) -> None:
        """Submitting without waiting returns the network's request id."""
        oracle = MockOracleNetwork(round=4)
        request_id = run_async(_client(oracle, ledger).request_payment_proof(payment.hash))

        assert isinstance(request_id, AttestationRequestId)
        assert request_id.round == 4
        assert request_id.data == oracle.submitted[0]
        assert oracle.waited == []

    def test_rejected_submission(self, ledger: InMemoryLedger, payment: LedgerTransaction) -> None:
        """A rejected request fails as NOT_PROVED without waiting."""
        oracle = MockOracleNetwork(reject=True)
        outcome = run_async(_client(oracle, ledger).try_prove_payment(payment.hash))

        assert outcome.state is ProofState.FAILED
        assert outcome.reason is FailureReason.NOT_PROVED
        assert outcome.request_id is None
        assert oracle.waited == []

    def test_no_response(self, ledger: InMemoryLedger, payment: LedgerTransaction) -> None:
        """A finalized round without a response fails as NOT_PROVED."""
        oracle = MockOracleNetwork(response=None)
        outcome = run_async(_client(oracle, ledger).try_prove_payment(payment.hash))

        assert outcome.reason is FailureReason.NOT_PROVED
        assert outcome.request_id is not None

    def test_response_without_proof(
        self, ledger: InMemoryLedger, payment: LedgerTransaction
    ) -> None:
        """A response lacking a Merkle proof is not a proof."""
        oracle = MockOracleNetwork(response=make_payment_response())
        outcome = run_async(_client(oracle, ledger).try_prove_payment(payment.hash))

        assert outcome.reason is FailureReason.NOT_PROVED
        assert outcome.response is None

    def test_subject_not_found_skips_network(self, ledger: InMemoryLedger) -> None:
        """An unknown transaction fails before anything is submitted."""
        ledger.mine(3)
        oracle = MockOracleNetwork()
        outcome = run_async(_client(oracle, ledger).try_prove_payment(make_bytes32(0x99)))

        assert outcome.reason is FailureReason.SUBJECT_NOT_FOUND
        assert outcome.block_height == 2
        assert oracle.submitted == []

    def test_unknown_address(self, ledger: InMemoryLedger, payment: LedgerTransaction) -> None:
        """An address that is not part of the transaction is not found."""
        outcome = run_async(
            _client(MockOracleNetwork(), ledger).try_prove_payment(payment.hash, ALICE, CAROL)
        )
        assert outcome.reason is FailureReason.SUBJECT_NOT_FOUND
        assert outcome.detail is not None and CAROL in outcome.detail


class TestIntegrityCheck:
    """Tests for checking responses against the requester's integrity code."""

    def test_matching_code(self, ledger: InMemoryLedger, payment: LedgerTransaction) -> None:
        """A response matching the anticipated one is proved."""
        response = make_payment_response().with_proof(3, [])
        oracle = MockOracleNetwork(reject=True)
        client = _client(oracle, ledger)
        run_async(client.try_prove_payment(payment.hash))
        mic = message_integrity_code(decode_request(oracle.submitted[0]), response)
        assert mic is not None

        oracle.reject = False
        oracle.response = response
        outcome = run_async(client.try_prove_payment(payment.hash, message_integrity_code=mic))
        assert outcome.is_proved

    def test_mismatching_code(self, ledger: InMemoryLedger, payment: LedgerTransaction) -> None:
        """A response differing from the anticipated one fails the flow."""
        oracle = MockOracleNetwork(response=make_payment_response().with_proof(3, []))
        outcome = run_async(
            _client(oracle, ledger).try_prove_payment(
                payment.hash, message_integrity_code=make_bytes32(0x01)
            )
        )
        assert outcome.state is ProofState.FAILED
        assert outcome.reason is FailureReason.INTEGRITY_MISMATCH


class TestFinalizationWait:
    """Tests for waiting on round finalization."""

    def test_timeout(self, ledger: InMemoryLedger, payment: LedgerTransaction) -> None:
        """A round that never finalizes raises after the timeout."""
        oracle = MockOracleNetwork(never_finalize=True, round=4)
        client = _client(oracle, ledger, finalization_timeout=0.05)
        with pytest.raises(RoundFinalizationTimeoutError) as exc_info:
            run_async(client.try_prove_payment(payment.hash))
        assert exc_info.value.round == 4
        assert oracle.fetched == []

    def test_round_finalized_delegates(self, ledger: InMemoryLedger) -> None:
        """round_finalized asks the network."""
        oracle = MockOracleNetwork()
        client = _client(oracle, ledger)
        assert run_async(client.round_finalized(0)) is False
        oracle.finalized = True
        assert run_async(client.round_finalized(0)) is True


class TestStrictFlows:
    """Tests for the raising prove_* variants."""

    def test_returns_response(self, ledger: InMemoryLedger, payment: LedgerTransaction) -> None:
        """A proved flow returns the response."""
        response = make_payment_response().with_proof(0, [])
        client = _client(MockOracleNetwork(response=response), ledger)
        assert run_async(client.prove_payment(payment.hash)) == response

    def test_raises_with_outcome(self, ledger: InMemoryLedger, payment: LedgerTransaction) -> None:
        """A failed flow raises ProofFailedError carrying the outcome."""
        client = _client(MockOracleNetwork(reject=True), ledger)
        with pytest.raises(ProofFailedError) as exc_info:
            run_async(client.prove_payment(payment.hash))
        assert exc_info.value.operation == "prove_payment"
        assert exc_info.value.outcome.reason is FailureReason.NOT_PROVED

    def test_block_height_raises_when_chain_too_short(self, ledger: InMemoryLedger) -> None:
        """Without a finalized block the strict flow raises."""
        ledger.mine(2)
        client = _client(MockOracleNetwork(), ledger)
        with pytest.raises(ProofFailedError) as exc_info:
            run_async(client.prove_confirmed_block_height_exists())
        assert exc_info.value.outcome.reason is FailureReason.SUBJECT_NOT_FOUND
