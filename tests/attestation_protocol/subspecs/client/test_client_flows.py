"""
End-to-end proof flows against the in-memory ledger and network.

Each flow locates its subject on the ledger, submits a request, waits for
the round and checks the proved response against the round's Merkle root.
"""

from __future__ import annotations

import pytest

from attestation_protocol.subspecs.client import AttestationClient, FailureReason, ProofOutcome
from attestation_protocol.subspecs.codec import decode_request, message_integrity_code
from attestation_protocol.subspecs.ledger import TxStatus
from attestation_protocol.subspecs.merkle import verify_attestation
from attestation_protocol.subspecs.requests import (
    BalanceDecreasingTransactionResponse,
    ConfirmedBlockHeightExistsResponse,
    PaymentResponse,
    ReferencedPaymentNonexistenceResponse,
)
from attestation_protocol.subspecs.simulation import (
    InMemoryLedger,
    InMemoryOracleNetwork,
    TransactionSpec,
)
from attestation_protocol.types import standard_address_hash
from tests.attestation_protocol.helpers import (
    ALICE,
    BOB,
    CAROL,
    TEST_SOURCE,
    make_bytes32,
    make_ledger,
    run_async,
)

REFERENCE = make_bytes32(0x42)


def _verifies(network: InMemoryOracleNetwork, outcome: ProofOutcome) -> bool:
    """Check a proved outcome against the published root of its round."""
    assert outcome.response is not None and outcome.request_id is not None
    request = decode_request(outcome.request_id.data)
    root = network.merkle_root(outcome.request_id.round)
    return verify_attestation(request, outcome.response, root)


def _setup(
    ledger: InMemoryLedger, **network_kwargs: object
) -> tuple[InMemoryOracleNetwork, AttestationClient]:
    network = InMemoryOracleNetwork(ledgers={TEST_SOURCE: ledger}, **network_kwargs)
    return network, AttestationClient(oracle=network, ledger=ledger, source_id=TEST_SOURCE)


class TestPaymentFlow:
    """Tests for proving payments."""

    def test_proved_payment_verifies(
        self,
        ledger: InMemoryLedger,
        network: InMemoryOracleNetwork,
        client: AttestationClient,
    ) -> None:
        """A final payment is proved and verifies against the round root."""
        tx = ledger.add_simple_transaction(ALICE, BOB, 100, 1, reference=REFERENCE)
        ledger.mine(2)

        outcome = run_async(client.try_prove_payment(tx.hash, ALICE, BOB))

        assert outcome.is_proved
        response = outcome.response
        assert isinstance(response, PaymentResponse)
        assert response.transaction_hash == tx.hash
        assert response.block_number == 0
        assert response.spent_amount == 101
        assert response.received_amount == 100
        assert response.source_address_hash == standard_address_hash(ALICE)
        assert response.receiving_address_hash == standard_address_hash(BOB)
        assert response.payment_reference == REFERENCE
        assert response.one_to_one is True
        assert response.status == TxStatus.SUCCESS
        assert _verifies(network, outcome)

    def test_not_final_yet(self, ledger: InMemoryLedger, client: AttestationClient) -> None:
        """A payment without enough confirmations is not found yet."""
        tx = ledger.add_simple_transaction(ALICE, BOB, 100, 1)
        ledger.mine(1)

        outcome = run_async(client.try_prove_payment(tx.hash))

        assert outcome.reason is FailureReason.SUBJECT_NOT_FOUND
        assert outcome.block_height == 1

    def test_failed_transaction_is_provable(
        self, ledger: InMemoryLedger, client: AttestationClient
    ) -> None:
        """A failed payment is proved with its failure status and fee only."""
        tx = ledger.add_simple_transaction(ALICE, BOB, 100, 1, status=TxStatus.FAILED)
        ledger.mine(2)

        response = run_async(client.prove_payment(tx.hash, ALICE, BOB))

        assert response.status == TxStatus.FAILED
        assert response.spent_amount == 1
        assert response.received_amount == 0

    def test_multi_party_payment(self, ledger: InMemoryLedger, client: AttestationClient) -> None:
        """Payments with several receivers are not one-to-one."""
        tx = ledger.add_transaction({ALICE: 300}, {BOB: 100, CAROL: 199})
        ledger.mine(2)

        response = run_async(client.prove_payment(tx.hash, ALICE, CAROL))

        assert response.utxo == 1
        assert response.received_amount == 199
        assert response.one_to_one is False

    def test_matching_integrity_code(
        self, ledger: InMemoryLedger, client: AttestationClient
    ) -> None:
        """A request carrying the code of the expected response is proved."""
        tx = ledger.add_simple_transaction(ALICE, BOB, 100, 1)
        ledger.mine(2)
        first = run_async(client.try_prove_payment(tx.hash, ALICE, BOB))
        assert first.response is not None and first.request_id is not None
        mic = message_integrity_code(decode_request(first.request_id.data), first.response)

        second = run_async(
            client.try_prove_payment(tx.hash, ALICE, BOB, message_integrity_code=mic)
        )

        assert second.is_proved
        assert second.request_id is not None
        assert second.request_id.round == first.request_id.round + 1

    def test_wrong_integrity_code_rejected_by_network(
        self, ledger: InMemoryLedger, client: AttestationClient
    ) -> None:
        """The network does not prove requests with a wrong code."""
        tx = ledger.add_simple_transaction(ALICE, BOB, 100, 1)
        ledger.mine(2)

        outcome = run_async(
            client.try_prove_payment(tx.hash, message_integrity_code=make_bytes32(1))
        )

        assert outcome.reason is FailureReason.NOT_PROVED

    def test_wrong_integrity_code_caught_by_client(self, ledger: InMemoryLedger) -> None:
        """Without the network's check, the client catches the mismatch itself."""
        _, client = _setup(ledger, check_integrity=False)
        tx = ledger.add_simple_transaction(ALICE, BOB, 100, 1)
        ledger.mine(2)

        outcome = run_async(
            client.try_prove_payment(tx.hash, message_integrity_code=make_bytes32(1))
        )

        assert outcome.reason is FailureReason.INTEGRITY_MISMATCH


class TestBalanceDecreasingTransactionFlow:
    """Tests for proving balance decreasing transactions."""

    def test_proved(
        self,
        ledger: InMemoryLedger,
        network: InMemoryOracleNetwork,
        client: AttestationClient,
    ) -> None:
        """A spend from ALICE is proved."""
        tx = ledger.add_simple_transaction(ALICE, BOB, 100, 1)
        ledger.mine(2)

        outcome = run_async(client.try_prove_balance_decreasing_transaction(tx.hash, ALICE))

        assert outcome.is_proved
        response = outcome.response
        assert isinstance(response, BalanceDecreasingTransactionResponse)
        assert response.spent_amount == 101
        assert response.source_address_hash == standard_address_hash(ALICE)
        assert response.source_address_indicator == standard_address_hash(ALICE)
        assert _verifies(network, outcome)

    def test_receiver_is_not_a_source(
        self, ledger: InMemoryLedger, client: AttestationClient
    ) -> None:
        """An address that only receives cannot be proved as a source."""
        tx = ledger.add_simple_transaction(ALICE, BOB, 100, 1)
        ledger.mine(2)

        outcome = run_async(client.try_prove_balance_decreasing_transaction(tx.hash, BOB))

        assert outcome.reason is FailureReason.SUBJECT_NOT_FOUND


class TestConfirmedBlockHeightExistsFlow:
    """Tests for proving confirmed block heights."""

    def test_proves_latest_finalized_block(
        self,
        ledger: InMemoryLedger,
        network: InMemoryOracleNetwork,
        client: AttestationClient,
    ) -> None:
        """The proved block lies finalization_blocks below the tip."""
        ledger.mine(5)

        outcome = run_async(client.try_prove_confirmed_block_height_exists())

        assert outcome.is_proved
        response = outcome.response
        assert isinstance(response, ConfirmedBlockHeightExistsResponse)
        assert response.block_number == 2
        assert response.number_of_confirmations == 2
        # Every block is inside the default window.
        assert response.lowest_query_window_block_number == 0
        assert response.lowest_query_window_block_timestamp == 0
        assert _verifies(network, outcome)

    def test_query_window(self) -> None:
        """The lowest window block is the last one strictly before the window."""
        ledger = make_ledger(finalization_blocks=2)
        for timestamp in (100, 200, 300, 400, 500):
            ledger.add_block(timestamp=timestamp)
        _, client = _setup(ledger)

        response = run_async(client.prove_confirmed_block_height_exists(query_window=150))

        assert response.block_number == 2
        assert response.block_timestamp == 300
        assert response.lowest_query_window_block_number == 0
        assert response.lowest_query_window_block_timestamp == 100

    def test_chain_too_short(self, ledger: InMemoryLedger, client: AttestationClient) -> None:
        """A chain shorter than the confirmation depth has nothing to prove."""
        ledger.mine(2)

        outcome = run_async(client.try_prove_confirmed_block_height_exists())

        assert outcome.reason is FailureReason.SUBJECT_NOT_FOUND
        assert outcome.block_height == 1


class TestReferencedPaymentNonexistenceFlow:
    """Tests for proving that a referenced payment did not happen."""

    @pytest.fixture
    def timed_ledger(self) -> InMemoryLedger:
        """Blocks 0..5 ten seconds apart, starting at timestamp 100."""
        ledger = make_ledger(finalization_blocks=2)
        ledger.mint(ALICE, 10_000)
        for timestamp in (100, 110, 120, 130, 140, 150):
            ledger.add_block(timestamp=timestamp)
        return ledger

    def test_overflow_after_deadline_timestamp(self, timed_ledger: InMemoryLedger) -> None:
        """A block at exactly the deadline timestamp is still inside the window."""
        network, client = _setup(timed_ledger)

        outcome = run_async(
            client.try_prove_referenced_payment_nonexistence(BOB, REFERENCE, 100, 0, 1, 120)
        )

        assert outcome.is_proved
        response = outcome.response
        assert isinstance(response, ReferencedPaymentNonexistenceResponse)
        assert response.first_overflow_block_number == 3
        assert response.first_overflow_block_timestamp == 130
        assert response.lower_boundary_block_number == 0
        assert response.lower_boundary_block_timestamp == 100
        assert response.destination_address_hash == standard_address_hash(BOB)
        assert _verifies(network, outcome)

    def test_overflow_one_second_before(self, timed_ledger: InMemoryLedger) -> None:
        """With the deadline one second earlier the overflow block moves down."""
        _, client = _setup(timed_ledger)

        response = run_async(
            client.prove_referenced_payment_nonexistence(BOB, REFERENCE, 100, 0, 1, 119)
        )

        assert response.first_overflow_block_number == 2
        assert response.first_overflow_block_timestamp == 120

    def test_no_block_past_deadline(self, timed_ledger: InMemoryLedger) -> None:
        """A deadline at the tip has no overflow block."""
        _, client = _setup(timed_ledger)

        outcome = run_async(
            client.try_prove_referenced_payment_nonexistence(BOB, REFERENCE, 100, 0, 5, 150)
        )

        assert outcome.reason is FailureReason.OVERFLOW_BLOCK_NOT_FOUND
        assert outcome.block_height == 5

    def test_overflow_block_not_final(self, timed_ledger: InMemoryLedger) -> None:
        """An overflow block without enough confirmations is not usable."""
        _, client = _setup(timed_ledger)

        outcome = run_async(
            client.try_prove_referenced_payment_nonexistence(BOB, REFERENCE, 100, 0, 1, 140)
        )

        assert outcome.reason is FailureReason.OVERFLOW_BLOCK_NOT_FOUND

    def test_existing_payment_is_not_proved(self) -> None:
        """A matching payment inside the window prevents the proof."""
        ledger = make_ledger(finalization_blocks=2)
        ledger.mint(ALICE, 10_000)
        ledger.add_block(timestamp=100)
        ledger.add_block([TransactionSpec.simple(ALICE, BOB, 100, 1, REFERENCE)], timestamp=110)
        for timestamp in (120, 130, 140, 150):
            ledger.add_block(timestamp=timestamp)
        _, client = _setup(ledger)

        found = run_async(
            client.try_prove_referenced_payment_nonexistence(BOB, REFERENCE, 100, 0, 1, 120)
        )
        too_small = run_async(
            client.try_prove_referenced_payment_nonexistence(BOB, REFERENCE, 101, 0, 1, 120)
        )
        other_reference = run_async(
            client.try_prove_referenced_payment_nonexistence(
                BOB, make_bytes32(0x43), 100, 0, 1, 120
            )
        )

        assert found.reason is FailureReason.NOT_PROVED
        assert too_small.is_proved
        assert other_reference.is_proved
