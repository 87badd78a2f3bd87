"""
Shared pytest fixtures for attestation protocol tests.

Provides an in-memory ledger, the network proving against it and a client
wired to both.
"""

from __future__ import annotations

import pytest

from attestation_protocol.subspecs.client import AttestationClient
from attestation_protocol.subspecs.simulation import (
    FinalizationMode,
    InMemoryLedger,
    InMemoryOracleNetwork,
)
from tests.attestation_protocol.helpers import ALICE, TEST_SOURCE, make_ledger


@pytest.fixture
def ledger() -> InMemoryLedger:
    """Ledger with two finalization blocks and a funded ALICE."""
    ledger = make_ledger(finalization_blocks=2)
    ledger.mint(ALICE, 10_000)
    return ledger


@pytest.fixture
def network(ledger: InMemoryLedger) -> InMemoryOracleNetwork:
    """Auto-finalizing network proving against `ledger`."""
    return InMemoryOracleNetwork(
        ledgers={TEST_SOURCE: ledger}, finalization_mode=FinalizationMode.AUTO
    )


@pytest.fixture
def client(network: InMemoryOracleNetwork, ledger: InMemoryLedger) -> AttestationClient:
    """Client for `ledger` talking to `network`."""
    return AttestationClient(oracle=network, ledger=ledger, source_id=TEST_SOURCE)
