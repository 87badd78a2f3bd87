"""Records read from a source ledger."""

from __future__ import annotations

from enum import IntEnum

from attestation_protocol.types import Bytes32, FrozenModel

TxInputOutput = tuple[str, int]
"""An (address, amount) pair of a transaction input or output."""


class TxStatus(IntEnum):
    """Outcome of a transaction, as recorded on the ledger."""

    SUCCESS = 0
    """The transaction succeeded."""

    FAILED = 1
    """The transaction failed through the sender's fault and only fees were charged."""

    BLOCKED = 2
    """The transaction failed through the receiver's fault, e.g. a blocking contract."""


class LedgerTransaction(FrozenModel):
    """
    A transaction on the source ledger.

    UTXO chains may list several inputs and outputs, and the same address may
    appear more than once. Account-based chains have one of each. The fee is
    the sum of input amounts minus the sum of output amounts.
    """

    hash: Bytes32
    inputs: tuple[TxInputOutput, ...]
    outputs: tuple[TxInputOutput, ...]
    reference: Bytes32 | None = None
    """Payment reference, or None if the transaction carries none."""

    status: TxStatus = TxStatus.SUCCESS


class BlockId(FrozenModel):
    """Hash and number of a block."""

    hash: Bytes32
    number: int


class LedgerBlock(FrozenModel):
    """A block on the source ledger."""

    hash: Bytes32
    number: int
    timestamp: int
    """Unix timestamp in seconds."""

    transactions: tuple[Bytes32, ...] = ()
    """Hashes of the transactions in this block."""
