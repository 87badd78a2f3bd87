"""
In-memory source ledger.

A linear chain without forks or reorganizations. Blocks are appended one at
a time and every transaction is final once enough blocks are mined on top of
it. Supports multi-input/multi-output transactions, payment references and
failed transactions, which is all the attestation flows need.
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from typing import Callable, Mapping, Sequence

from attestation_protocol.subspecs.ledger import (
    BlockId,
    LedgerBlock,
    LedgerTransaction,
    TxStatus,
)
from attestation_protocol.types import Bytes32, keccak256

DEFAULT_FINALIZATION_BLOCKS = 6
"""Default confirmation depth of the in-memory ledger."""


@dataclass(slots=True)
class TransactionSpec:
    """A transaction waiting to be mined: amounts spent and received per address."""

    spent: dict[str, int]
    received: dict[str, int]
    reference: bytes | None = None
    status: TxStatus = TxStatus.SUCCESS

    def __post_init__(self) -> None:
        if not self.spent:
            raise ValueError("transaction must spend from at least one address")
        if any(value < 0 for value in (*self.spent.values(), *self.received.values())):
            raise ValueError("transaction amounts must be non-negative")
        if sum(self.spent.values()) < sum(self.received.values()):
            raise ValueError("transaction receives more than it spends")

    @classmethod
    def simple(
        cls,
        source: str,
        target: str,
        value: int,
        fee: int,
        reference: bytes | None = None,
        status: TxStatus = TxStatus.SUCCESS,
    ) -> TransactionSpec:
        """
        A payment from one address to another.

        A failed payment only charges the fee and moves no value.
        """
        if status == TxStatus.SUCCESS:
            return cls({source: value + fee}, {target: value}, reference, status)
        return cls({source: fee}, {target: 0}, reference, status)


def _default_clock() -> int:
    return int(time.time())


@dataclass(slots=True)
class InMemoryLedger:
    """A source ledger kept in memory, implementing `SourceLedger`."""

    finalization_blocks: int = DEFAULT_FINALIZATION_BLOCKS
    """Confirmation depth reported to clients."""

    clock: Callable[[], int] = _default_clock
    """Source of wall-clock seconds for new block timestamps."""

    blocks: list[LedgerBlock] = field(default_factory=list)
    transactions: dict[Bytes32, LedgerTransaction] = field(default_factory=dict)
    transaction_index: dict[Bytes32, int] = field(default_factory=dict)
    """Block number of every mined transaction."""

    balances: dict[str, int] = field(default_factory=dict)
    nonces: dict[str, int] = field(default_factory=dict)
    timestamp_skew: int = 0
    """How far block timestamps run ahead of the clock, see `skip_time`."""

    def block_height(self) -> int:
        """Number of the last block, -1 for an empty chain."""
        return len(self.blocks) - 1

    def skip_time(self, seconds: int) -> None:
        """Move the timestamps of future blocks forward."""
        self.timestamp_skew += seconds

    def add_block(
        self, transactions: Sequence[TransactionSpec] = (), timestamp: int | None = None
    ) -> LedgerBlock:
        """
        Mine a block with the given transactions.

        Args:
            transactions: Transactions to include, applied in order.
            timestamp: Explicit block timestamp. Must not go back in time.
                By default it is the clock plus skew, and always after the
                previous block.

        Raises:
            ValueError: If a transaction overdraws an address or the
                timestamp is before the previous block.
        """
        changed: dict[str, int] = {}
        for i, spec in enumerate(transactions):
            for address, value in spec.spent.items():
                changed[address] = changed.get(address, self.balances.get(address, 0)) - value
            for address, value in spec.received.items():
                changed[address] = changed.get(address, self.balances.get(address, 0)) + value
            for address, balance in changed.items():
                if balance < 0:
                    raise ValueError(f"transaction {i} makes balance of {address} negative")

        number = len(self.blocks)
        block_timestamp = self._next_timestamp(timestamp)

        mined: list[LedgerTransaction] = []
        for spec in transactions:
            transaction = LedgerTransaction(
                hash=self._transaction_hash(spec),
                inputs=tuple(spec.spent.items()),
                outputs=tuple(spec.received.items()),
                reference=Bytes32.left_padded(spec.reference) if spec.reference else None,
                status=spec.status,
            )
            for address in spec.spent:
                self.nonces[address] = self.nonces.get(address, 0) + 1
            self.transactions[transaction.hash] = transaction
            self.transaction_index[transaction.hash] = number
            mined.append(transaction)

        self.balances.update(changed)
        block = LedgerBlock(
            hash=self._block_hash(number, block_timestamp, mined),
            number=number,
            timestamp=block_timestamp,
            transactions=tuple(tx.hash for tx in mined),
        )
        self.blocks.append(block)
        return block

    def add_transaction(
        self,
        spent: Mapping[str, int],
        received: Mapping[str, int],
        reference: bytes | None = None,
        status: TxStatus = TxStatus.SUCCESS,
    ) -> LedgerTransaction:
        """Mine a block holding a single transaction and return the transaction."""
        block = self.add_block([TransactionSpec(dict(spent), dict(received), reference, status)])
        return self.transactions[block.transactions[0]]

    def add_simple_transaction(
        self,
        source: str,
        target: str,
        value: int,
        fee: int,
        reference: bytes | None = None,
        status: TxStatus = TxStatus.SUCCESS,
    ) -> LedgerTransaction:
        """Mine a block holding a single payment and return the transaction."""
        spec = TransactionSpec.simple(source, target, value, fee, reference, status)
        block = self.add_block([spec])
        return self.transactions[block.transactions[0]]

    def mine(self, count: int = 1) -> None:
        """Mine `count` empty blocks."""
        for _ in range(count):
            self.add_block()

    def mint(self, address: str, value: int) -> None:
        """Credit `address` out of thin air, for funding test accounts."""
        self.balances[address] = self.balances.get(address, 0) + value

    # SourceLedger interface.

    async def get_transaction(self, transaction_hash: bytes) -> LedgerTransaction | None:
        return self.transactions.get(Bytes32.left_padded(transaction_hash))

    async def get_transaction_block(self, transaction_hash: bytes) -> BlockId | None:
        number = self.transaction_index.get(Bytes32.left_padded(transaction_hash))
        if number is None:
            return None
        return BlockId(hash=self.blocks[number].hash, number=number)

    async def get_balance(self, address: str) -> int:
        return self.balances.get(address, 0)

    async def get_block(self, block_hash: bytes) -> LedgerBlock | None:
        wanted = Bytes32.left_padded(block_hash)
        return next((block for block in self.blocks if block.hash == wanted), None)

    async def get_block_at(self, block_number: int) -> LedgerBlock | None:
        if 0 <= block_number < len(self.blocks):
            return self.blocks[block_number]
        return None

    async def get_block_height(self) -> int:
        return self.block_height()

    def _next_timestamp(self, timestamp: int | None) -> int:
        last = self.blocks[-1].timestamp if self.blocks else None
        if timestamp is not None:
            if last is not None and timestamp < last:
                raise ValueError(
                    f"block timestamp {timestamp} is before the previous block ({last})"
                )
            return timestamp
        candidate = self.clock() + self.timestamp_skew
        return candidate if last is None else max(candidate, last + 1)

    def _transaction_hash(self, spec: TransactionSpec) -> Bytes32:
        # Nonces make repeated identical payments hash differently.
        data = {
            "spent": [[a, self.nonces.get(a, 0), str(v)] for a, v in spec.spent.items()],
            "received": [[a, str(v)] for a, v in spec.received.items()],
            "reference": spec.reference.hex() if spec.reference else None,
        }
        return keccak256(json.dumps(data).encode("utf-8"))

    @staticmethod
    def _block_hash(number: int, timestamp: int, transactions: list[LedgerTransaction]) -> Bytes32:
        data = {
            "number": number,
            "timestamp": timestamp,
            "transactions": [tx.hash.hex() for tx in transactions],
        }
        return keccak256(json.dumps(data).encode("utf-8"))
