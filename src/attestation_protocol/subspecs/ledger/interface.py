"""
Abstract interface of a source ledger.

The attestation client only reads from the ledger it proves facts about.
Any implementation with these methods will do: a node RPC adapter, an
indexer client, or the in-memory ledger used in tests.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .types import BlockId, LedgerBlock, LedgerTransaction


@runtime_checkable
class SourceLedger(Protocol):
    """Read access to a source ledger."""

    @property
    def finalization_blocks(self) -> int:
        """Number of blocks on top of a block before it is considered final."""
        ...

    async def get_transaction(self, transaction_hash: bytes) -> LedgerTransaction | None:
        """Return the transaction, or None if it does not exist."""
        ...

    async def get_transaction_block(self, transaction_hash: bytes) -> BlockId | None:
        """Return the block of the transaction, or None if it has not been mined."""
        ...

    async def get_balance(self, address: str) -> int:
        """Return the balance of `address`, 0 if the address is unknown."""
        ...

    async def get_block(self, block_hash: bytes) -> LedgerBlock | None:
        """Return the block with the given hash, or None."""
        ...

    async def get_block_at(self, block_number: int) -> LedgerBlock | None:
        """Return the block with the given number, or None if it does not exist yet."""
        ...

    async def get_block_height(self) -> int:
        """Return the number of the last mined block."""
        ...
