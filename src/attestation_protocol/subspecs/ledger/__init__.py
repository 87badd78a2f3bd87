"""Source ledger interface and the records it returns."""

from .interface import SourceLedger
from .types import BlockId, LedgerBlock, LedgerTransaction, TxInputOutput, TxStatus

__all__ = [
    "SourceLedger",
    "BlockId",
    "LedgerBlock",
    "LedgerTransaction",
    "TxInputOutput",
    "TxStatus",
]
