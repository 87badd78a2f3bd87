"""In-memory source ledger, prover and attestation network."""

from .chain import DEFAULT_FINALIZATION_BLOCKS, InMemoryLedger, TransactionSpec
from .network import FinalizationMode, InMemoryOracleNetwork
from .prover import InMemoryAttestationProver

__all__ = [
    "DEFAULT_FINALIZATION_BLOCKS",
    "InMemoryLedger",
    "TransactionSpec",
    "InMemoryAttestationProver",
    "InMemoryOracleNetwork",
    "FinalizationMode",
]
