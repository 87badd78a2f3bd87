"""Attestation client: locate, submit, wait for finalization and fetch proofs."""

from .client import AttestationClient
from .outcome import FailureReason, ProofOutcome
from .states import ProofState

__all__ = [
    "AttestationClient",
    "FailureReason",
    "ProofOutcome",
    "ProofState",
]
