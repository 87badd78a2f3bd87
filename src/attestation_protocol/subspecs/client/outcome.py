"""Results of proof flows."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from attestation_protocol.subspecs.requests import AttestationRequestId, AttestationResponse
from attestation_protocol.types import LedgerLookupError, OverflowBlockNotFoundError

from .states import ProofState


class FailureReason(Enum):
    """Why a proof flow ended in `ProofState.FAILED`."""

    NOT_PROVED = auto()
    """The network rejected the request or returned no proved response."""

    SUBJECT_NOT_FOUND = auto()
    """The transaction, its block, an address or a finalization block is missing."""

    OVERFLOW_BLOCK_NOT_FOUND = auto()
    """No finalized block past the nonexistence deadline exists yet."""

    INTEGRITY_MISMATCH = auto()
    """The response does not match the requester's message integrity code."""

    @classmethod
    def for_lookup_error(cls, error: LedgerLookupError) -> FailureReason:
        """Map a ledger lookup failure to its reason."""
        if isinstance(error, OverflowBlockNotFoundError):
            return cls.OVERFLOW_BLOCK_NOT_FOUND
        return cls.SUBJECT_NOT_FOUND


@dataclass(frozen=True, slots=True)
class ProofOutcome:
    """
    Terminal result of a proof flow.

    A failed outcome is not an error: it means the attestation network did
    not validate the claim, or the claim could not be made yet.
    """

    state: ProofState
    """PROVED or FAILED."""

    reason: FailureReason | None = None
    """Set when the flow failed."""

    response: AttestationResponse | None = None
    """The proved response."""

    request_id: AttestationRequestId | None = None
    """Round and data of the request, once it was submitted."""

    block_height: int | None = None
    """Ledger height when a lookup failed, to decide whether to retry later."""

    detail: str | None = None
    """Human-readable explanation of a failure."""

    @property
    def is_proved(self) -> bool:
        """Whether the flow ended with a proved response."""
        return self.state is ProofState.PROVED
