"""Proof flow state machine."""

from __future__ import annotations

from enum import Enum, auto


class ProofState(Enum):
    """
    Stages of a single proof request.

    State Machine Diagram
    ---------------------
    ::

        IDLE --> LOCATED --> SUBMITTED --> ROUND_FINALIZED --> FETCHED --> PROVED
          |         |            |                 |               |
          +---------+------------+-----------------+---------------+--> FAILED

    Transitions
    -----------
    IDLE -> LOCATED
        - The subject was found on the source ledger and a request was built.

    LOCATED -> SUBMITTED
        - The attestation network accepted the request into a round.

    SUBMITTED -> ROUND_FINALIZED
        - The network reported the request's round as finalized.

    ROUND_FINALIZED -> FETCHED
        - The response for the request was fetched.

    FETCHED -> PROVED
        - The response is present and carries a Merkle proof.

    Any non-terminal -> FAILED
        - The subject was not found, the network rejected or did not prove
          the request, or the response did not match the expected one.
    """

    IDLE = auto()
    """Nothing has happened yet."""

    LOCATED = auto()
    """The subject was resolved on the source ledger."""

    SUBMITTED = auto()
    """The request was filed into a voting round."""

    ROUND_FINALIZED = auto()
    """The voting round of the request is finalized."""

    FETCHED = auto()
    """The network's answer for the request was retrieved."""

    PROVED = auto()
    """Terminal: a response with a Merkle proof was obtained."""

    FAILED = auto()
    """Terminal: no proof could be obtained."""

    def can_transition_to(self, target: ProofState) -> bool:
        """Check if transition to `target` is allowed."""
        return target in _VALID_TRANSITIONS.get(self, set())

    @property
    def is_terminal(self) -> bool:
        """Whether the flow has ended."""
        return self in {ProofState.PROVED, ProofState.FAILED}


_VALID_TRANSITIONS: dict[ProofState, set[ProofState]] = {
    ProofState.IDLE: {ProofState.LOCATED, ProofState.FAILED},
    ProofState.LOCATED: {ProofState.SUBMITTED, ProofState.FAILED},
    ProofState.SUBMITTED: {ProofState.ROUND_FINALIZED, ProofState.FAILED},
    ProofState.ROUND_FINALIZED: {ProofState.FETCHED, ProofState.FAILED},
    ProofState.FETCHED: {ProofState.PROVED, ProofState.FAILED},
}
"""Valid state transitions for the proof flow."""
