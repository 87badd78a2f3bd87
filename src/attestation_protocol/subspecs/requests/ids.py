"""Handles returned by the attestation network."""

from __future__ import annotations

from attestation_protocol.types import ByteSequenceLike, FrozenModel

from .response import AttestationResponse


class AttestationRequestId(FrozenModel):
    """Identifies a submitted request: the round it was filed into and its encoded bytes."""

    round: int
    """Voting round the request was filed into."""

    data: ByteSequenceLike
    """The encoded request, used to look the response up later."""


class ObtainedProof(FrozenModel):
    """Result of asking the network for the proof of a request."""

    finalized: bool
    """Whether the request's round is finalized."""

    result: AttestationResponse | None = None
    """The response, or None if the round is pending or the request was not proved."""
