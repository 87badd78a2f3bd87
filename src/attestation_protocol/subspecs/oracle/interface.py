"""Abstract interface of an attestation network client."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from attestation_protocol.subspecs.requests import (
    AttestationRequest,
    AttestationRequestId,
    ObtainedProof,
)


@runtime_checkable
class OracleNetworkClient(Protocol):
    """
    Submission and proof retrieval against an attestation network.

    Each request is filed into exactly one voting round. Once that round is
    finalized, its Merkle root is published and the proof of every validated
    request in it can be fetched.
    """

    async def submit_request(
        self, request: AttestationRequest | bytes
    ) -> AttestationRequestId | None:
        """
        Submit a typed or encoded request.

        Returns:
            The round and encoded data of the request, or None if the network
            rejected it.
        """
        ...

    async def round_finalized(self, round: int) -> bool:
        """Whether `round` is finalized."""
        ...

    async def wait_for_round_finalization(self, round: int) -> None:
        """
        Suspend until `round` is finalized.

        Callers impose their own deadline, e.g. with `asyncio.timeout`.

        Raises:
            RoundNotFoundError: If the round has not been opened yet.
        """
        ...

    async def obtain_proof(self, round: int, request_data: bytes) -> ObtainedProof:
        """
        Fetch the response of a request submitted in `round`.

        The result is None while the round is pending and when the network did
        not validate the request.
        """
        ...
