"""Verification of attestation responses against a round's Merkle root."""

from __future__ import annotations

from attestation_protocol.subspecs.codec import RequestLike, response_hash
from attestation_protocol.subspecs.requests import AttestationResponse
from attestation_protocol.subspecs.schemes import DEFAULT_REGISTRY, SchemeRegistry

from .proof import verify_with_merkle_proof


def verify_attestation(
    request: RequestLike,
    response: AttestationResponse,
    merkle_root: bytes | str | None,
    registry: SchemeRegistry = DEFAULT_REGISTRY,
) -> bool:
    """
    Check a proved response the way the on-chain verifier does.

    The Merkle leaf of a response is its unsalted response hash. Incomplete
    or unproved responses never verify.
    """
    if response.merkle_proof is None:
        return False
    leaf = response_hash(request, response, registry=registry)
    if leaf is None:
        return False
    return verify_with_merkle_proof(leaf, response.merkle_proof, merkle_root)
