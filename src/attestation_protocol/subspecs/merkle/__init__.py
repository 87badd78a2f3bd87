"""Sorted-pair Merkle trees, inclusion proofs and attestation verification."""

from .attestation import verify_attestation
from .proof import MerkleProof, verify_with_merkle_proof
from .tree import HashLike, MerkleTree
from .utils import single_hash, sorted_hash_pair

__all__ = [
    "HashLike",
    "MerkleTree",
    "MerkleProof",
    "verify_with_merkle_proof",
    "verify_attestation",
    "sorted_hash_pair",
    "single_hash",
]
