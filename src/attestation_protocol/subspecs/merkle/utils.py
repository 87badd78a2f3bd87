"""Hash helpers for the attestation Merkle tree."""

from attestation_protocol.types import Bytes32, keccak256


def sorted_hash_pair(node_a: bytes, node_b: bytes) -> Bytes32:
    """
    Hash two 32-byte nodes, smaller one first.

    Sorting makes the pairing order-independent, so a proof only needs the
    sibling hashes and not their left/right positions.
    """
    low, high = (node_a, node_b) if bytes(node_a) <= bytes(node_b) else (node_b, node_a)
    return keccak256(bytes(low) + bytes(high))


def single_hash(value: bytes) -> Bytes32:
    """Hash a single 32-byte value (used for `initial_hash` trees)."""
    return keccak256(bytes(value))
