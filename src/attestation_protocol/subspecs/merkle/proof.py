"""Merkle inclusion proofs."""

from __future__ import annotations

from typing import Sequence

from pydantic import Field

from attestation_protocol.types import Bytes32, StrictBaseModel

from .utils import sorted_hash_pair


def verify_with_merkle_proof(
    leaf: bytes | str | None,
    proof: Sequence[bytes | str] | None,
    root: bytes | str | None,
) -> bool:
    """
    Check that `leaf` is included under `root`.

    The proof is folded from the leaf upwards with `sorted_hash_pair`. A
    missing leaf, proof or root never verifies. An empty proof verifies only
    when the leaf is the root.
    """
    if not leaf or proof is None or not root:
        return False
    node = Bytes32(leaf)
    for sibling in proof:
        node = sorted_hash_pair(Bytes32(sibling), node)
    return node == Bytes32(root)


class MerkleProof(StrictBaseModel):
    """A leaf together with the sibling hashes proving its inclusion."""

    leaf: Bytes32 = Field(..., description="The leaf being proven.")

    proof_hashes: Sequence[Bytes32] = Field(
        ..., description="Sibling hashes from the leaf level up to the root."
    )

    def calculate_root(self) -> Bytes32:
        """Fold the proof into the root it implies."""
        node = self.leaf
        for sibling in self.proof_hashes:
            node = sorted_hash_pair(sibling, node)
        return node

    def verify(self, root: Bytes32) -> bool:
        """Whether the proof leads to `root`."""
        return self.calculate_root() == root
