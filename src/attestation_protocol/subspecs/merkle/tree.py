"""
Sorted, deduplicated Merkle tree.

The tree over `n` leaves is stored as a flat array of `2n - 1` nodes using
binary-heap indexing:

    tree[0]                 root
    tree[n - 1 : 2n - 1]    leaves, sorted ascending
    parent(i) = (i - 1) // 2
    left(i)   = 2i + 1
    right(i)  = 2i + 2

Odd levels need no padding: the heap layout pairs nodes across levels, which
keeps the tree as balanced as possible without duplicating hashes.
"""

from __future__ import annotations

from typing import Iterable

from attestation_protocol.types import Bytes32

from .utils import single_hash, sorted_hash_pair

HashLike = bytes | str
"""A 32-byte hash given as bytes or hex. Shorter values are left-padded."""


class MerkleTree:
    """Merkle tree built from a set of leaf hashes."""

    __slots__ = ("_tree", "initial_hash")

    def __init__(self, values: Iterable[HashLike] = (), initial_hash: bool = False) -> None:
        """
        Build the tree.

        Args:
            values: Leaf hashes. Duplicates are removed and the rest sorted.
            initial_hash: Hash every deduplicated leaf once more before building.
        """
        self.initial_hash = initial_hash
        self._tree: list[Bytes32] = []
        self.build(values)

    def build(self, values: Iterable[HashLike]) -> None:
        """Rebuild the tree from `values`."""
        hashes = sorted({Bytes32.left_padded(value) for value in values})
        if self.initial_hash:
            hashes = [single_hash(h) for h in hashes]

        n = len(hashes)
        tree: list[Bytes32] = [Bytes32.zero()] * max(n - 1, 0) + hashes
        for i in range(n - 2, -1, -1):
            tree[i] = sorted_hash_pair(tree[2 * i + 1], tree[2 * i + 2])
        self._tree = tree

    @property
    def root(self) -> Bytes32 | None:
        """The Merkle root, or None for an empty tree."""
        return self._tree[0] if self._tree else None

    @property
    def tree(self) -> list[Bytes32]:
        """A copy of the full node array."""
        return list(self._tree)

    @property
    def hash_count(self) -> int:
        """Number of leaves."""
        return (len(self._tree) + 1) // 2

    @property
    def sorted_hashes(self) -> list[Bytes32]:
        """The leaves in tree order."""
        return self._tree[self.hash_count - 1 :] if self._tree else []

    def get_hash(self, i: int) -> Bytes32 | None:
        """Return the `i`-th leaf, or None if `i` is out of range."""
        if not 0 <= i < self.hash_count:
            return None
        return self._tree[len(self._tree) - self.hash_count + i]

    def get_proof(self, i: int) -> list[Bytes32] | None:
        """
        Return the Merkle proof of the `i`-th leaf.

        The proof lists the sibling of every node on the path from the leaf
        to the root, leaf level first. A single-leaf tree has an empty proof.

        Returns:
            The proof, or None if `i` is out of range.
        """
        if not 0 <= i < self.hash_count:
            return None
        proof: list[Bytes32] = []
        pos = len(self._tree) - self.hash_count + i
        while pos > 0:
            # Odd positions are left children, even positions right children.
            proof.append(self._tree[pos + 2 * (pos % 2) - 1])
            pos = (pos - 1) // 2
        return proof

    def get_proof_for_value(self, value: HashLike) -> list[Bytes32] | None:
        """Return the proof of the leaf built from `value`, or None if it is not in the tree."""
        leaf = Bytes32.left_padded(value)
        if self.initial_hash:
            leaf = single_hash(leaf)
        leaves = self.sorted_hashes
        try:
            index = leaves.index(leaf)
        except ValueError:
            return None
        return self.get_proof(index)

    def __len__(self) -> int:
        return self.hash_count

    def __repr__(self) -> str:
        root = self.root.hex() if self.root is not None else None
        return f"MerkleTree(hash_count={self.hash_count}, root={root})"
