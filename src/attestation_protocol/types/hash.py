"""Keccak-256 hashing helpers."""

from Crypto.Hash import keccak

from .byte_arrays import Bytes32


def keccak256(data: bytes) -> Bytes32:
    """Hash `data` with Keccak-256 (the hash used by the EVM, not SHA3-256)."""
    k = keccak.new(digest_bits=256)
    k.update(data)
    return Bytes32(k.digest())


def standard_address_hash(address: str) -> Bytes32:
    """
    Hash of an address viewed as a string.

    Attestation responses identify addresses by this hash, so chains with
    different address formats are handled uniformly.
    """
    return keccak256(address.encode("utf-8"))
