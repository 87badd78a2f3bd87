"""Subspecifications of the attestation protocol: schemes, codec, Merkle engine and client."""
