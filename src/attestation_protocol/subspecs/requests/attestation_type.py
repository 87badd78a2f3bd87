"""Attestation type identifiers."""

from __future__ import annotations

from enum import IntEnum


class AttestationType(IntEnum):
    """Id of an attestation type, encoded as a 2-byte unsigned integer in requests."""

    PAYMENT = 1
    BALANCE_DECREASING_TRANSACTION = 2
    CONFIRMED_BLOCK_HEIGHT_EXISTS = 3
    REFERENCED_PAYMENT_NONEXISTENCE = 4


def get_attestation_type_name(attestation_type: int) -> str | None:
    """Return the enum name for `attestation_type`, or None if it is unknown."""
    try:
        return AttestationType(attestation_type).name
    except ValueError:
        return None
