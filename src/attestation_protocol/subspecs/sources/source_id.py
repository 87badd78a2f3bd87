"""Source ledger identifiers."""

from __future__ import annotations

from enum import IntEnum


class SourceId(IntEnum):
    """
    Id of an external ledger, encoded as a 4-byte unsigned integer in requests.

    The numbering matches the chain type enumeration used by the
    attestation providers.
    """

    BTC = 0
    LTC = 1
    DOGE = 2
    XRP = 3
    ALGO = 4


def get_source_name(source_id: int) -> str | None:
    """Return the name of `source_id`, or None if the id is unknown."""
    try:
        return SourceId(source_id).name
    except ValueError:
        return None


def to_source_id(value: int | str) -> SourceId | None:
    """
    Resolve a source id given either by number or by name (e.g. "XRP").

    Returns None for unknown names and numbers.
    """
    if isinstance(value, str):
        return SourceId.__members__.get(value.upper())
    try:
        return SourceId(value)
    except ValueError:
        return None
