"""Identifiers of the source ledgers attestations can be made about."""

from .source_id import SourceId, get_source_name, to_source_id

__all__ = [
    "SourceId",
    "get_source_name",
    "to_source_id",
]
