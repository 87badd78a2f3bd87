"""
Request decoding.

Decoding is the inverse of encoding. The whole buffer must match the layout
of its attestation type exactly; there is no partial or streaming decode.
"""

from __future__ import annotations

from typing import Any

from attestation_protocol.subspecs.requests import AttestationRequest, AttestationType
from attestation_protocol.subspecs.schemes import (
    DEFAULT_REGISTRY,
    REQUEST_BASE_FIELDS,
    RequestFieldKind,
    SchemeRegistry,
)
from attestation_protocol.types import (
    MalformedRequestError,
    UnsupportedSourceError,
    coerce_to_bytes,
)

_TYPE_WIDTH = REQUEST_BASE_FIELDS[0].byte_size
_SOURCE_WIDTH = REQUEST_BASE_FIELDS[1].byte_size


def request_bytes(data: bytes | str) -> bytes:
    """
    Return request data as raw bytes.

    Raises:
        MalformedRequestError: If a string is not valid hex.
    """
    if isinstance(data, (bytes, bytearray)):
        return bytes(data)
    try:
        return coerce_to_bytes(data)
    except (TypeError, ValueError) as exc:
        raise MalformedRequestError(f"not a byte string: {exc}") from exc


def peek_attestation_type_and_source(data: bytes | str) -> tuple[int, int]:
    """
    Read the attestation type and source id from the common prefix.

    Raises:
        MalformedRequestError: If the data is too short to hold the prefix.
    """
    raw = request_bytes(data)
    if len(raw) < _TYPE_WIDTH + _SOURCE_WIDTH:
        raise MalformedRequestError(
            "too short for the common prefix",
            expected=_TYPE_WIDTH + _SOURCE_WIDTH,
            actual=len(raw),
        )
    attestation_type = int.from_bytes(raw[:_TYPE_WIDTH], "big")
    source_id = int.from_bytes(raw[_TYPE_WIDTH : _TYPE_WIDTH + _SOURCE_WIDTH], "big")
    return attestation_type, source_id


def decode_request(
    data: bytes | str, registry: SchemeRegistry = DEFAULT_REGISTRY
) -> AttestationRequest:
    """
    Decode a binary request into its typed model.

    Args:
        data: The encoded request, as bytes or a hex string.
        registry: Where to look the attestation type up.

    Raises:
        MalformedRequestError: If the length does not match the scheme.
        UnsupportedAttestationTypeError: If the attestation type has no scheme.
        UnsupportedSourceError: If the scheme does not support the source id.
    """
    raw = request_bytes(data)
    if len(raw) < _TYPE_WIDTH:
        raise MalformedRequestError(
            "too short to hold an attestation type", expected=_TYPE_WIDTH, actual=len(raw)
        )

    scheme = registry.require(int.from_bytes(raw[:_TYPE_WIDTH], "big"))
    if len(raw) != scheme.request_byte_length:
        raise MalformedRequestError(
            f"wrong length for {scheme.name}",
            expected=scheme.request_byte_length,
            actual=len(raw),
        )

    values: dict[str, Any] = {}
    offset = 0
    for field in scheme.request_layout:
        chunk = raw[offset : offset + field.byte_size]
        offset += field.byte_size

        match field.kind:
            case RequestFieldKind.ATTESTATION_TYPE:
                values[field.attr] = AttestationType(int.from_bytes(chunk, "big"))
            case RequestFieldKind.SOURCE_ID:
                source_id = int.from_bytes(chunk, "big")
                if not scheme.supports_source(source_id):
                    raise UnsupportedSourceError(int(scheme.id), source_id)
                values[field.attr] = source_id
            case RequestFieldKind.NUMBER_LIKE:
                values[field.attr] = int.from_bytes(chunk, "big")
            case RequestFieldKind.BYTE_SEQUENCE_LIKE:
                values[field.attr] = chunk

    return scheme.request_model(**values)
