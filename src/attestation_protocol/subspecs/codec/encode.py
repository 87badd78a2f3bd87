"""
Request encoding.

A request is the concatenation of its fields, in scheme order, each written
big-endian into exactly its declared width. There are no delimiters: the
attestation type in the first two bytes selects the scheme, and the scheme
fixes every field boundary.
"""

from __future__ import annotations

from typing import Any

from attestation_protocol.subspecs.schemes import (
    DEFAULT_REGISTRY,
    REQUEST_BASE_FIELDS,
    RequestFieldSpec,
    SchemeRegistry,
)
from attestation_protocol.types import (
    FieldTooLongError,
    InvalidFieldValueError,
    NegativeValueUnsupportedError,
    UnsupportedSourceError,
    coerce_to_bytes,
    number_like_to_int,
)

from .fields import RequestLike, read_field

_ATTESTATION_TYPE_FIELD, _SOURCE_ID_FIELD, _ = REQUEST_BASE_FIELDS


def encode_field(field: RequestFieldSpec, value: Any) -> bytes:
    """
    Encode one value into the fixed width of `field`.

    Raises:
        InvalidFieldValueError: If the value cannot be read as the field's kind.
        NegativeValueUnsupportedError: If a numeric value is negative.
        FieldTooLongError: If the value does not fit into the field.
    """
    if field.kind.is_numeric:
        try:
            number = number_like_to_int(value)
        except (TypeError, ValueError) as exc:
            raise InvalidFieldValueError(field.key, value) from exc
        if number < 0:
            raise NegativeValueUnsupportedError(field.key, value)
        needed = (number.bit_length() + 7) // 8
        if needed > field.byte_size:
            raise FieldTooLongError(field.key, field.byte_size, needed)
        return number.to_bytes(field.byte_size, "big")

    try:
        raw = coerce_to_bytes(value)
    except (TypeError, ValueError) as exc:
        raise InvalidFieldValueError(field.key, value) from exc
    if len(raw) > field.byte_size:
        raise FieldTooLongError(field.key, field.byte_size, len(raw))
    return raw.rjust(field.byte_size, b"\x00")


def encode_request(request: RequestLike, registry: SchemeRegistry = DEFAULT_REGISTRY) -> bytes:
    """
    Encode a request into its fixed-layout binary form.

    Args:
        request: A typed request, or a mapping with the request's fields.
        registry: Where to look the attestation type up.

    Returns:
        The encoded request, exactly `scheme.request_byte_length` bytes long.

    Raises:
        UnsupportedAttestationTypeError: If the attestation type has no scheme.
        UnsupportedSourceError: If the scheme does not support the source id.
        EncodeError: If a field is missing or its value cannot be encoded.
    """
    attestation_type = _read_id(request, _ATTESTATION_TYPE_FIELD)
    scheme = registry.require(attestation_type)

    source_id = _read_id(request, _SOURCE_ID_FIELD)
    if not scheme.supports_source(source_id):
        raise UnsupportedSourceError(attestation_type, source_id)

    return b"".join(
        encode_field(field, read_field(request, field)) for field in scheme.request_layout
    )


def _read_id(request: RequestLike, field: RequestFieldSpec) -> int:
    """Read an id field of the common prefix as an int."""
    value = read_field(request, field)
    try:
        return number_like_to_int(value)
    except (TypeError, ValueError) as exc:
        raise InvalidFieldValueError(field.key, value) from exc
