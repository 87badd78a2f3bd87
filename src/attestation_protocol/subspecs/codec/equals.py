"""Field-wise request equality."""

from __future__ import annotations

from typing import Any

from attestation_protocol.subspecs.schemes import (
    DEFAULT_REGISTRY,
    REQUEST_BASE_FIELDS,
    RequestFieldSpec,
    SchemeRegistry,
)
from attestation_protocol.types import coerce_to_bytes, number_like_to_int

from .fields import RequestLike, read_field


def field_values_equal(field: RequestFieldSpec, a: Any, b: Any) -> bool:
    """
    Compare two values of `field` by its kind.

    Numbers compare by value, so "10" equals "0xA". Byte sequences compare
    after left-padding to the field width, so values with the same encoding
    are equal.
    """
    if field.kind.is_numeric:
        return number_like_to_int(a) == number_like_to_int(b)
    return coerce_to_bytes(a).rjust(field.byte_size, b"\x00") == coerce_to_bytes(b).rjust(
        field.byte_size, b"\x00"
    )


def equals_request(
    a: RequestLike, b: RequestLike, registry: SchemeRegistry = DEFAULT_REGISTRY
) -> bool:
    """
    Whether two requests ask for the same attestation.

    Raises:
        UnsupportedAttestationTypeError: If the attestation type has no scheme.
        MissingFieldError: If either request lacks a field of its scheme.
    """
    type_field = REQUEST_BASE_FIELDS[0]
    if not field_values_equal(type_field, read_field(a, type_field), read_field(b, type_field)):
        return False

    scheme = registry.require(number_like_to_int(read_field(a, type_field)))
    return all(
        field_values_equal(field, read_field(a, field), read_field(b, field))
        for field in scheme.request_layout
    )
