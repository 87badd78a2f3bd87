"""Reading request field values from typed models or mappings."""

from __future__ import annotations

from typing import Any, Mapping

from attestation_protocol.subspecs.requests import AttestationRequest
from attestation_protocol.subspecs.schemes import RequestFieldSpec
from attestation_protocol.types import MissingFieldError

RequestLike = AttestationRequest | Mapping[str, Any]
"""A typed request model, or a mapping keyed by camelCase or snake_case names."""


def read_field(request: RequestLike, field: RequestFieldSpec) -> Any:
    """
    Return the value of `field` in `request`.

    Raises:
        MissingFieldError: If the request has no value for the field.
    """
    if isinstance(request, AttestationRequest):
        value = getattr(request, field.attr, None)
    else:
        value = request.get(field.key)
        if value is None:
            value = request.get(field.attr)
    if value is None:
        raise MissingFieldError(field.key)
    return value
