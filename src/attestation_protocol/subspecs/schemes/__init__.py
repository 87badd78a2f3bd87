"""Attestation type schemes: request layouts and response hash fields."""

from .definitions import (
    BALANCE_DECREASING_TRANSACTION,
    CONFIRMED_BLOCK_HEIGHT_EXISTS,
    DEFINITIONS,
    PAYMENT,
    REFERENCED_PAYMENT_NONEXISTENCE,
)
from .fields import (
    REQUEST_BASE_FIELDS,
    RESPONSE_BASE_FIELDS,
    RequestFieldKind,
    RequestFieldSpec,
    ResponseFieldSpec,
)
from .registry import DEFAULT_REGISTRY, SchemeRegistry, scheme_for
from .scheme import AttestationTypeScheme

__all__ = [
    "AttestationTypeScheme",
    "RequestFieldKind",
    "RequestFieldSpec",
    "ResponseFieldSpec",
    "REQUEST_BASE_FIELDS",
    "RESPONSE_BASE_FIELDS",
    "SchemeRegistry",
    "DEFAULT_REGISTRY",
    "scheme_for",
    "DEFINITIONS",
    "PAYMENT",
    "BALANCE_DECREASING_TRANSACTION",
    "CONFIRMED_BLOCK_HEIGHT_EXISTS",
    "REFERENCED_PAYMENT_NONEXISTENCE",
]
