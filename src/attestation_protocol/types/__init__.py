"""Reusable type definitions for the attestation protocol."""

from .base import CamelModel, FrozenModel, StrictBaseModel
from .byte_arrays import (
    ZERO_BYTES32,
    ByteSequenceLike,
    Bytes32,
    coerce_to_bytes,
    to_hex,
)
from .exceptions import (
    AttestationError,
    AttestationRequestError,
    EncodeError,
    FieldTooLongError,
    InvalidFieldValueError,
    LedgerLookupError,
    MalformedRequestError,
    MissingFieldError,
    NegativeValueUnsupportedError,
    OracleNetworkError,
    OracleUnavailableError,
    OverflowBlockNotFoundError,
    ParseError,
    ProofFailedError,
    RoundFinalizationTimeoutError,
    RoundNotFoundError,
    SchemeDefinitionError,
    SchemeError,
    SubjectNotFoundError,
    UnsupportedAttestationTypeError,
    UnsupportedSourceError,
)
from .hash import keccak256, standard_address_hash
from .numbers import (
    Int256,
    NumberLike,
    Uint8,
    Uint16,
    Uint32,
    Uint64,
    Uint128,
    Uint256,
    number_like_to_int,
)

__all__ = [
    # Models
    "CamelModel",
    "FrozenModel",
    "StrictBaseModel",
    # Bytes
    "Bytes32",
    "ByteSequenceLike",
    "ZERO_BYTES32",
    "coerce_to_bytes",
    "to_hex",
    # Numbers
    "NumberLike",
    "Uint8",
    "Uint16",
    "Uint32",
    "Uint64",
    "Uint128",
    "Uint256",
    "Int256",
    "number_like_to_int",
    # Hashing
    "keccak256",
    "standard_address_hash",
    # Exceptions
    "AttestationError",
    "SchemeError",
    "UnsupportedAttestationTypeError",
    "SchemeDefinitionError",
    "AttestationRequestError",
    "EncodeError",
    "MissingFieldError",
    "FieldTooLongError",
    "NegativeValueUnsupportedError",
    "InvalidFieldValueError",
    "UnsupportedSourceError",
    "ParseError",
    "MalformedRequestError",
    "LedgerLookupError",
    "SubjectNotFoundError",
    "OverflowBlockNotFoundError",
    "OracleNetworkError",
    "OracleUnavailableError",
    "RoundNotFoundError",
    "RoundFinalizationTimeoutError",
    "ProofFailedError",
]
