"""
Field layouts of attestation type schemes.

A scheme describes two things about its attestation type:

- **Request layout**: the ordered, fixed-width fields of the binary request.
- **Response hash fields**: the ordered, Solidity-typed response values that
  feed the response hash. These are never encoded into requests.

Keys are the camelCase names used on the wire. The matching Python attribute
of the request and response models is the snake_case form of the key.
"""

from __future__ import annotations

from enum import Enum

from pydantic.alias_generators import to_snake

from attestation_protocol.types import FrozenModel


class RequestFieldKind(Enum):
    """How a request field is encoded and compared."""

    ATTESTATION_TYPE = "AttestationType"
    """The attestation type id, an unsigned integer."""

    SOURCE_ID = "SourceId"
    """The source ledger id, an unsigned integer."""

    NUMBER_LIKE = "NumberLike"
    """A non-negative integer given as an int, decimal or hex string."""

    BYTE_SEQUENCE_LIKE = "ByteSequenceLike"
    """A byte string, left-padded with zeros to the field width."""

    @property
    def is_numeric(self) -> bool:
        """Whether values of this kind are integers."""
        return self is not RequestFieldKind.BYTE_SEQUENCE_LIKE


class RequestFieldSpec(FrozenModel):
    """One fixed-width field of a binary request."""

    key: str
    """Wire name of the field (camelCase)."""

    byte_size: int
    """Exact width of the field in bytes."""

    kind: RequestFieldKind
    """Encoding rule of the field."""

    description: str = ""

    @property
    def attr(self) -> str:
        """Name of the matching request model attribute."""
        return to_snake(self.key)


class ResponseFieldSpec(FrozenModel):
    """One value of a response that is included in the response hash."""

    key: str
    """Wire name of the field (camelCase)."""

    solidity_type: str
    """ABI type used when hashing the value."""

    description: str = ""

    @property
    def attr(self) -> str:
        """Name of the matching response model attribute."""
        return to_snake(self.key)


REQUEST_BASE_FIELDS: tuple[RequestFieldSpec, ...] = (
    RequestFieldSpec(
        key="attestationType",
        byte_size=2,
        kind=RequestFieldKind.ATTESTATION_TYPE,
        description="Attestation type id for this request, see AttestationType enum.",
    ),
    RequestFieldSpec(
        key="sourceId",
        byte_size=4,
        kind=RequestFieldKind.SOURCE_ID,
        description="The ID of the underlying chain, see SourceId enum.",
    ),
    RequestFieldSpec(
        key="messageIntegrityCode",
        byte_size=32,
        kind=RequestFieldKind.BYTE_SEQUENCE_LIKE,
        description="The hash of the expected attestation response appended by string 'Flare'.",
    ),
)
"""Common prefix of every request layout."""

RESPONSE_BASE_FIELDS: tuple[ResponseFieldSpec, ...] = (
    ResponseFieldSpec(
        key="stateConnectorRound",
        solidity_type="uint256",
        description="Round number in which the attestation request was validated.",
    ),
)
"""Response fields hashed for every attestation type, after type and source id."""
