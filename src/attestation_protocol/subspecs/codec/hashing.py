"""
Response hashes and message integrity codes.

The response hash is Keccak-256 over the Solidity ABI encoding of

    (uint16 attestationType, uint32 sourceId, uint256 stateConnectorRound,
     <scheme response fields in order>[, string salt])

which is the same value the on-chain verifier computes. The unsalted hash
is the Merkle leaf of the response. The salted hash of the anticipated
response, taken at round 0, is the message integrity code of a request.
"""

from __future__ import annotations

from typing import Any, Mapping

from eth_abi import encode

from attestation_protocol import config
from attestation_protocol.subspecs.requests import AttestationResponse
from attestation_protocol.subspecs.schemes import (
    DEFAULT_REGISTRY,
    REQUEST_BASE_FIELDS,
    SchemeRegistry,
)
from attestation_protocol.types import Bytes32, keccak256, number_like_to_int

from .fields import RequestLike, read_field

_PREFIX_TYPES = ["uint16", "uint32"]


def response_hash(
    request: RequestLike,
    response: AttestationResponse | Mapping[str, Any],
    salt: str | None = None,
    registry: SchemeRegistry = DEFAULT_REGISTRY,
) -> Bytes32 | None:
    """
    Hash a response the way the on-chain verifier does.

    Args:
        request: The request the response answers. Only its attestation type
            and source id are hashed.
        response: The response, typed or as a camelCase mapping.
        salt: Optional string appended to the hashed values.
        registry: Where to look the attestation type up.

    Returns:
        The hash, or None if any hashed response field is absent.

    Raises:
        UnsupportedAttestationTypeError: If the attestation type has no scheme.
    """
    type_field, source_field, _ = REQUEST_BASE_FIELDS
    attestation_type = number_like_to_int(read_field(request, type_field))
    source_id = number_like_to_int(read_field(request, source_field))
    scheme = registry.require(attestation_type)

    if not isinstance(response, AttestationResponse):
        response = scheme.response_model.model_validate(response)

    types = list(_PREFIX_TYPES)
    values: list[Any] = [attestation_type, source_id]
    for field in scheme.response_hash_layout:
        value = getattr(response, field.attr, None)
        if value is None:
            return None
        types.append(field.solidity_type)
        values.append(bytes(value) if isinstance(value, bytes) else value)

    if salt:
        types.append("string")
        values.append(salt)

    return keccak256(encode(types, values))


def message_integrity_code(
    request: RequestLike,
    response: AttestationResponse,
    salt: str | None = None,
    registry: SchemeRegistry = DEFAULT_REGISTRY,
) -> Bytes32 | None:
    """
    Compute the message integrity code of an anticipated response.

    The round of the anticipated response is unknown when the request is made,
    so the code is taken with `state_connector_round` set to 0.

    Returns:
        The code, or None if the response is incomplete.
    """
    anticipated = response.model_copy(update={"state_connector_round": 0})
    return response_hash(
        request,
        anticipated,
        salt=config.MIC_SALT if salt is None else salt,
        registry=registry,
    )
