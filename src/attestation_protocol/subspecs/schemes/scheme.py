"""The attestation type scheme."""

from __future__ import annotations

import re

from attestation_protocol.subspecs.requests import (
    AttestationRequest,
    AttestationResponse,
    AttestationType,
)
from attestation_protocol.subspecs.sources import SourceId
from attestation_protocol.types import FrozenModel, SchemeDefinitionError

from .fields import REQUEST_BASE_FIELDS, RESPONSE_BASE_FIELDS, RequestFieldSpec, ResponseFieldSpec

_TAG_PATTERN = re.compile(r"^t-(\d{5})-[a-z0-9-]+$")
"""Definition tags look like `t-00001-payment`."""


class AttestationTypeScheme(FrozenModel):
    """
    Immutable description of one attestation type.

    The `request` and `response_hash` tuples hold only the type-specific
    fields. The common prefix is added by `request_layout` and
    `response_hash_layout`.
    """

    id: AttestationType
    name: str
    tag: str
    """Identifier of the definition, carrying the id as a 5-digit number."""

    supported_sources: frozenset[SourceId]
    request: tuple[RequestFieldSpec, ...]
    response_hash: tuple[ResponseFieldSpec, ...]
    request_model: type[AttestationRequest]
    response_model: type[AttestationResponse]

    @property
    def request_layout(self) -> tuple[RequestFieldSpec, ...]:
        """All fields of the binary request, common prefix first."""
        return REQUEST_BASE_FIELDS + self.request

    @property
    def request_byte_length(self) -> int:
        """Exact length of an encoded request of this type."""
        return sum(field.byte_size for field in self.request_layout)

    @property
    def response_hash_layout(self) -> tuple[ResponseFieldSpec, ...]:
        """Response fields that feed the hash, common fields first."""
        return RESPONSE_BASE_FIELDS + self.response_hash

    def supports_source(self, source_id: int) -> bool:
        """Whether requests of this type may target `source_id`."""
        return source_id in self.supported_sources

    def validate_definition(self) -> None:
        """
        Check that the definition is internally consistent.

        Raises:
            SchemeDefinitionError: If the tag does not carry the declared id,
                the models belong to another type or a key is repeated.
        """
        match = _TAG_PATTERN.match(self.tag)
        if match is None:
            raise SchemeDefinitionError(self.tag, "tag must look like t-00001-name")
        if int(match.group(1)) != self.id:
            raise SchemeDefinitionError(
                self.tag, f"declared id {int(self.id)} does not match the tag"
            )

        for model in (self.request_model, self.response_model):
            if model.ATTESTATION_TYPE != self.id:
                raise SchemeDefinitionError(
                    self.tag, f"{model.__name__} belongs to {model.ATTESTATION_TYPE.name}"
                )

        keys = [field.key for field in self.request_layout]
        if len(keys) != len(set(keys)):
            raise SchemeDefinitionError(self.tag, "duplicate request field key")

        # Every layout entry must map to a model attribute.
        for field in self.request_layout:
            if field.attr not in self.request_model.model_fields:
                raise SchemeDefinitionError(
                    self.tag, f"{self.request_model.__name__} has no field {field.attr}"
                )
        for field in self.response_hash_layout:
            if field.attr not in self.response_model.model_fields:
                raise SchemeDefinitionError(
                    self.tag, f"{self.response_model.__name__} has no field {field.attr}"
                )
