"""Reusable base models for requests, responses and scheme definitions."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    A base model that converts field names to camel case when serializing.

    For example, the field name `state_connector_round` in a Python model is
    represented as `stateConnectorRound` when it is serialized to JSON.

    This keeps the wire names used by attestation providers while the Python
    side stays snake_case.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_default=True,
        arbitrary_types_allowed=True,
    )


class FrozenModel(CamelModel):
    """An immutable camel-case model that rejects unknown fields."""

    model_config = CamelModel.model_config | {
        "extra": "forbid",
        "frozen": True,
    }


class StrictBaseModel(FrozenModel):
    """A strict, immutable pydantic base model."""

    model_config = FrozenModel.model_config | {
        "strict": True,
    }
