"""
Registry of attestation type schemes.

The registry is loaded once from a fixed list of definitions, validated and
never mutated afterwards. It is safe to share between threads and tasks.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, Iterator

from attestation_protocol.types import SchemeDefinitionError, UnsupportedAttestationTypeError

from .definitions import DEFINITIONS
from .scheme import AttestationTypeScheme


class SchemeRegistry:
    """Read-only lookup of attestation type schemes by id."""

    __slots__ = ("_schemes",)

    def __init__(self, schemes: dict[int, AttestationTypeScheme]) -> None:
        self._schemes = MappingProxyType(dict(schemes))

    @classmethod
    def load(cls, definitions: Iterable[AttestationTypeScheme]) -> SchemeRegistry:
        """
        Build a registry from definition records.

        Args:
            definitions: One scheme per attestation type.

        Raises:
            SchemeDefinitionError: If a definition is inconsistent or two
                definitions declare the same id.
        """
        schemes: dict[int, AttestationTypeScheme] = {}
        for scheme in definitions:
            scheme.validate_definition()
            if int(scheme.id) in schemes:
                raise SchemeDefinitionError(
                    scheme.tag, f"duplicate attestation type id {int(scheme.id)}"
                )
            schemes[int(scheme.id)] = scheme
        return cls(schemes)

    def scheme_for(self, attestation_type: int) -> AttestationTypeScheme | None:
        """Return the scheme for `attestation_type`, or None if there is none."""
        return self._schemes.get(int(attestation_type))

    def require(self, attestation_type: int) -> AttestationTypeScheme:
        """
        Return the scheme for `attestation_type`.

        Raises:
            UnsupportedAttestationTypeError: If no scheme is registered for it.
        """
        scheme = self.scheme_for(attestation_type)
        if scheme is None:
            raise UnsupportedAttestationTypeError(int(attestation_type))
        return scheme

    def ids(self) -> list[int]:
        """Registered attestation type ids in ascending order."""
        return sorted(self._schemes)

    def __iter__(self) -> Iterator[AttestationTypeScheme]:
        return iter(self._schemes[i] for i in self.ids())

    def __len__(self) -> int:
        return len(self._schemes)

    def __contains__(self, attestation_type: object) -> bool:
        return isinstance(attestation_type, int) and attestation_type in self._schemes


DEFAULT_REGISTRY: SchemeRegistry = SchemeRegistry.load(DEFINITIONS)
"""Registry of the built-in attestation types."""


def scheme_for(attestation_type: int) -> AttestationTypeScheme | None:
    """Look `attestation_type` up in the default registry."""
    return DEFAULT_REGISTRY.scheme_for(attestation_type)
