"""Exception hierarchy for the attestation protocol."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from attestation_protocol.subspecs.client.outcome import ProofOutcome


def _short_repr(value: Any) -> str:
    """Return a repr of `value` truncated for use in error messages."""
    value_repr = repr(value)
    if len(value_repr) > 50:
        value_repr = value_repr[:47] + "..."
    return value_repr


class AttestationError(Exception):
    """
    Base exception for all attestation protocol errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class SchemeError(AttestationError):
    """Base class for configuration errors around attestation type schemes."""


class UnsupportedAttestationTypeError(SchemeError):
    """
    Raised when no scheme is registered for an attestation type id.

    Attributes:
        attestation_type: The attestation type id that was looked up.
    """

    def __init__(self, attestation_type: int) -> None:
        self.attestation_type = attestation_type
        super().__init__(f"Unsupported attestation type id: {attestation_type}")


class SchemeDefinitionError(SchemeError):
    """
    Raised when an attestation type definition is inconsistent.

    Attributes:
        tag: The identifier of the offending definition.
        detail: What is wrong with it.
    """

    def __init__(self, tag: str, detail: str) -> None:
        self.tag = tag
        self.detail = detail
        super().__init__(f"Invalid attestation type definition {tag}: {detail}")


class AttestationRequestError(AttestationError):
    """Base class for errors caused by attestation request contents."""


class EncodeError(AttestationRequestError):
    """Base class for errors raised while encoding a request."""


class MissingFieldError(EncodeError):
    """
    Raised when a request lacks a field required by its scheme.

    Attributes:
        key: The missing field.
    """

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Missing key {key} in request")


class FieldTooLongError(EncodeError):
    """
    Raised when a value does not fit into the declared field width.

    Attributes:
        key: The field being encoded.
        byte_size: The declared width in bytes.
        actual: The number of bytes the value needs.
    """

    def __init__(self, key: str, byte_size: int, actual: int) -> None:
        self.key = key
        self.byte_size = byte_size
        self.actual = actual
        super().__init__(
            f"Too long byte string for key {key}: needs {actual} bytes, field has {byte_size}"
        )


class NegativeValueUnsupportedError(EncodeError):
    """
    Raised when a negative number is given for an unsigned request field.

    Attributes:
        key: The field being encoded.
        value: The rejected value.
    """

    def __init__(self, key: str, value: Any) -> None:
        self.key = key
        self.value = value
        super().__init__(
            f"Negative values are not supported in requests ({key}={_short_repr(value)})"
        )


class InvalidFieldValueError(EncodeError):
    """
    Raised when a value cannot be interpreted as the kind its field expects.

    Attributes:
        key: The field being encoded.
        value: The rejected value.
    """

    def __init__(self, key: str, value: Any) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Invalid value for key {key}: {_short_repr(value)}")


class UnsupportedSourceError(EncodeError):
    """
    Raised when a source id is not supported by the request's attestation type.

    Attributes:
        attestation_type: The attestation type id of the request.
        source_id: The unsupported source id.
    """

    def __init__(self, attestation_type: int, source_id: int) -> None:
        self.attestation_type = attestation_type
        self.source_id = source_id
        super().__init__(
            f"Source id {source_id} is not supported by attestation type {attestation_type}"
        )


class ParseError(AttestationRequestError):
    """Base class for errors raised while decoding request bytes."""


class MalformedRequestError(ParseError):
    """
    Raised when request bytes do not match the layout of their attestation type.

    Attributes:
        detail: Description of what went wrong.
        expected: Expected length in bytes (if known).
        actual: Actual length in bytes (if known).
    """

    def __init__(
        self,
        detail: str,
        *,
        expected: int | None = None,
        actual: int | None = None,
    ) -> None:
        self.detail = detail
        self.expected = expected
        self.actual = actual

        msg = f"Incorrectly formatted attestation request: {detail}"
        if expected is not None and actual is not None:
            msg = f"{msg} (expected {expected} bytes, got {actual})"

        super().__init__(msg)


class LedgerLookupError(AttestationError):
    """
    Base class for failures to locate the subject of a proof on the source ledger.

    Attributes:
        detail: What could not be found.
        block_height: The ledger height at the time of the lookup (if known).
    """

    def __init__(self, detail: str, *, block_height: int | None = None) -> None:
        self.detail = detail
        self.block_height = block_height

        msg = detail
        if block_height is not None:
            msg = f"{msg} (chain height {block_height})"

        super().__init__(msg)


class SubjectNotFoundError(LedgerLookupError):
    """Raised when a transaction, its block or its finalization block is missing."""


class OverflowBlockNotFoundError(LedgerLookupError):
    """Raised when no confirmed block past a nonexistence deadline exists yet."""


class OracleNetworkError(AttestationError):
    """Base class for errors talking to the attestation network."""


class OracleUnavailableError(OracleNetworkError):
    """Raised when the attestation network cannot be reached or answers with an error."""


class RoundNotFoundError(OracleNetworkError):
    """
    Raised when waiting for a round the network has not opened yet.

    Attributes:
        round: The requested voting round.
    """

    def __init__(self, round: int) -> None:
        self.round = round
        super().__init__(f"Round {round} doesn't exist yet")


class RoundFinalizationTimeoutError(OracleNetworkError):
    """
    Raised when a round is still not finalized after the caller's timeout.

    Attributes:
        round: The awaited voting round.
        timeout: The timeout in seconds.
    """

    def __init__(self, round: int, timeout: float) -> None:
        self.round = round
        self.timeout = timeout
        super().__init__(f"Round {round} not finalized within {timeout} seconds")


class ProofFailedError(AttestationError):
    """
    Raised by the strict proof operations when no proof could be obtained.

    Attributes:
        outcome: The failed outcome of the proof flow.
    """

    def __init__(self, operation: str, outcome: ProofOutcome) -> None:
        self.operation = operation
        self.outcome = outcome

        reason = outcome.reason.name if outcome.reason is not None else "UNKNOWN"
        msg = f"{operation}: {reason}"
        if outcome.detail:
            msg = f"{msg} ({outcome.detail})"

        super().__init__(msg)
