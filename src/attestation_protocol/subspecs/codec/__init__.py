"""Binary request codec, request equality and response hashing."""

from .decode import decode_request, peek_attestation_type_and_source, request_bytes
from .encode import encode_field, encode_request
from .equals import equals_request, field_values_equal
from .fields import RequestLike, read_field
from .hashing import message_integrity_code, response_hash

__all__ = [
    "RequestLike",
    "read_field",
    "encode_field",
    "encode_request",
    "decode_request",
    "peek_attestation_type_and_source",
    "request_bytes",
    "equals_request",
    "field_values_equal",
    "response_hash",
    "message_integrity_code",
]
