"""
Byte array types.

This module provides:

- Bytes32: a fixed-length byte string of exactly 32 bytes (hashes, roots).
- ByteSequenceLike: a variable-length byte value accepted in request fields.
"""

from __future__ import annotations

from typing import Annotated, Any, ClassVar, Iterable, SupportsIndex

from pydantic import BeforeValidator, PlainSerializer
from pydantic.annotated_handlers import GetCoreSchemaHandler
from pydantic_core import core_schema
from typing_extensions import Self


def coerce_to_bytes(value: Any) -> bytes:
    """
    Coerce a variety of inputs to raw bytes.

    Accepts:
      - `bytes` / `bytearray` (returned as immutable `bytes`)
      - Iterables of integers in [0, 255]
      - Hex strings, with or without a '0x' prefix (e.g. "0xdeadbeef" or "deadbeef").
        An odd number of hex digits is read as if it had a leading zero.

    Raises:
      ValueError / TypeError if conversion is not possible or out-of-range.
    """
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, str):
        digits = value[2:] if value[:2] in ("0x", "0X") else value
        if len(digits) % 2:
            digits = "0" + digits
        # bytes.fromhex handles empty string and validates hex characters
        return bytes.fromhex(digits)
    if isinstance(value, Iterable):
        # bytes(bytearray(iterable)) enforces each element is an int in 0..255
        return bytes(bytearray(value))
    raise TypeError(f"Cannot convert {type(value).__name__} to bytes")


def to_hex(value: bytes) -> str:
    """Return `value` as a `0x`-prefixed lowercase hex string."""
    return "0x" + bytes(value).hex()


class BaseBytes(bytes):
    """
    A base class for fixed-length byte types that inherits from `bytes`.

    Subclasses set:
      - `LENGTH`: exact number of bytes the instance must contain.

    Instances are immutable byte objects with strict length checking.
    """

    LENGTH: ClassVar[int]
    """The exact number of bytes (overridden by subclasses)."""

    def __new__(cls, value: Any = b"") -> Self:
        """
        Create and validate a new Bytes instance.

        Args:
            value: Any value coercible to bytes (see `coerce_to_bytes`).

        Raises:
            ValueError: If the resulting byte length differs from `LENGTH`.
        """
        if not hasattr(cls, "LENGTH"):
            raise TypeError(f"{cls.__name__} must define LENGTH")

        b = coerce_to_bytes(value)
        if len(b) != cls.LENGTH:
            raise ValueError(f"{cls.__name__} expects exactly {cls.LENGTH} bytes, got {len(b)}")
        return super().__new__(cls, b)

    @classmethod
    def zero(cls) -> Self:
        """Create a new instance filled with zero bytes."""
        return cls(b"\x00" * cls.LENGTH)

    @classmethod
    def left_padded(cls, value: Any) -> Self:
        """
        Create an instance from a shorter value, left-padding it with zero bytes.

        This is how 32-byte hashes given as short hex strings are normalized.
        """
        b = coerce_to_bytes(value)
        if len(b) > cls.LENGTH:
            raise ValueError(f"{cls.__name__} expects at most {cls.LENGTH} bytes, got {len(b)}")
        return cls(b.rjust(cls.LENGTH, b"\x00"))

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        """
        Hook into Pydantic's validation system.

        1. If the input is already an instance of the class, accept it.
        2. Otherwise, coerce bytes or hex text and check the exact LENGTH.
        3. For serialization (e.g., to JSON), convert to a `0x` hex string.
        """
        return core_schema.union_schema(
            [
                core_schema.is_instance_schema(cls),
                core_schema.no_info_plain_validator_function(cls),
            ],
            serialization=core_schema.plain_serializer_function_ser_schema(to_hex),
        )

    def __repr__(self) -> str:
        """Return a string representation of the bytes."""
        tname = type(self).__name__
        return f"{tname}({self.hex()})"

    def __hash__(self) -> int:
        """Return the hash of the bytes."""
        return hash(bytes(self))

    def hex(self, sep: str | bytes | None = None, bytes_per_sep: SupportsIndex = 1) -> str:
        """Return the hexadecimal string representation of the underlying bytes."""
        return bytes(self).hex() if sep is None else bytes(self).hex(sep, bytes_per_sep)


class Bytes32(BaseBytes):
    """Fixed-size byte array of exactly 32 bytes (hashes, Merkle nodes)."""

    LENGTH = 32


ZERO_BYTES32 = Bytes32.zero()
"""All-zero 32-byte value, used as the placeholder message integrity code."""


ByteSequenceLike = Annotated[
    bytes,
    BeforeValidator(coerce_to_bytes),
    PlainSerializer(to_hex, return_type=str),
]
"""
A raw byte value for a `ByteSequenceLike` request field.

Accepts bytes or hex text. Padding to the field width happens when encoding.
"""
