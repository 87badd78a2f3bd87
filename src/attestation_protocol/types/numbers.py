"""Numeric value types used by requests and response hashes."""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import Field

NumberLike = int | str
"""
A request number: an `int`, a decimal string ("10") or a hex string ("0xA").

Values are kept as given so that requests built from different textual
forms compare equal only through `number_like_to_int`.
"""

Uint8 = Annotated[int, Field(ge=0, lt=2**8)]
"""An 8-bit unsigned integer (Solidity `uint8`)."""

Uint16 = Annotated[int, Field(ge=0, lt=2**16)]
"""A 16-bit unsigned integer (Solidity `uint16`)."""

Uint32 = Annotated[int, Field(ge=0, lt=2**32)]
"""A 32-bit unsigned integer (Solidity `uint32`)."""

Uint64 = Annotated[int, Field(ge=0, lt=2**64)]
"""A 64-bit unsigned integer (Solidity `uint64`)."""

Uint128 = Annotated[int, Field(ge=0, lt=2**128)]
"""A 128-bit unsigned integer (Solidity `uint128`)."""

Uint256 = Annotated[int, Field(ge=0, lt=2**256)]
"""A 256-bit unsigned integer (Solidity `uint256`)."""

Int256 = Annotated[int, Field(ge=-(2**255), lt=2**255)]
"""A 256-bit signed integer (Solidity `int256`)."""


def number_like_to_int(value: Any) -> int:
    """
    Convert a `NumberLike` value to an `int`.

    Strings are read as hex when prefixed with `0x` (optionally after a sign)
    and as decimal otherwise. Negative results are returned as such; callers
    that need unsigned values check the sign themselves.

    Raises:
        TypeError: If `value` is neither an int nor a string.
        ValueError: If a string is not a valid decimal or hex number.
    """
    # bool is an int subclass but never a meaningful request number.
    if isinstance(value, bool):
        raise TypeError("bool is not a number-like value")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        sign = 1
        if text[:1] in ("-", "+"):
            sign = -1 if text[0] == "-" else 1
            text = text[1:]
        if text[:2] in ("0x", "0X"):
            return sign * int(text[2:], 16)
        if not text.isdigit():
            raise ValueError(f"invalid number: {value!r}")
        return sign * int(text, 10)
    raise TypeError(f"{type(value).__name__} is not a number-like value")
