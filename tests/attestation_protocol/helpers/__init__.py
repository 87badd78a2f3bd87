"""Test helpers for attestation protocol unit tests."""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from typing import TypeVar

from .builders import (
    ALICE,
    BOB,
    CAROL,
    GENESIS_TIMESTAMP,
    TEST_SOURCE,
    make_block_height_request,
    make_block_height_response,
    make_bytes32,
    make_ledger,
    make_nonexistence_request,
    make_payment_request,
    make_payment_response,
)
from .mocks import MockOracleNetwork

_T = TypeVar("_T")


def run_async(coro: Coroutine[object, object, _T]) -> _T:
    """Run an async coroutine synchronously."""
    return asyncio.run(coro)


__all__ = [
    # Builders
    "ALICE",
    "BOB",
    "CAROL",
    "GENESIS_TIMESTAMP",
    "TEST_SOURCE",
    "make_block_height_request",
    "make_block_height_response",
    "make_bytes32",
    "make_ledger",
    "make_nonexistence_request",
    "make_payment_request",
    "make_payment_response",
    # Mocks
    "MockOracleNetwork",
    # Utilities
    "run_async",
]
