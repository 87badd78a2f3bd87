"""
Attestation network client configuration constants.

Polling and HTTP parameters used while talking to the attestation network.
"""

from __future__ import annotations

from typing import Final

POLL_INTERVAL: Final[float] = 1.0
"""Initial delay between round finalization checks, in seconds."""

MAX_POLL_INTERVAL: Final[float] = 30.0
"""Upper bound of the delay between round finalization checks, in seconds."""

POLL_BACKOFF_FACTOR: Final[float] = 2.0
"""Factor applied to the polling delay after each unfinalized check."""

HTTP_TIMEOUT: Final[float] = 30.0
"""Timeout of a single HTTP request to the attestation network, in seconds."""

REQUESTS_ENDPOINT: Final[str] = "/api/v0/requests"
"""Endpoint where encoded requests are submitted."""

ROUNDS_ENDPOINT: Final[str] = "/api/v0/rounds"
"""Endpoint reporting the status of a voting round, followed by the round id."""

PROOFS_ENDPOINT: Final[str] = "/api/v0/proofs"
"""Endpoint returning the response and Merkle proof of a request."""
