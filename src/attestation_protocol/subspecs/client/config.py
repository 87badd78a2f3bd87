"""
Attestation client configuration constants.

Defaults used when building requests from ledger data.
"""

from __future__ import annotations

from typing import Final

DEFAULT_QUERY_WINDOW: Final[int] = 86400
"""Query window of confirmed block height requests, in seconds (one day)."""

DEFAULT_FINALIZATION_TIMEOUT: Final[float | None] = None
"""
Bound on waiting for round finalization, in seconds.

None waits indefinitely; callers may still cancel the surrounding task.
"""
