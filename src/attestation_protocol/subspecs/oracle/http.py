"""
HTTP client for an attestation network.

Talks to an attestation provider over a small JSON API:

- `POST /api/v0/requests` with `{"request": "0x.."}` answers
  `{"round": n, "data": "0x.."}`, or `null` / a 4xx status on rejection.
- `GET /api/v0/rounds/{round}` answers `{"finalized": bool}`.
- `POST /api/v0/proofs` with `{"round": n, "request": "0x.."}` answers
  `{"finalized": bool, "response": {...} | null}`.

Response bodies use the camelCase field names of the response models.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx
from pydantic import ValidationError

from attestation_protocol.subspecs.codec import (
    decode_request,
    encode_request,
    peek_attestation_type_and_source,
    request_bytes,
)
from attestation_protocol.subspecs.requests import (
    AttestationRequest,
    AttestationRequestId,
    ObtainedProof,
)
from attestation_protocol.subspecs.schemes import DEFAULT_REGISTRY, SchemeRegistry
from attestation_protocol.types import (
    OracleUnavailableError,
    RoundNotFoundError,
    to_hex,
)

from .config import (
    HTTP_TIMEOUT,
    MAX_POLL_INTERVAL,
    POLL_BACKOFF_FACTOR,
    POLL_INTERVAL,
    PROOFS_ENDPOINT,
    REQUESTS_ENDPOINT,
    ROUNDS_ENDPOINT,
)

logger = logging.getLogger(__name__)


class HttpOracleNetworkClient:
    """
    Attestation network client over HTTP.

    Owns an `httpx.AsyncClient` unless one is passed in. Use it as an async
    context manager, or call `aclose()` when done.
    """

    def __init__(
        self,
        base_url: str,
        registry: SchemeRegistry = DEFAULT_REGISTRY,
        timeout: float = HTTP_TIMEOUT,
        poll_interval: float = POLL_INTERVAL,
        max_poll_interval: float = MAX_POLL_INTERVAL,
        backoff_factor: float = POLL_BACKOFF_FACTOR,
        client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            base_url: Base URL of the attestation provider API.
            registry: Schemes used to encode requests and parse responses.
            timeout: Timeout of each HTTP request in seconds.
            poll_interval: First delay between finalization checks.
            max_poll_interval: Upper bound of the delay between checks.
            backoff_factor: Growth factor of the delay.
            client: An existing HTTP client to use instead of creating one.
            transport: Transport for the created HTTP client (tests use
                `httpx.MockTransport`).
        """
        if poll_interval <= 0 or max_poll_interval < poll_interval or backoff_factor < 1:
            raise ValueError("invalid polling configuration")

        self.base_url = base_url.rstrip("/")
        self.registry = registry
        self.poll_interval = poll_interval
        self.max_poll_interval = max_poll_interval
        self.backoff_factor = backoff_factor
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=self.base_url, timeout=timeout, transport=transport
        )

    async def __aenter__(self) -> HttpOracleNetworkClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    async def submit_request(
        self, request: AttestationRequest | bytes
    ) -> AttestationRequestId | None:
        """
        Submit a request. Returns None if the provider rejects it.

        Raises:
            OracleUnavailableError: If the provider cannot be reached or its
                reply is malformed.
        """
        if isinstance(request, AttestationRequest):
            data = encode_request(request, self.registry)
        else:
            # Validate locally so that garbage never reaches the provider.
            data = request_bytes(request)
            decode_request(data, self.registry)

        response = await self._send("POST", REQUESTS_ENDPOINT, json={"request": to_hex(data)})
        if response.is_client_error:
            logger.warning(
                f"Attestation request rejected with HTTP {response.status_code}: "
                f"{response.text[:200]}"
            )
            return None

        body = self._json(response)
        if body is None:
            logger.warning(f"Attestation request {to_hex(data)[:18]}... not accepted")
            return None

        try:
            request_id = AttestationRequestId(round=body["round"], data=body.get("data", data))
        except (KeyError, TypeError, ValidationError) as exc:
            raise OracleUnavailableError(f"Malformed submission reply: {exc}") from exc
        logger.info(f"Submitted attestation request in round {request_id.round}")
        return request_id

    async def round_finalized(self, round: int) -> bool:
        """Whether `round` is finalized. Unknown rounds are not finalized."""
        try:
            return await self._round_status(round)
        except RoundNotFoundError:
            return False

    async def wait_for_round_finalization(self, round: int) -> None:
        """
        Poll until `round` is finalized, backing off exponentially.

        Raises:
            RoundNotFoundError: If the provider does not know the round.
            OracleUnavailableError: If the provider cannot be reached.
        """
        interval = self.poll_interval
        while not await self._round_status(round):
            logger.debug(f"Round {round} not finalized yet, checking again in {interval:.1f}s")
            await asyncio.sleep(interval)
            interval = min(interval * self.backoff_factor, self.max_poll_interval)
        logger.info(f"Round {round} finalized")

    async def obtain_proof(self, round: int, request_data: bytes) -> ObtainedProof:
        """Fetch the response and Merkle proof of a request."""
        data = request_bytes(request_data)
        response = await self._send(
            "POST", PROOFS_ENDPOINT, json={"round": round, "request": to_hex(data)}
        )
        if response.is_client_error:
            raise OracleUnavailableError(
                f"HTTP error {response.status_code}: {response.text[:200]}"
            )

        body = self._object(response)
        finalized = bool(body.get("finalized", False))
        result_body = body.get("response")
        if not finalized or result_body is None:
            return ObtainedProof(finalized=finalized, result=None)

        attestation_type, _ = peek_attestation_type_and_source(data)
        scheme = self.registry.require(attestation_type)
        try:
            result = scheme.response_model.model_validate(result_body)
        except ValidationError as exc:
            raise OracleUnavailableError(
                f"Malformed {scheme.name} response in round {round}: {exc}"
            ) from exc
        return ObtainedProof(finalized=True, result=result)

    async def _round_status(self, round: int) -> bool:
        """Fetch the finalization flag of `round`."""
        response = await self._send("GET", f"{ROUNDS_ENDPOINT}/{round}")
        if response.status_code == 404:
            raise RoundNotFoundError(round)
        if response.is_client_error:
            raise OracleUnavailableError(
                f"HTTP error {response.status_code}: {response.text[:200]}"
            )
        body = self._object(response)
        return bool(body.get("finalized", False))

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """
        Send one request to the provider.

        Client errors are returned to the caller, which decides what they
        mean. Transport failures and server errors are raised.
        """
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.RequestError as exc:
            raise OracleUnavailableError(
                f"Network error while connecting to {self.base_url}{path}: {exc}"
            ) from exc

        if response.is_server_error:
            raise OracleUnavailableError(
                f"HTTP error {response.status_code}: {response.text[:200]}"
            )
        return response

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        """Parse a JSON body, treating an empty body as null."""
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise OracleUnavailableError(f"Invalid JSON from attestation provider: {exc}") from exc

    @classmethod
    def _object(cls, response: httpx.Response) -> dict[str, Any]:
        """Parse a JSON object body, treating an empty or null body as `{}`."""
        body = cls._json(response)
        if body is None:
            return {}
        if not isinstance(body, dict):
            raise OracleUnavailableError(
                f"Expected a JSON object from attestation provider, got {type(body).__name__}"
            )
        return body
