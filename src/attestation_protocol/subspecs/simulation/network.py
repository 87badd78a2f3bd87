"""
In-memory attestation network.

Collects submitted requests into voting rounds. Finalizing a round proves
every request in it against the in-memory ledgers, builds a Merkle tree over
the hashes of the proved responses, publishes the root and stamps each
response with its round and Merkle proof.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Mapping

from attestation_protocol.subspecs.codec import (
    decode_request,
    encode_request,
    message_integrity_code,
    request_bytes,
    response_hash,
)
from attestation_protocol.subspecs.merkle import MerkleTree
from attestation_protocol.subspecs.oracle.config import POLL_INTERVAL
from attestation_protocol.subspecs.requests import (
    AttestationRequest,
    AttestationRequestId,
    AttestationResponse,
    ObtainedProof,
)
from attestation_protocol.subspecs.schemes import DEFAULT_REGISTRY, SchemeRegistry
from attestation_protocol.types import (
    ZERO_BYTES32,
    AttestationRequestError,
    Bytes32,
    RoundNotFoundError,
    SchemeError,
)

from .chain import InMemoryLedger
from .prover import InMemoryAttestationProver

logger = logging.getLogger(__name__)


class FinalizationMode(Enum):
    """When the in-memory network finalizes its rounds."""

    AUTO = auto()
    """Every submission opens and immediately finalizes a round. Handy in unit tests."""

    ON_WAIT = auto()
    """Waiting for a round finalizes rounds up to it, like simple linear real usage."""

    MANUAL = auto()
    """Rounds are finalized only by calling `finalize_round`."""


@dataclass(slots=True)
class _FinalizedRound:
    proofs: dict[bytes, AttestationResponse]
    tree: MerkleTree


@dataclass(slots=True)
class InMemoryOracleNetwork:
    """An attestation network kept in memory, implementing `OracleNetworkClient`."""

    ledgers: Mapping[int, InMemoryLedger] = field(default_factory=dict)
    """Ledgers the network can prove facts about, by source id."""

    finalization_mode: FinalizationMode = FinalizationMode.AUTO
    registry: SchemeRegistry = DEFAULT_REGISTRY

    check_integrity: bool = True
    """Refuse to prove requests whose message integrity code does not match."""

    poll_interval: float = POLL_INTERVAL
    """Sleep between checks while waiting in MANUAL and AUTO modes."""

    rounds: list[list[bytes]] = field(default_factory=list)
    """Submitted request data per round."""

    _finalized: list[_FinalizedRound] = field(default_factory=list, init=False, repr=False)

    def add_ledger(self, source_id: int, ledger: InMemoryLedger) -> None:
        """Make `ledger` provable under `source_id`."""
        ledgers = dict(self.ledgers)
        ledgers[int(source_id)] = ledger
        self.ledgers = ledgers

    @property
    def finalized_round_count(self) -> int:
        """Number of finalized rounds. Rounds are finalized in order."""
        return len(self._finalized)

    def merkle_root(self, round: int) -> Bytes32 | None:
        """
        The published Merkle root of `round`, or None if it is not finalized.

        A finalized round without proved requests publishes the zero hash.
        """
        if round >= len(self._finalized):
            return None
        return self._finalized[round].tree.root or ZERO_BYTES32

    async def submit_request(
        self, request: AttestationRequest | bytes
    ) -> AttestationRequestId | None:
        """File a request into the current round. Malformed requests are rejected."""
        try:
            if isinstance(request, AttestationRequest):
                data = encode_request(request, self.registry)
            else:
                data = request_bytes(request)
            parsed = decode_request(data, self.registry)
        except (AttestationRequestError, SchemeError) as exc:
            logger.warning(f"Rejected attestation request: {exc}")
            return None

        if int(parsed.source_id) not in self.ledgers:
            logger.warning(f"Rejected attestation request for unknown source {parsed.source_id}")
            return None

        # Open a new round once the current one is finalized.
        if len(self._finalized) >= len(self.rounds):
            self.rounds.append([])
        round = len(self.rounds) - 1
        self.rounds[round].append(data)
        logger.debug(f"Request {parsed.attestation_type.name} filed into round {round}")

        if self.finalization_mode is FinalizationMode.AUTO:
            self.finalize_round()
        return AttestationRequestId(round=round, data=data)

    async def round_finalized(self, round: int) -> bool:
        return len(self._finalized) > round

    async def wait_for_round_finalization(self, round: int) -> None:
        if round >= len(self.rounds):
            raise RoundNotFoundError(round)
        while len(self._finalized) <= round:
            if self.finalization_mode is FinalizationMode.ON_WAIT:
                self.finalize_round()
            else:
                await asyncio.sleep(self.poll_interval)

    async def obtain_proof(self, round: int, request_data: bytes) -> ObtainedProof:
        if round >= len(self._finalized):
            return ObtainedProof(finalized=False, result=None)
        response = self._finalized[round].proofs.get(request_bytes(request_data))
        return ObtainedProof(finalized=True, result=response)

    def finalize_round(self) -> None:
        """
        Finalize the oldest unfinalized round.

        Does nothing when every round is already finalized.
        """
        round = len(self._finalized)
        if round >= len(self.rounds):
            return
        # Keep the finalizing round closed to new submissions.
        if round == len(self.rounds) - 1:
            self.rounds.append([])

        proved: dict[bytes, tuple[AttestationResponse, Bytes32]] = {}
        for data in self.rounds[round]:
            request = decode_request(data, self.registry)
            response = self._prove(request, round)
            if response is None:
                logger.warning(f"Round {round}: {request.attestation_type.name} request not proved")
                continue
            leaf = response_hash(request, response, registry=self.registry)
            if leaf is not None:
                proved[data] = (response, leaf)

        tree = MerkleTree(leaf for _, leaf in proved.values())
        proofs = {
            data: response.with_proof(round, tree.get_proof_for_value(leaf) or [])
            for data, (response, leaf) in proved.items()
        }
        self._finalized.append(_FinalizedRound(proofs=proofs, tree=tree))
        logger.info(
            f"Finalized round {round} with {len(proofs)} proved request(s), "
            f"root {(tree.root or ZERO_BYTES32).hex()}"
        )

    def _prove(self, request: AttestationRequest, round: int) -> AttestationResponse | None:
        ledger = self.ledgers.get(int(request.source_id))
        if ledger is None:
            return None
        response = InMemoryAttestationProver(ledger).prove(request)
        if response is None:
            return None

        if self.check_integrity:
            expected = Bytes32.left_padded(request.message_integrity_code)
            if expected != ZERO_BYTES32 and expected != message_integrity_code(
                request, response, registry=self.registry
            ):
                return None

        return response.model_copy(update={"state_connector_round": round})
