"""Tests for typed requests, responses and network handles."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from attestation_protocol.subspecs.requests import (
    AttestationRequestId,
    AttestationType,
    ConfirmedBlockHeightExistsResponse,
    ObtainedProof,
    PaymentRequest,
    get_attestation_type_name,
)
from attestation_protocol.subspecs.sources import SourceId
from attestation_protocol.types import Bytes32
from tests.attestation_protocol.helpers import (
    make_block_height_response,
    make_bytes32,
    make_payment_request,
)


class TestAttestationType:
    """Tests for attestation type ids."""

    def test_names(self) -> None:
        """Known ids have names, unknown ones do not."""
        assert get_attestation_type_name(1) == "PAYMENT"
        assert get_attestation_type_name(4) == "REFERENCED_PAYMENT_NONEXISTENCE"
        assert get_attestation_type_name(99) is None


class TestRequests:
    """Tests for request models."""

    def test_type_defaults_to_class(self) -> None:
        """Each request class fills in its own attestation type."""
        assert make_payment_request().attestation_type is AttestationType.PAYMENT

    def test_type_must_match_class(self) -> None:
        """A request class refuses another attestation type."""
        with pytest.raises(ValidationError, match="requires attestation type PAYMENT"):
            make_payment_request(attestation_type=AttestationType.CONFIRMED_BLOCK_HEIGHT_EXISTS)

    def test_number_like_kept_as_given(self) -> None:
        """Number-like fields keep their textual form."""
        assert make_payment_request(block_number="0xA").block_number == "0xA"

    def test_bytes_from_hex(self) -> None:
        """Byte fields accept hex text."""
        assert make_payment_request(id="0x01").id == b"\x01"

    def test_camel_case_input(self) -> None:
        """Requests can be built from camelCase keys."""
        request = PaymentRequest.model_validate(
            {
                "sourceId": 3,
                "messageIntegrityCode": "0x00",
                "id": "0x01",
                "blockNumber": 1,
                "inUtxo": 0,
                "utxo": 0,
            }
        )
        assert request.source_id is SourceId.XRP

    def test_unknown_fields_rejected(self) -> None:
        """Requests have no room for extra fields."""
        with pytest.raises(ValidationError):
            make_payment_request(gas=1)

    def test_unknown_source_rejected(self) -> None:
        """The source id must be a known source."""
        with pytest.raises(ValidationError):
            make_payment_request(source_id=42)

    def test_immutable(self) -> None:
        """Requests cannot be changed after construction."""
        request = make_payment_request()
        with pytest.raises(ValidationError):
            request.utxo = 5  # type: ignore[misc]


class TestResponses:
    """Tests for response models."""

    def test_unproved_until_proof_attached(self) -> None:
        """A response is proved only once it carries a Merkle proof."""
        response = make_block_height_response()
        assert not response.is_proved
        proved = response.with_proof(9, [])
        assert proved.is_proved
        assert proved.state_connector_round == 9
        assert not response.is_proved

    def test_camel_case_serialization(self) -> None:
        """Responses serialize with camelCase keys and hex bytes."""
        proved = make_block_height_response().with_proof(7, [make_bytes32(1)])
        body = proved.model_dump(mode="json", by_alias=True)
        assert body["stateConnectorRound"] == 7
        assert body["numberOfConfirmations"] == 6
        assert body["merkleProof"] == ["0x" + "01" * 32]

    def test_parse_ignores_unknown_keys(self) -> None:
        """Extra keys from a provider are ignored."""
        response = ConfirmedBlockHeightExistsResponse.model_validate(
            {"blockNumber": 3, "votingRound": 1}
        )
        assert response.block_number == 3
        assert response.block_timestamp is None

    def test_range_checked(self) -> None:
        """Integer fields respect their Solidity width."""
        with pytest.raises(ValidationError):
            make_block_height_response(number_of_confirmations=256)


class TestHandles:
    """Tests for request ids and obtained proofs."""

    def test_request_id_from_hex(self) -> None:
        """Request ids accept hex request data."""
        request_id = AttestationRequestId(round=2, data="0x0001")
        assert request_id.data == b"\x00\x01"

    def test_obtained_proof_keeps_response_type(self) -> None:
        """The typed response survives inside an obtained proof."""
        response = make_block_height_response().with_proof(1, [Bytes32.zero()])
        obtained = ObtainedProof(finalized=True, result=response)
        assert isinstance(obtained.result, ConfirmedBlockHeightExistsResponse)
