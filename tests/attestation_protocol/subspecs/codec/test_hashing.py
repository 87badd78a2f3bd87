"""Tests for response hashes and message integrity codes."""

from __future__ import annotations

from eth_abi import encode

from attestation_protocol.subspecs.codec import message_integrity_code, response_hash
from attestation_protocol.types import Bytes32, keccak256
from tests.attestation_protocol.helpers import (
    make_block_height_request,
    make_block_height_response,
    make_payment_request,
    make_payment_response,
)


class TestResponseHash:
    """Tests for response_hash."""

    def test_matches_abi_encoding(self) -> None:
        """The hash is Keccak-256 over the ABI-encoded prefix and fields."""
        request = make_block_height_request()
        response = make_block_height_response()
        expected = keccak256(
            encode(
                ["uint16", "uint32", "uint256", "uint64", "uint64", "uint8", "uint64", "uint64"],
                [3, 3, 7, 10, 1000, 6, 5, 900],
            )
        )
        assert response_hash(request, response) == expected

    def test_salt_is_appended_as_string(self) -> None:
        """A salt is hashed as a trailing ABI string."""
        request = make_block_height_request()
        response = make_block_height_response()
        expected = keccak256(
            encode(
                [
                    "uint16",
                    "uint32",
                    "uint256",
                    "uint64",
                    "uint64",
                    "uint8",
                    "uint64",
                    "uint64",
                    "string",
                ],
                [3, 3, 7, 10, 1000, 6, 5, 900, "salt"],
            )
        )
        assert response_hash(request, response, salt="salt") == expected

    def test_deterministic(self) -> None:
        """Hashing twice gives the same value."""
        request = make_payment_request()
        response = make_payment_response()
        assert response_hash(request, response) == response_hash(request, response)
        assert isinstance(response_hash(request, response), Bytes32)

    def test_field_change_changes_hash(self) -> None:
        """Changing any hashed field changes the hash."""
        request = make_payment_request()
        base = response_hash(request, make_payment_response())
        assert response_hash(request, make_payment_response(spent_amount=102)) != base
        assert response_hash(request, make_payment_response(one_to_one=False)) != base
        assert response_hash(request, make_payment_response(state_connector_round=6)) != base

    def test_salt_changes_hash(self) -> None:
        """Salted and unsalted hashes differ."""
        request = make_payment_request()
        response = make_payment_response()
        assert response_hash(request, response, salt="x") != response_hash(request, response)

    def test_empty_salt_is_not_appended(self) -> None:
        """An empty salt hashes like no salt at all."""
        request = make_payment_request()
        response = make_payment_response()
        assert response_hash(request, response, salt="") == response_hash(request, response)

    def test_negative_amounts(self) -> None:
        """Signed amounts hash without error."""
        request = make_payment_request()
        assert response_hash(request, make_payment_response(received_amount=-5)) is not None

    def test_incomplete_response(self) -> None:
        """A response missing a hashed field has no hash."""
        request = make_payment_request()
        assert response_hash(request, make_payment_response(status=None)) is None
        assert response_hash(request, make_payment_response(state_connector_round=None)) is None

    def test_mapping_response(self) -> None:
        """A camelCase mapping hashes like the model it came from."""
        request = make_payment_request()
        response = make_payment_response()
        as_json = response.model_dump(mode="json", by_alias=True)
        assert response_hash(request, as_json) == response_hash(request, response)

    def test_merkle_proof_not_hashed(self) -> None:
        """The Merkle proof is not part of the hash."""
        request = make_payment_request()
        response = make_payment_response()
        proved = response.with_proof(5, [Bytes32(b"\x01" * 32)])
        assert response_hash(request, proved) == response_hash(request, response)


class TestMessageIntegrityCode:
    """Tests for message_integrity_code."""

    def test_is_salted_hash_at_round_zero(self) -> None:
        """The code is the salted hash of the response at round 0."""
        request = make_payment_request()
        response = make_payment_response(state_connector_round=0)
        assert message_integrity_code(request, response) == response_hash(
            request, response, salt="Flare"
        )

    def test_ignores_round(self) -> None:
        """Responses differing only in round have the same code."""
        request = make_payment_request()
        assert message_integrity_code(
            request, make_payment_response(state_connector_round=5)
        ) == message_integrity_code(request, make_payment_response(state_connector_round=900))

    def test_anticipated_response_without_round(self) -> None:
        """An anticipated response need not carry a round."""
        request = make_payment_request()
        assert message_integrity_code(
            request, make_payment_response(state_connector_round=None)
        ) is not None

    def test_custom_salt(self) -> None:
        """Another salt gives another code."""
        request = make_payment_request()
        response = make_payment_response()
        assert message_integrity_code(request, response, salt="Other") != message_integrity_code(
            request, response
        )

    def test_differs_from_leaf(self) -> None:
        """The code is not the unsalted Merkle leaf."""
        request = make_payment_request()
        response = make_payment_response(state_connector_round=0)
        assert message_integrity_code(request, response) != response_hash(request, response)
