"""
The attestation type definitions.

Each definition is tagged `t-<5-digit id>-<slug>`; the registry checks the
number in the tag against the declared id when the definitions are loaded.
"""

from __future__ import annotations

from attestation_protocol.subspecs.requests import (
    AttestationType,
    BalanceDecreasingTransactionRequest,
    BalanceDecreasingTransactionResponse,
    ConfirmedBlockHeightExistsRequest,
    ConfirmedBlockHeightExistsResponse,
    PaymentRequest,
    PaymentResponse,
    ReferencedPaymentNonexistenceRequest,
    ReferencedPaymentNonexistenceResponse,
)
from attestation_protocol.subspecs.sources import SourceId

from .fields import RequestFieldKind, RequestFieldSpec, ResponseFieldSpec
from .scheme import AttestationTypeScheme

ALL_SOURCES: frozenset[SourceId] = frozenset(SourceId)
"""Every attestation type is defined for all known source ledgers."""

_BYTES = RequestFieldKind.BYTE_SEQUENCE_LIKE
_NUMBER = RequestFieldKind.NUMBER_LIKE


PAYMENT = AttestationTypeScheme(
    id=AttestationType.PAYMENT,
    name="Payment",
    tag="t-00001-payment",
    supported_sources=ALL_SOURCES,
    request=(
        RequestFieldSpec(key="id", byte_size=32, kind=_BYTES, description="Transaction hash."),
        RequestFieldSpec(
            key="blockNumber", byte_size=4, kind=_NUMBER, description="Transaction block number."
        ),
        RequestFieldSpec(
            key="inUtxo", byte_size=1, kind=_NUMBER, description="Index of the source address."
        ),
        RequestFieldSpec(
            key="utxo", byte_size=1, kind=_NUMBER, description="Index of the receiving address."
        ),
    ),
    response_hash=(
        ResponseFieldSpec(key="blockNumber", solidity_type="uint64"),
        ResponseFieldSpec(key="blockTimestamp", solidity_type="uint64"),
        ResponseFieldSpec(key="transactionHash", solidity_type="bytes32"),
        ResponseFieldSpec(key="inUtxo", solidity_type="uint8"),
        ResponseFieldSpec(key="utxo", solidity_type="uint8"),
        ResponseFieldSpec(key="sourceAddressHash", solidity_type="bytes32"),
        ResponseFieldSpec(key="intendedSourceAddressHash", solidity_type="bytes32"),
        ResponseFieldSpec(key="receivingAddressHash", solidity_type="bytes32"),
        ResponseFieldSpec(key="intendedReceivingAddressHash", solidity_type="bytes32"),
        ResponseFieldSpec(key="spentAmount", solidity_type="int256"),
        ResponseFieldSpec(key="intendedSpentAmount", solidity_type="int256"),
        ResponseFieldSpec(key="receivedAmount", solidity_type="int256"),
        ResponseFieldSpec(key="intendedReceivedAmount", solidity_type="int256"),
        ResponseFieldSpec(key="paymentReference", solidity_type="bytes32"),
        ResponseFieldSpec(key="oneToOne", solidity_type="bool"),
        ResponseFieldSpec(key="status", solidity_type="uint8"),
    ),
    request_model=PaymentRequest,
    response_model=PaymentResponse,
)


BALANCE_DECREASING_TRANSACTION = AttestationTypeScheme(
    id=AttestationType.BALANCE_DECREASING_TRANSACTION,
    name="BalanceDecreasingTransaction",
    tag="t-00002-balance-decreasing-transaction",
    supported_sources=ALL_SOURCES,
    request=(
        RequestFieldSpec(key="id", byte_size=32, kind=_BYTES, description="Transaction hash."),
        RequestFieldSpec(
            key="blockNumber", byte_size=4, kind=_NUMBER, description="Transaction block number."
        ),
        RequestFieldSpec(
            key="sourceAddressIndicator",
            byte_size=32,
            kind=_BYTES,
            description="Source address hash or UTXO input index.",
        ),
    ),
    response_hash=(
        ResponseFieldSpec(key="blockNumber", solidity_type="uint64"),
        ResponseFieldSpec(key="blockTimestamp", solidity_type="uint64"),
        ResponseFieldSpec(key="transactionHash", solidity_type="bytes32"),
        ResponseFieldSpec(key="sourceAddressIndicator", solidity_type="bytes32"),
        ResponseFieldSpec(key="sourceAddressHash", solidity_type="bytes32"),
        ResponseFieldSpec(key="spentAmount", solidity_type="int256"),
        ResponseFieldSpec(key="paymentReference", solidity_type="bytes32"),
    ),
    request_model=BalanceDecreasingTransactionRequest,
    response_model=BalanceDecreasingTransactionResponse,
)


CONFIRMED_BLOCK_HEIGHT_EXISTS = AttestationTypeScheme(
    id=AttestationType.CONFIRMED_BLOCK_HEIGHT_EXISTS,
    name="ConfirmedBlockHeightExists",
    tag="t-00003-confirmed-block-height-exists",
    supported_sources=ALL_SOURCES,
    request=(
        RequestFieldSpec(
            key="blockNumber", byte_size=4, kind=_NUMBER, description="Block number to prove."
        ),
        RequestFieldSpec(
            key="queryWindow",
            byte_size=4,
            kind=_NUMBER,
            description="Period in seconds considered for sampling block production.",
        ),
    ),
    response_hash=(
        ResponseFieldSpec(key="blockNumber", solidity_type="uint64"),
        ResponseFieldSpec(key="blockTimestamp", solidity_type="uint64"),
        ResponseFieldSpec(key="numberOfConfirmations", solidity_type="uint8"),
        ResponseFieldSpec(key="lowestQueryWindowBlockNumber", solidity_type="uint64"),
        ResponseFieldSpec(key="lowestQueryWindowBlockTimestamp", solidity_type="uint64"),
    ),
    request_model=ConfirmedBlockHeightExistsRequest,
    response_model=ConfirmedBlockHeightExistsResponse,
)


REFERENCED_PAYMENT_NONEXISTENCE = AttestationTypeScheme(
    id=AttestationType.REFERENCED_PAYMENT_NONEXISTENCE,
    name="ReferencedPaymentNonexistence",
    tag="t-00004-referenced-payment-nonexistence",
    supported_sources=ALL_SOURCES,
    request=(
        RequestFieldSpec(
            key="minimalBlockNumber", byte_size=4, kind=_NUMBER, description="First searched block."
        ),
        RequestFieldSpec(
            key="deadlineBlockNumber", byte_size=4, kind=_NUMBER, description="Deadline block."
        ),
        RequestFieldSpec(
            key="deadlineTimestamp", byte_size=4, kind=_NUMBER, description="Deadline timestamp."
        ),
        RequestFieldSpec(
            key="destinationAddressHash",
            byte_size=32,
            kind=_BYTES,
            description="Standardized hash of the destination address.",
        ),
        RequestFieldSpec(key="amount", byte_size=16, kind=_NUMBER, description="Minimal amount."),
        RequestFieldSpec(
            key="paymentReference", byte_size=32, kind=_BYTES, description="Payment reference."
        ),
    ),
    response_hash=(
        ResponseFieldSpec(key="deadlineBlockNumber", solidity_type="uint64"),
        ResponseFieldSpec(key="deadlineTimestamp", solidity_type="uint64"),
        ResponseFieldSpec(key="destinationAddressHash", solidity_type="bytes32"),
        ResponseFieldSpec(key="paymentReference", solidity_type="bytes32"),
        ResponseFieldSpec(key="amount", solidity_type="uint128"),
        ResponseFieldSpec(key="lowerBoundaryBlockNumber", solidity_type="uint64"),
        ResponseFieldSpec(key="lowerBoundaryBlockTimestamp", solidity_type="uint64"),
        ResponseFieldSpec(key="firstOverflowBlockNumber", solidity_type="uint64"),
        ResponseFieldSpec(key="firstOverflowBlockTimestamp", solidity_type="uint64"),
    ),
    request_model=ReferencedPaymentNonexistenceRequest,
    response_model=ReferencedPaymentNonexistenceResponse,
)


DEFINITIONS: tuple[AttestationTypeScheme, ...] = (
    PAYMENT,
    BALANCE_DECREASING_TRANSACTION,
    CONFIRMED_BLOCK_HEIGHT_EXISTS,
    REFERENCED_PAYMENT_NONEXISTENCE,
)
"""The built-in attestation types, in id order."""
