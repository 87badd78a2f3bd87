"""Typed attestation requests and responses, one variant per attestation type."""

from .attestation_type import AttestationType, get_attestation_type_name
from .ids import AttestationRequestId, ObtainedProof
from .request import (
    AttestationRequest,
    BalanceDecreasingTransactionRequest,
    ConfirmedBlockHeightExistsRequest,
    PaymentRequest,
    ReferencedPaymentNonexistenceRequest,
)
from .response import (
    AttestationResponse,
    BalanceDecreasingTransactionResponse,
    ConfirmedBlockHeightExistsResponse,
    PaymentResponse,
    ReferencedPaymentNonexistenceResponse,
)

__all__ = [
    "AttestationType",
    "get_attestation_type_name",
    # Requests
    "AttestationRequest",
    "PaymentRequest",
    "BalanceDecreasingTransactionRequest",
    "ConfirmedBlockHeightExistsRequest",
    "ReferencedPaymentNonexistenceRequest",
    # Responses
    "AttestationResponse",
    "PaymentResponse",
    "BalanceDecreasingTransactionResponse",
    "ConfirmedBlockHeightExistsResponse",
    "ReferencedPaymentNonexistenceResponse",
    # Network handles
    "AttestationRequestId",
    "ObtainedProof",
]
