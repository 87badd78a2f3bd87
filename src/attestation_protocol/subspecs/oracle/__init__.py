"""Attestation network clients."""

from .http import HttpOracleNetworkClient
from .interface import OracleNetworkClient

__all__ = [
    "OracleNetworkClient",
    "HttpOracleNetworkClient",
]
