"""
Global configuration for the attestation protocol package.

This module contains environment-specific settings that apply across all subspecs.
"""

import os

_SUPPORTED_ATTESTATION_ENVS: list[str] = ["prod", "test"]

ATTESTATION_ENV = os.environ.get("ATTESTATION_ENV", "prod").lower()
"""The environment flag ('prod' or 'test'). Defaults to 'prod'."""

if ATTESTATION_ENV not in _SUPPORTED_ATTESTATION_ENVS:
    raise ValueError(
        f"Invalid ATTESTATION_ENV environment variable: '{ATTESTATION_ENV}'. "
        f"Supported values: {_SUPPORTED_ATTESTATION_ENVS}"
    )

MIC_SALT = os.environ.get("ATTESTATION_MIC_SALT", "Flare")
"""
Salt appended to the response hash when computing a message integrity code.

Must match the salt used by the attestation network the client talks to.
"""
