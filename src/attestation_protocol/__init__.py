"""Client and codec for the state connector attestation protocol."""
