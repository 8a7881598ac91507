"""Circuit attestation - encode path."""
