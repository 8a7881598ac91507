"""Circuit attestation - record verification."""
