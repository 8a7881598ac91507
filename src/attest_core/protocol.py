"""Circuit attestation protocol constants.

Single source of truth for the payload layout and default artifact locations.
Keep this file stable. Attester and Verifier must remain synchronized.
"""
import hashlib

# Payload: [Fingerprint(32) | PublicParams(var) | Separator(3) | Proof(var)]
FINGERPRINT_LEN = 32
SEPARATOR = b"\x40\x40\x40"
SEPARATOR_LEN = len(SEPARATOR)

# Streaming read size for the circuit fingerprint
HASH_CHUNK_SIZE = 1024

# Attestation schema
DEFAULT_SCHEMA = "bytes32 circuitId, bytes pubArgs, bytes proof"
SCHEMA_ID = hashlib.sha256(DEFAULT_SCHEMA.encode("utf-8")).digest()

# Default locations (relative to the working directory)
DEFAULT_CIRCUIT_PATH = "circuit/target"
DEFAULT_PROOF_PATH = "circuit/proofs/circuit.proof"
DEFAULT_PUB_PARAMS_PATH = "circuit/Verifier.toml"
DEFAULT_LEDGER_PATH = "attestations.jsonl"
