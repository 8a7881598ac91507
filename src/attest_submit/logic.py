"""Attestation creation: bind the local circuit id to its proof material."""
from __future__ import annotations

from pathlib import Path

from attest_core.codec import encode
from attest_core.fingerprint import compute_fingerprint
from attest_core.ledger import DEMO_SIGNING_SEED, append_attestation, build_attestation
from attest_verify.artifacts import ArtifactStore


def create_attestation(
    circuit_path: Path,
    store: ArtifactStore,
    ledger_path: Path,
    signing_seed: bytes = DEMO_SIGNING_SEED,
) -> dict:
    """Fingerprint the circuit, pack it with the stored proof and attest it."""
    circuit_id = compute_fingerprint(circuit_path)
    pub_params = store.load_public_params()
    proof = store.load_proof()

    payload = encode(circuit_id, pub_params, proof)
    entry = build_attestation(payload, signing_seed)
    append_attestation(ledger_path, entry)

    return {
        "uid": entry["uid"],
        "circuit_id": circuit_id.hex(),
        "payload_len": len(payload),
        "ledger": str(ledger_path),
    }
