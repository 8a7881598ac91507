"""Persisted proof material.

The proof is stored as hex text, public parameters as raw bytes.
"""
from __future__ import annotations

import string
from pathlib import Path

from attest_core.protocol import DEFAULT_PROOF_PATH, DEFAULT_PUB_PARAMS_PATH

_HEXDIGITS = frozenset(string.hexdigits)


class ArtifactError(ValueError):
    """Persisted artifact is corrupted."""


def hex_encode(data: bytes) -> str:
    return bytes(data).hex()


def hex_decode(text: str) -> bytes:
    t = text.strip()
    # bytes.fromhex tolerates inner whitespace; stored proofs never contain any.
    if len(t) % 2 or not _HEXDIGITS.issuperset(t):
        raise ArtifactError(f"Invalid hex text ({len(t)} chars)")
    return bytes.fromhex(t)


class ArtifactStore:
    """Reads and writes the proof and public parameters of one circuit."""

    def __init__(
        self,
        proof_path: Path = Path(DEFAULT_PROOF_PATH),
        pub_params_path: Path = Path(DEFAULT_PUB_PARAMS_PATH),
    ):
        self.proof_path = Path(proof_path)
        self.pub_params_path = Path(pub_params_path)

    def load_proof(self) -> bytes:
        try:
            return hex_decode(self.proof_path.read_text(encoding="ascii"))
        except UnicodeDecodeError as e:
            raise ArtifactError(f"Proof file is not hex text: {self.proof_path}") from e

    def save_proof(self, data: bytes) -> None:
        self.proof_path.parent.mkdir(parents=True, exist_ok=True)
        self.proof_path.write_text(hex_encode(data), encoding="ascii")

    def load_public_params(self) -> bytes:
        return self.pub_params_path.read_bytes()

    def save_public_params(self, data: bytes) -> None:
        self.pub_params_path.parent.mkdir(parents=True, exist_ok=True)
        self.pub_params_path.write_bytes(bytes(data))
