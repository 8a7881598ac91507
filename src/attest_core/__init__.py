"""Circuit attestation core - fingerprint, payload codec and ledger."""
from .codec import (
    DecodedPayload,
    PayloadError,
    PayloadTooShort,
    SeparatorNotFound,
    decode,
    encode,
)
from .fingerprint import compute_fingerprint, iter_artifact_files
from .ledger import LedgerError, Record, append_attestation, build_attestation, read_records

__all__ = [
    "DecodedPayload",
    "PayloadError",
    "PayloadTooShort",
    "SeparatorNotFound",
    "decode",
    "encode",
    "compute_fingerprint",
    "iter_artifact_files",
    "LedgerError",
    "Record",
    "append_attestation",
    "build_attestation",
    "read_records",
]
