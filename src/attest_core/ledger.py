"""Local attestation ledger.

An append-only JSON-lines file standing in for the on-chain attestation log.
Each line is one signed attestation whose `data` field carries a payload.
The submission side appends entries; the verification side reads them back
as Records.
"""
from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass
from pathlib import Path

from nacl.exceptions import BadSignatureError
from nacl.signing import SigningKey, VerifyKey

from .protocol import SCHEMA_ID

# Deterministic demo attester key, the local counterpart of a well-known
# test mnemonic. Override through configuration for anything real.
DEMO_SIGNING_SEED = bytes.fromhex(
    "4a1f0c7e3b9d2a6f8e5c1d0b7a39f4e2c6d8b0a1e3f5c7d9b2a4e6f8c0d1e3f5"
)

ZERO_RECIPIENT = "00" * 20

CANONICAL_JSON_KW = {"sort_keys": True, "separators": (",", ":"), "ensure_ascii": False}

BODY_FIELDS = ("attester", "data", "recipient", "revocable", "schema")
ENTRY_FIELDS = BODY_FIELDS + ("sig", "uid")


class LedgerError(ValueError):
    """Ledger content is unreadable or fails authentication."""


@dataclass(frozen=True)
class Record:
    """A retrieved attestation resolved to its id and raw payload."""

    id: str
    payload: bytes


def _canonical_json_bytes(obj) -> bytes:
    return json.dumps(obj, **CANONICAL_JSON_KW).encode("utf-8")


def _uid(body_bytes: bytes, sig: bytes) -> str:
    return hashlib.sha256(body_bytes + sig).hexdigest()


def build_attestation(
    payload: bytes,
    signing_seed: bytes = DEMO_SIGNING_SEED,
    schema_id: bytes = SCHEMA_ID,
) -> dict:
    """Wrap a payload in a signed ledger entry."""
    sk = SigningKey(signing_seed)
    body = {
        "attester": sk.verify_key.encode().hex(),
        "data": bytes(payload).hex(),
        "recipient": ZERO_RECIPIENT,
        "revocable": False,
        "schema": schema_id.hex(),
    }
    body_bytes = _canonical_json_bytes(body)
    sig = sk.sign(body_bytes).signature
    return dict(body, sig=sig.hex(), uid=_uid(body_bytes, sig))


def append_attestation(ledger_path: Path, entry: dict) -> None:
    ledger_path = Path(ledger_path)
    ledger_path.parent.mkdir(parents=True, exist_ok=True)
    with open(ledger_path, "ab") as f:
        f.write(_canonical_json_bytes(entry) + b"\n")


def _verify_entry(entry: dict, lineno: int) -> None:
    body_bytes = _canonical_json_bytes({k: entry[k] for k in BODY_FIELDS})
    try:
        vk = VerifyKey(bytes.fromhex(entry["attester"]))
        sig = bytes.fromhex(entry["sig"])
        vk.verify(body_bytes, sig)
    except (ValueError, TypeError, BadSignatureError) as e:
        raise LedgerError(f"Line {lineno}: attestation signature invalid ({e})") from e
    if _uid(body_bytes, sig) != entry["uid"]:
        raise LedgerError(f"Line {lineno}: attestation uid does not match its content")


def read_records(ledger_path: Path, verify_signatures: bool = True) -> list[Record]:
    """Read every attestation in ledger order.

    Any unreadable entry fails the whole read: a ledger that cannot be
    trusted as a sequence is not partially consumed.
    """
    records: list[Record] = []
    with open(ledger_path, "rb") as f:
        for lineno, raw in enumerate(f, start=1):
            try:
                line = raw.decode("utf-8")
            except UnicodeDecodeError as e:
                raise LedgerError(f"Line {lineno}: not UTF-8") from e
            if not line.strip():
                continue
            try:
                entry = json.loads(line)
            except json.JSONDecodeError as e:
                raise LedgerError(f"Line {lineno}: invalid JSON ({e})") from e
            if not isinstance(entry, dict):
                raise LedgerError(f"Line {lineno}: entry is not an object")
            missing = [k for k in ENTRY_FIELDS if k not in entry]
            if missing:
                raise LedgerError(f"Line {lineno}: missing fields {missing}")

            if verify_signatures:
                _verify_entry(entry, lineno)

            try:
                payload = bytes.fromhex(entry["data"])
            except (ValueError, TypeError) as e:
                raise LedgerError(f"Line {lineno}: data is not hex ({e})") from e
            records.append(Record(id=str(entry["uid"]), payload=payload))
    return records
