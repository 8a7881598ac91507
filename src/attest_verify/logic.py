from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable
from warnings import warn

from attest_core.codec import PayloadError, decode
from attest_core.ledger import Record
from .artifacts import ArtifactStore
from .const import ERRORS, MALFORMED, MATCHED, MISMATCHED


@dataclass(frozen=True)
class Outcome:
    record_id: str
    status: str
    code: str | None = None
    public_params: bytes | None = None
    proof: bytes | None = None
    detail: str | None = None

    def to_dict(self) -> dict:
        d = {"record_id": self.record_id, "status": self.status}
        if self.code is not None:
            d["code"] = self.code
            d["message"] = ERRORS[self.code]
        if self.detail is not None:
            d["detail"] = self.detail
        if self.status == MATCHED:
            d["public_params_len"] = len(self.public_params)
            d["proof_len"] = len(self.proof)
        return d


def classify(local_fingerprint: bytes, record: Record) -> Outcome:
    """Decode one record and compare its circuit id to ours."""
    try:
        decoded = decode(record.payload)
    except PayloadError as e:
        return Outcome(record.id, MALFORMED, code=e.code, detail=str(e))

    if decoded.fingerprint != local_fingerprint:
        return Outcome(
            record.id,
            MISMATCHED,
            code="E_CIRCUIT_MISMATCH",
            detail=decoded.fingerprint.hex(),
        )

    return Outcome(
        record.id,
        MATCHED,
        public_params=decoded.public_params,
        proof=decoded.proof,
    )


def match_records(local_fingerprint: bytes, records: Iterable[Record]) -> list[Outcome]:
    """One outcome per record, in the order the records were supplied."""
    return [classify(local_fingerprint, r) for r in records]


def verify_records(
    local_fingerprint: bytes,
    records: Iterable[Record],
    store: ArtifactStore,
) -> dict:
    """Match records against the local circuit and persist every match.

    Matches are written in record order, so the last matching record is
    what remains on disk. Persistence errors propagate and end the run.
    """
    outcomes = match_records(local_fingerprint, records)
    counts = {MATCHED: 0, MISMATCHED: 0, MALFORMED: 0}
    winner: str | None = None

    for o in outcomes:
        counts[o.status] += 1
        if o.status == MATCHED:
            store.save_public_params(o.public_params)
            store.save_proof(o.proof)
            winner = o.record_id
        elif o.status == MISMATCHED:
            warn(f"{ERRORS[o.code]} in attestation {o.record_id}. Skipping.")
        else:
            warn(f"Malformed attestation {o.record_id}: {o.detail}. Skipping.")

    return {
        "status": "PASS" if winner is not None else "NO_MATCH",
        "local_fingerprint": local_fingerprint.hex(),
        "record_count": len(outcomes),
        "matched": counts[MATCHED],
        "mismatched": counts[MISMATCHED],
        "malformed": counts[MALFORMED],
        "winner": winner,
        "outcomes": [o.to_dict() for o in outcomes],
    }
