"""Payload codec: pack and unpack (fingerprint, public params, proof).

Layout: fingerprint[32] || public_params[var] || 0x404040 || proof[var]

The separator is a plain byte pattern, not an escape. When public_params
itself contains 0x404040 the first occurrence is taken as the boundary and
the split comes out wrong. Existing attestations depend on this layout, so
decode keeps the first-occurrence rule.
"""
from __future__ import annotations

from dataclasses import dataclass

from .protocol import FINGERPRINT_LEN, SEPARATOR, SEPARATOR_LEN


class PayloadError(ValueError):
    """Payload cannot be decoded."""

    code = "E_PAYLOAD"


class PayloadTooShort(PayloadError):
    code = "E_PAYLOAD_SHORT"


class SeparatorNotFound(PayloadError):
    code = "E_SEPARATOR_MISSING"


@dataclass(frozen=True)
class DecodedPayload:
    fingerprint: bytes
    public_params: bytes
    proof: bytes


def encode(fingerprint: bytes, public_params: bytes, proof: bytes) -> bytes:
    """Concatenate the three segments with the separator between params and proof."""
    if len(fingerprint) != FINGERPRINT_LEN:
        raise ValueError(
            f"Fingerprint must be {FINGERPRINT_LEN} bytes, got {len(fingerprint)}"
        )
    return bytes(fingerprint) + bytes(public_params) + SEPARATOR + bytes(proof)


def decode(payload: bytes) -> DecodedPayload:
    """Split a payload back into its segments.

    Raises PayloadTooShort when the fingerprint does not fit and
    SeparatorNotFound when no separator occurs at or after offset 32.
    """
    payload = bytes(payload)
    if len(payload) < FINGERPRINT_LEN:
        raise PayloadTooShort(
            f"Payload is {len(payload)} bytes, need at least {FINGERPRINT_LEN}"
        )

    sep_at = payload.find(SEPARATOR, FINGERPRINT_LEN)
    if sep_at == -1:
        raise SeparatorNotFound("Separator not found")

    return DecodedPayload(
        fingerprint=payload[:FINGERPRINT_LEN],
        public_params=payload[FINGERPRINT_LEN:sep_at],
        proof=payload[sep_at + SEPARATOR_LEN:],
    )
