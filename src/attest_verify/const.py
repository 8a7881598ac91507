ERRORS = {
  "E_PAYLOAD_SHORT": "Payload shorter than circuit fingerprint",
  "E_SEPARATOR_MISSING": "Separator not found",
  "E_CIRCUIT_MISMATCH": "Circuit ID mismatch",
}

MATCHED = "MATCHED"
MISMATCHED = "MISMATCHED"
MALFORMED = "MALFORMED"
