import json
from pathlib import Path

import click
from dotenv import find_dotenv, load_dotenv

from attest_core.fingerprint import compute_fingerprint
from attest_core.ledger import CANONICAL_JSON_KW, LedgerError, read_records
from attest_core.protocol import (
    DEFAULT_CIRCUIT_PATH,
    DEFAULT_LEDGER_PATH,
    DEFAULT_PROOF_PATH,
    DEFAULT_PUB_PARAMS_PATH,
)
from .artifacts import ArtifactStore
from .logic import verify_records

@click.group()
def main():
    load_dotenv(find_dotenv(usecwd=True))

@main.command("records")
@click.option("--circuit", envvar="CIRCUIT_PATH", default=DEFAULT_CIRCUIT_PATH, show_default=True,
              type=click.Path(path_type=Path), help="Circuit build artifacts directory.")
@click.option("--ledger", envvar="ATTEST_LEDGER", default=DEFAULT_LEDGER_PATH, show_default=True,
              type=click.Path(dir_okay=False, path_type=Path), help="Attestation ledger.")
@click.option("--proof-out", envvar="PROOF_PATH", default=DEFAULT_PROOF_PATH, show_default=True,
              type=click.Path(dir_okay=False, path_type=Path), help="Where the matched proof is written (hex).")
@click.option("--pub-params-out", envvar="PUB_PARAMS_PATH", default=DEFAULT_PUB_PARAMS_PATH,
              show_default=True, type=click.Path(dir_okay=False, path_type=Path),
              help="Where the matched public parameters are written.")
@click.option("--no-signatures", is_flag=True, help="Skip attestation signature checks")
def records_cmd(circuit: Path, ledger: Path, proof_out: Path, pub_params_out: Path, no_signatures: bool):
    """Recover the proof for the local circuit from attested records."""
    try:
        circuit_id = compute_fingerprint(circuit)
        records = read_records(ledger, verify_signatures=not no_signatures)
        result = verify_records(circuit_id, records, ArtifactStore(proof_out, pub_params_out))
    except (OSError, LedgerError) as e:
        click.echo(f"FATAL: {e}", err=True)
        raise SystemExit(1)
    click.echo(json.dumps(result, **CANONICAL_JSON_KW))

if __name__ == "__main__":
    main()
