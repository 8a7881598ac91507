"""Circuit attestation - fingerprint and submit."""
from __future__ import annotations

import json
from pathlib import Path

import click
from dotenv import find_dotenv, load_dotenv

from attest_core.fingerprint import compute_fingerprint
from attest_core.ledger import CANONICAL_JSON_KW, DEMO_SIGNING_SEED
from attest_core.protocol import (
    DEFAULT_CIRCUIT_PATH,
    DEFAULT_LEDGER_PATH,
    DEFAULT_PROOF_PATH,
    DEFAULT_PUB_PARAMS_PATH,
)
from attest_verify.artifacts import ArtifactStore
from .logic import create_attestation


def _fatal(e: Exception) -> None:
    # Fail closed, with a single-line reason.
    click.echo(f"FATAL: {e}", err=True)
    raise SystemExit(1)


def _parse_seed(ctx, param, value: str) -> bytes:
    try:
        seed = bytes.fromhex(value)
    except ValueError:
        raise click.BadParameter("must be hex")
    if len(seed) != 32:
        raise click.BadParameter("must be 32 bytes")
    return seed


circuit_option = click.option(
    "--circuit",
    envvar="CIRCUIT_PATH",
    default=DEFAULT_CIRCUIT_PATH,
    show_default=True,
    type=click.Path(path_type=Path),
    help="Circuit build artifacts directory.",
)


@click.group()
def main():
    load_dotenv(find_dotenv(usecwd=True))


@main.command("fingerprint")
@circuit_option
def fingerprint_cmd(circuit: Path):
    """Print the circuit id."""
    try:
        circuit_id = compute_fingerprint(circuit)
    except OSError as e:
        _fatal(e)
    click.echo(circuit_id.hex())


@main.command("submit")
@circuit_option
@click.option("--proof", envvar="PROOF_PATH", default=DEFAULT_PROOF_PATH, show_default=True,
              type=click.Path(path_type=Path), help="Hex-encoded proof file.")
@click.option("--pub-params", envvar="PUB_PARAMS_PATH", default=DEFAULT_PUB_PARAMS_PATH,
              show_default=True, type=click.Path(path_type=Path), help="Public parameters file.")
@click.option("--ledger", envvar="ATTEST_LEDGER", default=DEFAULT_LEDGER_PATH, show_default=True,
              type=click.Path(dir_okay=False, path_type=Path), help="Attestation ledger.")
@click.option("--seed", envvar="ATTEST_SIGNING_SEED", default=DEMO_SIGNING_SEED.hex(),
              callback=_parse_seed, help="Attester ed25519 seed (hex).")
def submit_cmd(circuit: Path, proof: Path, pub_params: Path, ledger: Path, seed: bytes):
    """Attest the current proof for the local circuit."""
    store = ArtifactStore(proof_path=proof, pub_params_path=pub_params)
    try:
        summary = create_attestation(circuit, store, ledger, seed)
    except (OSError, ValueError) as e:
        _fatal(e)
    click.echo(json.dumps(summary, **CANONICAL_JSON_KW))


if __name__ == "__main__":
    main()
