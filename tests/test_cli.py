import json
import os
import subprocess
import sys
from pathlib import Path

import pytest
from click.testing import CliRunner

from attest_core.fingerprint import compute_fingerprint
from attest_core.ledger import append_attestation, build_attestation
from attest_core.codec import encode
from attest_submit.cli import main as attest_main
from attest_verify.cli import main as verify_main


CONFIG_VARS = {"CIRCUIT_PATH", "PROOF_PATH", "PUB_PARAMS_PATH", "ATTEST_LEDGER", "ATTEST_SIGNING_SEED"}


@pytest.fixture
def workspace(tmp_path):
    target = tmp_path / "circuit" / "target"
    target.mkdir(parents=True)
    (target / "main.json").write_bytes(b'{"bytecode": "H4sIAAAA"}')
    (target / "vk").write_bytes(b"\x00\x01\x02")
    proofs = tmp_path / "circuit" / "proofs"
    proofs.mkdir()
    (proofs / "circuit.proof").write_text("deadbeef")
    (tmp_path / "circuit" / "Verifier.toml").write_bytes(b'return = "0x05"\n')
    return tmp_path


def _args(ws: Path, *extra):
    return [
        "--circuit", str(ws / "circuit" / "target"),
        "--ledger", str(ws / "attestations.jsonl"),
        *extra,
    ]


def _last_json(output: str) -> dict:
    return json.loads(output.strip().splitlines()[-1])


def test_fingerprint_command(workspace):
    r = CliRunner().invoke(
        attest_main, ["fingerprint", "--circuit", str(workspace / "circuit" / "target")]
    )
    assert r.exit_code == 0, r.output
    assert r.output.strip() == compute_fingerprint(workspace / "circuit" / "target").hex()


def test_fingerprint_reads_env(workspace):
    target = workspace / "circuit" / "target"
    r = CliRunner().invoke(attest_main, ["fingerprint"], env={"CIRCUIT_PATH": str(target)})
    assert r.exit_code == 0, r.output
    assert r.output.strip() == compute_fingerprint(target).hex()


def test_fingerprint_missing_circuit_is_fatal(tmp_path):
    r = CliRunner().invoke(attest_main, ["fingerprint", "--circuit", str(tmp_path / "nope")])
    assert r.exit_code == 1
    assert "FATAL:" in r.output


def test_submit_then_verify(workspace):
    runner = CliRunner()
    proof = workspace / "circuit" / "proofs" / "circuit.proof"
    params = workspace / "circuit" / "Verifier.toml"

    r = runner.invoke(
        attest_main,
        ["submit", *_args(workspace, "--proof", str(proof), "--pub-params", str(params))],
    )
    assert r.exit_code == 0, r.output
    summary = _last_json(r.output)
    assert summary["payload_len"] == 32 + len(b'return = "0x05"\n') + 3 + 4

    proof.unlink()
    params.unlink()

    r = runner.invoke(
        verify_main,
        ["records", *_args(workspace, "--proof-out", str(proof), "--pub-params-out", str(params))],
    )
    assert r.exit_code == 0, r.output
    report = _last_json(r.output)
    assert report["status"] == "PASS"
    assert report["winner"] == summary["uid"]
    assert proof.read_text() == "deadbeef"
    assert params.read_bytes() == b'return = "0x05"\n'


def test_verify_reports_foreign_records(workspace):
    ledger = workspace / "attestations.jsonl"
    append_attestation(ledger, build_attestation(encode(b"\x09" * 32, b"p", b"q")))
    append_attestation(ledger, build_attestation(b"\x01" * 10))

    r = CliRunner().invoke(
        verify_main,
        ["records", *_args(workspace,
                           "--proof-out", str(workspace / "out.proof"),
                           "--pub-params-out", str(workspace / "out.toml"))],
    )
    assert r.exit_code == 0, r.output
    report = _last_json(r.output)
    assert report["status"] == "NO_MATCH"
    assert [o["code"] for o in report["outcomes"]] == ["E_CIRCUIT_MISMATCH", "E_PAYLOAD_SHORT"]
    assert not (workspace / "out.proof").exists()


def test_submit_rejects_bad_seed(workspace):
    r = CliRunner().invoke(attest_main, ["submit", *_args(workspace, "--seed", "abcd")])
    assert r.exit_code == 2


def test_submit_with_corrupted_proof_is_fatal(workspace):
    proof = workspace / "circuit" / "proofs" / "circuit.proof"
    proof.write_text("xyz")
    r = CliRunner().invoke(
        attest_main,
        ["submit", *_args(workspace, "--proof", str(proof),
                          "--pub-params", str(workspace / "circuit" / "Verifier.toml"))],
    )
    assert r.exit_code == 1
    assert "FATAL:" in r.output
    assert not (workspace / "attestations.jsonl").exists()


def test_verify_tampered_ledger_is_fatal(workspace):
    ledger = workspace / "attestations.jsonl"
    e = build_attestation(b"\x00" * 40)
    e["data"] = "11" * 40
    append_attestation(ledger, e)
    r = CliRunner().invoke(verify_main, ["records", *_args(workspace)])
    assert r.exit_code == 1
    assert "FATAL:" in r.output


def run(args, cwd):
    src = Path(__file__).resolve().parents[1] / "src"
    env = {k: v for k, v in os.environ.items() if k not in CONFIG_VARS}
    env["PYTHONPATH"] = str(src)
    return subprocess.run([sys.executable, "-m", *args], cwd=cwd, env=env, check=False,
                          capture_output=True, text=True)


def test_modules_run_with_default_paths(workspace):
    r = run(["attest_submit.cli", "submit"], cwd=workspace)
    assert r.returncode == 0, r.stderr + r.stdout
    assert (workspace / "attestations.jsonl").exists()

    (workspace / "circuit" / "proofs" / "circuit.proof").write_text("00")

    r = run(["attest_verify.cli", "records"], cwd=workspace)
    assert r.returncode == 0, r.stderr + r.stdout
    assert json.loads(r.stdout)["matched"] == 1
    assert (workspace / "circuit" / "proofs" / "circuit.proof").read_text() == "deadbeef"


def test_verify_non_utf8_ledger_is_fatal(workspace):
    (workspace / "attestations.jsonl").write_bytes(b"\xff\xfe{}\n")
    r = CliRunner().invoke(verify_main, ["records", *_args(workspace)])
    assert r.exit_code == 1
    assert "FATAL: Line 1: not UTF-8" in r.output


def test_verify_help_describes_command():
    r = CliRunner().invoke(verify_main, ["--help"])
    assert r.exit_code == 0
    assert "Recover the proof for the local circuit" in r.output


def test_dotenv_in_working_directory_is_read(workspace, tmp_path_factory):
    cwd = tmp_path_factory.mktemp("operator")
    target = workspace / "circuit" / "target"
    (cwd / ".env").write_text(f"CIRCUIT_PATH={target}\n")

    r = run(["attest_submit.cli", "fingerprint"], cwd=cwd)
    assert r.returncode == 0, r.stderr + r.stdout
    assert r.stdout.strip() == compute_fingerprint(target).hex()
