"""Circuit fingerprint: a deterministic SHA-256 over the build artifacts."""
from __future__ import annotations

import hashlib
import os
from pathlib import Path

from .protocol import HASH_CHUNK_SIZE


def _raise(err: OSError) -> None:
    raise err


def iter_artifact_files(root: Path) -> list[Path]:
    """Return every regular file under root, sorted by root-relative POSIX path.

    Traversal errors propagate. The order never depends on how the
    filesystem happens to enumerate directory entries.
    """
    root = Path(root)
    if not root.exists():
        raise FileNotFoundError(f"Circuit path not found: {root}")
    if not root.is_dir():
        raise NotADirectoryError(f"Circuit path is not a directory: {root}")

    found: list[tuple[str, Path]] = []
    for dirpath, _dirnames, filenames in os.walk(root, onerror=_raise):
        for name in filenames:
            p = Path(dirpath) / name
            if p.is_file():
                found.append((p.relative_to(root).as_posix(), p))
    return [p for _rel, p in sorted(found, key=lambda item: item[0])]


def compute_fingerprint(root: Path) -> bytes:
    """Hash the contents of every artifact file under root into one 32-byte digest.

    Files are fed into a single running hash (not per-file leaves), in
    sorted order, HASH_CHUNK_SIZE bytes at a time. File names do not
    contribute to the digest.
    """
    acc = hashlib.sha256()
    for p in iter_artifact_files(root):
        with open(p, "rb") as f:
            while True:
                chunk = f.read(HASH_CHUNK_SIZE)
                if not chunk:
                    break
                acc.update(chunk)

    return acc.digest()
