"""Content digests recorded for each published chart archive."""
from __future__ import annotations

import hashlib
from pathlib import Path


def file_sha256(path: Path, chunk_size: int = 2**20) -> str:
    """Return the hex SHA-256 of the archive at ``path``, as published in an entry's ``digest``."""

    digest = hashlib.sha256()
    with path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(chunk_size), b""):
            digest.update(chunk)
    return digest.hexdigest()
