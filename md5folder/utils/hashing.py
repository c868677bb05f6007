# md5folder/utils/hashing.py
from __future__ import annotations

import hashlib
from pathlib import Path


MD5_SIZE = hashlib.md5(usedforsecurity=False).digest_size


def read_file_bytes(path: str | Path) -> bytes:
    """Read the whole file into memory."""
    with open(path, "rb") as f:
        return f.read()


def md5_bytes(data: bytes) -> bytes:
    """Raw 16-byte MD5 digest of `data`."""
    return hashlib.md5(data, usedforsecurity=False).digest()


def hex_digest(digest: bytes) -> str:
    return digest.hex()


def sha256_file(path: Path) -> str:
    """
    Compute SHA256 hash of a file (streamed, memory-safe).
    Returns lowercase hex digest.
    """
    h = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(1024 * 1024), b""):
            h.update(chunk)
    return h.hexdigest()
