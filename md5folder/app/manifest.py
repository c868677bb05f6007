# md5folder/app/manifest.py
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Tuple

from md5folder.core.errors import ManifestError
from md5folder.utils.hashing import MD5_SIZE, hex_digest

_log = logging.getLogger(__name__)

SEPARATOR = "  "


@dataclass(frozen=True)
class ManifestInfo:
    path: Path
    banner: str
    entries: Dict[str, str]


def manifest_path(root: str | Path, filename: str = ".md5list") -> Path:
    return Path(root) / filename


def manifest_exists(path: Path) -> bool:
    """True only for an existing regular file (a directory of that name does not count)."""
    return path.is_file()


# ---------------- formatting ----------------

def visible_paths(digests: Mapping[str, bytes], hidden_prefix: str = ".") -> List[str]:
    """
    Sorted paths, minus those whose first character(s) match `hidden_prefix`.

    Only the start of the whole path is checked, not each path component.
    """
    paths = sorted(digests)
    if not hidden_prefix:
        return paths
    return [p for p in paths if not p.startswith(hidden_prefix)]


def format_line(digest: bytes, path: str) -> str:
    if len(digest) != MD5_SIZE:
        raise ManifestError(
            f"Digest for {path} is {len(digest)} bytes, expected {MD5_SIZE}.",
            details={"path": path},
        )
    return f"{hex_digest(digest)}{SEPARATOR}{path}\n"


def format_lines(digests: Mapping[str, bytes], hidden_prefix: str = ".") -> List[str]:
    return [format_line(digests[p], p) for p in visible_paths(digests, hidden_prefix)]


def render_manifest(banner: str, lines: Iterable[str]) -> str:
    return f"{banner}\n" + "".join(lines)


# ---------------- persistence ----------------

def write_manifest(path: Path, text: str) -> None:
    """Write, flush and fsync `text` to `path`."""
    try:
        with open(path, "w", encoding="utf-8", errors="surrogateescape", newline="\n") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
    except OSError as e:
        raise ManifestError(
            "Failed to write manifest.",
            hint=str(e),
            details={"path": str(path)},
        ) from e
    _log.info("MANIFEST_WRITTEN path=%s bytes=%d", path, len(text.encode("utf-8", "surrogateescape")))


def parse_manifest(text: str) -> Tuple[str, Dict[str, str]]:
    """Split manifest text into (banner, {path: hex_digest})."""
    lines = text.splitlines()
    if not lines:
        raise ManifestError("Manifest is empty.")

    banner, entries = lines[0], {}
    for lineno, line in enumerate(lines[1:], start=2):
        if not line:
            continue
        digest, sep, path = line.partition(SEPARATOR)
        if not sep or not path or not digest:
            raise ManifestError(
                f"Malformed manifest line {lineno}.",
                details={"line": line},
            )
        entries[path] = digest
    return banner, entries


def read_manifest(path: Path) -> ManifestInfo:
    try:
        text = path.read_text(encoding="utf-8", errors="surrogateescape")
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestError(
            "Failed to read manifest.",
            hint=str(e),
            details={"path": str(path)},
        ) from e
    banner, entries = parse_manifest(text)
    return ManifestInfo(path=path, banner=banner, entries=entries)
