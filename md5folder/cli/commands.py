# md5folder/cli/commands.py
from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Optional

from md5folder.app.config import Md5FolderConfig
from md5folder.app.manifest import (
    format_lines,
    manifest_exists,
    manifest_path,
    read_manifest,
    render_manifest,
    write_manifest,
)
from md5folder.core import compute_tree_digests

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# ---------------- Logging ----------------

def configure_file_logging(app_log_path: Path, level: int = logging.INFO) -> None:
    """
    Add a file handler to the root logger (idempotent).
    Kept in CLI (presentation-layer concern).
    """
    root = logging.getLogger()
    app_log_path.parent.mkdir(parents=True, exist_ok=True)
    target = str(app_log_path.resolve())

    for h in root.handlers:
        if isinstance(h, logging.FileHandler) and getattr(h, "baseFilename", None) == target:
            return

    fh = logging.FileHandler(app_log_path, encoding="utf-8", delay=True)
    fh.setLevel(level)
    fh.setFormatter(logging.Formatter(_LOG_FORMAT))
    root.addHandler(fh)

    if root.level > level or root.level == logging.NOTSET:
        root.setLevel(level)


def configure_logging(cfg: Md5FolderConfig, *, log_file: Optional[str] = None, verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else cfg.log_level_no
    target = log_file or cfg.log_file

    if target:
        configure_file_logging(Path(target), level)
        return

    if verbose:
        root = logging.getLogger()
        if not any(getattr(h, "_md5folder_stderr", False) for h in root.handlers):
            sh = logging.StreamHandler(sys.stderr)
            sh.setFormatter(logging.Formatter(_LOG_FORMAT))
            sh._md5folder_stderr = True  # type: ignore[attr-defined]
            root.addHandler(sh)
        root.setLevel(level)

# ---------------- Commands ----------------

def _echo_lines(lines: list[str]) -> None:
    """Print manifest lines with undecodable filename bytes passed through as-is."""
    out = getattr(sys.stdout, "buffer", None)
    if out is None:
        for line in lines:
            sys.stdout.write(line.encode("utf-8", "surrogateescape").decode("utf-8", "replace"))
        return
    sys.stdout.flush()
    for line in lines:
        out.write(os.fsencode(line))
    out.flush()


def cmd_md5(root: str, cfg: Md5FolderConfig) -> int:
    """Hash `root` and write its manifest, unless one is already there."""
    log = logging.getLogger(__name__)
    target = manifest_path(root, cfg.manifest_filename)

    if manifest_exists(target):
        print(f"{cfg.manifest_filename} files exists. This directory already processed. Exiting.")
        log.info("MANIFEST_EXISTS path=%s", target)
        return 0

    # raises on the first walk/read failure; nothing is written in that case
    digests = compute_tree_digests(root, **cfg.pipeline_kwargs())

    lines = format_lines(digests, cfg.hidden_prefix)
    _echo_lines(lines)

    write_manifest(target, render_manifest(cfg.banner, lines))
    log.info("MD5_DONE root=%s files=%d listed=%d", root, len(digests), len(lines))
    return 0


def cmd_stat(root: str, cfg: Md5FolderConfig) -> int:
    target = manifest_path(root, cfg.manifest_filename)
    if not manifest_exists(target):
        print(f"{root}: not processed (no {cfg.manifest_filename})")
        return 0

    info = read_manifest(target)
    print(f"Manifest: {info.path}")
    print(f"Banner:   {info.banner}")
    print(f"Entries:  {len(info.entries)}")
    return 0
