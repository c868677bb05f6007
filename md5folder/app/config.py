# md5folder/app/config.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from md5folder.core.errors import ConfigError
from md5folder.utils.hashing import sha256_file

DEFAULTS_PATH = Path(__file__).resolve().parents[1] / "metadata" / "defaults.yml"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Md5FolderConfig:
    manifest_filename: str = ".md5list"
    banner: str = "md5 hash of directory contents v1.0"
    hidden_prefix: str = "."
    max_workers: int = 0
    offer_poll_s: float = 0.05
    log_level: str = "WARNING"
    log_file: Optional[str] = None
    source_hashes: Dict[str, str] = field(default_factory=dict)

    @property
    def log_level_no(self) -> int:
        return logging.getLevelName(self.log_level)

    def pipeline_kwargs(self) -> Dict[str, Any]:
        return {
            "max_workers": self.max_workers or None,
            "poll_s": self.offer_poll_s,
        }


# ---------------------------------------------------------------------
# YAML utility
# ---------------------------------------------------------------------

def _load_yaml(path: Path) -> dict:
    if not path.exists():
        raise ConfigError(
            "Config file not found.",
            hint=str(path),
            details={"path": str(path)},
        )
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(
            "Failed to parse config file.",
            hint=str(e),
            details={"path": str(path)},
        ) from None
    except OSError as e:
        raise ConfigError(
            "Failed to read config file.",
            hint=str(e),
            details={"path": str(path)},
        ) from None

    if not isinstance(data, dict):
        raise ConfigError(
            "Config root node must be a mapping.",
            details={"path": str(path)},
        )
    return data


def _merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    out = dict(base)
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(out.get(key), Mapping):
            out[key] = _merge(out[key], value)
        else:
            out[key] = value
    return out


def _section(data: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    sec = data.get(name) or {}
    if not isinstance(sec, Mapping):
        raise ConfigError(f"Config section '{name}' must be a mapping.")
    return sec


# ---------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------

def load_config(path: str | Path | None = None, *, defaults_path: Path = DEFAULTS_PATH) -> Md5FolderConfig:
    """
    Build the effective config: packaged defaults, then `path` merged over it.

    Raises ConfigError on a missing/malformed file or on invalid values.
    """
    sources = [Path(defaults_path)]
    if path is not None:
        sources.append(Path(path))

    data: Dict[str, Any] = {}
    hashes: Dict[str, str] = {}
    for src in sources:
        data = _merge(data, _load_yaml(src))
        hashes[src.name] = sha256_file(src)

    manifest = _section(data, "manifest")
    pipeline = _section(data, "pipeline")
    logs = _section(data, "logging")

    try:
        max_workers = int(pipeline.get("max_workers") or 0)
        offer_poll_s = float(pipeline.get("offer_poll_s", 0.05))
    except (TypeError, ValueError) as e:
        raise ConfigError("Invalid pipeline settings.", hint=str(e)) from None

    if max_workers < 0:
        raise ConfigError(
            "pipeline.max_workers must be >= 0.",
            hint="use 0 for the executor default",
            details={"max_workers": max_workers},
        )
    if offer_poll_s <= 0:
        raise ConfigError(
            "pipeline.offer_poll_s must be > 0.",
            details={"offer_poll_s": offer_poll_s},
        )

    level = str(logs.get("level") or "WARNING").upper()
    if level not in _LOG_LEVELS:
        raise ConfigError(
            f"Unknown log level '{level}'.",
            hint="one of " + ", ".join(_LOG_LEVELS),
        )

    filename = str(manifest.get("filename") or ".md5list")
    if "/" in filename or "\\" in filename:
        raise ConfigError(
            "manifest.filename must be a bare file name.",
            details={"filename": filename},
        )

    log_file = logs.get("file")

    return Md5FolderConfig(
        manifest_filename=filename,
        banner=str(manifest.get("banner") or ""),
        hidden_prefix=str(manifest.get("hidden_prefix") or ""),
        max_workers=max_workers,
        offer_poll_s=offer_poll_s,
        log_level=level,
        log_file=str(log_file) if log_file else None,
        source_hashes=hashes,
    )
