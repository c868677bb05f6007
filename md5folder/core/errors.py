# md5folder/core/errors.py
from __future__ import annotations


class Md5FolderError(Exception):
    """
    Base class for all expected operational errors in md5folder.
    """

    #: Stable machine-readable identifier, logged when the CLI reports the error
    code: str = "unknown"

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.hint = hint
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Configuration errors (nothing walked yet)
# ---------------------------------------------------------------------------

class ConfigError(Md5FolderError):
    """
    Configuration is missing, malformed or holds invalid values.

    Examples:
      - --config file not found
      - YAML syntax error
      - negative max_workers
    """
    code = "config_error"


# ---------------------------------------------------------------------------
# Pipeline errors
# ---------------------------------------------------------------------------

class TraversalAccessError(Md5FolderError):
    """
    A directory or entry could not be listed or stat'ed during the walk.

    Examples:
      - root does not exist
      - permission denied on a sub-directory
    """
    code = "traversal_access_error"

    @classmethod
    def from_os_error(cls, path: str, err: OSError) -> "TraversalAccessError":
        return cls(
            f"cannot access {path}: {err.strerror or err}",
            details={"path": path, "errno": err.errno},
        )


class FileReadError(Md5FolderError):
    """
    A regular file was selected for digesting but could not be fully read.

    Examples:
      - file removed between discovery and read
      - permission denied on open
    """
    code = "file_read_error"

    @classmethod
    def from_os_error(cls, path: str, err: OSError) -> "FileReadError":
        return cls(
            f"cannot read {path}: {err.strerror or err}",
            details={"path": path, "errno": err.errno},
        )


class WalkCanceledError(Md5FolderError):
    """Walk stopped because another failure already triggered shutdown."""
    code = "walk_canceled"

    def __init__(self, message: str = "walk canceled", **kwargs):
        super().__init__(message, **kwargs)


# ---------------------------------------------------------------------------
# Manifest errors
# ---------------------------------------------------------------------------

class ManifestError(Md5FolderError):
    """
    The manifest file could not be written or parsed.

    Examples:
      - directory is read-only
      - line without the two-space separator
    """
    code = "manifest_error"
