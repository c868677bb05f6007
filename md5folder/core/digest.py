# md5folder/core/digest.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from md5folder.utils import hashing
from .cancel import CancellationSignal
from .channel import ResultChannel
from .errors import FileReadError


@dataclass(frozen=True)
class FileResult:
    """Outcome of reading and summing one regular file."""
    path: str
    digest: Optional[bytes] = None
    error: Optional[FileReadError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def digest_file(path: str) -> FileResult:
    """Read `path` fully and return its MD5, or the read failure."""
    try:
        data = hashing.read_file_bytes(path)
    except OSError as e:
        err = FileReadError.from_os_error(path, e)
        err.__cause__ = e
        return FileResult(path=path, error=err)
    return FileResult(path=path, digest=hashing.md5_bytes(data))


class DigestWorker:
    """
    One task per discovered regular file.

    Runs on the pipeline's executor. Never retries and never logs: a read
    failure travels to the collector as a FileResult.
    """

    def __init__(self, path: str, results: ResultChannel[FileResult], cancel: CancellationSignal):
        self.path = path
        self._results = results
        self._cancel = cancel

    def __call__(self) -> bool:
        """Returns True if a result was handed to the collector."""
        if self._cancel.cancelled:
            return False
        try:
            result = digest_file(self.path)
        except Exception as e:
            # still owe the collector exactly one result
            err = FileReadError(f"cannot read {self.path}: {e}", details={"path": self.path})
            err.__cause__ = e
            result = FileResult(path=self.path, error=err)
        return self._results.offer(result, self._cancel)
