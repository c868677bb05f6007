# md5folder/core/collector.py
from __future__ import annotations

import logging
from concurrent.futures import Future
from enum import Enum
from typing import Dict, Optional

from .cancel import CancellationSignal
from .channel import ResultChannel
from .digest import FileResult


class CollectorState(Enum):
    RUNNING = "running"
    FILE_ERROR = "file_error"
    WALK_ERROR = "walk_error"
    COMPLETE = "complete"


class Collector:
    """
    Fan-in end of the pipeline.

    Drains `results` into a path -> digest map. The first failed FileResult
    raises the cancellation signal and is re-raised; the map is dropped. Once
    the channel closes cleanly the walk outcome decides between returning the
    map and raising the walk error.
    """

    def __init__(
        self,
        results: ResultChannel[FileResult],
        walk_outcome: Future,
        cancel: CancellationSignal,
        *,
        logger: Optional[logging.Logger] = None,
    ):
        self._results = results
        self._walk_outcome = walk_outcome
        self._cancel = cancel
        self._log = logger or logging.getLogger(__name__)
        self.state = CollectorState.RUNNING

    def collect(self) -> Dict[str, bytes]:
        if self.state is not CollectorState.RUNNING:
            raise RuntimeError(f"Collector already finished ({self.state.value})")

        digests: Dict[str, bytes] = {}
        for r in self._results:
            if not r.ok:
                self.state = CollectorState.FILE_ERROR
                self._cancel.cancel()
                self._log.debug("COLLECT_FILE_ERROR path=%s received=%d", r.path, len(digests))
                raise r.error
            digests[r.path] = r.digest  # type: ignore[assignment]

        try:
            self._walk_outcome.result()
        except Exception:
            self.state = CollectorState.WALK_ERROR
            raise

        self.state = CollectorState.COMPLETE
        return digests
