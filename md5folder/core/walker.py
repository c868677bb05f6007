# md5folder/core/walker.py
from __future__ import annotations

import logging
import os
import stat
import threading
from concurrent.futures import Executor, Future
from typing import Optional

from .cancel import CancellationSignal
from .channel import ResultChannel
from .digest import DigestWorker, FileResult
from .errors import TraversalAccessError, WalkCanceledError


class TreeWalker(threading.Thread):
    """
    Thread that walks the tree at `root` and submits one DigestWorker per
    regular file.

    Traversal is depth-first with directory entries in sorted name order, so
    the visiting order is reproducible on an unchanged tree. Symlinks are
    never followed.

    When the walk ends (cleanly, on an access error or on cancellation) the
    walker:
      1. sets `outcome` (None, or the exception that ended the walk),
      2. waits for every submitted task,
      3. closes `results`.
    """

    def __init__(
        self,
        root: str | os.PathLike,
        *,
        results: ResultChannel[FileResult],
        outcome: Future,
        cancel: CancellationSignal,
        executor: Executor,
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(name="md5folder-walker", daemon=True)
        self.root = os.fsdecode(root)
        self._results = results
        self._outcome = outcome
        self._cancel = cancel
        self._executor = executor
        self._log = logger or logging.getLogger(__name__)

        self._tasks = _TaskGroup()
        self.files_found = 0
        self.dirs_visited = 0

    def run(self) -> None:
        try:
            self.walk()
        except (TraversalAccessError, WalkCanceledError) as e:
            self._log.debug("WALK_STOPPED root=%s code=%s error=%s", self.root, e.code, e)
            self._outcome.set_exception(e)
        except Exception as e:
            self._log.exception("WALK_UNEXPECTED_ERROR root=%s", self.root)
            self._outcome.set_exception(e)
        else:
            self._log.debug(
                "WALK_DONE root=%s files=%d dirs=%d",
                self.root, self.files_found, self.dirs_visited,
            )
            self._outcome.set_result(None)
        finally:
            # no more submit() calls, so the pending count can only drop
            self._tasks.wait()
            self._results.close(self._cancel)
            self._executor.shutdown(wait=False)

    def walk(self) -> None:
        stack = [self.root]
        while stack:
            if self._cancel.cancelled:
                raise WalkCanceledError()

            path = stack.pop()
            try:
                st = os.lstat(path)
            except OSError as e:
                raise TraversalAccessError.from_os_error(path, e) from e

            if stat.S_ISDIR(st.st_mode):
                try:
                    names = sorted(os.listdir(path))
                except OSError as e:
                    raise TraversalAccessError.from_os_error(path, e) from e
                self.dirs_visited += 1
                # reversed, so the smallest name is popped first
                stack.extend(_join(path, name) for name in reversed(names))
            elif stat.S_ISREG(st.st_mode):
                self._spawn(path)

    def _spawn(self, path: str) -> None:
        worker = DigestWorker(path, self._results, self._cancel)
        try:
            self._tasks.add(self._executor.submit(worker))
        except RuntimeError:
            # executor already shut down by cancellation
            if self._cancel.cancelled:
                raise WalkCanceledError() from None
            raise
        self.files_found += 1


def _join(parent: str, name: str) -> str:
    return os.path.normpath(os.path.join(parent, name))


class _TaskGroup:
    """
    Counts submitted tasks until their futures are done.

    Done callbacks also fire for futures cancelled by executor shutdown, which
    concurrent.futures.wait() would keep waiting on.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._pending = 0

    def add(self, fut: Future) -> None:
        with self._cond:
            self._pending += 1
        fut.add_done_callback(self._done)

    def wait(self) -> None:
        with self._cond:
            self._cond.wait_for(lambda: self._pending == 0)

    def _done(self, _fut: Future) -> None:
        with self._cond:
            self._pending -= 1
            if self._pending == 0:
                self._cond.notify_all()
