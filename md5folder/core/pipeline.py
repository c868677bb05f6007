# md5folder/core/pipeline.py
from __future__ import annotations

import logging
import os
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Dict, Optional, Tuple

from .cancel import CancellationSignal
from .channel import ResultChannel
from .collector import Collector
from .digest import FileResult
from .errors import Md5FolderError
from .walker import TreeWalker

_log = logging.getLogger(__name__)

DEFAULT_POLL_S = 0.05


def sum_files(
    cancel: CancellationSignal,
    root: str | os.PathLike,
    *,
    max_workers: Optional[int] = None,
    poll_s: float = DEFAULT_POLL_S,
) -> Tuple[ResultChannel[FileResult], Future]:
    """
    Start walking `root` and digesting every regular file under it.

    Returns (results, walk_outcome). Digest results arrive on `results`, which
    is closed once every submitted task has finished. `walk_outcome` resolves
    to None, or to the error that ended the walk. Raising `cancel` makes all
    tasks abandon their work.
    """
    results: ResultChannel[FileResult] = ResultChannel(poll_s=poll_s)
    outcome: Future = Future()
    executor = ThreadPoolExecutor(
        max_workers=max_workers or None,
        thread_name_prefix="md5folder-digest",
    )
    # queued tasks are dropped as soon as the pipeline gives up
    cancel.add_callback(lambda: executor.shutdown(wait=False, cancel_futures=True))

    walker = TreeWalker(
        root,
        results=results,
        outcome=outcome,
        cancel=cancel,
        executor=executor,
    )
    walker.start()
    return results, outcome


def compute_tree_digests(
    root: str | os.PathLike,
    *,
    max_workers: Optional[int] = None,
    poll_s: float = DEFAULT_POLL_S,
) -> Dict[str, bytes]:
    """
    MD5 every regular file reachable from `root`.

    Returns a map from path (as met during the walk) to the raw 16-byte
    digest. If the walk or any read fails, the first error is raised and
    in-flight reads are not waited for. A fresh cancellation signal is used
    per call and is always raised before returning, so no worker is left
    blocked on delivery.
    """
    cancel = CancellationSignal()
    try:
        results, outcome = sum_files(cancel, root, max_workers=max_workers, poll_s=poll_s)
        digests = Collector(results, outcome, cancel).collect()
    except Md5FolderError as e:
        _log.info("PIPELINE_FAILED root=%s code=%s error=%s", root, e.code, e)
        raise
    finally:
        cancel.cancel()

    _log.info("PIPELINE_DONE root=%s files=%d", root, len(digests))
    return digests
