from .cancel import CancellationSignal
from .channel import ResultChannel
from .collector import Collector, CollectorState
from .digest import DigestWorker, FileResult, digest_file
from .errors import (
    ConfigError,
    FileReadError,
    ManifestError,
    Md5FolderError,
    TraversalAccessError,
    WalkCanceledError,
)
from .pipeline import compute_tree_digests, sum_files
from .walker import TreeWalker

__all__ = [
    "CancellationSignal",
    "ResultChannel",
    "Collector",
    "CollectorState",
    "DigestWorker",
    "FileResult",
    "digest_file",
    "ConfigError",
    "FileReadError",
    "ManifestError",
    "Md5FolderError",
    "TraversalAccessError",
    "WalkCanceledError",
    "compute_tree_digests",
    "sum_files",
    "TreeWalker",
]
