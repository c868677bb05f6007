from .core import compute_tree_digests, Md5FolderError

__version__ = "1.0.0"

__all__ = ["compute_tree_digests", "Md5FolderError", "__version__"]
