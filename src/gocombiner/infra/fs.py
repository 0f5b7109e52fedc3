from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Thin wrappers over `os` used by every pipeline stage: path
normalization, relative POSIX paths, and byte-level read/write helpers.
Errors are left to propagate as `OSError`; each stage wraps them in its
own error type.
"""

import os
from typing import Optional

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Normalize a directory path string into an absolute filesystem path.

    Handles environment variable expansion and user home shortcuts.
    Reverts to fallback if the input is empty.

    Args:
        path: Raw input path string.
        fallback: Default path to use if the input is empty.

    Returns:
        str: Normalized absolute path.
    """
    p = (path or "").strip()
    if not p:
        p = fallback
    p = os.path.expandvars(os.path.expanduser(p))
    return os.path.abspath(p)


def to_posix_rel(path: str, root: str) -> str:
    """
    Express `path` relative to `root` with forward slashes.

    Returns an empty string when both point to the same directory.
    """
    rel = os.path.relpath(path, root)
    if rel == os.curdir:
        return ""
    return rel.replace(os.sep, "/")


def is_within(path: str, root: str) -> bool:
    """Check whether `path` is `root` or lies underneath it."""
    path = os.path.abspath(path)
    root = os.path.abspath(root)
    return path == root or path.startswith(root.rstrip(os.sep) + os.sep)

# -----------------------------------------------------------------------------
# FILE I/O API
# -----------------------------------------------------------------------------

def read_bytes(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()


def write_bytes(path: str, data: bytes) -> None:
    with open(path, "wb") as f:
        f.write(data)


def ensure_dir(path: str) -> None:
    """Create a directory hierarchy, succeeding if it already exists."""
    os.makedirs(path, exist_ok=True)
