from __future__ import annotations

"""
Canonical Go Formatting.

Optional post-processing step that pipes rendered source through an
external `gofmt` binary. When no formatter is configured the rendered
bytes are returned unchanged.
"""

import logging
import shutil
import subprocess
from typing import Optional

logger = logging.getLogger(__name__)


class FormatError(RuntimeError):
    """The external formatter is missing or rejected the source."""


def resolve_gofmt(gofmt: Optional[str]) -> str:
    """
    Resolve the configured formatter to an executable path.

    Args:
        gofmt: Executable name or path; empty disables formatting.

    Returns:
        str: Absolute executable path, or "" when formatting is disabled.

    Raises:
        FormatError: If a formatter was requested but cannot be found.
    """
    if not gofmt:
        return ""
    found = shutil.which(gofmt)
    if not found:
        raise FormatError(f"formatter '{gofmt}' not found on PATH")
    return found


def format_source(source: bytes, gofmt: str = "", filename: str = "<generated>") -> bytes:
    """
    Return `source` in canonical gofmt layout.

    Args:
        source: Go source bytes.
        gofmt: Resolved formatter executable; empty returns the input as is.
        filename: Name used in error messages only.

    Raises:
        FormatError: If the formatter exits with a non-zero status.
    """
    if not gofmt:
        return source

    try:
        proc = subprocess.run(
            [gofmt],
            input=source,
            capture_output=True,
            check=False,
        )
    except OSError as e:
        raise FormatError(f"cannot run {gofmt}: {e}") from e

    if proc.returncode != 0:
        detail = proc.stderr.decode("utf-8", errors="replace").strip()
        raise FormatError(f"{gofmt} failed on {filename}: {detail}")

    logger.debug(f"Formatted {filename} with {gofmt}")
    return proc.stdout
