from __future__ import annotations

"""
Combined Tree Writer.

Persists rewritten units under the output root, one subdirectory per
unit named after its package. Writes are not transactional: a failure
leaves whatever was already written in place.
"""

import logging
import os
from typing import Iterable, List

from gocombiner.domain.errors import WriteError
from gocombiner.domain.models import MainUnit
from gocombiner.infra.fs import ensure_dir, write_bytes

logger = logging.getLogger(__name__)


def write_unit(unit: MainUnit, dry_run: bool = False) -> List[str]:
    """
    Write every rewritten file of `unit` into its output directory.

    Files keep their original base name.

    Args:
        unit: A transformed unit.
        dry_run: If True, only report the paths that would be written.

    Returns:
        List[str]: Target paths, in source order.

    Raises:
        WriteError: If the directory or a file cannot be written.
    """
    targets: List[str] = []

    if not dry_run:
        try:
            ensure_dir(unit.output_dir)
        except OSError as e:
            raise WriteError(f"cannot create directory: {e}", unit.output_dir) from e

    for source_path, data in unit.contents.items():
        target = os.path.join(unit.output_dir, os.path.basename(source_path))
        if not dry_run:
            try:
                write_bytes(target, data)
            except OSError as e:
                raise WriteError(f"cannot write file: {e}", target) from e
        targets.append(target)

    logger.debug(f"{'Planned' if dry_run else 'Wrote'} {len(targets)} file(s) for {unit.package_name}")
    return targets


def write_units(units: Iterable[MainUnit], dry_run: bool = False) -> List[str]:
    """Write all units in order, stopping at the first failure."""
    written: List[str] = []
    for unit in units:
        written.extend(write_unit(unit, dry_run=dry_run))
    return written
