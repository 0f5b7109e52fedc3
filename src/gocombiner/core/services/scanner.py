from __future__ import annotations

"""
Main Package Discovery Service.

Walks a Go source tree, prunes ignored directories and the combiner's own
output, and groups every `package main` file by its directory into a
MainUnit. Any read or parse failure aborts the scan: the later stages
assume the unit set is complete.
"""

import logging
import os
import posixpath
import re
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from gocombiner.core.analysis.go_syntax import GoSyntaxError, read_package_name
from gocombiner.domain.constants import (
    ALWAYS_IGNORE,
    MAIN_PACKAGE,
    RESERVED_IDENTIFIERS,
    SOURCE_SUFFIX,
    TEST_SUFFIX,
)
from gocombiner.domain.errors import ScanError
from gocombiner.domain.models import MainUnit
from gocombiner.infra.fs import read_bytes, to_posix_rel

logger = logging.getLogger(__name__)

_UNSAFE_CHARS_RX = re.compile(r"[^A-Za-z0-9_]")


# ==============================================================================
# PUBLIC API (DISCOVERY SERVICES)
# ==============================================================================

def scan_tree(
        input_dir: str,
        output_dir: str,
        module: str,
        include: Optional[List[str]] = None,
        exclude: Optional[Iterable[str]] = None,
) -> Dict[str, MainUnit]:
    """
    Discover every main package below `input_dir`.

    Args:
        input_dir: Absolute path to the tree root.
        output_dir: Absolute output root; its subtree is never scanned.
        module: Module path from go.mod, used to build import paths.
        include: Optional relative path prefixes restricting the scan.
        exclude: Extra directory names to ignore on top of the fixed set.

    Returns:
        Dict[str, MainUnit]: Units keyed by relative POSIX directory, in
                             discovery order.

    Raises:
        ScanError: On any read or package-clause parse failure, or when two
                   directories map to the same package name.
    """
    out_rel = to_posix_rel(output_dir, input_dir)
    units: Dict[str, MainUnit] = {}
    owners: Dict[str, str] = {}

    for file_path, rel_path in yield_candidate_files(input_dir, output_dir, include, exclude):
        if not is_main_file(file_path):
            continue

        rel_dir = posixpath.dirname(rel_path)
        if not rel_dir:
            logger.warning(f"Skipping {rel_path}: main package at the tree root has no command name")
            continue

        _require_utf8(rel_path, file_path)

        unit = units.get(rel_dir)
        if unit is None:
            package_name = derive_package_name(rel_dir)
            if package_name in owners:
                raise ScanError(
                    f"directories '{owners[package_name]}' and '{rel_dir}' "
                    f"both map to package name '{package_name}'",
                    file_path,
                )
            owners[package_name] = rel_dir

            unit = MainUnit(
                command=posixpath.basename(rel_dir),
                source_dir=os.path.dirname(file_path),
                package_name=package_name,
                import_path=posixpath.join(module, out_rel, package_name),
                output_dir=os.path.join(output_dir, package_name),
            )
            units[rel_dir] = unit
            logger.debug(f"Found main package {rel_dir} -> {unit.import_path}")

        unit.files.append(file_path)

    logger.info(f"Discovered {len(units)} main package(s)")
    return units


def yield_candidate_files(
        input_dir: str,
        output_dir: str,
        include: Optional[List[str]] = None,
        exclude: Optional[Iterable[str]] = None,
) -> Iterator[Tuple[str, str]]:
    """
    Traverse the tree and yield non-test Go source files in scope.

    Directories are visited in sorted order so discovery is reproducible.

    Yields:
        Tuple[str, str]: (absolute path, relative POSIX path).
    """
    ignore = ALWAYS_IGNORE | frozenset(exclude or ())
    include = list(include or [])
    output_abs = os.path.abspath(output_dir)

    for root, dirs, files in os.walk(input_dir, onerror=_raise_walk_error):
        rel_root = to_posix_rel(root, input_dir)

        kept = []
        for d in sorted(dirs):
            if d in ignore:
                continue
            full = os.path.join(root, d)
            if os.path.abspath(full) == output_abs:
                logger.debug(f"Skipping output directory {full}")
                continue
            if not include_allows_dir(posixpath.join(rel_root, d), include):
                continue
            kept.append(d)
        dirs[:] = kept

        for file_name in sorted(files):
            if not file_name.endswith(SOURCE_SUFFIX) or file_name.endswith(TEST_SUFFIX):
                continue
            rel_path = posixpath.join(rel_root, file_name)
            if not include_allows_file(rel_path, include):
                continue
            yield os.path.join(root, file_name), rel_path


def is_main_file(file_path: str) -> bool:
    """
    Check whether a file declares `package main`.

    Raises:
        ScanError: If the file cannot be read or has no package clause.
    """
    try:
        data = read_bytes(file_path)
    except OSError as e:
        raise ScanError(f"cannot read file: {e}", file_path) from e

    try:
        return read_package_name(data) == MAIN_PACKAGE
    except GoSyntaxError as e:
        raise ScanError(f"failed to parse package clause: {e}", file_path) from e


def derive_package_name(rel_dir: str) -> str:
    """
    Build a Go identifier from a relative directory path.

    The full path is used, not just the last segment, so `a/tool` and
    `b/tool` stay distinct: every character that is not a letter, digit or
    underscore becomes `_`.
    """
    name = _UNSAFE_CHARS_RX.sub("_", rel_dir)
    if name[:1].isdigit():
        name = "_" + name
    if name in RESERVED_IDENTIFIERS:
        name += "_"
    return name


# -----------------------------------------------------------------------------
# INCLUDE PREFIX FILTERING
# -----------------------------------------------------------------------------

def include_allows_file(rel_path: str, include: List[str]) -> bool:
    """An empty include list allows everything."""
    if not include:
        return True
    return any(rel_path.startswith(prefix + "/") for prefix in include)


def include_allows_dir(rel_dir: str, include: List[str]) -> bool:
    """
    Check whether a directory may hold files allowed by `include`.

    True when the directory lies under a prefix, or is an ancestor of one.
    """
    if not include:
        return True
    for prefix in include:
        if rel_dir == prefix or rel_dir.startswith(prefix + "/") or prefix.startswith(rel_dir + "/"):
            return True
    return False


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _require_utf8(rel_path: str, file_path: str) -> None:
    """Command names and import paths are Go strings and must be UTF-8."""
    try:
        rel_path.encode("utf-8")
    except UnicodeEncodeError as e:
        shown = os.fsencode(file_path).decode("utf-8", errors="backslashreplace")
        raise ScanError("path is not valid UTF-8", shown) from e


def _raise_walk_error(error: OSError) -> None:
    raise ScanError(f"cannot list directory: {error.strerror or error}", error.filename) from error
