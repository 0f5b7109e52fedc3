from __future__ import annotations

"""
Dispatcher Generator.

Synthesizes the `main.go` of the combined program: one aliased import per
unit and a `switch` on the executable's base name that calls the unit's
renamed entry point. Unknown names print a diagnostic and exit with a
dedicated status code.

Units are emitted sorted by import path, so regenerating from an
unchanged tree produces byte-identical output.
"""

import json
import logging
import os
import posixpath
from typing import Dict, Iterable, List, Mapping, Optional, TypeVar

from gocombiner.core.analysis.go_syntax import (
    GoSyntaxError,
    node_text,
    package_clause_name,
    parse_source,
)
from gocombiner.core.processing.formatter import FormatError, format_source
from gocombiner.domain.constants import (
    APP_NAME,
    DISPATCHER_FILE,
    DISPATCHER_IMPORTS,
    DISPATCHER_LOCAL,
    ENTRY_FUNCTION,
    MAIN_PACKAGE,
    UNKNOWN_COMMAND_EXIT,
)
from gocombiner.domain.errors import DuplicateCommandError, GenerationError, WriteError
from gocombiner.domain.models import MainUnit
from gocombiner.infra.fs import ensure_dir, write_bytes

logger = logging.getLogger(__name__)

T = TypeVar("T")


# -----------------------------------------------------------------------------
# DISPATCH TABLE
# -----------------------------------------------------------------------------

def sort_units(units: Iterable[MainUnit]) -> List[MainUnit]:
    return sorted(units, key=lambda u: u.import_path)


def check_commands(units: Iterable[MainUnit]) -> None:
    """
    Reject unit sets in which two units share an invocation name.

    A Go `switch` with duplicate constant cases does not compile, so the
    conflict is reported here, before anything is written.

    Raises:
        DuplicateCommandError: Naming every directory involved in a clash.
    """
    seen: Dict[str, List[str]] = {}
    for unit in sort_units(units):
        seen.setdefault(unit.command, []).append(unit.source_dir)

    clashes = {cmd: dirs for cmd, dirs in seen.items() if len(dirs) > 1}
    if clashes:
        details = "; ".join(f"'{cmd}' from {', '.join(dirs)}" for cmd, dirs in sorted(clashes.items()))
        raise DuplicateCommandError(f"duplicate command names: {details}")


def build_dispatch_table(units: Iterable[MainUnit]) -> Dict[str, MainUnit]:
    """Map each command name to its unit, in emission order."""
    return {unit.command: unit for unit in sort_units(units)}


def select_entry_point(invoked_name: str, table: Mapping[str, T]) -> Optional[T]:
    """
    Pick the entry for an invocation, as the generated `switch` does.

    Only the base name of `invoked_name` is compared, so both `alpha` and
    `/usr/local/bin/alpha` select the `alpha` entry.

    Returns:
        The matching entry, or None for an unknown command.
    """
    name = posixpath.basename(invoked_name.replace(os.sep, "/"))
    return table.get(name)


# -----------------------------------------------------------------------------
# SOURCE GENERATION
# -----------------------------------------------------------------------------

def generate_source(units: Iterable[MainUnit]) -> bytes:
    """
    Build the dispatcher source text.

    The template is laid out the way gofmt would print it, so the output is
    canonical even without an external formatter.
    """
    ordered = sort_units(units)
    lines: List[str] = [
        f"// Code generated by {APP_NAME}. DO NOT EDIT.",
        "",
        f"package {MAIN_PACKAGE}",
        "",
        "import (",
    ]
    lines.extend(f"\t{_go_string(imp)}" for imp in DISPATCHER_IMPORTS)
    if ordered:
        lines.append("")
        lines.extend(f"\t{u.package_name} {_go_string(u.import_path)}" for u in ordered)
    lines.extend([
        ")",
        "",
        "func main() {",
        f"\t{DISPATCHER_LOCAL} := filepath.Base(os.Args[0])",
        "",
        f"\tswitch {DISPATCHER_LOCAL} {{",
    ])
    for u in ordered:
        lines.append(f"\tcase {_go_string(u.command)}:")
        lines.append(f"\t\t{u.package_name}.{ENTRY_FUNCTION}()")
    lines.extend([
        "\tdefault:",
        f"\t\tfmt.Fprintf(os.Stderr, \"unknown command %s\\n\", {DISPATCHER_LOCAL})",
        f"\t\tos.Exit({UNKNOWN_COMMAND_EXIT})",
        "\t}",
        "}",
        "",
    ])
    return "\n".join(lines).encode("utf-8")


def render_dispatcher(units: Iterable[MainUnit], gofmt: str = "") -> bytes:
    """
    Generate, self-check and optionally format the dispatcher source.

    Raises:
        GenerationError: If the generated text does not parse as a main
                         package or the formatter rejects it.
    """
    try:
        source = generate_source(units)
    except UnicodeEncodeError as e:
        raise GenerationError(f"command name is not valid UTF-8: {e}", DISPATCHER_FILE) from e

    try:
        tree = parse_source(source)
    except GoSyntaxError as e:
        raise GenerationError(f"generated dispatcher does not parse: {e}", DISPATCHER_FILE) from e

    ident = package_clause_name(tree.root_node)
    if ident is None or node_text(ident) != MAIN_PACKAGE:
        raise GenerationError("generated dispatcher is not a main package", DISPATCHER_FILE)

    try:
        return format_source(source, gofmt, filename=DISPATCHER_FILE)
    except FormatError as e:
        raise GenerationError(f"failed to format code: {e}", DISPATCHER_FILE) from e


def write_dispatcher(
        units: Iterable[MainUnit],
        output_dir: str,
        gofmt: str = "",
        dry_run: bool = False,
        source: Optional[bytes] = None,
) -> str:
    """
    Render the dispatcher and write it to `<output_dir>/main.go`.

    `source` skips rendering when the caller already holds the output of
    `render_dispatcher` for the same units.

    Returns:
        str: Path of the dispatcher file.

    Raises:
        GenerationError: On a generator defect.
        WriteError: If the output root or the file cannot be written.
    """
    data = source if source is not None else render_dispatcher(units, gofmt)
    target = os.path.join(output_dir, DISPATCHER_FILE)

    if dry_run:
        logger.info(f"Dry run: dispatcher would be written to {target}")
        return target

    try:
        ensure_dir(output_dir)
        write_bytes(target, data)
    except OSError as e:
        raise WriteError(f"cannot write dispatcher: {e}", target) from e

    logger.info(f"Dispatcher written to {target}")
    return target


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _go_string(value: str) -> str:
    """Quote a value as a Go interpreted string literal."""
    return json.dumps(value, ensure_ascii=False)
