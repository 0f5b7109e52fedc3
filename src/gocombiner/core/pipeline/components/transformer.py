from __future__ import annotations

"""
Main Package Rewriter.

Turns a `package main` source file into a file of an importable package:
the package clause takes the unit's package name and the free-standing
`func main()` becomes `func MainFunction()`. Everything else, comments
included, is kept byte for byte until the optional gofmt pass brings the
file to canonical layout.
"""

import logging
from typing import Dict

from tree_sitter import Node

from gocombiner.core.analysis.go_syntax import (
    GoSyntaxError,
    Rule,
    SyntaxRewriter,
    node_text,
    package_clause_name,
    parse_source,
)
from gocombiner.core.processing.formatter import FormatError, format_source
from gocombiner.domain.constants import ENTRY_FUNCTION, MAIN_FUNCTION, MAIN_PACKAGE
from gocombiner.domain.errors import TransformError
from gocombiner.domain.models import MainUnit
from gocombiner.infra.fs import read_bytes

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def parse_and_replace(package_name: str, file_path: str, gofmt: str = "") -> bytes:
    """
    Rewrite one file of a main package.

    Args:
        package_name: New package name for the file.
        file_path: Absolute path of the original source.
        gofmt: Optional resolved gofmt executable for canonical output.

    Returns:
        bytes: The rewritten source.

    Raises:
        TransformError: If the file cannot be read, parsed, or rendered.
    """
    try:
        source = read_bytes(file_path)
    except OSError as e:
        raise TransformError(f"cannot read file: {e}", file_path) from e

    try:
        tree = parse_source(source)
    except GoSyntaxError as e:
        raise TransformError(f"failed to parse: {e}", file_path) from e

    rewriter = SyntaxRewriter(build_rules(package_name))
    try:
        rendered = rewriter.apply(tree, source)
    except ValueError as e:
        raise TransformError(f"failed to render new code: {e}", file_path) from e

    try:
        return format_source(rendered, gofmt, filename=file_path)
    except FormatError as e:
        raise TransformError(f"failed to format new code: {e}", file_path) from e


def transform_unit(unit: MainUnit, gofmt: str = "") -> MainUnit:
    """Rewrite every file of `unit`, filling `unit.contents`."""
    for file_path in unit.files:
        unit.contents[file_path] = parse_and_replace(unit.package_name, file_path, gofmt)
        logger.debug(f"Rewrote {file_path} as package {unit.package_name}")
    return unit


def build_rules(package_name: str) -> Dict[str, Rule]:
    """
    Build the rename rule table for one unit.

    Each rule returns whether the walk continues into the node's children.
    """

    def handle_file(node: Node, rw: SyntaxRewriter) -> bool:
        ident = package_clause_name(node)
        if ident is None or node_text(ident) != MAIN_PACKAGE:
            return False
        rw.rename(ident, package_name)
        return True

    def handle_func_decl(node: Node, rw: SyntaxRewriter) -> bool:
        name = node.child_by_field_name("name")
        if name is not None and node_text(name) == MAIN_FUNCTION:
            rw.rename(name, ENTRY_FUNCTION)
        return False

    # Methods can never be entry points
    def handle_method_decl(node: Node, rw: SyntaxRewriter) -> bool:
        return False

    return {
        "source_file": handle_file,
        "function_declaration": handle_func_decl,
        "method_declaration": handle_method_decl,
    }
