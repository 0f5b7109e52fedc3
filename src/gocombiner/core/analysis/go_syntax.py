from __future__ import annotations

"""
Go Syntax Tree Service.

Wraps the tree-sitter Go grammar with the three capabilities the
combiner needs:

- a lightweight package-clause reader used while scanning,
- a full parse that reports the first syntax error with its position,
- a rule-driven rewriter that records identifier renames as byte-range
  edits and renders them back into the original source, so comments and
  layout survive untouched.
"""

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Callable, Dict, Iterator, List, Optional

import tree_sitter_go
from tree_sitter import Language, Node, Parser, Tree

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# LEXICAL PATTERNS (PACKAGE CLAUSE ONLY)
# -----------------------------------------------------------------------------

# Whitespace, line comments and block comments in any order
_SKIP_RX = re.compile(r"(?:\s+|//[^\n]*|/\*.*?\*/)*", re.DOTALL)
_PACKAGE_KW_RX = re.compile(r"package\b")
_IDENT_RX = re.compile(r"[^\W\d]\w*")

_BOM = "﻿"


class GoSyntaxError(ValueError):
    """Source text is not valid Go; carries a 1-based position."""

    def __init__(self, message: str, line: int = 0, column: int = 0) -> None:
        self.line = line
        self.column = column
        if line:
            message = f"{message} (line {line}, column {column})"
        super().__init__(message)


# -----------------------------------------------------------------------------
# PARSING API
# -----------------------------------------------------------------------------

@lru_cache(maxsize=1)
def _go_parser() -> Parser:
    return Parser(Language(tree_sitter_go.language()))


def read_package_name(source: bytes) -> str:
    """
    Return the name declared by the leading `package` clause.

    Only comments and whitespace may precede the clause. The rest of the
    file is not examined, which keeps scanning of large trees cheap.

    Raises:
        GoSyntaxError: If the file does not start with a package clause.
    """
    try:
        text = source.decode("utf-8")
    except UnicodeDecodeError as e:
        raise GoSyntaxError(f"source is not valid UTF-8: {e.reason}") from e

    if text.startswith(_BOM):
        text = text[1:]

    pos = _SKIP_RX.match(text).end()
    if text.startswith("/*", pos):
        raise GoSyntaxError("comment not terminated", *_position(text, pos))

    kw = _PACKAGE_KW_RX.match(text, pos)
    if not kw:
        raise GoSyntaxError("expected 'package'", *_position(text, pos))

    pos = _SKIP_RX.match(text, kw.end()).end()
    ident = _IDENT_RX.match(text, pos)
    if not ident:
        raise GoSyntaxError("expected package name", *_position(text, pos))

    return ident.group(0)


def parse_source(source: bytes) -> Tree:
    """
    Parse Go source into a concrete syntax tree.

    tree-sitter never raises on bad input; it inserts ERROR and missing
    nodes instead. Those are turned into a GoSyntaxError here so callers
    get the same all-or-nothing behavior as a real compiler front end.

    Raises:
        GoSyntaxError: On the first syntax error found.
    """
    tree = _go_parser().parse(source)
    root = tree.root_node
    if root.has_error:
        bad = _first_error(root)
        if bad is None:
            raise GoSyntaxError("syntax error")
        kind = f"missing {bad.type}" if bad.is_missing else "unexpected input"
        row, col = bad.start_point[0], bad.start_point[1]
        raise GoSyntaxError(f"syntax error: {kind}", row + 1, col + 1)
    return tree


def package_clause_name(root: Node) -> Optional[Node]:
    """Return the package_identifier node of a source_file, if present."""
    for child in root.children:
        if child.type == "package_clause":
            for ident in child.children:
                if ident.type == "package_identifier":
                    return ident
    return None


def node_text(node: Node) -> str:
    return node.text.decode("utf-8")


# -----------------------------------------------------------------------------
# REWRITING API
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class Edit:
    start: int
    end: int
    replacement: bytes


# A rule inspects one node, may record edits, and returns whether the
# walk should continue into the node's children.
Rule = Callable[[Node, "SyntaxRewriter"], bool]


class SyntaxRewriter:
    """
    Depth-first walker driven by a rule table keyed by node type.

    Node types without a rule are descended into. Edits are collected
    during the walk and applied in one pass by `render`.
    """

    def __init__(self, rules: Dict[str, Rule]) -> None:
        self.rules = rules
        self.edits: List[Edit] = []

    def rename(self, node: Node, new_name: str) -> None:
        self.edits.append(Edit(node.start_byte, node.end_byte, new_name.encode("utf-8")))

    def walk(self, root: Node) -> None:
        for node in self._visit(root):
            logger.debug(f"Rule stopped descent at {node.type} (line {node.start_point[0] + 1})")

    def apply(self, tree: Tree, source: bytes) -> bytes:
        """Walk the tree, then render the recorded edits over `source`."""
        self.edits = []
        self.walk(tree.root_node)
        return render_edits(source, self.edits)

    def _visit(self, root: Node) -> Iterator[Node]:
        """Yield every node whose rule suppressed descent."""
        stack = [root]
        while stack:
            node = stack.pop()
            rule = self.rules.get(node.type)
            if rule is not None and not rule(node, self):
                yield node
                continue
            stack.extend(reversed(node.children))


def render_edits(source: bytes, edits: List[Edit]) -> bytes:
    """
    Splice replacement bytes into `source` at the recorded positions.

    Raises:
        ValueError: If two edits overlap or fall outside the source.
    """
    out = source
    last_start = len(source) + 1
    for edit in sorted(edits, key=lambda e: e.start, reverse=True):
        if edit.start < 0 or edit.end > len(source) or edit.start > edit.end:
            raise ValueError(f"edit [{edit.start}, {edit.end}) outside source")
        if edit.end > last_start:
            raise ValueError(f"overlapping edits at byte {edit.start}")
        out = out[:edit.start] + edit.replacement + out[edit.end:]
        last_start = edit.start
    return out


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _first_error(root: Node) -> Optional[Node]:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node
        if node.has_error:
            stack.extend(reversed(node.children))
    return None


def _position(text: str, offset: int) -> tuple:
    line = text.count("\n", 0, offset) + 1
    column = offset - (text.rfind("\n", 0, offset) + 1) + 1
    return line, column
