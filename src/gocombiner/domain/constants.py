from __future__ import annotations

"""
Domain Constants.

Centralizes the Go-specific names the combiner relies on: the reserved
package and function identifiers, file suffixes, the directories that are
never scanned, and the contract of the generated dispatcher.
"""

from typing import FrozenSet

APP_NAME = "gocombiner"
APP_VERSION = "1.0.0"

# -----------------------------------------------------------------------------
# GO SOURCE CONVENTIONS
# -----------------------------------------------------------------------------
SOURCE_SUFFIX = ".go"
TEST_SUFFIX = "_test.go"
MAIN_PACKAGE = "main"
MAIN_FUNCTION = "main"

# Name every rewritten entry point is renamed to
ENTRY_FUNCTION = "MainFunction"

MODULE_DESCRIPTOR = "go.mod"

# -----------------------------------------------------------------------------
# SCANNING
# -----------------------------------------------------------------------------
ALWAYS_IGNORE: FrozenSet[str] = frozenset({
    ".git",
    "vendor",
    ".idea",
    ".github",
})

DEFAULT_OUTPUT_DIR = "cmd/combined"

# -----------------------------------------------------------------------------
# GENERATED DISPATCHER
# -----------------------------------------------------------------------------
DISPATCHER_FILE = "main.go"
UNKNOWN_COMMAND_EXIT = 11

# Packages imported by the dispatcher and the local it declares
DISPATCHER_IMPORTS = ("fmt", "os", "path/filepath")
DISPATCHER_LOCAL = "name"

GO_KEYWORDS: FrozenSet[str] = frozenset({
    "break", "case", "chan", "const", "continue", "default", "defer",
    "else", "fallthrough", "for", "func", "go", "goto", "if", "import",
    "interface", "map", "package", "range", "return", "select", "struct",
    "switch", "type", "var",
})

# Package names that would not compile as an import alias in the dispatcher
RESERVED_IDENTIFIERS: FrozenSet[str] = GO_KEYWORDS | frozenset({
    "_", MAIN_PACKAGE, "fmt", "os", "filepath", DISPATCHER_LOCAL,
})

DEFAULT_GOFMT = "gofmt"
