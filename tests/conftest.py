from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Builders for small Go module trees used across the suite.
"""

import os
import sys
from pathlib import Path
from typing import Callable, Dict

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)


MODULE_PATH = "example.com/tools"

MAIN_SOURCE = """\
// Command {name} does one thing well.
package main

import "fmt"

// main is the entry point.
func main() {{
\tfmt.Println("{name}")
}}
"""

LIB_SOURCE = """\
package util

func Helper() int {
\treturn 1
}
"""


def main_source(name: str) -> str:
    return MAIN_SOURCE.format(name=name)


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def make_tree(tmp_path: Path) -> Callable[[Dict[str, str]], Path]:
    """
    Return a builder that writes a Go module tree under tmp_path.

    The builder takes a mapping of relative path to file content and always
    adds a go.mod unless the mapping sets "go.mod" to None.
    """

    def _build(files: Dict[str, str]) -> Path:
        root = tmp_path / "module"
        root.mkdir(exist_ok=True)
        files = dict(files)
        go_mod = files.pop("go.mod", f"module {MODULE_PATH}\n\ngo 1.21\n")
        if go_mod is not None:
            (root / "go.mod").write_text(go_mod, encoding="utf-8")
        for rel, content in files.items():
            target = root / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        return root

    return _build


@pytest.fixture
def two_commands(make_tree: Callable[[Dict[str, str]], Path]) -> Path:
    """A module with cmd/alpha and cmd/beta main packages plus a library."""
    return make_tree({
        "cmd/alpha/main.go": main_source("alpha"),
        "cmd/beta/main.go": main_source("beta"),
        "internal/util/util.go": LIB_SOURCE,
    })


@pytest.fixture
def go_main() -> Callable[[str], str]:
    """Return a function rendering a minimal main package for a command."""
    return main_source
