from __future__ import annotations

"""
Unit tests for the Dispatcher Generator.

Verifies:
1. Exact generated source for a known unit set.
2. Deterministic ordering regardless of input order.
3. Duplicate command detection and the pure selection function.
4. Self-check failures are reported as generation errors.
"""

from pathlib import Path
from unittest.mock import patch

import pytest

from gocombiner.core.analysis.go_syntax import GoSyntaxError
from gocombiner.core.pipeline.components.dispatcher import (
    build_dispatch_table,
    check_commands,
    generate_source,
    render_dispatcher,
    select_entry_point,
    write_dispatcher,
)
from gocombiner.domain.errors import DuplicateCommandError, GenerationError
from gocombiner.domain.models import MainUnit

EXPECTED = """\
// Code generated by gocombiner. DO NOT EDIT.

package main

import (
\t"fmt"
\t"os"
\t"path/filepath"

\tcmd_alpha "example.com/m/built/cmd_alpha"
\tcmd_beta "example.com/m/built/cmd_beta"
)

func main() {
\tname := filepath.Base(os.Args[0])

\tswitch name {
\tcase "alpha":
\t\tcmd_alpha.MainFunction()
\tcase "beta":
\t\tcmd_beta.MainFunction()
\tdefault:
\t\tfmt.Fprintf(os.Stderr, "unknown command %s\\n", name)
\t\tos.Exit(11)
\t}
}
"""


def _unit(rel_dir: str, root: str = "/src") -> MainUnit:
    package_name = rel_dir.replace("/", "_")
    return MainUnit(
        command=rel_dir.rsplit("/", 1)[-1],
        source_dir=f"{root}/{rel_dir}",
        package_name=package_name,
        import_path=f"example.com/m/built/{package_name}",
        output_dir=f"{root}/built/{package_name}",
    )


def test_generate_source_matches_expected_layout() -> None:
    source = generate_source([_unit("cmd/beta"), _unit("cmd/alpha")])

    assert source.decode("utf-8") == EXPECTED


def test_generate_source_is_order_independent() -> None:
    units = [_unit("cmd/c"), _unit("a/x"), _unit("cmd/b")]

    assert generate_source(units) == generate_source(list(reversed(units)))


def test_render_dispatcher_parses_cleanly() -> None:
    assert render_dispatcher([_unit("cmd/alpha")]).startswith(b"// Code generated")


def test_render_dispatcher_with_no_units() -> None:
    out = render_dispatcher([]).decode("utf-8")

    assert "switch name {\n\tdefault:" in out
    assert "os.Exit(11)" in out


def test_render_dispatcher_self_check_failure() -> None:
    with patch(
        "gocombiner.core.pipeline.components.dispatcher.parse_source",
        side_effect=GoSyntaxError("syntax error", 3, 1),
    ):
        with pytest.raises(GenerationError, match="does not parse"):
            render_dispatcher([_unit("cmd/alpha")])


def test_render_dispatcher_rejects_unencodable_command() -> None:
    unit = _unit("cmd/alpha")
    unit.command = "t\udcff"

    with pytest.raises(GenerationError, match="not valid UTF-8"):
        render_dispatcher([unit])


def test_write_dispatcher_uses_prerendered_source(tmp_path: Path) -> None:
    out = tmp_path / "built"
    source = render_dispatcher([_unit("cmd/alpha")])

    with patch("gocombiner.core.pipeline.components.dispatcher.render_dispatcher") as render:
        write_dispatcher([_unit("cmd/alpha")], str(out), source=source)

    render.assert_not_called()
    assert (out / "main.go").read_bytes() == source


def test_write_dispatcher_creates_output_root(tmp_path: Path) -> None:
    out = tmp_path / "built"

    path = write_dispatcher([_unit("cmd/alpha")], str(out))

    assert Path(path) == out / "main.go"
    assert "cmd_alpha.MainFunction()" in (out / "main.go").read_text(encoding="utf-8")


def test_write_dispatcher_dry_run(tmp_path: Path) -> None:
    write_dispatcher([_unit("cmd/alpha")], str(tmp_path / "built"), dry_run=True)

    assert not (tmp_path / "built").exists()


def test_check_commands_rejects_duplicates() -> None:
    with pytest.raises(DuplicateCommandError) as exc:
        check_commands([_unit("a/tool"), _unit("b/tool"), _unit("c/other")])

    assert "'tool'" in str(exc.value)
    assert "/src/a/tool" in str(exc.value)
    assert "/src/b/tool" in str(exc.value)


def test_check_commands_accepts_distinct_names() -> None:
    check_commands([_unit("cmd/alpha"), _unit("cmd/beta")])


def test_select_entry_point() -> None:
    table = build_dispatch_table([_unit("cmd/alpha"), _unit("cmd/beta")])

    assert select_entry_point("alpha", table).package_name == "cmd_alpha"
    assert select_entry_point("/usr/local/bin/beta", table).package_name == "cmd_beta"
    assert select_entry_point("gamma", table) is None
    assert list(table) == ["alpha", "beta"]
