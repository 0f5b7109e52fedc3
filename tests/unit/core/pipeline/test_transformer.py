from __future__ import annotations

"""
Unit tests for the Main Package Rewriter.

Verifies:
1. Package clause and free-standing main function renaming.
2. Methods named main and other identifiers are left alone.
3. Comments and layout survive byte for byte.
4. Parse failures carry the offending path.
"""

import shutil
from pathlib import Path
from unittest.mock import patch

import pytest

from gocombiner.core.analysis.go_syntax import parse_source, read_package_name
from gocombiner.core.pipeline.components.transformer import parse_and_replace, transform_unit
from gocombiner.core.processing.formatter import FormatError
from gocombiner.domain.errors import TransformError
from gocombiner.domain.models import MainUnit


def _write(tmp_path: Path, content: str, name: str = "main.go") -> str:
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")
    return str(path)


def test_renames_package_and_main(tmp_path: Path, go_main) -> None:
    path = _write(tmp_path, go_main("alpha"))

    out = parse_and_replace("cmd_alpha", path).decode("utf-8")

    expected = go_main("alpha").replace("package main", "package cmd_alpha").replace(
        "func main()", "func MainFunction()"
    )
    assert out == expected
    assert "// main is the entry point." in out


def test_leaves_methods_and_other_functions(tmp_path: Path) -> None:
    src = (
        "package main\n"
        "\n"
        "type app struct{}\n"
        "\n"
        "func (a *app) main() {}\n"
        "\n"
        "func mainly() {}\n"
        "\n"
        "func main() {\n"
        "\tf := func() { mainly() }\n"
        "\tf()\n"
        "}\n"
    )
    path = _write(tmp_path, src)

    out = parse_and_replace("cmd_x", path).decode("utf-8")

    assert "package cmd_x\n" in out
    assert "func (a *app) main() {}" in out
    assert "func mainly() {}" in out
    assert "func MainFunction() {" in out
    assert "func main()" not in out


def test_non_main_package_is_untouched(tmp_path: Path) -> None:
    src = "package util\n\nfunc main() {}\n"
    path = _write(tmp_path, src)

    assert parse_and_replace("cmd_x", path) == src.encode("utf-8")


def test_rewritten_file_is_no_longer_main(tmp_path: Path, go_main) -> None:
    path = _write(tmp_path, go_main("x"))

    out = parse_and_replace("tools_x", path)

    assert read_package_name(out) == "tools_x"
    parse_source(out)


def test_syntax_error_is_fatal_with_path(tmp_path: Path) -> None:
    path = _write(tmp_path, "package main\n\nfunc main() {\n")

    with pytest.raises(TransformError) as exc:
        parse_and_replace("cmd_x", path)

    assert exc.value.path == path
    assert path in str(exc.value)


def test_missing_file_is_fatal(tmp_path: Path) -> None:
    with pytest.raises(TransformError):
        parse_and_replace("cmd_x", str(tmp_path / "gone.go"))


def test_formatter_failure_is_transform_error(tmp_path: Path, go_main) -> None:
    path = _write(tmp_path, go_main("x"))

    with patch(
        "gocombiner.core.pipeline.components.transformer.format_source",
        side_effect=FormatError("boom"),
    ):
        with pytest.raises(TransformError, match="failed to format"):
            parse_and_replace("cmd_x", path, gofmt="/usr/bin/gofmt")


def test_transform_unit_fills_contents(tmp_path: Path, go_main) -> None:
    a = _write(tmp_path, go_main("x"), "main.go")
    b = _write(tmp_path, "package main\n\nvar debug = false\n", "flags.go")
    unit = MainUnit(
        command="x",
        source_dir=str(tmp_path),
        package_name="cmd_x",
        import_path="example.com/m/out/cmd_x",
        output_dir=str(tmp_path / "out" / "cmd_x"),
        files=[a, b],
    )

    transform_unit(unit)

    assert set(unit.contents) == {a, b}
    assert unit.contents[b] == b"package cmd_x\n\nvar debug = false\n"


@pytest.mark.skipif(shutil.which("gofmt") is None, reason="gofmt not installed")
def test_gofmt_brings_output_to_canonical_layout(tmp_path: Path) -> None:
    path = _write(tmp_path, 'package main\nimport "fmt"\nfunc main(){\nfmt.Println( 1 )\n}\n')

    out = parse_and_replace("cmd_x", path, gofmt=shutil.which("gofmt")).decode("utf-8")

    assert out.startswith("package cmd_x\n")
    assert "func MainFunction() {\n\tfmt.Println(1)\n}\n" in out
