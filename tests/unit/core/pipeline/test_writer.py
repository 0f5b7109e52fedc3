from __future__ import annotations

"""
Unit tests for the Combined Tree Writer.
"""

from pathlib import Path
from unittest.mock import patch

import pytest

from gocombiner.core.pipeline.components.writer import write_unit, write_units
from gocombiner.domain.errors import WriteError
from gocombiner.domain.models import MainUnit
from gocombiner.infra.fs import write_bytes as real_write


def _unit(tmp_path: Path, name: str = "cmd_a") -> MainUnit:
    return MainUnit(
        command=name.split("_")[-1],
        source_dir=f"/src/cmd/{name}",
        package_name=name,
        import_path=f"example.com/m/out/{name}",
        output_dir=str(tmp_path / "out" / name),
        files=[f"/src/cmd/{name}/main.go"],
        contents={
            f"/src/cmd/{name}/main.go": f"package {name}\n".encode("utf-8"),
            f"/src/cmd/{name}/flags.go": f"package {name}\n\nvar v bool\n".encode("utf-8"),
        },
    )


def test_write_unit_uses_base_names(tmp_path: Path) -> None:
    unit = _unit(tmp_path)

    written = write_unit(unit)

    out = tmp_path / "out" / "cmd_a"
    assert sorted(Path(p).name for p in written) == ["flags.go", "main.go"]
    assert (out / "main.go").read_bytes() == b"package cmd_a\n"
    assert (out / "flags.go").read_text(encoding="utf-8").endswith("var v bool\n")


def test_write_unit_is_idempotent(tmp_path: Path) -> None:
    unit = _unit(tmp_path)

    write_unit(unit)
    write_unit(unit)

    assert (tmp_path / "out" / "cmd_a" / "main.go").read_bytes() == b"package cmd_a\n"


def test_write_unit_dry_run_writes_nothing(tmp_path: Path) -> None:
    written = write_unit(_unit(tmp_path), dry_run=True)

    assert len(written) == 2
    assert not (tmp_path / "out").exists()


def test_write_units_stops_at_first_failure(tmp_path: Path) -> None:
    first, second = _unit(tmp_path, "cmd_a"), _unit(tmp_path, "cmd_b")

    def failing_write(path, data):
        if "cmd_b" in path:
            raise PermissionError(13, "Permission denied")
        real_write(path, data)

    with patch("gocombiner.core.pipeline.components.writer.write_bytes", side_effect=failing_write):
        with pytest.raises(WriteError) as exc:
            write_units([first, second])

    assert "cmd_b" in exc.value.path
    # No rollback of earlier units
    assert (tmp_path / "out" / "cmd_a" / "main.go").exists()


def test_write_unit_directory_failure(tmp_path: Path) -> None:
    (tmp_path / "out").write_text("not a directory", encoding="utf-8")

    with pytest.raises(WriteError, match="cannot create directory"):
        write_unit(_unit(tmp_path))
