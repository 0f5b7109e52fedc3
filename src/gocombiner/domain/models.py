from __future__ import annotations

"""
Pipeline Domain Data Models.

Defines the unit of work carried between the scanner, transformer, writer
and dispatcher generator, plus the result object handed back to the
interface layer.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

# -----------------------------------------------------------------------------
# CORE DATA MODELS
# -----------------------------------------------------------------------------

@dataclass
class MainUnit:
    """
    One discovered `package main` directory.

    Attributes:
        command: Invocation name that selects this unit in the dispatcher.
        source_dir: Absolute path of the original directory.
        package_name: Collision-free Go identifier derived from the relative path.
        import_path: Fully qualified import path used by the dispatcher.
        output_dir: Absolute directory the rewritten files are written to.
        files: Qualifying source files in discovery order.
        contents: Rewritten bytes keyed by original absolute path.
    """
    command: str
    source_dir: str
    package_name: str
    import_path: str
    output_dir: str
    files: List[str] = field(default_factory=list)
    contents: Dict[str, bytes] = field(default_factory=dict)

    def to_summary(self) -> Dict[str, Any]:
        return {
            "command": self.command,
            "package": self.package_name,
            "import_path": self.import_path,
            "source_dir": self.source_dir,
            "output_dir": self.output_dir,
            "files": len(self.files),
        }


@dataclass(frozen=True)
class PipelineResult:
    """
    Unified result of a complete combine run.

    Attributes:
        ok: Flag indicating success or failure.
        error: Descriptive message in case of failure.
        error_stage: Stage that raised the failure (empty on success).
        input_dir: Normalized root directory processed.
        output_dir: Absolute output root.
        module: Module path read from go.mod.
        units: Summary of every combined unit, sorted by import path.
        dispatcher_path: Path of the generated dispatcher source.
        written_files: Every file written (or planned, on dry runs).
        dry_run: Whether the run skipped all writes.
        summary: Execution statistics.
    """
    ok: bool
    error: str
    error_stage: str

    input_dir: str
    output_dir: str
    module: str = ""

    units: List[Dict[str, Any]] = field(default_factory=list)
    dispatcher_path: str = ""
    written_files: List[str] = field(default_factory=list)
    dry_run: bool = False

    summary: Dict[str, Any] = field(default_factory=dict)

# -----------------------------------------------------------------------------
# FACTORY FUNCTIONS
# -----------------------------------------------------------------------------

def create_error_result(
        error: str,
        stage: str,
        input_dir: str,
        output_dir: str = "",
        module: str = "",
        dry_run: bool = False,
) -> PipelineResult:
    """
    Create a failed pipeline result instance.

    Args:
        error: Detailed error description.
        stage: Pipeline stage that failed.
        input_dir: The target input directory.
        output_dir: Calculated output root.
        module: Module path, if it was resolved before the failure.
        dry_run: Whether the failed run was a simulation.

    Returns:
        PipelineResult: An immutable error result object.
    """
    return PipelineResult(
        ok=False,
        error=error,
        error_stage=stage,
        input_dir=input_dir,
        output_dir=output_dir,
        module=module,
        dry_run=dry_run,
    )


def create_success_result(
        input_dir: str,
        output_dir: str,
        module: str,
        units: List[MainUnit],
        dispatcher_path: str,
        written_files: List[str],
        dry_run: bool = False,
        summary_extra: Optional[Dict[str, Any]] = None,
) -> PipelineResult:
    """Create a successful pipeline result instance."""
    return PipelineResult(
        ok=True,
        error="",
        error_stage="",
        input_dir=input_dir,
        output_dir=output_dir,
        module=module,
        units=[u.to_summary() for u in units],
        dispatcher_path=dispatcher_path,
        written_files=list(written_files),
        dry_run=dry_run,
        summary=summary_extra or {},
    )
