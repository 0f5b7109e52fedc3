from __future__ import annotations

"""
Core orchestration pipeline.

Coordinates a combine run:
1. Validates configuration and resolves paths.
2. Reads the module path from go.mod.
3. Scans the tree for main packages.
4. Rewrites every unit file in memory.
5. Rejects duplicate command names and renders the dispatcher.
6. Writes the rewritten units.
7. Writes the dispatcher.

Steps 2-5 finish before the first write, so a bad descriptor, an
unparsable file, a command clash or a generator defect leaves the output
root untouched.
"""

import logging
import os
from typing import Any, Dict, Optional

from gocombiner.core.pipeline.components.dispatcher import (
    check_commands,
    render_dispatcher,
    sort_units,
    write_dispatcher,
)
from gocombiner.core.pipeline.components.transformer import transform_unit
from gocombiner.core.pipeline.components.writer import write_units
from gocombiner.core.pipeline.stages.validator import validate_config
from gocombiner.core.processing.formatter import FormatError, resolve_gofmt
from gocombiner.core.services.descriptor import resolve_module_path
from gocombiner.core.services.scanner import scan_tree
from gocombiner.domain.constants import DEFAULT_GOFMT
from gocombiner.domain.errors import CombinerError, ConfigError
from gocombiner.domain.models import (
    PipelineResult,
    create_error_result,
    create_success_result,
)
from gocombiner.infra.fs import is_within, normalize_path

logger = logging.getLogger(__name__)


def run_pipeline(config: Optional[Dict[str, Any]]) -> PipelineResult:
    """
    Execute the full combine pipeline.

    Args:
        config: The configuration dictionary (raw or partial).

    Returns:
        PipelineResult: Status, unit summary and written paths. Failures are
                        reported through the result, never raised.
    """
    logger.info("Pipeline execution started.")

    cfg, warnings = validate_config(config, strict=False)
    for warning in warnings:
        logger.warning(f"Configuration Warning: {warning}")

    input_dir = normalize_path(cfg["input_path"], os.getcwd())
    output_dir = os.path.abspath(os.path.join(input_dir, cfg["output_dir"]))
    dry_run = cfg["dry_run"]
    module = ""

    try:
        _check_paths(input_dir, output_dir)
        gofmt = _resolve_formatter(cfg["gofmt"])

        module = resolve_module_path(input_dir)

        units = scan_tree(
            input_dir,
            output_dir,
            module,
            include=cfg["include"],
            exclude=cfg["exclude"],
        )
        if not units:
            logger.warning("No main packages found; the dispatcher will reject every command.")

        for unit in units.values():
            transform_unit(unit, gofmt)

        ordered = sort_units(units.values())
        check_commands(ordered)
        dispatcher_source = render_dispatcher(ordered, gofmt)

        written = write_units(ordered, dry_run=dry_run)
        dispatcher_path = write_dispatcher(
            ordered, output_dir, gofmt=gofmt, dry_run=dry_run, source=dispatcher_source
        )

    except CombinerError as e:
        logger.error(f"{e.stage} failed: {e}")
        return create_error_result(str(e), e.stage, input_dir, output_dir, module, dry_run)

    summary = {
        "units": len(ordered),
        "files": sum(len(u.files) for u in ordered),
        "commands": [u.command for u in ordered],
        "formatted": bool(gofmt),
    }

    logger.info(f"Combined {summary['units']} command(s) into {output_dir}")
    return create_success_result(
        input_dir,
        output_dir,
        module,
        ordered,
        dispatcher_path,
        written + [dispatcher_path],
        dry_run=dry_run,
        summary_extra=summary,
    )


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _check_paths(input_dir: str, output_dir: str) -> None:
    if not os.path.isdir(input_dir):
        raise ConfigError("input is not a directory", input_dir)
    if output_dir == input_dir or not is_within(output_dir, input_dir):
        raise ConfigError("output directory must be a subdirectory of the input", output_dir)


def _resolve_formatter(gofmt: str) -> str:
    """
    Resolve the formatter executable.

    A missing default `gofmt` only downgrades the run to unformatted output;
    a formatter the user named explicitly must exist.
    """
    try:
        return resolve_gofmt(gofmt)
    except FormatError as e:
        if gofmt == DEFAULT_GOFMT:
            logger.warning(f"{e}; rewritten sources keep their original layout")
            return ""
        raise ConfigError(str(e)) from e
