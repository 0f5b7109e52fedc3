from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, configuration loading
and merging, pipeline execution, and result rendering.
"""

import json
import logging
import sys
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from gocombiner.core.pipeline.engine import run_pipeline
from gocombiner.domain.config import CONFIG_KEYS, load_config
from gocombiner.domain.errors import ConfigError
from gocombiner.domain.models import PipelineResult
from gocombiner.infra.logging import LoggingConfig, configure_logging, shutdown_logging
from gocombiner.interface.cli import args as cli_args

logger = logging.getLogger(__name__)

# Process exit codes by failing stage
EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_INTERNAL = 3
EXIT_INTERRUPTED = 130

_STAGE_EXIT_CODES: Dict[str, int] = {
    "config": EXIT_USAGE,
    "generate": EXIT_INTERNAL,
}

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the main CLI application workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code (0 for success, non-zero for failure).
    """
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    log_level = "DEBUG" if args.debug else "INFO"
    configure_logging(LoggingConfig(level=log_level, console=True, log_file=args.log_file), force=True)

    try:
        return _run(args)
    finally:
        shutdown_logging()


def _run(args: Any) -> int:
    logger.debug("CLI execution initiated. Resolving configuration...")

    try:
        base_conf = load_config(args.config_file)
    except ConfigError as e:
        logger.error(str(e))
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_USAGE

    overrides = cli_args.args_to_overrides(args)
    raw_conf = _merge_config(base_conf, overrides)

    try:
        result = run_pipeline(raw_conf)
    except KeyboardInterrupt:
        logger.warning("Interrupted by user.")
        print("Interrupted.", file=sys.stderr)
        return EXIT_INTERRUPTED

    if args.json_output:
        print(json.dumps(asdict(result), ensure_ascii=False, indent=2))
    else:
        _print_human_summary(result)

    if result.ok:
        return EXIT_OK
    return _STAGE_EXIT_CODES.get(result.error_stage, EXIT_FAILURE)

# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Shallow-merge known, non-None override values into the base config."""
    out = dict(base)
    for k in CONFIG_KEYS:
        if k in overrides and overrides[k] is not None:
            out[k] = overrides[k]
    return out

# -----------------------------------------------------------------------------
# VIEW RENDERING (HUMAN READABLE)
# -----------------------------------------------------------------------------

def _print_human_summary(result: PipelineResult) -> None:
    if not result.ok:
        print(f"ERROR: {result.error}", file=sys.stderr)
        return

    if result.dry_run:
        print("Dry run: nothing was written.")

    print(f"Module: {result.module}")
    print(f"Output: {result.output_dir}")
    print(f"Commands combined: {len(result.units)}")
    for unit in result.units:
        print(f"  - {unit['command']}: {unit['import_path']} ({unit['files']} file(s))")
    print(f"Dispatcher: {result.dispatcher_path}")

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
