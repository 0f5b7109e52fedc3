from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema and translates the parsed argparse
namespace into configuration overrides for the pipeline.
"""

import argparse
from typing import Any, Dict, List, Optional

from gocombiner.domain.constants import APP_NAME, APP_VERSION, DEFAULT_GOFMT, DEFAULT_OUTPUT_DIR

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the gocombiner CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Combine the main packages of a Go module into one multi-call program.",
    )

    # --- Path Management ---
    p.add_argument(
        "-i", "--input",
        dest="input_path",
        default=None,
        help="Input directory holding go.mod (default: current directory).",
    )
    p.add_argument(
        "-o", "--output",
        dest="output_dir",
        default=None,
        help=f"Output directory relative to the input (default: {DEFAULT_OUTPUT_DIR}).",
    )

    # --- Discovery ---
    p.add_argument(
        "--include",
        dest="include",
        action="append",
        default=None,
        metavar="DIR",
        help="Only include these directories (repeatable or comma separated).",
    )
    p.add_argument(
        "--exclude",
        dest="exclude",
        action="append",
        default=None,
        metavar="NAME",
        help="Extra directory names to ignore (repeatable or comma separated).",
    )

    # --- Rendering ---
    fmt_group = p.add_mutually_exclusive_group()
    fmt_group.add_argument(
        "--gofmt",
        dest="gofmt",
        nargs="?",
        const=DEFAULT_GOFMT,
        default=None,
        metavar="PATH",
        help=f"gofmt executable used for canonical output (default: {DEFAULT_GOFMT}).",
    )
    fmt_group.add_argument(
        "--no-gofmt",
        dest="gofmt",
        action="store_const",
        const="",
        help="Keep rewritten sources in their original layout.",
    )

    # --- Execution ---
    p.add_argument(
        "--dry-run",
        action="store_true",
        help="Scan and rewrite in memory, but write nothing.",
    )
    p.add_argument(
        "--config",
        dest="config_file",
        default=None,
        help="JSON file with default settings.",
    )

    # --- Diagnostics ---
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print the run result as JSON.",
    )
    p.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help="Also write logs to this file.",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )
    p.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {APP_VERSION}",
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into configuration overrides.

    Only options given on the command line appear in the result, so values
    from a configuration file are kept otherwise.
    """
    overrides: Dict[str, Any] = {}

    overrides["input_path"] = args.input_path
    overrides["output_dir"] = args.output_dir
    overrides["include"] = _split_csv_list(args.include)
    overrides["exclude"] = _split_csv_list(args.exclude)
    overrides["gofmt"] = args.gofmt

    if args.dry_run:
        overrides["dry_run"] = True

    return overrides

# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def _split_csv_list(values: Optional[List[str]]) -> Optional[List[str]]:
    """Flatten repeated, comma-separated option values into one list."""
    if values is None:
        return None
    out: List[str] = []
    for value in values:
        out.extend(x.strip() for x in value.split(",") if x.strip())
    return out
