from __future__ import annotations

"""
Configuration Domain Management.

Provides the default run configuration and loads optional JSON files
holding project-specific overrides (for example a checked-in
`combine.json` used by CI).
"""

import json
import logging
import os
from typing import Any, Dict, Optional

from gocombiner.domain.constants import DEFAULT_GOFMT, DEFAULT_OUTPUT_DIR
from gocombiner.domain.errors import ConfigError

logger = logging.getLogger(__name__)

# Keys a configuration file may set
CONFIG_KEYS = (
    "input_path",
    "output_dir",
    "include",
    "exclude",
    "gofmt",
    "dry_run",
)


# -----------------------------------------------------------------------------
# Configuration Models (Dict-based)
# -----------------------------------------------------------------------------
def get_default_config() -> Dict[str, Any]:
    """
    Generate the default runtime configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        # IO Paths
        "input_path": os.getcwd(),
        "output_dir": DEFAULT_OUTPUT_DIR,

        # Filtering
        "include": [],
        "exclude": [],

        # Rendering
        "gofmt": DEFAULT_GOFMT,

        # Execution
        "dry_run": False,
    }


# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration defaults, overlaid with a JSON file when given.

    Unknown keys are ignored with a warning. A missing or malformed file is
    fatal because the caller asked for it explicitly.

    Args:
        path: Optional JSON configuration file.

    Returns:
        Dict[str, Any]: The merged (still unvalidated) configuration.

    Raises:
        ConfigError: If the file cannot be read or is not a JSON object.
    """
    config = get_default_config()
    if not path:
        return config

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise ConfigError(f"cannot read configuration: {e}", path) from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid JSON (line {e.lineno}): {e.msg}", path) from e

    if not isinstance(data, dict):
        raise ConfigError("configuration must be a JSON object", path)

    for key, value in data.items():
        if key not in CONFIG_KEYS:
            logger.warning(f"Ignoring unknown configuration key '{key}' in {path}")
            continue
        config[key] = value

    logger.debug(f"Configuration loaded from {path}")
    return config
