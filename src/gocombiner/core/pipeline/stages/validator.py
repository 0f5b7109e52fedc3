from __future__ import annotations

"""
Configuration Validation Service.

Gatekeeper between the interface layer and the pipeline. Coerces
untrusted values (CLI, JSON files) into the types the pipeline expects,
normalizes include prefixes, and fills missing keys with defaults.
"""

import logging
from typing import Any, Dict, List, Tuple

from gocombiner.domain.config import get_default_config

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize the provided configuration dictionary.

    Args:
        config: Raw configuration data (usually a dictionary).
        strict: If True, raises exceptions on type mismatch instead of coercing.

    Returns:
        Tuple[Dict[str, Any], List[str]]: The normalized configuration and
                                          a list of warnings.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        return defaults, warnings

    merged: Dict[str, Any] = dict(defaults)
    merged.update(config)

    for field in ("input_path", "output_dir"):
        merged[field] = _as_str(merged.get(field), defaults[field], field, warnings, strict)

    # An empty gofmt value means "do not format"
    gofmt = merged.get("gofmt")
    merged["gofmt"] = "" if gofmt in (None, "", False) else _as_str(gofmt, "", "gofmt", warnings, strict)

    merged["dry_run"] = _as_bool(merged.get("dry_run"), False, "dry_run", warnings, strict)

    for field in ("include", "exclude"):
        merged[field] = _as_list_str(merged.get(field), [], field, warnings, strict)

    merged["include"] = normalize_include_prefixes(merged["include"])
    merged["output_dir"] = _to_posix(merged["output_dir"]).rstrip("/") or defaults["output_dir"]

    return merged, warnings


def normalize_include_prefixes(prefixes: List[str]) -> List[str]:
    """
    Bring include prefixes to the relative POSIX form the scanner compares.

    `./cmd/`, `cmd\\` and `cmd` all become `cmd`. Duplicates are dropped
    while keeping the first occurrence.
    """
    out: List[str] = []
    for raw in prefixes:
        p = _to_posix(raw.strip())
        while p.startswith("./"):
            p = p[2:]
        p = p.strip("/")
        if p and p != "." and p not in out:
            out.append(p)
    return out


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _to_posix(value: str) -> str:
    return value.replace("\\", "/")


def _as_str(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    """Validate and sanitize string inputs."""
    if value is None:
        return fallback
    if isinstance(value, str):
        v = value.strip()
        return v if v else fallback

    msg = f"Invalid field '{field}': expected str, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_bool(value: Any, fallback: bool, field: str, warnings: List[str], strict: bool) -> bool:
    """Coerce various input types into native booleans."""
    if isinstance(value, bool):
        return value
    if value is None:
        return fallback

    if not strict:
        if isinstance(value, (int, float)) and value in (0, 1):
            warnings.append(f"Field '{field}' converted from number {value} to bool.")
            return bool(value)
        if isinstance(value, str):
            s = value.strip().lower()
            if s in ("true", "1", "yes", "y"):
                warnings.append(f"Field '{field}' converted from '{value}' to True.")
                return True
            if s in ("false", "0", "no", "n"):
                warnings.append(f"Field '{field}' converted from '{value}' to False.")
                return False

    msg = f"Invalid field '{field}': expected bool, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_list_str(value: Any, fallback: List[str], field: str, warnings: List[str], strict: bool) -> List[str]:
    """Ensure input is a list of sanitized strings, supporting CSV parsing."""
    if value is None:
        return list(fallback)

    if isinstance(value, str) and not strict:
        items = [x.strip() for x in value.split(",") if x.strip()]
        if items:
            warnings.append(f"Field '{field}' converted from CSV string to list.")
            return items
        return list(fallback)

    if isinstance(value, (list, tuple)):
        out: List[str] = []
        for i, item in enumerate(value):
            if isinstance(item, str):
                s = item.strip()
                if s:
                    out.append(s)
            else:
                msg = f"Invalid item in '{field}[{i}]': expected str."
                if strict:
                    raise TypeError(msg)
                warnings.append(f"{msg} Item discarded.")
        return out

    msg = f"Invalid field '{field}': expected list[str], received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return list(fallback)
