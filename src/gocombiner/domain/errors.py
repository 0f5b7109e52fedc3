from __future__ import annotations

"""
Combiner Error Taxonomy.

Every failure in the pipeline is fatal. Each stage raises its own
subclass so the interface layer can tell user input problems apart from
internal defects of the tool.
"""

from typing import Optional


class CombinerError(Exception):
    """Base class for all pipeline failures."""

    stage = "combine"

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        self.path = path
        if path:
            message = f"{path}: {message}"
        super().__init__(message)


class ConfigError(CombinerError):
    stage = "config"


class DescriptorError(CombinerError):
    """The go.mod descriptor is missing or has no usable module directive."""

    stage = "descriptor"


class ScanError(CombinerError):
    """A file could not be read or its package clause could not be parsed."""

    stage = "scan"


class TransformError(CombinerError):
    """A qualifying file failed to parse or render."""

    stage = "transform"


class WriteError(CombinerError):
    stage = "write"


class DuplicateCommandError(CombinerError):
    """Two units would be selected by the same invocation name."""

    stage = "dispatch"


class GenerationError(CombinerError):
    """
    The synthesized dispatcher failed its own parse check.

    This always points at a defect in the generator, never at user input.
    """

    stage = "generate"
