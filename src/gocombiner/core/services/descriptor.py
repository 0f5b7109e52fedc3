from __future__ import annotations

"""
Module Descriptor Service.

Reads the `module` directive from the go.mod file at the tree root. The
module path is the root of every import path the dispatcher emits.
"""

import logging
import os
import re

from gocombiner.domain.constants import MODULE_DESCRIPTOR
from gocombiner.domain.errors import DescriptorError
from gocombiner.infra.fs import read_bytes

logger = logging.getLogger(__name__)

_MODULE_LINE_RX = re.compile(r"^\s*module\s+(.+?)\s*$")
_COMMENT_RX = re.compile(r"//.*$")
_MODULE_PATH_RX = re.compile(r"^[A-Za-z0-9._~+\-/]+$")


def resolve_module_path(input_dir: str) -> str:
    """
    Return the module path declared in `<input_dir>/go.mod`.

    Both `module example.com/x` and the quoted `module "example.com/x"`
    forms are accepted; trailing `//` comments are ignored.

    Raises:
        DescriptorError: If go.mod is missing, unreadable, or has no valid
                         module directive.
    """
    path = os.path.join(input_dir, MODULE_DESCRIPTOR)

    try:
        data = read_bytes(path)
    except FileNotFoundError as e:
        raise DescriptorError("module descriptor not found", path) from e
    except OSError as e:
        raise DescriptorError(f"cannot read module descriptor: {e}", path) from e

    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DescriptorError("module descriptor is not valid UTF-8", path) from e

    module = parse_module_path(text)
    if not module:
        raise DescriptorError("no module directive", path)
    if not _MODULE_PATH_RX.match(module):
        raise DescriptorError(f"invalid module path {module!r}", path)

    logger.info(f"Module path: {module}")
    return module


def parse_module_path(text: str) -> str:
    """Extract the module path from go.mod text, or "" if absent."""
    for line in text.splitlines():
        line = _COMMENT_RX.sub("", line)
        m = _MODULE_LINE_RX.match(line)
        if not m:
            continue
        value = m.group(1)
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"`":
            value = value[1:-1]
        return value.strip()
    return ""
