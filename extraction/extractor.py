"""
High-level entry points for TypeScript module extraction.

``parse_module`` is the single parse contract used by both the module
resolver and the mapping pass: read one file, reject any syntax error, and
reduce the tree to a ``TsModule``.
"""

import logging
from pathlib import Path
from typing import Union

from extraction.models import TsModule
from extraction.parser import ensure_valid, parse_bytes, parse_file
from extraction.traversal import build_module

logger = logging.getLogger(__name__)


def parse_module(file_path: Union[str, Path]) -> TsModule:
    """Parse one TypeScript module from disk.

    The file's source buffer only lives for the duration of this call.

    Args:
        file_path: Path to the ``.ts`` file, ideally already canonical.

    Returns:
        The parsed module model.

    Raises:
        ResolutionError: If the file cannot be read.
        ParseError: If the file is not valid UTF-8 TypeScript.

    Example:
        >>> module = parse_module("ts/index.ts")
        >>> [c.name for c in module.classes]
        ['Test']
    """
    path = Path(file_path)
    tree, _source = parse_file(path)
    return build_module(tree, path)


def parse_source(source: Union[str, bytes], file_path: Union[str, Path] = "<memory>.ts") -> TsModule:
    """Parse TypeScript source held in memory.

    Args:
        source: Source text or UTF-8 bytes.
        file_path: Path recorded on the module and used in diagnostics.

    Raises:
        ParseError: If the source is not valid TypeScript.
    """
    if isinstance(source, str):
        source = source.encode("utf-8")
    tree = ensure_valid(parse_bytes(source), file_path)
    return build_module(tree, Path(file_path))
