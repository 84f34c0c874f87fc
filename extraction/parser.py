"""
Tree-sitter parser initialization and file parsing utilities.

This module provides functions to initialize the TypeScript parser, parse
source files, and locate syntax errors in the resulting trees.
"""

import logging
from pathlib import Path
from typing import Iterator, Optional, Tuple, Union

import tree_sitter_typescript as tsts
from tree_sitter import Language, Node, Parser, Tree

from core.errors import ParseError, ResolutionError

# Configure logging
logger = logging.getLogger(__name__)

# Module-level language constant
TS_LANGUAGE = Language(tsts.language_typescript())


def create_parser() -> Parser:
    """Create and configure a tree-sitter parser for TypeScript.

    Returns:
        A Parser instance configured with the TypeScript language.

    Example:
        >>> parser = create_parser()
        >>> tree = parser.parse(b"class A {}")
    """
    parser = Parser(TS_LANGUAGE)
    logger.debug("Created tree-sitter TypeScript parser")
    return parser


def parse_bytes(source: bytes) -> Tree:
    """Parse raw bytes of TypeScript source code.

    The returned tree may contain error nodes; use ``first_error_node`` or
    ``ensure_valid`` to reject invalid sources.

    Args:
        source: UTF-8 encoded bytes of TypeScript source code.

    Returns:
        A Tree object representing the parsed AST.

    Raises:
        TypeError: If source is not bytes.

    Example:
        >>> tree = parse_bytes(b"class A {}")
        >>> tree.root_node.type
        'program'
    """
    if not isinstance(source, bytes):
        raise TypeError(f"Source must be bytes, got {type(source).__name__}")

    parser = create_parser()
    tree = parser.parse(source)

    if tree.root_node.has_error:
        logger.debug("Parsed tree contains syntax errors")

    logger.debug("Parsed %d bytes of TypeScript code", len(source))
    return tree


def _iter_error_nodes(node: Node) -> Iterator[Node]:
    """Yield ERROR and MISSING nodes in document order."""
    stack = [node]
    while stack:
        current = stack.pop()
        if current.is_error or current.is_missing:
            yield current
            continue
        if not current.has_error:
            continue
        stack.extend(reversed(current.children))


def count_error_nodes(tree: Tree) -> int:
    """Count ERROR and MISSING nodes in a parsed tree."""
    return sum(1 for _ in _iter_error_nodes(tree.root_node))


def first_error_node(tree: Tree) -> Optional[Node]:
    """Return the first ERROR or MISSING node in document order, if any."""
    return next(_iter_error_nodes(tree.root_node), None)


def ensure_valid(tree: Tree, file_path: Union[str, Path]) -> Tree:
    """Raise ``ParseError`` if the tree contains any syntax error.

    Args:
        tree: A parsed tree.
        file_path: Path used for diagnostics.

    Returns:
        The same tree, when it is error-free.

    Raises:
        ParseError: Carrying the 1-indexed line and column of the first error.
    """
    error = first_error_node(tree)
    if error is None:
        return tree

    line = error.start_point.row + 1
    column = error.start_point.column + 1
    if error.is_missing:
        message = f"missing '{error.type}'"
    else:
        snippet = (error.text or b"").decode("utf-8", errors="replace").strip()
        snippet = snippet.splitlines()[0] if snippet else ""
        message = f"unexpected syntax {snippet[:40]!r}" if snippet else "unexpected syntax"
    total = count_error_nodes(tree)
    if total > 1:
        message = f"{message} ({total} syntax errors)"
    raise ParseError(message, path=file_path, line=line, column=column)


def read_source(file_path: Union[str, Path]) -> bytes:
    """Read a module's raw bytes, checking that they are valid UTF-8.

    Raises:
        ResolutionError: If the file cannot be read.
        ParseError: If the file is not valid UTF-8.
    """
    try:
        with open(file_path, "rb") as f:
            source_bytes = f.read()
    except OSError as e:
        logger.error("Error reading file %s: %s", file_path, e)
        raise ResolutionError(f"cannot read module: {e}", path=file_path, operation="read") from e

    try:
        source_bytes.decode("utf-8")
    except UnicodeDecodeError as e:
        prefix = source_bytes[:e.start]
        line = prefix.count(b"\n") + 1
        column = e.start - (prefix.rfind(b"\n") + 1) + 1
        raise ParseError("source is not valid UTF-8", path=file_path, line=line, column=column) from e
    return source_bytes


def parse_file(file_path: Union[str, Path]) -> Tuple[Tree, bytes]:
    """Parse a TypeScript source file from disk.

    The source buffer is returned alongside the tree so callers can slice
    node text; it is not retained anywhere else.

    Args:
        file_path: Path to the .ts file.

    Returns:
        A tuple of (Tree, source_bytes).

    Raises:
        ResolutionError: If the file cannot be read.
        ParseError: If the file is not valid UTF-8 or not valid TypeScript.

    Example:
        >>> tree, source = parse_file("index.ts")
        >>> tree.root_node.type
        'program'
    """
    source_bytes = read_source(file_path)
    tree = ensure_valid(parse_bytes(source_bytes), file_path)
    logger.debug("Successfully parsed file: %s", file_path)
    return tree, source_bytes
