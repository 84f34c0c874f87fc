"""Typed failures raised by the binding pipeline.

Every error carries the file path and the operation that produced it so the
command-line layer can log a single contextual line and abort the run.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

PathLike = Union[str, Path]


class BindgenError(RuntimeError):
    """Base class for all fatal pipeline failures."""

    def __init__(
        self,
        message: str,
        path: Optional[PathLike] = None,
        operation: Optional[str] = None,
    ) -> None:
        self.message = message
        self.path = str(path) if path is not None else None
        self.operation = operation
        super().__init__(self._format())

    def _format(self) -> str:
        parts = []
        if self.operation:
            parts.append(f"[{self.operation}]")
        if self.path:
            parts.append(f"{self.path}:")
        parts.append(self.message)
        return " ".join(parts)


class ResolutionError(BindgenError):
    """A referenced module cannot be canonicalized, read, or does not exist."""


class ParseError(BindgenError):
    """A module's text is not syntactically valid TypeScript."""

    def __init__(
        self,
        message: str,
        path: Optional[PathLike] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
        operation: str = "parse",
    ) -> None:
        self.line = line
        self.column = column
        super().__init__(message, path=path, operation=operation)

    def _format(self) -> str:
        location = self.path or "<source>"
        if self.line is not None:
            location = f"{location}:{self.line}:{self.column or 1}"
        return f"[{self.operation}] {location}: {self.message}"


class MappingError(BindgenError):
    """A declaration cannot be mapped, or a module lies outside the entry tree."""

    def __init__(
        self,
        message: str,
        path: Optional[PathLike] = None,
        class_name: Optional[str] = None,
        param_name: Optional[str] = None,
        operation: str = "map",
    ) -> None:
        self.class_name = class_name
        self.param_name = param_name
        super().__init__(message, path=path, operation=operation)


class RenderError(BindgenError):
    """A binding block could not be rendered as valid Rust source."""


class OutputIOError(BindgenError):
    """Failure to clear, create, or write to the output tree."""


class ConfigValidationError(BindgenError):
    """Raised when the generator configuration is invalid."""
