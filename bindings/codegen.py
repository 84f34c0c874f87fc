"""
Indented line buffer for generated Rust source.

The renderer appends lines at the current depth and opens braced blocks
through ``CodeGen.block``, which closes them even when rendering raises.
"""

from contextlib import contextmanager
from typing import Iterator, List

INDENT_UNIT: str = "    "


class CodeGen:
    """Accumulates source lines at a tracked indentation depth.

    Args:
        indent_unit: Text repeated once per depth level.
    """

    def __init__(self, indent_unit: str = INDENT_UNIT) -> None:
        self._buffer: List[str] = []
        self._depth: int = 0
        self._unit: str = indent_unit

    @property
    def depth(self) -> int:
        return self._depth

    def line(self, text: str = "") -> None:
        """Append one line; blank lines carry no indentation."""
        self._buffer.append(f"{self._unit * self._depth}{text}" if text else "")

    def lines(self, *texts: str) -> None:
        for text in texts:
            self.line(text)

    def indent(self) -> None:
        self._depth += 1

    def dedent(self) -> None:
        self._depth = max(self._depth - 1, 0)

    @contextmanager
    def block(self, opener: str, closer: str = "}") -> Iterator["CodeGen"]:
        """Emit ``opener``, indent the body, then emit ``closer``.

        Args:
            opener: Header line, normally ending in ``{``.
            closer: Line emitted after the body at the outer depth.
        """
        self.line(opener)
        self.indent()
        try:
            yield self
        finally:
            self.dedent()
            self.line(closer)

    def output(self) -> str:
        """Return the buffer as text ending in exactly one newline."""
        return "\n".join(self._buffer).rstrip("\n") + "\n"
