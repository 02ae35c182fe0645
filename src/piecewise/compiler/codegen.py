"""CodeBuilder - accumulates indented Python source."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, List


class CodeBuilder:
    """Build source code line by line."""

    INDENT_STEP = 4

    def __init__(self, indent: int = 0):
        self.lines: List[str] = []
        self.indent_level = indent

    def __str__(self) -> str:
        return "".join(self.lines)

    def add_line(self, line: str) -> None:
        """Add a line at the current indent. Don't include the newline."""
        self.lines.append(" " * self.indent_level + line + "\n")

    def indent(self) -> None:
        self.indent_level += self.INDENT_STEP

    def dedent(self) -> None:
        if self.indent_level < self.INDENT_STEP:
            raise ValueError("dedent() without matching indent()")
        self.indent_level -= self.INDENT_STEP

    @contextmanager
    def block(self, header: str) -> Iterator[None]:
        """Emit `header` and indent everything added inside the block.

        Blocks that end up empty get a `pass` so the source stays valid.
        """
        self.add_line(header)
        self.indent()
        start = len(self.lines)
        yield
        if len(self.lines) == start:
            self.add_line("pass")
        self.dedent()
