"""Piecewise compiler - transforms template tokens into Python source."""

from piecewise.compiler.compiler import Compiler, compile_template
from piecewise.compiler.escape import compose_filters, escape_literal, escape_path
from piecewise.compiler.names import RESERVED_WORDS, NameScope

__all__ = [
    "Compiler",
    "compile_template",
    "NameScope",
    "RESERVED_WORDS",
    "escape_path",
    "escape_literal",
    "compose_filters",
]
