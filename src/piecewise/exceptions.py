"""Piecewise Exceptions

Error taxonomy shared by the lexer, compiler, loaders and rendered templates.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Optional, Sequence

if TYPE_CHECKING:
    from piecewise.lexer.spec import LexError


class PiecewiseError(Exception):
    """Base exception for all piecewise errors."""

    pass


class TemplateSyntaxError(PiecewiseError):
    """Raised when a template fails to lex.

    Carries every error found in the template, not just the first one.
    """

    def __init__(self, errors: Sequence["LexError"], name: Optional[str] = None):
        self.errors = list(errors)
        self.name = name
        where = f" in template '{name}'" if name else ""
        lines = [f"{len(self.errors)} syntax error(s){where}:"]
        lines.extend(f"  {error}" for error in self.errors)
        super().__init__("\n".join(lines))


class CompileError(PiecewiseError):
    """Raised when a template cannot be turned into loadable Python."""

    pass


class LoaderError(PiecewiseError):
    """Base exception for template loading failures."""

    pass


class TemplateNotFoundError(LoaderError):
    """Raised when a template name cannot be resolved."""

    def __init__(self, name: str, path: Optional[Path] = None):
        self.name = name
        self.path = path
        if path is not None:
            super().__init__(f"Template not found: {name} ({path})")
        else:
            super().__init__(f"Template not found: {name}")


class RenderError(PiecewiseError):
    """Raised when a compiled template fails while rendering."""

    def __init__(self, name: str, message: str):
        self.name = name
        super().__init__(f"Failed to render '{name}': {message}")


class ConfigError(PiecewiseError):
    """Raised when piecewise.yaml is missing or invalid."""

    pass
