"""piecewise - precompiled {{ }} templates.

Templates are compiled once into a Python render function and rendered
many times:

    loader = DirectoryLoader("templates")
    page = loader.get_template("page")
    page.render({"title": "Home"})
"""

from piecewise._version import __version__
from piecewise.compiler import Compiler, compile_template
from piecewise.exceptions import (
    CompileError,
    ConfigError,
    LoaderError,
    PiecewiseError,
    RenderError,
    TemplateNotFoundError,
    TemplateSyntaxError,
)
from piecewise.filters import DEFAULT_FILTERS
from piecewise.lexer import Lexer, lex
from piecewise.loader import DictLoader, DirectoryLoader, Loader, OverrideLoader
from piecewise.template import Template

__all__ = [
    "__version__",
    # Compiling
    "Compiler",
    "compile_template",
    "Lexer",
    "lex",
    # Loading and rendering
    "Loader",
    "DictLoader",
    "DirectoryLoader",
    "OverrideLoader",
    "Template",
    "DEFAULT_FILTERS",
    # Errors
    "PiecewiseError",
    "TemplateSyntaxError",
    "CompileError",
    "LoaderError",
    "TemplateNotFoundError",
    "RenderError",
    "ConfigError",
]
