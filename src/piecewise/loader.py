"""Loaders - resolve template names to source text."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Dict, Mapping, Optional, Protocol, Union

from piecewise.exceptions import TemplateNotFoundError

if TYPE_CHECKING:
    from piecewise.config import PiecewiseConfig
    from piecewise.filters import Filter
    from piecewise.lexer import Lexer
    from piecewise.template import Template

log = logging.getLogger(__name__)

DEFAULT_EXTENSION = ".pwp"


class Loader(Protocol):
    """Anything that maps a template name to its source."""

    def load(self, name: str) -> str:
        """Return the source of template `name`.

        Raises:
            LoaderError: If the template cannot be found or read.
        """
        ...


class DictLoader:
    """Serves templates from an in-memory mapping."""

    def __init__(self, templates: Mapping[str, str]):
        self.templates = dict(templates)

    def load(self, name: str) -> str:
        try:
            return self.templates[name]
        except KeyError:
            raise TemplateNotFoundError(name) from None


class OverrideLoader:
    """Checks `overrides` before falling back to another loader.

    Used to swap in the source of a single template (typically the entry
    point) without touching the backing store.
    """

    def __init__(self, loader: Loader, overrides: Optional[Mapping[str, str]] = None):
        self.loader = loader
        self.overrides = dict(overrides or {})

    def load(self, name: str) -> str:
        if name in self.overrides:
            return self.overrides[name]
        return self.loader.load(name)


class DirectoryLoader:
    """Loads `<root>/<name><extension>` files.

    File contents are cached per name for the lifetime of the loader and
    never reread.
    """

    def __init__(
        self,
        root: Union[str, Path],
        extension: str = DEFAULT_EXTENSION,
        lexer: Optional["Lexer"] = None,
    ):
        """Initialize loader.

        Args:
            root: Directory holding the template files.
            extension: Suffix appended to template names.
            lexer: Lexer used by get_template(). Defaults to a plain Lexer.
        """
        self.root = Path(root)
        self.extension = extension
        self.lexer = lexer
        self.cache: Dict[str, str] = {}

    @classmethod
    def from_config(cls, config: "PiecewiseConfig") -> "DirectoryLoader":
        from piecewise.lexer import Lexer

        return cls(
            config.root,
            extension=config.extension,
            lexer=Lexer(default_filters=config.default_filters),
        )

    def path_for(self, name: str) -> Path:
        if not name or name in (".", "..") or Path(name).name != name:
            raise TemplateNotFoundError(name)
        return self.root / (name + self.extension)

    def load(self, name: str) -> str:
        if name in self.cache:
            return self.cache[name]

        path = self.path_for(name)
        try:
            source = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise TemplateNotFoundError(name, path) from None

        log.debug("Loaded template %r from %s", name, path)
        self.cache[name] = source
        return source

    def get_template(
        self,
        name: str,
        overrides: Optional[Mapping[str, str]] = None,
        filters: Optional[Mapping[str, "Filter"]] = None,
        data_variable: str = "data",
    ) -> "Template":
        """Compile template `name` into a renderable Template.

        Args:
            name: Entry template.
            overrides: Sources that take precedence over files, by name.
            filters: Filter table; defaults to the built-in filters.
            data_variable: Parameter name in the generated source.
        """
        from piecewise.compiler import Compiler
        from piecewise.template import Template

        loader = OverrideLoader(self, overrides)
        code = Compiler(loader, lexer=self.lexer).compile(name, data_variable)
        return Template(code, name=name, filters=filters)
