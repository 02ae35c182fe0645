"""Template - a compiled program bound to a filter table."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from piecewise.compiler.compiler import RENDER_FUNCTION
from piecewise.exceptions import CompileError, RenderError
from piecewise.filters import DEFAULT_FILTERS, Filter
from piecewise.runtime import Record, wrap

log = logging.getLogger(__name__)


class Template:
    """Executable form of generated template source.

    Usage:
        code = compile_template(loader, "data", "page")
        html = Template(code, name="page").render({"title": "Home"})
    """

    def __init__(
        self,
        code: str,
        name: str = "<template>",
        filters: Optional[Mapping[str, Filter]] = None,
    ):
        self.code = code
        self.name = name
        self.filters = DEFAULT_FILTERS if filters is None else filters

        try:
            program = compile(code, f"<piecewise:{name}>", "exec")
        except SyntaxError as exc:
            raise CompileError(
                f"Generated code for '{name}' does not load: {exc}"
            ) from exc

        namespace: dict[str, Any] = {}
        exec(program, namespace)
        self._render = namespace[RENDER_FUNCTION]

    def render(self, data: Any) -> str:
        """Render the template against `data`.

        Raises:
            RenderError: If a field lookup or a filter fails. The original
                exception is chained as the cause.
        """
        try:
            return self._render(Record(self.filters), wrap(data))
        except Exception as exc:
            log.debug("Rendering %s failed: %r", self.name, exc)
            raise RenderError(self.name, str(exc)) from exc

    def __repr__(self) -> str:
        return f"Template({self.name!r})"
