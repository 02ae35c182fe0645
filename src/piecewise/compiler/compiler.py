"""Compiler - lowers template tokens into Python source.

The generated module defines a single function:

    def render(filters, data):
        output = []
        ...
        return ''.join(output)

Included templates are inlined at every use. A template that ends up
including itself, directly or through other templates, is compiled once
as a nested function that calls itself instead.
"""

from __future__ import annotations

import keyword
import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, AbstractSet, Callable, Dict, Iterator, List, Optional

from piecewise.compiler.codegen import CodeBuilder
from piecewise.compiler.escape import (
    FILTERS_NAME,
    compose_filters,
    escape_path,
    quote,
)
from piecewise.compiler.names import GENERATED_BUILTINS, RESERVED_WORDS, NameScope
from piecewise.exceptions import CompileError
from piecewise.lexer import Lexer, Token, TokenKind

if TYPE_CHECKING:
    from piecewise.loader import Loader

log = logging.getLogger(__name__)

DATA_NAME = "data"
OUTPUT_NAME = "output"
RENDER_FUNCTION = "render"

# CPython rejects more than 20 statically nested blocks in one function.
# Deeper if/for nesting continues in a helper function.
MAX_BLOCK_DEPTH = 16


def is_data_variable(name: str) -> bool:
    """True if `name` can be the data parameter of generated code."""
    return (
        name.isidentifier()
        and not keyword.iskeyword(name)
        and name not in GENERATED_BUILTINS
        and name not in (FILTERS_NAME, OUTPUT_NAME)
    )


class _Output:
    """Pending appends to the `output` list of one generated function.

    Consecutive appends are batched into a single `output.extend([...])`.
    Callers must flush before emitting any statement of their own.
    """

    def __init__(self, code: CodeBuilder):
        self.code = code
        self.buffered: List[str] = []
        self.depth = 0

    def append(self, expression: str) -> None:
        self.buffered.append(expression)

    def flush(self) -> None:
        if len(self.buffered) == 1:
            self.code.add_line(f"{OUTPUT_NAME}.append({self.buffered[0]})")
        elif len(self.buffered) > 1:
            self.code.add_line(
                f"{OUTPUT_NAME}.extend([{', '.join(self.buffered)}])"
            )
        self.buffered = []

    @contextmanager
    def block(self, header: str) -> Iterator[None]:
        """Emit a compound statement whose body appends to this output."""
        self.flush()
        with self.code.block(header):
            self.depth += 1
            yield
            self.flush()
            self.depth -= 1


class _Compilation:
    """State for one top-level compile() call.

    - chain: templates currently being lowered, innermost last
    - functions: template name -> nested function being generated for it
    - tokens: lexed templates, so each name is loaded at most once
    """

    def __init__(self, loader: "Loader", lexer: Lexer, code: CodeBuilder):
        self.loader = loader
        self.lexer = lexer
        self.code = code
        self.chain: List[str] = []
        self.functions: Dict[str, str] = {}
        self.tokens: Dict[str, List[Token]] = {}

    def load(self, name: str) -> List[Token]:
        if name not in self.tokens:
            source = self.loader.load(name)
            log.debug("Lexing template %r (%d chars)", name, len(source))
            self.tokens[name] = self.lexer.tokenize(source, name)
        return self.tokens[name]

    def reference(self, out: _Output, scope: NameScope, data: str, name: str) -> None:
        """Emit a use of template `name`: a call if it is being extracted,
        otherwise its inlined body."""
        if name in self.functions:
            out.append(f"{self.functions[name]}({data})")
        else:
            self.template(out, scope, data, name)

    def template(self, out: _Output, scope: NameScope, data: str, name: str) -> None:
        tokens = self.load(name)

        if name in self.chain and name not in self.functions:
            self.extract(out, scope, data, name)
            return

        self.chain.append(name)
        for token in tokens:
            self.lower(out, scope, data, token)
        self.chain.pop()

    def function(
        self,
        out: _Output,
        function: str,
        scope: NameScope,
        body: Callable[[_Output, NameScope], None],
    ) -> None:
        """Emit `def function(data):` with its own output list.

        The body is generated in a fresh scope that keeps every active
        extraction name, so no local can shadow a function it calls.
        """
        inner_scope = NameScope(
            used=[FILTERS_NAME, DATA_NAME, OUTPUT_NAME, *self.functions.values()],
            reserved_words=scope.reserved_words,
        )

        out.flush()
        with self.code.block(f"def {function}({DATA_NAME}):"):
            inner = _Output(self.code)
            self.code.add_line(f"{OUTPUT_NAME} = []")
            body(inner, inner_scope)
            inner.flush()
            self.code.add_line(f"return ''.join({OUTPUT_NAME})")

    def extract(self, out: _Output, scope: NameScope, data: str, name: str) -> None:
        """Compile `name` as a nested function and call it.

        While the function body is generated, every reference to `name`
        becomes a call. The table entry is dropped afterwards so later,
        unrelated uses of `name` are inlined again.
        """
        function = scope.allocate_name(name)
        self.functions[name] = function
        log.debug("Template %r is recursive, extracting as %s()", name, function)

        self.function(
            out,
            function,
            scope,
            lambda inner, inner_scope: self.template(
                inner, inner_scope, DATA_NAME, name
            ),
        )

        del self.functions[name]
        out.append(f"{function}({data})")

    def split(self, out: _Output, scope: NameScope, data: str, token: Token) -> None:
        """Lower a block directive in a helper function of its own."""
        function = scope.allocate_name(token.template)
        log.debug("Block nesting too deep, continuing in %s()", function)

        self.function(
            out,
            function,
            scope,
            lambda inner, inner_scope: self.lower(
                inner, inner_scope, DATA_NAME, token
            ),
        )
        out.append(f"{function}({data})")

    def lower(self, out: _Output, scope: NameScope, data: str, token: Token) -> None:
        kind = token.kind

        if kind in (TokenKind.TEXT, TokenKind.ESCAPE):
            out.append(quote(token.value))

        elif kind == TokenKind.VARIABLE:
            expression = escape_path(data, token.path)
            if token.filters:
                out.append(compose_filters(expression, token.filters))
            else:
                out.append(f"str({expression})")

        elif kind == TokenKind.INCLUDE:
            self.reference(out, scope, data, token.name)

        elif kind in (TokenKind.IF, TokenKind.IFNOT, TokenKind.REPEAT):
            if out.depth >= MAX_BLOCK_DEPTH:
                self.split(out, scope, data, token)
            elif kind == TokenKind.REPEAT:
                self.repeat(out, scope, data, token)
            else:
                condition = escape_path(data, token.path)
                if kind == TokenKind.IFNOT:
                    condition = f"not {condition}"

                with out.block(f"if {condition}:"):
                    self.reference(out, scope, data, token.template)

        else:
            raise CompileError(f"Unrecognized token type {kind!r}")

    def repeat(self, out: _Output, scope: NameScope, data: str, token: Token) -> None:
        index = scope.allocate_index_name()
        collection = escape_path(data, token.path)
        element = scope.allocate_name(token.template)

        with out.block(f"for {index} in range(len({collection})):"):
            self.code.add_line(f"{element} = {collection}[{index}]")
            self.reference(out, scope, element, token.template)


class Compiler:
    """Compiles named templates into Python source."""

    def __init__(
        self,
        loader: "Loader",
        lexer: Optional[Lexer] = None,
        reserved_words: AbstractSet[str] = RESERVED_WORDS,
    ):
        """Initialize compiler.

        Args:
            loader: Resolves template names to source text.
            lexer: Lexer to tokenize with. Decides the default filters.
            reserved_words: Names generated identifiers must avoid.
        """
        self.loader = loader
        self.lexer = lexer or Lexer()
        self.reserved_words = reserved_words

    def compile(self, name: str, data_variable: str = DATA_NAME) -> str:
        """Compile template `name` into module source.

        Args:
            name: Template to compile.
            data_variable: Parameter name the data is bound to.

        Returns:
            Python source defining `render(filters, <data_variable>)`.

        Raises:
            TemplateSyntaxError: If any reached template fails to lex.
            LoaderError: If any reached template cannot be loaded.
            CompileError: On an invalid data variable or unknown token.
        """
        if not is_data_variable(data_variable):
            raise CompileError(f"Invalid data variable name: {data_variable!r}")

        code = CodeBuilder()
        compilation = _Compilation(self.loader, self.lexer, code)
        scope = NameScope(
            used=[FILTERS_NAME, data_variable, OUTPUT_NAME],
            reserved_words=self.reserved_words,
        )

        with code.block(f"def {RENDER_FUNCTION}({FILTERS_NAME}, {data_variable}):"):
            out = _Output(code)
            code.add_line(f"{OUTPUT_NAME} = []")
            compilation.template(out, scope, data_variable, name)
            out.flush()
            code.add_line(f"return ''.join({OUTPUT_NAME})")

        log.debug(
            "Compiled %r from %d template(s)", name, len(compilation.tokens)
        )
        return str(code)


def compile_template(
    loader: "Loader",
    data_variable: str,
    name: str,
    lexer: Optional[Lexer] = None,
) -> str:
    """Compile template `name` with `loader`, binding data to `data_variable`."""
    return Compiler(loader, lexer=lexer).compile(name, data_variable)
