"""Token model for piecewise templates."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Tuple, Union


class TokenKind(str, enum.Enum):
    """Classification of a scanned span."""

    TEXT = "text"
    ESCAPE = "escape"
    INCLUDE = "include"
    VARIABLE = "variable"
    IF = "if"
    IFNOT = "ifnot"
    REPEAT = "repeat"


# Operator character -> token kind for `name [op] @path` directives
OPERATORS = {
    "": TokenKind.IF,
    "!": TokenKind.IFNOT,
    "<": TokenKind.REPEAT,
}


@dataclass(frozen=True)
class TextToken:
    """Literal text, or an escaped `{{` when kind is ESCAPE."""

    kind: TokenKind
    value: str
    index: int = 0


@dataclass(frozen=True)
class IncludeToken:
    """`{{ name }}` - inline another template in the same data scope."""

    name: str
    index: int = 0
    kind: TokenKind = TokenKind.INCLUDE


@dataclass(frozen=True)
class VariableToken:
    """`{{ @path|f1|f2 }}` - interpolate a field through filters.

    An empty `filters` tuple means the value is written unescaped.
    """

    path: str  # e.g., "user.first-name"
    filters: Tuple[str, ...]  # applied first-to-last, innermost first
    index: int = 0
    kind: TokenKind = TokenKind.VARIABLE


@dataclass(frozen=True)
class OperatorToken:
    """`{{ name @path }}`, `{{ name ! @path }}` or `{{ name < @path }}`."""

    kind: TokenKind  # IF, IFNOT or REPEAT
    template: str  # sub-template rendered per branch/element
    path: str  # condition or collection
    index: int = 0


Token = Union[TextToken, IncludeToken, VariableToken, OperatorToken]


@dataclass(frozen=True)
class LexError:
    """A single lexing failure at `index` in the template source."""

    index: int
    message: str
    line: int = 1
    column: int = 1

    def __str__(self) -> str:
        return (
            f"index {self.index} (line {self.line}, column {self.column}): "
            f"{self.message}"
        )
