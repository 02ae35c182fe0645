"""Lexer - scans template text into tokens.

Directives live between `{{` and `}}`. Everything else is literal text.
The lexer collects every malformed directive before failing, so a single
run reports all problems in a template.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Sequence

from piecewise.exceptions import TemplateSyntaxError
from piecewise.lexer.spec import (
    OPERATORS,
    IncludeToken,
    LexError,
    OperatorToken,
    TextToken,
    Token,
    TokenKind,
    VariableToken,
)

log = logging.getLogger(__name__)

OPEN = "{{"
CLOSE = "}}"

# Classification patterns, tried in this order. Matched against the full
# directive body with re.fullmatch.
ESCAPE = re.compile(r"\s*(?:\{\{)?\s*", re.ASCII)
INCLUDE = re.compile(r"\s*([\w-]+)\s*", re.ASCII)
VARIABLE = re.compile(
    r"\s*@([\w-]+(?:\.[\w-]+)*)\s*((?:\|\s*[\w-]+\s*)*|\|\s*)", re.ASCII
)
OPERATOR = re.compile(
    r"\s*([\w-]+)\s*([<!]?)\s*@([\w-]+(?:\.[\w-]+)*)\s*", re.ASCII
)

FILTER_NAME = re.compile(r"[\w-]+", re.ASCII)

DEFAULT_FILTERS = ("html",)


def _line_col(text: str, index: int) -> tuple[int, int]:
    prefix = text[:index]
    line = prefix.count("\n") + 1
    column = index - (prefix.rfind("\n") + 1) + 1
    return line, column


class Lexer:
    """Turns template source into a flat token list."""

    def __init__(self, default_filters: Sequence[str] = DEFAULT_FILTERS):
        """Initialize the lexer.

        Args:
            default_filters: Filters applied to `{{ @path }}` when the
                directive has no filter clause at all.
        """
        self.default_filters = tuple(default_filters)

    def tokenize(self, text: str, name: Optional[str] = None) -> List[Token]:
        """Scan `text` into tokens.

        Args:
            text: Template source.
            name: Template name, only used in error reports.

        Returns:
            Tokens in source order.

        Raises:
            TemplateSyntaxError: With every error found. An unclosed `{{`
                stops the scan, so it is always the last error reported.
        """
        tokens: List[Token] = []
        errors: List[LexError] = []
        last = 0

        while True:
            i = text.find(OPEN, last)
            if i == -1:
                break

            if i > last:
                tokens.append(TextToken(TokenKind.TEXT, text[last:i], last))

            start = i + len(OPEN)
            end = text.find(CLOSE, start)

            if end == -1:
                errors.append(self._error(text, i, "Unclosed opening braces"))
                break

            token = self.classify(text[start:end], start)
            if token is None:
                errors.append(self._error(text, start, "Unrecognized expression"))
            else:
                tokens.append(token)

            last = end + len(CLOSE)

        if last < len(text):
            tokens.append(TextToken(TokenKind.TEXT, text[last:], last))

        if errors:
            log.debug("Template %s: %d lex error(s)", name or "<string>", len(errors))
            raise TemplateSyntaxError(errors, name)

        return tokens

    def classify(self, expression: str, index: int = 0) -> Optional[Token]:
        """Classify the body of one `{{ ... }}` directive.

        Returns None when the expression matches no directive form.
        """
        if ESCAPE.fullmatch(expression):
            return TextToken(TokenKind.ESCAPE, OPEN, index)

        m = INCLUDE.fullmatch(expression)
        if m:
            return IncludeToken(name=m.group(1), index=index)

        m = VARIABLE.fullmatch(expression)
        if m:
            return VariableToken(
                path=m.group(1),
                filters=self._parse_filters(m.group(2)),
                index=index,
            )

        m = OPERATOR.fullmatch(expression)
        if m:
            return OperatorToken(
                kind=OPERATORS[m.group(2)],
                template=m.group(1),
                path=m.group(3),
                index=index,
            )

        return None

    def _parse_filters(self, clause: str) -> tuple[str, ...]:
        clause = clause.strip()

        if not clause:
            return self.default_filters

        # A bare trailing pipe disables filtering
        if clause == "|":
            return ()

        return tuple(FILTER_NAME.findall(clause))

    @staticmethod
    def _error(text: str, index: int, message: str) -> LexError:
        line, column = _line_col(text, index)
        return LexError(index=index, message=message, line=line, column=column)


_default_lexer = Lexer()


def lex(text: str, name: Optional[str] = None) -> List[Token]:
    """Tokenize `text` with the default filter set."""
    return _default_lexer.tokenize(text, name)
