"""Escaping helpers that turn template references into Python source."""

from __future__ import annotations

import keyword
from typing import Sequence

FILTERS_NAME = "filters"

# Characters that cannot appear raw inside a single-quoted Python literal,
# plus the Unicode line/paragraph separators and NUL.
_LITERAL_ESCAPES = str.maketrans(
    {
        "\\": "\\\\",
        "'": "\\'",
        "\n": "\\n",
        "\r": "\\r",
        "\u2028": "\\u2028",
        "\u2029": "\\u2029",
        "\x00": "\\x00",
    }
)


def is_attribute_name(segment: str) -> bool:
    """True if `segment` can be written as `obj.segment`."""
    return (
        segment.isidentifier()
        and not keyword.iskeyword(segment)
        and not segment.startswith("_")
    )


def escape_path(root: str, path: str) -> str:
    """Build a field access expression for a dotted path.

    >>> escape_path("data", "user.first-name")
    "data.user['first-name']"
    """
    parts = [root]
    for segment in path.split("."):
        if is_attribute_name(segment):
            parts.append("." + segment)
        else:
            parts.append("[" + quote(segment) + "]")
    return "".join(parts)


def escape_literal(text: str) -> str:
    """Escape `text` for use between single quotes in generated code."""
    return text.translate(_LITERAL_ESCAPES)


def quote(text: str) -> str:
    return "'" + escape_literal(text) + "'"


def compose_filters(expression: str, filters: Sequence[str]) -> str:
    """Wrap `expression` in filter calls.

    The first filter is applied to the raw value and each later filter
    wraps the previous result: ("text", "html") gives
    `filters.html(filters.text(expression))`.
    """
    code = expression
    for name in filters:
        code = f"{escape_path(FILTERS_NAME, name)}({code})"
    return code
