"""Built-in filters.

A filter takes the interpolated value and returns a string. `{{ @x }}`
applies `html`; `{{ @x|a|b }}` applies `a` then `b`; `{{ @x| }}` applies
nothing.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Callable, Mapping
from urllib.parse import quote

Filter = Callable[[Any], str]


def html(value: Any) -> str:
    """Escape for HTML element content and double-quoted attributes."""
    return (
        str(value)
        .replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def text(value: Any) -> str:
    """Escape for HTML element content only."""
    return str(value).replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def attr(value: Any) -> str:
    """Escape for a double-quoted attribute value."""
    return str(value).replace("&", "&amp;").replace('"', "&quot;")


def url(value: Any) -> str:
    """Percent-encode everything but unreserved URL characters."""
    return quote(str(value), safe="-_.!~*'()")


DEFAULT_FILTERS: Mapping[str, Filter] = MappingProxyType(
    {
        "html": html,
        "text": text,
        "attr": attr,
        "url": url,
    }
)
