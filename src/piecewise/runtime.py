"""Render-time views over template data.

Generated code reads fields as `data.user.name` or `data['first-name']`.
These views give plain mappings and lists that access pattern without
copying them.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Union

from jinja2 import StrictUndefined


class MissingField(StrictUndefined):
    """A field that is not present in the data.

    Falsy, so `{{ name @missing }}` renders nothing and `{{ name ! @missing }}`
    renders its body. Anything else (printing it, iterating it, taking its
    length, reading a field from it) raises `jinja2.UndefinedError`.
    """

    __slots__ = ()

    def __bool__(self) -> bool:
        return False


def wrap(value: Any) -> Any:
    """Wrap mappings and lists in views; return everything else as is."""
    if isinstance(value, Mapping):
        return Record(value)
    if isinstance(value, (list, tuple)):
        return RecordList(value)
    return value


class Record:
    """Attribute and item access over a mapping.

    Unlike Python dicts, a record is always truthy, even when empty.
    """

    __slots__ = ("_fields",)

    def __init__(self, fields: Mapping[str, Any]):
        self._fields = fields

    def __getattr__(self, name: str) -> Any:
        if name.startswith("__"):
            raise AttributeError(name)
        return self[name]

    def __getitem__(self, name: str) -> Any:
        try:
            value = self._fields[name]
        except KeyError:
            return MissingField(obj=self._fields, name=name)
        return wrap(value)

    def __bool__(self) -> bool:
        return True

    def __str__(self) -> str:
        return str(self._fields)

    def __repr__(self) -> str:
        return f"Record({self._fields!r})"


class RecordList:
    """Length and index access over a list, wrapping each element.

    Fields read from a list follow the same rules as on a record:
    `@items.length` is its size, `@items.0` its first element, and
    anything else (including an index past the end) is a missing field.
    """

    __slots__ = ("_items",)

    def __init__(self, items: Sequence[Any]):
        self._items = items

    def __len__(self) -> int:
        return len(self._items)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("__"):
            raise AttributeError(name)
        return self[name]

    def __getitem__(self, index: Union[int, str]) -> Any:
        if isinstance(index, str):
            if index == "length":
                return len(self._items)
            if not index.isdigit():
                return MissingField(obj=self._items, name=index)
            index = int(index)
            if index >= len(self._items):
                return MissingField(obj=self._items, name=str(index))
        return wrap(self._items[index])

    def __bool__(self) -> bool:
        return bool(self._items)

    def __str__(self) -> str:
        return str(self._items)

    def __repr__(self) -> str:
        return f"RecordList({self._items!r})"
