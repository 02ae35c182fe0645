"""Hygienic identifier allocation for generated code."""

from __future__ import annotations

import keyword
import re
from typing import AbstractSet, Iterable, Optional, Set

# Builtins referenced by generated code must never be shadowed.
GENERATED_BUILTINS = frozenset({"len", "range", "str"})

RESERVED_WORDS: frozenset[str] = frozenset(keyword.kwlist) | GENERATED_BUILTINS

_TRAILING_SEPARATORS = re.compile(r"[.-]+$")
_INNER_SEPARATORS = re.compile(r"[.-]+(.)")

INDEX_LETTERS = "ijklmnopqrstuvwxyz"


class NameScope:
    """Set of identifiers taken within one generated function.

    Names are handed out once and never released, so two allocations in
    the same scope can never collide.
    """

    def __init__(
        self,
        used: Iterable[str] = (),
        reserved_words: Optional[AbstractSet[str]] = None,
    ):
        self.reserved_words = (
            RESERVED_WORDS if reserved_words is None else frozenset(reserved_words)
        )
        self.used: Set[str] = set(used)

    def __contains__(self, name: object) -> bool:
        return name in self.used

    def reserve(self, *names: str) -> None:
        self.used.update(names)

    def allocate_name(self, seed: str) -> str:
        """Turn a template name into a fresh identifier.

        `list-item` becomes `listItem`, `2col` becomes `_2col`, `class`
        becomes `_class`. Collisions get trailing underscores.
        """
        name = _TRAILING_SEPARATORS.sub("", seed)
        name = _INNER_SEPARATORS.sub(lambda m: m.group(1).upper(), name)

        if not name:
            name = "_"

        if name[0].isdigit() or name in self.reserved_words:
            name = "_" + name

        while name in self.used:
            name += "_"

        self.used.add(name)
        return name

    def allocate_index_name(self) -> str:
        """Return an unused loop counter name, preferring i..z."""
        for letter in INDEX_LETTERS:
            if letter not in self.used:
                self.used.add(letter)
                return letter

        return self.allocate_name("i_")
