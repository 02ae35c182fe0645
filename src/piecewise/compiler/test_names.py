"""Tests for identifier allocation."""

import pytest

from piecewise.compiler.names import INDEX_LETTERS, NameScope


@pytest.mark.parametrize(
    "seed,expected",
    [
        ("item", "item"),
        ("list-item", "listItem"),
        ("a.b-c", "aBC"),
        ("item-", "item"),
        ("-foo", "Foo"),
        ("2col", "_2col"),
        ("class", "_class"),
        ("len", "_len"),
        ("---", "_"),
    ],
)
def test_allocate_name_camel_cases_and_avoids_keywords(seed, expected):
    assert NameScope().allocate_name(seed) == expected


def test_allocate_name_never_repeats():
    scope = NameScope()
    assert scope.allocate_name("node") == "node"
    assert scope.allocate_name("node") == "node_"
    assert scope.allocate_name("node-") == "node__"


def test_seeded_names_are_avoided():
    scope = NameScope(used=["filters", "data", "output"])
    assert scope.allocate_name("data") == "data_"
    assert "data_" in scope


def test_custom_reserved_words():
    scope = NameScope(reserved_words={"item"})
    assert scope.allocate_name("item") == "_item"
    # Python keywords are no longer special for this scope
    assert scope.allocate_name("class") == "class"


def test_index_names_in_order():
    scope = NameScope()
    assert [scope.allocate_index_name() for _ in range(3)] == ["i", "j", "k"]


def test_index_names_skip_taken_letters():
    scope = NameScope()
    scope.reserve("i", "k")
    assert scope.allocate_index_name() == "j"
    assert scope.allocate_index_name() == "l"


def test_index_names_fall_back_when_exhausted():
    scope = NameScope()
    scope.reserve(*INDEX_LETTERS)
    assert scope.allocate_index_name() == "i_"
    assert scope.allocate_index_name() == "i__"
