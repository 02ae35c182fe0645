"""Tests for path/literal escaping and filter composition."""

import ast

import pytest

from piecewise.compiler.escape import (
    compose_filters,
    escape_literal,
    escape_path,
    quote,
)


@pytest.mark.parametrize(
    "path,expected",
    [
        ("name", "data.name"),
        ("user.name", "data.user.name"),
        ("user.first-name", "data.user['first-name']"),
        ("class", "data['class']"),
        ("2x", "data['2x']"),
        ("_private", "data['_private']"),
    ],
)
def test_escape_path(path, expected):
    assert escape_path("data", path) == expected


def test_escape_literal_special_characters():
    assert escape_literal("it's") == "it\\'s"
    assert escape_literal("a\\b") == "a\\\\b"
    assert escape_literal("one\ntwo\r") == "one\\ntwo\\r"
    assert escape_literal("\u2028\u2029") == "\\u2028\\u2029"


def test_quoted_literal_is_valid_python():
    text = "line 1\r\n'quoted' \\ \"double\" \u2028 {{ }}"
    assert ast.literal_eval(quote(text)) == text


def test_compose_filters_empty_is_identity():
    assert compose_filters("data.x", []) == "data.x"


def test_compose_filters_first_is_innermost():
    assert (
        compose_filters("data.x", ["text", "html"])
        == "filters.html(filters.text(data.x))"
    )


def test_compose_filters_hyphenated_name():
    assert compose_filters("data.x", ["my-filter"]) == "filters['my-filter'](data.x)"
