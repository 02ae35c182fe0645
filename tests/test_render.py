"""End-to-end tests: template source in, rendered text out."""

import pytest

from piecewise import (
    CompileError,
    DictLoader,
    RenderError,
    Template,
    TemplateSyntaxError,
    compile_template,
)


def render(templates, data, name="page", filters=None):
    if isinstance(templates, str):
        templates = {name: templates}
    code = compile_template(DictLoader(templates), "data", name)
    return Template(code, name=name, filters=filters).render(data)


def test_text_without_directives_is_unchanged():
    source = "<p>plain 'quoted' \\ text\nwith } and { braces</p>"
    assert render(source, {}) == source


def test_variable_is_html_escaped_by_default():
    assert render("Hello {{ @name }}!", {"name": "<b>"}) == "Hello &lt;b&gt;!"


def test_trailing_pipe_disables_escaping():
    assert render("{{ @html| }}", {"html": "<b>x</b>"}) == "<b>x</b>"


def test_filters_apply_left_to_right():
    assert render("{{ @v|text|html }}", {"v": "&"}) == "&amp;amp;"


def test_non_string_values_are_stringified():
    assert render("{{ @n }}/{{ @f| }}", {"n": 3, "f": 1.5}) == "3/1.5"


@pytest.mark.parametrize("source", ["{{}}", "{{ }}", "{{ {{ }}", "{{{{}}"])
def test_escape_directive_renders_open_braces(source):
    assert render(source, {}) == "{{"


def test_nested_field_paths():
    data = {"user": {"address": {"city": "Oslo"}}}
    assert render("{{ @user.address.city }}", data) == "Oslo"


def test_hyphenated_and_keyword_fields():
    data = {"first-name": "Ada", "class": "admin"}
    assert render("{{ @first-name }} ({{ @class }})", data) == "Ada (admin)"


@pytest.mark.parametrize(
    "flag,expected",
    [(True, "Yes"), (False, ""), (0, ""), ("", ""), ("x", "Yes"), ([1], "Yes")],
)
def test_conditional(flag, expected):
    templates = {"page": "{{ yes @flag }}", "yes": "Yes"}
    assert render(templates, {"flag": flag}) == expected


@pytest.mark.parametrize("flag,expected", [(True, ""), (False, "No"), ([], "No")])
def test_negated_conditional(flag, expected):
    templates = {"page": "{{ no ! @flag }}", "no": "No"}
    assert render(templates, {"flag": flag}) == expected


def test_empty_mapping_is_truthy():
    templates = {"page": "{{ yes @obj }}", "yes": "Yes"}
    assert render(templates, {"obj": {}}) == "Yes"


def test_missing_field_is_false_in_conditionals():
    templates = {"page": "{{ yes @gone }}{{ no ! @gone }}", "yes": "Y", "no": "N"}
    assert render(templates, {}) == "N"


def test_conditional_keeps_the_same_data():
    templates = {"page": "{{ greet @user }}", "greet": "Hi {{ @user.name }}"}
    assert render(templates, {"user": {"name": "Bo"}}) == "Hi Bo"


def test_repeat_renders_each_element():
    templates = {"page": "{{ item< @items }}", "item": "[{{ @v }}]"}
    assert render(templates, {"items": [{"v": "a"}, {"v": "b"}]}) == "[a][b]"


def test_repeat_over_empty_list_renders_nothing():
    templates = {"page": "<ul>{{ item< @items }}</ul>", "item": "<li/>"}
    assert render(templates, {"items": []}) == "<ul></ul>"


def test_repeat_over_tuple():
    templates = {"page": "{{ item< @items }}", "item": "{{ @n }}"}
    assert render(templates, {"items": ({"n": 1}, {"n": 2})}) == "12"


def test_include_shares_data():
    templates = {"page": "<h1>{{ title }}</h1>", "title": "{{ @title }}"}
    assert render(templates, {"title": "Home"}) == "<h1>Home</h1>"


def test_recursive_tree():
    templates = {
        "tree": "<ul>{{ node< @children }}</ul>",
        "node": "<li>{{ @label }}{{ tree @children }}</li>",
    }
    data = {
        "children": [
            {"label": "a", "children": [{"label": "a1", "children": []}]},
            {"label": "b", "children": []},
        ]
    }

    assert render(templates, data, name="tree") == (
        "<ul><li>a<ul><li>a1</li></ul></li><li>b</li></ul>"
    )


def test_missing_field_in_interpolation_fails():
    with pytest.raises(RenderError) as exc_info:
        render("{{ @nope }}", {})

    assert exc_info.value.name == "page"
    assert "nope" in str(exc_info.value)


def test_repeat_over_missing_field_fails():
    templates = {"page": "{{ item< @items }}", "item": "x"}
    with pytest.raises(RenderError):
        render(templates, {})


def test_unknown_filter_fails_at_render_time():
    code = compile_template(DictLoader({"page": "{{ @x|shout }}"}), "data", "page")

    with pytest.raises(RenderError):
        Template(code, name="page").render({"x": "hi"})


def test_custom_filter_table():
    filters = {"shout": lambda v: str(v).upper() + "!", "my-tag": lambda v: f"<{v}>"}
    assert render("{{ @x|shout|my-tag }}", {"x": "hi"}, filters=filters) == "<HI!>"


def test_custom_filter_table_replaces_defaults():
    with pytest.raises(RenderError):
        render("{{ @x }}", {"x": "hi"}, filters={"shout": str.upper})


def test_syntax_errors_are_batched():
    with pytest.raises(TemplateSyntaxError) as exc_info:
        render("{{ ?? }} ok {{ @a b c }} {{ open", {})

    errors = exc_info.value.errors
    assert [e.message for e in errors] == [
        "Unrecognized expression",
        "Unrecognized expression",
        "Unclosed opening braces",
    ]
    assert errors == sorted(errors, key=lambda e: e.index)


def test_template_can_be_rendered_many_times():
    code = compile_template(DictLoader({"page": "{{ @n }}"}), "data", "page")
    template = Template(code)

    assert [template.render({"n": n}) for n in range(3)] == ["0", "1", "2"]


def test_source_that_does_not_load_is_a_compile_error():
    with pytest.raises(CompileError, match="broken"):
        Template("def render(filters, data):\nreturn ''\n", name="broken")


def test_list_length_and_index_fields():
    templates = {
        "page": "{{ @items.length }}:{{ @items.0.name }}{{ more @items.1 }}",
        "more": "+{{ @items.1.name }}",
    }

    assert render(templates, {"items": [{"name": "a"}]}) == "1:a"
    assert render(templates, {"items": [{"name": "a"}, {"name": "b"}]}) == "2:a+b"


def test_unknown_list_field_fails():
    with pytest.raises(RenderError):
        render("{{ @items.size }}", {"items": [1]})
