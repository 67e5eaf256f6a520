"""Rendering tests: substitution, escaping, sections, inverted sections, conditionals."""

from __future__ import annotations

import io

import pytest

from plume import ErrorCode, EscapeMode, InvalidArgumentError, Template


class TestSubstitution:
    """Plain variable output."""

    def test_hello(self):
        assert Template("Hello {{name}}!").render({"name": "World"}) == "Hello World!"

    def test_keyword_variables(self):
        assert Template("{{a}}{{b}}").render({"a": 1}, b=2) == "12"
        assert Template("{{a}}").render(a="kw") == "kw"

    def test_keyword_variables_override_mapping(self):
        assert Template("{{a}}").render({"a": 1}, a=2) == "2"

    def test_keyword_variables_with_list_rejected(self):
        with pytest.raises(InvalidArgumentError) as exc_info:
            Template("{{a}}").render(["x"], a=1)
        assert exc_info.value.code is ErrorCode.INVALID_VARIABLES

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(None, ""), (0, "0"), (1.5, "1.5"), (["a", "b"], "ab"), (b"raw", "raw")],
    )
    def test_value_coercion(self, value, expected):
        assert Template("{{v}}").render({"v": value}) == expected

    def test_undecodable_bytes_replaced(self):
        assert Template("{{v}}").render(v=b"\xff") == "\ufffd"
        assert Template(b"a\xff{{v}}").render(v=1) == "a\ufffd1"

    def test_missing_variable_is_empty(self):
        assert Template("[{{missing}}]").render({}) == "[]"

    def test_no_variables(self):
        assert Template("[{{missing}}]").render() == "[]"

    def test_list_scope_read_by_position(self):
        template = Template("{{a}}-{{b}}-{{a}}")
        assert template.render(["x", "y"]) == "x-y-x"
        assert template.render(["x"]) == "x--x"

    def test_scalar_scope_yields_absent(self):
        assert Template("[{{a}}]").render("not a scope") == "[]"

    def test_readable_content(self):
        assert Template(io.StringIO("Hi {{n}}")).render(n="there") == "Hi there"

    def test_caller_mutation_not_observed(self):
        variables = {"a": "before"}
        template = Template("{{a}}")
        assert template.render(variables) == "before"
        variables["a"] = "after"
        assert template.render(variables) == "after"

    def test_renderer_cached(self):
        template = Template("{{a}}")
        first = template.renderer
        template.render(a=1)
        assert template.renderer is first


class TestEscaping:
    """Escape modes and sigils."""

    def test_default_mode_is_raw(self):
        assert Template("{{v}}").render(v="<b>") == "<b>"

    def test_markup_mode(self, html_template):
        assert html_template("{{name}}").render({"name": "<b>"}) == "&lt;b&gt;"

    def test_raw_sigil_in_markup_mode(self, html_template):
        assert html_template("{{=name}}").render(name="<b>") == "<b>"

    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("{{&v}}", "&lt;a b&gt;"),
            ("{{%v}}", "%3Ca%20b%3E"),
            ("{{$v}}", "\\u003Ca b\\u003E"),
            ("{{.v}}", "\\3c a\\20 b\\3e "),
            ("{{=v}}", "<a b>"),
        ],
    )
    def test_sigils(self, source, expected):
        assert Template(source).render(v="<a b>") == expected

    @pytest.mark.parametrize("option", [None, "none", "text", "TEXT", EscapeMode.NONE])
    def test_raw_options(self, option):
        assert Template("x", escape=option).escape is EscapeMode.NONE

    @pytest.mark.parametrize("option", ["html", "html_escape", "markup", EscapeMode.MARKUP])
    def test_markup_options(self, option):
        assert Template("x", escape=option).escape is EscapeMode.MARKUP

    @pytest.mark.parametrize("option", ["yaml", 3, ["html"]])
    def test_unknown_option(self, option):
        with pytest.raises(InvalidArgumentError) as exc_info:
            Template("x", escape=option)
        assert exc_info.value.code is ErrorCode.INVALID_ESCAPE
        assert isinstance(exc_info.value, ValueError)


class TestBraceEscapes:
    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("{{{", "{{"),
            ("}}}", "}}"),
            ("{{", "{{"),
            ("}}", "}}"),
            ("{{{name}}}", "{{name}}"),
        ],
    )
    def test_literal_braces(self, source, expected):
        assert Template(source).render(name="x") == expected


class TestSections:
    """Section repetition and scoping."""

    def test_repeats_per_element(self):
        template = Template("{{#items}}[{{name}}]{{/items}}")
        assert template.render(items=[{"name": "a"}, {"name": "b"}]) == "[a][b]"

    def test_empty_list(self):
        assert Template("{{#items}}[{{name}}]{{/items}}").render(items=[]) == ""

    def test_missing(self):
        assert Template("a{{#items}}x{{/items}}b").render() == "ab"

    def test_colon_sigil(self):
        assert Template("{{:items}}{{n}}{{/items}}").render(items=[{"n": 1}, {"n": 2}]) == "12"

    def test_map_value_renders_once_in_its_scope(self):
        assert Template("{{#user}}{{name}}{{/user}}").render(user={"name": "Ann"}) == "Ann"

    def test_falls_back_to_enclosing_scope(self):
        template = Template("{{#items}}{{name}}@{{site}} {{/items}}")
        assert template.render(items=[{"name": "a"}, {"name": "b"}], site="S") == "a@S b@S "

    def test_nested_fallback(self):
        template = Template("{{#posts}}{{#tags}}{{tag}}/{{title}}/{{site}};{{/tags}}{{/posts}}")
        result = template.render(
            site="S",
            posts=[{"title": "P1", "tags": [{"tag": "x"}, {"tag": "y"}]}],
        )
        assert result == "x/P1/S;y/P1/S;"

    def test_inner_names_shadow_outer(self):
        template = Template("{{#items}}{{name}}{{/items}}|{{name}}")
        assert template.render(name="outer", items=[{"name": "in"}]) == "in|outer"

    def test_positional_rows(self):
        template = Template("{{#rows}}{{a}}-{{b}};{{/rows}}")
        assert template.render(rows=[["1", "2"], ["3", "4"]]) == "1-2;3-4;"

    def test_scalar_elements_keep_enclosing_scope(self):
        template = Template("{{#items}}{{label}}{{/items}}")
        assert template.render(items=[1, 2, 3], label="L") == "LLL"

    @pytest.mark.parametrize(
        ("flag", "expected"),
        [(True, "yes"), (False, ""), (0, "yes"), ("", ""), ("x", "yes"), (None, "")],
    )
    def test_scalar_truthiness(self, flag, expected):
        assert Template("{{#flag}}yes{{/flag}}").render(flag=flag) == expected

    def test_section_in_positional_scope(self):
        template = Template("{{title}}:{{#rows}}{{a}}{{/rows}}")
        assert template.render(["T", [["r1"], ["r2"]]]) == "T:r1r2"

    def test_fallback_across_positional_rows(self):
        template = Template("{{#rows}}{{#items}}{{name}}@{{site}};{{/items}}{{/rows}}")
        assert template.render(site="S", rows=[[[{"name": "a"}]]]) == "a@S;"

    def test_scalar_elements_under_positional_row(self):
        template = Template("{{#rows}}{{#flag}}{{label}}{{/flag}}{{/rows}}")
        assert template.render(label="L", rows=[[True], [False], [0]]) == "LL"

    def test_row_values_still_positional(self):
        template = Template("{{#rows}}{{a}}{{#tags}}<{{t}}|{{site}}>{{/tags}};{{/rows}}")
        rows = [["r1", [{"t": "x"}]], ["r2", []]]
        assert template.render(site="S", rows=rows) == "r1<x|S>;r2;"

    def test_partial_in_positional_row_keeps_outer_names(self):
        template = Template("{{#rows}}{{*cell}}{{/rows}}")
        cell = "{{#items}}{{site}}{{/items}}"
        assert template.render(site="S", rows=[["x"]], templates={"cell": cell}) == "S"


class TestInvertedSections:
    @pytest.mark.parametrize(
        ("items", "expected"),
        [([], "none"), ([1], ""), (None, "none"), ("", "none"), ({}, "none"), (0, "")],
    )
    def test_renders_when_falsy(self, items, expected):
        assert Template("{{^items}}none{{/items}}").render(items=items) == expected

    def test_scope_unchanged(self):
        template = Template("{{^items}}{{name}}{{/items}}")
        assert template.render(items=[], name="outer") == "outer"

    def test_missing_variable(self):
        assert Template("{{^items}}none{{/items}}").render() == "none"


class TestConditionals:
    @pytest.mark.parametrize(
        ("admin", "expected"),
        [(True, "A"), (False, "U"), (None, "U"), ([], "U"), ({"x": 1}, "A")],
    )
    def test_positive_and_negated(self, admin, expected):
        template = Template("{{?admin}}A{{/admin}}{{?!admin}}U{{/admin}}")
        assert template.render(admin=admin) == expected

    def test_missing_is_falsy(self):
        assert Template("{{?admin}}A{{/admin}}{{?!admin}}U{{/admin}}").render() == "U"

    def test_keyed_lookup_only(self):
        # Conditionals ignore positional scopes
        assert Template("{{?a}}x{{/a}}").render(["value"]) == ""

    def test_scope_unchanged(self):
        template = Template("{{?user}}{{name}}{{/user}}")
        assert template.render(user={"name": "inner"}, name="top") == "top"

    def test_nested_in_section(self):
        template = Template("{{#items}}{{?done}}x{{/done}}{{?!done}}o{{/done}}{{/items}}")
        assert template.render(items=[{"done": True}, {"done": False}, {}]) == "xoo"


class TestDeterminism:
    def test_identical_templates_identical_output(self):
        source = "{{#items}}<{{&name}}>{{/items}}{{^items}}-{{/items}}"
        variables = {"items": [{"name": "a&b"}, {"name": "c"}]}
        first = Template(source, escape="html")
        second = Template(source, escape="html")
        assert first.render(variables) == second.render(variables)
        assert first.compile() == second.compile()

    def test_repeated_renders(self):
        template = Template("{{#xs}}{{v}}{{/xs}}")
        outputs = {template.render(xs=[{"v": 1}, {"v": 2}]) for _ in range(5)}
        assert outputs == {"12"}
