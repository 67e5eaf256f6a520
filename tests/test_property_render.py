"""Property-based tests for rendering.

- Text without tags renders unchanged
- Markup-escaped output never contains raw markup characters
- Rendering is deterministic across identical templates
- Sections repeat their body once per list element
"""

from __future__ import annotations

from hypothesis import given, settings
from hypothesis import strategies as st

from plume import Template, html_escape, to_text

from .strategies import identifier, plain_text, scalar_value, template_fragment


class TestRenderProperties:
    @given(source=plain_text)
    @settings(max_examples=200)
    def test_plain_text_unchanged(self, source: str) -> None:
        assert Template(source).render() == source

    @given(name=identifier, value=scalar_value)
    def test_raw_output_is_text_coercion(self, name: str, value) -> None:
        assert Template(f"{{{{{name}}}}}").render({name: value}) == to_text(value)

    @given(name=identifier, value=scalar_value)
    def test_markup_output_escapes(self, name: str, value) -> None:
        result = Template(f"{{{{{name}}}}}", escape="html").render({name: value})
        assert result == html_escape(to_text(value))
        assert "<" not in result and ">" not in result

    @given(source=template_fragment, values=st.dictionaries(identifier, scalar_value))
    def test_deterministic(self, source: str, values: dict) -> None:
        assert Template(source).render(values) == Template(source).render(values)

    @given(count=st.integers(min_value=0, max_value=20), body=plain_text)
    def test_section_repeats_per_element(self, count: int, body: str) -> None:
        template = Template("{{#xs}}" + body + "{{/xs}}")
        assert template.render(xs=[{}] * count) == body * count
