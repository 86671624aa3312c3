"""Tests for perch.templating: kida view rendering."""

import pytest

from perch.config import AppConfig
from perch.errors import RenderError
from perch.templating import create_environment, optional_placeholders, render_view


class TestRenderView:
    def test_without_payload(self) -> None:
        env = create_environment()
        assert render_view(env, "<p>static</p>") == "<p>static</p>"

    def test_payload_context(self) -> None:
        env = create_environment()
        html = render_view(env, "<p>{{ user.name }} ({{ count }})</p>", '{"user": {"name": "Ada"}, "count": 2}')
        assert html == "<p>Ada (2)</p>"

    def test_escapes_values(self) -> None:
        env = create_environment()
        html = render_view(env, "<p>{{ name }}</p>", '{"name": "<script>"}')
        assert "<script>" not in html

    @pytest.mark.parametrize("payload", ["[1]", "nope", "3"])
    def test_rejects_bad_payload(self, payload: str) -> None:
        with pytest.raises(RenderError):
            render_view(create_environment(), "<p></p>", payload)

    def test_extends_from_template_dir(self, tmp_path) -> None:
        (tmp_path / "base.html").write_text(
            "<main>{% block content %}{% endblock %}</main>", encoding="utf-8"
        )
        env = create_environment(AppConfig(template_dir=tmp_path))
        source = '{% extends "base.html" %}{% block content %}<p>{{ title }}</p>{% endblock %}'
        html = render_view(env, source, '{"title": "Hi"}')
        assert "<main>" in html
        assert "<p>Hi</p>" in html


class TestOptionalPlaceholders:
    def test_missing_names_render_empty(self) -> None:
        env = create_environment()
        assert render_view(env, "<p>Hello {{ name }}</p>") == "<p>Hello </p>"
        assert render_view(env, "<p>Hello {{ name }}</p>", '{"other": 1}') == "<p>Hello </p>"

    def test_missing_nested_path_renders_empty(self) -> None:
        env = create_environment()
        html = render_view(env, "<p>[{{ user.name }}]</p>", '{"user": {}}')
        assert html == "<p>[]</p>"

    def test_rewrites_plain_placeholders_only(self) -> None:
        source = "{{name}} {{- user.name -}} {{ items[0] }} {{ name | upper }} {{ a + b }}"
        assert optional_placeholders(source) == (
            "{{ name | default('') }} {{- user.name | default('') -}} "
            "{{ items[0] | default('') }} {{ name | upper }} {{ a + b }}"
        )

    def test_filtered_expression_still_renders(self) -> None:
        env = create_environment()
        assert render_view(env, "<p>{{ name | upper }}</p>", '{"name": "ada"}') == "<p>ADA</p>"
