"""Tests for the Jinja2 template engine."""

import json

import pytest

from learnrank.config.schema import TemplatingSettings
from learnrank.core.pipeline import (
    STRICT_TEMPLATE_OPTIONS,
    RenderStatus,
    TemplateEngine,
    TemplateOptions,
)
from learnrank.framework.errors import ErrorCode, TemplateRenderError


class TestRendering:
    """Rendering against request params."""

    def test_substitutes_parameter(self, engine: TemplateEngine) -> None:
        result = engine.render('{"match": {"title": "{{q}}"}}', {"q": "shoes"})

        assert result.status is RenderStatus.OK
        assert result.is_ok
        assert result.text == '{"match": {"title": "shoes"}}'

    def test_strings_are_json_escaped(self, engine: TemplateEngine) -> None:
        result = engine.render('{"match": {"title": "{{ q }}"}}', {"q": 'say "hi"\n'})

        assert result.is_ok
        assert json.loads(result.text) == {"match": {"title": 'say "hi"\n'}}

    def test_booleans_and_none_render_as_json(self, engine: TemplateEngine) -> None:
        result = engine.render("{{ flag }} {{ nothing }} {{ n }}", {"flag": True, "nothing": None, "n": 3})

        assert result.text == "true null 3"

    def test_tojson_filter_is_not_escaped_twice(self, engine: TemplateEngine) -> None:
        result = engine.render("{{ cats | tojson }}", {"cats": ["a", "b"]})

        assert json.loads(result.text) == ["a", "b"]

    def test_plain_rendering_without_json_escape(self, engine: TemplateEngine) -> None:
        options = TemplateOptions(detect_missing_params=True, json_escape=False)

        result = engine.render("{{ q }}", {"q": 'a"b'}, options=options)

        assert result.text == 'a"b'

    def test_params_are_not_mutated(self, engine: TemplateEngine) -> None:
        params = {"q": "shoes"}

        engine.render("{% set q = 'boots' %}{{ q }}", params)

        assert params == {"q": "shoes"}


class TestMissingParameters:
    """Missing parameters are reported through the result, not raised."""

    def test_missing_parameter_detected(self, engine: TemplateEngine) -> None:
        result = engine.render('{"match": {"title": "{{q}}"}}', {})

        assert result.status is RenderStatus.MISSING_PARAMETER
        assert result.missing_parameter == "q"
        assert result.text is None
        assert result.error is not None

    def test_missing_nested_attribute_detected(self, engine: TemplateEngine) -> None:
        result = engine.render("{{ user.segment }}", {"user": {}})

        assert result.status is RenderStatus.MISSING_PARAMETER

    def test_missing_parameter_in_condition_detected(self, engine: TemplateEngine) -> None:
        result = engine.render("{% if boost %}x{% endif %}", {})

        assert result.status is RenderStatus.MISSING_PARAMETER

    def test_lenient_options_render_missing_as_empty(self, engine: TemplateEngine) -> None:
        options = TemplateOptions(detect_missing_params=False, json_escape=True)

        result = engine.render('"{{ q }}"', {}, options=options)

        assert result.is_ok
        assert result.text == '""'

    def test_strict_options_are_the_default(self) -> None:
        assert STRICT_TEMPLATE_OPTIONS.detect_missing_params is True
        assert STRICT_TEMPLATE_OPTIONS.json_escape is True


class TestFailures:
    """Failures other than missing parameters."""

    def test_runtime_error_is_error_status(self, engine: TemplateEngine) -> None:
        result = engine.render("{{ 1 / n }}", {"n": 0})

        assert result.status is RenderStatus.ERROR
        assert isinstance(result.error, ZeroDivisionError)

    def test_syntax_error_raises_on_compile(self, engine: TemplateEngine) -> None:
        with pytest.raises(TemplateRenderError) as exc_info:
            engine.compile('{"match": {"title": "{{ q | }}"}}')

        assert exc_info.value.code is ErrorCode.TEMPLATE_RENDER_ERROR
        assert "template" in exc_info.value.details

    def test_unsupported_language(self, engine: TemplateEngine) -> None:
        assert engine.supports_language("jinja")
        assert not engine.supports_language("mustache")

        with pytest.raises(TemplateRenderError):
            engine.compile("{{ q }}", lang="mustache")

    def test_disabled_engine_supports_nothing(self) -> None:
        engine = TemplateEngine(enabled=False)

        assert not engine.supports_language("jinja")


class TestCompileCache:
    """Compiled templates are reused."""

    def test_same_source_and_options_hit_cache(self, engine: TemplateEngine) -> None:
        first = engine.compile("{{ q }}")
        second = engine.compile("{{ q }}")

        assert first is second
        assert engine.cache_info().hits == 1

    def test_options_are_part_of_cache_key(self, engine: TemplateEngine) -> None:
        strict = engine.compile("{{ q }}")
        lenient = engine.compile("{{ q }}", options=TemplateOptions(detect_missing_params=False))

        assert strict is not lenient

    def test_clear_cache(self, engine: TemplateEngine) -> None:
        first = engine.compile("{{ q }}")
        engine.clear_cache()

        assert engine.cache_info().currsize == 0
        assert engine.compile("{{ q }}") is not first

    def test_from_settings(self) -> None:
        engine = TemplateEngine.from_settings(TemplatingSettings(enabled=False, cache_size=8))

        assert engine.enabled is False
        assert engine.cache_info().maxsize == 8

    def test_has_template_syntax(self) -> None:
        assert TemplateEngine.has_template_syntax('{"a": "{{ b }}"}')
        assert not TemplateEngine.has_template_syntax('{"a": "b"}')
        assert not TemplateEngine.has_template_syntax(42)
