"""Template engine for query parameter substitution.

This module provides Jinja2-based rendering of templated query documents.
A query is stored as JSON text containing placeholders such as
``{"match": {"title": "{{ query }}"}}`` and rendered against the parameters
supplied with each ranking request.

Rendering never raises for parameter problems. Instead every render returns a
``RenderResult`` whose status tells a missing parameter apart from any other
failure, so callers can degrade a single feature without string matching on
exception types.

Example:
    engine = TemplateEngine()
    template = engine.compile('{"match": {"title": "{{ q }}"}}')

    result = template.render({"q": "shoes"})
    # result.status == RenderStatus.OK
    # result.text == '{"match": {"title": "shoes"}}'

    result = template.render({})
    # result.status == RenderStatus.MISSING_PARAMETER
"""

import json
import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Any

from jinja2 import (
    Environment,
    StrictUndefined,
    Template,
    TemplateSyntaxError,
    Undefined,
    UndefinedError,
)
from markupsafe import Markup

from learnrank.config.schema import DEFAULT_TEMPLATE_LANG, TemplatingSettings
from learnrank.framework.errors import TemplateRenderError

logger = logging.getLogger(__name__)

# Opening marker of a parameter placeholder
TEMPLATE_OPEN_DELIMITER = "{{"

_UNDEFINED_NAME = re.compile(r"'([^']+)' is undefined")


@dataclass(frozen=True)
class TemplateOptions:
    """Options a template is compiled with.

    Attributes:
        detect_missing_params: Report unresolved parameters as
            MISSING_PARAMETER instead of rendering them as empty text
        json_escape: Escape interpolated values so the output stays valid JSON
    """

    detect_missing_params: bool = True
    json_escape: bool = True


# Fixed options used for every ranking query render
STRICT_TEMPLATE_OPTIONS = TemplateOptions(detect_missing_params=True, json_escape=True)


class RenderStatus(str, Enum):
    """Outcome of rendering a compiled template."""

    OK = "ok"
    MISSING_PARAMETER = "missing_parameter"
    ERROR = "error"


@dataclass(frozen=True)
class RenderResult:
    """Result of a template render.

    Attributes:
        status: Render outcome
        text: Rendered text (only for OK)
        missing_parameter: Name of the unresolved parameter, when known
        error: Underlying exception for MISSING_PARAMETER and ERROR
    """

    status: RenderStatus
    text: str | None = None
    missing_parameter: str | None = None
    error: Exception | None = None

    @classmethod
    def ok(cls, text: str) -> "RenderResult":
        return cls(status=RenderStatus.OK, text=text)

    @classmethod
    def missing(cls, error: Exception) -> "RenderResult":
        match = _UNDEFINED_NAME.search(str(error))
        return cls(
            status=RenderStatus.MISSING_PARAMETER,
            missing_parameter=match.group(1) if match else None,
            error=error,
        )

    @classmethod
    def failed(cls, error: Exception) -> "RenderResult":
        return cls(status=RenderStatus.ERROR, error=error)

    @property
    def is_ok(self) -> bool:
        return self.status is RenderStatus.OK


class CompiledTemplate:
    """A compiled template bound to the options it was compiled with.

    Instances are immutable and safe to render concurrently.
    """

    def __init__(self, source: str, template: Template, options: TemplateOptions) -> None:
        self.source = source
        self.options = options
        self._template = template

    def render(self, params: Mapping[str, Any]) -> RenderResult:
        """Render the template against ``params``.

        Args:
            params: Template parameters (never mutated)

        Returns:
            RenderResult describing the outcome
        """
        try:
            text = self._template.render(dict(params))
        except UndefinedError as e:
            if self.options.detect_missing_params:
                return RenderResult.missing(e)
            return RenderResult.failed(e)
        except Exception as e:
            return RenderResult.failed(e)

        return RenderResult.ok(text)


def _json_finalize(value: Any) -> Any:
    """Make an interpolated value safe to splice into JSON text."""
    if isinstance(value, Markup):
        # Already serialized, e.g. by the tojson filter
        return value
    if isinstance(value, str):
        return json.dumps(value)[1:-1]
    if value is None or isinstance(value, bool | dict | list | tuple):
        return json.dumps(value)
    return value


@lru_cache(maxsize=None)
def _build_environment(options: TemplateOptions) -> Environment:
    kwargs: dict[str, Any] = {
        "undefined": StrictUndefined if options.detect_missing_params else Undefined,
        "autoescape": False,
        "keep_trailing_newline": True,
    }
    if options.json_escape:
        kwargs["finalize"] = _json_finalize
    return Environment(**kwargs)


class TemplateEngine:
    """Compiles and renders query templates.

    Uses Jinja2; with ``detect_missing_params`` it compiles against
    StrictUndefined so an absent parameter is reported rather than rendered
    as empty text. Compiled templates are cached per
    ``(source, lang, options)``.

    Features:
    - Variable interpolation: {{ query }}, {{ user.segment }}
    - Structured values: {{ categories | tojson }}
    - Control flow: {% if boost %}...{% endif %}
    """

    SUPPORTED_LANGUAGES = frozenset({DEFAULT_TEMPLATE_LANG})

    def __init__(self, enabled: bool = True, cache_size: int = 256) -> None:
        """Initialize the template engine.

        Args:
            enabled: When False no language is supported and nothing compiles
            cache_size: Maximum number of compiled templates kept
        """
        self.enabled = enabled
        self._compile_cached = lru_cache(maxsize=cache_size)(self._compile)

        logger.debug("TemplateEngine initialized (enabled=%s, cache_size=%d)", enabled, cache_size)

    @classmethod
    def from_settings(cls, settings: TemplatingSettings) -> "TemplateEngine":
        return cls(enabled=settings.enabled, cache_size=settings.cache_size)

    def supports_language(self, lang: str) -> bool:
        """Return True if templates in ``lang`` can be compiled."""
        return self.enabled and lang in self.SUPPORTED_LANGUAGES

    def compile(
        self,
        source: str,
        lang: str = DEFAULT_TEMPLATE_LANG,
        options: TemplateOptions = STRICT_TEMPLATE_OPTIONS,
    ) -> CompiledTemplate:
        """Compile template text.

        Args:
            source: Template text
            lang: Template language
            options: Compile options

        Returns:
            CompiledTemplate ready to render

        Raises:
            TemplateRenderError: If the language is unsupported or the
                template is malformed
        """
        if not self.supports_language(lang):
            msg = f"Template language [{lang}] is not supported"
            raise TemplateRenderError(msg, template=source)
        return self._compile_cached(source, lang, options)

    def render(
        self,
        source: str,
        params: Mapping[str, Any],
        lang: str = DEFAULT_TEMPLATE_LANG,
        options: TemplateOptions = STRICT_TEMPLATE_OPTIONS,
    ) -> RenderResult:
        """Compile (or reuse) and render ``source`` in one call."""
        return self.compile(source, lang, options).render(params)

    def cache_info(self) -> Any:
        """Return compile cache statistics."""
        return self._compile_cached.cache_info()

    def clear_cache(self) -> None:
        self._compile_cached.cache_clear()

    @staticmethod
    def has_template_syntax(value: Any) -> bool:
        """Check if value is a string containing the opening delimiter."""
        if not isinstance(value, str):
            return False
        return TEMPLATE_OPEN_DELIMITER in value

    def _compile(self, source: str, lang: str, options: TemplateOptions) -> CompiledTemplate:
        environment = _build_environment(options)
        try:
            template = environment.from_string(source)
        except TemplateSyntaxError as e:
            msg = f"Failed to compile template: {e}"
            raise TemplateRenderError(msg, template=source, cause=e) from e

        logger.debug("Compiled %s template: %s...", lang, source[:50])
        return CompiledTemplate(source, template, options)
