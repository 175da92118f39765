"""Templating infrastructure for learnrank.

This module provides:
- Template engine for query parameter substitution
- Typed render results
"""

from learnrank.core.pipeline.template_engine import (
    STRICT_TEMPLATE_OPTIONS,
    TEMPLATE_OPEN_DELIMITER,
    CompiledTemplate,
    RenderResult,
    RenderStatus,
    TemplateEngine,
    TemplateOptions,
)

__all__ = [
    "STRICT_TEMPLATE_OPTIONS",
    "TEMPLATE_OPEN_DELIMITER",
    "CompiledTemplate",
    "RenderResult",
    "RenderStatus",
    "TemplateEngine",
    "TemplateOptions",
]
