"""Ranking config resolution.

Turns a ranking config whose query extractors may hold templated queries into
one whose queries are all literal, using the parameters of a single ranking
request.

Example:
    resolver = RankingConfigResolver(TemplateEngine())
    resolved = resolver.apply(config, {"query": "running shoes"})
"""

import logging
from collections.abc import Mapping
from typing import Any

from learnrank.config.schema import DEFAULT_TEMPLATE_LANG
from learnrank.core.pipeline.template_engine import (
    STRICT_TEMPLATE_OPTIONS,
    TEMPLATE_OPEN_DELIMITER,
    RenderStatus,
    TemplateEngine,
)
from learnrank.core.query import QueryProvider
from learnrank.framework.errors import QueryParseError, TemplateRenderError
from learnrank.ltr.extractors import ExtractorKind, FeatureExtractor, QueryExtractor
from learnrank.ltr.inference_config import LearningToRankConfig

logger = logging.getLogger(__name__)


class RankingConfigResolver:
    """Applies request parameters to the query templates of a ranking config.

    Stateless apart from the engine's compile cache; ``apply`` is safe to call
    concurrently.

    Per query extractor:
    - no ``{{`` in the serialized query: returned as is
    - rendered successfully: query replaced by the parsed rendering
    - a parameter is missing: query replaced by ``match_none``
    - anything else: TemplateRenderError for the whole call
    """

    def __init__(self, engine: TemplateEngine, lang: str = DEFAULT_TEMPLATE_LANG) -> None:
        self.engine = engine
        self.lang = lang

    def apply(
        self, config: LearningToRankConfig, params: Mapping[str, Any]
    ) -> LearningToRankConfig:
        """Apply template params to a ranking config.

        Args:
            config: Stored ranking config (not modified)
            params: Request params; override ``config.default_params``

        Returns:
            A new config with templates applied, or ``config`` itself when
            templating is unavailable

        Raises:
            TemplateRenderError: If a template is malformed or renders to
                something that is not a valid query
        """
        if not self.engine.supports_language(self.lang):
            logger.debug("Template language [%s] unavailable, config left untemplated", self.lang)
            return config

        effective_params = {**config.default_params, **params}
        extractors = [self._apply_extractor(e, effective_params) for e in config.feature_extractors]
        return config.with_feature_extractors(extractors)

    def degraded_features(
        self, original: LearningToRankConfig, resolved: LearningToRankConfig
    ) -> list[str]:
        """Names of features that were templated and fell back to match_none."""
        degraded = []
        for before, after in zip(original.feature_extractors, resolved.feature_extractors):
            if before is after or after.kind is not ExtractorKind.QUERY:
                continue
            if after.query.is_match_none and not before.query.is_match_none:
                degraded.append(after.feature_name)
        return degraded

    def _apply_extractor(
        self, extractor: FeatureExtractor, params: Mapping[str, Any]
    ) -> FeatureExtractor:
        if extractor.kind is not ExtractorKind.QUERY:
            return extractor
        return self._apply_query_extractor(extractor, params)

    def _apply_query_extractor(
        self, extractor: QueryExtractor, params: Mapping[str, Any]
    ) -> QueryExtractor:
        template_source = extractor.query.to_json()

        if TEMPLATE_OPEN_DELIMITER not in template_source:
            return extractor

        try:
            template = self.engine.compile(template_source, self.lang, STRICT_TEMPLATE_OPTIONS)
        except TemplateRenderError as e:
            msg = f"Failed to compile query template of feature [{extractor.feature_name}]"
            raise TemplateRenderError(
                msg, template=template_source, feature_name=extractor.feature_name, cause=e
            ) from e

        result = template.render(params)

        if result.status is RenderStatus.MISSING_PARAMETER:
            logger.debug(
                "Missing template parameter [%s] for feature [%s], using match_none",
                result.missing_parameter,
                extractor.feature_name,
                extra={
                    "feature_name": extractor.feature_name,
                    "missing_parameter": result.missing_parameter,
                },
            )
            return extractor.with_query(QueryProvider.match_none())

        if result.status is RenderStatus.ERROR:
            msg = f"Failed to render query template of feature [{extractor.feature_name}]"
            raise TemplateRenderError(
                msg,
                template=template_source,
                feature_name=extractor.feature_name,
                cause=result.error,
            ) from result.error

        try:
            query = QueryProvider.from_parsed_text(result.text)
        except QueryParseError as e:
            msg = (
                f"Rendered query of feature [{extractor.feature_name}] is not a valid query: "
                f"{e.message}"
            )
            raise TemplateRenderError(
                msg, template=template_source, feature_name=extractor.feature_name, cause=e
            ) from e

        return extractor.with_query(query)
