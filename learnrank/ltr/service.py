"""Learning-to-rank service.

Entry point for ranking requests: fetches the stored model, checks that it is
a ranking model with valid extractors, and applies the request parameters to
its query templates.

Example:
    service = LearningToRankService(
        model_loader=loader,
        model_provider=FileTrainedModelProvider("./models"),
        resolver=RankingConfigResolver(TemplateEngine()),
    )
    config = await service.load_learning_to_rank_config("product-ranker", {"query": "shoes"})
"""

from collections.abc import Mapping
from typing import Any

from learnrank.config.schema import CoreSettings
from learnrank.core.pipeline.template_engine import TemplateEngine
from learnrank.framework.errors import (
    IncorrectConfigTypeError,
    InvalidConfigError,
    LearnRankError,
)
from learnrank.ltr.inference_config import InferenceConfigKind, LearningToRankConfig
from learnrank.ltr.resolver import RankingConfigResolver
from learnrank.observability.logging import StructuredLogger
from learnrank.providers.model_loading import ModelLoader
from learnrank.providers.model_store import FileTrainedModelProvider, TrainedModelProvider


class LearningToRankService:
    """Loads ranking configs and scoring models for learning-to-rank requests.

    The service neither retries nor caches; both belong to its collaborators.
    Every failure is raised from the awaited call.
    """

    def __init__(
        self,
        model_loader: ModelLoader | None,
        model_provider: TrainedModelProvider,
        resolver: RankingConfigResolver,
    ) -> None:
        self.model_loader = model_loader
        self.model_provider = model_provider
        self.resolver = resolver
        self._events = StructuredLogger("ltr.service")

    @classmethod
    def from_settings(
        cls,
        settings: CoreSettings,
        model_loader: ModelLoader | None = None,
        model_provider: TrainedModelProvider | None = None,
    ) -> "LearningToRankService":
        """Build a service whose engine and storage follow ``settings``."""
        engine = TemplateEngine.from_settings(settings.templating)
        return cls(
            model_loader=model_loader,
            model_provider=model_provider or FileTrainedModelProvider(settings.storage.models_dir),
            resolver=RankingConfigResolver(engine, lang=settings.templating.lang),
        )

    async def load_local_model(self, model_id: str) -> Any:
        """Load the scoring model to be used for learning to rank.

        Args:
            model_id: The model id to be loaded

        Raises:
            InvalidConfigError: If the service has no model loader
        """
        if self.model_loader is None:
            msg = "No model loader configured"
            raise InvalidConfigError(msg, field="model_loader")
        return await self.model_loader.get_model_for_learning_to_rank(model_id)

    async def load_learning_to_rank_config(
        self, model_id: str, params: Mapping[str, Any] | None = None
    ) -> LearningToRankConfig:
        """Load the ranking config of a model and apply template params.

        Args:
            model_id: Id of the model
            params: Template params for this request

        Returns:
            Ranking config with templates applied

        Raises:
            IncorrectConfigTypeError: If the model is not a ranking model
            ExtractorValidationError: If an extractor is invalid
            TemplateRenderError: If a query template cannot be applied
            StorageError: Propagated from the model provider
        """
        params = params or {}
        model = await self.model_provider.get_trained_model(model_id, include_definition=True)

        try:
            config = self.validate_config(model_id, model.inference_config)
            resolved = self.resolver.apply(config, params)
        except LearnRankError as e:
            self._events.log_error(e, {"model_id": model_id})
            raise

        self._events.log_resolution(
            model_id,
            feature_count=len(resolved.feature_extractors),
            degraded_features=self.resolver.degraded_features(config, resolved),
        )
        return resolved

    async def load_validated_config(self, model_id: str) -> LearningToRankConfig:
        """Load and validate the ranking config of a model without templating."""
        model = await self.model_provider.get_trained_model(model_id, include_definition=True)
        return self.validate_config(model_id, model.inference_config)

    @staticmethod
    def validate_config(model_id: str, inference_config: Any) -> LearningToRankConfig:
        """Narrow ``inference_config`` to a ranking config and validate its extractors."""
        config = inference_config.as_learning_to_rank() if inference_config else None
        if config is None:
            actual = inference_config.name if inference_config else "null"
            raise IncorrectConfigTypeError(
                actual=actual,
                expected=InferenceConfigKind.LEARNING_TO_RANK.value,
                model_id=model_id,
            )

        for extractor in config.feature_extractors:
            extractor.validate()
        return config
