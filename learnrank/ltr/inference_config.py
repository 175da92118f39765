"""Inference configurations and trained model records.

A trained model carries exactly one inference config. The config is a tagged
union on ``InferenceConfigKind``; code that needs the ranking variant narrows
with ``as_learning_to_rank()`` rather than type inspection.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any

from learnrank.framework.errors import InvalidConfigError
from learnrank.ltr.extractors import FeatureExtractor


class InferenceConfigKind(str, Enum):
    """Kinds of inference a trained model can be configured for."""

    LEARNING_TO_RANK = "learning_to_rank"
    REGRESSION = "regression"
    CLASSIFICATION = "classification"


@dataclass(frozen=True)
class InferenceConfig(ABC):
    """Base class for inference configurations."""

    @property
    @abstractmethod
    def kind(self) -> InferenceConfigKind:
        """Variant tag."""

    @property
    def name(self) -> str:
        return self.kind.value

    def as_learning_to_rank(self) -> "LearningToRankConfig | None":
        """Narrow to a ranking config, or None for any other kind."""
        return None

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """Serialize to the stored record format."""


@dataclass(frozen=True)
class RegressionConfig(InferenceConfig):
    results_field: str = "predicted_value"
    num_top_feature_importance_values: int = 0

    @property
    def kind(self) -> InferenceConfigKind:
        return InferenceConfigKind.REGRESSION

    def to_dict(self) -> dict[str, Any]:
        return {
            self.name: {
                "results_field": self.results_field,
                "num_top_feature_importance_values": self.num_top_feature_importance_values,
            }
        }


@dataclass(frozen=True)
class ClassificationConfig(InferenceConfig):
    results_field: str = "predicted_value"
    num_top_classes: int = 0

    @property
    def kind(self) -> InferenceConfigKind:
        return InferenceConfigKind.CLASSIFICATION

    def to_dict(self) -> dict[str, Any]:
        return {
            self.name: {
                "results_field": self.results_field,
                "num_top_classes": self.num_top_classes,
            }
        }


@dataclass(frozen=True)
class LearningToRankConfig(InferenceConfig):
    """Ranking configuration of a learning-to-rank model.

    Attributes:
        feature_extractors: Ordered extractors; feature names are unique
        default_params: Template parameter defaults, overridden per request
        num_top_feature_importance_values: Feature importance values to report
    """

    feature_extractors: tuple[FeatureExtractor, ...] = ()
    default_params: Mapping[str, Any] = field(default_factory=dict)
    num_top_feature_importance_values: int = 0

    def __post_init__(self) -> None:
        # Freeze the containers handed in by the caller
        object.__setattr__(self, "feature_extractors", tuple(self.feature_extractors))
        object.__setattr__(self, "default_params", MappingProxyType(dict(self.default_params)))

        if self.num_top_feature_importance_values < 0:
            msg = (
                "[num_top_feature_importance_values] must be non-negative, got "
                f"{self.num_top_feature_importance_values}"
            )
            raise InvalidConfigError(msg, field="num_top_feature_importance_values")

        seen: set[str] = set()
        duplicates: list[str] = []
        for extractor in self.feature_extractors:
            if not extractor.feature_name:
                msg = "[feature_name] must not be empty"
                raise InvalidConfigError(msg, field="feature_extractors")
            if extractor.feature_name in seen:
                duplicates.append(extractor.feature_name)
            seen.add(extractor.feature_name)
        if duplicates:
            msg = f"Feature names must be unique, duplicated: {sorted(set(duplicates))}"
            raise InvalidConfigError(msg, field="feature_extractors")

    @property
    def kind(self) -> InferenceConfigKind:
        return InferenceConfigKind.LEARNING_TO_RANK

    @property
    def feature_names(self) -> list[str]:
        return [extractor.feature_name for extractor in self.feature_extractors]

    def as_learning_to_rank(self) -> "LearningToRankConfig":
        return self

    def with_feature_extractors(
        self, feature_extractors: Sequence[FeatureExtractor]
    ) -> "LearningToRankConfig":
        """Copy of this config with the extractor sequence replaced."""
        return replace(self, feature_extractors=tuple(feature_extractors))

    def to_dict(self) -> dict[str, Any]:
        return {
            self.name: {
                "num_top_feature_importance_values": self.num_top_feature_importance_values,
                "default_params": dict(self.default_params),
                "feature_extractors": [e.to_dict() for e in self.feature_extractors],
            }
        }


@dataclass(frozen=True)
class TrainedModelConfig:
    """Stored record of a trained model."""

    model_id: str
    inference_config: InferenceConfig | None = None
    description: str | None = None
    tags: tuple[str, ...] = ()
    create_time: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "model_id": self.model_id,
            "inference_config": self.inference_config.to_dict() if self.inference_config else None,
        }
        if self.description:
            result["description"] = self.description
        if self.tags:
            result["tags"] = list(self.tags)
        if self.create_time:
            result["create_time"] = self.create_time.isoformat()
        return result
