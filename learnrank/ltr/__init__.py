"""Learning-to-rank configs and their resolution.

The ranking service lives in ``learnrank.ltr.service``.
"""

from learnrank.ltr.extractors import (
    ExtractorKind,
    FeatureExtractor,
    FieldValueExtractor,
    QueryExtractor,
)
from learnrank.ltr.inference_config import (
    ClassificationConfig,
    InferenceConfig,
    InferenceConfigKind,
    LearningToRankConfig,
    RegressionConfig,
    TrainedModelConfig,
)
from learnrank.ltr.records import parse_inference_config, parse_trained_model
from learnrank.ltr.resolver import RankingConfigResolver

__all__ = [
    "ClassificationConfig",
    "ExtractorKind",
    "FeatureExtractor",
    "FieldValueExtractor",
    "InferenceConfig",
    "InferenceConfigKind",
    "LearningToRankConfig",
    "QueryExtractor",
    "RankingConfigResolver",
    "RegressionConfig",
    "TrainedModelConfig",
    "parse_inference_config",
    "parse_trained_model",
]
