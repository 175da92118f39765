"""Stored trained-model record schema using Pydantic v2.

Records are plain YAML or JSON documents. Polymorphic sections use a single
named key per entry, the key being the variant name:

    model_id: product-ranker
    inference_config:
      learning_to_rank:
        default_params: {boost: 1}
        feature_extractors:
          - query_extractor:
              feature_name: title_bm25
              query: {match: {title: "{{ query }}"}}
          - field_value_extractor:
              feature_name: popularity
              field: popularity

Example:
    from learnrank.ltr.records import parse_trained_model

    model = parse_trained_model(yaml.safe_load(text))
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from learnrank.core.query import QueryProvider
from learnrank.framework.errors import InvalidConfigError, QueryParseError
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


class QueryExtractorRecord(BaseModel):
    model_config = ConfigDict(extra="forbid")

    feature_name: str = Field(..., min_length=1, description="Unique feature name")
    query: dict[str, Any] = Field(..., description="Query document, may be templated")
    default_score: float = Field(0.0, description="Score for unmatched documents")


class FieldValueExtractorRecord(BaseModel):
    model_config = ConfigDict(extra="forbid")

    feature_name: str = Field(..., min_length=1, description="Unique feature name")
    field: str = Field(..., min_length=1, description="Numeric document field")
    missing: float = Field(0.0, description="Value when the field is absent")


class FeatureExtractorRecord(BaseModel):
    """One extractor entry; exactly one variant key is set."""

    model_config = ConfigDict(extra="forbid")

    query_extractor: QueryExtractorRecord | None = None
    field_value_extractor: FieldValueExtractorRecord | None = None

    @model_validator(mode="after")
    def _exactly_one_variant(self) -> "FeatureExtractorRecord":
        present = [k for k in ExtractorKind if getattr(self, k.value) is not None]
        if len(present) != 1:
            msg = (
                "Each feature extractor must define exactly one of "
                f"{[k.value for k in ExtractorKind]}"
            )
            raise ValueError(msg)
        return self


class LearningToRankRecord(BaseModel):
    model_config = ConfigDict(extra="forbid")

    feature_extractors: list[FeatureExtractorRecord] = Field(default_factory=list)
    default_params: dict[str, Any] = Field(default_factory=dict)
    num_top_feature_importance_values: int = Field(0, ge=0)


class RegressionRecord(BaseModel):
    model_config = ConfigDict(extra="forbid")

    results_field: str = "predicted_value"
    num_top_feature_importance_values: int = Field(0, ge=0)


class ClassificationRecord(BaseModel):
    model_config = ConfigDict(extra="forbid")

    results_field: str = "predicted_value"
    num_top_classes: int = Field(0, ge=0)


class InferenceConfigRecord(BaseModel):
    """Inference config entry; exactly one kind key is set."""

    model_config = ConfigDict(extra="forbid")

    learning_to_rank: LearningToRankRecord | None = None
    regression: RegressionRecord | None = None
    classification: ClassificationRecord | None = None

    @model_validator(mode="after")
    def _exactly_one_kind(self) -> "InferenceConfigRecord":
        present = [k for k in InferenceConfigKind if getattr(self, k.value) is not None]
        if len(present) != 1:
            msg = (
                "inference_config must define exactly one of "
                f"{[k.value for k in InferenceConfigKind]}"
            )
            raise ValueError(msg)
        return self


class TrainedModelRecord(BaseModel):
    model_config = ConfigDict(extra="forbid", protected_namespaces=())

    model_id: str = Field(..., min_length=1)
    inference_config: InferenceConfigRecord | None = None
    description: str | None = None
    tags: list[str] = Field(default_factory=list)
    create_time: datetime | None = None


def _to_extractor(record: FeatureExtractorRecord) -> FeatureExtractor:
    if record.query_extractor is not None:
        entry = record.query_extractor
        try:
            query = QueryProvider.from_literal_query(entry.query)
        except QueryParseError as e:
            msg = f"Invalid query for feature [{entry.feature_name}]: {e.message}"
            raise InvalidConfigError(msg, field="query") from e
        return QueryExtractor(
            feature_name=entry.feature_name, query=query, default_score=entry.default_score
        )

    entry = record.field_value_extractor
    return FieldValueExtractor(feature_name=entry.feature_name, field=entry.field, missing=entry.missing)


def _to_inference_config(record: InferenceConfigRecord) -> InferenceConfig:
    if record.learning_to_rank is not None:
        ltr = record.learning_to_rank
        return LearningToRankConfig(
            feature_extractors=tuple(_to_extractor(e) for e in ltr.feature_extractors),
            default_params=ltr.default_params,
            num_top_feature_importance_values=ltr.num_top_feature_importance_values,
        )
    if record.regression is not None:
        return RegressionConfig(
            results_field=record.regression.results_field,
            num_top_feature_importance_values=record.regression.num_top_feature_importance_values,
        )
    return ClassificationConfig(
        results_field=record.classification.results_field,
        num_top_classes=record.classification.num_top_classes,
    )


def parse_inference_config(data: dict[str, Any]) -> InferenceConfig:
    """Parse an inference config section.

    Raises:
        InvalidConfigError: If the section does not match the schema
    """
    try:
        record = InferenceConfigRecord.model_validate(data)
    except ValidationError as e:
        msg = f"Invalid inference config: {e}"
        raise InvalidConfigError(msg, field="inference_config") from e
    return _to_inference_config(record)


def parse_trained_model(data: Any) -> TrainedModelConfig:
    """Parse a stored trained-model record.

    Raises:
        InvalidConfigError: If the record does not match the schema
    """
    try:
        record = TrainedModelRecord.model_validate(data)
    except ValidationError as e:
        msg = f"Invalid trained model record: {e}"
        raise InvalidConfigError(msg) from e

    return TrainedModelConfig(
        model_id=record.model_id,
        inference_config=(
            _to_inference_config(record.inference_config) if record.inference_config else None
        ),
        description=record.description,
        tags=tuple(record.tags),
        create_time=record.create_time,
    )
