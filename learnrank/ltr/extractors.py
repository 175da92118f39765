"""Feature extractors for learning-to-rank models.

Each extractor computes one named feature per document. Two variants exist:

- ``QueryExtractor``: the feature is the score of a query; its query may be a
  template rendered per request.
- ``FieldValueExtractor``: the feature is a numeric document field.

Extractors are frozen; templating produces new instances.
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any

from learnrank.core.query import QueryProvider
from learnrank.framework.errors import ExtractorValidationError


class ExtractorKind(str, Enum):
    """Variant tag of a feature extractor (also its stored record key)."""

    QUERY = "query_extractor"
    FIELD_VALUE = "field_value_extractor"


@dataclass(frozen=True)
class FeatureExtractor(ABC):
    """Base class for all feature extractors."""

    feature_name: str

    @property
    @abstractmethod
    def kind(self) -> ExtractorKind:
        """Variant tag."""

    @abstractmethod
    def validate(self) -> None:
        """Check the extractor is usable.

        Raises:
            ExtractorValidationError: If it is not
        """

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """Serialize to the stored record format."""

    def _validate_feature_name(self) -> None:
        if not isinstance(self.feature_name, str) or not self.feature_name.strip():
            msg = "[feature_name] must not be empty"
            raise ExtractorValidationError(msg, feature_name=None)


@dataclass(frozen=True)
class QueryExtractor(FeatureExtractor):
    """Feature computed from the score of a query.

    Attributes:
        feature_name: Unique feature name within the ranking config
        query: Query document, possibly containing template placeholders
        default_score: Score used for documents the query does not match
    """

    query: QueryProvider
    default_score: float = 0.0

    @property
    def kind(self) -> ExtractorKind:
        return ExtractorKind.QUERY

    def validate(self) -> None:
        self._validate_feature_name()
        if not isinstance(self.query, QueryProvider):
            msg = f"[query] of feature [{self.feature_name}] must be a query document"
            raise ExtractorValidationError(msg, feature_name=self.feature_name)
        if not math.isfinite(self.default_score) or self.default_score < 0:
            msg = (
                f"[default_score] of feature [{self.feature_name}] must be a non-negative "
                f"number, got {self.default_score}"
            )
            raise ExtractorValidationError(msg, feature_name=self.feature_name)

    def with_query(self, query: QueryProvider) -> "QueryExtractor":
        """Copy of this extractor with ``query`` substituted."""
        return QueryExtractor(
            feature_name=self.feature_name, query=query, default_score=self.default_score
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            self.kind.value: {
                "feature_name": self.feature_name,
                "query": self.query.query,
                "default_score": self.default_score,
            }
        }


@dataclass(frozen=True)
class FieldValueExtractor(FeatureExtractor):
    """Feature read from a numeric document field.

    Attributes:
        feature_name: Unique feature name within the ranking config
        field: Document field holding the value
        missing: Value used when the field is absent
    """

    field: str
    missing: float = 0.0

    @property
    def kind(self) -> ExtractorKind:
        return ExtractorKind.FIELD_VALUE

    def validate(self) -> None:
        self._validate_feature_name()
        if not self.field or not self.field.strip():
            msg = f"[field] of feature [{self.feature_name}] must not be empty"
            raise ExtractorValidationError(msg, feature_name=self.feature_name)
        if not math.isfinite(self.missing):
            msg = f"[missing] of feature [{self.feature_name}] must be a finite number"
            raise ExtractorValidationError(msg, feature_name=self.feature_name)

    def to_dict(self) -> dict[str, Any]:
        return {
            self.kind.value: {
                "feature_name": self.feature_name,
                "field": self.field,
                "missing": self.missing,
            }
        }
