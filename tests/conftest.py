"""Shared fixtures for learnrank tests."""

import logging
from pathlib import Path
from typing import Any

import pytest
import yaml

from learnrank.config import loader
from learnrank.core.pipeline import TemplateEngine
from learnrank.core.query import QueryProvider
from learnrank.ltr import LearningToRankConfig, QueryExtractor, RankingConfigResolver


@pytest.fixture(autouse=True)
def _reset_config_cache() -> Any:
    """Each test starts from the on-disk defaults."""
    loader._CONFIG_CACHE = None
    yield
    loader._CONFIG_CACHE = None


@pytest.fixture(autouse=True)
def _reset_logging() -> Any:
    """Drop handlers the CLI attaches so they never outlive a captured stream."""
    yield
    root = logging.getLogger("learnrank")
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.setLevel(logging.NOTSET)


@pytest.fixture
def engine() -> TemplateEngine:
    return TemplateEngine()


@pytest.fixture
def resolver(engine: TemplateEngine) -> RankingConfigResolver:
    return RankingConfigResolver(engine)


def query_extractor(name: str, query: dict[str, Any], default_score: float = 0.0) -> QueryExtractor:
    return QueryExtractor(
        feature_name=name,
        query=QueryProvider.from_literal_query(query),
        default_score=default_score,
    )


def ranking_config(*extractors: Any, default_params: dict[str, Any] | None = None) -> Any:
    return LearningToRankConfig(
        feature_extractors=tuple(extractors), default_params=default_params or {}
    )


@pytest.fixture
def product_ranker_record() -> dict[str, Any]:
    """Stored record of a ranking model with templated and literal features."""
    return {
        "model_id": "product-ranker",
        "description": "Ranks products for storefront search",
        "tags": ["storefront"],
        "inference_config": {
            "learning_to_rank": {
                "default_params": {"brand": "acme"},
                "feature_extractors": [
                    {
                        "query_extractor": {
                            "feature_name": "title_bm25",
                            "query": {"match": {"title": "{{ query }}"}},
                        }
                    },
                    {
                        "query_extractor": {
                            "feature_name": "brand_match",
                            "query": {"term": {"brand": "{{ brand }}"}},
                            "default_score": 0.5,
                        }
                    },
                    {
                        "query_extractor": {
                            "feature_name": "in_stock",
                            "query": {"term": {"status": "active"}},
                        }
                    },
                    {
                        "field_value_extractor": {
                            "feature_name": "popularity",
                            "field": "popularity",
                            "missing": 0,
                        }
                    },
                ],
            }
        },
    }


@pytest.fixture
def models_dir(tmp_path: Path, product_ranker_record: dict[str, Any]) -> Path:
    """Directory holding a ranking model and a regression model."""
    with open(tmp_path / "product-ranker.yaml", "w") as f:
        yaml.safe_dump(product_ranker_record, f, sort_keys=False)

    with open(tmp_path / "price-model.yml", "w") as f:
        yaml.safe_dump(
            {"model_id": "price-model", "inference_config": {"regression": {}}}, f
        )
    return tmp_path
