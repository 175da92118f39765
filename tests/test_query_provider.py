"""Tests for query documents."""

from datetime import date

import pytest

from learnrank.core.query import QueryProvider, parse_query, serialize_query
from learnrank.framework.errors import ErrorCode, QueryParseError


class TestQueryProvider:
    """Construction, serialization and immutability."""

    def test_from_parsed_text(self) -> None:
        provider = QueryProvider.from_parsed_text('{"match": {"title": "shoes"}}')

        assert provider.query == {"match": {"title": "shoes"}}
        assert provider.clause == "match"

    def test_to_json_preserves_key_order_and_placeholders(self) -> None:
        provider = QueryProvider.from_literal_query(
            {"bool": {"must": [{"match": {"title": "{{ q }}"}}], "boost": 2}}
        )

        assert provider.to_json() == (
            '{"bool": {"must": [{"match": {"title": "{{ q }}"}}], "boost": 2}}'
        )

    def test_wrapped_document_is_not_shared(self) -> None:
        source = {"term": {"status": "active"}}
        provider = QueryProvider.from_literal_query(source)

        source["term"]["status"] = "deleted"
        provider.query["term"]["status"] = "deleted"

        assert provider.query == {"term": {"status": "active"}}

    def test_match_none(self) -> None:
        provider = QueryProvider.match_none()

        assert provider.query == {"match_none": {}}
        assert provider.is_match_none
        assert provider == QueryProvider.from_parsed_text('{"match_none": {}}')
        assert not QueryProvider.from_literal_query({"match_all": {}}).is_match_none

    def test_equality_and_hash(self) -> None:
        a = QueryProvider.from_literal_query({"term": {"status": "active"}})
        b = QueryProvider.from_parsed_text('{"term": {"status": "active"}}')

        assert a == b
        assert hash(a) == hash(b)
        assert a != QueryProvider.match_none()

    def test_key_order_does_not_affect_equality_or_hash(self) -> None:
        a = QueryProvider.from_literal_query({"bool": {"must": [], "filter": []}})
        b = QueryProvider.from_literal_query({"bool": {"filter": [], "must": []}})

        assert a == b
        assert hash(a) == hash(b)
        assert len({a, b}) == 1


class TestParsing:
    """Rejected query shapes."""

    @pytest.mark.parametrize(
        "text",
        [
            "not json",
            "[]",
            '"match"',
            "{}",
            '{"match": {}, "term": {}}',
            '{"match": "shoes"}',
            '{"": {}}',
        ],
    )
    def test_invalid_queries_rejected(self, text: str) -> None:
        with pytest.raises(QueryParseError) as exc_info:
            parse_query(text)

        assert exc_info.value.code is ErrorCode.INVALID_QUERY

    def test_literal_query_validated(self) -> None:
        with pytest.raises(QueryParseError):
            QueryProvider.from_literal_query({"match": [1, 2]})

    def test_values_must_serialize_to_json(self) -> None:
        with pytest.raises(QueryParseError, match="not serializable"):
            QueryProvider.from_literal_query({"range": {"published": {"gte": date(2024, 1, 1)}}})

    def test_serialize_round_trip(self) -> None:
        query = {"match": {"title": "chaussures d'été"}}

        assert parse_query(serialize_query(query)) == query
