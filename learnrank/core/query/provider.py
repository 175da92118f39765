"""Immutable query documents.

A query document is a JSON object with exactly one top-level clause whose
body is itself an object, for example ``{"match": {"title": "shoes"}}``.
``QueryProvider`` owns one such document and never hands out a reference to
it, so a provider can be shared freely between ranking configs.
"""

import copy
import json
from collections.abc import Mapping
from typing import Any

from learnrank.framework.errors import QueryParseError

MATCH_NONE_CLAUSE = "match_none"


def serialize_query(query: Mapping[str, Any]) -> str:
    """Serialize a query document to JSON text.

    Key order is preserved and the default separators are used, so text
    produced here never contains the template delimiter unless a value does.
    """
    return json.dumps(query, ensure_ascii=False)


def parse_query(text: str) -> dict[str, Any]:
    """Parse JSON text into a validated query document.

    Raises:
        QueryParseError: If the text is not JSON or not a single-clause query
    """
    try:
        document = json.loads(text)
    except (TypeError, ValueError) as e:
        msg = f"Query is not valid JSON: {e}"
        raise QueryParseError(msg, source=text if isinstance(text, str) else None) from e

    validate_query(document, source=text)
    return document


def validate_query(document: Any, source: str | None = None) -> None:
    """Check that ``document`` has the shape of a query.

    Raises:
        QueryParseError: If it does not
    """
    if not isinstance(document, Mapping):
        msg = f"Query must be a JSON object, got {type(document).__name__}"
        raise QueryParseError(msg, source=source)
    if len(document) != 1:
        msg = f"Query must have exactly one top-level clause, got {len(document)}"
        raise QueryParseError(msg, source=source)

    clause, body = next(iter(document.items()))
    if not isinstance(clause, str) or not clause:
        msg = "Query clause name must be a non-empty string"
        raise QueryParseError(msg, source=source)
    if not isinstance(body, Mapping):
        msg = f"Body of query clause [{clause}] must be an object"
        raise QueryParseError(msg, source=source)

    try:
        serialize_query(dict(document))
    except (TypeError, ValueError) as e:
        msg = f"Query is not serializable to JSON: {e}"
        raise QueryParseError(msg, source=source) from e


class QueryProvider:
    """Immutable wrapper around a query document."""

    __slots__ = ("_query",)

    def __init__(self, query: Mapping[str, Any]) -> None:
        validate_query(query)
        self._query = copy.deepcopy(dict(query))

    @classmethod
    def from_parsed_text(cls, text: str) -> "QueryProvider":
        """Build a provider from JSON text.

        Raises:
            QueryParseError: If the text is not a valid query
        """
        return cls(parse_query(text))

    @classmethod
    def from_literal_query(cls, query: Mapping[str, Any]) -> "QueryProvider":
        """Build a provider from an already structured query."""
        return cls(query)

    @classmethod
    def match_none(cls) -> "QueryProvider":
        """The canonical query matching zero documents."""
        return cls({MATCH_NONE_CLAUSE: {}})

    @property
    def query(self) -> dict[str, Any]:
        """A copy of the wrapped document."""
        return copy.deepcopy(self._query)

    @property
    def clause(self) -> str:
        """Name of the top-level query clause."""
        return next(iter(self._query))

    @property
    def is_match_none(self) -> bool:
        return self._query == {MATCH_NONE_CLAUSE: {}}

    def to_json(self) -> str:
        return serialize_query(self._query)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, QueryProvider):
            return NotImplemented
        return self._query == other._query

    def __hash__(self) -> int:
        return hash(json.dumps(self._query, sort_keys=True, ensure_ascii=False))

    def __repr__(self) -> str:
        return f"QueryProvider({self.to_json()})"
