"""Query documents and their JSON codec."""

from learnrank.core.query.provider import (
    MATCH_NONE_CLAUSE,
    QueryProvider,
    parse_query,
    serialize_query,
    validate_query,
)

__all__ = [
    "MATCH_NONE_CLAUSE",
    "QueryProvider",
    "parse_query",
    "serialize_query",
    "validate_query",
]
