"""Resort information: CSV sources, filtering, token-budget chunking."""

from resort.catalog import get_schema, list_sources
from resort.chunker import DEFAULT_TOKEN_BUDGET, chunk_records, estimate_tokens
from resort.errors import InvalidArgument, NotFound, ResortInfoError
from resort.filters import FilterPredicate, filter_records, matches
from resort.query import QueryResult, filter_information, get_chunk

__all__ = [
    "DEFAULT_TOKEN_BUDGET",
    "FilterPredicate",
    "InvalidArgument",
    "NotFound",
    "QueryResult",
    "ResortInfoError",
    "chunk_records",
    "estimate_tokens",
    "filter_information",
    "filter_records",
    "get_chunk",
    "get_schema",
    "list_sources",
    "matches",
]
