"""Filter-then-chunk pipeline behind the two pagination endpoints."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from resort.chunker import (
    DEFAULT_TOKEN_BUDGET,
    Record,
    chunk_records,
    estimate_tokens,
)
from resort.csv_source import load_records, source_path
from resort.errors import InvalidArgument
from resort.filters import FilterPredicate, filter_records


logger = logging.getLogger(__name__)


@dataclass
class QueryResult:
    data: List[Record]
    total_count: int
    chunked: bool
    estimated_token_count: int
    total_chunks: Optional[int] = None
    current_chunk: Optional[int] = None

    def to_payload(self) -> Dict[str, Any]:
        metadata: Dict[str, Any] = {
            "total_count": self.total_count,
            "chunked": self.chunked,
        }
        if self.chunked:
            metadata["total_chunks"] = self.total_chunks
            metadata["current_chunk"] = self.current_chunk
        metadata["estimated_token_count"] = self.estimated_token_count
        return {"data": self.data, "metadata": metadata}


def _require(resort: Optional[str], source: Optional[str]) -> None:
    if not resort or not source:
        raise InvalidArgument(
            "Missing required fields: primary_name and source are required"
        )


def _load_filtered(
    data_root: Path,
    resort: str,
    source: str,
    filters: Optional[Sequence[FilterPredicate]],
) -> List[Record]:
    path = source_path(data_root, resort, source)
    records = load_records(path)
    filtered = filter_records(records, filters)
    logger.info(
        "Loaded %s rows from %s, %s after %s filter(s)",
        len(records),
        path.name,
        len(filtered),
        len(filters or []),
    )
    return filtered


def filter_information(
    data_root: Path,
    resort: Optional[str],
    source: Optional[str],
    filters: Optional[Sequence[FilterPredicate]] = None,
    budget: int = DEFAULT_TOKEN_BUDGET,
) -> QueryResult:
    """Return the filtered rows, or only their first chunk when they exceed the budget."""
    _require(resort, source)
    filtered = _load_filtered(data_root, resort, source, filters)

    token_count = estimate_tokens(filtered)
    if token_count <= budget:
        return QueryResult(
            data=filtered,
            total_count=len(filtered),
            chunked=False,
            estimated_token_count=token_count,
        )

    chunks = chunk_records(filtered, budget)
    logger.info(
        "Result of ~%s tokens split into %s chunks (budget %s)",
        token_count,
        len(chunks),
        budget,
    )
    first = chunks[0]
    return QueryResult(
        data=first,
        total_count=len(filtered),
        chunked=True,
        estimated_token_count=estimate_tokens(first),
        total_chunks=len(chunks),
        current_chunk=1,
    )


def get_chunk(
    data_root: Path,
    resort: Optional[str],
    source: Optional[str],
    filters: Optional[Sequence[FilterPredicate]] = None,
    chunk_number: Optional[int] = None,
    budget: int = DEFAULT_TOKEN_BUDGET,
) -> QueryResult:
    """Return the 1-based ``chunk_number`` chunk of the filtered rows.

    Chunking always happens here, even when the filtered rows would fit in a
    single response, so chunk 1 may differ from what ``filter_information``
    returned for a small result.
    """
    _require(resort, source)
    if chunk_number is None or isinstance(chunk_number, bool) or not isinstance(chunk_number, int):
        raise InvalidArgument("Missing required fields: chunk_number is required")

    filtered = _load_filtered(data_root, resort, source, filters)
    chunks = chunk_records(filtered, budget)

    if chunk_number < 1 or chunk_number > len(chunks):
        raise InvalidArgument(
            f"Invalid chunk number {chunk_number}: {len(chunks)} chunk(s) available"
        )

    chunk = chunks[chunk_number - 1]
    return QueryResult(
        data=chunk,
        total_count=len(filtered),
        chunked=True,
        estimated_token_count=estimate_tokens(chunk),
        total_chunks=len(chunks),
        current_chunk=chunk_number,
    )
