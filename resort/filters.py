"""Conjunctive equality filtering of CSV records."""

from __future__ import annotations

from typing import List, NamedTuple, Optional, Sequence

from resort.chunker import Record


class FilterPredicate(NamedTuple):
    column_name: str
    value: str


def matches(record: Record, filters: Optional[Sequence[FilterPredicate]]) -> bool:
    # A missing column compares unequal, so it never matches.
    return all(record.get(f.column_name) == f.value for f in (filters or []))


def filter_records(
    records: Sequence[Record], filters: Optional[Sequence[FilterPredicate]]
) -> List[Record]:
    if not filters:
        return list(records)
    return [record for record in records if matches(record, filters)]
